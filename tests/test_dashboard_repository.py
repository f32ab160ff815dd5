import threading
from datetime import datetime, timezone

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

import learnix.models  # noqa: F401
from learnix.core.context import RequestContext
from learnix.core.exceptions import DatabaseNotConfigured
from learnix.models.base import Base, utcnow
from learnix.models.course import Chapter, Course, CourseStatus, Lesson
from learnix.models.enrollment import Enrollment, EnrollmentStatus
from learnix.models.user import User
from learnix.repositories.dashboard_repository import DashboardRepository, month_bounds
from learnix.services.admin_data import AdminDataService
from tests.stubs import StubApi


def make_session() -> Session:
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    return sessionmaker(bind=engine, autoflush=False, autocommit=False)()


def seed(db: Session) -> None:
    joined = datetime(2024, 2, 10, 9, 30, tzinfo=timezone.utc)
    student = User(external_id="s1", name="S", email="s@example.com", created_at=joined, updated_at=joined)
    mentor = User(
        external_id="m1", name="M", email="m@example.com", role="mentor", created_at=joined, updated_at=joined
    )
    old = User(
        external_id="o1",
        name="O",
        email="o@example.com",
        created_at=datetime(2023, 12, 1, tzinfo=timezone.utc),
        updated_at=datetime(2023, 12, 1, tzinfo=timezone.utc),
    )
    published = Course(slug="go", title="Go", status=CourseStatus.PUBLISHED)
    draft = Course(slug="rust", title="Rust", status=CourseStatus.DRAFT)
    db.add_all([student, mentor, old, published, draft])
    db.flush()

    live_chapter = Chapter(course_id=published.id, title="Intro", position=1)
    draft_chapter = Chapter(course_id=draft.id, title="Intro", position=1)
    db.add_all([live_chapter, draft_chapter])
    db.flush()
    db.add_all(
        [
            Lesson(chapter_id=live_chapter.id, title="One", position=1),
            Lesson(chapter_id=live_chapter.id, title="Two", position=2),
            Lesson(chapter_id=draft_chapter.id, title="Hidden", position=1),
            Enrollment(user_id=student.id, course_id=published.id, status=EnrollmentStatus.ACTIVE),
            Enrollment(user_id=old.id, course_id=published.id, status=EnrollmentStatus.ACTIVE),
        ]
    )
    db.commit()


@pytest.mark.anyio
async def test_local_dashboard_stats_for_a_month():
    db = make_session()
    seed(db)
    ctx = RequestContext(db=db)

    stats = await AdminDataService(api=StubApi()).get_local_dashboard_stats(ctx, month=2, year=2024)

    assert stats.total_signups == 3
    assert stats.total_customers == 2
    assert stats.total_courses == 1
    assert stats.total_lessons == 2
    assert stats.recent_signups == 2
    assert stats.active_users == 2
    assert len(stats.stats_by_date) == 29
    assert stats.stats_by_date[0].date == "2024-02-01"
    day = next(d for d in stats.stats_by_date if d.date == "2024-02-10")
    # The mentor signed up the same day but only plain users count as signups.
    assert (day.signups, day.enrollments) == (1, 1)
    assert sum(d.signups for d in stats.stats_by_date) == 1


def test_chapters_and_lessons_are_ordered_by_position():
    db = make_session()
    course = Course(slug="go", title="Go")
    db.add(course)
    db.flush()
    db.add_all(
        [
            Chapter(course_id=course.id, title="Second", position=2),
            Chapter(course_id=course.id, title="First", position=1),
        ]
    )
    db.commit()
    db.refresh(course)
    assert [chapter.title for chapter in course.chapters] == ["First", "Second"]


@pytest.mark.anyio
async def test_local_stats_require_a_database():
    with pytest.raises(DatabaseNotConfigured):
        await AdminDataService(api=StubApi()).get_local_dashboard_stats(RequestContext())


def test_month_bounds_are_utc_instants():
    start, end = month_bounds(2, 2024)
    assert start == datetime(2024, 2, 1, tzinfo=timezone.utc)
    assert (end.date().isoformat(), end.tzinfo) == ("2024-02-29", timezone.utc)
    assert utcnow().tzinfo is timezone.utc


class ThreadRecordingRepository(DashboardRepository):
    def __init__(self):
        self.threads = set()

    def count_users(self, db):
        self.threads.add(threading.current_thread())
        return super().count_users(db)


@pytest.mark.anyio
async def test_local_stats_query_off_the_event_loop_thread():
    db = make_session()
    repo = ThreadRecordingRepository()

    await AdminDataService(api=StubApi(), dashboard_repo=repo).get_local_dashboard_stats(
        RequestContext(db=db), month=2, year=2024
    )

    assert repo.threads and threading.main_thread() not in repo.threads
