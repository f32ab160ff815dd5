import threading

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

import learnix.models  # noqa: F401
from learnix.core.context import RequestContext
from learnix.core.exceptions import ContentNotFound, RedirectRequired
from learnix.models.base import Base
from learnix.models.course import Course
from learnix.models.enrollment import Enrollment, EnrollmentStatus
from learnix.models.user import User
from learnix.repositories.enrollment_repository import EnrollmentRepository
from learnix.schemas.user import CurrentUser
from learnix.services.course_data import CourseDataService
from learnix.services.user_data import UserDataService
from tests.stubs import StubApi, ok

SIGNED_IN = RequestContext(token="tok", claims={"sub": "user_ext_1"})


def make_session() -> Session:
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    return sessionmaker(bind=engine, autoflush=False, autocommit=False)()


class FixedResolver:
    def __init__(self, user):
        self.user = user

    async def require_user(self, ctx):
        if self.user is None:
            raise RedirectRequired("/login")
        return self.user


def seed_user_and_course(db: Session) -> tuple[User, Course]:
    user = User(external_id="user_ext_1", name="Ada", email="ada@example.com")
    course = Course(slug="go-basics", title="Go basics")
    db.add_all([user, course])
    db.commit()
    return user, course


def local_service(user: User | None) -> UserDataService:
    current = CurrentUser.model_validate(user) if user else None
    return UserDataService(api=StubApi(), resolver=FixedResolver(current))


@pytest.mark.anyio
@pytest.mark.parametrize(
    "status, expected",
    [
        (EnrollmentStatus.ACTIVE, True),
        (EnrollmentStatus.PENDING, False),
        (EnrollmentStatus.CANCELLED, False),
    ],
)
async def test_only_active_enrollment_counts(status, expected):
    db = make_session()
    user, course = seed_user_and_course(db)
    db.add(Enrollment(user_id=user.id, course_id=course.id, status=status))
    db.commit()

    ctx = RequestContext(token="tok", claims={"sub": "user_ext_1"}, db=db)
    assert await local_service(user).user_is_enrolled(ctx, course.id) is expected


@pytest.mark.anyio
async def test_missing_enrollment_is_not_enrolled():
    db = make_session()
    user, course = seed_user_and_course(db)
    ctx = RequestContext(token="tok", claims={"sub": "user_ext_1"}, db=db)

    service = local_service(user)
    assert await service.user_is_enrolled(ctx, course.id) is False
    assert await service.is_enrolled(ctx, course.id) is False


@pytest.mark.anyio
async def test_local_enrollment_check_redirects_signed_out_callers():
    db = make_session()
    with pytest.raises(RedirectRequired):
        await local_service(None).user_is_enrolled(RequestContext(db=db), "course-1")


@pytest.mark.anyio
async def test_remote_enrollment_check():
    api = StubApi({"/enrollments/check/c1": ok({"enrolled": True, "status": "Active"})})
    service = UserDataService(api=api, resolver=FixedResolver(None))

    assert await service.check_if_course_bought(SIGNED_IN, "c1") is True
    assert await service.is_enrolled(SIGNED_IN, "c1") is True
    assert await service.check_if_course_bought(SIGNED_IN, "c2") is False
    assert await service.check_if_course_bought(RequestContext(), "c1") is False
    assert [call[1] for call in api.calls] == ["/enrollments/check/c1"] * 2 + ["/enrollments/check/c2"]


@pytest.mark.anyio
async def test_enrolled_courses_default_and_parse():
    payload = [{"status": "Active", "Course": {"id": "c1", "title": "Go", "chapters": [{"id": "ch1"}]}}]
    api = StubApi({"/users/enrolled-courses": ok(payload)})
    service = UserDataService(api=api, resolver=FixedResolver(None))

    assert await service.get_enrolled_courses(RequestContext()) == []
    courses = await service.get_enrolled_courses(SIGNED_IN)
    assert courses[0].course.chapter[0].id == "ch1"
    assert await UserDataService(api=StubApi(), resolver=FixedResolver(None)).get_enrolled_courses(SIGNED_IN) == []


@pytest.mark.anyio
async def test_join_live_session():
    api = StubApi({"/live-sessions/s1/join": ok({"callId": "call-1", "token": "stream-token"})})
    service = UserDataService(api=api, resolver=FixedResolver(None))

    denied = await service.join_live_session(RequestContext(), "s1")
    assert denied.success is False
    assert denied.message == "Authentication required"
    assert api.calls == []

    joined = await service.join_live_session(SIGNED_IN, "s1")
    assert joined.success is True
    assert joined.data["callId"] == "call-1"


@pytest.mark.anyio
@pytest.mark.parametrize("ctx", [RequestContext(), SIGNED_IN])
async def test_lesson_content_is_hard_gated(ctx):
    with pytest.raises(ContentNotFound):
        await CourseDataService(api=StubApi()).get_lesson_content(ctx, "lesson-1")


@pytest.mark.anyio
async def test_lesson_content_for_enrolled_caller():
    api = StubApi(
        {
            "/lessons/l1/content": ok(
                {"id": "l1", "title": "Hello", "videoKey": "v.mp4", "Chapter": {"courseId": "c1"}}
            )
        }
    )
    lesson = await CourseDataService(api=api).get_lesson_content(SIGNED_IN, "l1")
    assert lesson.video_key == "v.mp4"
    assert lesson.chapter_info == {"courseId": "c1"}


@pytest.mark.anyio
async def test_public_catalogue():
    api = StubApi({"/courses": ok([{"_id": "c1", "title": "Go", "price": 49}, "garbage"])})
    service = CourseDataService(api=api)

    courses = await service.get_all_courses()

    assert [(c.id, c.price) for c in courses] == [("c1", 49)]
    assert await CourseDataService(api=StubApi()).get_all_courses() == []
    with pytest.raises(ContentNotFound):
        await service.get_course("missing")


@pytest.mark.anyio
async def test_local_enrollment_lookup_runs_off_the_event_loop_thread():
    threads = set()

    class ThreadRecordingRepository(EnrollmentRepository):
        def get_for_user(self, db, user_id, course_id):
            threads.add(threading.current_thread())
            return super().get_for_user(db, user_id, course_id)

    db = make_session()
    user, course = seed_user_and_course(db)
    service = UserDataService(
        api=StubApi(),
        resolver=FixedResolver(CurrentUser.model_validate(user)),
        enrollment_repo=ThreadRecordingRepository(),
    )

    assert await service.user_is_enrolled(RequestContext(db=db), course.id) is False
    assert threads and threading.main_thread() not in threads
