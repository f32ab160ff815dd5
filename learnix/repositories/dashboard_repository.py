import calendar
from datetime import date, datetime, time, timedelta, timezone
from typing import Dict, List, Tuple

from sqlalchemy import distinct, func, or_
from sqlalchemy.orm import Session

from learnix.models.course import Chapter, Course, CourseStatus, Lesson
from learnix.models.enrollment import Enrollment
from learnix.models.user import User, UserRole


def month_bounds(month: int, year: int) -> Tuple[datetime, datetime]:
    """First and last UTC instant of a calendar month; `month` is 1-based."""
    last_day = calendar.monthrange(year, month)[1]
    return (
        datetime.combine(date(year, month, 1), time.min, tzinfo=timezone.utc),
        datetime.combine(date(year, month, last_day), time.max, tzinfo=timezone.utc),
    )


class DashboardRepository:
    """Admin dashboard counters computed straight from the local database."""

    def count_users(self, db: Session) -> int:
        return db.query(func.count(User.id)).scalar() or 0

    def count_customers(self, db: Session) -> int:
        return db.query(func.count(distinct(Enrollment.user_id))).scalar() or 0

    def count_published_courses(self, db: Session) -> int:
        return (
            db.query(func.count(Course.id)).filter(Course.status == CourseStatus.PUBLISHED).scalar() or 0
        )

    def count_published_lessons(self, db: Session) -> int:
        return (
            db.query(func.count(Lesson.id))
            .join(Chapter, Lesson.chapter_id == Chapter.id)
            .join(Course, Chapter.course_id == Course.id)
            .filter(Course.status == CourseStatus.PUBLISHED)
            .scalar()
            or 0
        )

    def count_signups_between(self, db: Session, start: datetime, end: datetime) -> int:
        return (
            db.query(func.count(User.id))
            .filter(User.created_at >= start, User.created_at <= end)
            .scalar()
            or 0
        )

    def count_active_since(self, db: Session, since: datetime) -> int:
        # updated_at moves on every sign-in because the profile is refreshed then.
        return db.query(func.count(User.id)).filter(User.updated_at >= since).scalar() or 0

    def daily_stats(self, db: Session, month: int, year: int) -> List[Dict]:
        """One row per day of the month, zero-filled.

        Signups count plain users (role null or "user") created that day;
        enrollments count enrollments of those same users.
        """
        start, end = month_bounds(month, year)
        users = (
            db.query(User.id, User.created_at)
            .filter(
                User.created_at >= start,
                User.created_at <= end,
                or_(User.role.is_(None), func.lower(User.role) == UserRole.USER.value),
            )
            .all()
        )
        signups: Dict[date, int] = {}
        day_of_user: Dict[str, date] = {}
        for user_id, created_at in users:
            day = created_at.date()
            day_of_user[user_id] = day
            signups[day] = signups.get(day, 0) + 1

        enrollments: Dict[date, int] = {}
        if day_of_user:
            rows = db.query(Enrollment.user_id).filter(Enrollment.user_id.in_(list(day_of_user))).all()
            for (user_id,) in rows:
                day = day_of_user[user_id]
                enrollments[day] = enrollments.get(day, 0) + 1

        result = []
        day = start.date()
        while day <= end.date():
            result.append(
                {
                    "date": day.isoformat(),
                    "signups": signups.get(day, 0),
                    "enrollments": enrollments.get(day, 0),
                }
            )
            day += timedelta(days=1)
        return result
