import asyncio
import logging
from datetime import date, timedelta
from typing import Any, List, Optional, Type, TypeVar, Union

from fastapi.concurrency import run_in_threadpool
from pydantic import BaseModel
from sqlalchemy.orm import Session

from learnix.clients.api_client import ApiClient
from learnix.core.context import RequestContext
from learnix.core.database import require_db
from learnix.core.exceptions import ContentNotFound
from learnix.models.base import utcnow
from learnix.repositories.dashboard_repository import DashboardRepository, month_bounds
from learnix.schemas.common import ApiResponse
from learnix.schemas.course import CourseDetail, CourseSummary, LessonRecord
from learnix.schemas.dashboard import AnalyticsData, DailyStat, DashboardStats, EnrollmentDay, EnrollmentStats
from learnix.schemas.user import AdminUser, Mentor
from learnix.services.records import parse_record, parse_records, with_chapter_alias

logger = logging.getLogger(__name__)

ENROLLMENT_WINDOW_DAYS = 30

M = TypeVar("M", bound=BaseModel)


class AdminDataService:
    """Data behind the admin pages.

    Listings degrade to empty values when the caller has no token or the
    backend call fails; single course and lesson lookups raise ContentNotFound.
    """

    def __init__(self, api: ApiClient | None = None, dashboard_repo: DashboardRepository | None = None):
        self.api = api or ApiClient()
        self.dashboard_repo = dashboard_repo or DashboardRepository()

    async def get_courses(self, ctx: RequestContext) -> List[CourseSummary]:
        token = ctx.auth_token
        if not token:
            return []
        response = await self.api.get("/admin/courses", token=token)
        return parse_records(CourseSummary, response.data) if response.success else []

    async def get_course(self, ctx: RequestContext, course_id: str) -> CourseDetail:
        token = ctx.auth_token
        if not token:
            raise ContentNotFound("course")
        response = await self.api.get(f"/admin/courses/{course_id}", token=token)
        if not response.success or not isinstance(response.data, dict):
            raise ContentNotFound("course")
        course = parse_record(CourseDetail, {**with_chapter_alias(response.data), "originalIdentifier": course_id})
        if course is None:
            raise ContentNotFound("course")
        return course

    async def get_lesson(self, ctx: RequestContext, lesson_id: str) -> LessonRecord:
        token = ctx.auth_token
        if not token:
            raise ContentNotFound("lesson")
        response = await self.api.get(f"/admin/lessons/{lesson_id}", token=token)
        lesson = parse_record(LessonRecord, response.data) if response.success else None
        if lesson is None:
            raise ContentNotFound("lesson")
        return lesson

    async def get_courses_with_content(self, ctx: RequestContext) -> List[CourseDetail]:
        token = ctx.auth_token
        if not token:
            return []
        response = await self.api.get("/admin/courses/content", token=token)
        if not response.success or not isinstance(response.data, list):
            return []
        items = [with_chapter_alias(item) for item in response.data if isinstance(item, dict)]
        return parse_records(CourseDetail, items)

    async def get_mentors(self, ctx: RequestContext) -> List[Mentor]:
        token = ctx.auth_token
        if not token:
            return []
        response = await self.api.get("/admin/mentors", token=token)
        return parse_records(Mentor, response.data) if response.success else []

    async def get_recent_courses(self, ctx: RequestContext, limit: int = 2) -> List[CourseSummary]:
        token = ctx.auth_token
        if not token:
            return []
        response = await self.api.get("/admin/dashboard/recent-courses", token=token, params={"limit": limit})
        return parse_records(CourseSummary, response.data) if response.success else []

    async def get_users(self, ctx: RequestContext, search: Optional[str] = None) -> List[AdminUser]:
        token = ctx.auth_token
        if not token:
            return []
        response = await self.api.get("/admin/users", token=token, params={"search": search or None})
        if not response.success:
            return []
        data: Any = response.data
        if isinstance(data, dict):
            data = data.get("users", [])
        return parse_records(AdminUser, data)

    async def get_dashboard_stats(
        self, ctx: RequestContext, month: Optional[int] = None, year: Optional[int] = None
    ) -> DashboardStats:
        token = ctx.auth_token
        if not token:
            logger.warning("No auth token available for dashboard stats")
            return DashboardStats()
        response = await self.api.get(
            "/admin/dashboard/stats", token=token, params={"month": month, "year": year}
        )
        stats = parse_record(DashboardStats, response.data) if response.success else None
        if stats is None:
            logger.warning("Dashboard stats API returned unsuccessful response")
            return DashboardStats()
        return stats

    async def get_enrollment_stats(self, ctx: RequestContext, today: Optional[date] = None) -> List[EnrollmentDay]:
        """Enrollments per day over the last thirty days, oldest first, zero-filled."""
        token = ctx.auth_token
        if not token:
            return []
        response = await self.api.get("/admin/dashboard/enrollments", token=token)

        counts = {}
        if response.success and isinstance(response.data, dict):
            for stat in parse_records(DailyStat, response.data.get("statsByDate")):
                counts[stat.date] = stat.enrollments

        today = today or utcnow().date()
        days = [today - timedelta(days=offset) for offset in range(ENROLLMENT_WINDOW_DAYS - 1, -1, -1)]
        return [EnrollmentDay(date=day.isoformat(), enrollment=counts.get(day.isoformat(), 0)) for day in days]

    async def get_analytics(self, ctx: RequestContext) -> Optional[AnalyticsData]:
        token = ctx.auth_token
        if not token:
            return None
        stats_result, enrollment_result = await asyncio.gather(
            self.api.get("/admin/dashboard/stats", token=token),
            self.api.get("/admin/dashboard/enrollments", token=token),
            return_exceptions=True,
        )
        return AnalyticsData(
            dashboard=self._side(DashboardStats, stats_result),
            enrollment=self._side(EnrollmentStats, enrollment_result),
        )

    @staticmethod
    def _side(model: Type[M], result: Union[ApiResponse, BaseException]) -> Optional[M]:
        if isinstance(result, BaseException):
            logger.error("Analytics call failed: %s", result)
            return None
        if not isinstance(result, ApiResponse) or not result.success:
            return None
        return parse_record(model, result.data)

    async def get_local_dashboard_stats(
        self, ctx: RequestContext, month: Optional[int] = None, year: Optional[int] = None
    ) -> DashboardStats:
        """Same numbers as the backend dashboard, computed from the local database."""
        db = require_db(ctx.db)
        now = utcnow()
        return await run_in_threadpool(self._local_stats, db, month or now.month, year or now.year)

    def _local_stats(self, db: Session, month: int, year: int) -> DashboardStats:
        start, end = month_bounds(month, year)
        repo = self.dashboard_repo
        return DashboardStats(
            total_signups=repo.count_users(db),
            total_customers=repo.count_customers(db),
            total_courses=repo.count_published_courses(db),
            total_lessons=repo.count_published_lessons(db),
            recent_signups=repo.count_signups_between(db, start, end),
            active_users=repo.count_active_since(db, start),
            stats_by_date=[DailyStat(**row) for row in repo.daily_stats(db, month, year)],
        )
