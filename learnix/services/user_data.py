from typing import List

from fastapi.concurrency import run_in_threadpool
from sqlalchemy.orm import Session

from learnix.clients.api_client import ApiClient
from learnix.core.context import RequestContext
from learnix.core.database import require_db
from learnix.models.enrollment import EnrollmentStatus
from learnix.repositories.enrollment_repository import EnrollmentRepository
from learnix.schemas.common import ApiResponse
from learnix.schemas.course import EnrolledCourse
from learnix.services.records import parse_records, with_chapter_alias
from learnix.services.session import SessionResolver


class UserDataService:
    def __init__(
        self,
        api: ApiClient | None = None,
        resolver: SessionResolver | None = None,
        enrollment_repo: EnrollmentRepository | None = None,
    ):
        self.api = api or ApiClient()
        self.resolver = resolver or SessionResolver()
        self.enrollment_repo = enrollment_repo or EnrollmentRepository()

    async def get_enrolled_courses(self, ctx: RequestContext) -> List[EnrolledCourse]:
        token = ctx.auth_token
        if not token:
            return []
        response = await self.api.get("/users/enrolled-courses", token=token)
        if not response.success or not isinstance(response.data, list):
            return []
        items = []
        for item in response.data:
            if isinstance(item, dict) and isinstance(item.get("Course"), dict):
                item = {**item, "Course": with_chapter_alias(item["Course"])}
            items.append(item)
        return parse_records(EnrolledCourse, items)

    async def check_if_course_bought(self, ctx: RequestContext, course_id: str) -> bool:
        token = ctx.auth_token
        if not token:
            return False
        response = await self.api.get(f"/enrollments/check/{course_id}", token=token)
        if response.success and isinstance(response.data, dict):
            return bool(response.data.get("enrolled"))
        return False

    async def user_is_enrolled(self, ctx: RequestContext, course_id: str) -> bool:
        """Local check: only an enrollment whose status is exactly Active grants access."""
        user = await self.resolver.require_user(ctx)
        db = require_db(ctx.db)
        return await run_in_threadpool(self._has_active_enrollment, db, user.id, course_id)

    def _has_active_enrollment(self, db: Session, user_id: str, course_id: str) -> bool:
        enrollment = self.enrollment_repo.get_for_user(db, user_id, course_id)
        return enrollment is not None and enrollment.status == EnrollmentStatus.ACTIVE

    async def join_live_session(self, ctx: RequestContext, session_id: str) -> ApiResponse:
        token = ctx.auth_token
        if not token:
            return ApiResponse(success=False, message="Authentication required")
        return await self.api.post(f"/live-sessions/{session_id}/join", {}, token=token)

    async def is_enrolled(self, ctx: RequestContext, course_id: str) -> bool:
        """Uses the local enrollment table when a database is configured, the backend otherwise."""
        if ctx.db is not None:
            return await self.user_is_enrolled(ctx, course_id)
        return await self.check_if_course_bought(ctx, course_id)
