from typing import Optional

from fastapi import APIRouter, Depends, Query

from learnix.core.context import RequestContext, get_request_context
from learnix.routers.deps import admin_api_required, admin_required
from learnix.schemas.common import ActionResult
from learnix.schemas.course import CourseDetail, CourseSummary, LessonRecord
from learnix.schemas.dashboard import AnalyticsData, DashboardStats, EnrollmentDay
from learnix.schemas.user import AdminUser, Mentor, RoleUpdate
from learnix.services.actions import MENTORS_VIEW, USERS_VIEW, AdminActions
from learnix.services.admin_data import AdminDataService
from learnix.services.view_cache import ViewCache, view_cache

router = APIRouter(prefix="/admin", tags=["admin"], dependencies=[Depends(admin_required)])
actions_router = APIRouter(prefix="/admin", tags=["admin"], dependencies=[Depends(admin_api_required)])
admin_data_service = AdminDataService()
admin_actions = AdminActions()


def get_admin_data_service() -> AdminDataService:
    return admin_data_service


def get_admin_actions() -> AdminActions:
    return admin_actions


def get_view_cache() -> ViewCache:
    return view_cache


@router.get("/courses", response_model=list[CourseSummary])
async def admin_courses(
    ctx: RequestContext = Depends(get_request_context),
    service: AdminDataService = Depends(get_admin_data_service),
) -> list[CourseSummary]:
    return await service.get_courses(ctx)


@router.get("/courses/content", response_model=list[CourseDetail])
async def admin_courses_with_content(
    ctx: RequestContext = Depends(get_request_context),
    service: AdminDataService = Depends(get_admin_data_service),
) -> list[CourseDetail]:
    return await service.get_courses_with_content(ctx)


@router.get("/courses/{course_id}", response_model=CourseDetail)
async def admin_course(
    course_id: str,
    ctx: RequestContext = Depends(get_request_context),
    service: AdminDataService = Depends(get_admin_data_service),
) -> CourseDetail:
    return await service.get_course(ctx, course_id)


@router.get("/lessons/{lesson_id}", response_model=LessonRecord)
async def admin_lesson(
    lesson_id: str,
    ctx: RequestContext = Depends(get_request_context),
    service: AdminDataService = Depends(get_admin_data_service),
) -> LessonRecord:
    return await service.get_lesson(ctx, lesson_id)


@router.get("/mentors", response_model=list[Mentor])
async def admin_mentors(
    ctx: RequestContext = Depends(get_request_context),
    service: AdminDataService = Depends(get_admin_data_service),
    cache: ViewCache = Depends(get_view_cache),
) -> list[Mentor]:
    return await cache.get_or_load(MENTORS_VIEW, lambda: service.get_mentors(ctx))


@router.get("/users", response_model=list[AdminUser])
async def admin_users(
    search: Optional[str] = None,
    ctx: RequestContext = Depends(get_request_context),
    service: AdminDataService = Depends(get_admin_data_service),
    cache: ViewCache = Depends(get_view_cache),
) -> list[AdminUser]:
    if search:
        return await service.get_users(ctx, search)
    return await cache.get_or_load(USERS_VIEW, lambda: service.get_users(ctx))


@router.get("/dashboard/stats", response_model=DashboardStats)
async def admin_dashboard_stats(
    month: Optional[int] = Query(default=None, ge=1, le=12),
    year: Optional[int] = None,
    ctx: RequestContext = Depends(get_request_context),
    service: AdminDataService = Depends(get_admin_data_service),
) -> DashboardStats:
    return await service.get_dashboard_stats(ctx, month=month, year=year)


@router.get("/dashboard/local-stats", response_model=DashboardStats)
async def admin_local_dashboard_stats(
    month: Optional[int] = Query(default=None, ge=1, le=12),
    year: Optional[int] = None,
    ctx: RequestContext = Depends(get_request_context),
    service: AdminDataService = Depends(get_admin_data_service),
) -> DashboardStats:
    return await service.get_local_dashboard_stats(ctx, month=month, year=year)


@router.get("/dashboard/recent-courses", response_model=list[CourseSummary])
async def admin_recent_courses(
    limit: int = Query(default=2, ge=1, le=50),
    ctx: RequestContext = Depends(get_request_context),
    service: AdminDataService = Depends(get_admin_data_service),
) -> list[CourseSummary]:
    return await service.get_recent_courses(ctx, limit=limit)


@router.get("/dashboard/enrollments", response_model=list[EnrollmentDay])
async def admin_enrollment_stats(
    ctx: RequestContext = Depends(get_request_context),
    service: AdminDataService = Depends(get_admin_data_service),
) -> list[EnrollmentDay]:
    return await service.get_enrollment_stats(ctx)


@router.get("/analytics", response_model=Optional[AnalyticsData])
async def admin_analytics(
    ctx: RequestContext = Depends(get_request_context),
    service: AdminDataService = Depends(get_admin_data_service),
) -> Optional[AnalyticsData]:
    return await service.get_analytics(ctx)


@actions_router.put("/users/{user_id}/ban", response_model=ActionResult)
async def toggle_ban(
    user_id: str,
    ctx: RequestContext = Depends(get_request_context),
    actions: AdminActions = Depends(get_admin_actions),
) -> ActionResult:
    return await actions.toggle_user_ban(ctx, user_id)


@actions_router.put("/users/{user_id}/role", response_model=ActionResult)
async def update_role(
    user_id: str,
    payload: RoleUpdate,
    ctx: RequestContext = Depends(get_request_context),
    actions: AdminActions = Depends(get_admin_actions),
) -> ActionResult:
    return await actions.update_user_role(ctx, user_id, payload.role)


@actions_router.post("/users/sync", response_model=ActionResult)
async def sync_users(
    ctx: RequestContext = Depends(get_request_context),
    actions: AdminActions = Depends(get_admin_actions),
) -> ActionResult:
    return await actions.sync_users_from_provider(ctx)
