from fastapi import APIRouter, Depends

from learnix.core.context import RequestContext, get_request_context
from learnix.schemas.course import EnrolledCourse
from learnix.schemas.user import CurrentUser
from learnix.routers.deps import get_session_resolver, user_required
from learnix.services.session import SessionResolver
from learnix.services.user_data import UserDataService

router = APIRouter(prefix="/me", tags=["me"])
user_data_service = UserDataService()


def get_user_data_service() -> UserDataService:
    return user_data_service


@router.get("", response_model=CurrentUser)
async def read_current_user(user: CurrentUser = Depends(user_required)) -> CurrentUser:
    return user


@router.post("/sync")
async def sync_current_user(
    ctx: RequestContext = Depends(get_request_context),
    resolver: SessionResolver = Depends(get_session_resolver),
) -> dict:
    return {"synced": await resolver.sync_current_user(ctx)}


@router.get("/enrolled-courses", response_model=list[EnrolledCourse])
async def enrolled_courses(
    ctx: RequestContext = Depends(get_request_context),
    service: UserDataService = Depends(get_user_data_service),
) -> list[EnrolledCourse]:
    return await service.get_enrolled_courses(ctx)


@router.get("/enrollments/{course_id}")
async def enrollment_status(
    course_id: str,
    ctx: RequestContext = Depends(get_request_context),
    service: UserDataService = Depends(get_user_data_service),
) -> dict:
    return {"enrolled": await service.is_enrolled(ctx, course_id)}
