from fastapi import APIRouter, Depends

from learnix.core.context import RequestContext, get_request_context
from learnix.routers.me import get_user_data_service
from learnix.schemas.common import ApiResponse
from learnix.services.user_data import UserDataService

router = APIRouter(prefix="/live-sessions", tags=["live"])


@router.post("/{session_id}/join", response_model=ApiResponse)
async def join_live_session(
    session_id: str,
    ctx: RequestContext = Depends(get_request_context),
    service: UserDataService = Depends(get_user_data_service),
) -> ApiResponse:
    return await service.join_live_session(ctx, session_id)
