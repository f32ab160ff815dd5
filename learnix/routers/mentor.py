from fastapi import APIRouter, Depends

from learnix.routers.deps import mentor_required
from learnix.schemas.user import CurrentUser

router = APIRouter(prefix="/mentor", tags=["mentor"])


@router.get("/me", response_model=CurrentUser)
async def mentor_profile(user: CurrentUser = Depends(mentor_required)) -> CurrentUser:
    return user
