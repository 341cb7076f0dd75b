"""Profile endpoint."""

from fastapi import APIRouter, Depends

from ...container import ServiceContainer
from ...features.users.entities import UserProfile
from ..dependencies import get_container, get_user_id

router = APIRouter(tags=["Profile"])


@router.get("/profile", response_model=UserProfile, summary="Get the caller's profile")
async def get_profile(
    user_id: int = Depends(get_user_id),
    container: ServiceContainer = Depends(get_container),
) -> UserProfile:
    return await container.users.get_profile(user_id)
