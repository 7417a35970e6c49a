"""Profile endpoint for the signed-in user."""

from typing import Annotated

from fastapi import APIRouter, Depends

from meetsync.api.deps import get_current_identity
from meetsync.schemas.auth import Identity, ProfileResponse, UserProfile

router = APIRouter()


@router.get("/profile", response_model=ProfileResponse)
def get_profile(
    identity: Annotated[Identity, Depends(get_current_identity)],
) -> ProfileResponse:
    return ProfileResponse(user=UserProfile.model_validate(identity))
