"""Guest video-provider token endpoint."""

from typing import Annotated

from fastapi import APIRouter, Depends

from meetsync.api.deps import get_provider
from meetsync.schemas.auth import ROLE_MEMBER
from meetsync.schemas.provider import ProviderUser, TokenProviderRequest, TokenProviderResponse
from meetsync.services.video_provider import StreamVideoProvider, guest_user_id

router = APIRouter()


@router.post("/tokenProvider", response_model=TokenProviderResponse)
async def token_provider(
    body: TokenProviderRequest,
    provider: Annotated[StreamVideoProvider, Depends(get_provider)],
) -> TokenProviderResponse:
    """
    Provision a guest with the video provider and return a one-hour token.
    Guests are always members; the role is never derived from request data.
    The client id is moved into the guest namespace, so it cannot address an account.
    """
    user = ProviderUser(
        id=guest_user_id((body.id or "").strip()),
        name=(body.name or "").strip(),
        role=ROLE_MEMBER,
    )
    token = await provider.provision_and_mint(user.id, user.name, user.role)
    return TokenProviderResponse(token=token, user=user)
