"""Meeting create and end-for-all endpoints; admin role is re-checked on every request."""

import logging
import uuid
from typing import Annotated

from fastapi import APIRouter, Depends, Path, status

from meetsync.api.deps import get_provider, require_admin
from meetsync.schemas.auth import Identity
from meetsync.schemas.provider import (
    CreateMeetingRequest,
    CreateMeetingResponse,
    EndMeetingResponse,
)
from meetsync.services.video_provider import StreamVideoProvider, account_user_id

logger = logging.getLogger(__name__)
router = APIRouter()

MEETING_ID_PATTERN = r"^[A-Za-z0-9_-]{1,64}$"


@router.post("", response_model=CreateMeetingResponse, status_code=status.HTTP_201_CREATED)
async def create_meeting(
    admin: Annotated[Identity, Depends(require_admin)],
    provider: Annotated[StreamVideoProvider, Depends(get_provider)],
    body: CreateMeetingRequest | None = None,
) -> CreateMeetingResponse:
    """Create a provider call (admin only). A random UUID is used when no meetingId is given."""
    meeting_id = (body.meeting_id if body else None) or str(uuid.uuid4())
    call = await provider.create_call(meeting_id, created_by=account_user_id(admin.id))
    logger.info("Meeting created", extra={"meeting_id": meeting_id, "identity_id": admin.id})
    return CreateMeetingResponse(meeting_id=meeting_id, call=call)


@router.post("/{meeting_id}/end", response_model=EndMeetingResponse)
async def end_meeting(
    meeting_id: Annotated[str, Path(pattern=MEETING_ID_PATTERN)],
    admin: Annotated[Identity, Depends(require_admin)],
    provider: Annotated[StreamVideoProvider, Depends(get_provider)],
) -> EndMeetingResponse:
    """End a meeting for all participants (admin only)."""
    await provider.end_call(meeting_id)
    logger.info("Meeting ended", extra={"meeting_id": meeting_id, "identity_id": admin.id})
    return EndMeetingResponse()
