"""Schemas for guest video-provider tokens and meeting operations."""

from typing import Any

from pydantic import BaseModel, Field, model_validator

from meetsync.schemas.auth import ROLE_MEMBER, Role

TOKEN_PROVIDER_MISSING_MESSAGE = "ID and name are required"


class TokenProviderRequest(BaseModel):
    """Body for POST /tokenProvider."""

    id: str | None = Field(default=None, max_length=255, description="Provider user id")
    name: str | None = Field(default=None, max_length=255, description="Display name")

    @model_validator(mode="after")
    def require_id_and_name(self) -> "TokenProviderRequest":
        if not (self.id and self.id.strip()) or not (self.name and self.name.strip()):
            raise ValueError(TOKEN_PROVIDER_MISSING_MESSAGE)
        return self


class ProviderUser(BaseModel):
    id: str
    name: str
    role: Role = ROLE_MEMBER


class TokenProviderResponse(BaseModel):
    success: bool = True
    token: str
    user: ProviderUser


class CreateMeetingRequest(BaseModel):
    """Body for POST /meetings; the id is generated when omitted."""

    meeting_id: str | None = Field(
        default=None,
        alias="meetingId",
        min_length=1,
        max_length=64,
        pattern=r"^[A-Za-z0-9_-]+$",
    )

    model_config = {"populate_by_name": True}


class CreateMeetingResponse(BaseModel):
    model_config = {"populate_by_name": True}

    success: bool = True
    meeting_id: str = Field(..., alias="meetingId")
    call: dict[str, Any] = Field(default_factory=dict)


class EndMeetingResponse(BaseModel):
    success: bool = True
    message: str = "Meeting ended for all participants"
