"""Pydantic request/response schemas."""

from meetsync.schemas.auth import (
    ROLE_ADMIN,
    ROLE_MEMBER,
    ErrorResponse,
    Identity,
    ProfileResponse,
    Role,
    SigninRequest,
    SigninResponse,
    SignoutResponse,
    SignupRequest,
    SignupResponse,
    UserProfile,
    UserSummary,
)
from meetsync.schemas.health import HealthResponse
from meetsync.schemas.provider import (
    CreateMeetingRequest,
    CreateMeetingResponse,
    EndMeetingResponse,
    ProviderUser,
    TokenProviderRequest,
    TokenProviderResponse,
)

__all__ = [
    "ROLE_ADMIN",
    "ROLE_MEMBER",
    "CreateMeetingRequest",
    "CreateMeetingResponse",
    "EndMeetingResponse",
    "ErrorResponse",
    "HealthResponse",
    "Identity",
    "ProfileResponse",
    "ProviderUser",
    "Role",
    "SigninRequest",
    "SigninResponse",
    "SignoutResponse",
    "SignupRequest",
    "SignupResponse",
    "TokenProviderRequest",
    "TokenProviderResponse",
    "UserProfile",
    "UserSummary",
]
