"""Request/response schemas for auth endpoints and the internal identity record."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator

Role = Literal["member", "admin"]

ROLE_MEMBER: Role = "member"
ROLE_ADMIN: Role = "admin"

MISSING_FIELDS_MESSAGE = "All fields are required"


def _is_blank(value: str | None) -> bool:
    return value is None or not value.strip()


class Identity(BaseModel):
    """Stored account as seen by services. password_hash never leaves the process."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    email: str
    role: Role = ROLE_MEMBER
    password_hash: str = Field(exclude=True, repr=False)
    created_at: datetime | None = None


class SignupRequest(BaseModel):
    """Body for POST /auth/signup. Absent, null and blank fields are all treated as missing."""

    name: str | None = Field(default=None, max_length=255, description="Display name")
    email: str | None = Field(default=None, max_length=320, description="Account email")
    password: str | None = Field(default=None, max_length=128, description="Password")

    @model_validator(mode="after")
    def require_all_fields(self) -> "SignupRequest":
        if _is_blank(self.name) or _is_blank(self.email) or not self.password:
            raise ValueError(MISSING_FIELDS_MESSAGE)
        return self


class SignupResponse(BaseModel):
    success: bool = True
    message: str = "User registered successfully"


class SigninRequest(BaseModel):
    """Body for POST /auth/signin."""

    email: str | None = Field(default=None, max_length=320, description="Account email")
    password: str | None = Field(default=None, max_length=128, description="Password")

    @model_validator(mode="after")
    def require_all_fields(self) -> "SigninRequest":
        if _is_blank(self.email) or not self.password:
            raise ValueError(MISSING_FIELDS_MESSAGE)
        return self


class UserSummary(BaseModel):
    """Public identity fields returned after signin (no password hash)."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    email: str
    role: Role


class UserProfile(UserSummary):
    """Public identity fields for the profile endpoint."""

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    created_at: datetime | None = Field(default=None, alias="createdAt")


class SigninResponse(BaseModel):
    """Session token, provider token and the signed-in user."""

    model_config = ConfigDict(populate_by_name=True)

    success: bool = True
    token: str = Field(..., description="Session JWT (also set as an http-only cookie)")
    stream_token: str = Field(
        ...,
        alias="streamToken",
        description="Video provider token, valid for one hour",
    )
    user: UserSummary


class SignoutResponse(BaseModel):
    message: str = "Signed out successfully"


class ProfileResponse(BaseModel):
    user: UserProfile


class ErrorResponse(BaseModel):
    """Envelope for every failed request."""

    success: bool = False
    message: str
