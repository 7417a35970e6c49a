"""Signup, signin and signout endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, Response, status

from meetsync.api.deps import get_app_settings, get_auth_service
from meetsync.core.config import Settings
from meetsync.schemas.auth import (
    SigninRequest,
    SigninResponse,
    SignoutResponse,
    SignupRequest,
    SignupResponse,
    UserSummary,
)
from meetsync.services.auth_flow import AuthService

router = APIRouter()


@router.post("/signup", response_model=SignupResponse, status_code=status.HTTP_201_CREATED)
async def signup(
    body: SignupRequest,
    auth: Annotated[AuthService, Depends(get_auth_service)],
) -> SignupResponse:
    """Register a member account. Does not sign the user in."""
    await auth.signup(body.name or "", body.email or "", body.password or "")
    return SignupResponse()


@router.post("/signin", response_model=SigninResponse)
async def signin(
    body: SigninRequest,
    response: Response,
    auth: Annotated[AuthService, Depends(get_auth_service)],
    settings: Annotated[Settings, Depends(get_app_settings)],
) -> SigninResponse:
    """
    Authenticate with email and password.
    Returns the session token (also set as an http-only cookie) and a video provider token.
    """
    result = await auth.signin(body.email or "", body.password or "")
    response.set_cookie(
        key=settings.SESSION_COOKIE_NAME,
        value=result.session_token,
        max_age=settings.SESSION_TOKEN_TTL_SEC,
        httponly=True,
        secure=settings.cookie_secure,
        samesite="strict",
    )
    return SigninResponse(
        token=result.session_token,
        stream_token=result.provider_token,
        user=UserSummary.model_validate(result.identity),
    )


@router.post("/signout", response_model=SignoutResponse)
def signout(
    response: Response,
    auth: Annotated[AuthService, Depends(get_auth_service)],
    settings: Annotated[Settings, Depends(get_app_settings)],
) -> SignoutResponse:
    """Clear the session cookie. The token itself stays valid until it expires."""
    response.delete_cookie(
        key=settings.SESSION_COOKIE_NAME,
        httponly=True,
        secure=settings.cookie_secure,
        samesite="strict",
    )
    return SignoutResponse(message=auth.signout())
