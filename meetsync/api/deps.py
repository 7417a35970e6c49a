"""FastAPI dependencies: service handles from app.state and the auth gate (get_current_identity, require_admin)."""

from typing import Annotated

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from meetsync.core.config import Settings
from meetsync.schemas.auth import ROLE_ADMIN, Identity
from meetsync.services.auth_flow import AuthService
from meetsync.services.auth_gate import AuthorizationGate
from meetsync.services.video_provider import StreamVideoProvider

bearer = HTTPBearer(auto_error=False)


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_auth_service(request: Request) -> AuthService:
    return request.app.state.auth_service


def get_gate(request: Request) -> AuthorizationGate:
    return request.app.state.gate


def get_provider(request: Request) -> StreamVideoProvider:
    return request.app.state.provider


def get_session_token(
    request: Request,
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer)],
    settings: Annotated[Settings, Depends(get_app_settings)],
) -> str | None:
    """Session token from the cookie, else from an Authorization: Bearer header."""
    token = request.cookies.get(settings.SESSION_COOKIE_NAME)
    if token:
        return token
    if credentials is not None:
        return credentials.credentials
    return None


async def get_current_identity(
    token: Annotated[str | None, Depends(get_session_token)],
    gate: Annotated[AuthorizationGate, Depends(get_gate)],
) -> Identity:
    """Dependency: require a valid session and return the identity. Raises 401 otherwise."""
    return await gate.authenticate(token)


def require_admin(
    identity: Annotated[Identity, Depends(get_current_identity)],
    gate: Annotated[AuthorizationGate, Depends(get_gate)],
) -> Identity:
    """Dependency: require an authenticated admin. Raises 401 or 403."""
    gate.require_role(identity, ROLE_ADMIN)
    return identity
