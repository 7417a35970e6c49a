"""Authorization gate: resolve a session token to an identity and enforce roles."""

import logging

from fastapi.concurrency import run_in_threadpool

from meetsync.core.errors import ForbiddenError, UnauthenticatedError
from meetsync.core.security import InvalidSessionTokenError, SessionTokenIssuer
from meetsync.schemas.auth import ROLE_ADMIN, Identity, Role
from meetsync.services.credential_store import CredentialStore

logger = logging.getLogger(__name__)


class AuthorizationGate:
    """Validates session tokens and role requirements; holds no per-request state."""

    def __init__(self, tokens: SessionTokenIssuer, store: CredentialStore) -> None:
        self._tokens = tokens
        self._store = store

    async def authenticate(self, token: str | None) -> Identity:
        """
        Return the identity behind a session token.
        Raises UnauthenticatedError if the token is missing, invalid, expired,
        or the identity no longer exists.
        """
        if not token:
            raise UnauthenticatedError("Not authenticated")
        try:
            identity_id = self._tokens.verify(token)
        except InvalidSessionTokenError as e:
            logger.info("Session token rejected", extra={"reason": e.message})
            raise UnauthenticatedError("Authentication failed") from e
        identity = await run_in_threadpool(self._store.find_by_id, identity_id)
        if identity is None:
            raise UnauthenticatedError("User not found")
        return identity

    @staticmethod
    def require_role(identity: Identity, required_role: Role) -> None:
        """Raise ForbiddenError unless identity holds required_role; admin satisfies any role."""
        if identity.role == required_role or identity.role == ROLE_ADMIN:
            return
        logger.info(
            "Role check failed",
            extra={"identity_id": identity.id, "required_role": required_role},
        )
        raise ForbiddenError(f"{required_role.capitalize()} access required")
