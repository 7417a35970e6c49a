"""Password hashing and session JWT creation/verification for authentication."""

from datetime import UTC, datetime, timedelta
from functools import lru_cache
from typing import Any

import bcrypt
import jwt

# Bcrypt cost (rounds); 10 keeps signin latency low on small instances.
BCRYPT_ROUNDS = 10

# bcrypt only looks at the first 72 bytes of input.
BCRYPT_MAX_BYTES = 72

SESSION_TOKEN_TTL = timedelta(days=1)


def hash_password(plain_password: str, rounds: int = BCRYPT_ROUNDS) -> str:
    """Hash a plain-text password for storage. Each call uses a fresh random salt."""
    pw_bytes = plain_password.encode("utf-8")[:BCRYPT_MAX_BYTES]
    return bcrypt.hashpw(pw_bytes, bcrypt.gensalt(rounds=rounds)).decode("utf-8")


def verify_password(plain_password: str, hashed: str) -> bool:
    """Verify a plain password against a stored hash. Never raises on mismatch."""
    pw_bytes = plain_password.encode("utf-8")[:BCRYPT_MAX_BYTES]
    try:
        return bcrypt.checkpw(pw_bytes, hashed.encode("utf-8"))
    except (ValueError, TypeError):
        return False


@lru_cache
def dummy_password_hash(rounds: int = BCRYPT_ROUNDS) -> str:
    """Hash verified against when the account does not exist; built once per cost."""
    return hash_password("meetsync-dummy-password", rounds)


class InvalidSessionTokenError(Exception):
    """Raised when a session token is malformed, tampered with, or expired."""

    def __init__(self, message: str, cause: Exception | None = None) -> None:
        self.message = message
        self.cause = cause
        super().__init__(message)


class SessionTokenIssuer:
    """
    Mints and verifies stateless session tokens (HS256 JWT).

    Claims: sub (identity id), iat, exp. The role is not embedded; callers
    reload the identity from the store on every request.
    """

    def __init__(
        self,
        secret: str,
        algorithm: str = "HS256",
        lifetime: timedelta = SESSION_TOKEN_TTL,
    ) -> None:
        if not secret:
            raise ValueError("session token secret must be non-empty")
        self._secret = secret
        self._algorithm = algorithm
        self.lifetime = lifetime

    def issue(self, identity_id: str | int, now: datetime | None = None) -> str:
        """Create a session token for identity_id valid for self.lifetime from now."""
        issued_at = now or datetime.now(UTC)
        payload: dict[str, Any] = {
            "sub": str(identity_id),
            "iat": issued_at,
            "exp": issued_at + self.lifetime,
        }
        return jwt.encode(payload, self._secret, algorithm=self._algorithm)

    def verify(self, token: str) -> str:
        """
        Validate signature and expiry; return the identity id (sub).
        Raises InvalidSessionTokenError on any failure.
        """
        if not token:
            raise InvalidSessionTokenError("Missing token")
        try:
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[self._algorithm],
                options={"require": ["sub", "iat", "exp"]},
            )
        except jwt.ExpiredSignatureError as e:
            raise InvalidSessionTokenError("Token expired", e) from e
        except jwt.PyJWTError as e:
            raise InvalidSessionTokenError("Invalid token", e) from e
        sub = payload.get("sub")
        if not isinstance(sub, str) or not sub:
            raise InvalidSessionTokenError("Invalid token payload")
        return sub
