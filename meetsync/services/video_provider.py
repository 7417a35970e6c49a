"""Stream Video bridge: provision users, mint provider tokens, create and end calls."""

from __future__ import annotations

import logging
from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING, Any

import httpx
import jwt

from meetsync.core.errors import ProviderUnavailableError
from meetsync.schemas.auth import Role

if TYPE_CHECKING:
    from meetsync.core.config import Settings

logger = logging.getLogger(__name__)

CALL_TYPE = "default"

# Our roles -> Stream's built-in user roles.
PROVIDER_ROLES: dict[str, str] = {
    "member": "user",
    "admin": "admin",
}

# Accounts and guests never share a provider user id.
ACCOUNT_ID_PREFIX = "user-"
GUEST_ID_PREFIX = "guest-"


def account_user_id(identity_id: str | int) -> str:
    """Provider user id for a registered account."""
    return f"{ACCOUNT_ID_PREFIX}{identity_id}"


def guest_user_id(guest_id: str) -> str:
    """Provider user id for an unauthenticated guest; client-chosen ids stay in the guest namespace."""
    return f"{GUEST_ID_PREFIX}{guest_id}"


def _error_detail(resp: httpx.Response) -> str:
    try:
        body = resp.json()
        detail = body.get("message") or body.get("detail") or str(body)
    except Exception:
        detail = resp.text or "Unknown error"
    return str(detail)[:300]


class StreamVideoProvider:
    """
    Narrow client for the Stream Video server-side REST API.

    One instance (and one underlying httpx.AsyncClient) lives for the whole
    process; call aclose() on shutdown.
    """

    def __init__(
        self,
        api_key: str,
        api_secret: str,
        base_url: str = "https://video.stream-io-api.com",
        timeout: float = 3.0,
        token_ttl: timedelta = timedelta(hours=1),
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        if not api_key or not api_secret:
            raise ValueError("Stream API key and secret are required")
        self.api_key = api_key
        self._api_secret = api_secret
        self.token_ttl = token_ttl
        self._client = httpx.AsyncClient(
            base_url=base_url.rstrip("/"),
            timeout=timeout,
            transport=transport,
        )

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> StreamVideoProvider:
        return cls(
            api_key=settings.STREAM_API_KEY,
            api_secret=settings.STREAM_SECRET_KEY.get_secret_value(),
            base_url=settings.STREAM_BASE_URL,
            timeout=settings.STREAM_TIMEOUT_SEC,
            token_ttl=timedelta(seconds=settings.STREAM_TOKEN_TTL_SEC),
            transport=transport,
        )

    async def aclose(self) -> None:
        await self._client.aclose()

    def _server_token(self) -> str:
        return jwt.encode({"server": True}, self._api_secret, algorithm="HS256")

    def create_user_token(self, user_id: str, now: datetime | None = None) -> str:
        """Mint a client-side provider token for user_id, valid for token_ttl."""
        issued_at = now or datetime.now(UTC)
        payload = {
            "user_id": user_id,
            "iat": int(issued_at.timestamp()),
            "exp": int((issued_at + self.token_ttl).timestamp()),
        }
        return jwt.encode(payload, self._api_secret, algorithm="HS256")

    async def _post(self, path: str, payload: dict[str, Any], action: str) -> dict[str, Any]:
        """POST a server-authorized request. Raises ProviderUnavailableError on any failure."""
        headers = {
            "Authorization": self._server_token(),
            "stream-auth-type": "jwt",
        }
        try:
            resp = await self._client.post(
                path,
                params={"api_key": self.api_key},
                json=payload,
                headers=headers,
            )
        except httpx.TimeoutException as e:
            logger.warning("Video provider timed out", extra={"action": action})
            raise ProviderUnavailableError(f"Video provider timed out during {action}", e) from e
        except httpx.HTTPError as e:
            logger.warning(
                "Video provider unreachable",
                extra={"action": action, "reason": str(e)[:200]},
            )
            raise ProviderUnavailableError(f"Video provider unreachable during {action}", e) from e
        if resp.status_code >= 400:
            detail = _error_detail(resp)
            logger.warning(
                "Video provider rejected request",
                extra={"action": action, "status_code": resp.status_code, "reason": detail},
            )
            raise ProviderUnavailableError(
                f"Video provider returned {resp.status_code} during {action}: {detail}"
            )
        try:
            data = resp.json()
        except ValueError:
            data = {}
        return data if isinstance(data, dict) else {}

    async def upsert_user(self, user_id: str, name: str, role: Role) -> None:
        """Create or update the user in the provider registry; safe to repeat."""
        provider_role = PROVIDER_ROLES.get(role, "user")
        await self._post(
            "/api/v2/users",
            {"users": {user_id: {"id": user_id, "name": name, "role": provider_role}}},
            "user upsert",
        )

    async def provision_and_mint(self, user_id: str, name: str, role: Role) -> str:
        """
        Upsert the provider user then mint its token. Either both succeed or this raises.
        user_id must already be namespaced (account_user_id / guest_user_id).
        """
        await self.upsert_user(user_id, name, role)
        try:
            return self.create_user_token(user_id)
        except jwt.PyJWTError as e:
            raise ProviderUnavailableError("Failed to mint video provider token", e) from e

    async def create_call(self, call_id: str, created_by: str) -> dict[str, Any]:
        """Get-or-create a call owned by the provider user created_by. Returns the provider's call object."""
        payload = {
            "data": {
                "created_by_id": created_by,
                "starts_at": datetime.now(UTC).isoformat(),
                "custom": {"createdBy": created_by},
            }
        }
        data = await self._post(f"/api/v2/video/call/{CALL_TYPE}/{call_id}", payload, "call create")
        call = data.get("call")
        return call if isinstance(call, dict) else {"id": call_id, "type": CALL_TYPE}

    async def end_call(self, call_id: str) -> None:
        """End the call for every participant."""
        await self._post(f"/api/v2/video/call/{CALL_TYPE}/{call_id}/mark_ended", {}, "call end")
