"""
Python client for the MeetSync API.

Mirrors the web client's auth behavior: it caches the signed-in user, hides
privileged meeting actions from non-admins before any request is made, and
drops the cached session whenever the server answers 401. The server still
re-checks every privileged call; the local check only avoids pointless requests.
"""

from typing import Any

import httpx


class MeetSyncAPIError(Exception):
    """Raised when the server answers with an error status."""

    def __init__(self, status_code: int, message: str) -> None:
        self.status_code = status_code
        self.message = message
        super().__init__(f"{status_code}: {message}")


class NotAuthorizedError(Exception):
    """Raised locally, without a network call, when the cached role cannot perform an action."""

    def __init__(self, title: str, message: str) -> None:
        self.title = title
        self.message = message
        super().__init__(f"{title}: {message}")


class MeetSyncClient:
    """Synchronous client. Pass http to reuse an existing httpx.Client (e.g. a test client)."""

    def __init__(
        self,
        base_url: str = "http://localhost:8000",
        http: httpx.Client | None = None,
        timeout: float = 10.0,
    ) -> None:
        self._http = http or httpx.Client(base_url=base_url, timeout=timeout)
        self._owns_http = http is None
        self.token: str | None = None
        self.stream_token: str | None = None
        self.user: dict[str, Any] | None = None

    def __enter__(self) -> "MeetSyncClient":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def close(self) -> None:
        if self._owns_http:
            self._http.close()

    @property
    def is_authenticated(self) -> bool:
        return self.token is not None

    def _clear_session(self) -> None:
        self.token = None
        self.stream_token = None
        self.user = None

    def _request(self, method: str, path: str, **kwargs: Any) -> dict[str, Any]:
        headers = dict(kwargs.pop("headers", None) or {})
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        resp = self._http.request(method, path, headers=headers, **kwargs)
        try:
            data = resp.json()
        except ValueError:
            data = {}
        if resp.status_code == 401:
            # Expired or revoked session: force a fresh signin.
            self._clear_session()
        if resp.status_code >= 400:
            message = data.get("message") if isinstance(data, dict) else None
            raise MeetSyncAPIError(resp.status_code, message or resp.reason_phrase)
        return data if isinstance(data, dict) else {}

    def signup(self, name: str, email: str, password: str) -> dict[str, Any]:
        """Register an account. Does not sign in."""
        return self._request(
            "POST",
            "/api/auth/signup",
            json={"name": name, "email": email, "password": password},
        )

    def signin(self, email: str, password: str) -> dict[str, Any]:
        """Sign in and cache the session token, provider token and user."""
        data = self._request("POST", "/api/auth/signin", json={"email": email, "password": password})
        self.token = data.get("token")
        self.stream_token = data.get("streamToken")
        self.user = data.get("user")
        return data

    def signout(self) -> dict[str, Any]:
        """Drop the local session first, then ask the server to clear the cookie."""
        self._clear_session()
        return self._request("POST", "/api/auth/signout")

    def profile(self) -> dict[str, Any]:
        return self._request("GET", "/api/user/profile")["user"]

    def _require_admin(self, message: str) -> None:
        role = (self.user or {}).get("role")
        if not role:
            raise NotAuthorizedError("Not Signed In", "Please sign in")
        if role != "admin":
            raise NotAuthorizedError("Not Authorized", message)

    def create_meeting(self, meeting_id: str | None = None) -> dict[str, Any]:
        """Create a meeting (admins only). Returns the server payload including meetingId."""
        self._require_admin("Only Admin can create meeting.")
        body = {"meetingId": meeting_id} if meeting_id else {}
        return self._request("POST", "/api/meetings", json=body)

    def end_meeting_for_all(self, meeting_id: str) -> dict[str, Any]:
        """End a meeting for every participant (admins only)."""
        self._require_admin("Only Admin can end the meeting for everyone.")
        return self._request("POST", f"/api/meetings/{meeting_id}/end")

    def guest_token(self, user_id: str, name: str) -> dict[str, Any]:
        """Request a member-level provider token without an account."""
        return self._request("POST", "/tokenProvider", json={"id": user_id, "name": name})
