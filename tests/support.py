"""Shared helpers: test settings and an in-process stand-in for the Stream Video API."""

import json

import httpx

from meetsync.core.config import Settings
from meetsync.services.video_provider import StreamVideoProvider

TEST_JWT_SECRET = "test-session-secret-0123456789"
TEST_STREAM_KEY = "test-stream-key"
TEST_STREAM_SECRET = "test-stream-secret"


def make_settings(**overrides: object) -> Settings:
    """Settings with test secrets, an in-memory database and cheap bcrypt."""
    values: dict[str, object] = {
        "JWT_SECRET": TEST_JWT_SECRET,
        "STREAM_API_KEY": TEST_STREAM_KEY,
        "STREAM_SECRET_KEY": TEST_STREAM_SECRET,
        "DATABASE_URL": "sqlite://",
        "BCRYPT_ROUNDS": 4,
        "LOG_LEVEL": "WARNING",
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


class FakeStreamAPI:
    """
    httpx.MockTransport handler answering like the Stream Video REST API.

    status_code forces an error answer; error is raised instead of answering.
    """

    def __init__(self, status_code: int | None = None, error: Exception | None = None) -> None:
        self.status_code = status_code
        self.error = error
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        if self.status_code is not None:
            return httpx.Response(self.status_code, json={"message": "provider failure"})
        path = request.url.path
        if path.endswith("/mark_ended"):
            return httpx.Response(200, json={"duration": "1.00ms"})
        if "/video/call/" in path:
            call_id = path.rsplit("/", 1)[-1]
            return httpx.Response(
                201,
                json={"call": {"id": call_id, "type": "default"}, "created": True},
            )
        if path == "/api/v2/users":
            return httpx.Response(201, json={"users": json.loads(request.content)["users"]})
        return httpx.Response(404, json={"message": "not found"})

    @property
    def paths(self) -> list[str]:
        return [r.url.path for r in self.requests]

    def json_body(self, index: int) -> dict:
        return json.loads(self.requests[index].content)

    def provider(self) -> StreamVideoProvider:
        return StreamVideoProvider(
            api_key=TEST_STREAM_KEY,
            api_secret=TEST_STREAM_SECRET,
            transport=httpx.MockTransport(self),
        )
