"""Shared fixtures for Starfish SDK unit tests.

HTTP traffic is served by ``httpx.MockTransport`` through a recorder that
keeps every request and replays queued responses in order.
"""

import base64
import json
from collections.abc import AsyncIterator, Callable
from datetime import UTC, datetime
from typing import Any

import httpx
import pytest
import pytest_asyncio

from starfish_sdk.service import StarfishService

HOST = "http://localhost:3000"
SOLUTION = "TEST"
NOW_TS = 1475175515
NOW = datetime.fromtimestamp(NOW_TS, tz=UTC)


def make_jwt(payload: dict[str, Any] | None = None, *, exp: int | None = None) -> str:
    """Create an unsigned compact token with the given claims."""
    claims = dict(payload or {})
    if exp is not None:
        claims["exp"] = exp
    header = base64.urlsafe_b64encode(b'{"alg":"HS256","typ":"JWT"}').decode().rstrip("=")
    body = base64.urlsafe_b64encode(json.dumps(claims).encode()).decode().rstrip("=")
    signature = base64.urlsafe_b64encode(b"fake-signature").decode().rstrip("=")
    return f"{header}.{body}.{signature}"


EXPIRED_TOKEN = make_jwt(exp=NOW_TS - 1)
FRESH_TOKEN = make_jwt(exp=NOW_TS + 1)


class Recorder:
    """Record requests and replay queued responses or exceptions."""

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self._responses: list[httpx.Response | Exception] = []

    def queue(
        self,
        body: Any = None,
        *,
        status_code: int = 200,
        headers: dict[str, str] | None = None,
        content: bytes | None = None,
    ) -> None:
        """Queue a response; ``body`` is JSON-encoded unless ``content`` is given."""
        if content is None:
            content = json.dumps(body).encode()
        self._responses.append(httpx.Response(status_code, content=content, headers=headers))

    def fail(self, exc: Exception) -> None:
        """Queue a transport failure."""
        self._responses.append(exc)

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if not self._responses:
            msg = f"Unexpected request: {request.method} {request.url}"
            raise AssertionError(msg)
        response = self._responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response

    def json_body(self, index: int) -> Any:
        """Return the decoded JSON body of the recorded request at ``index``."""
        return json.loads(self.requests[index].content)

    def urls(self) -> list[str]:
        return [str(request.url) for request in self.requests]


@pytest.fixture
def recorder() -> Recorder:
    return Recorder()


@pytest_asyncio.fixture
async def http_client(recorder: Recorder) -> AsyncIterator[httpx.AsyncClient]:
    async with httpx.AsyncClient(transport=httpx.MockTransport(recorder.handler)) as client:
        yield client


@pytest.fixture
def fixed_clock() -> Callable[[], datetime]:
    return lambda: NOW


@pytest.fixture
def token_service(http_client: httpx.AsyncClient, fixed_clock: Callable[[], datetime]) -> StarfishService:
    """Service in static-token mode using the flat constructor form."""
    return StarfishService(HOST, SOLUTION, "tokenissecret", http_client=http_client, clock=fixed_clock)


@pytest.fixture
def credentials_service(http_client: httpx.AsyncClient, fixed_clock: Callable[[], datetime]) -> StarfishService:
    """Service in credentials mode using the flat constructor form."""
    return StarfishService(
        HOST,
        SOLUTION,
        "expectedClientId",
        "expectedSecret",
        http_client=http_client,
        clock=fixed_clock,
    )
