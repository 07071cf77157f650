import datetime
import inspect
import os
import sys
from typing import Awaitable, Callable, Dict, List, Tuple, Union

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "src")))

import httpx
import jwt
import pytest

from pinet.api.http import ClientConfig, PiHttpClient

BASE_URL = "https://api.test"
JWT_SIGNING_KEY = "pinet-test-signing-key-0123456789abcdef"

Handler = Callable[[httpx.Request], Union[httpx.Response, Awaitable[httpx.Response]]]


@pytest.fixture
def anyio_backend():
    """Restrict AnyIO tests to the asyncio backend to avoid trio dependency."""
    return "asyncio"


class FakePiApi:
    """
    In-memory stand-in for the Pi Network API.

    Used as the handler of ``httpx.MockTransport``; routes are keyed by method
    and path and may be plain or async callables. Every request is recorded.
    """

    def __init__(self) -> None:
        self.routes: Dict[Tuple[str, str], Handler] = {}
        self.calls: List[httpx.Request] = []

    def route(self, method: str, path: str, handler: Handler) -> None:
        self.routes[(method, path)] = handler

    def reply(self, method: str, path: str, status_code: int, json=None) -> None:
        self.route(method, path, lambda request: httpx.Response(status_code, json=json))

    def calls_to(self, path: str) -> List[httpx.Request]:
        return [call for call in self.calls if call.url.path == path]

    async def __call__(self, request: httpx.Request) -> httpx.Response:
        self.calls.append(request)
        handler = self.routes.get((request.method, request.url.path))
        if handler is None:
            return httpx.Response(404, json={"error": "not found"})

        response = handler(request)
        if inspect.isawaitable(response):
            response = await response
        return response


def make_jwt(expires_in: datetime.timedelta) -> str:
    exp = datetime.datetime.now(tz=datetime.timezone.utc) + expires_in
    return jwt.encode({"exp": int(exp.timestamp()), "sub": "pioneer"}, JWT_SIGNING_KEY, algorithm="HS256")


@pytest.fixture
def fake_api() -> FakePiApi:
    return FakePiApi()


@pytest.fixture
def client(fake_api) -> PiHttpClient:
    config = ClientConfig(base_url=BASE_URL, timeout=5.0, default_headers={"User-Agent": "pinet-tests"})
    return PiHttpClient(config, transport=httpx.MockTransport(fake_api))


@pytest.fixture
def valid_jwt_token() -> str:
    """Create a JWT that expires in 5 minutes."""
    return make_jwt(datetime.timedelta(minutes=5))


@pytest.fixture
def expired_jwt_token() -> str:
    """Create a JWT that expired a minute ago."""
    return make_jwt(datetime.timedelta(minutes=-1))


@pytest.fixture
def expiring_jwt_token() -> str:
    """Create a JWT that expires in 30 seconds."""
    return make_jwt(datetime.timedelta(seconds=30))
