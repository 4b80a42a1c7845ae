"""Pytest configuration and fixtures."""

import httpx
import pytest

from prizmdoc.config.settings import get_settings

BASE_URL = "http://prizmdoc.test"


class RecordingBackend:
    """Mock PrizmDoc backend that records every request it receives.

    Responses are configured per (method, path) and fall back to 404.
    """

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self._routes: dict[tuple[str, str], httpx.Response] = {}

    def respond(
        self,
        method: str,
        path: str,
        body: str = "",
        content_type: str | None = "application/json",
        status_code: int = 200,
    ) -> None:
        headers = {"Content-Type": content_type} if content_type is not None else {}
        self._routes[(method, path)] = httpx.Response(
            status_code,
            headers=headers,
            content=body.encode("utf-8"),
        )

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        template = self._routes.get((request.method, request.url.path))
        if template is None:
            return httpx.Response(404, text="Not Found")
        return httpx.Response(
            template.status_code,
            headers=template.headers,
            content=template.content,
        )

    @property
    def last_request(self) -> httpx.Request:
        return self.requests[-1]


@pytest.fixture(autouse=True)
def clean_settings(monkeypatch):
    """Isolate tests from PRIZMDOC_* variables in the environment."""
    for name in ("PRIZMDOC_BASE_URL", "PRIZMDOC_API_KEY", "PRIZMDOC_TIMEOUT_SECONDS", "PRIZMDOC_LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def backend():
    """Create a fresh recording backend."""
    return RecordingBackend()


@pytest.fixture
def http_client(backend):
    """Create a sync httpx client wired to the recording backend."""
    with httpx.Client(base_url=BASE_URL, transport=httpx.MockTransport(backend.handler)) as client:
        yield client


@pytest.fixture
async def async_http_client(backend):
    """Create an async httpx client wired to the recording backend."""
    async with httpx.AsyncClient(
        base_url=BASE_URL,
        transport=httpx.MockTransport(backend.handler),
    ) as client:
        yield client
