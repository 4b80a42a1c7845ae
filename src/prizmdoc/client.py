"""REST client for PrizmDoc Server.

This module provides PrizmDocRestClient, which holds the base URL, default
headers and HTTP clients for a PrizmDoc deployment and hands out affinity
sessions that share those clients.
"""

import logging
import threading
from collections.abc import Awaitable, Callable
from typing import Any

import httpx

from prizmdoc.affinity import AffinitySession, AsyncAffinitySession
from prizmdoc.config import Settings, get_settings

logger = logging.getLogger(__name__)

API_KEY_HEADER = "Acs-Api-Key"


class PrizmDocClientError(Exception):
    """Exception raised when the PrizmDoc client is misconfigured or misused."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


def _add_request_hook(
    client: httpx.Client | httpx.AsyncClient,
    hook: Callable[[httpx.Request], Any] | Callable[[httpx.Request], Awaitable[Any]],
) -> None:
    """Append a request event hook to a caller-owned client."""
    hooks = client.event_hooks
    hooks["request"] = [*hooks.get("request", []), hook]
    client.event_hooks = hooks


class PrizmDocRestClient:
    """Configured entry point for talking to PrizmDoc Server.

    The client owns one ``httpx.Client`` and one ``httpx.AsyncClient`` (unless
    they are supplied by the caller) configured with the base URL and timeout.
    Default headers live on this object and are applied to every outgoing
    request through a request event hook, so later changes to
    ``default_headers`` take effect immediately on both clients. Each call to
    ``create_affinity_session`` returns a fresh session with its own affinity
    state on top of the shared client.

    Usage:
        with PrizmDocRestClient("http://localhost:18681", api_key="...") as client:
            session = client.create_affinity_session()
            session.post("/PCCIS/V1/WorkFile", content=data)
    """

    def __init__(
        self,
        base_url: str | None = None,
        api_key: str | None = None,
        timeout: float | None = None,
        headers: dict[str, str] | None = None,
        settings: Settings | None = None,
        http_client: httpx.Client | None = None,
        async_http_client: httpx.AsyncClient | None = None,
    ):
        """Initialize the REST client.

        Values that are not passed explicitly come from settings. A supplied
        client brings its own base URL and timeout, so those arguments cannot
        be combined with one. The API key and headers are applied to supplied
        clients as well.

        Args:
            base_url: Base URL of the PrizmDoc Server or PAS instance.
            api_key: Optional API key sent as the Acs-Api-Key header.
            timeout: Request timeout in seconds.
            headers: Extra default headers for every request.
            settings: Optional settings; defaults to environment settings.
            http_client: Optional caller-owned sync client to use instead.
            async_http_client: Optional caller-owned async client to use instead.

        Raises:
            PrizmDocClientError: If no base URL is configured, or if base_url
                or timeout are given together with a caller-owned client.
        """
        settings = settings or get_settings()

        supplied = http_client if http_client is not None else async_http_client
        if supplied is not None:
            if base_url is not None or timeout is not None:
                raise PrizmDocClientError(
                    "base_url and timeout cannot be combined with a caller-owned HTTP client"
                )
            self._base_url = str(supplied.base_url)
            self._timeout: float | httpx.Timeout = supplied.timeout
        else:
            self._base_url = base_url if base_url is not None else settings.base_url
            if not self._base_url:
                raise PrizmDocClientError("A base URL is required to create a PrizmDoc client")
            self._timeout = timeout if timeout is not None else settings.timeout_seconds

        api_key = api_key if api_key is not None else settings.api_key

        self._default_headers = httpx.Headers(headers or {})
        if api_key:
            self._default_headers[API_KEY_HEADER] = api_key

        self._lock = threading.Lock()
        self._http_client = http_client
        self._owns_client = http_client is None
        self._async_http_client = async_http_client
        self._owns_async_client = async_http_client is None

        if http_client is not None:
            _add_request_hook(http_client, self._apply_default_headers)
        if async_http_client is not None:
            _add_request_hook(async_http_client, self._apply_default_headers_async)

        logger.debug("PrizmDoc client configured for %s", self._base_url)

    @property
    def base_url(self) -> str:
        """Get the configured base URL."""
        return self._base_url

    @property
    def default_headers(self) -> httpx.Headers:
        """Get the default headers sent with every request.

        Changes made here apply to every request sent afterwards, including
        requests from sessions that already exist. Headers set on the request
        itself or on a caller-owned client take precedence.
        """
        return self._default_headers

    def _apply_default_headers(self, request: httpx.Request) -> None:
        for key in self._default_headers.keys():
            if key not in request.headers:
                request.headers[key] = self._default_headers[key]

    async def _apply_default_headers_async(self, request: httpx.Request) -> None:
        self._apply_default_headers(request)

    @property
    def http_client(self) -> httpx.Client:
        """Get the shared synchronous HTTP client, creating it on first use."""
        with self._lock:
            if self._http_client is None:
                self._http_client = httpx.Client(
                    base_url=self._base_url,
                    timeout=self._timeout,
                    event_hooks={"request": [self._apply_default_headers]},
                )
                self._owns_client = True
            return self._http_client

    @property
    def async_http_client(self) -> httpx.AsyncClient:
        """Get the shared asynchronous HTTP client, creating it on first use."""
        with self._lock:
            if self._async_http_client is None:
                self._async_http_client = httpx.AsyncClient(
                    base_url=self._base_url,
                    timeout=self._timeout,
                    event_hooks={"request": [self._apply_default_headers_async]},
                )
                self._owns_async_client = True
            return self._async_http_client

    def create_affinity_session(self) -> AffinitySession:
        """Create a new synchronous affinity session.

        Returns:
            A session with no affinity token yet.
        """
        return AffinitySession(self.http_client)

    def create_async_affinity_session(self) -> AsyncAffinitySession:
        """Create a new asynchronous affinity session.

        Returns:
            A session with no affinity token yet.
        """
        return AsyncAffinitySession(self.async_http_client)

    def close(self) -> None:
        """Close the synchronous client if this object created it."""
        with self._lock:
            client = self._http_client
            if self._owns_client:
                self._http_client = None
        if self._owns_client and client is not None:
            client.close()

    async def aclose(self) -> None:
        """Close both clients if this object created them."""
        with self._lock:
            client = self._async_http_client
            if self._owns_async_client:
                self._async_http_client = None
        if self._owns_async_client and client is not None:
            await client.aclose()
        self.close()

    def __enter__(self) -> "PrizmDocRestClient":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    async def __aenter__(self) -> "PrizmDocRestClient":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()
