"""Affinity sessions that learn and replay PrizmDoc affinity tokens.

An affinity session wraps an HTTP client and threads one piece of state
through a sequence of related requests: the affinity token the backend last
returned. Every outgoing request carries the token as the
``Accusoft-Affinity-Token`` header once it is known, so load balancers can pin
the request to the node that owns the work.
"""

import logging
from typing import Any, Protocol

import httpx

from prizmdoc.affinity.extraction import extract_affinity_token
from prizmdoc.affinity.state import AffinityTokenState

logger = logging.getLogger(__name__)


class SyncTransport(Protocol):
    """Anything that can build and send requests synchronously (httpx.Client)."""

    def build_request(self, method: str, url: Any, **kwargs: Any) -> httpx.Request: ...

    def send(self, request: httpx.Request) -> httpx.Response: ...


class AsyncTransport(Protocol):
    """Anything that can build and send requests asynchronously (httpx.AsyncClient)."""

    def build_request(self, method: str, url: Any, **kwargs: Any) -> httpx.Request: ...

    async def send(self, request: httpx.Request) -> httpx.Response: ...


class _AffinitySessionBase:
    def __init__(self, state: AffinityTokenState | None = None) -> None:
        self._state = state or AffinityTokenState()

    @property
    def affinity_token(self) -> str | None:
        """Get the affinity token this session currently sends, if any."""
        return self._state.current

    def reset(self) -> None:
        """Forget the learned affinity token."""
        self._state.clear()

    def _prepare(self, request: httpx.Request) -> None:
        self._state.apply_to(request.headers)

    def _learn(self, response: httpx.Response) -> None:
        """Record a token from the response, never failing the request."""
        try:
            token = extract_affinity_token(response)
        except Exception as e:
            # Affinity is an optimization; the caller still gets the response
            logger.warning("Failed to extract affinity token: %s", e)
            return

        if token is not None:
            self._state.update(token)


class AffinitySession(_AffinitySessionBase):
    """Synchronous affinity session over an ``httpx.Client``.

    The session does not own the client and never closes it. Any number of
    sessions may share one client while keeping their tokens separate.

    Usage:
        with httpx.Client(base_url="http://localhost:18681") as client:
            session = AffinitySession(client)
            session.post("/PCCIS/V1/WorkFile", content=data)
            session.get("/PCCIS/V1/WorkFile/123")  # carries the token
    """

    def __init__(
        self,
        transport: SyncTransport,
        state: AffinityTokenState | None = None,
    ) -> None:
        """Initialize the session.

        Args:
            transport: Client used to build and send requests.
            state: Optional token holder, mostly useful for tests.
        """
        super().__init__(state)
        self._transport = transport

    def send(self, request: httpx.Request) -> httpx.Response:
        """Send a request with affinity tracking.

        Transport errors propagate unchanged. The returned response is the
        transport's own object with its body still readable.

        Args:
            request: The outgoing request. Its headers may be modified.

        Returns:
            The response produced by the transport.
        """
        self._prepare(request)
        response = self._transport.send(request)
        self._learn(response)
        return response

    def request(self, method: str, url: Any, **kwargs: Any) -> httpx.Response:
        """Build a request with the transport and send it through the session."""
        return self.send(self._transport.build_request(method, url, **kwargs))

    def get(self, url: Any, **kwargs: Any) -> httpx.Response:
        return self.request("GET", url, **kwargs)

    def post(self, url: Any, **kwargs: Any) -> httpx.Response:
        return self.request("POST", url, **kwargs)

    def put(self, url: Any, **kwargs: Any) -> httpx.Response:
        return self.request("PUT", url, **kwargs)

    def delete(self, url: Any, **kwargs: Any) -> httpx.Response:
        return self.request("DELETE", url, **kwargs)


class AsyncAffinitySession(_AffinitySessionBase):
    """Asynchronous affinity session over an ``httpx.AsyncClient``.

    Safe to share between concurrently running tasks. When several responses
    carry tokens, the one that finishes last wins.
    """

    def __init__(
        self,
        transport: AsyncTransport,
        state: AffinityTokenState | None = None,
    ) -> None:
        super().__init__(state)
        self._transport = transport

    async def send(self, request: httpx.Request) -> httpx.Response:
        """Send a request with affinity tracking.

        Args:
            request: The outgoing request. Its headers may be modified.

        Returns:
            The response produced by the transport.
        """
        self._prepare(request)
        response = await self._transport.send(request)
        self._learn(response)
        return response

    async def request(self, method: str, url: Any, **kwargs: Any) -> httpx.Response:
        """Build a request with the transport and send it through the session."""
        return await self.send(self._transport.build_request(method, url, **kwargs))

    async def get(self, url: Any, **kwargs: Any) -> httpx.Response:
        return await self.request("GET", url, **kwargs)

    async def post(self, url: Any, **kwargs: Any) -> httpx.Response:
        return await self.request("POST", url, **kwargs)

    async def put(self, url: Any, **kwargs: Any) -> httpx.Response:
        return await self.request("PUT", url, **kwargs)

    async def delete(self, url: Any, **kwargs: Any) -> httpx.Response:
        return await self.request("DELETE", url, **kwargs)
