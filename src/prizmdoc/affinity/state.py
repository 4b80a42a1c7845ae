"""Thread-safe holder for the affinity token learned by a session."""

import logging
import threading

import httpx

from prizmdoc.affinity.extraction import AFFINITY_TOKEN_HEADER

logger = logging.getLogger(__name__)


class AffinityTokenState:
    """The last affinity token a session has seen.

    Reads and writes go through a lock so concurrent requests never observe a
    partially replaced value. Nothing but in-memory access happens under the
    lock, which makes it safe to use from asyncio tasks as well as threads.

    When concurrent responses both carry a token, whichever is recorded last
    wins. Callers that need a particular token must wait for the response
    carrying it before issuing dependent requests.
    """

    def __init__(self) -> None:
        self._token: str | None = None
        self._lock = threading.Lock()

    @property
    def current(self) -> str | None:
        """Get the stored token, or None if none has been learned."""
        with self._lock:
            return self._token

    def update(self, token: str) -> None:
        """Replace the stored token.

        Args:
            token: The newly learned affinity token.
        """
        with self._lock:
            previous = self._token
            self._token = token

        if previous is None:
            logger.debug("Learned affinity token")
        elif previous != token:
            logger.debug("Affinity token changed; using the newer token")

    def apply_to(self, headers: httpx.Headers) -> None:
        """Set the affinity header on outgoing headers if a token is known.

        An existing header value is overwritten. When no token is stored the
        headers are left untouched; an empty header is never sent.

        Args:
            headers: The mutable headers of an outgoing request.
        """
        token = self.current
        if token:
            headers[AFFINITY_TOKEN_HEADER] = token

    def clear(self) -> None:
        """Forget the stored token."""
        with self._lock:
            self._token = None
