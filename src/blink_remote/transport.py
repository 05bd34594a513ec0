"""
HTTP transport for rate updates.

Owns the aiohttp session and performs one ``GET /?t=<ms>`` round trip per
:meth:`RateTransport.send`.  Knows nothing about which update should win;
that's :mod:`~blink_remote.controller`'s job.

Every send is an ordinary coroutine, so cancelling the task that awaits it
aborts the request and frees the connection::

    async with RateTransport("10.0.1.9") as tx:
        await tx.send(120)
"""

from __future__ import annotations

import logging

import aiohttp

from .constants import DEFAULT_PORT, TICK_PARAM
from .exceptions import ConnectionClosedError, DeliveryError
from .protocol import encode_period, rate_url

logger = logging.getLogger(__name__)


class RateTransport:
    """Sends rate updates to a blink server.

    Args:
        host: Blink server address.
        port: Blink server port (default 8080).
    """

    def __init__(self, host: str, port: int = DEFAULT_PORT) -> None:
        self.host = host
        self.port = port
        self.url = rate_url(host, port)
        self._session: aiohttp.ClientSession | None = None

    # -- Context manager ----------------------------------------------------

    async def __aenter__(self) -> RateTransport:
        await self.open()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    # -- Lifecycle ----------------------------------------------------------

    async def open(self) -> None:
        """Create the HTTP session (must run on the delivery loop)."""
        if self.is_open:
            return
        # No deadline: a stuck request lives until the next update cancels it
        self._session = aiohttp.ClientSession(timeout=aiohttp.ClientTimeout(total=None))
        logger.info("Rate updates go to %s", self.url)

    async def close(self) -> None:
        """Close the HTTP session (safe to call multiple times)."""
        if self._session is not None and not self._session.closed:
            await self._session.close()
            logger.info("Session to %s closed", self.url)
        self._session = None

    @property
    def is_open(self) -> bool:
        """Return ``True`` if the session is usable."""
        return self._session is not None and not self._session.closed

    # -- I/O ----------------------------------------------------------------

    async def send(self, period_ms: int) -> None:
        """Ask the blink server to hold each line for *period_ms*.

        Raises:
            ConnectionClosedError: If the transport is not open.
            DeliveryError: If the request fails or is not acknowledged.
            asyncio.CancelledError: If the awaiting task is cancelled.
        """
        session = self._require_open()
        params = encode_period(period_ms)
        logger.debug("TX: %s t=%s", self.url, params[TICK_PARAM])

        try:
            async with session.get(self.url, params=params) as resp:
                body = await resp.text()
        except aiohttp.ClientError as exc:
            raise DeliveryError(f"Cannot reach {self.url}: {exc}") from exc

        logger.debug("RX: %d %r", resp.status, body)
        if resp.status != 200:
            raise DeliveryError(f"{self.url} answered {resp.status} to t={period_ms}")

    # -- Internal -----------------------------------------------------------

    def _require_open(self) -> aiohttp.ClientSession:
        """Return the open session or raise."""
        if not self.is_open:
            raise ConnectionClosedError("Transport not open — call open() first.")
        assert self._session is not None  # for type-checker
        return self._session
