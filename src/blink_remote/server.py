"""
Blink server: the HTTP rate endpoint plus the process that owns the LEDs.

The endpoint is a single fire-and-forget route::

    GET /?t=<ms>   ->   200 OK, "ok\\n"

A parseable positive ``t`` replaces the shared tick; anything else is
ignored, and the reply is the same either way because the remote never
reads it.

:class:`BlinkServer` wires the pieces together: it claims the output lines,
starts the :class:`~blink_remote.sequencer.PinSequencer` thread, and serves
the endpoint on an aiohttp site until shut down or until the hardware fails.
"""

from __future__ import annotations

import asyncio
import logging

from aiohttp import web

from .config import BlinkerConfig
from .constants import ACK_BODY, TICK_PARAM
from .hardware import PinBank
from .sequencer import OutputLines, PinSequencer
from .tick import TickDuration

logger = logging.getLogger(__name__)

TICK_KEY = web.AppKey("tick", TickDuration)

_JOIN_TIMEOUT_S = 1.0


# ---------------------------------------------------------------------------
# Endpoint
# ---------------------------------------------------------------------------


async def handle_rate(request: web.Request) -> web.Response:
    """Apply ``t`` to the tick if it parses; always acknowledge."""
    raw = request.query.get(TICK_PARAM)
    tick = request.app[TICK_KEY]
    if raw is not None and not tick.set_if_valid(raw):
        logger.warning("Ignoring tick %r, keeping %g ms", raw, tick.read())
    return web.Response(text=ACK_BODY)


def make_app(tick: TickDuration) -> web.Application:
    """Return the aiohttp application serving the rate endpoint for *tick*."""
    app = web.Application()
    app[TICK_KEY] = tick
    app.router.add_get("/", handle_rate)
    return app


# ---------------------------------------------------------------------------
# Process assembly
# ---------------------------------------------------------------------------


class BlinkServer:
    """Owns the output lines, the chaser thread, and the HTTP site.

    Args:
        config: Listen address, pin order, and starting tick.
        lines: Output lines to drive.  Defaults to a gpiozero
            :class:`~blink_remote.hardware.PinBank` over ``config.pins``.
    """

    def __init__(
        self,
        config: BlinkerConfig | None = None,
        lines: OutputLines | None = None,
    ) -> None:
        self.config = config or BlinkerConfig()
        self.tick = TickDuration(self.config.tick_ms)
        self._lines = lines if lines is not None else PinBank(self.config.pins)
        self._sequencer: PinSequencer | None = None
        self._done: asyncio.Future | None = None
        self._loop: asyncio.AbstractEventLoop | None = None
        self.ready = asyncio.Event()
        self.addresses: list = []

    async def serve(self) -> None:
        """Blink and serve until :meth:`shutdown` is called.

        Raises:
            HardwareAccessError: If the lines cannot be claimed, driven, or
                released.  Fatal; the caller should exit.
            Exception: Whatever else halted the chaser thread, re-raised
                here so the endpoint never outlives the blinking.
        """
        self._loop = asyncio.get_running_loop()
        self._done = self._loop.create_future()

        self._lines.open()
        try:
            self._sequencer = PinSequencer(self._lines, self.tick)
            thread = self._sequencer.start(on_fatal=self._on_fatal)
            try:
                await self._serve_http()
            finally:
                self._sequencer.stop()
                thread.join(_JOIN_TIMEOUT_S)
        finally:
            self._lines.close()

    def shutdown(self) -> None:
        """Stop :meth:`serve` (safe to call from any thread)."""
        if self._loop is not None:
            self._loop.call_soon_threadsafe(self._finish, None)

    # -- Internal -----------------------------------------------------------

    async def _serve_http(self) -> None:
        runner = web.AppRunner(make_app(self.tick))
        await runner.setup()
        try:
            site = web.TCPSite(runner, self.config.host, self.config.port)
            await site.start()
            self.addresses = runner.addresses
            logger.info("Listening on %s", self.addresses)
            self.ready.set()
            await self._done
        finally:
            await runner.cleanup()
            logger.info("Server shut down")

    def _on_fatal(self, exc: Exception) -> None:
        # Called on the sequencer thread
        self._loop.call_soon_threadsafe(self._finish, exc)

    def _finish(self, exc: BaseException | None) -> None:
        if self._done is None or self._done.done():
            return
        if exc is None:
            self._done.set_result(None)
        else:
            self._done.set_exception(exc)

