"""
Touch remote: turns touch positions into rate updates, latest one wins.

At most one update is ever outstanding.  Dispatching a new one first
cancels the previous request under the lock, so a slow, stale update can
never land after a fresher one::

    touch A ──► dispatch #1 ──► send ........ (cancelled)
    touch B ──► cancel #1, dispatch #2 ──► send ──► ok

Each delivery runs as its own task on a dedicated asyncio loop, which lives
on a background thread so the input side never blocks on the network.

Typical usage::

    with RateController(RateTransport("10.0.1.9"), TouchTracker(frame)) as remote:
        remote.on_touch(TouchPosition(120, 340))
"""

from __future__ import annotations

import asyncio
import itertools
import logging
import threading
from dataclasses import dataclass, field
from typing import Protocol

from .exceptions import DeliveryError, ValidationError
from .protocol import encode_period
from .touch import FrameSize, TouchPosition, TouchTracker

logger = logging.getLogger(__name__)

_STOP_TIMEOUT_S = 5.0


class RateSender(Protocol):
    """The slice of :class:`~blink_remote.transport.RateTransport` used here."""

    async def open(self) -> None: ...

    async def close(self) -> None: ...

    async def send(self, period_ms: int) -> None: ...


@dataclass(eq=False)
class PendingRequest:
    """Handle for one delivery.  Compared by identity, never by value."""

    seq: int
    period_ms: int
    task: asyncio.Task | None = field(default=None, repr=False)


class RateController:
    """Single-flight, cancel-on-supersede rate updater.

    Args:
        transport: Sends one update per call; must be cancellable.
        tracker: Touch state used by :meth:`on_touch` / :meth:`on_frame`.
            Optional if periods are pushed directly with :meth:`submit`.
    """

    def __init__(self, transport: RateSender, tracker: TouchTracker | None = None) -> None:
        self._transport = transport
        self.tracker = tracker
        self._lock = threading.Lock()
        self._pending: PendingRequest | None = None
        self._seq = itertools.count(1)
        self._loop: asyncio.AbstractEventLoop | None = None
        self._thread: threading.Thread | None = None

    # -- Context manager ----------------------------------------------------

    def __enter__(self) -> RateController:
        self.start()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.stop()

    # -- Lifecycle ----------------------------------------------------------

    def start(self) -> None:
        """Start the delivery loop thread and open the transport."""
        if self._thread is not None:
            return
        self._loop = asyncio.new_event_loop()
        self._thread = threading.Thread(
            target=self._loop.run_forever, name="rate-delivery", daemon=True
        )
        self._thread.start()
        asyncio.run_coroutine_threadsafe(self._transport.open(), self._loop).result()
        logger.debug("Delivery loop started")

    def stop(self) -> None:
        """Cancel any outstanding update, close the transport, stop the loop."""
        if self._thread is None:
            return
        loop, thread = self._loop, self._thread
        try:
            asyncio.run_coroutine_threadsafe(self.aclose(), loop).result(_STOP_TIMEOUT_S)
        finally:
            loop.call_soon_threadsafe(loop.stop)
            thread.join(_STOP_TIMEOUT_S)
            if thread.is_alive():
                logger.warning("Delivery loop still busy after %g s, leaving it open", _STOP_TIMEOUT_S)
            else:
                loop.close()
            self._loop = None
            self._thread = None
            logger.debug("Delivery loop stopped")

    async def aclose(self) -> None:
        """Cancel the outstanding update and close the transport (on the loop)."""
        with self._lock:
            request = self._pending
        if request is not None and request.task is not None:
            request.task.cancel()
            await asyncio.gather(request.task, return_exceptions=True)
            self._clear(request)
        await self._transport.close()

    # -- Input side (any thread) --------------------------------------------

    def on_frame(self, frame: FrameSize) -> None:
        """Forward a new surface size to the tracker."""
        self._require_tracker().on_frame(frame)

    def on_touch(self, position: TouchPosition) -> int:
        """Record a touch, push its period, and return the period."""
        period_ms = self._require_tracker().on_touch(position)
        self.submit(period_ms)
        return period_ms

    def submit(self, period_ms: int) -> None:
        """Queue *period_ms* for delivery without waiting for the network.

        Raises:
            ValidationError: If *period_ms* is not a non-negative integer.
            RuntimeError: If the delivery loop is not running.
        """
        encode_period(period_ms)
        if self._loop is None:
            raise RuntimeError("Delivery loop not running — call start() first.")
        self._loop.call_soon_threadsafe(self.dispatch, period_ms)

    # -- Delivery side (loop thread) ----------------------------------------

    @property
    def pending(self) -> PendingRequest | None:
        """The request currently allowed to be in flight, if any."""
        with self._lock:
            return self._pending

    def dispatch(self, period_ms: int) -> PendingRequest:
        """Supersede any outstanding update with *period_ms*.

        Must run on the delivery loop.  The new task is created under the
        lock but does not start sending until the loop next runs, after the
        lock is released.
        """
        encode_period(period_ms)
        loop = asyncio.get_running_loop()
        with self._lock:
            previous = self._pending
            if previous is not None and previous.task is not None:
                logger.debug("Cancelling request #%d (%d ms)", previous.seq, previous.period_ms)
                previous.task.cancel()
            request = PendingRequest(next(self._seq), period_ms)
            request.task = loop.create_task(self._deliver(request))
            self._pending = request
        return request

    async def _deliver(self, request: PendingRequest) -> None:
        try:
            await self._transport.send(request.period_ms)
            logger.debug("Request #%d delivered (%d ms)", request.seq, request.period_ms)
        except asyncio.CancelledError:
            logger.debug("Request #%d cancelled", request.seq)
            raise
        except DeliveryError as exc:
            logger.warning("Rate update #%d (%d ms) failed: %s", request.seq, request.period_ms, exc)
        finally:
            self._clear(request)

    # -- Internal -----------------------------------------------------------

    def _clear(self, request: PendingRequest) -> None:
        """Forget *request* unless a newer one has already replaced it."""
        with self._lock:
            if self._pending is request:
                self._pending = None

    def _require_tracker(self) -> TouchTracker:
        if self.tracker is None:
            raise ValidationError("No touch tracker configured — pass one to RateController.")
        return self.tracker
