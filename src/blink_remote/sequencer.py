"""
Round-robin pin chaser.

Each line in the bank is driven high, held for one tick, and dropped low
before the next line starts, wrapping forever::

    A-high, wait T, A-low, B-high, wait T, B-low, C-high, ...

The tick is read once, at the start of each hold, so an update that lands
while a line is lit only affects the *next* line.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from typing import Protocol

from .exceptions import HardwareAccessError
from .tick import TickDuration

logger = logging.getLogger(__name__)


class OutputLines(Protocol):
    """The slice of :class:`~blink_remote.hardware.PinBank` the server drives."""

    def open(self) -> None: ...

    def close(self) -> None: ...

    def __len__(self) -> int: ...

    def high(self, index: int) -> None: ...

    def low(self, index: int) -> None: ...


class PinSequencer:
    """Drives an :class:`OutputLines` bank at the current :class:`TickDuration`.

    Args:
        lines: Open output lines, in chase order.
        tick: Shared tick, read once per phase.
        wait: Timed suspend taking seconds and returning ``True`` if the
            chaser should stop.  Defaults to waiting on the internal stop
            event, so :meth:`stop` cuts a hold short.
    """

    def __init__(
        self,
        lines: OutputLines,
        tick: TickDuration,
        wait: Callable[[float], bool] | None = None,
    ) -> None:
        self._lines = lines
        self._tick = tick
        self._stop = threading.Event()
        self._wait = wait or self._stop.wait

    @property
    def stopped(self) -> bool:
        return self._stop.is_set()

    def stop(self) -> None:
        """Ask :meth:`run` to return after dropping the lit line."""
        self._stop.set()

    def run(self) -> None:
        """Chase until :meth:`stop` is called.

        The lit line is dropped low even if the wait fails.

        Raises:
            HardwareAccessError: If a line cannot be driven.  Not retried.
        """
        count = len(self._lines)
        logger.info("Chasing %d lines at %g ms", count, self._tick.read())
        index = 0
        while not self._stop.is_set():
            self._lines.high(index)
            try:
                interrupted = self._wait(self._tick.read_seconds())
            finally:
                self._lines.low(index)
            if interrupted:
                break
            index = (index + 1) % count
        logger.info("Chaser stopped")

    def start(self, on_fatal: Callable[[Exception], None] | None = None) -> threading.Thread:
        """Run the chaser on a daemon thread and return the thread.

        *on_fatal* is called from that thread with whatever ended the chase
        early: a :class:`HardwareAccessError` or any unexpected error.
        """

        def _target() -> None:
            try:
                self.run()
            except HardwareAccessError as exc:
                logger.critical("Hardware failure, chaser halted: %s", exc)
                if on_fatal is not None:
                    on_fatal(exc)
            except Exception as exc:
                logger.critical("Chaser crashed", exc_info=True)
                if on_fatal is not None:
                    on_fatal(exc)

        thread = threading.Thread(target=_target, name="pin-sequencer", daemon=True)
        thread.start()
        return thread
