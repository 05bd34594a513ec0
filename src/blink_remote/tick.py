"""The blink server's shared tick: how long each line stays lit."""

from __future__ import annotations

import logging
import threading

from .constants import DEFAULT_TICK_MS, MAX_TICK_MS
from .protocol import parse_tick_ms

logger = logging.getLogger(__name__)


class TickDuration:
    """Lock-guarded hold time, in milliseconds.

    Read by the pin loop once per phase and written by the HTTP endpoint,
    which run on different threads.  Last writer wins.

    Args:
        initial_ms: Starting tick (default 1/15 s).
    """

    def __init__(self, initial_ms: float = DEFAULT_TICK_MS) -> None:
        if not 0 < initial_ms <= MAX_TICK_MS:
            raise ValueError(f"Tick must be in (0, {MAX_TICK_MS}] ms, got {initial_ms}")
        self._lock = threading.Lock()
        self._ms = initial_ms

    def read(self) -> float:
        """Return the current tick in milliseconds."""
        with self._lock:
            return self._ms

    def read_seconds(self) -> float:
        """Return the current tick in seconds, ready for a timed wait."""
        return self.read() / 1000.0

    def set_if_valid(self, raw: str | None) -> bool:
        """Replace the tick with *raw* if it parses as positive milliseconds.

        Bad or missing input leaves the tick untouched.  Returns ``True`` if
        the tick was replaced.
        """
        value = parse_tick_ms(raw)
        if value is None:
            return False
        with self._lock:
            self._ms = value
        logger.debug("Tick set to %d ms", value)
        return True

    def __repr__(self) -> str:
        return f"TickDuration({self.read():g} ms)"
