"""
Rate-update wire format: query encoding on the remote, parsing on the server.

The whole protocol is one query parameter::

    GET /?t=<integer milliseconds>   ->   200 OK, "ok\\n"

This module knows how to turn a period into that request and how to turn
the raw parameter back into a tick.  It does **not** do any I/O: sending
belongs to :class:`~blink_remote.transport.RateTransport`, serving to
:mod:`~blink_remote.server`.
"""

from __future__ import annotations

import logging
import re

from .constants import MAX_TICK_MS, TICK_PARAM
from .exceptions import ValidationError

logger = logging.getLogger(__name__)

_INT_RE = re.compile(r"[+-]?[0-9]+")


# ---------------------------------------------------------------------------
# Client side
# ---------------------------------------------------------------------------


def encode_period(period_ms: int) -> dict[str, str]:
    """Return the query parameters carrying *period_ms*.

    Raises:
        ValidationError: If *period_ms* is not a non-negative integer.
    """
    if isinstance(period_ms, bool) or not isinstance(period_ms, int):
        raise ValidationError(f"Period must be an integer number of ms, got {period_ms!r}")
    if period_ms < 0:
        raise ValidationError(f"Period must be >= 0 ms, got {period_ms}")
    return {TICK_PARAM: str(period_ms)}


def rate_url(host: str, port: int) -> str:
    """Return the base URL of the blink server at *host*:*port*."""
    return f"http://{host}:{port}/"


# ---------------------------------------------------------------------------
# Server side
# ---------------------------------------------------------------------------


def parse_tick_ms(raw: str | None) -> int | None:
    """Parse a raw ``t`` parameter into a tick in milliseconds.

    Returns ``None`` for anything that is not a positive integer no larger
    than :data:`~blink_remote.constants.MAX_TICK_MS`: a missing or empty
    parameter, non-numeric text, zero, a negative number, or a hold too long
    to wait for.
    """
    if not raw:
        return None
    if not _INT_RE.fullmatch(raw):
        logger.debug("Ignoring non-numeric tick %r", raw)
        return None
    value = int(raw)
    if value <= 0:
        logger.debug("Ignoring non-positive tick %d", value)
        return None
    if value > MAX_TICK_MS:
        logger.debug("Ignoring out-of-range tick %d", value)
        return None
    return value
