"""Shared runtime constants for the blink server and the touch remote.

This is the canonical source of truth for defaults.  Other modules should
import from here rather than defining their own copies.
"""

import threading

# ---------------------------------------------------------------------------
# Blink server (actuator)
# ---------------------------------------------------------------------------

# BCM numbers, in chase order
DEFAULT_PINS = (4, 17, 22, 5, 6, 19, 21, 16, 12, 25, 23, 18)
DEFAULT_TICK_MS = 1000 / 15  # 15 phases per second
# longest hold a timed wait accepts
MAX_TICK_MS = int(threading.TIMEOUT_MAX) * 1000
DEFAULT_LISTEN_HOST = "0.0.0.0"
DEFAULT_PORT = 8080

# ---------------------------------------------------------------------------
# Touch remote (rate controller)
# ---------------------------------------------------------------------------

DEFAULT_SERVER_HOST = "10.0.1.9"  # no discovery; point this at the Pi
DEFAULT_SCALE_MS = 200  # period at the bottom edge of the touch surface

# ---------------------------------------------------------------------------
# Wire format
# ---------------------------------------------------------------------------

TICK_PARAM = "t"
ACK_BODY = "ok\n"
