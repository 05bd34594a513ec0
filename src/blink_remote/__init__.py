"""Touch-driven remote control for a Raspberry Pi LED chaser"""

from .config import BlinkerConfig, Config, RemoteConfig, load_config
from .constants import DEFAULT_PINS, DEFAULT_PORT, DEFAULT_TICK_MS
from .controller import PendingRequest, RateController
from .exceptions import (
    BlinkRemoteError,
    ConnectionClosedError,
    DeliveryError,
    HardwareAccessError,
    ValidationError,
)
from .hardware import PinBank
from .sequencer import PinSequencer
from .server import BlinkServer, make_app
from .tick import TickDuration
from .touch import FrameSize, TouchPosition, TouchTracker, period_for
from .transport import RateTransport

__all__ = [
    "BlinkRemoteError",
    "BlinkServer",
    "BlinkerConfig",
    "Config",
    "ConnectionClosedError",
    "DEFAULT_PINS",
    "DEFAULT_PORT",
    "DEFAULT_TICK_MS",
    "DeliveryError",
    "FrameSize",
    "HardwareAccessError",
    "PendingRequest",
    "PinBank",
    "PinSequencer",
    "RateController",
    "RateTransport",
    "RemoteConfig",
    "TickDuration",
    "TouchPosition",
    "TouchTracker",
    "ValidationError",
    "load_config",
    "make_app",
    "period_for",
]
__version__ = "0.1.0"
