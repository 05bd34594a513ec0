"""
Exception hierarchy for the blink remote.

All exceptions inherit from :class:`BlinkRemoteError` so callers can catch
broadly (``except BlinkRemoteError``) or narrowly (``except DeliveryError``).
"""


class BlinkRemoteError(Exception):
    """Base exception for all blink remote errors."""


class HardwareAccessError(BlinkRemoteError):
    """Raised when output lines cannot be acquired, driven, or released."""


class DeliveryError(BlinkRemoteError):
    """Raised when a rate update does not reach the blink server."""


class ValidationError(BlinkRemoteError):
    """Raised when an argument or configuration value fails validation."""


class ConnectionClosedError(DeliveryError):
    """Raised when a rate update is sent on a transport that is not open."""
