"""Touch input model: where the finger is, and what period that asks for."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from .constants import DEFAULT_SCALE_MS
from .exceptions import ValidationError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TouchPosition:
    """A point on the touch surface, in pixels from the top-left corner."""

    x: float
    y: float


@dataclass(frozen=True)
class FrameSize:
    """Dimensions of the touch surface in pixels."""

    width: float
    height: float

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise ValidationError(f"Frame size must be positive, got {self.width}x{self.height}")

    @property
    def center(self) -> TouchPosition:
        return TouchPosition(self.width / 2, self.height / 2)


def period_for(position: TouchPosition, frame: FrameSize, scale_ms: float = DEFAULT_SCALE_MS) -> int:
    """Map the vertical position to a blink period in whole milliseconds.

    The top edge asks for 0 ms and the bottom edge for *scale_ms*; touches
    reported outside the frame are clamped to it.
    """
    fraction = min(max(position.y / frame.height, 0.0), 1.0)
    return int(fraction * scale_ms)


class TouchTracker:
    """Latest touch position on the current frame.

    Each touch replaces the stored position outright.  A new frame resets
    the position to the centre of that frame.

    Args:
        frame: Initial surface size.
        scale_ms: Period at the bottom edge, fixed for the tracker's life.
    """

    def __init__(self, frame: FrameSize, scale_ms: float = DEFAULT_SCALE_MS) -> None:
        if scale_ms <= 0:
            raise ValidationError(f"Scale must be positive, got {scale_ms}")
        self.scale_ms = scale_ms
        self.frame = frame
        self.position = frame.center

    @property
    def period_ms(self) -> int:
        """Period requested by the current position."""
        return period_for(self.position, self.frame, self.scale_ms)

    def on_frame(self, frame: FrameSize) -> None:
        """Adopt a new surface size and recentre."""
        self.frame = frame
        self.position = frame.center
        logger.debug("Frame %gx%g, position reset to centre", frame.width, frame.height)

    def on_touch(self, position: TouchPosition) -> int:
        """Record *position* and return the period it asks for."""
        self.position = position
        return self.period_ms
