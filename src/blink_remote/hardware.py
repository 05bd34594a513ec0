"""
GPIO boundary for the blink server.

Owns exclusive access to the output lines and nothing else: it knows how to
open a fixed set of pins, drive one of them high or low, and release them.
The blink timing lives in :mod:`~blink_remote.sequencer`.

Typical usage (via :class:`~blink_remote.server.BlinkServer`)::

    bank = PinBank([4, 17, 22])
    bank.open()
    bank.high(0)
    bank.low(0)
    bank.close()
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from gpiozero import DigitalOutputDevice, GPIOZeroError

from .exceptions import HardwareAccessError, ValidationError

logger = logging.getLogger(__name__)


class PinBank:
    """A fixed, ordered set of digital output lines.

    Args:
        pins: BCM pin numbers, in chase order.  Frozen at construction.
        pin_factory: Optional gpiozero pin factory (e.g.
            :class:`gpiozero.pins.mock.MockFactory` in tests).  ``None``
            uses gpiozero's default.
    """

    def __init__(self, pins: Sequence[int], pin_factory=None) -> None:
        if not pins:
            raise ValidationError("Pin sequence must not be empty")
        if len(set(pins)) != len(pins):
            raise ValidationError(f"Pin sequence contains duplicates: {list(pins)}")
        self.pins: tuple[int, ...] = tuple(pins)
        self._factory = pin_factory
        self._devices: list[DigitalOutputDevice] = []

    # -- Context manager ----------------------------------------------------

    def __enter__(self) -> PinBank:
        self.open()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    # -- Lifecycle ----------------------------------------------------------

    def open(self) -> None:
        """Claim every pin as a low output.

        Raises:
            HardwareAccessError: If any pin cannot be claimed.  Pins claimed
                before the failure are released again.
        """
        if self._devices:
            return
        logger.info("Opening %d output lines: %s", len(self.pins), list(self.pins))
        try:
            for pin in self.pins:
                self._devices.append(
                    DigitalOutputDevice(pin, initial_value=False, pin_factory=self._factory)
                )
        except GPIOZeroError as exc:
            self.close()
            raise HardwareAccessError(f"Cannot open GPIO{pin}: {exc}") from exc

    def close(self) -> None:
        """Drive every line low and release it (safe to call multiple times)."""
        if not self._devices:
            return
        devices, self._devices = self._devices, []
        failures = []
        for dev in devices:
            try:
                dev.off()
            except GPIOZeroError as exc:
                failures.append(f"{dev.pin}: {exc}")
            finally:
                try:
                    dev.close()
                except GPIOZeroError as exc:
                    failures.append(f"{dev.pin}: {exc}")
        logger.info("Output lines released")
        if failures:
            raise HardwareAccessError(f"Cannot release lines: {'; '.join(failures)}")

    @property
    def is_open(self) -> bool:
        """Return ``True`` while the lines are claimed."""
        return bool(self._devices)

    def __len__(self) -> int:
        return len(self.pins)

    # -- I/O ----------------------------------------------------------------

    def high(self, index: int) -> None:
        """Energize the line at *index* in the sequence."""
        self._drive(index, True)

    def low(self, index: int) -> None:
        """De-energize the line at *index* in the sequence."""
        self._drive(index, False)

    # -- Internal -----------------------------------------------------------

    def _drive(self, index: int, value: bool) -> None:
        dev = self._require_open()[index]
        try:
            dev.value = value
        except GPIOZeroError as exc:
            raise HardwareAccessError(f"Cannot drive GPIO{self.pins[index]}: {exc}") from exc

    def _require_open(self) -> list[DigitalOutputDevice]:
        """Return the open devices or raise."""
        if not self._devices:
            raise HardwareAccessError("Output lines not open — call open() first.")
        return self._devices
