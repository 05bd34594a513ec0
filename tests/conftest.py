"""Shared pytest fixtures for blink remote tests."""

from __future__ import annotations

import asyncio

import pytest
from gpiozero.pins.mock import MockFactory

from blink_remote import HardwareAccessError, TickDuration


class FakeLines:
    """Lightweight stand-in for :class:`~blink_remote.hardware.PinBank`.

    Records every transition as ``"<name>-high"`` / ``"<name>-low"`` in
    :attr:`trace`, so tests can compare against the expected chase order.
    Set :attr:`fail_on` to an index to make driving that line high raise
    :class:`HardwareAccessError`.
    """

    def __init__(self, names: tuple[str, ...] = ("A", "B", "C")) -> None:
        self.names = names
        self.trace: list[str] = []
        self.is_open = False
        self.fail_on: int | None = None

    def open(self) -> None:
        self.is_open = True

    def close(self) -> None:
        self.is_open = False

    def __len__(self) -> int:
        return len(self.names)

    def high(self, index: int) -> None:
        if index == self.fail_on:
            raise HardwareAccessError(f"Cannot drive {self.names[index]}")
        self.trace.append(f"{self.names[index]}-high")

    def low(self, index: int) -> None:
        self.trace.append(f"{self.names[index]}-low")


class ScriptedWait:
    """Replacement for the chaser's timed suspend.

    Appends ``"wait <ms>"`` to the lines' trace instead of sleeping, runs
    *on_wait(n)* after the n-th wait, and tells the chaser to stop after
    *limit* waits.
    """

    def __init__(self, lines: FakeLines, limit: int, on_wait=None) -> None:
        self.lines = lines
        self.limit = limit
        self.on_wait = on_wait
        self.calls = 0

    def __call__(self, seconds: float) -> bool:
        self.calls += 1
        self.lines.trace.append(f"wait {round(seconds * 1000, 3):g}")
        if self.on_wait is not None:
            self.on_wait(self.calls)
        return self.calls >= self.limit


class FakeSender:
    """Stand-in for :class:`~blink_remote.transport.RateTransport`.

    Tracks every send and how many overlap.  With :attr:`hold` set, a send
    blocks until :meth:`release` is called, so tests can supersede it while
    it is in flight.  Set :attr:`fail_with` to make sends raise.
    """

    def __init__(self, hold: bool = False) -> None:
        self.hold = hold
        self.fail_with: BaseException | None = None
        self.started: list[int] = []
        self.completed: list[int] = []
        self.cancelled: list[int] = []
        self.in_flight = 0
        self.max_in_flight = 0
        self.opened = False
        self.closed = False
        self._gate: asyncio.Event | None = None

    async def open(self) -> None:
        self.opened = True

    async def close(self) -> None:
        self.closed = True

    def release(self) -> None:
        self._event().set()

    async def send(self, period_ms: int) -> None:
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        self.started.append(period_ms)
        try:
            if self.fail_with is not None:
                raise self.fail_with
            if self.hold:
                await self._event().wait()
            self.completed.append(period_ms)
        except asyncio.CancelledError:
            self.cancelled.append(period_ms)
            raise
        finally:
            self.in_flight -= 1

    def _event(self) -> asyncio.Event:
        if self._gate is None:
            self._gate = asyncio.Event()
        return self._gate


async def settle(rounds: int = 5) -> None:
    """Give every ready task a few turns of the loop."""
    for _ in range(rounds):
        await asyncio.sleep(0)


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def tick() -> TickDuration:
    """Return a fresh tick at 100 ms."""
    return TickDuration(100)


@pytest.fixture()
def lines() -> FakeLines:
    """Return three fake output lines named A, B, C."""
    return FakeLines()


@pytest.fixture()
def sender() -> FakeSender:
    """Return a fake transport whose sends complete immediately."""
    return FakeSender()


@pytest.fixture()
def held_sender() -> FakeSender:
    """Return a fake transport whose sends block until released."""
    return FakeSender(hold=True)


@pytest.fixture()
def mock_factory():
    """Return a gpiozero mock pin factory, closed after the test."""
    factory = MockFactory()
    yield factory
    factory.close()
