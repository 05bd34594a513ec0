#!/usr/bin/env python3
"""
Touch Remote — terminal stand-in for the touch screen.

Type where your finger would land on a surface of the given height and the
matching period is pushed to the blinker.  Top edge = fastest, bottom edge
= ``scale`` ms.  Only the most recent touch is ever in flight, so typing
quickly (or pasting a list) just cancels the older updates.

Usage:
    python scripts/touch_remote.py
    python scripts/touch_remote.py --host 192.168.1.40 --height 1920
    python scripts/touch_remote.py --scale 400 --verbose
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent / "src"))

from blink_remote import (
    BlinkRemoteError,
    FrameSize,
    RateController,
    RateTransport,
    TouchPosition,
    TouchTracker,
    ValidationError,
    load_config,
)

DEFAULT_CONFIG = Path(__file__).resolve().parent.parent / "config" / "blink_config.yaml"
DEFAULT_WIDTH = 1080
DEFAULT_HEIGHT = 1920

# ═══════════════════════════════════════
#  Terminal helpers
# ═══════════════════════════════════════


class C:
    """ANSI color codes (no-op on non-TTY)."""

    if sys.stdout.isatty():
        BOLD = "\033[1m"
        DIM = "\033[2m"
        GREEN = "\033[32m"
        RED = "\033[31m"
        CYAN = "\033[36m"
        RESET = "\033[0m"
    else:
        BOLD = DIM = GREEN = RED = CYAN = RESET = ""


def banner(text: str) -> None:
    print(f"\n{C.BOLD}{'═' * 60}")
    print(f"  {text}")
    print(f"{'═' * 60}{C.RESET}")


def info(text: str) -> None:
    print(f"  {C.GREEN}✓{C.RESET} {text}")


def error(text: str) -> None:
    print(f"  {C.RED}✗{C.RESET} {text}")


def prompt(text: str) -> str | None:
    """Read one line; ``None`` on end of input."""
    try:
        return input(f"  {text}: ").strip()
    except EOFError:
        return None


# ═══════════════════════════════════════
#  Main loop
# ═══════════════════════════════════════


def parse_touch(raw: str, frame: FrameSize) -> TouchPosition | None:
    """Turn ``c`` or a y pixel into a touch in the middle column."""
    if raw.lower() == "c":
        return frame.center
    try:
        y = float(raw)
    except ValueError:
        error(f"Not a position: {raw}")
        return None
    return TouchPosition(frame.width / 2, y)


def main() -> None:
    parser = argparse.ArgumentParser(description="Push blink rates from typed touch positions")
    parser.add_argument("--config", type=Path, default=DEFAULT_CONFIG, help="YAML config file")
    parser.add_argument("--host", help="Blinker address (overrides config)")
    parser.add_argument("--port", type=int, help="Blinker port (overrides config)")
    parser.add_argument("--scale", type=float, help="Period at the bottom edge in ms")
    parser.add_argument("--width", type=float, default=DEFAULT_WIDTH, help="Surface width (px)")
    parser.add_argument("--height", type=float, default=DEFAULT_HEIGHT, help="Surface height (px)")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s [%(name)s] %(message)s",
        datefmt="%H:%M:%S",
    )

    try:
        remote = load_config(args.config).remote
        frame = FrameSize(args.width, args.height)
        tracker = TouchTracker(frame, args.scale if args.scale is not None else remote.scale_ms)
    except (FileNotFoundError, ValidationError) as exc:
        error(str(exc))
        sys.exit(2)

    host = args.host or remote.host
    port = args.port or remote.port

    banner("Touch Remote")
    print(f"  Blinker:  http://{host}:{port}/")
    print(f"  Surface:  {frame.width:g} x {frame.height:g} px, bottom edge = {tracker.scale_ms:g} ms")
    print(f"  {C.DIM}Enter a y position in pixels, 'c' for centre, 'q' to quit.{C.RESET}\n")

    controller = RateController(RateTransport(host, port), tracker)
    try:
        controller.start()
    except BlinkRemoteError as exc:
        error(f"Cannot start: {exc}")
        sys.exit(1)

    try:
        while True:
            raw = prompt(f"{C.CYAN}y{C.RESET}")
            if raw is None or raw.lower() == "q":
                break
            if not raw:
                continue
            position = parse_touch(raw, tracker.frame)
            if position is None:
                continue
            period_ms = controller.on_touch(position)
            info(f"y={position.y:g} → {period_ms} ms")
    except KeyboardInterrupt:
        print()
    finally:
        controller.stop()
        info("Goodbye!")


if __name__ == "__main__":
    main()
