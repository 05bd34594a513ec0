#!/usr/bin/env python3
"""
Run Blinker — chase LEDs on the Pi and accept rate updates over HTTP.

Claims the configured GPIO lines, lights them one after another, and
listens for ``GET /?t=<ms>`` to change how long each stays lit.

Usage:
    python scripts/run_blinker.py                            # default config
    python scripts/run_blinker.py --config path/to/cfg.yaml  # custom config
    python scripts/run_blinker.py --port 9000 --tick-ms 100  # overrides
    python scripts/run_blinker.py --verbose                  # log every update
"""

from __future__ import annotations

import argparse
import asyncio
import dataclasses
import logging
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent / "src"))

from blink_remote import BlinkServer, HardwareAccessError, ValidationError, load_config
from blink_remote.constants import MAX_TICK_MS

DEFAULT_CONFIG = Path(__file__).resolve().parent.parent / "config" / "blink_config.yaml"

logger = logging.getLogger("run_blinker")


def main() -> None:
    parser = argparse.ArgumentParser(description="LED chaser with an HTTP rate endpoint")
    parser.add_argument(
        "--config",
        type=Path,
        default=DEFAULT_CONFIG,
        help=f"YAML config file (default: {DEFAULT_CONFIG.name})",
    )
    parser.add_argument("--host", help="Listen address (overrides config)")
    parser.add_argument("--port", type=int, help="Listen port (overrides config)")
    parser.add_argument("--tick-ms", type=float, help="Starting hold time per LED (overrides config)")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s [%(name)s] %(message)s",
        datefmt="%H:%M:%S",
    )

    try:
        config = load_config(args.config).blinker
    except (FileNotFoundError, ValidationError) as exc:
        logger.error("Bad config: %s", exc)
        sys.exit(2)

    overrides = {
        key: value
        for key, value in (("host", args.host), ("port", args.port), ("tick_ms", args.tick_ms))
        if value is not None
    }
    if args.tick_ms is not None and not 0 < args.tick_ms <= MAX_TICK_MS:
        logger.error("--tick-ms must be in (0, %d], got %g", MAX_TICK_MS, args.tick_ms)
        sys.exit(2)
    config = dataclasses.replace(config, **overrides)

    server = BlinkServer(config)
    try:
        asyncio.run(server.serve())
    except HardwareAccessError as exc:
        logger.critical("GPIO failure: %s", exc)
        sys.exit(1)
    except KeyboardInterrupt:
        logger.info("Interrupted")


if __name__ == "__main__":
    main()
