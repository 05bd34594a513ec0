"""
YAML configuration for the blink server and the touch remote.

Both processes read the same file; each only looks at its own section::

    from blink_remote.config import load_config

    config = load_config("config/blink_config.yaml")
    server = BlinkServer(config.blinker)

Every key is optional and falls back to :mod:`~blink_remote.constants`.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

import yaml

from .constants import (
    DEFAULT_LISTEN_HOST,
    DEFAULT_PINS,
    DEFAULT_PORT,
    DEFAULT_SCALE_MS,
    DEFAULT_SERVER_HOST,
    DEFAULT_TICK_MS,
    MAX_TICK_MS,
)
from .exceptions import ValidationError

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Configuration data model
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class BlinkerConfig:
    """Settings for the blink server (actuator)."""

    host: str = DEFAULT_LISTEN_HOST
    port: int = DEFAULT_PORT
    pins: tuple[int, ...] = DEFAULT_PINS
    tick_ms: float = DEFAULT_TICK_MS


@dataclass(frozen=True)
class RemoteConfig:
    """Settings for the touch remote (rate controller)."""

    host: str = DEFAULT_SERVER_HOST
    port: int = DEFAULT_PORT
    scale_ms: float = DEFAULT_SCALE_MS


@dataclass(frozen=True)
class Config:
    """Top-level configuration loaded from a YAML file."""

    blinker: BlinkerConfig = field(default_factory=BlinkerConfig)
    remote: RemoteConfig = field(default_factory=RemoteConfig)


# ---------------------------------------------------------------------------
# Config loading & validation
# ---------------------------------------------------------------------------


def load_config(path: str | Path) -> Config:
    """Load and validate a configuration from a YAML file.

    Args:
        path: Path to the YAML config file.

    Returns:
        A validated :class:`Config`.

    Raises:
        FileNotFoundError: If *path* does not exist.
        ValidationError: If the config is malformed or contains invalid values.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    with open(path) as f:
        raw = yaml.safe_load(f)

    if raw is None:
        raw = {}
    if not isinstance(raw, dict):
        raise ValidationError(f"Config file must be a YAML mapping, got {type(raw).__name__}")

    config = Config(
        blinker=_parse_blinker(_section(raw, "blinker")),
        remote=_parse_remote(_section(raw, "remote")),
    )
    logger.debug("Loaded config from %s: %s", path, config)
    return config


def _section(raw: dict, name: str) -> dict:
    data = raw.get(name)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValidationError(f"'{name}' must be a mapping, got {type(data).__name__}")
    return data


def _parse_blinker(data: dict) -> BlinkerConfig:
    defaults = BlinkerConfig()
    return BlinkerConfig(
        host=_require_host(data, "blinker", defaults.host),
        port=_require_port(data, "blinker", defaults.port),
        pins=_require_pins(data, defaults.pins),
        tick_ms=_require_positive_number(
            data, "blinker", "tick_ms", defaults.tick_ms, maximum=MAX_TICK_MS
        ),
    )


def _parse_remote(data: dict) -> RemoteConfig:
    defaults = RemoteConfig()
    return RemoteConfig(
        host=_require_host(data, "remote", defaults.host),
        port=_require_port(data, "remote", defaults.port),
        scale_ms=_require_positive_number(data, "remote", "scale_ms", defaults.scale_ms),
    )


def _require_host(data: dict, section: str, default: str) -> str:
    val = data.get("host", default)
    if not isinstance(val, str) or not val:
        raise ValidationError(f"{section}: 'host' must be a non-empty string, got {val!r}")
    return val


def _require_port(data: dict, section: str, default: int) -> int:
    val = data.get("port", default)
    if isinstance(val, bool) or not isinstance(val, int) or not (1 <= val <= 65535):
        raise ValidationError(f"{section}: 'port' must be an integer 1-65535, got {val!r}")
    return val


def _require_positive_number(
    data: dict, section: str, key: str, default: float, maximum: float | None = None
) -> float:
    val = data.get(key, default)
    if isinstance(val, bool) or not isinstance(val, (int, float)) or val <= 0:
        raise ValidationError(f"{section}: '{key}' must be a positive number, got {val!r}")
    if maximum is not None and val > maximum:
        raise ValidationError(f"{section}: '{key}' must be at most {maximum}, got {val!r}")
    return val


def _require_pins(data: dict, default: tuple[int, ...]) -> tuple[int, ...]:
    val = data.get("pins", default)
    if not isinstance(val, (list, tuple)) or not val:
        raise ValidationError(f"blinker: 'pins' must be a non-empty list, got {val!r}")
    for pin in val:
        if isinstance(pin, bool) or not isinstance(pin, int) or pin < 0:
            raise ValidationError(f"blinker: pin numbers must be non-negative integers, got {pin!r}")
    if len(set(val)) != len(val):
        raise ValidationError(f"blinker: 'pins' contains duplicates: {list(val)}")
    return tuple(val)
