"""
Tests for YAML configuration loading.

Covers:
* Valid configs (full, partial, empty)
* Missing files and malformed structure
* Per-field validation for both sections
"""

from __future__ import annotations

import textwrap
from pathlib import Path

import pytest

from blink_remote import DEFAULT_PINS, ValidationError, load_config
from blink_remote.config import BlinkerConfig, Config, RemoteConfig
from blink_remote.constants import MAX_TICK_MS

# ══════════════════════════════════════════════════════════════════════════
#  Fixtures
# ══════════════════════════════════════════════════════════════════════════


def write_config(path: Path, content: str) -> Path:
    """Write a YAML config file and return its path."""
    config_file = path / "blink_config.yaml"
    config_file.write_text(textwrap.dedent(content))
    return config_file


VALID_CONFIG = """\
    blinker:
      host: 127.0.0.1
      port: 9000
      pins: [4, 17, 22]
      tick_ms: 120
    remote:
      host: 192.168.1.40
      port: 9000
      scale_ms: 400
"""

PARTIAL_CONFIG = """\
    remote:
      host: 192.168.1.40
"""


# ══════════════════════════════════════════════════════════════════════════
#  Valid configs
# ══════════════════════════════════════════════════════════════════════════


class TestLoadConfigValid:
    def test_blinker_section(self, tmp_path):
        config = load_config(write_config(tmp_path, VALID_CONFIG))
        assert config.blinker == BlinkerConfig("127.0.0.1", 9000, (4, 17, 22), 120)

    def test_remote_section(self, tmp_path):
        config = load_config(write_config(tmp_path, VALID_CONFIG))
        assert config.remote == RemoteConfig("192.168.1.40", 9000, 400)

    def test_pins_become_tuple(self, tmp_path):
        config = load_config(write_config(tmp_path, VALID_CONFIG))
        assert isinstance(config.blinker.pins, tuple)

    def test_missing_keys_use_defaults(self, tmp_path):
        config = load_config(write_config(tmp_path, PARTIAL_CONFIG))
        assert config.remote.host == "192.168.1.40"
        assert config.remote.port == 8080
        assert config.remote.scale_ms == 200
        assert config.blinker == BlinkerConfig()
        assert config.blinker.pins == DEFAULT_PINS

    def test_empty_file_is_all_defaults(self, tmp_path):
        assert load_config(write_config(tmp_path, "")) == Config()

    def test_shipped_config_loads(self):
        shipped = Path(__file__).resolve().parent.parent / "config" / "blink_config.yaml"
        config = load_config(shipped)
        assert config.blinker.pins == DEFAULT_PINS
        assert config.remote.port == config.blinker.port


# ══════════════════════════════════════════════════════════════════════════
#  Structural errors
# ══════════════════════════════════════════════════════════════════════════


class TestLoadConfigStructure:
    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_config(tmp_path / "nope.yaml")

    def test_top_level_not_mapping(self, tmp_path):
        with pytest.raises(ValidationError, match="mapping"):
            load_config(write_config(tmp_path, "- just\n- a list\n"))

    def test_section_not_mapping(self, tmp_path):
        with pytest.raises(ValidationError, match="'blinker' must be a mapping"):
            load_config(write_config(tmp_path, "blinker: 5\n"))


# ══════════════════════════════════════════════════════════════════════════
#  Field validation
# ══════════════════════════════════════════════════════════════════════════


class TestLoadConfigFields:
    @pytest.mark.parametrize("port", [0, 70000, "8080", True])
    def test_bad_port(self, tmp_path, port):
        path = write_config(tmp_path, f"remote:\n  port: {port!r}\n")
        with pytest.raises(ValidationError, match="port"):
            load_config(path)

    @pytest.mark.parametrize("host", ["''", "42"])
    def test_bad_host(self, tmp_path, host):
        path = write_config(tmp_path, f"blinker:\n  host: {host}\n")
        with pytest.raises(ValidationError, match="host"):
            load_config(path)

    @pytest.mark.parametrize("pins", ["[]", "4", "[4, -1]", "[4, x]", "[4, 17, 4]", "[true]"])
    def test_bad_pins(self, tmp_path, pins):
        path = write_config(tmp_path, f"blinker:\n  pins: {pins}\n")
        with pytest.raises(ValidationError, match="pin"):
            load_config(path)

    @pytest.mark.parametrize("tick", ["0", "-5", "fast", "true"])
    def test_bad_tick(self, tmp_path, tick):
        path = write_config(tmp_path, f"blinker:\n  tick_ms: {tick}\n")
        with pytest.raises(ValidationError, match="tick_ms"):
            load_config(path)

    def test_tick_beyond_longest_wait_rejected(self, tmp_path):
        path = write_config(tmp_path, f"blinker:\n  tick_ms: {MAX_TICK_MS + 1}\n")
        with pytest.raises(ValidationError, match="at most"):
            load_config(path)

    def test_fractional_tick_allowed(self, tmp_path):
        path = write_config(tmp_path, "blinker:\n  tick_ms: 66.7\n")
        assert load_config(path).blinker.tick_ms == 66.7

    @pytest.mark.parametrize("scale", ["0", "-1", "big"])
    def test_bad_scale(self, tmp_path, scale):
        path = write_config(tmp_path, f"remote:\n  scale_ms: {scale}\n")
        with pytest.raises(ValidationError, match="scale_ms"):
            load_config(path)
