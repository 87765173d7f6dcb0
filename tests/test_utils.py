"""
Tests for Utility Functions

Covers:
    - Configuration loading/saving and merging over defaults
    - Logging setup
    - Size formatting
    - Platform query helpers
"""

import json
import subprocess
import logging
from unittest.mock import patch, Mock

import pytest

import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from sysinfo_qr.utils import (
    load_config,
    save_config,
    get_default_config,
    get_default_config_path,
    setup_logging,
    round_half_up,
    format_size_gb,
    read_sysfs_value,
    run_command,
    system_profiler,
    COMMAND_TIMEOUT,
)


@pytest.fixture(autouse=True)
def reset_package_logger():
    """Remove handlers added by setup_logging between tests."""
    yield
    package_logger = logging.getLogger("sysinfo_qr")
    for handler in list(package_logger.handlers):
        package_logger.removeHandler(handler)
        handler.close()
    package_logger.setLevel(logging.NOTSET)


class TestConfigurationLoading:
    """Tests for configuration loading."""

    def test_load_missing_config(self, tmp_path):
        """Test loading missing config file returns defaults."""
        config = load_config(str(tmp_path / "missing.yaml"))
        assert config == get_default_config()

    def test_load_partial_config_merges(self, temp_config_file):
        """Test keys absent from the file keep their defaults."""
        config = load_config(str(temp_config_file))
        assert config["general"]["strategy"] == "plain"
        assert config["general"]["open_artifact"] is True
        assert config["qr"]["error_correction"] == "L"

    def test_load_invalid_yaml(self, tmp_path):
        """Test loading invalid YAML returns defaults."""
        config_path = tmp_path / "config.yaml"
        config_path.write_text("invalid: yaml: content: [", encoding="utf-8")
        assert load_config(str(config_path)) == get_default_config()

    def test_load_empty_config(self, tmp_path):
        """Test loading empty config file."""
        config_path = tmp_path / "config.yaml"
        config_path.write_text("", encoding="utf-8")
        assert load_config(str(config_path)) == get_default_config()

    def test_load_non_mapping(self, tmp_path):
        """Test a YAML list is ignored in favour of defaults."""
        config_path = tmp_path / "config.yaml"
        config_path.write_text("- a\n- b\n", encoding="utf-8")
        assert load_config(str(config_path)) == get_default_config()

    def test_default_path_is_per_user(self):
        """Test the default config lives in the platformdirs config dir."""
        path = get_default_config_path()
        assert path.name == "config.yaml"
        assert "sysinfo-qr" in str(path)


class TestConfigurationSaving:
    """Tests for configuration saving."""

    def test_save_and_load_roundtrip(self, tmp_path):
        """Test save and load roundtrip."""
        config_path = tmp_path / "nested" / "config.yaml"
        original = {"qr": {"width": 800}}

        assert save_config(original, str(config_path)) is True
        loaded = load_config(str(config_path))

        assert loaded["qr"]["width"] == 800
        assert loaded["qr"]["error_correction"] == "L"

    def test_save_config_invalid_path(self, tmp_path):
        """Test saving under a regular file fails cleanly."""
        blocker = tmp_path / "file"
        blocker.write_text("x", encoding="utf-8")
        assert save_config({}, str(blocker / "config.yaml")) is False


class TestDefaultConfig:
    """Tests for default configuration structure."""

    def test_sections(self):
        """Test all sections exist."""
        config = get_default_config()
        for section in ("general", "qr", "compression", "debug"):
            assert section in config

    def test_qr_defaults(self):
        """Test lowest error correction and 500px width by default."""
        qr_config = get_default_config()["qr"]
        assert qr_config["error_correction"] == "L"
        assert qr_config["width"] == 500

    def test_maximum_brotli_quality(self):
        """Test Brotli runs at maximum quality by default."""
        assert get_default_config()["compression"]["brotli_quality"] == 11

    def test_defaults_are_independent(self):
        """Test each call returns a fresh dictionary."""
        first = get_default_config()
        first["general"]["strategy"] = "plain"
        assert get_default_config()["general"]["strategy"] == "compact"


class TestLoggingSetup:
    """Tests for logging setup."""

    def test_setup_logging(self):
        """Test default logging has no console handler."""
        logger = setup_logging(get_default_config())
        assert logger.name == "sysinfo_qr"
        assert logger.level == logging.INFO
        assert not logger.handlers

    def test_setup_logging_verbose(self):
        """Test verbose logging adds a DEBUG console handler."""
        config = get_default_config()
        config["debug"]["verbose"] = True

        logger = setup_logging(config)
        assert logger.level == logging.DEBUG
        assert any(isinstance(h, logging.StreamHandler) for h in logger.handlers)

    def test_setup_logging_with_file(self, tmp_path):
        """Test debug logs can be written to a file."""
        config = get_default_config()
        config["debug"]["save_debug_logs"] = True
        config["debug"]["debug_log_file"] = str(tmp_path / "logs" / "debug.log")

        logger = setup_logging(config)
        logger.debug("written")
        for handler in logger.handlers:
            handler.flush()

        assert "written" in (tmp_path / "logs" / "debug.log").read_text(encoding="utf-8")

    def test_invalid_level_falls_back(self):
        """Test an unknown level name falls back to INFO."""
        config = get_default_config()
        config["debug"]["log_level"] = "LOUD"
        assert setup_logging(config).level == logging.INFO


class TestSizeFormatting:
    """Tests for size helpers."""

    @pytest.mark.parametrize("value,expected", [
        (0.0, 0),
        (0.49, 0),
        (0.5, 1),
        (1.5, 2),
        (2.5, 3),
        (7.99, 8),
    ])
    def test_round_half_up(self, value, expected):
        """Test halves always round up."""
        assert round_half_up(value) == expected

    def test_format_size_gb(self):
        """Test bytes are formatted as whole GB."""
        assert format_size_gb(8 * 1024 ** 3) == "8GB"
        assert format_size_gb(0) == "0GB"


class TestPlatformQueries:
    """Tests for sysfs and command helpers."""

    def test_read_sysfs_value(self, tmp_path):
        """Test values are stripped."""
        value_file = tmp_path / "product_name"
        value_file.write_text("ThinkPad X1 Carbon\n", encoding="utf-8")
        assert read_sysfs_value(value_file) == "ThinkPad X1 Carbon"

    def test_read_sysfs_missing(self, tmp_path):
        """Test missing files return the default."""
        assert read_sysfs_value(tmp_path / "nope") == ""
        assert read_sysfs_value(tmp_path / "nope", "0") == "0"

    def test_run_command_missing_binary(self):
        """Test a command that is not installed returns None."""
        with patch("sysinfo_qr.utils.subprocess.run", side_effect=FileNotFoundError):
            assert run_command(["no-such-tool"]) is None

    def test_run_command_nonzero_exit(self):
        """Test a failing command returns None."""
        completed = Mock(returncode=1, stdout="", stderr="boom")
        with patch("sysinfo_qr.utils.subprocess.run", return_value=completed):
            assert run_command(["tool"]) is None

    def test_run_command_output(self):
        """Test stdout is returned on success."""
        completed = Mock(returncode=0, stdout="ok\n", stderr="")
        with patch("sysinfo_qr.utils.subprocess.run", return_value=completed):
            assert run_command(["tool"]) == "ok\n"

    def test_system_profiler_parses_json(self):
        """Test the data type list is extracted from the report."""
        report = json.dumps({"SPHardwareDataType": [{"serial_number": "C02XYZ"}]})
        with patch("sysinfo_qr.utils.run_command", return_value=report):
            assert system_profiler("SPHardwareDataType") == [{"serial_number": "C02XYZ"}]

    def test_system_profiler_unavailable(self):
        """Test missing system_profiler yields an empty list."""
        with patch("sysinfo_qr.utils.run_command", return_value=None):
            assert system_profiler("SPUSBDataType") == []

    def test_run_command_timeout(self):
        """Test a command that never finishes returns None."""
        error = subprocess.TimeoutExpired(["bluetoothctl"], 5)
        with patch("sysinfo_qr.utils.subprocess.run", side_effect=error) as mock_run:
            assert run_command(["bluetoothctl", "devices"], timeout=5) is None
        assert mock_run.call_args.kwargs["timeout"] == 5

    def test_run_command_default_timeout(self):
        """Test every command is bounded by the default timeout."""
        completed = Mock(returncode=0, stdout="", stderr="")
        with patch("sysinfo_qr.utils.subprocess.run", return_value=completed) as mock_run:
            run_command(["tool"])
        assert mock_run.call_args.kwargs["timeout"] == COMMAND_TIMEOUT
