"""
SysInfo QR Utility Functions

This module provides helper functions for:
    - Configuration management
    - Logging utilities
    - Size formatting
    - Platform queries (sysfs, command output, macOS system_profiler)
"""

import copy
import json
import math
import logging
import subprocess
from pathlib import Path
from typing import Dict, Any, Optional, List

import yaml
from platformdirs import user_config_dir

# Configure module logger
logger = logging.getLogger("sysinfo_qr")

APP_NAME = "sysinfo-qr"
BYTES_PER_GB = 1024 ** 3
COMMAND_TIMEOUT = 30


# =============================================================================
# Configuration Management
# =============================================================================

def get_default_config_path() -> Path:
    """Return the per-user configuration file location."""
    return Path(user_config_dir(APP_NAME)) / "config.yaml"


def get_default_config() -> Dict[str, Any]:
    """Return default configuration values."""
    return {
        "general": {
            "strategy": "compact",
            "open_artifact": True,
            "max_workers": 9,
        },
        "qr": {
            "error_correction": "L",
            "width": 500,
            "border": 4,
            "file_prefix": "system-info-qr",
            "image_format": "png",
        },
        "compression": {
            "brotli_quality": 11,
        },
        "debug": {
            "verbose": False,
            "log_level": "INFO",
            "save_debug_logs": False,
            "debug_log_file": "debug.log",
        },
    }


def _merge(defaults: Dict[str, Any], overrides: Dict[str, Any]) -> Dict[str, Any]:
    merged = copy.deepcopy(defaults)
    for key, value in overrides.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def load_config(config_path: Optional[str] = None) -> Dict[str, Any]:
    """
    Load configuration from YAML file.

    Values found in the file are merged over the defaults, so a partial file
    only needs the keys it changes.

    Args:
        config_path: Path to config file. If None, uses the per-user location.

    Returns:
        Configuration dictionary
    """
    config_path = Path(config_path) if config_path else get_default_config_path()

    if not config_path.exists():
        logger.debug(f"Config file not found: {config_path}. Using defaults.")
        return get_default_config()

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            loaded = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as e:
        logger.error(f"Error loading config: {e}")
        return get_default_config()

    if not isinstance(loaded, dict):
        return get_default_config()
    return _merge(get_default_config(), loaded)


def save_config(config: Dict[str, Any], config_path: Optional[str] = None) -> bool:
    """
    Save configuration to YAML file.

    Args:
        config: Configuration dictionary
        config_path: Path to save config file

    Returns:
        True if successful, False otherwise
    """
    config_path = Path(config_path) if config_path else get_default_config_path()

    try:
        config_path.parent.mkdir(parents=True, exist_ok=True)
        with open(config_path, "w", encoding="utf-8") as f:
            yaml.dump(config, f, default_flow_style=False, sort_keys=False)
        return True
    except OSError as e:
        logger.error(f"Error saving config: {e}")
        return False


# =============================================================================
# Logging Utilities
# =============================================================================

def setup_logging(config: Optional[Dict[str, Any]] = None) -> logging.Logger:
    """
    Set up logging for SysInfo QR.

    Args:
        config: Configuration dictionary

    Returns:
        Configured logger
    """
    config = config or get_default_config()
    debug_config = config.get("debug", {})

    log_level = getattr(logging, str(debug_config.get("log_level", "INFO")).upper(), logging.INFO)
    verbose = debug_config.get("verbose", False)
    if verbose:
        log_level = logging.DEBUG

    package_logger = logging.getLogger("sysinfo_qr")
    package_logger.setLevel(log_level)

    # Console handler
    if verbose or log_level == logging.DEBUG:
        console_handler = logging.StreamHandler()
        console_handler.setLevel(log_level)
        formatter = logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S"
        )
        console_handler.setFormatter(formatter)
        package_logger.addHandler(console_handler)

    # File handler (if enabled)
    if debug_config.get("save_debug_logs", False):
        log_file = Path(debug_config.get("debug_log_file", "debug.log"))
        if not log_file.is_absolute():
            log_file = get_default_config_path().parent / log_file
        log_file.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.FileHandler(log_file)
        file_handler.setLevel(logging.DEBUG)
        file_formatter = logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(funcName)s:%(lineno)d - %(message)s"
        )
        file_handler.setFormatter(file_formatter)
        package_logger.addHandler(file_handler)

    return package_logger


# =============================================================================
# Size Formatting
# =============================================================================

def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from zero for positive values."""
    return int(math.floor(value + 0.5))


def format_size_gb(size_bytes: float) -> str:
    """Format a byte count as a whole number of GB, e.g. ``"16GB"``."""
    return f"{round_half_up(size_bytes / BYTES_PER_GB)}GB"


# =============================================================================
# Platform Queries
# =============================================================================

def read_sysfs_value(path: Path, default: str = "") -> str:
    """Read a single-value sysfs/procfs file, returning ``default`` if absent."""
    try:
        return Path(path).read_text(encoding="utf-8", errors="replace").strip()
    except (FileNotFoundError, PermissionError, NotADirectoryError, IsADirectoryError):
        return default


def run_command(args: List[str], timeout: float = COMMAND_TIMEOUT) -> Optional[str]:
    """
    Run a command and return its stdout.

    Args:
        args: Command and arguments
        timeout: Seconds to wait before the command is killed

    Returns:
        Standard output, or None when the command is not installed, exits
        with a non-zero status or does not finish within ``timeout``
    """
    try:
        completed = subprocess.run(
            args,
            capture_output=True,
            text=True,
            check=False,
            timeout=timeout,
        )
    except FileNotFoundError:
        logger.debug(f"Command not available: {args[0]}")
        return None
    except subprocess.TimeoutExpired:
        logger.warning(f"{' '.join(args)} did not finish within {timeout}s")
        return None

    if completed.returncode != 0:
        logger.debug(f"{' '.join(args)} exited with {completed.returncode}: {completed.stderr.strip()}")
        return None
    return completed.stdout


def system_profiler(data_type: str) -> List[Dict[str, Any]]:
    """
    Query macOS ``system_profiler`` for one data type.

    Args:
        data_type: e.g. ``"SPHardwareDataType"``

    Returns:
        The list stored under ``data_type`` in the JSON report, or an empty
        list when the tool is unavailable
    """
    output = run_command(["system_profiler", data_type, "-json"])
    if not output:
        return []
    report = json.loads(output)
    return report.get(data_type, []) or []
