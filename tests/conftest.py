"""
Pytest Configuration and Fixtures

Provides shared fixtures and configuration for all tests.
"""

import pytest
import sys
from pathlib import Path

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from sysinfo_qr.fingerprint import Fingerprint, RawInventory
from sysinfo_qr.utils import get_default_config


@pytest.fixture
def default_config():
    """Provide default configuration."""
    return get_default_config()


@pytest.fixture
def temp_config_file(tmp_path):
    """Provide temporary config file."""
    config_path = tmp_path / "config.yaml"
    config_path.write_text("general:\n  strategy: plain\n", encoding="utf-8")
    return config_path


@pytest.fixture
def sample_inventory():
    """Provide raw inventory of a typical laptop with one external monitor."""
    return RawInventory(
        system={"manufacturer": "HP", "model": "HP EliteBook 840 G8 Notebook PC", "serial": "5CG1234XYZ"},
        chassis={"type": "Notebook"},
        os={"hostname": "DESKTOP-7F3K2LQ", "distro": "Microsoft Windows 11 Pro", "release": "10.0.22631"},
        cpu={"brand": "11th Gen Intel(R) Core(TM) i7-1185G7 @ 3.00GHz"},
        memory={"total": 16 * 1024 ** 3},
        disks=[{"name": "SAMSUNG MZVLB512HBJQ", "type": "NVMe", "size": 512 * 1024 ** 3}],
        usb=[
            {"name": "HP HD Camera", "type": ""},
            {"name": "USB Receiver", "type": "Keyboard"},
        ],
        bluetooth=[
            {"name": "MX Master 3", "type": "Mouse", "connected": True},
        ],
        displays=[
            {"builtin": True, "connection": "Internal"},
            {"builtin": False, "connection": "HDMI"},
        ],
    )


@pytest.fixture
def sample_fingerprint():
    """Provide a fully populated fingerprint."""
    return Fingerprint(
        computer_name="DESKTOP-7F3K2LQ",
        serial_no="5CG1234XYZ",
        type="Notebook",
        brand="HP",
        model="HP EliteBook 840 G8 Notebook PC",
        operating_system="Microsoft Windows 11 Pro 10.0.22631",
        cpu="11th Gen Intel(R) Core(TM) i7-1185G7 @ 3.00GHz",
        ram="16GB",
        storage_drive="SSD",
        storage_size="512GB",
        webcam="Yes",
        keyboard="Yes",
        mouse="Yes",
        monitors=("Built-in", "HDMI - External"),
    )
