"""
System Identity and Chassis Adapters

Reads manufacturer, model and serial number of the machine, plus its chassis
type, from DMI/SMBIOS data on Linux, system_profiler on macOS and WMI on
Windows.
"""

import sys
from pathlib import Path
from typing import Dict, Any, Optional

from ..utils import read_sysfs_value, system_profiler
from .base_adapter import BaseInventoryAdapter

DMI_ROOT = Path("/sys/class/dmi/id")

# SMBIOS System Enclosure types (DSP0134, 7.4.1)
CHASSIS_TYPES = {
    1: "Other",
    2: "Unknown",
    3: "Desktop",
    4: "Low Profile Desktop",
    5: "Pizza Box",
    6: "Mini Tower",
    7: "Tower",
    8: "Portable",
    9: "Laptop",
    10: "Notebook",
    11: "Hand Held",
    12: "Docking Station",
    13: "All in One",
    14: "Sub Notebook",
    15: "Space-Saving",
    16: "Lunch Box",
    17: "Main System Chassis",
    18: "Expansion Chassis",
    19: "SubChassis",
    20: "Bus Expansion Chassis",
    21: "Peripheral Chassis",
    22: "RAID Chassis",
    23: "Rack Mount Chassis",
    24: "Sealed-Case PC",
    25: "Multi-System Chassis",
    26: "Compact PCI",
    27: "Advanced TCA",
    28: "Blade",
    29: "Blade Enclosure",
    30: "Tablet",
    31: "Convertible",
    32: "Detachable",
    33: "IoT Gateway",
    34: "Embedded PC",
    35: "Mini PC",
    36: "Stick PC",
}


def chassis_type_name(code: Any) -> str:
    """Map an SMBIOS chassis type code to its name ("" if unknown)."""
    try:
        return CHASSIS_TYPES.get(int(code), "")
    except (TypeError, ValueError):
        return ""


class SystemAdapter(BaseInventoryAdapter):
    """
    System identity adapter.

    Collects:
        - manufacturer
        - model
        - serial
    """

    category = "system"

    def __init__(self, config: Optional[Dict[str, Any]] = None, dmi_root: Path = DMI_ROOT):
        super().__init__(config)
        self._dmi_root = Path(dmi_root)

    def collect(self) -> Dict[str, Any]:
        if sys.platform == "darwin":
            return self._collect_macos()
        if sys.platform == "win32":
            return self._collect_windows()
        return self._collect_linux()

    def _collect_linux(self) -> Dict[str, Any]:
        # product_serial is root-only on most distributions
        return {
            "manufacturer": read_sysfs_value(self._dmi_root / "sys_vendor"),
            "model": read_sysfs_value(self._dmi_root / "product_name"),
            "serial": read_sysfs_value(self._dmi_root / "product_serial"),
        }

    def _collect_macos(self) -> Dict[str, Any]:
        items = system_profiler("SPHardwareDataType")
        if not items:
            return {}
        hardware = items[0]
        return {
            "manufacturer": "Apple Inc.",
            "model": hardware.get("machine_model") or hardware.get("machine_name", ""),
            "serial": hardware.get("serial_number", ""),
        }

    def _collect_windows(self) -> Dict[str, Any]:
        record = {"manufacturer": "", "model": "", "serial": ""}
        for product in self.wmi_query("SELECT Vendor, Name FROM Win32_ComputerSystemProduct"):
            record["manufacturer"] = (product.Vendor or "").strip()
            record["model"] = (product.Name or "").strip()
            break
        for bios in self.wmi_query("SELECT SerialNumber FROM Win32_BIOS"):
            record["serial"] = (bios.SerialNumber or "").strip()
            break
        return record


class ChassisAdapter(BaseInventoryAdapter):
    """Chassis type adapter (Laptop, Desktop, Tower, ...)."""

    category = "chassis"

    def __init__(self, config: Optional[Dict[str, Any]] = None, dmi_root: Path = DMI_ROOT):
        super().__init__(config)
        self._dmi_root = Path(dmi_root)

    def collect(self) -> Dict[str, Any]:
        if sys.platform == "darwin":
            items = system_profiler("SPHardwareDataType")
            if not items:
                return {}
            name = items[0].get("machine_name", "")
            return {"type": "Laptop" if "Book" in name else "Desktop"}

        if sys.platform == "win32":
            for enclosure in self.wmi_query("SELECT ChassisTypes FROM Win32_SystemEnclosure"):
                codes = enclosure.ChassisTypes or []
                if codes:
                    return {"type": chassis_type_name(codes[0])}
            return {}

        return {"type": chassis_type_name(read_sysfs_value(self._dmi_root / "chassis_type"))}
