"""
Bluetooth Device Adapter

Enumerates paired Bluetooth devices, their device type and whether each one
is currently connected.
"""

import re
import sys
from typing import Dict, Any, List

from ..utils import run_command, system_profiler
from .base_adapter import BaseInventoryAdapter
from .usb_adapter import device_type_from_name

# bluetoothctl "Icon:" values (freedesktop icon names)
ICON_TYPES = {
    "input-keyboard": "Keyboard",
    "input-mouse": "Mouse",
    "input-tablet": "Trackpad",
    "input-gaming": "Gamepad",
    "audio-headset": "Headset",
    "audio-headphones": "Headphones",
    "audio-card": "Speaker",
    "phone": "Phone",
    "computer": "Computer",
}

# bluetoothctl waits forever when bluetoothd is not running
BLUETOOTHCTL_TIMEOUT = 5

DEVICE_LINE = re.compile(r"^Device\s+([0-9A-Fa-f:]{17})\s+(.*)$")


def parse_bluetoothctl_info(text: str) -> Dict[str, str]:
    """Parse ``bluetoothctl info`` output into a key/value mapping."""
    fields = {}
    for line in text.splitlines():
        key, sep, value = line.strip().partition(":")
        if sep and key and key not in fields:
            fields[key] = value.strip()
    return fields


class BluetoothAdapter(BaseInventoryAdapter):
    """
    Bluetooth device adapter.

    Collects, per paired device:
        - name
        - type (Keyboard, Mouse, Trackpad, Headset, ...)
        - connected
    """

    category = "bluetooth"

    def collect(self) -> List[Dict[str, Any]]:
        if sys.platform == "darwin":
            return self._collect_macos()
        if sys.platform == "win32":
            return self._collect_windows()
        return self._collect_linux()

    def _collect_linux(self) -> List[Dict[str, Any]]:
        listing = run_command(["bluetoothctl", "devices", "Paired"], timeout=BLUETOOTHCTL_TIMEOUT)
        if listing is None:
            # bluetoothctl < 5.65
            listing = run_command(["bluetoothctl", "paired-devices"], timeout=BLUETOOTHCTL_TIMEOUT)
        if not listing:
            return []

        devices = []
        for line in listing.splitlines():
            match = DEVICE_LINE.match(line.strip())
            if not match:
                continue
            address, name = match.groups()
            info_text = run_command(["bluetoothctl", "info", address], timeout=BLUETOOTHCTL_TIMEOUT)
            info = parse_bluetoothctl_info(info_text or "")
            icon = info.get("Icon", "")
            devices.append({
                "address": address,
                "name": info.get("Name", name),
                "type": ICON_TYPES.get(icon) or device_type_from_name(name),
                "connected": info.get("Connected", "no") == "yes",
            })
        return devices

    def _collect_macos(self) -> List[Dict[str, Any]]:
        devices = []
        for controller in system_profiler("SPBluetoothDataType"):
            for key, connected in (("device_connected", True), ("device_not_connected", False)):
                for entry in controller.get(key, []):
                    for name, details in entry.items():
                        devices.append({
                            "address": details.get("device_address", ""),
                            "name": name,
                            "type": details.get("device_minorType") or device_type_from_name(name),
                            "connected": connected,
                        })
        return devices

    def _collect_windows(self) -> List[Dict[str, Any]]:
        devices = []
        query = "SELECT Name, DeviceID, Status FROM Win32_PnPEntity WHERE PNPClass = 'Bluetooth'"
        for entity in self.wmi_query(query):
            if not (entity.DeviceID or "").startswith("BTHENUM\\"):
                continue
            name = entity.Name or ""
            devices.append({
                "name": name,
                "type": device_type_from_name(name),
                "connected": entity.Status == "OK",
            })
        return devices
