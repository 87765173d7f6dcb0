"""
USB Device Adapter

Enumerates attached USB devices and assigns each a coarse device type
(Camera, Keyboard, Mouse, Hub, Storage, Audio, Bluetooth or "" when unknown).
"""

import sys
from pathlib import Path
from typing import Dict, Any, Optional, List, Iterable

from ..utils import read_sysfs_value, system_profiler
from .base_adapter import BaseInventoryAdapter

SYS_USB_DEVICES = Path("/sys/bus/usb/devices")

# USB interface classes, checked in this order
INTERFACE_CLASS_TYPES = (
    ("0e", None, "Camera"),
    ("03", "01", "Keyboard"),
    ("03", "02", "Mouse"),
    ("e0", None, "Bluetooth"),
    ("01", None, "Audio"),
    ("08", None, "Storage"),
    ("09", None, "Hub"),
)

# Name keywords used where the platform exposes no class information
NAME_KEYWORD_TYPES = (
    ("webcam", "Camera"),
    ("camera", "Camera"),
    ("facetime", "Camera"),
    ("keyboard", "Keyboard"),
    ("trackpad", "Trackpad"),
    ("mouse", "Mouse"),
    ("headset", "Headset"),
    ("speaker", "Speaker"),
    ("hub", "Hub"),
)

WIN_PNP_CLASS_TYPES = {
    "Camera": "Camera",
    "Image": "Camera",
    "Keyboard": "Keyboard",
    "Mouse": "Mouse",
    "USB": "",
    "DiskDrive": "Storage",
    "AudioEndpoint": "Audio",
}


def device_type_from_name(name: str) -> str:
    """Guess a device type from its product name ("" if nothing matches)."""
    lowered = (name or "").lower()
    for keyword, device_type in NAME_KEYWORD_TYPES:
        if keyword in lowered:
            return device_type
    return ""


def device_type_from_interfaces(interfaces: Iterable[tuple]) -> str:
    """Pick a device type from ``(class, protocol)`` pairs of its interfaces."""
    interfaces = list(interfaces)
    for iface_class, iface_protocol, device_type in INTERFACE_CLASS_TYPES:
        for found_class, found_protocol in interfaces:
            if found_class == iface_class and (iface_protocol is None or found_protocol == iface_protocol):
                return device_type
    return ""


class USBAdapter(BaseInventoryAdapter):
    """
    USB device adapter.

    Collects, per device:
        - name (product string)
        - manufacturer
        - type
    """

    category = "usb"

    def __init__(self, config: Optional[Dict[str, Any]] = None, sys_usb: Path = SYS_USB_DEVICES):
        super().__init__(config)
        self._sys_usb = Path(sys_usb)

    def collect(self) -> List[Dict[str, Any]]:
        if sys.platform == "darwin":
            return self._collect_macos()
        if sys.platform == "win32":
            return self._collect_windows()
        return self._collect_linux()

    def _collect_linux(self) -> List[Dict[str, Any]]:
        if not self._sys_usb.is_dir():
            return []

        devices = []
        for entry in sorted(self._sys_usb.iterdir()):
            # "1-1.2" are devices, "1-1.2:1.0" are interfaces, "usb1" are root hubs
            if ":" in entry.name or entry.name.startswith("usb"):
                continue

            interfaces = [
                (
                    read_sysfs_value(iface / "bInterfaceClass").lower(),
                    read_sysfs_value(iface / "bInterfaceProtocol").lower(),
                )
                for iface in sorted(entry.glob(f"{entry.name}:*"))
            ]
            name = read_sysfs_value(entry / "product")
            devices.append({
                "bus_id": entry.name,
                "name": name,
                "manufacturer": read_sysfs_value(entry / "manufacturer"),
                "type": device_type_from_interfaces(interfaces) or device_type_from_name(name),
            })
        return devices

    def _collect_macos(self) -> List[Dict[str, Any]]:
        devices: List[Dict[str, Any]] = []

        def walk(items: List[Dict[str, Any]]) -> None:
            for item in items:
                name = item.get("_name", "")
                if "manufacturer" in item or "product_id" in item:
                    devices.append({
                        "name": name,
                        "manufacturer": item.get("manufacturer", ""),
                        "type": device_type_from_name(name),
                    })
                walk(item.get("_items", []))

        walk(system_profiler("SPUSBDataType"))
        return devices

    def _collect_windows(self) -> List[Dict[str, Any]]:
        devices = []
        query = "SELECT Name, Manufacturer, PNPClass, DeviceID FROM Win32_PnPEntity"
        for entity in self.wmi_query(query):
            device_id = entity.DeviceID or ""
            if not device_id.startswith(("USB\\", "HID\\")):
                continue
            pnp_class = entity.PNPClass or ""
            if pnp_class not in WIN_PNP_CLASS_TYPES:
                continue
            name = entity.Name or ""
            devices.append({
                "name": name,
                "manufacturer": entity.Manufacturer or "",
                "type": WIN_PNP_CLASS_TYPES[pnp_class] or device_type_from_name(name),
            })
        return devices
