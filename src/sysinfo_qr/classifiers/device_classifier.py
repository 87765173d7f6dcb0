"""
Device Classifier

Pure functions that reduce raw inventory lists to the categorical and scalar
fields of a fingerprint. Every function accepts ``None`` wherever it accepts a
list and treats it as an empty list. None of them raise for well-formed or
empty input.

Matching is substring based on free-text type and name fields reported by the
platform, with this precedence:

    storage_drive_type
        SSD-class:  type contains "SSD" or "NVME"
        HDD-class:  type contains "HDD", or contains "HD" without "SSD"
        both -> Hybrid, else SSD, else HDD, else Unknown

    monitor_topology
        connection label rewrites, applied in order:
        "Display Port" -> "DisplayPort", "DP" -> "DisplayPort",
        "HD15" -> "VGA", "LVDS" -> "Built-in"
"""

from typing import Any, Iterable, List, Mapping, Optional, Union

from ..utils import format_size_gb

YES = "Yes"
NO = "No"

STORAGE_SSD = "SSD"
STORAGE_HDD = "HDD"
STORAGE_HYBRID = "Hybrid"
STORAGE_UNKNOWN = "Unknown"

BUILT_IN = "Built-in"
UNKNOWN_MONITOR = "Unknown"
UNKNOWN_CONNECTION = "Unknown"

CONNECTION_REWRITES = (
    ("Display Port", "DisplayPort"),
    ("DP", "DisplayPort"),
    ("HD15", "VGA"),
    ("LVDS", "Built-in"),
)

Records = Optional[Iterable[Mapping[str, Any]]]


def _records(items: Records) -> List[Mapping[str, Any]]:
    return list(items) if items else []


def _yes_no(flag: bool) -> str:
    return YES if flag else NO


def storage_drive_type(disks: Records) -> str:
    """Classify the storage medium across all disks."""
    types = [str(disk.get("type") or "").upper() for disk in _records(disks)]
    if not types:
        return STORAGE_UNKNOWN

    has_ssd = any("SSD" in t or "NVME" in t for t in types)
    has_hdd = any("HDD" in t or ("HD" in t and "SSD" not in t) for t in types)

    if has_ssd and has_hdd:
        return STORAGE_HYBRID
    if has_ssd:
        return STORAGE_SSD
    if has_hdd:
        return STORAGE_HDD
    return STORAGE_UNKNOWN


def total_storage_size(disks: Records) -> Union[str, int]:
    """
    Sum the size of every disk.

    Returns:
        A string such as ``"512GB"``, or the integer ``0`` when no disks are
        reported. Callers must handle both shapes.
    """
    records = _records(disks)
    if not records:
        return 0
    total_bytes = sum(disk.get("size") or 0 for disk in records)
    return format_size_gb(total_bytes)


def has_webcam(usb_devices: Records) -> str:
    for device in _records(usb_devices):
        name = str(device.get("name") or "").lower()
        if device.get("type") == "Camera" or "camera" in name or "webcam" in name:
            return YES
    return NO


def has_keyboard(usb_devices: Records, bluetooth_devices: Records) -> str:
    if any(device.get("type") == "Keyboard" for device in _records(usb_devices)):
        return YES
    return _yes_no(any(
        device.get("type") == "Keyboard" and device.get("connected")
        for device in _records(bluetooth_devices)
    ))


def has_mouse(usb_devices: Records, bluetooth_devices: Records) -> str:
    if any(device.get("type") == "Mouse" for device in _records(usb_devices)):
        return YES
    return _yes_no(any(
        device.get("type") in ("Mouse", "Trackpad") and device.get("connected")
        for device in _records(bluetooth_devices)
    ))


def normalize_connection(label: Optional[str]) -> str:
    """Apply the fixed connection label rewrites (literal, first occurrence)."""
    label = label or UNKNOWN_CONNECTION
    for old, new in CONNECTION_REWRITES:
        label = label.replace(old, new, 1)
    return label


def monitor_topology(displays: Records) -> List[str]:
    """Describe each display as ``"Built-in"`` or ``"<connection> - External"``."""
    records = _records(displays)
    if not records:
        return [UNKNOWN_MONITOR]

    monitors = []
    for display in records:
        connection = normalize_connection(display.get("connection"))
        if display.get("builtin") or connection == BUILT_IN:
            monitors.append(BUILT_IN)
        else:
            monitors.append(f"{connection} - External")
    return monitors
