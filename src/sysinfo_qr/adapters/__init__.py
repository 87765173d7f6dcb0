"""
Inventory Adapters Module

This module contains one adapter per raw inventory category. Contributors can
add new sources by implementing the base adapter interface.

Available Adapters:
    - system_adapter: manufacturer, model, serial number and chassis type
    - os_adapter: host name and OS distribution/release
    - cpu_adapter: CPU brand via py-cpuinfo
    - memory_adapter: installed RAM via psutil
    - disk_adapter: physical disks with media type and capacity
    - usb_adapter: attached USB devices
    - bluetooth_adapter: paired Bluetooth devices and connection state
    - display_adapter: connected displays and their connection type
"""

from .base_adapter import BaseInventoryAdapter
from .system_adapter import SystemAdapter, ChassisAdapter
from .os_adapter import OSAdapter
from .cpu_adapter import CPUAdapter
from .memory_adapter import MemoryAdapter
from .disk_adapter import DiskAdapter
from .usb_adapter import USBAdapter
from .bluetooth_adapter import BluetoothAdapter
from .display_adapter import DisplayAdapter

__all__ = [
    "BaseInventoryAdapter",
    "SystemAdapter",
    "ChassisAdapter",
    "OSAdapter",
    "CPUAdapter",
    "MemoryAdapter",
    "DiskAdapter",
    "USBAdapter",
    "BluetoothAdapter",
    "DisplayAdapter",
    "default_adapters",
]


def default_adapters(config=None):
    """Return one adapter instance per raw inventory slot."""
    return [
        SystemAdapter(config),
        ChassisAdapter(config),
        OSAdapter(config),
        CPUAdapter(config),
        MemoryAdapter(config),
        DiskAdapter(config),
        USBAdapter(config),
        BluetoothAdapter(config),
        DisplayAdapter(config),
    ]
