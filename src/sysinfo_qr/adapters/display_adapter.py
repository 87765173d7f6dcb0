"""
Display Adapter

Enumerates connected displays with their connection type (HDMI, DP, VGA, ...)
and whether each display is built into the machine.
"""

import re
import sys
from pathlib import Path
from typing import Dict, Any, Optional, List

from ..utils import read_sysfs_value, system_profiler
from .base_adapter import BaseInventoryAdapter

SYS_DRM = Path("/sys/class/drm")

# "card0-HDMI-A-1" -> "HDMI-A"
DRM_CONNECTOR = re.compile(r"^card\d+-(.+)-\d+$")

DRM_CONNECTION_LABELS = {
    "HDMI-A": "HDMI",
    "HDMI-B": "HDMI",
    "DVI-D": "DVI",
    "DVI-I": "DVI",
    "DVI-A": "DVI",
}
DRM_BUILTIN = ("eDP", "LVDS", "DSI")

# WmiMonitorConnectionParams.VideoOutputTechnology
WIN_OUTPUT_TECHNOLOGY = {
    0: "HD15",
    1: "SVIDEO",
    2: "Composite",
    3: "Component",
    4: "DVI",
    5: "HDMI",
    6: "LVDS",
    8: "D_JPN",
    9: "SDI",
    10: "DP",
    11: "DP embedded",
    12: "UDI",
    13: "UDI embedded",
    14: "SDTVDONGLE",
    15: "MIRACAST",
    0x80000000: "INTERNAL",
}
WIN_BUILTIN_TECHNOLOGY = (11, 13, 0x80000000)

MAC_CONNECTION_LABELS = {
    "spdisplays_displayport": "DisplayPort",
    "spdisplays_hdmi": "HDMI",
    "spdisplays_thunderbolt": "Thunderbolt",
    "spdisplays_dvi": "DVI",
    "spdisplays_vga": "VGA",
    "spdisplays_airplay": "AirPlay",
}


class DisplayAdapter(BaseInventoryAdapter):
    """
    Display adapter.

    Collects, per connected display:
        - builtin
        - connection (platform label, normalised later by the classifier)
        - model
    """

    category = "displays"

    def __init__(self, config: Optional[Dict[str, Any]] = None, sys_drm: Path = SYS_DRM):
        super().__init__(config)
        self._sys_drm = Path(sys_drm)

    def collect(self) -> List[Dict[str, Any]]:
        if sys.platform == "darwin":
            return self._collect_macos()
        if sys.platform == "win32":
            return self._collect_windows()
        return self._collect_linux()

    def _collect_linux(self) -> List[Dict[str, Any]]:
        if not self._sys_drm.is_dir():
            return []

        displays = []
        for connector in sorted(self._sys_drm.iterdir()):
            match = DRM_CONNECTOR.match(connector.name)
            if not match:
                continue
            if read_sysfs_value(connector / "status") != "connected":
                continue
            kind = match.group(1)
            displays.append({
                "builtin": kind in DRM_BUILTIN,
                "connection": DRM_CONNECTION_LABELS.get(kind, kind),
                "model": "",
            })
        return displays

    def _collect_macos(self) -> List[Dict[str, Any]]:
        displays = []
        for gpu in system_profiler("SPDisplaysDataType"):
            for display in gpu.get("spdisplays_ndrvs", []):
                connection_type = display.get("spdisplays_connection_type", "")
                displays.append({
                    "builtin": connection_type == "spdisplays_internal",
                    "connection": MAC_CONNECTION_LABELS.get(connection_type, ""),
                    "model": display.get("_name", ""),
                })
        return displays

    def _collect_windows(self) -> List[Dict[str, Any]]:
        displays = []
        query = "SELECT InstanceName, VideoOutputTechnology FROM WmiMonitorConnectionParams"
        for monitor in self.wmi_query(query, namespace="root\\wmi"):
            technology = monitor.VideoOutputTechnology
            if technology is not None and technology < 0:
                technology += 2 ** 32
            # DISPLAY\DELA0B1\5&1a2b3c&0&UID4353_0
            parts = (monitor.InstanceName or "").split("\\")
            displays.append({
                "builtin": technology in WIN_BUILTIN_TECHNOLOGY,
                "connection": WIN_OUTPUT_TECHNOLOGY.get(technology, ""),
                "model": parts[1] if len(parts) > 1 else "",
            })
        return displays
