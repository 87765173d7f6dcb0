"""
Operating System Adapter

Collects the host name and the distribution name/release of the running OS.
"""

import sys
import platform
from typing import Dict, Any

from .base_adapter import BaseInventoryAdapter


class OSAdapter(BaseInventoryAdapter):
    """
    Operating system adapter.

    Collects:
        - hostname
        - distro (e.g. "Ubuntu", "macOS", "Windows 11")
        - release (e.g. "22.04", "14.4.1", "10.0.22631")
    """

    category = "os"

    def collect(self) -> Dict[str, Any]:
        record = {"hostname": platform.node(), "distro": "", "release": ""}

        if sys.platform == "darwin":
            record["distro"] = "macOS"
            record["release"] = platform.mac_ver()[0]
        elif sys.platform == "win32":
            record["distro"] = f"{platform.system()} {platform.release()}".strip()
            record["release"] = platform.version()
        else:
            try:
                os_release = platform.freedesktop_os_release()
            except OSError:
                os_release = {}
            record["distro"] = os_release.get("NAME") or platform.system()
            record["release"] = os_release.get("VERSION_ID") or platform.release()

        return record
