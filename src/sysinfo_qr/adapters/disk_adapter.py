"""
Disk Layout Adapter

Enumerates physical disks with their media type and capacity. Partitions and
virtual block devices are not reported.
"""

import re
import sys
import plistlib
from pathlib import Path
from typing import Dict, Any, Optional, List

from ..utils import read_sysfs_value, run_command
from .base_adapter import BaseInventoryAdapter

SYS_BLOCK = Path("/sys/block")
SECTOR_BYTES = 512

# Block devices that are not physical disks
VIRTUAL_PREFIXES = ("loop", "ram", "zram", "dm-", "md", "sr", "fd", "nbd")
# eMMC hardware boot partitions and replay-protected memory block
EMMC_PSEUDO_DEVICE = re.compile(r"^mmcblk\d+(boot\d+|rpmb)$")

# MSFT_PhysicalDisk codes
WIN_MEDIA_TYPES = {3: "HDD", 4: "SSD", 5: "SCM"}
WIN_BUS_NVME = 17


class DiskAdapter(BaseInventoryAdapter):
    """
    Physical disk layout adapter.

    Collects, per disk:
        - name (model string)
        - type ("SSD", "HDD", "NVMe" or "" when the platform does not say)
        - size in bytes
    """

    category = "disks"

    def __init__(self, config: Optional[Dict[str, Any]] = None, sys_block: Path = SYS_BLOCK):
        super().__init__(config)
        self._sys_block = Path(sys_block)

    def collect(self) -> List[Dict[str, Any]]:
        if sys.platform == "darwin":
            return self._collect_macos()
        if sys.platform == "win32":
            return self._collect_windows()
        return self._collect_linux()

    def _collect_linux(self) -> List[Dict[str, Any]]:
        if not self._sys_block.is_dir():
            return []

        disks = []
        for device in sorted(self._sys_block.iterdir()):
            name = device.name
            if name.startswith(VIRTUAL_PREFIXES) or EMMC_PSEUDO_DEVICE.match(name):
                continue

            sectors = read_sysfs_value(device / "size", "0")
            rotational = read_sysfs_value(device / "queue" / "rotational")

            if name.startswith("nvme"):
                disk_type = "NVMe"
            elif rotational == "1":
                disk_type = "HDD"
            elif rotational == "0":
                disk_type = "SSD"
            else:
                disk_type = ""

            disks.append({
                "device": f"/dev/{name}",
                "name": read_sysfs_value(device / "device" / "model"),
                "type": disk_type,
                "size": int(sectors) * SECTOR_BYTES if sectors.isdigit() else 0,
            })
        return disks

    def _collect_macos(self) -> List[Dict[str, Any]]:
        listing = run_command(["diskutil", "list", "-plist", "physical"])
        if not listing:
            return []

        disks = []
        for whole_disk in plistlib.loads(listing.encode("utf-8")).get("WholeDisks", []):
            info_text = run_command(["diskutil", "info", "-plist", whole_disk])
            if not info_text:
                continue
            info = plistlib.loads(info_text.encode("utf-8"))

            if info.get("SolidState"):
                protocol = info.get("BusProtocol", "")
                disk_type = "NVMe" if protocol in ("PCI-Express", "Apple Fabric") else "SSD"
            else:
                disk_type = "HDD"

            disks.append({
                "device": f"/dev/{whole_disk}",
                "name": info.get("MediaName", ""),
                "type": disk_type,
                "size": info.get("TotalSize") or info.get("Size") or 0,
            })
        return disks

    def _collect_windows(self) -> List[Dict[str, Any]]:
        disks = []
        query = "SELECT FriendlyName, MediaType, BusType, Size FROM MSFT_PhysicalDisk"
        for disk in self.wmi_query(query, namespace="root\\Microsoft\\Windows\\Storage"):
            if disk.BusType == WIN_BUS_NVME:
                disk_type = "NVMe"
            else:
                disk_type = WIN_MEDIA_TYPES.get(disk.MediaType, "")
            disks.append({
                "name": (disk.FriendlyName or "").strip(),
                "type": disk_type,
                "size": int(disk.Size or 0),
            })
        return disks
