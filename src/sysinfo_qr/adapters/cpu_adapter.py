"""
CPU Adapter

Reports the CPU brand string using py-cpuinfo, falling back to the platform
module when py-cpuinfo cannot identify the processor.
"""

import platform
from typing import Dict, Any

import cpuinfo

from .base_adapter import BaseInventoryAdapter


class CPUAdapter(BaseInventoryAdapter):
    """
    CPU identification adapter.

    Collects:
        - brand (e.g. "Intel(R) Core(TM) i7-12700K")
        - vendor
        - arch
    """

    category = "cpu"

    def collect(self) -> Dict[str, Any]:
        cpu_data = cpuinfo.get_cpu_info()
        return {
            "brand": cpu_data.get("brand_raw") or platform.processor(),
            "vendor": cpu_data.get("vendor_id_raw", ""),
            "arch": cpu_data.get("arch", platform.machine()),
        }
