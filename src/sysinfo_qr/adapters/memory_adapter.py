"""
Memory (RAM) Adapter

Reports installed system memory via psutil.
"""

from typing import Dict, Any

import psutil

from .base_adapter import BaseInventoryAdapter


class MemoryAdapter(BaseInventoryAdapter):
    """
    System memory adapter.

    Collects:
        - total RAM in bytes
        - total swap/page file in bytes
    """

    category = "memory"

    def collect(self) -> Dict[str, Any]:
        mem = psutil.virtual_memory()
        swap = psutil.swap_memory()
        return {
            "total": mem.total,
            "swap_total": swap.total,
        }
