"""
Base Inventory Adapter Interface

All inventory adapters must inherit from BaseInventoryAdapter and implement
the required methods. Each adapter owns exactly one slot of the raw inventory
(system, chassis, os, cpu, memory, disks, usb, bluetooth, displays) so adapters
can run concurrently without sharing state.
"""

import sys
from abc import ABC, abstractmethod
from typing import Dict, Any, Optional, List

if sys.platform == "win32":
    try:
        import wmi
        import pythoncom
        HAS_WMI = True
    except ImportError:
        HAS_WMI = False
else:
    HAS_WMI = False


class BaseInventoryAdapter(ABC):
    """
    Abstract base class for all inventory adapters.

    Contributors should inherit from this class, set ``category`` and
    implement ``collect`` to add a new inventory source.

    Example:
        class MyAdapter(BaseInventoryAdapter):
            category = "my_slot"

            def collect(self) -> List[Dict[str, Any]]:
                # Query the platform and return plain records
                return [{"name": "..."}]

    ``collect`` should return an empty record or list when the source does
    not exist on this host, and raise when the source exists but fails.
    """

    category = ""

    def __init__(self, config: Optional[Dict[str, Any]] = None):
        """
        Initialize the adapter with optional configuration.

        Args:
            config: Optional dictionary containing adapter-specific settings
        """
        self.config = config or {}
        self._initialized = False
        self._error_count = 0
        self._wmi_conns: Dict[str, Any] = {}
        self._com_initialized = False

    @property
    def is_initialized(self) -> bool:
        """Check if the adapter has been successfully initialized."""
        return self._initialized

    @property
    def adapter_name(self) -> str:
        """Return the name of this adapter."""
        return self.__class__.__name__

    def initialize(self) -> bool:
        """
        Prepare the adapter for a collection.

        Returns:
            True if initialization was successful, False otherwise
        """
        self._initialized = True
        return True

    @abstractmethod
    def collect(self) -> Any:
        """
        Collect this adapter's slot of the raw inventory.

        Returns:
            A mapping for single-record slots or a list of mappings for
            device enumerations
        """
        pass

    def cleanup(self) -> None:
        """Release any held resources."""
        self._wmi_conns.clear()
        if self._com_initialized:
            pythoncom.CoUninitialize()
            self._com_initialized = False
        self._initialized = False

    def record_error(self, error_message: str) -> None:
        """
        Record an error occurrence.

        Args:
            error_message: Description of the error
        """
        self._error_count += 1

    @property
    def error_count(self) -> int:
        return self._error_count

    def wmi_query(self, wql: str, namespace: str = "root\\cimv2") -> List[Any]:
        """
        Run a WQL query on Windows.

        COM is initialised lazily on the calling thread, since adapters are
        collected on worker threads.

        Returns:
            Result objects, or an empty list when WMI is unavailable
        """
        if not HAS_WMI:
            return []
        if not self._com_initialized:
            pythoncom.CoInitialize()
            self._com_initialized = True
        conn = self._wmi_conns.get(namespace)
        if conn is None:
            conn = wmi.WMI(namespace=namespace)
            self._wmi_conns[namespace] = conn
        return list(conn.query(wql))

    def __enter__(self):
        """Context manager entry."""
        self.initialize()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit."""
        self.cleanup()
        return False
