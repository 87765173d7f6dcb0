"""
SysInfo QR Fingerprint Builder

Collects every raw inventory category concurrently, then classifies the raw
data into a fixed-schema Fingerprint. Every fingerprint field is always
present; missing or empty sources degrade to documented placeholders.
"""

import logging
from concurrent.futures import ThreadPoolExecutor, wait
from dataclasses import dataclass, field, fields
from typing import Dict, Any, Optional, List, Tuple, Union, Sequence

from .adapters import default_adapters
from .adapters.base_adapter import BaseInventoryAdapter
from .classifiers import (
    storage_drive_type,
    total_storage_size,
    has_webcam,
    has_keyboard,
    has_mouse,
    monitor_topology,
)
from .errors import InventoryCollectionFailure
from .utils import format_size_gb

logger = logging.getLogger("sysinfo_qr.fingerprint")

UNKNOWN = "Unknown"
NOT_AVAILABLE = "Not available"


@dataclass
class RawInventory:
    """Raw inventory slots, one per adapter category. Any slot may be empty."""
    system: Dict[str, Any] = field(default_factory=dict)
    chassis: Dict[str, Any] = field(default_factory=dict)
    os: Dict[str, Any] = field(default_factory=dict)
    cpu: Dict[str, Any] = field(default_factory=dict)
    memory: Dict[str, Any] = field(default_factory=dict)
    disks: List[Dict[str, Any]] = field(default_factory=list)
    usb: List[Dict[str, Any]] = field(default_factory=list)
    bluetooth: List[Dict[str, Any]] = field(default_factory=list)
    displays: List[Dict[str, Any]] = field(default_factory=list)

    def __post_init__(self):
        # An absent slot behaves exactly like an empty one
        for slot in fields(self):
            if getattr(self, slot.name) is None:
                setattr(self, slot.name, slot.default_factory())

    @classmethod
    def slot_names(cls) -> List[str]:
        return [f.name for f in fields(cls)]


@dataclass(frozen=True)
class Fingerprint:
    """
    Fixed-schema summary of one host.

    Serialized keys (in order) are listed in FIELD_KEYS. ``storage_size`` is
    a string such as ``"512GB"``, or the integer ``0`` when no disks were
    reported.
    """
    computer_name: str = UNKNOWN
    serial_no: str = NOT_AVAILABLE
    type: str = UNKNOWN
    brand: str = UNKNOWN
    model: str = UNKNOWN
    operating_system: str = UNKNOWN
    cpu: str = UNKNOWN
    ram: str = "0GB"
    storage_drive: str = UNKNOWN
    storage_size: Union[str, int] = 0
    webcam: str = "No"
    keyboard: str = "No"
    mouse: str = "No"
    monitors: Tuple[str, ...] = (UNKNOWN,)

    FIELD_KEYS = (
        ("computer_name", "ComputerName"),
        ("serial_no", "SerialNo"),
        ("type", "Type"),
        ("brand", "Brand"),
        ("model", "Model"),
        ("operating_system", "OperatingSystem"),
        ("cpu", "CPU"),
        ("ram", "RAM"),
        ("storage_drive", "StorageDrive"),
        ("storage_size", "StorageSize"),
        ("webcam", "Webcam"),
        ("keyboard", "Keyboard"),
        ("mouse", "Mouse"),
        ("monitors", "Monitors"),
    )

    def to_dict(self) -> Dict[str, Any]:
        """Return an ordered plain mapping keyed by the serialized field names."""
        record = {}
        for attr, key in self.FIELD_KEYS:
            value = getattr(self, attr)
            record[key] = list(value) if attr == "monitors" else value
        return record

    @classmethod
    def from_dict(cls, record: Dict[str, Any]) -> "Fingerprint":
        """Rebuild a Fingerprint from ``to_dict`` output."""
        values = {}
        for attr, key in cls.FIELD_KEYS:
            if key in record:
                value = record[key]
                values[attr] = tuple(value) if attr == "monitors" else value
        return cls(**values)


def _text(value: Any, default: str = UNKNOWN) -> str:
    text = str(value).strip() if value is not None else ""
    return text or default


def build_from_inventory(raw: RawInventory) -> Fingerprint:
    """Classify raw inventory data into a Fingerprint. Never raises on missing data."""
    os_parts = [str(raw.os.get(key) or "").strip() for key in ("distro", "release")]

    return Fingerprint(
        computer_name=_text(raw.os.get("hostname")),
        serial_no=_text(raw.system.get("serial"), NOT_AVAILABLE),
        type=_text(raw.chassis.get("type")),
        brand=_text(raw.system.get("manufacturer")),
        model=_text(raw.system.get("model")),
        operating_system=_text(" ".join(part for part in os_parts if part)),
        cpu=_text(raw.cpu.get("brand")),
        ram=format_size_gb(raw.memory.get("total") or 0),
        storage_drive=storage_drive_type(raw.disks),
        storage_size=total_storage_size(raw.disks),
        webcam=has_webcam(raw.usb),
        keyboard=has_keyboard(raw.usb, raw.bluetooth),
        mouse=has_mouse(raw.usb, raw.bluetooth),
        monitors=tuple(monitor_topology(raw.displays)),
    )


class FingerprintBuilder:
    """
    Orchestrates inventory collection and classification.

    Adapters run concurrently, one per inventory slot. If any adapter raises,
    the whole build fails with InventoryCollectionFailure; there is no partial
    result and no retry.
    """

    def __init__(
        self,
        adapters: Optional[Sequence[BaseInventoryAdapter]] = None,
        config: Optional[Dict[str, Any]] = None,
    ):
        self.config = config or {}
        self.adapters = list(adapters) if adapters is not None else default_adapters(self.config)
        general_config = self.config.get("general", {})
        self.max_workers = general_config.get("max_workers") or len(self.adapters) or 1

    @staticmethod
    def _collect_one(adapter: BaseInventoryAdapter) -> Any:
        with adapter:
            try:
                return adapter.collect()
            except Exception as e:
                adapter.record_error(str(e))
                logger.debug(f"{adapter.adapter_name} failed: {e}")
                raise

    def collect_inventory(self) -> RawInventory:
        """Run every adapter in parallel and fill one RawInventory slot per adapter."""
        slots = RawInventory.slot_names()

        with ThreadPoolExecutor(max_workers=self.max_workers, thread_name_prefix="Inventory") as executor:
            futures = [(adapter, executor.submit(self._collect_one, adapter)) for adapter in self.adapters]
            wait([future for _, future in futures])

        collected: Dict[str, Any] = {}
        for adapter, future in futures:
            error = future.exception()
            if error is not None:
                raise InventoryCollectionFailure(adapter.category or adapter.adapter_name, error) from error
            if adapter.category not in slots:
                logger.warning(f"Ignoring {adapter.adapter_name}: unknown inventory slot '{adapter.category}'")
                continue
            result = future.result()
            if result:
                collected[adapter.category] = result
            logger.debug(f"Collected {adapter.category} via {adapter.adapter_name}")

        return RawInventory(**collected)

    def build(self) -> Fingerprint:
        """Collect the raw inventory and classify it into a Fingerprint."""
        raw = self.collect_inventory()
        fingerprint = build_from_inventory(raw)
        logger.info(f"Fingerprint built for {fingerprint.computer_name}")
        return fingerprint
