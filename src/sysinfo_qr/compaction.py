"""
SysInfo QR Compaction Pipeline

Turns a Fingerprint into a text payload small enough for a QR code.

Strategies:
    - COMPACT: MessagePack -> Brotli (quality 11) -> base64
    - PLAIN:   JSON text -> base64

Every run records the size of each stage, starting from the compact JSON
baseline, so the reduction achieved by each step can be reported. Stage
sizes are telemetry only; the pipeline never branches on them.
"""

import json
import base64
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Any, Optional, List

import brotli
import msgpack

from .errors import ConfigurationError
from .fingerprint import Fingerprint

logger = logging.getLogger("sysinfo_qr.compaction")

DEFAULT_BROTLI_QUALITY = 11
BROTLI_QUALITY_RANGE = range(0, 12)


class CompactionStrategy(Enum):
    """Payload encoding strategy."""
    COMPACT = "compact"
    PLAIN = "plain"

    @classmethod
    def from_name(cls, name: str) -> "CompactionStrategy":
        try:
            return cls(str(name).lower())
        except ValueError:
            choices = ", ".join(s.value for s in cls)
            raise ConfigurationError(
                f"Unknown compaction strategy: {name}",
                hint=f"choose one of: {choices}",
            ) from None


def check_brotli_quality(quality: Any) -> int:
    """Return ``quality`` if Brotli accepts it, else raise ConfigurationError."""
    if isinstance(quality, bool) or not isinstance(quality, int) or quality not in BROTLI_QUALITY_RANGE:
        raise ConfigurationError(
            f"Invalid Brotli quality: {quality}",
            hint="use an integer from 0 to 11",
        )
    return quality


@dataclass
class StageMeasurement:
    """Size of the data after one pipeline stage."""
    name: str
    byte_length: int


@dataclass
class CompactionResult:
    """Stage-by-stage sizes plus the final payload of one compaction run."""
    strategy: CompactionStrategy
    payload: str
    stages: List[StageMeasurement] = field(default_factory=list)

    @property
    def baseline_length(self) -> int:
        return self.stages[0].byte_length if self.stages else 0

    def stage_length(self, name: str) -> Optional[int]:
        for stage in self.stages:
            if stage.name == name:
                return stage.byte_length
        return None

    def reduction(self, name: Optional[str] = None) -> float:
        """
        Percentage reduction of a stage against the JSON baseline.

        Args:
            name: Stage name; defaults to the final stage

        Returns:
            Reduction in percent, rounded to one decimal (negative if larger)
        """
        if not self.stages or not self.baseline_length:
            return 0.0
        length = self.stage_length(name) if name else self.stages[-1].byte_length
        if length is None:
            raise KeyError(name)
        return round((1 - length / self.baseline_length) * 100, 1)

    def summary_lines(self) -> List[str]:
        """Human-readable telemetry, one line per stage."""
        lines = []
        for index, stage in enumerate(self.stages):
            if index == 0:
                lines.append(f"Original JSON size: {stage.byte_length} bytes")
                continue
            lines.append(
                f"After {stage.name}: {stage.byte_length} bytes "
                f"({self.reduction(stage.name):.1f}% reduction)"
            )
        lines.append(f"Total size reduction vs original: {self.reduction():.1f}%")
        return lines


def to_json_bytes(record: Dict[str, Any]) -> bytes:
    return json.dumps(record, separators=(",", ":"), ensure_ascii=False).encode("utf-8")


def compact(
    fingerprint: Fingerprint,
    strategy: CompactionStrategy = CompactionStrategy.COMPACT,
    brotli_quality: int = DEFAULT_BROTLI_QUALITY,
) -> CompactionResult:
    """
    Encode a fingerprint into a base64 payload using the given strategy.

    Args:
        fingerprint: Fingerprint to encode
        strategy: COMPACT or PLAIN
        brotli_quality: Brotli quality (0-11), COMPACT only

    Returns:
        CompactionResult with the payload and stage sizes
    """
    check_brotli_quality(brotli_quality)
    record = fingerprint.to_dict()
    json_data = to_json_bytes(record)
    stages = [StageMeasurement("json", len(json_data))]

    if strategy is CompactionStrategy.COMPACT:
        packed = msgpack.packb(record, use_bin_type=True)
        stages.append(StageMeasurement("msgpack", len(packed)))

        compressed = brotli.compress(packed, mode=brotli.MODE_GENERIC, quality=brotli_quality)
        stages.append(StageMeasurement("brotli", len(compressed)))

        encoded = base64.b64encode(compressed)
    else:
        encoded = base64.b64encode(json_data)

    stages.append(StageMeasurement("base64", len(encoded)))

    result = CompactionResult(strategy=strategy, payload=encoded.decode("ascii"), stages=stages)
    for line in result.summary_lines():
        logger.debug(line)
    return result


def decode_payload(
    payload: str,
    strategy: CompactionStrategy = CompactionStrategy.COMPACT,
) -> Fingerprint:
    """Reverse ``compact``: rebuild the Fingerprint carried by a payload."""
    raw = base64.b64decode(payload.encode("ascii"), validate=True)

    if strategy is CompactionStrategy.COMPACT:
        record = msgpack.unpackb(brotli.decompress(raw), raw=False)
    else:
        record = json.loads(raw.decode("utf-8"))

    return Fingerprint.from_dict(record)
