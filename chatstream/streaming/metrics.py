"""Per-session streaming metrics."""
from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Dict, Optional


@dataclass
class StreamMetrics:
    """Counters collected by one stream session.

    ``snapshots`` counts ``on_fragment`` deliveries; ``blank_frames`` counts
    frames skipped because they carried no data (e.g. consecutive
    separators).
    """

    reads: int = 0
    bytes_received: int = 0
    frames: int = 0
    blank_frames: int = 0
    snapshots: int = 0
    warnings: int = 0
    time_to_first_snapshot_ms: Optional[float] = None
    total_duration_ms: Optional[float] = None

    def as_dict(self) -> Dict[str, Any]:
        return asdict(self)


__all__ = ["StreamMetrics"]
