"""
Merging of snapshots that share a display name.

Many programs run as several OS processes (browsers, language servers,
worker pools). Aggregation folds them into one logical entry per name.
"""

import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Dict, Iterable, List, Optional

from ..models.snapshot import ProcessSnapshot
from ..system.processes import UNKNOWN, is_unknown

logger = logging.getLogger(__name__)


def normalize_name_key(name: Optional[str], case_insensitive: bool) -> str:
    """Aggregation key for ``name``: trimmed, and case-folded when requested."""
    key = UNKNOWN if name is None else name.strip()
    return key.casefold() if case_insensitive else key


def _sum_metric(base: Optional[Decimal], extra: Optional[Decimal]) -> Optional[Decimal]:
    if base is None:
        return extra
    if extra is None:
        return base
    return base + extra


def _clean_owner(owner: Optional[str]) -> Optional[str]:
    if owner is None:
        return None
    trimmed = owner.strip()
    return trimmed or None


@dataclass
class AggregatedEntry:
    """Running merge state for one display name."""

    display_name: str
    representative_pid: int
    owner: Optional[str]
    cpu_percent: Optional[Decimal]
    memory_mb: Optional[Decimal]
    priority: Optional[int]
    is_system_process: bool

    @classmethod
    def from_snapshot(cls, snapshot: ProcessSnapshot) -> "AggregatedEntry":
        return cls(
            display_name=snapshot.name,
            representative_pid=snapshot.pid,
            owner=_clean_owner(snapshot.owner),
            cpu_percent=snapshot.cpu_percent,
            memory_mb=snapshot.memory_mb,
            priority=snapshot.priority,
            is_system_process=snapshot.is_system_process,
        )

    def merge(self, snapshot: ProcessSnapshot) -> None:
        if is_unknown(self.display_name) and not is_unknown(snapshot.name):
            self.display_name = snapshot.name
        self.representative_pid = min(self.representative_pid, snapshot.pid)
        candidate_owner = _clean_owner(snapshot.owner)
        if is_unknown(self.owner) and not is_unknown(candidate_owner):
            self.owner = candidate_owner
        self.cpu_percent = _sum_metric(self.cpu_percent, snapshot.cpu_percent)
        self.memory_mb = _sum_metric(self.memory_mb, snapshot.memory_mb)
        if snapshot.priority is not None:
            self.priority = (
                snapshot.priority if self.priority is None
                else max(self.priority, snapshot.priority)
            )
        self.is_system_process = self.is_system_process or snapshot.is_system_process

    def to_snapshot(self) -> ProcessSnapshot:
        return ProcessSnapshot(
            pid=self.representative_pid,
            name=UNKNOWN if is_unknown(self.display_name) else self.display_name,
            owner=UNKNOWN if is_unknown(self.owner) else self.owner,
            cpu_percent=self.cpu_percent,
            memory_mb=self.memory_mb,
            priority=self.priority,
            is_system_process=self.is_system_process,
        )


def aggregate_by_name(
    snapshots: Iterable[ProcessSnapshot], case_insensitive: bool = False
) -> List[ProcessSnapshot]:
    """
    Collapse snapshots sharing a normalized display name into one entry each.

    Merge rules: the smallest pid represents the group, a known owner beats
    "unknown", CPU and memory are summed over non-null values, the highest
    non-null priority wins and the system flag is OR'd.

    Output follows the first-seen order of each name, so the same input
    list always produces the same output list.
    """
    snapshots = list(snapshots)
    if not snapshots:
        return []

    aggregated: Dict[str, AggregatedEntry] = {}
    for snapshot in snapshots:
        key = normalize_name_key(snapshot.name, case_insensitive)
        entry = aggregated.get(key)
        if entry is None:
            aggregated[key] = AggregatedEntry.from_snapshot(snapshot)
        else:
            entry.merge(snapshot)

    if len(aggregated) != len(snapshots):
        logger.debug(
            f"Aggregation by name reduced {len(snapshots)} processes to {len(aggregated)} entries"
        )
    return [entry.to_snapshot() for entry in aggregated.values()]
