"""
Process snapshot data models.

This module defines the immutable values produced by one capture cycle:
- SelectionCriterion: the metric used to rank processes
- ProcessSnapshot: one process's reading over a sampling window
- ExtraInfo: platform-sourced augmentation for a single pid
"""

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, Optional

from ..validation import InvalidArgumentError

_CRITERION_ALIASES = {
    "CPU": "CPU",
    "MEM": "MEMORY",
    "MEMORY": "MEMORY",
    "RAM": "MEMORY",
}


class SelectionCriterion(Enum):
    """Metric used to rank captured processes."""

    CPU = "cpu"
    MEMORY = "memory"

    @classmethod
    def from_string(cls, raw: Optional[str]) -> "SelectionCriterion":
        """
        Parse a user-supplied criterion name.

        Accepts ``CPU`` as well as ``MEM``, ``MEMORY`` and ``RAM`` for memory,
        ignoring case and surrounding whitespace.

        Raises:
            InvalidArgumentError: If the value is blank or not recognised.
        """
        if raw is None or not raw.strip():
            raise InvalidArgumentError(
                "criterion is required (CPU|MEMORY)", field_name="criterion", value=raw
            )
        member = _CRITERION_ALIASES.get(raw.strip().upper())
        if member is None:
            raise InvalidArgumentError(
                f"unknown criterion: {raw}", field_name="criterion", value=raw
            )
        return cls[member]


@dataclass(frozen=True)
class ExtraInfo:
    """Best-effort platform data for one pid; every field may be missing."""

    memory_mb: Optional[Decimal] = None
    priority: Optional[int] = None
    is_system_process: bool = False


@dataclass(frozen=True)
class ProcessSnapshot:
    """
    Immutable reading of a single (possibly aggregated) process.

    Attributes:
        pid: Process ID. For aggregated entries, the smallest pid of the group.
        name: Sanitized display name of the executable.
        owner: Sanitized owning user, or "unknown".
        cpu_percent: CPU share over the sampling window across all cores,
                     rounded to two decimals. None when the second reading failed.
        memory_mb: Memory in megabytes (platform working set, or the first statm
                   field times 4096 bytes on Linux), or None when unavailable.
        priority: Priority on the 1-10 scale, or None when unavailable.
        is_system_process: Whether the process looks OS-owned or privileged.
    """

    pid: int
    name: str
    owner: str
    cpu_percent: Optional[Decimal]
    memory_mb: Optional[Decimal]
    priority: Optional[int]
    is_system_process: bool

    def metric(self, criterion: SelectionCriterion) -> Decimal:
        """Return the value ranked by ``criterion``, treating None as zero."""
        if criterion is SelectionCriterion.CPU:
            value = self.cpu_percent
        else:
            value = self.memory_mb
        return value if value is not None else Decimal(0)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to plain Python types, keeping missing values as None."""
        return {
            "pid": self.pid,
            "name": self.name,
            "owner": self.owner,
            "cpu_percent": float(self.cpu_percent) if self.cpu_percent is not None else None,
            "memory_mb": float(self.memory_mb) if self.memory_mb is not None else None,
            "priority": self.priority,
            "is_system_process": self.is_system_process,
        }
