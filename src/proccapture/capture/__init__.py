"""
Process capture engine and its building blocks.

- Sampler: CPU-time deltas turned into percentages
- MemoryReader: resident memory from procfs
- Aggregator: one entry per display name
- Ranker: sort, truncate and fall back
- CaptureEngine: the orchestrator exposing ``capture_top_n``
"""

from .aggregator import AggregatedEntry, aggregate_by_name, normalize_name_key
from .engine import Baseline, BaselineTable, CaptureEngine
from .memory_reader import MemoryReader
from .ranker import rank_snapshots, validate_top_n
from .sampler import compute_cpu_percent, read_cpu_time_ns, wait_for_sample

__all__ = [
    "AggregatedEntry",
    "aggregate_by_name",
    "normalize_name_key",
    "Baseline",
    "BaselineTable",
    "CaptureEngine",
    "MemoryReader",
    "rank_snapshots",
    "validate_top_n",
    "compute_cpu_percent",
    "read_cpu_time_ns",
    "wait_for_sample",
]
