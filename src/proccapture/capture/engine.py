"""
Process capture engine.

This module provides the CaptureEngine class, which composes enumeration,
CPU sampling, platform augmentation, aggregation and ranking into the single
operation consumed by the rest of the application: ``capture_top_n``.

One capture cycle:
1. Enumerate processes and record a baseline (CPU time, name, owner) per pid.
2. Wait for the sampling window.
3. Ask the platform info provider about every baselined pid in one call.
4. Re-read CPU time for each process still alive and build snapshots.
5. Aggregate snapshots by display name.
6. Rank by the criterion and truncate, falling back to the current process
   when nothing survived.
"""

import getpass
import logging
import os
import threading
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, TypeVar, Union

import psutil

from ..models.config import CaptureConfig, MIN_SAMPLE_MILLIS
from ..models.snapshot import ExtraInfo, ProcessSnapshot, SelectionCriterion
from ..models.units import round2
from ..platform_info.base import AbstractPlatformInfoProvider
from ..platform_info.factory import create_platform_info_provider, detect_platform
from ..system.processes import extract_display_name, sanitize_name, sanitize_owner
from .aggregator import aggregate_by_name
from .memory_reader import MemoryReader
from .ranker import rank_snapshots, validate_top_n
from .sampler import compute_cpu_percent, logical_core_count, read_cpu_time_ns, wait_for_sample

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Per-process failures that only cost us one field of one process.
_PROCESS_READ_ERRORS = (psutil.Error, OSError, ValueError)


@dataclass(frozen=True)
class Baseline:
    """State of one process at the start of the sampling window."""

    process: psutil.Process
    name: str
    owner: str
    cpu_time_ns: int


class BaselineTable:
    """
    Lock-protected pid -> Baseline map filled during enumeration.

    Enumeration threads write into it; once enumeration finishes the
    engine works on the immutable copy returned by ``freeze``.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._baselines: Dict[int, Baseline] = {}

    def put(self, pid: int, baseline: Baseline) -> None:
        with self._lock:
            self._baselines[pid] = baseline

    def __len__(self) -> int:
        with self._lock:
            return len(self._baselines)

    def freeze(self) -> Dict[int, Baseline]:
        """Return a copy ordered by ascending pid."""
        with self._lock:
            return {pid: self._baselines[pid] for pid in sorted(self._baselines)}


def _safe_read(read: Callable[[], T], fallback: T, what: str, pid: int) -> T:
    try:
        return read()
    except _PROCESS_READ_ERRORS as e:
        logger.debug(f"Process data unavailable ({what}, pid {pid}): {type(e).__name__}: {e}")
        return fallback


class CaptureEngine:
    """
    Captures the top N processes by CPU or memory over a sampling window.

    Each call to ``capture_top_n`` owns its baselines, so concurrent callers
    sharing one engine do not interfere.

    Attributes:
        sample_duration: Sampling window in seconds.
        memory_reader: Fallback memory source.
        info_provider: Platform augmentation, chosen once at construction.
        enumeration_workers: Threads used to read baselines.
        core_count: Logical cores used to normalise CPU percentages.
        case_insensitive_names: Whether aggregation folds name case.
    """

    def __init__(
        self,
        sample_duration: float,
        memory_reader: Optional[MemoryReader] = None,
        info_provider: Optional[AbstractPlatformInfoProvider] = None,
        enumeration_workers: int = 4,
        core_count: Optional[int] = None,
        case_insensitive_names: Optional[bool] = None,
    ):
        """
        Initializes the CaptureEngine.

        Args:
            sample_duration: Sampling window in seconds. Clamping to the
                             50 ms floor is the configuration layer's job.
            memory_reader: Defaults to a MemoryReader for the host platform.
            info_provider: Defaults to the provider for the host platform.
            enumeration_workers: Threads reading baselines; 1 reads serially.
            core_count: Defaults to the number of logical CPUs.
            case_insensitive_names: Defaults to True on Windows only.
        """
        self.sample_duration = sample_duration
        self.memory_reader = memory_reader or MemoryReader()
        self.info_provider = info_provider or create_platform_info_provider()
        self.enumeration_workers = max(1, enumeration_workers)
        self.core_count = max(core_count or logical_core_count(), 1)
        if case_insensitive_names is None:
            case_insensitive_names = detect_platform() == "windows"
        self.case_insensitive_names = case_insensitive_names
        logger.info(
            f"CaptureEngine initialized: sample={sample_duration:.3f}s, cores={self.core_count}, "
            f"provider={self.info_provider.__class__.__name__}"
        )

    @classmethod
    def from_config(cls, config: CaptureConfig, **kwargs) -> "CaptureEngine":
        """Build an engine from validated configuration."""
        if "info_provider" not in kwargs:
            kwargs["info_provider"] = create_platform_info_provider(
                batch_size=config.windows_batch_size,
                timeout=config.windows_query_timeout,
            )
        return cls(
            sample_duration=max(config.sample_millis, MIN_SAMPLE_MILLIS) / 1000.0,
            enumeration_workers=config.enumeration_workers,
            **kwargs,
        )

    def capture_top_n(
        self,
        criterion: Union[SelectionCriterion, str],
        n: int,
        stop_event: Optional[threading.Event] = None,
    ) -> List[ProcessSnapshot]:
        """
        Capture processes and return the top ``n`` by ``criterion``.

        Args:
            criterion: SelectionCriterion, or a name accepted by
                       ``SelectionCriterion.from_string``.
            n: Maximum number of snapshots to return; must be > 0.
            stop_event: Optional event that cuts the sampling wait short.

        Returns:
            At most ``n`` snapshots sorted by the metric descending, ties by
            ascending pid. Empty only when no process could be enumerated.

        Raises:
            InvalidArgumentError: If ``n`` <= 0 or the criterion is unknown.
        """
        validate_top_n(n)
        if not isinstance(criterion, SelectionCriterion):
            criterion = SelectionCriterion.from_string(criterion)

        baselines = self._enumerate_baselines()
        if not baselines:
            logger.warning("No operating system processes could be captured")
            return []
        logger.debug(f"Baseline captured for {len(baselines)} processes")

        # CPU deltas are always normalised by the configured window, interrupted or not.
        wait_for_sample(self.sample_duration, stop_event)

        extras = self._fetch_extras(list(baselines))
        snapshots = self._resample(baselines, extras, self.sample_duration)
        aggregated = aggregate_by_name(snapshots, self.case_insensitive_names)
        top = rank_snapshots(aggregated, criterion, n, fallback=self._self_snapshot)

        if logger.isEnabledFor(logging.DEBUG):
            for snapshot in top[:5]:
                logger.debug(
                    f"Captured pid={snapshot.pid}, name={snapshot.name}, owner={snapshot.owner}, "
                    f"cpu={snapshot.cpu_percent}, mem={snapshot.memory_mb}, "
                    f"priority={snapshot.priority}, system={snapshot.is_system_process}"
                )
        logger.debug(f"Processes after ranking: {len(top)}")
        return top

    def _enumerate_baselines(self) -> Dict[int, Baseline]:
        try:
            processes = list(psutil.process_iter())
        except (psutil.Error, OSError) as e:
            logger.warning(f"Process enumeration failed: {type(e).__name__}: {e}")
            return {}

        table = BaselineTable()
        if self.enumeration_workers > 1 and len(processes) > 1:
            with ThreadPoolExecutor(
                max_workers=self.enumeration_workers, thread_name_prefix="CaptureBaseline"
            ) as executor:
                # Consuming the results re-raises anything unexpected from a worker.
                list(executor.map(lambda p: self._record_baseline(p, table), processes))
        else:
            for proc in processes:
                self._record_baseline(proc, table)
        return table.freeze()

    def _record_baseline(self, proc: psutil.Process, table: BaselineTable) -> None:
        pid = proc.pid
        try:
            with proc.oneshot():
                cpu_time_ns = _safe_read(lambda: read_cpu_time_ns(proc), 0, "cpu time", pid)
                exe = _safe_read(proc.exe, "", "exe", pid)
                name = _safe_read(proc.name, "", "name", pid)
                cmdline = _safe_read(proc.cmdline, [], "cmdline", pid)
                owner = _safe_read(proc.username, None, "user", pid)
        except _PROCESS_READ_ERRORS as e:
            logger.debug(f"Skipping pid {pid} during enumeration: {type(e).__name__}: {e}")
            return

        table.put(
            pid,
            Baseline(
                process=proc,
                name=sanitize_name(extract_display_name(exe, name, cmdline)),
                owner=sanitize_owner(owner),
                cpu_time_ns=cpu_time_ns,
            ),
        )

    def _fetch_extras(self, pids: List[int]) -> Dict[int, ExtraInfo]:
        try:
            return self.info_provider.fetch(pids)
        except Exception as e:
            # Providers are not supposed to raise; a buggy one must not abort the cycle.
            logger.warning(
                f"{self.info_provider.__class__.__name__} failed: {type(e).__name__}: {e}"
            )
            return {}

    def _resample(
        self, baselines: Dict[int, Baseline], extras: Dict[int, ExtraInfo], window: float
    ) -> List[ProcessSnapshot]:
        snapshots: List[ProcessSnapshot] = []
        for pid, baseline in baselines.items():
            proc = baseline.process
            try:
                if not proc.is_running():
                    continue
                after_ns: Optional[int] = read_cpu_time_ns(proc)
            except psutil.ZombieProcess:
                after_ns = None
            except psutil.NoSuchProcess:
                continue
            except _PROCESS_READ_ERRORS as e:
                logger.debug(f"Second CPU reading unavailable for pid {pid}: {e}")
                after_ns = None

            extra = extras.get(pid)
            memory_mb = extra.memory_mb if extra is not None else None
            if memory_mb is None:
                memory_mb = self.memory_reader.read_memory_mb(pid)

            snapshots.append(
                ProcessSnapshot(
                    pid=pid,
                    name=baseline.name,
                    owner=baseline.owner,
                    cpu_percent=compute_cpu_percent(
                        baseline.cpu_time_ns, after_ns, window, self.core_count
                    ),
                    memory_mb=memory_mb,
                    priority=extra.priority if extra is not None else None,
                    is_system_process=extra.is_system_process if extra is not None else False,
                )
            )
        return snapshots

    def _self_snapshot(self) -> ProcessSnapshot:
        pid = os.getpid()
        name = _safe_read(lambda: psutil.Process(pid).name(), "python", "name", pid)
        try:
            owner: Optional[str] = getpass.getuser()
        except (KeyError, OSError):
            owner = None
        return ProcessSnapshot(
            pid=pid,
            name=sanitize_name(name),
            owner=sanitize_owner(owner),
            cpu_percent=round2(0),
            memory_mb=None,
            priority=None,
            is_system_process=False,
        )
