"""
CPU sampling math.

A CPU percentage is derived from two cumulative CPU-time readings taken a
sampling window apart, normalised by the number of logical cores so that a
fully busy machine reads 100%.
"""

import logging
import threading
import time
from decimal import Decimal
from typing import Optional, Tuple

import psutil

from ..models.units import bytes_to_mb, round2

logger = logging.getLogger(__name__)

NANOS_PER_SECOND = 1_000_000_000

__all__ = [
    "NANOS_PER_SECOND",
    "bytes_to_mb",
    "compute_cpu_percent",
    "logical_core_count",
    "read_cpu_time_ns",
    "round2",
    "wait_for_sample",
]


def logical_core_count() -> int:
    """Number of logical CPUs, at least 1."""
    return max(psutil.cpu_count(logical=True) or 1, 1)


def read_cpu_time_ns(proc: psutil.Process) -> int:
    """
    Read a process's cumulative user plus system CPU time in nanoseconds.

    Raises:
        psutil.Error: If the process vanished or access is denied.
    """
    times = proc.cpu_times()
    return int(round((times.user + times.system) * NANOS_PER_SECOND))


def compute_cpu_percent(
    before_ns: int,
    after_ns: Optional[int],
    window_seconds: float,
    core_count: int,
) -> Optional[Decimal]:
    """
    Derive the CPU percentage for one process over a sampling window.

    Args:
        before_ns: CPU time at baseline.
        after_ns: CPU time at resample, or None when it could not be read.
        window_seconds: Length of the sampling window.
        core_count: Logical cores the time is spread across.

    Returns:
        The percentage rounded half-up to two decimals, never negative,
        or None when the second reading or the window is unusable.
    """
    if after_ns is None:
        return None
    elapsed_ns = Decimal(int(window_seconds * NANOS_PER_SECOND)) * max(core_count, 1)
    if elapsed_ns <= 0:
        return None
    delta_ns = max(0, after_ns - before_ns)
    return round2(Decimal(delta_ns) / elapsed_ns * 100)


def wait_for_sample(
    duration: float, stop_event: Optional[threading.Event] = None
) -> Tuple[float, bool]:
    """
    Block for the sampling window.

    When ``stop_event`` is set by another thread the wait ends early. The
    event is left set so the interrupt stays visible to the caller's owner.

    Returns:
        Tuple of (elapsed_seconds, interrupted).
    """
    start = time.monotonic()
    if stop_event is None:
        time.sleep(duration)
        return time.monotonic() - start, False

    interrupted = stop_event.wait(timeout=duration)
    elapsed = time.monotonic() - start
    if interrupted:
        logger.warning(
            f"Sampling wait interrupted after {elapsed:.3f}s of {duration:.3f}s; "
            "continuing with the configured window"
        )
    return elapsed, interrupted
