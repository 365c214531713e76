"""
Defines the abstract interface for platform information providers.

A provider augments the snapshot being built for each pid with data that
bare CPU-time accounting cannot supply: memory, scheduling priority and
whether the process looks like an OS-owned one.
"""

import logging
from abc import ABC, abstractmethod
from typing import Dict, Iterable, List

from ..models.snapshot import ExtraInfo

logger = logging.getLogger(__name__)


class AbstractPlatformInfoProvider(ABC):
    """
    Abstract base class for platform information providers.

    Implementations must never raise from ``fetch``: any failure yields a
    partial or empty mapping, and callers treat a missing pid as "no extra
    info available".
    """

    def __init__(self, **kwargs):
        self.provider_kwargs = kwargs
        logger.info(f"Initializing {self.__class__.__name__} with extra_args: {kwargs}")

    @staticmethod
    def valid_pids(pids: Iterable[int]) -> List[int]:
        """Return the positive pids from ``pids`` in ascending order, without duplicates."""
        if not pids:
            return []
        return sorted({pid for pid in pids if pid is not None and pid > 0})

    @abstractmethod
    def fetch(self, pids: Iterable[int]) -> Dict[int, ExtraInfo]:
        """
        Look up extra information for a set of process IDs.

        Args:
            pids: Process IDs captured at baseline time.

        Returns:
            A mapping from pid to ExtraInfo for every pid that yielded data.
        """
        pass


def map_nice_to_priority(nice_value: int) -> int:
    """
    Map a Unix nice value onto the 1-10 priority scale.

    The scale mirrors Windows priority classes: 10 realtime, 9 high,
    7 above normal, 5 normal, 3 below normal, 1 idle.
    """
    clamped = max(-20, min(19, nice_value))
    if clamped <= -15:
        return 10
    if clamped <= -10:
        return 9
    if clamped <= -5:
        return 7
    if clamped <= 4:
        return 5
    if clamped <= 10:
        return 3
    return 1
