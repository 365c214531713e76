"""
Platform information provider for Linux, reading files under ``/proc``.
"""

import logging
import os
from pathlib import Path
from typing import Dict, Iterable, Optional

from ..models.snapshot import ExtraInfo
from .base import AbstractPlatformInfoProvider, map_nice_to_priority

logger = logging.getLogger(__name__)

# Index of the nice value among the fields that follow the ")" closing the comm field.
_NICE_FIELD_INDEX = 16

_SYSTEM_EXE_PREFIXES = ("/usr/sbin", "/sbin")


class LinuxPlatformInfoProvider(AbstractPlatformInfoProvider):
    """
    Reads priority and system-process hints from procfs.

    - ``/proc/<pid>/stat`` gives the nice value, mapped onto the 1-10 scale.
    - ``/proc/<pid>/status`` gives the real UID; UID 0 marks a system process.
    - ``/proc/<pid>/exe`` under ``/sbin`` or ``/usr/sbin`` also marks one.

    Memory is left to MemoryReader. Pids whose files cannot be read
    (exited, permission denied) are omitted from the result.
    """

    def __init__(self, proc_root: Path = Path("/proc"), **kwargs):
        super().__init__(**kwargs)
        self.proc_root = Path(proc_root)

    def fetch(self, pids: Iterable[int]) -> Dict[int, ExtraInfo]:
        result: Dict[int, ExtraInfo] = {}
        for pid in self.valid_pids(pids):
            info = self._read_info(pid)
            if info is not None:
                result[pid] = info
        logger.debug(f"Linux platform info resolved for {len(result)} processes")
        return result

    def _read_info(self, pid: int) -> Optional[ExtraInfo]:
        priority = self._read_priority(pid)
        system = self._is_system_process(pid)
        if priority is None and not system:
            return None
        return ExtraInfo(memory_mb=None, priority=priority, is_system_process=system)

    def _read_priority(self, pid: int) -> Optional[int]:
        stat_path = self.proc_root / str(pid) / "stat"
        try:
            content = stat_path.read_text()
        except OSError as e:
            logger.debug(f"Could not read Linux priority for pid {pid}: {e}")
            return None

        # The comm field may contain spaces and parentheses; parse after the last ")".
        closing = content.rfind(")")
        if closing < 0:
            return None
        parts = content[closing + 1:].split()
        if len(parts) <= _NICE_FIELD_INDEX:
            return None
        try:
            nice_value = int(parts[_NICE_FIELD_INDEX])
        except ValueError as e:
            logger.debug(f"Malformed stat for pid {pid}: {e}")
            return None
        return map_nice_to_priority(nice_value)

    def _is_system_process(self, pid: int) -> bool:
        uid = self._read_uid(pid)
        if uid == 0:
            return True

        exe_path = self.proc_root / str(pid) / "exe"
        try:
            target = os.readlink(exe_path)
        except OSError:
            return False
        return target.lower().startswith(_SYSTEM_EXE_PREFIXES)

    def _read_uid(self, pid: int) -> Optional[int]:
        status_path = self.proc_root / str(pid) / "status"
        try:
            with open(status_path, "r") as f_status:
                for line in f_status:
                    if line.startswith("Uid:"):
                        fields = line[4:].split()
                        if not fields:
                            return None
                        try:
                            return int(fields[0])
                        except ValueError:
                            return None
        except OSError as e:
            logger.debug(f"Could not determine UID for pid {pid}: {e}")
        return None
