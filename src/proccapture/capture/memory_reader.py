"""
Memory lookup from procfs, independent of the platform info providers.
"""

import logging
from decimal import Decimal
from pathlib import Path
from typing import Optional

from ..models.units import bytes_to_mb
from ..platform_info.factory import detect_platform

logger = logging.getLogger(__name__)


class MemoryReader:
    """
    Reads memory in megabytes from ``/proc/<pid>/statm`` on Linux.

    The value is the first statm field (program size in pages) times 4096 bytes.

    On other platforms it always reports None and memory comes from the
    platform info provider instead.
    """

    PAGE_SIZE = 4096

    def __init__(self, system: Optional[str] = None, proc_root: Path = Path("/proc")):
        self.is_linux = detect_platform(system) == "linux"
        self.proc_root = Path(proc_root)

    def read_memory_mb(self, pid: int) -> Optional[Decimal]:
        if not self.is_linux:
            return None
        return self._read_linux_memory(pid)

    def _read_linux_memory(self, pid: int) -> Optional[Decimal]:
        statm_path = self.proc_root / str(pid) / "statm"
        try:
            content = statm_path.read_text()
        except OSError as e:
            logger.debug(f"Could not read memory for pid {pid}: {e}")
            return None

        parts = content.split()
        if not parts:
            return None
        try:
            size_pages = int(parts[0])
        except ValueError as e:
            logger.debug(f"Malformed statm for pid {pid}: {e}")
            return None
        return bytes_to_mb(size_pages * self.PAGE_SIZE)
