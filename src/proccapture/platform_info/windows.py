"""
Platform information provider for Windows, backed by PowerShell ``Get-Process``.

PowerShell is invoked in batches of at most 40 pids so the generated command
line stays within Windows limits. Each invocation is bounded by a timeout.
"""

import json
import logging
from decimal import Decimal
from typing import Any, Dict, Iterable, List, Optional

from ..models.units import bytes_to_mb
from ..models.config import MAX_WINDOWS_BATCH_SIZE
from ..models.snapshot import ExtraInfo
from ..system.commands import run_command
from .base import AbstractPlatformInfoProvider

logger = logging.getLogger(__name__)

_PRIORITY_BY_NAME = {
    "idle": 1,
    "belownormal": 3,
    "normal": 5,
    "abovenormal": 7,
    "high": 9,
    "realtime": 10,
}

# ProcessPriorityClass values, as emitted when ConvertTo-Json serializes the enum.
_PRIORITY_BY_CODE = {
    64: 1,
    16384: 3,
    32: 5,
    32768: 7,
    128: 9,
    256: 10,
}

_SYSTEM_PATH_MARKERS = ("\\windows\\", "\\system32\\")
_SYSTEM_PATH_PREFIXES = ("c:\\windows", "c:/windows")


def chunk_pids(pids: List[int], size: int) -> List[List[int]]:
    """Split ``pids`` into consecutive chunks of at most ``size`` items."""
    return [pids[i:i + size] for i in range(0, len(pids), size)]


def build_query_script(pids: Iterable[int]) -> str:
    """Build the PowerShell script that lists the given pids as JSON."""
    id_list = ",".join(str(pid) for pid in pids)
    return (
        "[Console]::OutputEncoding = [System.Text.Encoding]::UTF8; "
        f"Get-Process -Id {id_list} -ErrorAction SilentlyContinue | "
        "Select-Object Id,WorkingSet64,PriorityClass,Path | ConvertTo-Json -Depth 2"
    )


def map_priority_class(priority_class: Any) -> Optional[int]:
    """Map a priority class name or numeric code onto the 1-10 scale."""
    if priority_class is None or isinstance(priority_class, bool):
        return None
    if isinstance(priority_class, int):
        return _PRIORITY_BY_CODE.get(priority_class)
    text = str(priority_class).strip()
    if text.isdigit():
        return _PRIORITY_BY_CODE.get(int(text))
    return _PRIORITY_BY_NAME.get(text.lower())


def is_system_path(path: Optional[str]) -> bool:
    """
    Classify an executable path.

    Paths under the Windows directory count as system processes. A missing
    path also counts, since only privileged processes hide it from us.
    """
    if path is None or not str(path).strip():
        return True
    lower = str(path).strip().lower()
    return any(marker in lower for marker in _SYSTEM_PATH_MARKERS) or lower.startswith(
        _SYSTEM_PATH_PREFIXES
    )


def parse_process_rows(output: str) -> Dict[int, ExtraInfo]:
    """
    Parse ``ConvertTo-Json`` output into ExtraInfo values.

    PowerShell emits a bare object for a single match and an array otherwise.

    Raises:
        ValueError: If the output is not valid JSON.
    """
    node = json.loads(output)
    rows = node if isinstance(node, list) else [node]

    result: Dict[int, ExtraInfo] = {}
    for row in rows:
        if not isinstance(row, dict):
            continue
        pid = _as_int(row.get("Id"))
        if pid is None:
            continue

        working_set = _as_int(row.get("WorkingSet64"))
        if working_set is None:
            working_set = _as_int(row.get("WorkingSet"))
        memory_mb: Optional[Decimal] = (
            bytes_to_mb(working_set) if working_set is not None else None
        )

        result[pid] = ExtraInfo(
            memory_mb=memory_mb,
            priority=map_priority_class(row.get("PriorityClass")),
            is_system_process=is_system_path(row.get("Path")),
        )
    return result


def _as_int(value: Any) -> Optional[int]:
    if value is None or isinstance(value, bool):
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


class WindowsPlatformInfoProvider(AbstractPlatformInfoProvider):
    """
    Queries working set, priority class and executable path through PowerShell.

    Attributes:
        batch_size: Pids per invocation, never more than 40.
        timeout: Seconds allowed for one invocation; expiry loses that batch only.
    """

    POWERSHELL_ARGS: List[str] = ["powershell.exe", "-NoLogo", "-NoProfile", "-Command"]

    def __init__(
        self,
        batch_size: int = MAX_WINDOWS_BATCH_SIZE,
        timeout: Optional[float] = 10.0,
        **kwargs,
    ):
        super().__init__(**kwargs)
        self.batch_size = max(1, min(batch_size, MAX_WINDOWS_BATCH_SIZE))
        self.timeout = timeout

    def fetch(self, pids: Iterable[int]) -> Dict[int, ExtraInfo]:
        result: Dict[int, ExtraInfo] = {}
        for batch in chunk_pids(self.valid_pids(pids), self.batch_size):
            result.update(self._fetch_batch(batch))
        logger.debug(f"Windows platform info resolved for {len(result)} processes")
        return result

    def _fetch_batch(self, batch: List[int]) -> Dict[int, ExtraInfo]:
        args = self.POWERSHELL_ARGS + [build_query_script(batch)]
        returncode, stdout, stderr = run_command(args, timeout=self.timeout)
        if returncode != 0:
            logger.debug(
                f"PowerShell exited with code {returncode} for {len(batch)} pids: {stderr.strip()[:200]}"
            )
            return {}
        if not stdout or not stdout.strip():
            return {}
        try:
            return parse_process_rows(stdout)
        except ValueError as e:
            logger.warning(f"Could not parse PowerShell output: {e}")
            return {}
