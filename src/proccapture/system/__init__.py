"""
System interaction utilities.

- Command execution with bounded latency and no exceptions
- Process display-name and owner normalization
"""

from .commands import check_powershell_installed, run_command
from .processes import (
    NAME_MAX_LENGTH,
    OWNER_MAX_LENGTH,
    UNKNOWN,
    extract_display_name,
    is_unknown,
    sanitize_label,
    sanitize_name,
    sanitize_owner,
)

__all__ = [
    "check_powershell_installed",
    "run_command",
    "NAME_MAX_LENGTH",
    "OWNER_MAX_LENGTH",
    "UNKNOWN",
    "extract_display_name",
    "is_unknown",
    "sanitize_label",
    "sanitize_name",
    "sanitize_owner",
]
