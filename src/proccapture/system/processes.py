"""
Process naming helpers.

These turn the raw executable path, process name, command line and user name
reported by the OS into the short labels carried by snapshots.
"""

import ntpath
import posixpath
import re
from typing import Optional, Sequence

UNKNOWN = "unknown"

NAME_MAX_LENGTH = 120
OWNER_MAX_LENGTH = 80

_DISALLOWED_CHARS = re.compile(r"[^A-Za-z0-9._\- ]")


def is_unknown(value: Optional[str]) -> bool:
    """Return True for None, blank strings and the literal "unknown" in any case."""
    return value is None or not value.strip() or value.strip().lower() == UNKNOWN


def _basename(path: str) -> str:
    # Windows paths may arrive on any platform, so strip both separators.
    return ntpath.basename(posixpath.basename(path.rstrip("/\\")))


def extract_display_name(
    exe: Optional[str], name: Optional[str], cmdline: Optional[Sequence[str]]
) -> str:
    """Pick the display name of a process.

    The executable's basename wins, then the name the OS reports, then the
    first command-line token.

    Examples:
        >>> extract_display_name("/usr/bin/python3.12", "python3", None)
        'python3.12'
        >>> extract_display_name("", None, ["C:\\\\Tools\\\\app.exe", "-x"])
        'app.exe'
    """
    if exe and exe.strip():
        return _basename(exe.strip()) or UNKNOWN
    if name and name.strip():
        return name.strip()
    if cmdline:
        first = cmdline[0].strip() if cmdline[0] else ""
        if first:
            return _basename(first) or UNKNOWN
    return UNKNOWN


def sanitize_label(value: Optional[str], max_length: int) -> str:
    """Trim, drop characters outside ``[A-Za-z0-9._- ]`` and truncate.

    Empty results become "unknown".
    """
    if value is None:
        return UNKNOWN
    sanitized = _DISALLOWED_CHARS.sub("", value.strip())[:max_length]
    return sanitized if sanitized else UNKNOWN


def sanitize_name(value: Optional[str]) -> str:
    return sanitize_label(value, NAME_MAX_LENGTH)


def sanitize_owner(value: Optional[str]) -> str:
    return sanitize_label(value, OWNER_MAX_LENGTH)
