"""
Command execution utilities.

This module runs external tools used for platform augmentation and checks
whether they are available on the system.
"""

import logging
import shutil
import subprocess
from typing import Optional, Sequence, Tuple

from ..validation import ErrorSeverity, handle_subprocess_error

logger = logging.getLogger(__name__)


def run_command(
    args: Sequence[str], timeout: Optional[float] = None
) -> Tuple[int, str, str]:
    """Execute a command and capture its output without ever raising.

    Args:
        args: Program and arguments, passed without a shell.
        timeout: Seconds to wait before the child is killed. None waits forever.

    Returns:
        Tuple of (return_code, stdout_string, stderr_string).
        return_code is -1 when the command could not be run or timed out.

    Note:
        Uses UTF-8 encoding with error replacement for robust text handling.
    """
    command_str = " ".join(args)
    logger.debug(f"Executing command: '{command_str[:120]}'")
    try:
        process = subprocess.run(
            list(args),
            capture_output=True,
            text=True,
            encoding="utf-8",
            errors="replace",
            timeout=timeout,
            check=False,
        )
        return process.returncode, process.stdout, process.stderr
    except FileNotFoundError as e:
        logger.warning(f"Command not found: {args[0]}: {e}")
        return -1, "", f"Error: Command not found '{args[0]}'"
    except subprocess.TimeoutExpired:
        logger.warning(f"Command '{args[0]}' did not finish within {timeout}s")
        return -1, "", f"Error: Command timed out after {timeout}s"
    except OSError as e:
        handle_subprocess_error(
            error=e, command=args[0], severity=ErrorSeverity.WARNING, reraise=False, logger=logger
        )
        return -1, "", f"An unexpected error occurred: {e}"


def check_powershell_installed() -> bool:
    """Check if a Windows PowerShell executable is available on PATH."""
    return shutil.which("powershell.exe") is not None or shutil.which("powershell") is not None
