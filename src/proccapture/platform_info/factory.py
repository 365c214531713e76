"""
Platform information provider factory.

The platform is probed once, when the provider is created, and never again.
"""

import logging
import platform
from typing import Optional

from ..system.commands import check_powershell_installed
from .base import AbstractPlatformInfoProvider
from .noop import NoOpPlatformInfoProvider

logger = logging.getLogger(__name__)


def detect_platform(system: Optional[str] = None) -> str:
    """Return "linux", "windows" or "other" for ``system`` (defaults to the host)."""
    name = (system if system is not None else platform.system()).lower()
    if "linux" in name:
        return "linux"
    if "win" in name and "darwin" not in name:
        return "windows"
    return "other"


def create_platform_info_provider(
    system: Optional[str] = None, **kwargs
) -> AbstractPlatformInfoProvider:
    """
    Create the provider matching the host platform.

    Args:
        system: Platform name override, as returned by ``platform.system()``.
        **kwargs: Passed to the provider; ``batch_size`` and ``timeout`` apply
                  to Windows, ``proc_root`` to Linux.

    Returns:
        A Linux, Windows or no-op provider.
    """
    kind = detect_platform(system)
    if kind == "linux":
        from .linux import LinuxPlatformInfoProvider

        return LinuxPlatformInfoProvider(
            **{k: v for k, v in kwargs.items() if k == "proc_root"}
        )
    if kind == "windows":
        from .windows import WindowsPlatformInfoProvider

        if not check_powershell_installed():
            logger.warning("PowerShell not found on PATH, Windows platform info disabled")
            return NoOpPlatformInfoProvider()
        return WindowsPlatformInfoProvider(
            **{k: v for k, v in kwargs.items() if k in ("batch_size", "timeout")}
        )

    logger.info(f"No platform info provider for '{system or platform.system()}', using no-op")
    return NoOpPlatformInfoProvider()
