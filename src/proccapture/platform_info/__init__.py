"""
Platform information providers.

- Abstract interface defining the provider contract
- Linux (procfs), Windows (PowerShell) and no-op implementations
- Factory selecting the implementation for the host platform
"""

from .base import AbstractPlatformInfoProvider, map_nice_to_priority
from .factory import create_platform_info_provider, detect_platform
from .linux import LinuxPlatformInfoProvider
from .noop import NoOpPlatformInfoProvider
from .windows import WindowsPlatformInfoProvider

__all__ = [
    "AbstractPlatformInfoProvider",
    "map_nice_to_priority",
    "create_platform_info_provider",
    "detect_platform",
    "LinuxPlatformInfoProvider",
    "NoOpPlatformInfoProvider",
    "WindowsPlatformInfoProvider",
]
