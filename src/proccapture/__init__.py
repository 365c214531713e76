"""
proccapture: cross-platform process capture engine.

Enumerates running processes, measures CPU and memory over a sampling
window, augments the readings with platform data (priority, system-process
classification), merges processes sharing a display name and ranks the
result.

The package is organized into specialized modules:
- config: Configuration loading and validation
- models: Snapshot and configuration data structures
- validation: Input validation and error handling
- system: Command execution and process naming
- platform_info: Linux, Windows and no-op augmentation providers
- capture: Sampling, aggregation, ranking and the CaptureEngine
- cli: Command-line interface

Usage:
    From command line:
        proccapture --criterion MEMORY --top 5

    Programmatically:
        from proccapture import CaptureEngine, SelectionCriterion, get_config
        engine = CaptureEngine.from_config(get_config())
        top = engine.capture_top_n(SelectionCriterion.CPU, 10)
"""

from .capture import CaptureEngine, MemoryReader
from .config import clear_config_cache, get_config, set_config_path
from .models import CaptureConfig, ExtraInfo, ProcessSnapshot, SelectionCriterion
from .platform_info import (
    AbstractPlatformInfoProvider,
    LinuxPlatformInfoProvider,
    NoOpPlatformInfoProvider,
    WindowsPlatformInfoProvider,
    create_platform_info_provider,
)
from .validation import InvalidArgumentError, ValidationError

__version__ = "1.0.0"

__all__ = [
    "CaptureEngine",
    "MemoryReader",
    "clear_config_cache",
    "get_config",
    "set_config_path",
    "CaptureConfig",
    "ExtraInfo",
    "ProcessSnapshot",
    "SelectionCriterion",
    "AbstractPlatformInfoProvider",
    "LinuxPlatformInfoProvider",
    "NoOpPlatformInfoProvider",
    "WindowsPlatformInfoProvider",
    "create_platform_info_provider",
    "InvalidArgumentError",
    "ValidationError",
]
