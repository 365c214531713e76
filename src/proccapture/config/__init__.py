"""
Configuration management for the proccapture package.

This module provides a clean interface for loading, validating, and accessing
configuration data from a TOML file with singleton pattern management.
"""

from .manager import (
    DEFAULT_CONFIG_PATH,
    clear_config_cache,
    get_config,
    get_config_info,
    is_config_loaded,
    set_config_path,
)
from .loader import apply_env_overrides, load_main_config, load_toml_file
from .validators import clamp_sample_millis, validate_capture_config

__all__ = [
    "DEFAULT_CONFIG_PATH",
    "get_config",
    "set_config_path",
    "clear_config_cache",
    "is_config_loaded",
    "get_config_info",
    "load_toml_file",
    "load_main_config",
    "apply_env_overrides",
    "clamp_sample_millis",
    "validate_capture_config",
]
