"""
Configuration management and singleton pattern.

This module provides the main configuration loading and management interface,
implementing a singleton pattern to ensure configuration is loaded only once.
"""

import logging
from pathlib import Path
from typing import Optional

from ..models.config import CaptureConfig
from ..validation import handle_config_error, ErrorSeverity
from .loader import apply_env_overrides, load_main_config
from .validators import validate_capture_config

logger = logging.getLogger(__name__)

# Config keys that may be overridden through PROCCAPTURE_* variables.
_ENV_KEYS = {
    "sample_millis": "SAMPLE_MILLIS",
    "enumeration_workers": "ENUMERATION_WORKERS",
    "windows_batch_size": "WINDOWS_BATCH_SIZE",
    "windows_query_timeout_seconds": "WINDOWS_QUERY_TIMEOUT_SECONDS",
}

_CONFIG: Optional[CaptureConfig] = None

# Default config shipped inside the package; tests and the CLI may override it.
DEFAULT_CONFIG_PATH = Path(__file__).parent.parent / "conf" / "config.toml"
_CONFIG_FILE_PATH = DEFAULT_CONFIG_PATH


def set_config_path(config_path: Path) -> None:
    """
    Set a custom configuration file path and drop any cached configuration.

    Args:
        config_path: Path to the main config.toml file
    """
    global _CONFIG_FILE_PATH, _CONFIG
    _CONFIG_FILE_PATH = Path(config_path)
    _CONFIG = None
    logger.info(f"Configuration path set to: {config_path}")


def clear_config_cache() -> None:
    """Clear the cached configuration, forcing a reload on next access."""
    global _CONFIG
    _CONFIG = None
    logger.debug("Configuration cache cleared")


def _load_config(config_path: Path) -> CaptureConfig:
    """
    Load and validate the capture configuration.

    Raises:
        FileNotFoundError: If the configuration file is missing
        ValidationError: If configuration validation fails
        tomllib.TOMLDecodeError: If the TOML file is malformed
    """
    try:
        main_config_data = load_main_config(config_path)
        capture_data = apply_env_overrides(main_config_data.get("capture", {}), _ENV_KEYS)
        capture_config = validate_capture_config(capture_data)
        logger.info(
            f"Loaded capture configuration: sample={capture_config.sample_millis}ms, "
            f"workers={capture_config.enumeration_workers}"
        )
        return capture_config
    except FileNotFoundError as e:
        handle_config_error(
            error=e,
            context="loading configuration file",
            severity=ErrorSeverity.CRITICAL,
            reraise=True,
            logger=logger
        )
        raise
    except Exception as e:
        handle_config_error(
            error=e,
            context="processing configuration",
            severity=ErrorSeverity.CRITICAL,
            reraise=True,
            logger=logger
        )
        raise


def get_config() -> CaptureConfig:
    """
    Get the global capture configuration, loading it if necessary.

    Returns:
        The singleton CaptureConfig instance
    """
    global _CONFIG
    if _CONFIG is None:
        _CONFIG = _load_config(_CONFIG_FILE_PATH)
    return _CONFIG


def is_config_loaded() -> bool:
    """Check if configuration has been loaded and cached."""
    return _CONFIG is not None


def get_config_info() -> dict:
    """
    Get information about the current configuration state.

    Returns:
        Dictionary with configuration metadata
    """
    return {
        "config_loaded": is_config_loaded(),
        "config_path": str(_CONFIG_FILE_PATH),
        "sample_millis": _CONFIG.sample_millis if _CONFIG else None,
    }
