"""
Configuration file loading utilities.

This module handles the low-level loading and parsing of the TOML configuration
file and the environment variables that override it.
"""

import logging
import os
import tomllib
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

from ..validation import handle_config_error, ErrorSeverity

logger = logging.getLogger(__name__)

ENV_PREFIX = "PROCCAPTURE_"


def load_toml_file(file_path: Path, description: str = "configuration file") -> Dict[str, Any]:
    """
    Load and parse a TOML file with error handling.

    Args:
        file_path: Path to the TOML file to load
        description: Human-readable description for error messages

    Returns:
        Parsed TOML data as a dictionary

    Raises:
        FileNotFoundError: If the file doesn't exist
        tomllib.TOMLDecodeError: If the file is malformed
    """
    logger.info(f"Loading {description} from: {file_path}")

    if not file_path.exists():
        logger.error(f"{description} not found: {file_path}")
        raise FileNotFoundError(f"{description} not found: {file_path}")

    try:
        with open(file_path, "rb") as f:
            return tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        handle_config_error(
            error=e,
            context=f"parsing {description}",
            severity=ErrorSeverity.CRITICAL,
            reraise=True,
            logger=logger
        )
        raise


def load_main_config(config_path: Path) -> Dict[str, Any]:
    """Load the main configuration file (config.toml)."""
    return load_toml_file(config_path, "main configuration file")


def apply_env_overrides(
    section: Dict[str, Any],
    keys: Mapping[str, str],
    environ: Optional[Mapping[str, str]] = None,
) -> Dict[str, Any]:
    """
    Overlay environment variables on a configuration section.

    Each key is looked up as ``PROCCAPTURE_<KEY>`` in upper snake case.
    Blank values are ignored so an exported but empty variable does not
    erase a file setting.

    Args:
        section: Raw values from the TOML table
        keys: Mapping of config key to the environment suffix to consult
        environ: Environment to read (defaults to ``os.environ``)

    Returns:
        A new dictionary with overrides applied
    """
    env = os.environ if environ is None else environ
    merged = dict(section)
    for key, suffix in keys.items():
        raw = env.get(f"{ENV_PREFIX}{suffix}")
        if raw is not None and raw.strip():
            logger.debug(f"Config key '{key}' overridden from environment")
            merged[key] = raw.strip()
    return merged
