"""
Configuration validation utilities.
"""

import logging
from typing import Any, Dict

from ..models.config import CaptureConfig, MAX_WINDOWS_BATCH_SIZE, MIN_SAMPLE_MILLIS
from ..validation import validate_positive_float, validate_positive_integer

logger = logging.getLogger(__name__)


def clamp_sample_millis(millis: int) -> int:
    """Raise a sampling window below the floor up to ``MIN_SAMPLE_MILLIS``."""
    if millis < MIN_SAMPLE_MILLIS:
        logger.warning(
            f"Configured capture sample millis too low ({millis}), using {MIN_SAMPLE_MILLIS}ms"
        )
        return MIN_SAMPLE_MILLIS
    return millis


def validate_capture_config(capture_data: Dict[str, Any]) -> CaptureConfig:
    """
    Validate and create a CaptureConfig from raw configuration data.

    Args:
        capture_data: Raw ``[capture]`` table, possibly with environment overrides

    Returns:
        Validated CaptureConfig instance

    Raises:
        ValidationError: If validation fails
    """
    sample_millis = validate_positive_integer(
        capture_data.get("sample_millis", 300),
        min_value=0,
        max_value=60_000,
        field_name="capture.sample_millis",
    )

    enumeration_workers = validate_positive_integer(
        capture_data.get("enumeration_workers", 4),
        min_value=1,
        max_value=64,
        field_name="capture.enumeration_workers",
    )

    windows_batch_size = validate_positive_integer(
        capture_data.get("windows_batch_size", MAX_WINDOWS_BATCH_SIZE),
        min_value=1,
        max_value=MAX_WINDOWS_BATCH_SIZE,
        field_name="capture.windows_batch_size",
    )

    windows_query_timeout = validate_positive_float(
        capture_data.get("windows_query_timeout_seconds", 10.0),
        min_value=0.1,
        max_value=300.0,
        field_name="capture.windows_query_timeout_seconds",
    )

    return CaptureConfig(
        sample_millis=clamp_sample_millis(sample_millis),
        enumeration_workers=enumeration_workers,
        windows_batch_size=windows_batch_size,
        windows_query_timeout=windows_query_timeout,
    )
