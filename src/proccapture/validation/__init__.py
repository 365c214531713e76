"""
Validation and error handling for the proccapture package.
"""

from .exceptions import (
    ErrorSeverity,
    InvalidArgumentError,
    ValidationError,
    handle_error,
    handle_config_error,
    handle_subprocess_error,
    handle_cli_error,
)
from .validators import (
    validate_positive_float,
    validate_positive_integer,
)

__all__ = [
    "ErrorSeverity",
    "InvalidArgumentError",
    "ValidationError",
    "handle_error",
    "handle_config_error",
    "handle_subprocess_error",
    "handle_cli_error",
    "validate_positive_float",
    "validate_positive_integer",
]
