"""
Core primitives shared by every contractrest layer: errors, logging, settings.
"""

from contractrest.core.errors import (
    BackendError,
    ConfigError,
    ContractRestError,
    ErrorCategory,
    ErrorContext,
    InvalidIdentifierError,
    MetadataError,
)
from contractrest.core.logging import configure_logging, get_logger

__all__ = [
    "BackendError",
    "ConfigError",
    "ContractRestError",
    "ErrorCategory",
    "ErrorContext",
    "InvalidIdentifierError",
    "MetadataError",
    "configure_logging",
    "get_logger",
]
