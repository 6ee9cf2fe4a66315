"""Core infrastructure module.

This module exports core utilities used across features.
Never imports from features - only from external libraries.
"""

from .config import Settings, get_settings, get_global_settings
from .exceptions import (
    ServiceException,
    ResolutionError,
    InputError,
    UpstreamError,
    NotFoundError,
    ValidationError,
)
from .logging import setup_logging, get_logger

__all__ = [
    # Config
    "Settings",
    "get_settings",
    "get_global_settings",
    # Exceptions
    "ServiceException",
    "ResolutionError",
    "InputError",
    "UpstreamError",
    "NotFoundError",
    "ValidationError",
    # Logging
    "setup_logging",
    "get_logger",
]
