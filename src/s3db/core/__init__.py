"""Core S3DB utilities.

This module exports configuration, logging and the error taxonomy.
"""

from s3db.core.config import Settings, get_settings
from s3db.core.exceptions import (
    AlreadyExistsError,
    MissingConfigError,
    NotEmptyError,
    NotFoundError,
    S3DBError,
    ValidationError,
)
from s3db.core.logging import (
    LoggingContext,
    clear_context,
    configure_logging,
    get_logger,
)

__all__ = [
    "Settings",
    "get_settings",
    "configure_logging",
    "get_logger",
    "LoggingContext",
    "clear_context",
    "S3DBError",
    "AlreadyExistsError",
    "NotFoundError",
    "NotEmptyError",
    "ValidationError",
    "MissingConfigError",
]
