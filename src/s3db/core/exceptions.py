"""Exceptions raised by the store.

Every error carries a machine-readable ``code`` so callers can branch on the
failure kind without matching message text.
"""

from typing import Any


class S3DBError(Exception):
    """Base class for all store errors."""

    code = "s3db_error"


class AlreadyExistsError(S3DBError):
    """Raised when creating a database or storage root that already exists."""

    code = "already_exists"


class NotFoundError(S3DBError):
    """Raised when reading a database, schema or record that does not exist."""

    code = "not_found"


class NotEmptyError(S3DBError):
    """Raised when deleting a database or collection that still has entries."""

    code = "not_empty"


class ValidationError(S3DBError):
    """Raised on invalid names/paths or when a record does not match its schema."""

    code = "validation_error"

    def __init__(self, message: str, errors: list[Any] | None = None):
        self.errors = list(errors or [])
        super().__init__(message)


class MissingConfigError(S3DBError):
    """Raised when a collection is written before it is fully configured."""

    code = "missing_config"
