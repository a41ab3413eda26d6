"""Domain services for S3DB.

Services contain logic that doesn't naturally fit within a single entity.
They have no dependencies on infrastructure or external frameworks.
"""

from s3db.domain.services.id_generator import IdGenerator, RecordIdGenerator
from s3db.domain.services.name_sanitizer import NAME_PATTERN, NameSanitizer
from s3db.domain.services.record_validator import RecordValidationError, RecordValidator

__all__ = [
    "IdGenerator",
    "NAME_PATTERN",
    "NameSanitizer",
    "RecordIdGenerator",
    "RecordValidationError",
    "RecordValidator",
]
