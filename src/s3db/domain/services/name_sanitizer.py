"""Name sanitizer service.

Database and collection names become directory names, so they are limited to
word characters. Record identifiers become file names and must not be able to
leave the collection's data directory.
"""

import re

from s3db.core.exceptions import ValidationError

# Pattern for valid database and collection names
NAME_PATTERN = re.compile(r"^\w+$")

RESERVED_IDENTIFIERS = frozenset({".", ".."})


class NameSanitizer:
    """Validate names before they reach the storage backend."""

    @classmethod
    def is_valid(cls, name: object) -> bool:
        """Check whether a value is a valid database or collection name.

        Examples:
            >>> NameSanitizer.is_valid("good_name1")
            True
            >>> NameSanitizer.is_valid("bad name")
            False
        """
        if not isinstance(name, str):
            return False
        return bool(NAME_PATTERN.fullmatch(name))

    @classmethod
    def sanitize(cls, name: object) -> str:
        """Return the name as a string, or raise if it is not made of word characters.

        Args:
            name: Candidate database or collection name.

        Returns:
            The validated name.

        Raises:
            ValidationError: If the name is empty or has non-word characters.
        """
        value = name if isinstance(name, str) else str(name)
        if not cls.is_valid(value):
            raise ValidationError(f"Invalid name '{value}': must match {NAME_PATTERN.pattern}")
        return value

    @classmethod
    def sanitize_identifier(cls, record_id: object) -> str:
        """Validate a record identifier for use as a file name.

        Raises:
            ValidationError: If the identifier is empty, not a string, a
                relative path marker, or contains a path separator.
        """
        if not isinstance(record_id, str) or not record_id:
            raise ValidationError(f"Invalid record id {record_id!r}: must be a non-empty string")
        if record_id in RESERVED_IDENTIFIERS or "/" in record_id or "\\" in record_id:
            raise ValidationError(f"Invalid record id {record_id!r}: must not be a path")
        return record_id
