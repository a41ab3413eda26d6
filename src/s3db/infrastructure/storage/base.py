"""Base abstractions for storage backends.

Every backend stores the same layout, keyed by database, collection and
record identifier::

    <root>/<database>/
    <root>/<database>/<collection>/
    <root>/<database>/<collection>/schema.json
    <root>/<database>/<collection>/data/
    <root>/<database>/<collection>/data/<record-id>.json
"""

from abc import ABC, abstractmethod

from s3db.core.exceptions import ValidationError
from s3db.domain.services.name_sanitizer import NameSanitizer

SCHEMA_FILENAME = "schema.json"
DATA_DIRNAME = "data"
RECORD_EXTENSION = ".json"


def record_filename(record_id: str) -> str:
    """Build the file name a record is stored under."""
    return f"{NameSanitizer.sanitize_identifier(record_id)}{RECORD_EXTENSION}"


def as_file_contents(payload: object) -> str:
    """Return a payload as file contents terminated by a single newline.

    Raises:
        ValidationError: If the payload is not a string.
    """
    if not isinstance(payload, str):
        raise ValidationError(f"Data must be a string, got {type(payload).__name__}")
    return payload if payload.endswith("\n") else payload + "\n"


class StorageBackend(ABC):
    """Abstract base class for storage backends.

    Backends only move bytes; they know nothing about schemas or records
    beyond the layout above.
    """

    @abstractmethod
    def write_db(self, db_name: str) -> str:
        """Create a database namespace.

        Raises:
            AlreadyExistsError: If the database already exists.
        """
        ...

    @abstractmethod
    def write_collection(self, db_name: str, collection_name: str) -> str:
        """Ensure the collection namespace and its data area exist."""
        ...

    @abstractmethod
    def write_schema(self, db_name: str, collection_name: str, schema: str) -> str:
        """Write (or overwrite) the collection schema."""
        ...

    @abstractmethod
    def write_record(self, db_name: str, collection_name: str, record_id: str, data: str) -> str:
        """Write (or overwrite) one record.

        Raises:
            ValidationError: If ``data`` is not a string.
        """
        ...

    @abstractmethod
    def read_schema(self, db_name: str, collection_name: str) -> str:
        """Read the collection schema.

        Raises:
            NotFoundError: If the schema does not exist.
        """
        ...

    @abstractmethod
    def read_record(self, db_name: str, collection_name: str, record_id: str) -> str:
        """Read one record.

        Raises:
            NotFoundError: If the record does not exist.
        """
        ...

    @abstractmethod
    def list_records(self, db_name: str, collection_name: str) -> list[str]:
        """List the identifiers of every record in a collection, in no particular order."""
        ...

    @abstractmethod
    def list_collections(self, db_name: str) -> list[str]:
        """List the collection names in a database, in no particular order."""
        ...

    @abstractmethod
    def delete_db(self, db_name: str) -> list[str]:
        """Remove an empty database.

        Returns:
            ``[db_name]`` if removed, ``[]`` if it did not exist.

        Raises:
            NotEmptyError: If the database still contains collections.
        """
        ...

    @abstractmethod
    def delete_collection(self, db_name: str, collection_name: str) -> list[str]:
        """Remove a collection whose data area is empty.

        Returns:
            ``[collection_name]`` if removed, ``[]`` if it did not exist.

        Raises:
            NotEmptyError: If the collection still contains records.
        """
        ...

    @abstractmethod
    def delete_record(self, db_name: str, collection_name: str, record_id: str) -> str | None:
        """Remove one record.

        Returns:
            The record id, or None if the record did not exist.
        """
        ...

    @abstractmethod
    def delete_record_strict(self, db_name: str, collection_name: str, record_id: str) -> str:
        """Remove one record.

        Raises:
            NotFoundError: If the record does not exist.
        """
        ...

    @abstractmethod
    def db_exists(self, db_name: str) -> bool:
        """Check whether a database namespace exists."""
        ...

    @abstractmethod
    def db_path(self, db_name: str) -> str:
        """Locate the database namespace; the format varies by backend."""
        ...
