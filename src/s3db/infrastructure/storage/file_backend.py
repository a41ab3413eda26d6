"""Local filesystem storage backend."""

import errno
import re
from pathlib import Path

from s3db.core.exceptions import AlreadyExistsError, NotEmptyError, NotFoundError, ValidationError
from s3db.core.logging import get_logger
from s3db.domain.services.name_sanitizer import NameSanitizer
from s3db.infrastructure.storage.base import (
    DATA_DIRNAME,
    RECORD_EXTENSION,
    SCHEMA_FILENAME,
    StorageBackend,
    as_file_contents,
    record_filename,
)

logger = get_logger(__name__)

# Directory names that must never be used anywhere in a storage root
PATH_BLACKLIST = (
    "bin",
    "boot",
    "cdrom",
    "data",
    "dev",
    "docker",
    "etc",
    "home",
    "lib",
    "lib64",
    "media",
    "mnt",
    "opt",
    "proc",
    "root",
    "run",
    "sbin",
    "srv",
    "sys",
    "usr",
    "var",
)

PATH_PATTERN = re.compile(r"^[\w/]+$")


def _is_not_empty(error: OSError) -> bool:
    # Some platforms report a non-empty rmdir as EEXIST
    return error.errno in (errno.ENOTEMPTY, errno.EEXIST)


class FileBackend(StorageBackend):
    """Storage backend keeping one JSON file per record under a root directory."""

    def __init__(self, path: str | Path) -> None:
        raw = str(path).strip()
        self.validate_path(raw)
        self.path = Path(raw)

    @classmethod
    def validate_path(cls, path: str) -> None:
        """Reject storage roots that look like system directories.

        Args:
            path: Candidate root path.

        Raises:
            ValidationError: If any path component is blacklisted or the
                path has characters other than word characters and ``/``.
        """
        errors = []
        components = {part.lower() for part in path.split("/") if part}

        for name in PATH_BLACKLIST:
            if name in components:
                errors.append(f"`{name}` is not allowed in a storage path")

        if not PATH_PATTERN.match(path):
            errors.append(f"path does not match {PATH_PATTERN.pattern}")

        if errors:
            raise ValidationError(", ".join(errors))

    @classmethod
    def create(cls, path: str | Path) -> "FileBackend":
        """Create the root directory, reusing it if it already exists."""
        backend = cls(path)
        backend.path.mkdir(parents=True, exist_ok=True)
        logger.debug("Storage root ready", path=str(backend.path))
        return backend

    @classmethod
    def create_strict(cls, path: str | Path) -> "FileBackend":
        """Create the root directory.

        Raises:
            AlreadyExistsError: If the root already exists.
        """
        backend = cls(path)
        try:
            backend.path.mkdir(parents=True)
        except FileExistsError as e:
            raise AlreadyExistsError(f"Storage root '{backend.path}' already exists") from e
        logger.debug("Storage root created", path=str(backend.path))
        return backend

    def destroy(self) -> bool:
        """Remove the root directory if it exists and is empty."""
        try:
            self.path.rmdir()
        except FileNotFoundError:
            return False
        except OSError as e:
            if _is_not_empty(e):
                return False
            raise
        return True

    def destroy_strict(self) -> "FileBackend":
        """Remove the root directory.

        Raises:
            NotFoundError: If the root does not exist.
            NotEmptyError: If the root still contains databases.
        """
        try:
            self.path.rmdir()
        except FileNotFoundError as e:
            raise NotFoundError(f"Storage root '{self.path}' does not exist") from e
        except OSError as e:
            if _is_not_empty(e):
                raise NotEmptyError(f"Storage root '{self.path}' is not empty") from e
            raise
        return self

    # Path helpers

    def db_path(self, db_name: str) -> str:
        return str(self.path / NameSanitizer.sanitize(db_name))

    def collection_path(self, db_name: str, collection_name: str) -> str:
        return str(Path(self.db_path(db_name)) / NameSanitizer.sanitize(collection_name))

    def schema_path(self, db_name: str, collection_name: str) -> str:
        return str(Path(self.collection_path(db_name, collection_name)) / SCHEMA_FILENAME)

    def data_path(self, db_name: str, collection_name: str) -> str:
        return str(Path(self.collection_path(db_name, collection_name)) / DATA_DIRNAME)

    def record_path(self, db_name: str, collection_name: str, record_id: str) -> str:
        return str(Path(self.data_path(db_name, collection_name)) / record_filename(record_id))

    # Writes

    def write_db(self, db_name: str) -> str:
        path = Path(self.db_path(db_name))
        try:
            path.mkdir()
        except FileExistsError as e:
            raise AlreadyExistsError(f"Database '{db_name}' already exists") from e
        except FileNotFoundError as e:
            raise NotFoundError(f"Storage root '{self.path}' does not exist") from e

        logger.debug("Database directory created", database=db_name, path=str(path))
        return db_name

    def write_collection(self, db_name: str, collection_name: str) -> str:
        try:
            Path(self.collection_path(db_name, collection_name)).mkdir(exist_ok=True)
            Path(self.data_path(db_name, collection_name)).mkdir(exist_ok=True)
        except FileNotFoundError as e:
            raise NotFoundError(f"Database '{db_name}' does not exist") from e

        logger.debug("Collection directory ready", database=db_name, collection=collection_name)
        return collection_name

    def write_schema(self, db_name: str, collection_name: str, schema: str) -> str:
        contents = as_file_contents(schema)
        path = Path(self.schema_path(db_name, collection_name))
        try:
            path.write_text(contents, encoding="utf-8")
        except FileNotFoundError as e:
            raise NotFoundError(f"Collection '{collection_name}' does not exist") from e

        logger.debug("Schema written", database=db_name, collection=collection_name)
        return schema

    def write_record(self, db_name: str, collection_name: str, record_id: str, data: str) -> str:
        contents = as_file_contents(data)
        path = Path(self.record_path(db_name, collection_name, record_id))
        try:
            path.write_text(contents, encoding="utf-8")
        except FileNotFoundError as e:
            raise NotFoundError(f"Collection '{collection_name}' does not exist") from e

        logger.debug(
            "Record written", database=db_name, collection=collection_name, record_id=record_id
        )
        return data

    # Reads

    def read_schema(self, db_name: str, collection_name: str) -> str:
        try:
            return Path(self.schema_path(db_name, collection_name)).read_text(encoding="utf-8")
        except FileNotFoundError as e:
            raise NotFoundError(f"Schema for collection '{collection_name}' does not exist") from e

    def read_record(self, db_name: str, collection_name: str, record_id: str) -> str:
        try:
            return Path(self.record_path(db_name, collection_name, record_id)).read_text(
                encoding="utf-8"
            )
        except FileNotFoundError as e:
            raise NotFoundError(f"Record '{record_id}' does not exist") from e

    def list_records(self, db_name: str, collection_name: str) -> list[str]:
        data_dir = Path(self.data_path(db_name, collection_name))
        try:
            entries = list(data_dir.iterdir())
        except FileNotFoundError as e:
            raise NotFoundError(f"Collection '{collection_name}' does not exist") from e

        return [
            entry.name[: -len(RECORD_EXTENSION)]
            for entry in entries
            if entry.is_file() and entry.name.endswith(RECORD_EXTENSION)
        ]

    def list_collections(self, db_name: str) -> list[str]:
        db_dir = Path(self.db_path(db_name))
        try:
            entries = list(db_dir.iterdir())
        except FileNotFoundError as e:
            raise NotFoundError(f"Database '{db_name}' does not exist") from e

        return [entry.name for entry in entries if entry.is_dir()]

    def db_exists(self, db_name: str) -> bool:
        return Path(self.db_path(db_name)).is_dir()

    # Deletes

    def delete_db(self, db_name: str) -> list[str]:
        path = Path(self.db_path(db_name))
        if not path.is_dir():
            return []

        try:
            path.rmdir()
        except OSError as e:
            if _is_not_empty(e):
                raise NotEmptyError(f"Database '{db_name}' is not empty") from e
            raise

        logger.debug("Database directory removed", database=db_name)
        return [db_name]

    def delete_collection(self, db_name: str, collection_name: str) -> list[str]:
        path = Path(self.collection_path(db_name, collection_name))
        if not path.is_dir():
            return []

        data_dir = Path(self.data_path(db_name, collection_name))
        if data_dir.is_dir() and any(data_dir.iterdir()):
            raise NotEmptyError(f"Collection '{collection_name}' data is not empty")
        if any(entry.name not in (SCHEMA_FILENAME, DATA_DIRNAME) for entry in path.iterdir()):
            raise NotEmptyError(f"Collection '{collection_name}' is not empty")

        Path(self.schema_path(db_name, collection_name)).unlink(missing_ok=True)
        if data_dir.is_dir():
            data_dir.rmdir()
        path.rmdir()

        logger.debug("Collection directory removed", database=db_name, collection=collection_name)
        return [collection_name]

    def delete_record(self, db_name: str, collection_name: str, record_id: str) -> str | None:
        try:
            return self.delete_record_strict(db_name, collection_name, record_id)
        except NotFoundError:
            return None

    def delete_record_strict(self, db_name: str, collection_name: str, record_id: str) -> str:
        path = Path(self.record_path(db_name, collection_name, record_id))
        try:
            path.unlink()
        except FileNotFoundError as e:
            raise NotFoundError(f"Record '{record_id}' does not exist") from e

        logger.debug(
            "Record removed", database=db_name, collection=collection_name, record_id=record_id
        )
        return record_id
