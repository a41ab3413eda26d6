"""Database entity: a named storage namespace holding collections."""

from collections.abc import Mapping

from s3db.core.exceptions import AlreadyExistsError, NotFoundError
from s3db.core.logging import get_logger
from s3db.domain.entities.collection import Collection
from s3db.domain.entities.schema import FieldType, Schema
from s3db.domain.services.id_generator import IdGenerator
from s3db.domain.services.name_sanitizer import NameSanitizer
from s3db.infrastructure.storage.base import StorageBackend

logger = get_logger(__name__)


class Database:
    """A database namespace on a storage backend.

    Instances only exist for namespaces the backend confirms.
    """

    def __init__(self, backend: StorageBackend, name: str) -> None:
        """Load an existing database.

        Args:
            backend: Storage backend holding the database.
            name: Database name (word characters only).

        Raises:
            ValidationError: If the name is invalid.
            NotFoundError: If the database does not exist.
        """
        self.backend = backend
        self.name = NameSanitizer.sanitize(name)

        if not backend.db_exists(self.name):
            raise NotFoundError(f"Database '{self.name}' does not exist")

    @classmethod
    def create(cls, backend: StorageBackend, name: str) -> "Database":
        """Create a new database.

        Raises:
            AlreadyExistsError: If the database already exists.
        """
        db_name = NameSanitizer.sanitize(name)
        backend.write_db(db_name)
        logger.info("Database created", database=db_name)
        return cls(backend, db_name)

    @classmethod
    def load(cls, backend: StorageBackend, name: str) -> "Database":
        return cls(backend, name)

    @classmethod
    def get_or_create(cls, backend: StorageBackend, name: str) -> "Database":
        """Create the database, or load it if it already exists."""
        try:
            return cls.create(backend, name)
        except AlreadyExistsError:
            return cls(backend, name)

    @classmethod
    def drop(cls, backend: StorageBackend, name: str) -> list[str]:
        """Drop an empty database.

        Returns:
            ``[name]`` if dropped, ``[]`` if it did not exist.

        Raises:
            NotEmptyError: If collections remain.
        """
        dropped = backend.delete_db(NameSanitizer.sanitize(name))
        if dropped:
            logger.info("Database dropped", database=name)
        return dropped

    @property
    def path(self) -> str:
        """Storage location of the database; the format varies by backend."""
        return self.backend.db_path(self.name)

    def list_collections(self) -> list[str]:
        """List collection names, sorted."""
        return sorted(self.backend.list_collections(self.name))

    def create_collection(
        self,
        name: str,
        schema: "Schema | Mapping[str, str | FieldType] | None" = None,
        id_generator: IdGenerator | None = None,
        id_field: str | None = None,
    ) -> Collection:
        """Configure and write a collection in this database.

        A missing schema means records hold only ``id``.
        """
        collection = Collection.configure(
            database=self,
            name=name,
            schema=schema if schema is not None else {},
            id_generator=id_generator,
            id_field=id_field,
        )
        return collection.write()

    def get_collection(self, name: str) -> Collection:
        """Rebuild a collection from its stored schema.

        The id policy is not persisted, so the returned collection uses
        explicit or random identifiers only.

        Raises:
            NotFoundError: If the collection has no schema.
        """
        collection_name = NameSanitizer.sanitize(name)
        schema = Schema.from_json(self.backend.read_schema(self.name, collection_name))
        return Collection.configure(database=self, name=collection_name, schema=schema)

    def drop_collection(self, name: str) -> list[str]:
        """Drop a collection that holds no records.

        Raises:
            NotEmptyError: If records remain.
        """
        return self.backend.delete_collection(self.name, NameSanitizer.sanitize(name))

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Database):
            return self.backend is other.backend and self.name == other.name
        return NotImplemented

    def __hash__(self) -> int:
        return hash((id(self.backend), self.name))

    def __repr__(self) -> str:
        return f"Database(name={self.name!r})"
