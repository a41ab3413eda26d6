"""Collection entity: a schema-bound group of records in a database.

Collections are the factory for records. Their configuration is an immutable
CollectionConfig; the storage backend comes from the configured database
unless one is passed explicitly.
"""

import json
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from s3db.core.exceptions import MissingConfigError, ValidationError
from s3db.core.logging import get_logger
from s3db.domain.entities.collection_config import CollectionConfig
from s3db.domain.entities.record import Record
from s3db.domain.entities.schema import FieldType, Schema
from s3db.domain.services.id_generator import IdGenerator
from s3db.infrastructure.storage.base import StorageBackend

if TYPE_CHECKING:
    from s3db.domain.entities.database import Database

logger = get_logger(__name__)


class Collection:
    """Schema-bound record container.

    Attributes:
        config: The collection's configuration.
    """

    def __init__(self, config: CollectionConfig, backend: StorageBackend | None = None) -> None:
        self.config = config
        self._backend = backend

    @classmethod
    def configure(
        cls,
        database: "Database | None" = None,
        name: str | None = None,
        schema: "Schema | Mapping[str, str | FieldType] | None" = None,
        id_generator: IdGenerator | None = None,
        id_field: str | None = None,
        backend: StorageBackend | None = None,
    ) -> "Collection":
        """Build a collection from individual settings.

        Args:
            database: Database the collection lives in.
            name: Collection name (word characters only).
            schema: Mapping of field name to type tag.
            id_generator: Optional function deriving ids from ``id_field``.
            id_field: Field passed to ``id_generator``.
            backend: Optional backend overriding the database's backend.

        Returns:
            An unwritten Collection.

        Raises:
            ValidationError: If the name or a schema type tag is invalid.
        """
        config = CollectionConfig(
            database=database,
            name=name,
            schema=schema,
            id_generator=id_generator,
            id_field=id_field,
        )
        return cls(config, backend=backend)

    @property
    def name(self) -> str | None:
        return self.config.name

    @property
    def schema(self) -> Schema | None:
        return self.config.schema

    @property
    def database(self) -> "Database | None":
        return self.config.database

    @property
    def backend(self) -> StorageBackend:
        if self._backend is not None:
            return self._backend
        if self.config.database is None:
            raise MissingConfigError("missing database")
        return self.config.database.backend

    def _require_location(self) -> tuple[str, str]:
        missing = [m for m in self.config.missing if m != "schema"]
        if missing:
            raise MissingConfigError(f"missing {', '.join(missing)}")
        return self.config.database.name, self.config.name

    def write(self) -> "Collection":
        """Persist the collection directories and schema. Safe to repeat.

        Raises:
            MissingConfigError: If database, schema or name is unset.
        """
        self.config.ensure_complete()
        db_name, name = self.database.name, self.name

        self.backend.write_collection(db_name, name)
        self.backend.write_schema(db_name, name, self.schema.to_json())

        logger.info("Collection written", database=db_name, collection=name)
        return self

    def drop(self) -> list[str]:
        """Remove the collection; it must hold no records.

        Raises:
            NotEmptyError: If records remain.
        """
        db_name, name = self._require_location()
        return self.backend.delete_collection(db_name, name)

    def build(self, data: Mapping[Any, Any] | None = None) -> Record:
        """Create an unsaved record bound to this collection."""
        return Record(self, data)

    def create(self, data: Mapping[Any, Any]) -> Record:
        """Build, identify, validate and persist a record in one step.

        Raises:
            ValidationError: If the data does not match the schema.
        """
        return self.build(data).save_strict()

    def _parse(self, raw: str, record_id: str) -> dict[str, Any]:
        try:
            data = json.loads(raw)
        except json.JSONDecodeError as e:
            raise ValidationError(f"Record '{record_id}' is not valid JSON: {e}") from e
        if not isinstance(data, dict):
            raise ValidationError(f"Record '{record_id}' is not a JSON object")
        return data

    def find(self, record_id: str) -> Record:
        """Load one record by identifier.

        Raises:
            NotFoundError: If no record has that identifier.
        """
        db_name, name = self._require_location()
        raw = self.backend.read_record(db_name, name, record_id)
        return Record(self, self._parse(raw, record_id))

    def all(self) -> list[Record]:
        """Load every record in the collection, in no particular order."""
        db_name, name = self._require_location()
        return [
            Record(self, self._parse(self.backend.read_record(db_name, name, record_id), record_id))
            for record_id in self.backend.list_records(db_name, name)
        ]

    def __repr__(self) -> str:
        db_name = self.database.name if self.database is not None else None
        return f"Collection(database={db_name!r}, name={self.name!r})"
