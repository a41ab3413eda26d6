"""Record entity: one persisted data instance inside a collection."""

import json
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from s3db.core.exceptions import NotFoundError, ValidationError
from s3db.core.logging import get_logger
from s3db.domain.entities.schema import ID_FIELD
from s3db.domain.services.id_generator import RecordIdGenerator
from s3db.domain.services.record_validator import RecordValidationError, RecordValidator
from s3db.infrastructure.storage.base import record_filename

if TYPE_CHECKING:
    from s3db.domain.entities.collection import Collection

logger = get_logger(__name__)


def dump_json(data: Mapping[str, Any]) -> str:
    """Serialize a mapping to the compact on-disk JSON form.

    Raises:
        ValidationError: If the data holds values with no JSON form.
    """
    try:
        return json.dumps(data, separators=(",", ":"), ensure_ascii=False, allow_nan=False)
    except (TypeError, ValueError) as e:
        raise ValidationError(f"Record data is not JSON serializable: {e}") from e


def _as_json_value(value: Any) -> Any:
    # Tuples are stored and read back as lists
    if isinstance(value, (list, tuple)):
        return [_as_json_value(item) for item in value]
    if isinstance(value, dict):
        return {key: _as_json_value(item) for key, item in value.items()}
    return value


class Record:
    """A data mapping bound to a collection.

    The identifier is assigned when the record is first saved, so an ``id``
    supplied in the data, or set on the record before saving, always wins.
    """

    def __init__(self, collection: "Collection", data: Mapping[Any, Any] | None = None) -> None:
        self.collection = collection
        self.data: dict[str, Any] = self._normalize(data or {})

    @staticmethod
    def _normalize(data: Mapping[Any, Any]) -> dict[str, Any]:
        return {str(key): _as_json_value(value) for key, value in data.items()}

    @property
    def id(self) -> Any:
        return self.data.get(ID_FIELD) or None

    @property
    def is_new(self) -> bool:
        """True until an identifier has been assigned."""
        return self.id is None

    def filename(self) -> str:
        """Return ``<id>.json``.

        Raises:
            ValidationError: If no usable identifier is assigned.
        """
        return record_filename(self.id)

    def assign_id(self) -> str:
        """Resolve and store the identifier from the collection's id policy."""
        config = self.collection.config
        record_id = RecordIdGenerator.resolve(self.data, config.id_generator, config.id_field)
        self.data[ID_FIELD] = record_id
        return record_id

    def validate(self) -> list[RecordValidationError]:
        """Validate the data against the collection schema."""
        self.collection.config.ensure_complete()
        return RecordValidator.validate(self.data, self.collection.schema)

    def is_valid(self) -> bool:
        return not self.validate()

    def to_dict(self) -> dict[str, Any]:
        return dict(self.data)

    def to_json(self) -> str:
        return dump_json(self.data)

    def save_strict(self) -> "Record":
        """Assign the identifier, validate and write the record.

        Returns:
            The record itself.

        Raises:
            MissingConfigError: If the collection is not fully configured.
            ValidationError: If the data does not match the schema. Nothing
                is written in that case.
        """
        collection = self.collection
        collection.config.ensure_complete()

        self.assign_id()
        RecordValidator.ensure_valid(self.data, collection.schema)

        collection.backend.write_record(
            collection.database.name, collection.name, self.id, self.to_json()
        )
        logger.info(
            "Record saved",
            database=collection.database.name,
            collection=collection.name,
            record_id=self.id,
        )
        return self

    def save(self) -> "Record | None":
        """Save the record, returning None instead of raising on invalid data."""
        try:
            return self.save_strict()
        except ValidationError as e:
            logger.warning(
                "Record failed validation",
                collection=self.collection.name,
                record_id=self.id,
                error=str(e),
            )
            return None

    def _replace_data(self, data: Mapping[Any, Any]) -> None:
        new_data = self._normalize(data)
        if self.id is not None:
            new_data[ID_FIELD] = self.id
        self.data = new_data

    def update(self, data: Mapping[Any, Any]) -> "Record | None":
        """Replace the data, keeping the current identifier, and save."""
        self._replace_data(data)
        return self.save()

    def update_strict(self, data: Mapping[Any, Any]) -> "Record":
        """Replace the data, keeping the current identifier, and save or raise."""
        self._replace_data(data)
        return self.save_strict()

    def destroy(self) -> bool:
        """Delete the record file; False if it was never saved or is already gone."""
        if self.id is None:
            return False
        collection = self.collection
        deleted = collection.backend.delete_record(
            collection.database.name, collection.name, self.id
        )
        return deleted is not None

    def destroy_strict(self) -> "Record":
        """Delete the record file.

        Raises:
            NotFoundError: If the record has no identifier or no file.
        """
        if self.id is None:
            raise NotFoundError("Record has no identifier")
        collection = self.collection
        collection.backend.delete_record_strict(collection.database.name, collection.name, self.id)
        return self

    def get(self, key: str, default: Any = None) -> Any:
        return self.data.get(key, default)

    def __getitem__(self, key: str) -> Any:
        return self.data[key]

    def __setitem__(self, key: Any, value: Any) -> None:
        self.data[str(key)] = _as_json_value(value)

    def __contains__(self, key: object) -> bool:
        return key in self.data

    def __repr__(self) -> str:
        return f"Record(collection={self.collection.name!r}, data={self.data!r})"
