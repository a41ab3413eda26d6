"""Collection configuration entity.

A CollectionConfig is built once and handed to every Collection and Record
operation. It is frozen; reconfiguring means building a new value with
``replace``.
"""

import dataclasses
from collections.abc import Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from s3db.core.exceptions import MissingConfigError
from s3db.domain.entities.schema import FieldType, Schema
from s3db.domain.services.id_generator import IdGenerator
from s3db.domain.services.name_sanitizer import NameSanitizer

if TYPE_CHECKING:
    from s3db.domain.entities.database import Database


@dataclass(frozen=True)
class CollectionConfig:
    """Configuration binding a schema and id policy to a database namespace.

    Attributes:
        database: Database the collection lives in.
        name: Collection name; word characters only.
        schema: Field definitions; ``id: String`` is always merged in.
        id_generator: Optional function deriving a record id from a field value.
        id_field: Name of the field whose value is passed to ``id_generator``.
    """

    database: "Database | None" = None
    name: str | None = None
    schema: "Schema | Mapping[str, str | FieldType] | None" = None
    id_generator: IdGenerator | None = None
    id_field: str | None = None

    def __post_init__(self) -> None:
        """Sanitize the name and normalize the schema."""
        if self.name is not None:
            object.__setattr__(self, "name", NameSanitizer.sanitize(self.name))
        if self.schema is not None:
            object.__setattr__(self, "schema", Schema.from_mapping(self.schema))
        if self.id_field is not None:
            object.__setattr__(self, "id_field", str(self.id_field))

    @property
    def missing(self) -> list[str]:
        """Names of the settings still required before the collection can be written."""
        missing = []
        if self.database is None:
            missing.append("database")
        if self.schema is None:
            missing.append("schema")
        if self.name is None:
            missing.append("collection name")
        return missing

    def ensure_complete(self) -> None:
        """Raise if database, schema or name is unset.

        Raises:
            MissingConfigError: Naming every missing setting.
        """
        missing = self.missing
        if missing:
            raise MissingConfigError(f"missing {', '.join(missing)}")

    def replace(self, **changes: Any) -> "CollectionConfig":
        """Return a new config with the given fields changed."""
        return dataclasses.replace(self, **changes)
