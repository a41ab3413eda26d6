"""Record identifier generation.

Identifiers are resolved in a fixed order:

1. a non-empty ``id`` already present in the data is used verbatim;
2. otherwise, when both a generator and a source field are configured and
   the data holds the source field, the generator is called with its value;
3. otherwise a random UUID4 string is generated.
"""

import uuid
from collections.abc import Callable, Mapping
from typing import Any

from s3db.domain.entities.schema import ID_FIELD

IdGenerator = Callable[[Any], str]


class RecordIdGenerator:
    """Resolve record identifiers from data and a collection's id policy."""

    @staticmethod
    def random_id() -> str:
        """Generate a fresh random identifier."""
        return str(uuid.uuid4())

    @classmethod
    def resolve(
        cls,
        data: Mapping[str, Any],
        id_generator: IdGenerator | None = None,
        id_field: str | None = None,
    ) -> str:
        """Pick the identifier for a record.

        Args:
            data: The record data.
            id_generator: Optional function deriving an id from a field value.
            id_field: Name of the field passed to ``id_generator``.

        Returns:
            The identifier to store under ``id``.

        Examples:
            >>> RecordIdGenerator.resolve({"id": "X"}, str.lower, "name")
            'X'
            >>> RecordIdGenerator.resolve({"name": "Jack"}, str.lower, "name")
            'jack'
        """
        existing = data.get(ID_FIELD)
        if existing:
            return existing

        # A missing source field is left for validation to report
        if id_generator is not None and id_field is not None and id_field in data:
            return id_generator(data.get(id_field))

        return cls.random_id()
