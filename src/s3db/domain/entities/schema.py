"""Schema entity for collection field definitions.

A schema maps field names to type tags. The tag names are the ones written to
``schema.json`` (``"String"``, ``"Array"``, ...), so existing stores load
unchanged. Every schema carries a reserved ``id`` field of type ``String``.
"""

import json
import math
from collections.abc import Iterator, Mapping
from enum import Enum
from typing import Any

from s3db.core.exceptions import ValidationError

ID_FIELD = "id"

# Class names written by older stores, read as their current tags
LEGACY_TAGS = {
    "TrueClass": "Boolean",
    "FalseClass": "Boolean",
    "Fixnum": "Integer",
    "Bignum": "Integer",
}


class FieldType(str, Enum):
    """Supported field types for collection schemas."""

    STRING = "String"
    INTEGER = "Integer"
    FLOAT = "Float"
    BOOLEAN = "Boolean"
    ARRAY = "Array"
    HASH = "Hash"

    def matches(self, value: Any) -> bool:
        """Check whether a runtime value belongs to this type tag.

        Args:
            value: The value to check.

        Returns:
            True if the value's type matches the tag.
        """
        if self is FieldType.STRING:
            return isinstance(value, str)
        if self is FieldType.INTEGER:
            # bool is a subclass of int
            return isinstance(value, int) and not isinstance(value, bool)
        if self is FieldType.FLOAT:
            # NaN and infinity have no JSON form
            return isinstance(value, float) and math.isfinite(value)
        if self is FieldType.BOOLEAN:
            return isinstance(value, bool)
        if self is FieldType.ARRAY:
            return isinstance(value, (list, tuple))
        if self is FieldType.HASH:
            return isinstance(value, dict)
        return False

    @classmethod
    def parse(cls, tag: "str | FieldType", field_name: str) -> "FieldType":
        """Resolve a tag string or member into a FieldType.

        Args:
            tag: Tag name as stored on disk, or a FieldType member. Legacy
                class names such as ``TrueClass`` map to their current tag.
            field_name: Field the tag belongs to (for error messages).

        Returns:
            The matching FieldType.

        Raises:
            ValidationError: If the tag is not a known type.
        """
        if isinstance(tag, FieldType):
            return tag
        if isinstance(tag, str):
            tag = LEGACY_TAGS.get(tag, tag)
        try:
            return cls(tag)
        except ValueError as e:
            valid = ", ".join(t.value for t in cls)
            raise ValidationError(
                f"Invalid field type '{tag}' for field '{field_name}'. Valid types: {valid}"
            ) from e


class Schema(Mapping[str, FieldType]):
    """Immutable mapping of field name to FieldType.

    Always contains ``id: String``; it is appended last, replacing any
    tag the caller declared for ``id``.
    """

    def __init__(self, fields: Mapping[str, "str | FieldType"] | None = None) -> None:
        parsed: dict[str, FieldType] = {}
        for name, tag in (fields or {}).items():
            key = str(name)
            if key == ID_FIELD:
                continue
            parsed[key] = FieldType.parse(tag, key)
        parsed[ID_FIELD] = FieldType.STRING
        self._fields = parsed

    @classmethod
    def from_mapping(cls, fields: "Mapping[str, str | FieldType] | Schema") -> "Schema":
        """Build a schema from a mapping, returning schemas unchanged."""
        if isinstance(fields, Schema):
            return fields
        return cls(fields)

    @classmethod
    def from_json(cls, raw: str) -> "Schema":
        """Parse the contents of a ``schema.json`` file.

        Raises:
            ValidationError: If the document is not a JSON object of tags.
        """
        try:
            data = json.loads(raw)
        except json.JSONDecodeError as e:
            raise ValidationError(f"Schema is not valid JSON: {e}") from e
        if not isinstance(data, dict):
            raise ValidationError("Schema must be a JSON object")
        return cls(data)

    def to_dict(self) -> dict[str, str]:
        return {name: tag.value for name, tag in self._fields.items()}

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), separators=(",", ":"), ensure_ascii=False)

    @property
    def field_names(self) -> frozenset[str]:
        return frozenset(self._fields)

    def __getitem__(self, key: str) -> FieldType:
        return self._fields[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._fields)

    def __len__(self) -> int:
        return len(self._fields)

    def __repr__(self) -> str:
        return f"Schema({self.to_dict()!r})"
