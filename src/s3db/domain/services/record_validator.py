"""Record validation service for validating record data against collection schemas.

A record is valid when its field names are exactly the schema's field names
and each value matches the type tag declared for its field.
"""

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from s3db.core.exceptions import ValidationError
from s3db.domain.entities.schema import ID_FIELD, Schema


@dataclass
class RecordValidationError:
    """A single record validation error."""

    field: str
    message: str
    code: str


class RecordValidator:
    """Validator for record data against collection schemas."""

    @classmethod
    def validate_fields(
        cls, data: Mapping[str, Any], schema: Schema
    ) -> list[RecordValidationError]:
        """Compare the record's field names with the schema's field names.

        Names are compared as strings and case-sensitively.

        Args:
            data: The record data.
            schema: The collection schema.

        Returns:
            One error per missing or unknown field.
        """
        errors: list[RecordValidationError] = []
        present = {str(key) for key in data}

        for field_name in schema:
            if field_name not in present:
                errors.append(
                    RecordValidationError(
                        field=field_name,
                        message=f"Required field '{field_name}' is missing",
                        code="required_missing",
                    )
                )

        for field_name in sorted(present - schema.field_names):
            errors.append(
                RecordValidationError(
                    field=field_name,
                    message=f"Unknown field '{field_name}' not defined in collection schema",
                    code="unknown_field",
                )
            )

        return errors

    @classmethod
    def validate_field_value(
        cls, value: Any, field_name: str, schema: Schema
    ) -> RecordValidationError | None:
        """Validate a single field value against its declared type.

        Returns:
            RecordValidationError if invalid, None if valid.
        """
        field_type = schema[field_name]
        if field_type.matches(value):
            return None
        return RecordValidationError(
            field=field_name,
            message=f"Expected {field_type.value} value, got {type(value).__name__}",
            code="invalid_type",
        )

    @classmethod
    def validate(cls, data: Mapping[str, Any], schema: Schema) -> list[RecordValidationError]:
        """Validate record data against a schema.

        Type checks only run once the field sets agree.

        Args:
            data: The record data to validate.
            schema: The collection schema.

        Returns:
            List of validation errors (empty if valid).
        """
        errors = cls.validate_fields(data, schema)
        if errors:
            return errors

        for key, value in data.items():
            error = cls.validate_field_value(value, str(key), schema)
            if error:
                errors.append(error)

        if data.get(ID_FIELD) == "":
            errors.append(
                RecordValidationError(
                    field=ID_FIELD,
                    message="Record id cannot be empty",
                    code="empty_id",
                )
            )

        return errors

    @classmethod
    def is_valid(cls, data: Mapping[str, Any], schema: Schema) -> bool:
        return not cls.validate(data, schema)

    @classmethod
    def ensure_valid(cls, data: Mapping[str, Any], schema: Schema) -> None:
        """Raise a single ValidationError carrying every failure.

        Raises:
            ValidationError: If the data does not match the schema.
        """
        errors = cls.validate(data, schema)
        if errors:
            details = "; ".join(f"{e.field}: {e.message}" for e in errors)
            raise ValidationError(f"Data does not match schema: {details}", errors=errors)
