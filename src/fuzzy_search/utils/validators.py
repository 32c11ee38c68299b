"""Input validation utilities."""

from typing import Any, Mapping, Sequence

from ..models.config import SearchConfig, SearchField
from ..core.exceptions import MissingIdentityError, ValidationError


def validate_records(records: Sequence[Mapping[str, Any]], id_field: str) -> None:
    """
    Ensure every record carries an identity value.

    Checked once per search call; stops at the first offending record.

    Args:
        records: Records about to be searched
        id_field: Identity field name

    Raises:
        ValidationError: If a record is not a mapping or its identity is unhashable
        MissingIdentityError: If a record has no identity value
    """
    for position, record in enumerate(records):
        if not isinstance(record, Mapping):
            raise ValidationError(
                f"Record at position {position} is not a mapping: {type(record).__name__}"
            )
        identity = record.get(id_field)
        if identity is None:
            raise MissingIdentityError(id_field, position)
        try:
            hash(identity)
        except TypeError:
            raise ValidationError(
                f"Record at position {position} has an unhashable '{id_field}' value: {type(identity).__name__}"
            )


def validate_config(config: SearchConfig) -> None:
    """
    Validate search configuration object.

    Args:
        config: Configuration to validate

    Raises:
        ValidationError: If configuration is invalid
    """
    try:
        if not isinstance(config, SearchConfig):
            raise ValidationError("Invalid search configuration type")

        if not 0.0 <= config.threshold <= 1.0:
            raise ValidationError("Threshold must be between 0.0 and 1.0")

        if config.limit <= 0:
            raise ValidationError("Limit must be positive")

        # Duplicate fields would be weighted twice
        seen = set()
        for search_field in config.fields:
            if not isinstance(search_field, SearchField):
                raise ValidationError(f"Invalid search field: {search_field!r}")
            if search_field.weight <= 0:
                raise ValidationError(f"Weight for field '{search_field.name}' must be positive")
            if search_field.name in seen:
                raise ValidationError(f"Duplicate search field: {search_field.name}")
            seen.add(search_field.name)

    except Exception as e:
        if isinstance(e, ValidationError):
            raise
        raise ValidationError(f"Configuration validation failed: {str(e)}")
