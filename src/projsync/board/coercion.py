"""Conversion of raw tabular strings into ProjectV2FieldValue payloads."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from projsync.board.models import Field, FieldType
from projsync.exceptions import ValidationError

if TYPE_CHECKING:
    from projsync.board.fields import FieldResolver

# Columns that hold free text whatever type the project gives them
TEXT_KEYS = frozenset({"Depend on #", "Parent issue"})


def clean_value(raw: str) -> str:
    """Strip whitespace and one pair of enclosing double quotes."""
    value = raw.strip()
    if value.startswith('"'):
        value = value[1:]
    if value.endswith('"'):
        value = value[:-1]
    return value


def coerce_value(raw: str, field: Field, resolver: FieldResolver, key: str = "") -> Any:
    """Build the typed value for an updateProjectV2ItemFieldValue mutation.

    Args:
        raw: Cell value; DATE values must already be shifted
        field: Target field definition
        resolver: Resolver used for single-select and iteration lookups
        key: Column name, used for the free-text column exceptions

    Returns:
        A ProjectV2FieldValue dict, or the cleaned value for unsupported types

    Raises:
        ValidationError: If the value is empty or not numeric for a NUMBER field
        NotFoundError: If an option or iteration name does not match
    """
    value = clean_value(raw)
    if not value:
        raise ValidationError(f"Empty value for '{key or field.name}'")

    if field.data_type is FieldType.NUMBER:
        try:
            return {"number": float(value)}
        except ValueError as e:
            raise ValidationError(f"'{value}' is not a number") from e
    if field.data_type is FieldType.DATE:
        return {"date": value}
    if field.data_type is FieldType.SINGLE_SELECT:
        return {"singleSelectOptionId": resolver.resolve_option(field.id, value)}
    if field.data_type is FieldType.ITERATION:
        return {"iterationId": resolver.resolve_iteration(field.id, value)}
    if field.data_type is FieldType.TEXT or key in TEXT_KEYS:
        return {"text": value}
    return value
