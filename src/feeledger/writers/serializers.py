"""
Serialization utilities for converting ledger records to Parquet rows.

Ledger records keep raw amounts as Python ints; Parquet stores them as
decimal strings (see schemas.py).
"""

from typing import Any

import pyarrow as pa

from .schemas import get_schema_for_table


def serialize_value(value: Any) -> Any:
    """
    Serialize a value to a Parquet-compatible type.

    Handles:
    - ints outside the int64 range -> decimal strings
    - None and everything else -> preserved as-is

    Args:
        value: Any Python value to serialize

    Returns:
        Parquet-compatible representation
    """
    if value is None:
        return None
    if isinstance(value, int) and not isinstance(value, bool):
        if not -(2**63) <= value < 2**63:
            return str(value)
    return value


def record_to_row(record: dict[str, Any], table_name: str) -> dict[str, Any]:
    """
    Convert a ledger record to a row matching the table schema.

    String-typed columns holding ints (raw amounts) become decimal strings;
    other values go through serialize_value.

    Args:
        record: Record dict as produced by the record builders
        table_name: Table the record belongs to

    Returns:
        Dict with keys matching the table schema
    """
    schema = get_schema_for_table(table_name)
    row: dict[str, Any] = {}

    for schema_field in schema:
        value = record.get(schema_field.name)
        if pa.types.is_string(schema_field.type) and isinstance(value, int) and not isinstance(value, bool):
            row[schema_field.name] = str(value)
        else:
            row[schema_field.name] = serialize_value(value)

    return row


def records_to_rows(records: list[dict[str, Any]], table_name: str) -> list[dict[str, Any]]:
    """Convert a list of ledger records for one table."""
    return [record_to_row(record, table_name) for record in records]
