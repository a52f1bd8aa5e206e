"""
Writers module for outputting ledger records to Parquet and JSON files.

Module structure:
- schemas.py: PyArrow schema definitions for the ledger tables
- serializers.py: Record-to-row conversion utilities
- parquet_writer.py: Main ParquetWriter class
- json_writer.py: JSONWriter class for JSON output
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

from .json_writer import JSONWriter, write_result_to_json
from .parquet_writer import ParquetWriter

from .schemas import (
    FEE_SPLITTER_PAYMENT_SCHEMA,
    FEE_SPLITTER_RECEIPT_SCHEMA,
    TOKEN_SCHEMA,
    TREASURY_SCHEMA,
    get_schema_for_table,
)

from .serializers import record_to_row, records_to_rows, serialize_value

if TYPE_CHECKING:
    from feeledger.workflow import IndexingResult

__all__ = [
    # Schemas
    "TREASURY_SCHEMA",
    "FEE_SPLITTER_RECEIPT_SCHEMA",
    "FEE_SPLITTER_PAYMENT_SCHEMA",
    "TOKEN_SCHEMA",
    "get_schema_for_table",
    # Serializers
    "serialize_value",
    "record_to_row",
    "records_to_rows",
    # Writers
    "ParquetWriter",
    "JSONWriter",
    # Convenience functions
    "write_result_to_parquet",
    "write_result_to_json",
]


def write_result_to_parquet(
    result: IndexingResult,
    output_dir: str | Path,
    partition_by_market: bool = True,
) -> dict[str, list[Path]]:
    """
    Convenience function to write all tables of an indexing result.

    Args:
        result: The IndexingResult from TreasuryIndexer
        output_dir: Directory for output files
        partition_by_market: Whether to partition ledger tables by market

    Returns:
        Dict mapping table names to written file paths

    Example:
        result = index_from_files("events.jsonl", "registry.json")

        paths = write_result_to_parquet(result, "/data/lakehouse")
        print(f"Wrote payments to: {paths['fee_splitter_payment']}")
    """
    writer = ParquetWriter(output_dir, partition_by_market=partition_by_market)
    return writer.write_result(result)
