"""
JSON writer for outputting ledger records.

Writes one JSON array per table with the same keys as the Parquet output.
Raw amounts stay JSON integers, which Python's json module writes at
full precision.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from feeledger.workflow import IndexingResult


class JSONWriter:
    """
    Writes ledger records to JSON files.

    This writer produces JSON files with the same keys as the Parquet
    output, making it easy for consumers to switch between formats.
    """

    def __init__(self, output_dir: str | Path):
        """
        Initialize the JSON writer.

        Args:
            output_dir: Base directory for output files
        """
        self.output_dir = Path(output_dir)
        self.output_dir.mkdir(parents=True, exist_ok=True)

    def write_table(self, table_name: str, records: list[dict[str, Any]]) -> Path:
        """
        Write the records of one table to ``<table_name>.json``.

        Args:
            table_name: Table the records belong to
            records: Record dicts as produced by the record builders

        Returns:
            Path to the written JSON file
        """
        output_path = self.output_dir / f"{table_name}.json"

        with open(output_path, "w") as f:
            json.dump(records, f, indent=2)

        return output_path

    def write_result(self, result: IndexingResult) -> dict[str, Path]:
        """
        Write all non-empty tables of an indexing result.

        Args:
            result: The IndexingResult from TreasuryIndexer

        Returns:
            Dict mapping table names to written file paths
        """
        paths: dict[str, Path] = {}

        for table_name, records in result.tables().items():
            if records:
                paths[table_name] = self.write_table(table_name, records)

        return paths


def write_result_to_json(result: IndexingResult, output_dir: str | Path) -> dict[str, Path]:
    """
    Convenience function to write all tables of an indexing result to JSON.

    Args:
        result: The IndexingResult from TreasuryIndexer
        output_dir: Directory for output files

    Returns:
        Dict mapping table names to written file paths
    """
    writer = JSONWriter(output_dir)
    return writer.write_result(result)
