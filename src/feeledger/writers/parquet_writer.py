"""
Parquet file writer for ledger output.

This module provides the main writer class for outputting indexed ledger
records to Parquet files suitable for Apache Iceberg tables.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from pathlib import Path
from typing import TYPE_CHECKING, Any

import pyarrow as pa
import pyarrow.parquet as pq

from feeledger.enums import TableName

from .schemas import get_schema_for_table
from .serializers import records_to_rows

if TYPE_CHECKING:
    from feeledger.workflow import IndexingResult

logger = logging.getLogger(__name__)


# Tables carrying a market_id column, partitioned by market
MARKET_PARTITIONED_TABLES = frozenset(
    {TableName.TREASURY, TableName.FEE_SPLITTER_RECEIPT, TableName.FEE_SPLITTER_PAYMENT}
)


class ParquetWriter:
    """
    Writes indexed ledger records to Parquet files.

    Supports partitioned output by market for Iceberg compatibility.

    Example:
        writer = ParquetWriter("/data/lakehouse")
        writer.write_table("fee_splitter_payment", payment_records)

        # Or write an indexing result
        writer.write_result(indexing_result)
    """

    def __init__(self, output_dir: str | Path, partition_by_market: bool = True):
        """
        Initialize the writer with an output directory.

        Args:
            output_dir: Base directory for output files. Subdirectories
                       will be created for tables and partitions.
            partition_by_market: Whether to partition by market (default True)
        """
        self.output_dir = Path(output_dir)
        self.output_dir.mkdir(parents=True, exist_ok=True)
        self.partition_by_market = partition_by_market

    def _get_partition_path(self, table_name: str, market_id: str | None = None) -> Path:
        """
        Build a partition path for Iceberg-style layout.

        Args:
            table_name: The table name (e.g., 'treasury')
            market_id: Optional market for partitioning

        Returns:
            Path to the partition directory
        """
        parts = [self.output_dir, table_name]
        if market_id and self.partition_by_market:
            parts.append(f"market={market_id}")
        return Path(*parts)

    def write_table(self, table_name: str, records: list[dict[str, Any]]) -> list[Path]:
        """
        Write the records of one table to Parquet.

        Args:
            table_name: Table the records belong to
            records: Record dicts as produced by the record builders

        Returns:
            Paths to the written files (one per partition)

        Raises:
            ValueError: If table_name is not a known table
        """
        table_name = TableName(table_name).value
        if not records:
            return []

        if self.partition_by_market and table_name in MARKET_PARTITIONED_TABLES:
            groups: dict[str | None, list[dict[str, Any]]] = defaultdict(list)
            for record in records:
                groups[record.get("market_id")].append(record)
        else:
            groups = {None: records}

        schema = get_schema_for_table(table_name)
        paths = []

        for market_id, group in groups.items():
            table = pa.Table.from_pylist(records_to_rows(group, table_name), schema=schema)

            partition_dir = self._get_partition_path(table_name, market_id)
            partition_dir.mkdir(parents=True, exist_ok=True)

            output_path = partition_dir / f"{table_name}.parquet"
            pq.write_table(table, output_path)
            logger.debug(f"Wrote {len(group)} {table_name} rows to {output_path}")
            paths.append(output_path)

        return paths

    def write_result(self, result: IndexingResult) -> dict[str, list[Path]]:
        """
        Write all tables from an IndexingResult.

        Empty tables are skipped.

        Args:
            result: The indexing result containing records to write

        Returns:
            Dict mapping table names to written file paths
        """
        paths: dict[str, list[Path]] = {}

        for table_name, records in result.tables().items():
            written = self.write_table(table_name, records)
            if written:
                paths[table_name] = written

        return paths
