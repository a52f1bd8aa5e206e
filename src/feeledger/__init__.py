"""
Fee Ledger - Fee splitter treasury ledger from decoded chain events.

This package turns decoded fee splitter treasury events into treasury,
fee receipt and fee payment records, and writes them as Parquet or JSON
tables for the data lakehouse.
"""

__version__ = "0.1.0"

from feeledger.parsers import EventParser, RegistryParser
from feeledger.tools import Amount, format_amount, make_event_id, normalize_address
from feeledger.validation import DataValidator, ValidationResult
from feeledger.workflow import (
    FeeSplitterPaymentParams,
    FeeSplitterReceiptParams,
    IndexingResult,
    TreasuryIndexer,
    TreasuryParams,
    build_fee_splitter_payment_record,
    build_fee_splitter_receipt_record,
    build_treasury_record,
    index_from_files,
)
from feeledger.writers import JSONWriter, ParquetWriter, write_result_to_json, write_result_to_parquet

__all__ = [
    # Record builders
    "TreasuryParams",
    "FeeSplitterReceiptParams",
    "FeeSplitterPaymentParams",
    "build_treasury_record",
    "build_fee_splitter_receipt_record",
    "build_fee_splitter_payment_record",
    # Tools
    "Amount",
    "format_amount",
    "normalize_address",
    "make_event_id",
    # Parsers
    "EventParser",
    "RegistryParser",
    # Workflow
    "TreasuryIndexer",
    "IndexingResult",
    "index_from_files",
    # Validation
    "DataValidator",
    "ValidationResult",
    # Writers
    "ParquetWriter",
    "JSONWriter",
    "write_result_to_parquet",
    "write_result_to_json",
]
