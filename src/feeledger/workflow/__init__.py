"""
Workflow module for fee ledger indexing.

This module provides the record builders and the indexing workflow that
turns decoded treasury events into schema-ready ledger records.

Module structure:
- params.py: Parameter dataclasses for the record builders
- record_builders.py: Builders for Treasury, FeeSplitterReceipt, FeeSplitterPayment
- result.py: IndexingResult dataclass
- indexer.py: Main TreasuryIndexer orchestrator class
"""

from pathlib import Path

# Re-export indexer
from .indexer import TreasuryIndexer, apply_fees_distributed, apply_fees_received

# Re-export builders and their parameter types
from .params import FeeSplitterPaymentParams, FeeSplitterReceiptParams, TreasuryParams
from .record_builders import (
    build_fee_splitter_payment_record,
    build_fee_splitter_receipt_record,
    build_treasury_record,
)

# Re-export result types
from .result import IndexingResult

__all__ = [
    # Main classes
    "IndexingResult",
    "TreasuryIndexer",
    # Record builders
    "TreasuryParams",
    "FeeSplitterReceiptParams",
    "FeeSplitterPaymentParams",
    "build_treasury_record",
    "build_fee_splitter_receipt_record",
    "build_fee_splitter_payment_record",
    # Treasury totals
    "apply_fees_received",
    "apply_fees_distributed",
    # Convenience function
    "index_from_files",
]


def index_from_files(events_path: str | Path, registry_path: str | Path) -> IndexingResult:
    """
    Convenience function to index events from file paths.

    Handles parsing and indexing in one step. Parser warnings are carried
    over into the result. For more control, use the parsers and
    TreasuryIndexer directly.

    Args:
        events_path: Path to the event log (.json or .jsonl)
        registry_path: Path to the market and token registry (.json)

    Returns:
        IndexingResult with ledger records

    Example:
        result = index_from_files("events.jsonl", "registry.json")
        print(result.summary())
    """
    from feeledger.parsers import EventParser, RegistryParser

    event_data = EventParser().parse(events_path)
    registry = RegistryParser().parse(registry_path)

    result = IndexingResult(source_file=event_data.file_path)
    result.warnings.extend(event_data.warnings)

    return TreasuryIndexer().index(event_data.events, registry, result=result)
