"""
Pydantic models for the fee ledger tables.

These models mirror the stored records for:
- Treasury
- FeeSplitterReceipt / FeeSplitterPayment
- Token
"""

from feeledger.enums import TableName, TreasuryEventType
from feeledger.models.base import LedgerModel
from feeledger.models.fee_splitter import FeeSplitterEntry, FeeSplitterPayment, FeeSplitterReceipt
from feeledger.models.token import Token
from feeledger.models.treasury import Treasury

__all__ = [
    "LedgerModel",
    "Treasury",
    "FeeSplitterEntry",
    "FeeSplitterReceipt",
    "FeeSplitterPayment",
    "Token",
    "TableName",
    "TreasuryEventType",
]
