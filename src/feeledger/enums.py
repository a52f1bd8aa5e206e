"""
Enums for treasury event metadata.

These enums define the decoded fee splitter events the indexer understands.
"""

from enum import Enum


class TreasuryEventType(str, Enum):
    """Events emitted by a fee splitter treasury."""

    FUNDS_RECEIVED = "Treasury_FundsReceived"
    FLOOR_FEE_PAID = "FloorFeePaid"
    RECIPIENT_PAYMENT = "RecipientPayment"
    FLOOR_FEE_PERCENTAGE_UPDATED = "FloorFeePercentageUpdated"
    FLOOR_FEE_TREASURY_UPDATED = "FloorFeeTreasuryUpdated"
    RECIPIENT_ADDED = "RecipientAdded"
    RECIPIENTS_CLEARED = "RecipientsCleared"

    @property
    def is_ledger_event(self) -> bool:
        """Whether the event moves funds and produces a ledger row."""
        return self in LEDGER_EVENTS


LEDGER_EVENTS = frozenset(
    {
        TreasuryEventType.FUNDS_RECEIVED,
        TreasuryEventType.FLOOR_FEE_PAID,
        TreasuryEventType.RECIPIENT_PAYMENT,
    }
)


class TableName(str, Enum):
    """Output tables written for an indexing run."""

    TREASURY = "treasury"
    FEE_SPLITTER_RECEIPT = "fee_splitter_receipt"
    FEE_SPLITTER_PAYMENT = "fee_splitter_payment"
    TOKEN = "token"
