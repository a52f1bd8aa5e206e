"""
Parameter types for the record builders.

Every attribute is required; callers supply fully-formed values and the
builders copy them through without checks.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class TreasuryParams:
    """Inputs for a new treasury record."""

    id: str
    market_id: str
    treasury_address: str
    created_at: int
    last_updated_at: int


@dataclass(frozen=True)
class FeeSplitterReceiptParams:
    """Inputs for a fee receipt (funds received by a treasury)."""

    id: str
    market_id: str
    treasury_id: str
    token_id: str
    sender: str
    amount_raw: int
    amount_formatted: str
    timestamp: int
    transaction_hash: str


@dataclass(frozen=True)
class FeeSplitterPaymentParams:
    """Inputs for a fee payment (funds distributed by a treasury)."""

    id: str
    market_id: str
    treasury_id: str
    token_id: str
    recipient: str
    is_floor_fee: bool
    amount_raw: int
    amount_formatted: str
    timestamp: int
    transaction_hash: str
