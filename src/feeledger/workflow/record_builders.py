"""
Record builders for the fee ledger.

Each builder converts a parameter object directly into a schema-ready
record (a dictionary matching writers/schemas.py). Builders are pure:
no validation, no lookups, no clock reads.
"""

from typing import Any

from .params import FeeSplitterPaymentParams, FeeSplitterReceiptParams, TreasuryParams


def build_treasury_record(params: TreasuryParams) -> dict[str, Any]:
    """
    Build a treasury record for tracking a fee splitter treasury.

    The fee accumulators always start at zero; they are advanced later
    by the indexer as receipts and payments arrive.

    Args:
        params: Treasury identity, market reference and timestamps

    Returns:
        Dict matching TREASURY_SCHEMA
    """
    return {
        "id": params.id,
        "market_id": params.market_id,
        "treasuryAddress": params.treasury_address,
        "totalFeesReceivedRaw": 0,
        "totalFeesReceivedFormatted": "0",
        "totalFeesDistributedRaw": 0,
        "totalFeesDistributedFormatted": "0",
        "createdAt": params.created_at,
        "lastUpdatedAt": params.last_updated_at,
    }


def build_fee_splitter_receipt_record(params: FeeSplitterReceiptParams) -> dict[str, Any]:
    """
    Build a fee splitter receipt record for fees received by a treasury.

    Args:
        params: Receipt fields, amounts already formatted by the caller

    Returns:
        Dict matching FEE_SPLITTER_RECEIPT_SCHEMA
    """
    return {
        "id": params.id,
        "market_id": params.market_id,
        "treasury_id": params.treasury_id,
        "token_id": params.token_id,
        "sender": params.sender,
        "amountRaw": params.amount_raw,
        "amountFormatted": params.amount_formatted,
        "timestamp": params.timestamp,
        "transactionHash": params.transaction_hash,
    }


def build_fee_splitter_payment_record(params: FeeSplitterPaymentParams) -> dict[str, Any]:
    """
    Build a fee splitter payment record for fees distributed to a recipient.

    Args:
        params: Payment fields, amounts already formatted by the caller

    Returns:
        Dict matching FEE_SPLITTER_PAYMENT_SCHEMA
    """
    return {
        "id": params.id,
        "market_id": params.market_id,
        "treasury_id": params.treasury_id,
        "token_id": params.token_id,
        "recipient": params.recipient,
        "isFloorFee": params.is_floor_fee,
        "amountRaw": params.amount_raw,
        "amountFormatted": params.amount_formatted,
        "timestamp": params.timestamp,
        "transactionHash": params.transaction_hash,
    }
