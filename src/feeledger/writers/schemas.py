"""
PyArrow schema definitions for the fee ledger tables.

Raw token amounts are uint256 on chain and do not fit int64, so they are
stored as decimal strings. Timestamps are unix seconds.
"""

import pyarrow as pa

from feeledger.enums import TableName

# Schema for Treasury records
TREASURY_SCHEMA = pa.schema(
    [
        ("id", pa.string()),
        # Relationship field (market -> treasury)
        ("market_id", pa.string()),
        ("treasuryAddress", pa.string()),
        # Fee accumulators
        pa.field("totalFeesReceivedRaw", pa.string(), metadata={b"description": b"Sum of fees received, smallest token unit"}),
        ("totalFeesReceivedFormatted", pa.string()),
        pa.field("totalFeesDistributedRaw", pa.string(), metadata={b"description": b"Sum of fees paid to recipients, smallest token unit"}),
        ("totalFeesDistributedFormatted", pa.string()),
        ("createdAt", pa.int64()),
        ("lastUpdatedAt", pa.int64()),
    ]
)

# Schema for FeeSplitterReceipt records (fees into a treasury)
FEE_SPLITTER_RECEIPT_SCHEMA = pa.schema(
    [
        ("id", pa.string()),
        # Relationship fields
        ("market_id", pa.string()),
        ("treasury_id", pa.string()),
        ("token_id", pa.string()),
        ("sender", pa.string()),
        ("amountRaw", pa.string()),
        ("amountFormatted", pa.string()),
        ("timestamp", pa.int64()),
        ("transactionHash", pa.string()),
    ]
)

# Schema for FeeSplitterPayment records (fees out of a treasury)
FEE_SPLITTER_PAYMENT_SCHEMA = pa.schema(
    [
        ("id", pa.string()),
        # Relationship fields
        ("market_id", pa.string()),
        ("treasury_id", pa.string()),
        ("token_id", pa.string()),
        ("recipient", pa.string()),
        pa.field("isFloorFee", pa.bool_(), metadata={b"description": b"Minimum floor fee rather than a proportional share"}),
        ("amountRaw", pa.string()),
        ("amountFormatted", pa.string()),
        ("timestamp", pa.int64()),
        ("transactionHash", pa.string()),
    ]
)

# Schema for Token records
TOKEN_SCHEMA = pa.schema(
    [
        ("id", pa.string()),
        ("name", pa.string()),
        ("symbol", pa.string()),
        ("decimals", pa.int32()),
        ("maxSupplyRaw", pa.string()),
        ("maxSupplyFormatted", pa.string()),
    ]
)


def get_schema_for_table(table_name: str) -> pa.Schema:
    """
    Get the PyArrow schema for a table.

    Args:
        table_name: One of 'treasury', 'fee_splitter_receipt',
                    'fee_splitter_payment', 'token'

    Returns:
        The corresponding PyArrow schema

    Raises:
        ValueError: If table_name is not recognized
    """
    schemas = {
        TableName.TREASURY: TREASURY_SCHEMA,
        TableName.FEE_SPLITTER_RECEIPT: FEE_SPLITTER_RECEIPT_SCHEMA,
        TableName.FEE_SPLITTER_PAYMENT: FEE_SPLITTER_PAYMENT_SCHEMA,
        TableName.TOKEN: TOKEN_SCHEMA,
    }
    try:
        table = TableName(table_name)
    except ValueError:
        raise ValueError(
            f"Unknown table: {table_name}. Expected one of {[t.value for t in TableName]}"
        ) from None
    return schemas[table]
