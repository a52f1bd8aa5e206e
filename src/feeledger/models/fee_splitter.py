"""
Fee splitter ledger models.

Includes the inbound FeeSplitterReceipt and the outbound FeeSplitterPayment.
Both are append-only rows: created once per event and never updated.
"""

from pydantic import Field

from feeledger.models.base import LedgerModel


class FeeSplitterEntry(LedgerModel):
    """
    Fields common to every fee splitter ledger row.

    Attributes:
        market_id: Market the treasury belongs to
        treasury_id: Treasury the funds moved through
        token_id: Token the amount is denominated in
        amount_raw: Amount in the token's smallest unit
        amount_formatted: Decimal rendering of the amount
        timestamp: Block timestamp of the event
        transaction_hash: Hash of the emitting transaction
    """

    model_config = LedgerModel.model_config.copy()
    model_config["frozen"] = True

    market_id: str
    treasury_id: str
    token_id: str

    amount_raw: int = Field(..., alias="amountRaw", ge=0)
    amount_formatted: str = Field(..., alias="amountFormatted")

    timestamp: int = Field(..., ge=0)
    transaction_hash: str = Field(..., alias="transactionHash")


class FeeSplitterReceipt(FeeSplitterEntry):
    """A single inbound fee payment into a treasury."""

    sender: str = Field(..., description="Address the fees came from")


class FeeSplitterPayment(FeeSplitterEntry):
    """
    A single outbound distribution from a treasury.

    Floor-fee payments guarantee a minimum distribution and are kept apart
    from proportional-share payments by ``is_floor_fee``.
    """

    recipient: str = Field(..., description="Address the fees were paid to")
    is_floor_fee: bool = Field(..., alias="isFloorFee")
