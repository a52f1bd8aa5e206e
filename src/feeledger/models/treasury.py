"""
Treasury model for fee collection.
"""

from pydantic import Field

from feeledger.models.base import LedgerModel


class Treasury(LedgerModel):
    """
    A fee-collection treasury tied to a market.

    Attributes:
        market_id: Market the treasury collects fees for
        treasury_address: Checksummed treasury contract address
        total_fees_received_raw: Sum of fees received, smallest token unit
        total_fees_received_formatted: Decimal rendering of the received total
        total_fees_distributed_raw: Sum of fees paid out to recipients
        total_fees_distributed_formatted: Decimal rendering of the distributed total
        created_at: Block timestamp of the first event seen
        last_updated_at: Block timestamp of the latest update
    """

    market_id: str = Field(..., description="Market the treasury belongs to")

    treasury_address: str = Field(..., alias="treasuryAddress")

    total_fees_received_raw: int = Field(default=0, alias="totalFeesReceivedRaw", ge=0)
    total_fees_received_formatted: str = Field(default="0", alias="totalFeesReceivedFormatted")

    total_fees_distributed_raw: int = Field(default=0, alias="totalFeesDistributedRaw", ge=0)
    total_fees_distributed_formatted: str = Field(
        default="0", alias="totalFeesDistributedFormatted"
    )

    created_at: int = Field(..., alias="createdAt", ge=0)
    last_updated_at: int = Field(..., alias="lastUpdatedAt", ge=0)

    @property
    def undistributed_raw(self) -> int:
        """Fees received but not yet paid out."""
        return self.total_fees_received_raw - self.total_fees_distributed_raw

    def __str__(self) -> str:
        return (
            f"Treasury {self.treasury_address} [market {self.market_id}, "
            f"received {self.total_fees_received_formatted}, "
            f"distributed {self.total_fees_distributed_formatted}]"
        )
