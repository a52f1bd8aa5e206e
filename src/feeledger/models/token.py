"""
Token model for amount denomination.
"""

from pydantic import Field

from feeledger.models.base import LedgerModel


class Token(LedgerModel):
    """
    An ERC-20 token referenced by ledger rows.

    The id is the checksummed token address.
    """

    name: str = Field(default="Unknown Token")
    symbol: str = Field(default="UNK")
    decimals: int = Field(default=18, ge=0, le=255)
    max_supply_raw: int = Field(default=0, alias="maxSupplyRaw", ge=0)
    max_supply_formatted: str = Field(default="0", alias="maxSupplyFormatted")
