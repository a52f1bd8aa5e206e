"""
Base model for all fee ledger entities.

Provides common fields and behavior shared by the treasury, ledger and
token models.
"""

from pydantic import BaseModel, ConfigDict, Field


class LedgerModel(BaseModel):
    """
    Base model for all ledger entities.

    Field names are snake_case; aliases carry the stored record keys, so
    a model validates a builder record directly and dumps back to it.
    """

    model_config = ConfigDict(
        # Validate on assignment
        validate_assignment=True,
        # Populate by field name or alias
        populate_by_name=True,
        # Ledger rows never carry extra keys
        extra="forbid",
    )

    # Unique entity identifier (caller-supplied)
    id: str = Field(..., min_length=1)

    def __hash__(self) -> int:
        return hash((type(self).__name__, self.id))

    def to_dict(self) -> dict:
        """Convert to a record dict keyed by the stored field names."""
        return self.model_dump(by_alias=True)

    def to_json(self) -> str:
        """Convert to JSON string."""
        return self.model_dump_json(by_alias=True)
