"""
Indexing result dataclass.

Holds the output of replaying treasury events into ledger records.
"""

from dataclasses import dataclass, field
from typing import Any, Optional

from feeledger.enums import TableName


@dataclass
class IndexingResult:
    """
    Result of indexing treasury events.

    Records are schema-ready dicts keyed by their record id, so re-setting
    a record replaces it the way an entity store would.

    Attributes:
        treasuries: Treasury records (dicts matching TREASURY_SCHEMA)
        receipts: Fee receipt records (FEE_SPLITTER_RECEIPT_SCHEMA)
        payments: Fee payment records (FEE_SPLITTER_PAYMENT_SCHEMA)
        tokens: Token records (TOKEN_SCHEMA)
        source_file: Path to the source event log
        events_processed: Events that produced or updated records
        events_skipped: Events dropped (unresolved market, replays, failures)
        informational_events: Config-change events that were only logged
        warnings: Non-fatal issues encountered
        errors: Failures while handling individual events
    """

    treasuries: dict[str, dict[str, Any]] = field(default_factory=dict)
    receipts: dict[str, dict[str, Any]] = field(default_factory=dict)
    payments: dict[str, dict[str, Any]] = field(default_factory=dict)
    tokens: dict[str, dict[str, Any]] = field(default_factory=dict)

    source_file: Optional[str] = None

    events_processed: int = 0
    events_skipped: int = 0
    informational_events: int = 0

    warnings: list[str] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)

    @property
    def has_errors(self) -> bool:
        """Check if there were any errors."""
        return len(self.errors) > 0

    @property
    def is_empty(self) -> bool:
        """Check if no records were produced."""
        return not (self.treasuries or self.receipts or self.payments)

    def tables(self) -> dict[str, list[dict[str, Any]]]:
        """Records grouped by output table name."""
        return {
            TableName.TREASURY.value: list(self.treasuries.values()),
            TableName.FEE_SPLITTER_RECEIPT.value: list(self.receipts.values()),
            TableName.FEE_SPLITTER_PAYMENT.value: list(self.payments.values()),
            TableName.TOKEN.value: list(self.tokens.values()),
        }

    def summary(self) -> str:
        """Generate a human-readable summary."""
        lines = ["Indexing Summary:"]
        lines.append(
            f"  Events: {self.events_processed} processed, "
            f"{self.events_skipped} skipped, {self.informational_events} informational"
        )
        lines.append(f"  Treasuries: {len(self.treasuries)}")

        for treasury in self.treasuries.values():
            lines.append(f"    {treasury['treasuryAddress']} (market {treasury['market_id']})")
            lines.append(f"      Received: {treasury['totalFeesReceivedFormatted']}")
            lines.append(f"      Distributed: {treasury['totalFeesDistributedFormatted']}")

        floor_fees = sum(1 for p in self.payments.values() if p["isFloorFee"])
        lines.append(f"  Receipts: {len(self.receipts)}")
        lines.append(f"  Payments: {len(self.payments)} ({floor_fees} floor fee)")
        lines.append(f"  Tokens: {len(self.tokens)}")

        if self.warnings:
            lines.append(f"\nWarnings ({len(self.warnings)}):")
            for w in self.warnings[:5]:  # Limit to first 5
                lines.append(f"  - {w}")

        if self.errors:
            lines.append(f"\nErrors ({len(self.errors)}):")
            for e in self.errors:
                lines.append(f"  - {e}")

        return "\n".join(lines)
