"""
Treasury indexer for building the fee ledger.

The main orchestrator for the indexing workflow: replays decoded treasury
events in order and keeps treasury totals in step with the ledger rows.
"""

import logging
from typing import Any, Iterable, Optional

from feeledger.enums import TreasuryEventType
from feeledger.parsers import RegistryData, TokenInfo, TreasuryEvent
from feeledger.tools import format_amount, normalize_address

from .params import FeeSplitterPaymentParams, FeeSplitterReceiptParams, TreasuryParams
from .record_builders import (
    build_fee_splitter_payment_record,
    build_fee_splitter_receipt_record,
    build_treasury_record,
)
from .result import IndexingResult

logger = logging.getLogger(__name__)


def apply_fees_received(
    treasury: dict[str, Any], amount_raw: int, decimals: int, timestamp: int
) -> dict[str, Any]:
    """
    Return a copy of a treasury record with its received total advanced.

    Args:
        treasury: Current treasury record
        amount_raw: Amount received, smallest token unit
        decimals: Decimals used to render the new total
        timestamp: Block timestamp of the update

    Returns:
        New treasury record; the input is left untouched
    """
    total = treasury["totalFeesReceivedRaw"] + amount_raw
    return {
        **treasury,
        "totalFeesReceivedRaw": total,
        "totalFeesReceivedFormatted": format_amount(total, decimals).formatted,
        "lastUpdatedAt": timestamp,
    }


def apply_fees_distributed(
    treasury: dict[str, Any], amount_raw: int, decimals: int, timestamp: int
) -> dict[str, Any]:
    """Return a copy of a treasury record with its distributed total advanced."""
    total = treasury["totalFeesDistributedRaw"] + amount_raw
    return {
        **treasury,
        "totalFeesDistributedRaw": total,
        "totalFeesDistributedFormatted": format_amount(total, decimals).formatted,
        "lastUpdatedAt": timestamp,
    }


class TreasuryIndexer:
    """
    Builds treasury, receipt, payment and token records from events.

    Workflow per event:
    1. Resolve the market from the emitting module (skip if unknown)
    2. Get or create the treasury record
    3. Get or create the token record
    4. Build the receipt or payment row
    5. Advance the treasury totals

    Example:
        indexer = TreasuryIndexer()
        result = indexer.index(event_data.events, registry)

        for treasury in result.treasuries.values():
            print(treasury["totalFeesReceivedFormatted"])
    """

    def index(
        self,
        events: Iterable[TreasuryEvent],
        registry: RegistryData,
        result: Optional[IndexingResult] = None,
    ) -> IndexingResult:
        """
        Index events into ledger records.

        A failing event is logged and recorded in ``result.errors``; the
        remaining events are still processed.

        Args:
            events: Decoded events, in chain order
            registry: Market and token registry
            result: Existing result to continue from (e.g., a previous batch)

        Returns:
            IndexingResult with records and any issues
        """
        if result is None:
            result = IndexingResult()

        for event in events:
            try:
                handled = self.handle_event(event, registry, result)
            except Exception as e:
                result.errors.append(f"[{event.event_type.value}] {event.event_id}: {e}")
                result.events_skipped += 1
                logger.exception(f"Error handling {event.event_type.value} event {event.event_id}")
                continue

            if handled:
                result.events_processed += 1
            else:
                result.events_skipped += 1

        return result

    def handle_event(
        self, event: TreasuryEvent, registry: RegistryData, result: IndexingResult
    ) -> bool:
        """
        Apply a single event to the result.

        Returns:
            True if the event was applied, False if it was skipped
        """
        name = event.event_type.value
        market_id = registry.get_market_id(event.src_address)
        if not market_id:
            message = (
                f"[{name}] Unable to resolve market for treasury={event.src_address} "
                f"| tx={event.transaction_hash}"
            )
            logger.warning(message)
            result.warnings.append(message)
            return False

        if not event.event_type.is_ledger_event:
            self._log_informational(event, market_id)
            result.informational_events += 1
            return True

        if event.event_id in result.receipts or event.event_id in result.payments:
            message = f"[{name}] Event {event.event_id} already indexed, skipping replay"
            logger.warning(message)
            result.warnings.append(message)
            return False

        treasury_id = event.src_address
        treasury = result.treasuries.get(treasury_id)
        if treasury is None:
            treasury = build_treasury_record(
                TreasuryParams(
                    id=treasury_id,
                    market_id=market_id,
                    treasury_address=treasury_id,
                    created_at=event.block_timestamp,
                    last_updated_at=event.block_timestamp,
                )
            )
            result.treasuries[treasury_id] = treasury
            logger.debug(f"Created treasury {treasury_id} for market {market_id}")

        token = self._get_or_create_token(event.require("token"), registry, result)
        amount_raw = event.require("amount")
        amount = format_amount(amount_raw, token["decimals"])

        if event.event_type == TreasuryEventType.FUNDS_RECEIVED:
            sender = normalize_address(event.require("sender"))
            result.receipts[event.event_id] = build_fee_splitter_receipt_record(
                FeeSplitterReceiptParams(
                    id=event.event_id,
                    market_id=market_id,
                    treasury_id=treasury_id,
                    token_id=token["id"],
                    sender=sender,
                    amount_raw=amount_raw,
                    amount_formatted=amount.formatted,
                    timestamp=event.block_timestamp,
                    transaction_hash=event.transaction_hash,
                )
            )
            result.treasuries[treasury_id] = apply_fees_received(
                treasury, amount_raw, token["decimals"], event.block_timestamp
            )
            logger.info(
                f"[{name}] Treasury funds received | marketId={market_id} "
                f"| token={token['symbol']} | amount={amount.formatted} | sender={sender}"
            )
            return True

        is_floor_fee = event.event_type == TreasuryEventType.FLOOR_FEE_PAID
        # The treasury itself receives floor fees
        recipient = treasury_id if is_floor_fee else normalize_address(event.require("recipient"))

        result.payments[event.event_id] = build_fee_splitter_payment_record(
            FeeSplitterPaymentParams(
                id=event.event_id,
                market_id=market_id,
                treasury_id=treasury_id,
                token_id=token["id"],
                recipient=recipient,
                is_floor_fee=is_floor_fee,
                amount_raw=amount_raw,
                amount_formatted=amount.formatted,
                timestamp=event.block_timestamp,
                transaction_hash=event.transaction_hash,
            )
        )

        if is_floor_fee:
            result.treasuries[treasury_id] = apply_fees_received(
                treasury, amount_raw, token["decimals"], event.block_timestamp
            )
            logger.info(
                f"[{name}] Recorded floor fee | marketId={market_id} "
                f"| amount={amount.formatted} {token['symbol']}"
            )
        else:
            result.treasuries[treasury_id] = apply_fees_distributed(
                treasury, amount_raw, token["decimals"], event.block_timestamp
            )
            logger.info(
                f"[{name}] Recorded recipient payment | marketId={market_id} "
                f"| recipient={recipient} | amount={amount.formatted} {token['symbol']}"
            )

        return True

    @staticmethod
    def _get_or_create_token(
        token_address: str, registry: RegistryData, result: IndexingResult
    ) -> dict[str, Any]:
        """Get the token record, creating it from the registry or defaults."""
        token_address = normalize_address(token_address)
        token = result.tokens.get(token_address)
        if token is not None:
            return token

        info = registry.get_token(token_address)
        if info is None:
            info = TokenInfo(address=token_address)
            message = f"Token {token_address} not in registry, assuming {info.decimals} decimals"
            logger.warning(message)
            result.warnings.append(message)

        token = info.to_record()
        result.tokens[token_address] = token
        return token

    @staticmethod
    def _log_informational(event: TreasuryEvent, market_id: str) -> None:
        """Log a configuration event that produces no records."""
        name = event.event_type.value
        params = event.params

        if event.event_type == TreasuryEventType.FLOOR_FEE_PERCENTAGE_UPDATED:
            detail = f"Fee percentage updated | oldFee={params.get('oldFee')} | newFee={params.get('newFee')}"
        elif event.event_type == TreasuryEventType.FLOOR_FEE_TREASURY_UPDATED:
            detail = (
                f"Treasury address updated | oldTreasury={params.get('oldTreasury')} "
                f"| newTreasury={params.get('newTreasury')}"
            )
        elif event.event_type == TreasuryEventType.RECIPIENT_ADDED:
            detail = f"Recipient added | recipient={params.get('account')} | shares={params.get('shares')}"
        else:
            detail = "All recipients cleared"

        logger.info(f"[{name}] {detail} | marketId={market_id}")
