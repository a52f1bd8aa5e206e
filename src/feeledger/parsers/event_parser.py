"""
Parser for decoded treasury event logs.

Reads events exported by a chain indexer, either as a JSON array (or an
object with an "events" array) or as JSON lines, and normalizes them into
TreasuryEvent instances.
"""

import json
import logging
from collections import Counter
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

from feeledger.enums import TreasuryEventType
from feeledger.tools import looks_like_address, make_event_id, normalize_address

logger = logging.getLogger(__name__)


# Event params holding integer amounts (JSON numbers or decimal strings)
INTEGER_PARAMS = frozenset({"amount", "shares", "oldFee", "newFee"})

# Event params holding addresses
ADDRESS_PARAMS = frozenset(
    {"token", "sender", "recipient", "account", "oldTreasury", "newTreasury"}
)


@dataclass
class TreasuryEvent:
    """
    A single decoded event emitted by a fee splitter treasury.

    Attributes:
        event_type: Which treasury event this is
        src_address: Checksummed address of the emitting contract
        chain_id: Chain the event was emitted on
        block_timestamp: Block timestamp in seconds
        transaction_hash: Hash of the emitting transaction
        log_index: Position of the log within the block
        params: Decoded event parameters (trailing underscores stripped)
        block_number: Block number, if exported
    """

    event_type: TreasuryEventType
    src_address: str
    chain_id: int
    block_timestamp: int
    transaction_hash: str
    log_index: int
    params: dict[str, Any] = field(default_factory=dict)
    block_number: Optional[int] = None

    @property
    def event_id(self) -> str:
        """Natural unique id of the event (transaction hash and log index)."""
        return make_event_id(self.transaction_hash, self.log_index)

    def require(self, name: str) -> Any:
        """
        Get a required event parameter.

        Raises:
            KeyError: If the parameter is missing
        """
        if name not in self.params:
            raise KeyError(f"{self.event_type.value} event {self.event_id} has no '{name}' param")
        return self.params[name]


@dataclass
class EventLogData:
    """
    Complete parsed data from an event log file.

    Attributes:
        file_path: Source file path
        events: Parsed events in file order
        warnings: Problems with individual entries that were skipped
    """

    file_path: str
    events: list[TreasuryEvent] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    @property
    def num_events(self) -> int:
        """Number of parsed events."""
        return len(self.events)

    def count_by_type(self) -> dict[str, int]:
        """Count parsed events per event type."""
        counts = Counter(event.event_type.value for event in self.events)
        return dict(sorted(counts.items()))


class EventParser:
    """
    Parser for decoded treasury event logs.

    Each event object looks like:

        {"event": "RecipientPayment", "srcAddress": "0x...", "chainId": 1,
         "block": {"number": 12, "timestamp": 2100},
         "transaction": {"hash": "0xpay1"}, "logIndex": 0,
         "params": {"token_": "0x...", "recipient_": "0x...", "amount_": "10000000"}}

    Usage:
        parser = EventParser()
        data = parser.parse("events.jsonl")

        for event in data.events:
            print(event.event_type, event.event_id)
    """

    def parse(self, file_path: str | Path) -> EventLogData:
        """
        Parse an event log file.

        Args:
            file_path: Path to a .json or .jsonl file

        Returns:
            EventLogData with parsed events

        Raises:
            FileNotFoundError: If file doesn't exist
            ValueError: If the file is not JSON at all
        """
        file_path = Path(file_path)

        if not file_path.exists():
            raise FileNotFoundError(f"File not found: {file_path}")

        with open(file_path, "r") as f:
            content = f.read()

        return self.parse_content(content, str(file_path))

    def parse_content(self, content: str, file_path: str = "") -> EventLogData:
        """
        Parse events from string content.

        Args:
            content: JSON document or JSON lines
            file_path: Optional file path for reference

        Returns:
            EventLogData with parsed events

        Raises:
            ValueError: If no entry could be decoded as JSON
        """
        result = EventLogData(file_path=file_path)
        stripped = content.strip()

        if not stripped:
            return result

        entries = self._decode_document(stripped)
        if entries is None:
            entries = self._decode_lines(stripped, result)

        self._parse_into(entries, result)

        logger.debug(f"Parsed {result.num_events} events from {file_path or '<content>'}")
        return result

    def parse_entries(self, entries: list[dict], file_path: str = "") -> EventLogData:
        """Parse events from already-decoded JSON objects (e.g., an API response)."""
        result = EventLogData(file_path=file_path)
        self._parse_into(entries, result)
        return result

    def _parse_into(self, entries: list, result: EventLogData) -> None:
        for position, entry in enumerate(entries):
            event = self._parse_entry(entry, position, result)
            if event is not None:
                result.events.append(event)

    def _decode_document(self, content: str) -> Optional[list]:
        """Decode the whole content as one JSON document, if it is one."""
        try:
            data = json.loads(content)
        except json.JSONDecodeError as e:
            if content.startswith("["):
                raise ValueError(f"Invalid JSON event array: {e}") from e
            return None

        if isinstance(data, list):
            return data
        if isinstance(data, dict):
            events = data.get("events")
            if isinstance(events, list):
                return events
            return [data]
        raise ValueError(f"Expected a JSON array or object, got {type(data).__name__}")

    def _decode_lines(self, content: str, result: EventLogData) -> list:
        """Decode JSON lines, recording undecodable lines as warnings."""
        entries = []
        failures = 0

        for line_number, line in enumerate(content.splitlines(), start=1):
            line = line.strip()
            if not line or line.startswith("#"):
                continue
            try:
                entries.append(json.loads(line))
            except json.JSONDecodeError as e:
                failures += 1
                result.warnings.append(f"Line {line_number}: invalid JSON ({e.msg})")

        if failures and not entries:
            raise ValueError("Content is neither a JSON document nor JSON lines")

        return entries

    def _parse_entry(self, entry: Any, position: int, result: EventLogData) -> Optional[TreasuryEvent]:
        """Convert one decoded entry to a TreasuryEvent, or record why not."""
        if not isinstance(entry, dict):
            result.warnings.append(f"Entry {position}: expected an object")
            return None

        name = entry.get("event") or entry.get("eventName")
        try:
            event_type = TreasuryEventType(name)
        except ValueError:
            result.warnings.append(f"Entry {position}: unknown event type {name!r}")
            return None

        try:
            block = _as_object(entry.get("block"), "block")
            transaction = _as_object(entry.get("transaction"), "transaction")

            block_number = block.get("number")
            return TreasuryEvent(
                event_type=event_type,
                src_address=normalize_address(entry["srcAddress"]),
                chain_id=_to_int(entry.get("chainId", 0), "chainId"),
                block_timestamp=_to_int(block["timestamp"], "timestamp"),
                transaction_hash=str(transaction["hash"]),
                log_index=_to_int(entry["logIndex"], "logIndex"),
                params=self._normalize_params(_as_object(entry.get("params"), "params")),
                block_number=_to_int(block_number, "number") if block_number is not None else None,
            )
        except (KeyError, TypeError, ValueError) as e:
            result.warnings.append(f"Entry {position} ({event_type.value}): {e}")
            return None

    @staticmethod
    def _normalize_params(raw_params: dict) -> dict[str, Any]:
        """
        Strip trailing underscores and coerce integer and address params.

        Raises:
            TypeError: If an integer param is not an int or decimal string
            ValueError: If an integer param string is not a decimal number
        """
        params: dict[str, Any] = {}

        for key, value in raw_params.items():
            name = key.rstrip("_")
            if name in INTEGER_PARAMS and value is not None:
                value = _to_int(value, name)
            elif name in ADDRESS_PARAMS and looks_like_address(value):
                value = normalize_address(value)
            params[name] = value

        return params


def _as_object(value: Any, name: str) -> dict:
    """Return a nested JSON object, treating a missing one as empty."""
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise TypeError(f"'{name}' must be an object, got {type(value).__name__}")
    return value


def _to_int(value: Any, name: str) -> int:
    """
    Coerce a JSON integer or decimal string to int.

    Floats are rejected; amounts beyond 2**53 cannot be exported as floats
    without losing digits.
    """
    if isinstance(value, bool) or not isinstance(value, (int, str)):
        raise TypeError(f"'{name}' must be an integer or decimal string, got {value!r}")
    if isinstance(value, str):
        text = value.strip()
        if not text.lstrip("-").isdigit():
            raise ValueError(f"'{name}' is not a decimal integer: {value!r}")
        return int(text)
    return value
