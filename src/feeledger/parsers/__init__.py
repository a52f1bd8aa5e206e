"""
File parsers for fee ledger ingestion.

Provides parsers for:
- Decoded treasury event logs (JSON / JSON lines)
- Market and token registry files (JSON)
"""

from feeledger.parsers.event_parser import EventLogData, EventParser, TreasuryEvent
from feeledger.parsers.registry_parser import RegistryData, RegistryParser, TokenInfo

__all__ = [
    # Events
    "EventParser",
    "EventLogData",
    "TreasuryEvent",
    # Registry
    "RegistryParser",
    "RegistryData",
    "TokenInfo",
]
