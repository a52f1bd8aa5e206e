"""
Helper tools for the fee ledger.

Provides:
- Amount formatting for raw token amounts
- Address normalization and ledger id construction
"""

from feeledger.tools.addresses import looks_like_address, make_event_id, normalize_address
from feeledger.tools.amounts import Amount, format_amount

__all__ = [
    "Amount",
    "format_amount",
    "normalize_address",
    "looks_like_address",
    "make_event_id",
]
