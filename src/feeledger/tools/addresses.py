"""
Address and identifier helpers for on-chain data.
"""

from typing import Any

from eth_utils import is_address, to_checksum_address


def normalize_address(address: str) -> str:
    """
    Normalize a hex address to its EIP-55 checksum form.

    Args:
        address: Hex address in any case

    Returns:
        Checksummed address string

    Raises:
        ValueError: If the value is not a valid 20-byte hex address
    """
    if not isinstance(address, str) or not is_address(address.strip()):
        raise ValueError(f"Not a valid address: {address!r}")
    return to_checksum_address(address.strip())


def looks_like_address(value: Any) -> bool:
    """Check whether a value is a hex address string."""
    return isinstance(value, str) and is_address(value.strip())


def make_event_id(transaction_hash: str, log_index: int) -> str:
    """Build the natural id of a ledger row from its transaction and log index."""
    return f"{transaction_hash}-{log_index}"
