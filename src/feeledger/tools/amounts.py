"""
Token amount formatting.

Raw amounts are integers in the token's smallest unit; formatted amounts
are the human-readable decimal strings stored next to them.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class Amount:
    """
    A raw token amount and its decimal rendering.

    Attributes:
        raw: Amount in the token's smallest unit
        formatted: Decimal string after applying the token decimals
    """

    raw: int
    formatted: str


def format_amount(raw: int, decimals: int) -> Amount:
    """
    Format a raw integer amount using the token decimals.

    Trailing zeros of the fractional part are removed, and a zero
    fraction collapses to the whole part only.

    Args:
        raw: Amount in the token's smallest unit
        decimals: Number of token decimals (e.g., 6 for USDC)

    Returns:
        Amount holding the raw value and its formatted string

    Raises:
        ValueError: If decimals is negative

    Example:
        format_amount(9_900_000, 6)  # Amount(raw=9900000, formatted="9.9")
    """
    if decimals < 0:
        raise ValueError(f"decimals must be non-negative, got {decimals}")

    raw = int(raw)
    if decimals == 0:
        return Amount(raw=raw, formatted=str(raw))

    sign = "-" if raw < 0 else ""
    whole, fractional = divmod(abs(raw), 10**decimals)
    fractional_str = str(fractional).rjust(decimals, "0").rstrip("0")

    if fractional_str:
        formatted = f"{sign}{whole}.{fractional_str}"
    else:
        formatted = f"{sign}{whole}"

    return Amount(raw=raw, formatted=formatted)
