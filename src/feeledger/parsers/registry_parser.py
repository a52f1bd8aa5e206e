"""
Parser for the market and token registry file.

The registry supplies what the indexer cannot derive from treasury events
alone: which market each treasury module belongs to, and the metadata of
the tokens fees are paid in.
"""

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

from feeledger.tools import format_amount, looks_like_address, normalize_address

logger = logging.getLogger(__name__)


@dataclass
class TokenInfo:
    """Token metadata from the registry."""

    address: str
    name: str = "Unknown Token"
    symbol: str = "UNK"
    decimals: int = 18
    max_supply_raw: int = 0

    @classmethod
    def from_json(cls, data: dict) -> "TokenInfo":
        """Create from a registry token entry."""
        return cls(
            address=normalize_address(data["address"]),
            name=data.get("name") or "Unknown Token",
            symbol=data.get("symbol") or "UNK",
            decimals=int(data.get("decimals", 18)),
            max_supply_raw=int(data.get("maxSupplyRaw", 0)),
        )

    def to_record(self) -> dict[str, Any]:
        """Build a token record matching TOKEN_SCHEMA."""
        return {
            "id": self.address,
            "name": self.name,
            "symbol": self.symbol,
            "decimals": self.decimals,
            "maxSupplyRaw": self.max_supply_raw,
            "maxSupplyFormatted": format_amount(self.max_supply_raw, self.decimals).formatted,
        }


@dataclass
class RegistryData:
    """
    Parsed registry contents.

    Attributes:
        file_path: Source file path
        markets: Module address -> market id
        tokens: Token address -> TokenInfo
    """

    file_path: str = ""
    markets: dict[str, str] = field(default_factory=dict)
    tokens: dict[str, TokenInfo] = field(default_factory=dict)

    def get_market_id(self, module_address: str) -> Optional[str]:
        """Resolve the market a module belongs to."""
        return self.markets.get(module_address)

    def get_token(self, token_address: str) -> Optional[TokenInfo]:
        """Look up token metadata by checksummed address."""
        return self.tokens.get(token_address)


class RegistryParser:
    """
    Parser for registry JSON files.

    Expected format:

        {"markets": {"<module address>": "<market id>", ...},
         "tokens": [{"address": "0x...", "name": "USD Coin",
                     "symbol": "USDC", "decimals": 6}, ...]}
    """

    def parse(self, file_path: str | Path) -> RegistryData:
        """
        Parse a registry JSON file.

        Args:
            file_path: Path to the JSON file

        Returns:
            RegistryData with markets and tokens

        Raises:
            FileNotFoundError: If file doesn't exist
            ValueError: If the JSON or an entry is invalid
        """
        file_path = Path(file_path)

        if not file_path.exists():
            raise FileNotFoundError(f"File not found: {file_path}")

        with open(file_path, "r") as f:
            try:
                data = json.load(f)
            except json.JSONDecodeError as e:
                raise ValueError(f"Invalid registry JSON: {e}") from e

        return self.parse_dict(data, str(file_path))

    def parse_dict(self, data: dict, file_path: str = "") -> RegistryData:
        """
        Parse a registry from a dictionary.

        Args:
            data: Decoded registry JSON
            file_path: Optional file path for reference

        Returns:
            RegistryData with markets and tokens
        """
        if not isinstance(data, dict):
            raise ValueError("Registry must be a JSON object")

        result = RegistryData(file_path=file_path)

        for module_address, market_id in (data.get("markets") or {}).items():
            if looks_like_address(market_id):
                market_id = normalize_address(market_id)
            result.markets[normalize_address(module_address)] = market_id

        for entry in data.get("tokens") or []:
            try:
                token = TokenInfo.from_json(entry)
            except (KeyError, TypeError) as e:
                raise ValueError(f"Invalid token entry {entry!r}: {e}") from e
            result.tokens[token.address] = token

        logger.debug(
            f"Loaded registry with {len(result.markets)} markets and {len(result.tokens)} tokens"
        )
        return result
