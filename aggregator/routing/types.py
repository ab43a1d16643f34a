"""Type definitions for routing module."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TypeAlias

from aggregator.errors import InvalidCurrencyId
from aggregator.models.pool import AvailablePool
from aggregator.models.types import normalize_token

# Ordered hops; hop i's target token is hop i+1's supply token
Path: TypeAlias = tuple[AvailablePool, ...]


class SwapMode(str, Enum):
    """Which end of the route is fixed."""

    EXACT_SUPPLY = "exactSupply"  # Input fixed, maximize output
    EXACT_TARGET = "exactTarget"  # Output fixed, minimize input


@dataclass(frozen=True)
class TradingDirection:
    """Ordered (source, destination) token pair of a requested swap."""

    source: str
    destination: str

    @classmethod
    def from_tokens(cls, source: str, destination: str) -> TradingDirection:
        """Build a direction from raw token identifiers.

        Raises:
            InvalidCurrencyId: If the tokens are malformed or identical
        """
        try:
            source_norm = normalize_token(source, validate=True)
            destination_norm = normalize_token(destination, validate=True)
        except (ValueError, AttributeError) as err:
            raise InvalidCurrencyId(str(err)) from err
        if source_norm == destination_norm:
            raise InvalidCurrencyId(f"Cannot swap {source_norm} for itself")
        return cls(source_norm, destination_norm)

    def __str__(self) -> str:
        return f"{self.source}->{self.destination}"


@dataclass(frozen=True)
class RouteQuote:
    """Best path found for a request and the amount on its free end.

    ``amount`` is the target amount for EXACT_SUPPLY and the required
    supply amount for EXACT_TARGET.
    """

    path: Path
    amount: int
    mode: SwapMode

    @property
    def hop_count(self) -> int:
        return len(self.path)

    @property
    def tokens(self) -> list[str]:
        """Token path from source to destination."""
        if not self.path:
            return []
        return [self.path[0].supply_token] + [hop.target_token for hop in self.path]


@dataclass(frozen=True)
class SwapEvent:
    """Emitted once per successful top-level swap."""

    caller: str
    supply_token: str
    target_token: str
    supply_amount: int
    target_amount: int


__all__ = ["Path", "RouteQuote", "SwapEvent", "SwapMode", "TradingDirection"]
