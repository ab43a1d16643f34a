"""Pool identity types.

A TokenPair is one orientation of an unordered pool pair. An AvailablePool
tags that pair with the venue that trades it; a hop in a route is an
AvailablePool in the orientation the route uses it.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from aggregator.models.types import normalize_token


class Venue(str, Enum):
    """Liquidity venues the aggregator can route through."""

    DEX = "dex"  # Constant-product pools
    FIXED_RATE = "fixedRate"  # Fixed-price inventory pools


@dataclass(frozen=True)
class TokenPair:
    """A pool pair in one orientation.

    ``first`` is the token supplied to the pool and ``second`` the token
    received when the pair is used as a hop. The venue lists every pool in
    its canonical orientation; ``swap()`` flips it. Both tokens are
    normalized on construction.
    """

    first: str
    second: str

    def __post_init__(self) -> None:
        object.__setattr__(self, "first", normalize_token(self.first))
        object.__setattr__(self, "second", normalize_token(self.second))
        if self.first == self.second:
            raise ValueError(f"Pool pair cannot be reflexive: {self.first}")

    def swap(self) -> TokenPair:
        """Return the same pair in the opposite orientation."""
        return TokenPair(self.second, self.first)

    @property
    def key(self) -> frozenset[str]:
        """Orientation-independent identity of the pair."""
        return frozenset((self.first, self.second))

    def contains(self, token: str) -> bool:
        token = normalize_token(token)
        return token == self.first or token == self.second

    def __str__(self) -> str:
        return f"{self.first}/{self.second}"


@dataclass(frozen=True)
class AvailablePool:
    """One tradable (venue, pair) combination, in one orientation."""

    venue: Venue
    pair: TokenPair

    def swap(self) -> AvailablePool:
        """Return this pool in the opposite orientation."""
        return AvailablePool(self.venue, self.pair.swap())

    @property
    def supply_token(self) -> str:
        return self.pair.first

    @property
    def target_token(self) -> str:
        return self.pair.second

    @property
    def identity(self) -> tuple[Venue, frozenset[str]]:
        """Identity shared by both orientations of the same pool."""
        return self.venue, self.pair.key

    def __str__(self) -> str:
        return f"{self.venue.value}:{self.pair}"


__all__ = ["AvailablePool", "TokenPair", "Venue"]
