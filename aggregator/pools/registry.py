"""Pool registry: the routing core's view of the AMM venues.

The registry is the single seam between the routing core and the venues.
It provides:
- the list of active pools across every venue (read-only),
- side-effect free pricing, dispatched by venue tag,
- state-mutating swaps, dispatched the same way,
- the atomic scope executions run in.

Venues are a closed set (see ``Venue``); each tag maps to exactly one
adapter implementing ``VenueAdapter``.
"""

from __future__ import annotations

import contextlib
from collections.abc import Iterable, Iterator
from typing import Any

import structlog

from aggregator.amm.base import VenueAdapter
from aggregator.amm.ledger import Ledger
from aggregator.errors import PoolNotFound
from aggregator.models.pool import AvailablePool, Venue
from aggregator.models.types import normalize_token
from aggregator.safe_int import SafeIntError, is_balance

logger = structlog.get_logger()


class PoolRegistry:
    """Registry of venues available for routing.

    Usage:
        ledger = Ledger()
        dex = ConstantProductDex(ledger)
        registry = PoolRegistry(ledger, {Venue.DEX: dex})
        pools = registry.all_active_pools()
    """

    def __init__(
        self,
        ledger: Ledger | None = None,
        venues: dict[Venue, VenueAdapter] | None = None,
    ) -> None:
        """Initialize the registry.

        Args:
            ledger: Balance ledger shared by all venues. A fresh one is
                    created if omitted.
            venues: Initial venue adapters keyed by tag.
        """
        self.ledger = ledger if ledger is not None else Ledger()
        self._venues: dict[Venue, VenueAdapter] = {}
        self._tokens: set[str] = set()
        for tag, venue in (venues or {}).items():
            self.register_venue(tag, venue)

    # --- Venues and tokens ---

    def register_venue(self, tag: Venue, venue: VenueAdapter) -> None:
        """Attach the adapter for a venue tag.

        Raises:
            TypeError: If ``venue`` does not implement VenueAdapter
        """
        if not isinstance(venue, VenueAdapter):
            raise TypeError(f"Venue {tag.value} does not implement VenueAdapter: {type(venue)}")
        if tag in self._venues:
            logger.debug("venue_replaced", venue=tag.value)
        self._venues[tag] = venue

    def get_venue(self, tag: Venue) -> VenueAdapter | None:
        return self._venues.get(tag)

    @property
    def venues(self) -> dict[Venue, VenueAdapter]:
        return dict(self._venues)

    def register_tokens(self, tokens: Iterable[str]) -> None:
        """Mark tokens as known even while no venue lists them."""
        self._tokens.update(normalize_token(token) for token in tokens)

    def known_tokens(self) -> frozenset[str]:
        """Tokens registered explicitly or listed by any pool.

        Disabled and drained pools still count: recognition does not depend
        on whether a pool can trade right now.
        """
        tokens = set(self._tokens)
        for venue in self._venues.values():
            for pair in venue.listed_pairs():
                tokens.update((pair.first, pair.second))
        return frozenset(tokens)

    def is_known_token(self, token: str) -> bool:
        return normalize_token(token) in self.known_tokens()

    # --- Listing ---

    def all_active_pools(self) -> tuple[AvailablePool, ...]:
        """All pools open for trading, in canonical orientation.

        Order is venue registration order, then each venue's listing order.
        """
        return tuple(
            AvailablePool(tag, pair)
            for tag, venue in self._venues.items()
            for pair in venue.active_pairs()
        )

    # --- Pricing (read-only) ---

    def get_target_amount(self, pool: AvailablePool, supply_amount: int) -> int | None:
        """Output of ``pool`` for an exact input, or None if it cannot be quoted."""
        venue = self._venues.get(pool.venue)
        if venue is None or not is_balance(supply_amount):
            return None
        try:
            return venue.get_target_amount(pool.pair, supply_amount)
        except SafeIntError:
            return None

    def get_supply_amount(self, pool: AvailablePool, target_amount: int) -> int | None:
        """Input ``pool`` needs for an exact output, or None if unreachable."""
        venue = self._venues.get(pool.venue)
        if venue is None or not is_balance(target_amount):
            return None
        try:
            return venue.get_supply_amount(pool.pair, target_amount)
        except SafeIntError:
            return None

    # --- Execution ---

    def _require_venue(self, pool: AvailablePool) -> VenueAdapter:
        venue = self._venues.get(pool.venue)
        if venue is None:
            raise PoolNotFound(f"No venue registered for {pool.venue.value}")
        return venue

    def swap_with_exact_supply(
        self,
        caller: str,
        pool: AvailablePool,
        supply_amount: int,
        min_target_amount: int,
    ) -> int:
        """Swap an exact input through one pool; returns the output amount."""
        return self._require_venue(pool).swap_with_exact_supply(
            caller, pool.pair, supply_amount, min_target_amount
        )

    def swap_with_exact_target(
        self,
        caller: str,
        pool: AvailablePool,
        target_amount: int,
        max_supply_amount: int,
    ) -> int:
        """Swap for an exact output through one pool; returns the input amount."""
        return self._require_venue(pool).swap_with_exact_target(
            caller, pool.pair, target_amount, max_supply_amount
        )

    @contextlib.contextmanager
    def atomic(self) -> Iterator[None]:
        """All-or-nothing scope over the ledger and every venue.

        State is captured on entry and put back verbatim if the body raises;
        the exception is re-raised unchanged. Scopes nest.
        """
        ledger_state = self.ledger.snapshot()
        venue_states: dict[Venue, Any] = {tag: venue.snapshot() for tag, venue in self._venues.items()}
        try:
            yield
        except BaseException:
            self.ledger.restore(ledger_state)
            for tag, state in venue_states.items():
                self._venues[tag].restore(state)
            logger.debug("atomic_scope_reverted", venues=[tag.value for tag in venue_states])
            raise


__all__ = ["PoolRegistry"]
