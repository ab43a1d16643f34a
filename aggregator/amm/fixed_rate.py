"""Fixed-rate venue.

Pools hold inventory of both tokens and quote a fixed exchange rate, so
there is no slippage curve: the price is linear until the inventory of the
output token runs out.
"""

from __future__ import annotations

from dataclasses import dataclass, replace

from aggregator.amm.base import BaseVenue
from aggregator.amm.ledger import Ledger
from aggregator.errors import PoolNotFound
from aggregator.models.pool import TokenPair
from aggregator.safe_int import S, SafeInt, SafeIntError, is_balance


@dataclass
class FixedRatePool:
    """Inventory pool quoting ``rate_numerator / rate_denominator`` units of
    ``pair.second`` per unit of ``pair.first``.

    Attributes:
        pair: Canonical orientation of the pool
        rate_numerator: Units of second token per rate_denominator units of first
        rate_denominator: See rate_numerator
        inventory_first: Amount of first token available to pay out
        inventory_second: Amount of second token available to pay out
    """

    pair: TokenPair
    rate_numerator: int
    rate_denominator: int
    inventory_first: int
    inventory_second: int

    def __post_init__(self) -> None:
        """Validate rate is positive."""
        if self.rate_numerator <= 0 or self.rate_denominator <= 0:
            raise ValueError(
                f"Rate must be positive, got {self.rate_numerator}/{self.rate_denominator}"
            )

    def oriented(self, pair: TokenPair) -> tuple[int, int, int]:
        """Return (rate_numerator, rate_denominator, inventory_out) for a trade orientation."""
        if pair == self.pair:
            return self.rate_numerator, self.rate_denominator, self.inventory_second
        elif pair == self.pair.swap():
            return self.rate_denominator, self.rate_numerator, self.inventory_first
        else:
            raise ValueError(f"Pair {pair} not in pool {self.pair}")


class FixedRateVenue(BaseVenue):
    """Swap calculator for fixed-rate pools.

    - Exact supply: amount_out = amount_in * num / den (rounded down)
    - Exact target: amount_in = amount_out * den / num (rounded up)
    """

    name = "fixedRate"

    def __init__(self, ledger: Ledger) -> None:
        super().__init__(ledger)
        self._pools: dict[frozenset[str], FixedRatePool] = {}

    def list_pool(
        self,
        pair: TokenPair,
        rate: tuple[int, int],
        inventory_first: int,
        inventory_second: int,
    ) -> FixedRatePool:
        if not (is_balance(inventory_first) and is_balance(inventory_second)):
            raise ValueError(
                f"Inventory must be balances, got {inventory_first}, {inventory_second}"
            )
        pool = FixedRatePool(pair, rate[0], rate[1], inventory_first, inventory_second)
        self._pools[pair.key] = pool
        return pool

    def get_pool(self, pair: TokenPair) -> FixedRatePool | None:
        return self._pools.get(pair.key)

    def listed_pairs(self) -> list[TokenPair]:
        return [pool.pair for pool in self._pools.values()]

    def active_pairs(self) -> list[TokenPair]:
        # A pool with one side drained still trades in the other direction.
        return [
            pool.pair
            for pool in self._pools.values()
            if pool.inventory_first > 0 or pool.inventory_second > 0
        ]

    def get_target_amount(self, pair: TokenPair, supply_amount: int) -> int | None:
        pool = self._pools.get(pair.key)
        if pool is None or supply_amount <= 0:
            return None
        numerator, denominator, inventory_out = pool.oriented(pair)
        try:
            amount_out = (SafeInt.wide(supply_amount) * S(numerator) // S(denominator)).to_balance()
        except SafeIntError:
            return None
        if amount_out == 0 or amount_out > inventory_out:
            return None
        return amount_out

    def get_supply_amount(self, pair: TokenPair, target_amount: int) -> int | None:
        pool = self._pools.get(pair.key)
        if pool is None or target_amount <= 0:
            return None
        numerator, denominator, inventory_out = pool.oriented(pair)
        if target_amount > inventory_out:
            return None
        try:
            return (SafeInt.wide(target_amount) * S(denominator)).ceiling_div(numerator).to_balance()
        except SafeIntError:
            return None

    def _require_tradable(self, pair: TokenPair) -> None:
        if pair.key not in self._pools:
            raise PoolNotFound(f"fixedRate: no pool for {pair}")

    def _apply_swap(self, pair: TokenPair, amount_in: int, amount_out: int) -> None:
        pool = self._pools[pair.key]
        if pair == pool.pair:
            pool.inventory_first = (S(pool.inventory_first) + S(amount_in)).value
            pool.inventory_second = (S(pool.inventory_second) - S(amount_out)).value
        else:
            pool.inventory_second = (S(pool.inventory_second) + S(amount_in)).value
            pool.inventory_first = (S(pool.inventory_first) - S(amount_out)).value

    def snapshot(self) -> dict[frozenset[str], FixedRatePool]:
        return {key: replace(pool) for key, pool in self._pools.items()}

    def restore(self, snapshot: dict[frozenset[str], FixedRatePool]) -> None:
        self._pools = {key: replace(pool) for key, pool in snapshot.items()}


__all__ = ["FixedRatePool", "FixedRateVenue"]
