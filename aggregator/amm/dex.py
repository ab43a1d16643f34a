"""Constant-product DEX venue.

Pools use the constant product formula x * y = k with a fee taken from
the supplied amount. The default fee is 1/100.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum

import structlog

from aggregator.amm.base import BaseVenue
from aggregator.amm.ledger import Ledger
from aggregator.errors import PoolNotEnabled, PoolNotFound
from aggregator.models.pool import TokenPair
from aggregator.safe_int import S, SafeInt, SafeIntError, is_balance

logger = structlog.get_logger()

DEFAULT_EXCHANGE_FEE = (1, 100)


class PoolStatus(str, Enum):
    """Trading status of a listed pool."""

    ENABLED = "enabled"
    DISABLED = "disabled"


@dataclass
class DexPool:
    """A constant-product pool stored in its canonical orientation."""

    pair: TokenPair
    reserve_first: int
    reserve_second: int
    status: PoolStatus = PoolStatus.ENABLED

    def get_reserves(self, pair: TokenPair) -> tuple[int, int]:
        """Get reserves ordered as (reserve_in, reserve_out) for a trade orientation."""
        if pair == self.pair:
            return self.reserve_first, self.reserve_second
        elif pair == self.pair.swap():
            return self.reserve_second, self.reserve_first
        else:
            raise ValueError(f"Pair {pair} not in pool {self.pair}")

    @property
    def is_active(self) -> bool:
        return self.status is PoolStatus.ENABLED and self.reserve_first > 0 and self.reserve_second > 0


class ConstantProductDex(BaseVenue):
    """Constant-product venue with one pool per unordered token pair.

    Formula: amount_out = (in * (den - num) * res_out) / (res_in * den + in * (den - num))
    """

    name = "dex"

    def __init__(
        self,
        ledger: Ledger,
        exchange_fee: tuple[int, int] = DEFAULT_EXCHANGE_FEE,
    ) -> None:
        super().__init__(ledger)
        numerator, denominator = exchange_fee
        if denominator <= 0 or not 0 <= numerator < denominator:
            raise ValueError(f"Exchange fee must be in [0, 1), got {numerator}/{denominator}")
        self.exchange_fee = exchange_fee
        self._pools: dict[frozenset[str], DexPool] = {}

    # --- Listing ---

    def list_pool(
        self,
        pair: TokenPair,
        reserve_first: int,
        reserve_second: int,
        status: PoolStatus = PoolStatus.ENABLED,
    ) -> DexPool:
        """List a pool for a pair. Replaces any pool already listed for it.

        ``pair`` fixes the pool's canonical orientation.
        """
        if not (is_balance(reserve_first) and is_balance(reserve_second)):
            raise ValueError(f"Reserves must be balances, got {reserve_first}, {reserve_second}")
        if pair.key in self._pools:
            logger.debug("dex_pool_replaced", pair=str(pair))
        pool = DexPool(pair, reserve_first, reserve_second, status)
        self._pools[pair.key] = pool
        return pool

    def enable_pool(self, pair: TokenPair) -> None:
        self._get_pool(pair).status = PoolStatus.ENABLED

    def disable_pool(self, pair: TokenPair) -> None:
        self._get_pool(pair).status = PoolStatus.DISABLED

    def get_pool(self, pair: TokenPair) -> DexPool | None:
        return self._pools.get(pair.key)

    def get_reserves(self, pair: TokenPair) -> tuple[int, int]:
        """Reserves as (reserve_in, reserve_out) for a trade orientation, (0, 0) if unlisted."""
        pool = self._pools.get(pair.key)
        if pool is None:
            return 0, 0
        return pool.get_reserves(pair)

    def listed_pairs(self) -> list[TokenPair]:
        return [pool.pair for pool in self._pools.values()]

    def active_pairs(self) -> list[TokenPair]:
        return [pool.pair for pool in self._pools.values() if pool.is_active]

    # --- Pricing ---

    def get_amount_out(self, amount_in: int, reserve_in: int, reserve_out: int) -> int:
        """Calculate output amount using the constant product formula.

        Returns 0 when the input or either reserve is empty.

        Raises:
            SafeIntError: If the result does not fit a balance
        """
        if amount_in <= 0 or reserve_in <= 0 or reserve_out <= 0:
            return 0
        numerator_fee, denominator = self.exchange_fee
        amount_in_with_fee = SafeInt.wide(amount_in) * S(denominator - numerator_fee)
        numerator = amount_in_with_fee * S(reserve_out)
        denominator_total = SafeInt.wide(reserve_in) * S(denominator) + amount_in_with_fee
        return (numerator // denominator_total).to_balance()

    def get_amount_in(self, amount_out: int, reserve_in: int, reserve_out: int) -> int:
        """Calculate required input for a desired output.

        Formula: amount_in = (res_in * out * den) / ((res_out - out) * (den - num)) + 1

        Returns 0 when the output cannot be provided by the reserves.

        Raises:
            SafeIntError: If the result does not fit a balance
        """
        if amount_out <= 0 or reserve_in <= 0 or reserve_out <= 0:
            return 0
        if amount_out >= reserve_out:
            # Can't extract the whole reserve
            return 0
        numerator_fee, denominator = self.exchange_fee
        numerator = SafeInt.wide(reserve_in) * S(amount_out) * S(denominator)
        denominator_total = (SafeInt.wide(reserve_out) - S(amount_out)) * S(denominator - numerator_fee)
        return ((numerator // denominator_total) + S(1)).to_balance()

    def get_target_amount(self, pair: TokenPair, supply_amount: int) -> int | None:
        pool = self._pools.get(pair.key)
        if pool is None or not pool.is_active:
            return None
        reserve_in, reserve_out = pool.get_reserves(pair)
        try:
            amount_out = self.get_amount_out(supply_amount, reserve_in, reserve_out)
        except SafeIntError:
            return None
        return amount_out or None

    def get_supply_amount(self, pair: TokenPair, target_amount: int) -> int | None:
        pool = self._pools.get(pair.key)
        if pool is None or not pool.is_active:
            return None
        reserve_in, reserve_out = pool.get_reserves(pair)
        try:
            amount_in = self.get_amount_in(target_amount, reserve_in, reserve_out)
        except SafeIntError:
            return None
        return amount_in or None

    # --- Execution ---

    def _get_pool(self, pair: TokenPair) -> DexPool:
        pool = self._pools.get(pair.key)
        if pool is None:
            raise PoolNotFound(f"dex: no pool for {pair}")
        return pool

    def _require_tradable(self, pair: TokenPair) -> None:
        if self._get_pool(pair).status is not PoolStatus.ENABLED:
            raise PoolNotEnabled(f"dex: pool {pair} is not enabled")

    def _apply_swap(self, pair: TokenPair, amount_in: int, amount_out: int) -> None:
        pool = self._get_pool(pair)
        reserve_in, reserve_out = pool.get_reserves(pair)
        new_in = (S(reserve_in) + S(amount_in)).value
        new_out = (S(reserve_out) - S(amount_out)).value
        if pair == pool.pair:
            pool.reserve_first, pool.reserve_second = new_in, new_out
        else:
            pool.reserve_second, pool.reserve_first = new_in, new_out

    def snapshot(self) -> dict[frozenset[str], DexPool]:
        return {key: replace(pool) for key, pool in self._pools.items()}

    def restore(self, snapshot: dict[frozenset[str], DexPool]) -> None:
        self._pools = {key: replace(pool) for key, pool in snapshot.items()}


__all__ = ["ConstantProductDex", "DexPool", "PoolStatus", "DEFAULT_EXCHANGE_FEE"]
