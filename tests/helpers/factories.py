"""Factory functions for creating test objects.

Usage:
    from tests.helpers import make_pool, make_registry

    registry = make_registry(dex_pools=[(ACA, AUSD, 1_000_000, 2_000_000)])
"""

from collections.abc import Iterable

from aggregator.amm import ConstantProductDex, FixedRateVenue, Ledger
from aggregator.models.pool import AvailablePool, TokenPair, Venue
from aggregator.pools import PoolRegistry
from tests.helpers.constants import ACA, AUSD, INITIAL_BALANCE

DexPoolSpec = tuple[str, str, int, int]
FixedRatePoolSpec = tuple[str, str, tuple[int, int], int, int]


def make_pool(
    supply_token: str = ACA,
    target_token: str = AUSD,
    venue: Venue = Venue.DEX,
) -> AvailablePool:
    """Create a hop trading ``supply_token`` for ``target_token``."""
    return AvailablePool(venue, TokenPair(supply_token, target_token))


def make_registry(
    dex_pools: Iterable[DexPoolSpec] = (),
    fixed_rate_pools: Iterable[FixedRatePoolSpec] = (),
    funded: Iterable[tuple[str, str]] = (),
    exchange_fee: tuple[int, int] = (1, 100),
) -> PoolRegistry:
    """Create a registry over a DEX and a fixed-rate venue sharing one ledger.

    Args:
        dex_pools: (first, second, reserve_first, reserve_second) per pool
        fixed_rate_pools: (first, second, rate, inventory_first, inventory_second) per pool
        funded: (account, token) pairs credited with INITIAL_BALANCE
        exchange_fee: DEX fee as (numerator, denominator)

    Returns:
        PoolRegistry with the DEX registered before the fixed-rate venue
    """
    ledger = Ledger()
    dex = ConstantProductDex(ledger, exchange_fee)
    fixed_rate = FixedRateVenue(ledger)

    for first, second, reserve_first, reserve_second in dex_pools:
        dex.list_pool(TokenPair(first, second), reserve_first, reserve_second)
    for first, second, rate, inventory_first, inventory_second in fixed_rate_pools:
        fixed_rate.list_pool(TokenPair(first, second), rate, inventory_first, inventory_second)
    for account, token in funded:
        ledger.deposit(account, token, INITIAL_BALANCE)

    return PoolRegistry(ledger, {Venue.DEX: dex, Venue.FIXED_RATE: fixed_rate})


def registry_state(registry: PoolRegistry) -> tuple[object, dict[Venue, object]]:
    """Capture every balance and reserve, for before/after comparisons."""
    return registry.ledger.snapshot(), {
        tag: venue.snapshot() for tag, venue in registry.venues.items()
    }
