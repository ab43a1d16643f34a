"""AMM venue implementations."""

from aggregator.amm.base import BaseVenue, SwapResult, VenueAdapter
from aggregator.amm.dex import DEFAULT_EXCHANGE_FEE, ConstantProductDex, DexPool, PoolStatus
from aggregator.amm.fixed_rate import FixedRatePool, FixedRateVenue
from aggregator.amm.ledger import Ledger

__all__ = [
    # Base classes
    "BaseVenue",
    "SwapResult",
    "VenueAdapter",
    # Constant product
    "ConstantProductDex",
    "DexPool",
    "PoolStatus",
    "DEFAULT_EXCHANGE_FEE",
    # Fixed rate
    "FixedRatePool",
    "FixedRateVenue",
    # Balances
    "Ledger",
]
