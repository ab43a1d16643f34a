"""Pool management package.

Provides PoolRegistry, the routing core's view of every liquidity venue.
"""

from .registry import PoolRegistry

__all__ = ["PoolRegistry"]
