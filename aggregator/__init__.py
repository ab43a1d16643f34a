"""DEX aggregator - multi-hop swap routing over AMM venues."""

from aggregator.aggregator import DexAggregator, get_default_aggregator

__version__ = "0.1.0"
__all__ = ["DexAggregator", "get_default_aggregator", "__version__"]
