"""Configuration for the aggregator."""

from __future__ import annotations

import os
from dataclasses import dataclass

_TRUE_VALUES = ("true", "1", "yes")


@dataclass(frozen=True)
class AggregatorConfig:
    """Routing configuration.

    Attributes:
        trading_path_limit: Caps the search depth. A path must have fewer
            hops than this limit; with the default of 3, routes of one or
            two hops are considered.
        allow_repeated_pools: If False, a route may use each pool at most
            once. By default a route may revisit a pool.
    """

    trading_path_limit: int = 3
    allow_repeated_pools: bool = True

    def __post_init__(self) -> None:
        """Validate the path limit."""
        if isinstance(self.trading_path_limit, bool) or not isinstance(self.trading_path_limit, int):
            raise ValueError(f"trading_path_limit must be an int, got {self.trading_path_limit!r}")
        if self.trading_path_limit < 1:
            raise ValueError(f"trading_path_limit must be at least 1, got {self.trading_path_limit}")

    @classmethod
    def from_env(cls) -> AggregatorConfig:
        """Build a configuration from environment variables.

        - AGGREGATOR_TRADING_PATH_LIMIT (default: 3)
        - AGGREGATOR_ALLOW_REPEATED_POOLS (default: true)
        """
        limit = int(os.environ.get("AGGREGATOR_TRADING_PATH_LIMIT", str(cls.trading_path_limit)))
        repeated = os.environ.get("AGGREGATOR_ALLOW_REPEATED_POOLS", "true").lower() in _TRUE_VALUES
        return cls(trading_path_limit=limit, allow_repeated_pools=repeated)


# Default configuration instance
DEFAULT_CONFIG = AggregatorConfig()
