"""Route search and execution.

This package finds the best sequence of pools for a swap request and
applies it atomically.

Module structure:
- types.py: SwapMode, TradingDirection, RouteQuote and SwapEvent
- evaluator.py: RouteEvaluator, forward and backward pricing of a path
- pathfinding.py: PathFinder, bounded breadth-first route search
- executor.py: RouteExecutor, all-or-nothing execution of a path
"""

from aggregator.routing.evaluator import PricingOracle, RouteEvaluator
from aggregator.routing.executor import RouteExecutor
from aggregator.routing.pathfinding import PathFinder, PoolSource
from aggregator.routing.types import Path, RouteQuote, SwapEvent, SwapMode, TradingDirection

__all__ = [
    "Path",
    "PathFinder",
    "PoolSource",
    "PricingOracle",
    "RouteEvaluator",
    "RouteExecutor",
    "RouteQuote",
    "SwapEvent",
    "SwapMode",
    "TradingDirection",
]
