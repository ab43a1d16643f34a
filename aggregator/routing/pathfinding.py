"""Bounded best-path search over the active pools.

The search expands a frontier of partial paths one hop per generation,
breadth-first by hop count. Every oriented hop whose supply token matches
the end of a partial path extends it; paths that end on the destination are
priced and compared, and stay in the frontier so longer routes through the
destination are still explored.

The search is bounded, not optimal: with ``hop_limit`` = n only paths of
1..n-1 hops are considered, and every candidate is priced end to end, so
the cost is O(hop_limit x pools^2) pool evaluations per generation in the
worst case.
"""

from __future__ import annotations

from collections.abc import Iterator
from typing import Protocol

import structlog

from aggregator.models.pool import AvailablePool
from aggregator.routing.evaluator import PricingOracle, RouteEvaluator
from aggregator.routing.types import Path, RouteQuote, SwapMode, TradingDirection

logger = structlog.get_logger()


class PoolSource(PricingOracle, Protocol):
    """Provides the pool snapshot and pricing (implemented by PoolRegistry)."""

    def all_active_pools(self) -> tuple[AvailablePool, ...]: ...


class PathFinder:
    """Finds the best-priced path for a trading direction.

    Usage:
        finder = PathFinder(registry)
        quote = finder.find_best_path(direction, 1_000, SwapMode.EXACT_SUPPLY, hop_limit=3)
    """

    def __init__(
        self,
        source: PoolSource,
        evaluator: RouteEvaluator | None = None,
        allow_repeated_pools: bool = True,
    ) -> None:
        """Initialize the path finder.

        Args:
            source: Pool listing and pricing oracle
            evaluator: Path evaluator. Defaults to one over ``source``.
            allow_repeated_pools: If False, a pool (in either orientation)
                                  appears at most once per path.
        """
        self._source = source
        self._evaluator = evaluator if evaluator is not None else RouteEvaluator(source)
        self.allow_repeated_pools = allow_repeated_pools

    def candidates(
        self,
        direction: TradingDirection,
        amount: int,
        mode: SwapMode,
        hop_limit: int,
    ) -> Iterator[RouteQuote]:
        """Yield every priceable complete path, in discovery order.

        Discovery order is by hop count, then by pool listing order with
        each pool's canonical orientation before its flipped one.

        Raises:
            ValueError: If hop_limit is below 1
        """
        if hop_limit < 1:
            raise ValueError(f"hop_limit must be at least 1, got {hop_limit}")

        # One snapshot per search: the pool set cannot change under the loop
        hops_by_supply = self._index_hops(self._source.all_active_pools())

        generation: tuple[Path, ...] = tuple(
            (hop,) for hop in hops_by_supply.get(direction.source, ())
        )
        for hop_count in range(1, hop_limit):
            if not generation:
                break
            for path in generation:
                if path[-1].target_token != direction.destination:
                    continue
                value = self._evaluator.evaluate(path, amount, mode)
                if value is not None:
                    yield RouteQuote(path, value, mode)
            if hop_count + 1 < hop_limit:
                generation = self._extend(generation, hops_by_supply)

    def find_best_path(
        self,
        direction: TradingDirection,
        amount: int,
        mode: SwapMode,
        hop_limit: int,
    ) -> RouteQuote | None:
        """Return the best complete path, or None if none exists.

        EXACT_SUPPLY keeps the strictly greatest target amount and
        EXACT_TARGET the strictly smallest supply amount; ties keep the
        path found first.
        """
        best: RouteQuote | None = None
        scored = 0
        for candidate in self.candidates(direction, amount, mode, hop_limit):
            scored += 1
            if self._improves(candidate, best):
                logger.debug(
                    "route_candidate_accepted",
                    direction=str(direction),
                    hops=candidate.hop_count,
                    amount=candidate.amount,
                    mode=mode.value,
                )
                best = candidate

        logger.debug(
            "route_search_completed",
            direction=str(direction),
            mode=mode.value,
            hop_limit=hop_limit,
            candidates=scored,
            found=best is not None,
        )
        return best

    @staticmethod
    def _improves(candidate: RouteQuote, best: RouteQuote | None) -> bool:
        if candidate.mode is SwapMode.EXACT_SUPPLY:
            return candidate.amount > (best.amount if best is not None else 0)
        return best is None or candidate.amount < best.amount

    @staticmethod
    def _index_hops(
        pools: tuple[AvailablePool, ...],
    ) -> dict[str, list[AvailablePool]]:
        """Both orientations of every pool, keyed by supply token."""
        index: dict[str, list[AvailablePool]] = {}
        for pool in pools:
            for hop in (pool, pool.swap()):
                index.setdefault(hop.supply_token, []).append(hop)
        return index

    def _extend(
        self,
        generation: tuple[Path, ...],
        hops_by_supply: dict[str, list[AvailablePool]],
    ) -> tuple[Path, ...]:
        """Build the next generation; earlier generations are never modified."""
        extended: list[Path] = []
        for path in generation:
            used = {hop.identity for hop in path}
            for hop in hops_by_supply.get(path[-1].target_token, ()):
                if not self.allow_repeated_pools and hop.identity in used:
                    continue
                extended.append(path + (hop,))
        return tuple(extended)


__all__ = ["PathFinder", "PoolSource"]
