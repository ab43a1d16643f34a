"""End-to-end pricing of a concrete path."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Protocol

from aggregator.models.pool import AvailablePool
from aggregator.routing.types import SwapMode


class PricingOracle(Protocol):
    """Side-effect free per-pool pricing (implemented by PoolRegistry)."""

    def get_target_amount(self, pool: AvailablePool, supply_amount: int) -> int | None: ...

    def get_supply_amount(self, pool: AvailablePool, target_amount: int) -> int | None: ...


class RouteEvaluator:
    """Chains per-pool prices along a path.

    A continuity break or any hop the oracle cannot price makes the whole
    path unpriceable; there are no partial results. Paths built by
    PathFinder are continuous by construction, so a continuity failure here
    means the caller passed a hand-built path.
    """

    def __init__(self, oracle: PricingOracle) -> None:
        self.oracle = oracle

    def evaluate_exact_supply(
        self, path: Sequence[AvailablePool], supply_amount: int
    ) -> int | None:
        """Target amount reached by supplying ``supply_amount`` to the first hop."""
        if not path:
            return None

        current_token = path[0].supply_token
        amount = supply_amount
        for hop in path:
            if hop.supply_token != current_token:
                return None
            next_amount = self.oracle.get_target_amount(hop, amount)
            if next_amount is None:
                return None
            amount = next_amount
            current_token = hop.target_token
        return amount

    def evaluate_exact_target(
        self, path: Sequence[AvailablePool], target_amount: int
    ) -> int | None:
        """Supply amount the first hop needs so the last hop yields ``target_amount``."""
        if not path:
            return None

        # Walk backwards: each hop's required input is the previous hop's output
        current_token = path[-1].target_token
        amount = target_amount
        for hop in reversed(path):
            if hop.target_token != current_token:
                return None
            next_amount = self.oracle.get_supply_amount(hop, amount)
            if next_amount is None:
                return None
            amount = next_amount
            current_token = hop.supply_token
        return amount

    def evaluate(self, path: Sequence[AvailablePool], amount: int, mode: SwapMode) -> int | None:
        if mode is SwapMode.EXACT_SUPPLY:
            return self.evaluate_exact_supply(path, amount)
        return self.evaluate_exact_target(path, amount)


__all__ = ["PricingOracle", "RouteEvaluator"]
