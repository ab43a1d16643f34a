"""Atomic execution of a chosen path."""

from __future__ import annotations

from collections.abc import Sequence

import structlog

from aggregator.errors import AboveMaximumSupply, ExecutionFailed, NoPossibleTradingPath, VenueError
from aggregator.models.pool import AvailablePool
from aggregator.pools.registry import PoolRegistry
from aggregator.routing.evaluator import RouteEvaluator
from aggregator.safe_int import SafeIntError

logger = structlog.get_logger()

# Failures a hop may raise; anything else is a bug and propagates as is
_HOP_ERRORS = (VenueError, SafeIntError)


class RouteExecutor:
    """Applies a path hop by hop against the venues.

    The slippage bound is only enforced where the path meets the caller:
    intermediate hops run unbounded and the last hop carries the caller's
    limit. The whole path runs inside ``PoolRegistry.atomic()``, so a
    failure at any hop puts every balance and reserve back.
    """

    def __init__(self, registry: PoolRegistry, evaluator: RouteEvaluator | None = None) -> None:
        self.registry = registry
        self.evaluator = evaluator if evaluator is not None else RouteEvaluator(registry)

    def execute_exact_supply(
        self,
        caller: str,
        path: Sequence[AvailablePool],
        supply_amount: int,
        min_target_amount: int,
    ) -> int:
        """Swap exactly ``supply_amount`` along ``path``; returns the target amount.

        Raises:
            ExecutionFailed: If any hop fails (state reverted)
        """
        if not path:
            raise ValueError("Cannot execute an empty path")

        last = len(path) - 1
        try:
            with self.registry.atomic():
                balance = supply_amount
                for i, hop in enumerate(path):
                    # Only the last hop is bounded; the atomic scope covers the rest
                    min_out = min_target_amount if i == last else 0
                    amount_in = balance
                    balance = self.registry.swap_with_exact_supply(caller, hop, amount_in, min_out)
                    self._log_hop(caller, i, hop, amount_in, balance)
        except _HOP_ERRORS as err:
            self._log_revert(caller, path, err)
            raise ExecutionFailed(f"Swap along {_describe(path)} failed and was reverted") from err
        return balance

    def execute_exact_target(
        self,
        caller: str,
        path: Sequence[AvailablePool],
        target_amount: int,
        max_supply_amount: int,
    ) -> int:
        """Swap along ``path`` for ``target_amount``; returns the supply amount spent.

        Every hop but the last swaps the estimated supply forward with no
        bound; the last hop swaps for the exact target, paying at most what
        reached it. Any surplus of the last intermediate token stays with
        the caller rather than being refunded.

        Raises:
            NoPossibleTradingPath: If the path cannot be priced for the target
            AboveMaximumSupply: If the estimated supply exceeds the maximum
            ExecutionFailed: If any hop fails (state reverted)
        """
        if not path:
            raise ValueError("Cannot execute an empty path")

        supply_amount = self.evaluator.evaluate_exact_target(path, target_amount)
        if supply_amount is None:
            raise NoPossibleTradingPath(f"Path {_describe(path)} cannot provide {target_amount}")
        if supply_amount > max_supply_amount:
            raise AboveMaximumSupply(
                f"Required supply {supply_amount} exceeds maximum {max_supply_amount}"
            )

        try:
            with self.registry.atomic():
                balance = supply_amount
                for i, hop in enumerate(path[:-1]):
                    amount_in = balance
                    balance = self.registry.swap_with_exact_supply(caller, hop, amount_in, 0)
                    self._log_hop(caller, i, hop, amount_in, balance)
                spent = self.registry.swap_with_exact_target(caller, path[-1], target_amount, balance)
                self._log_hop(caller, len(path) - 1, path[-1], spent, target_amount)
        except _HOP_ERRORS as err:
            self._log_revert(caller, path, err)
            raise ExecutionFailed(f"Swap along {_describe(path)} failed and was reverted") from err

        if len(path) == 1:
            return spent
        if balance > spent:
            logger.debug(
                "intermediate_residue",
                caller=caller,
                token=path[-1].supply_token,
                residue=balance - spent,
            )
        return supply_amount

    @staticmethod
    def _log_hop(caller: str, index: int, hop: AvailablePool, amount_in: int, amount_out: int) -> None:
        logger.debug(
            "hop_executed",
            caller=caller,
            hop=index,
            pool=str(hop),
            amount_in=amount_in,
            amount_out=amount_out,
        )

    @staticmethod
    def _log_revert(caller: str, path: Sequence[AvailablePool], err: Exception) -> None:
        logger.warning(
            "route_reverted",
            caller=caller,
            path=_describe(path),
            error_type=type(err).__name__,
            error=str(err),
        )


def _describe(path: Sequence[AvailablePool]) -> str:
    return " -> ".join(str(hop) for hop in path)


__all__ = ["RouteExecutor"]
