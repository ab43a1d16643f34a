"""DEX aggregator: the two public swap entry points.

DexAggregator validates a request, asks the PathFinder for the best route
within the configured trading path limit, checks the caller's bound
against the quote before touching any state, and hands the route to the
RouteExecutor. A successful swap emits exactly one SwapEvent.
"""

from __future__ import annotations

import structlog

from aggregator.amm.dex import ConstantProductDex
from aggregator.amm.fixed_rate import FixedRateVenue
from aggregator.amm.ledger import Ledger
from aggregator.config import DEFAULT_CONFIG, AggregatorConfig
from aggregator.errors import (
    AboveMaximumSupply,
    BelowMinimumTarget,
    InvalidAmount,
    InvalidCurrencyId,
    NoPossibleTradingPath,
)
from aggregator.events import EventLog, EventSink
from aggregator.models.pool import Venue
from aggregator.pools.registry import PoolRegistry
from aggregator.routing.evaluator import RouteEvaluator
from aggregator.routing.executor import RouteExecutor
from aggregator.routing.pathfinding import PathFinder
from aggregator.routing.types import RouteQuote, SwapEvent, SwapMode, TradingDirection
from aggregator.safe_int import is_balance

logger = structlog.get_logger()


class DexAggregator:
    """Routes swaps through the best path across all registered venues.

    Args:
        registry: Pool registry over the venues to route through
        config: Routing configuration. Defaults to DEFAULT_CONFIG.
        event_sink: Receives SwapEvents. Defaults to an in-memory EventLog.
    """

    def __init__(
        self,
        registry: PoolRegistry,
        config: AggregatorConfig | None = None,
        event_sink: EventSink | None = None,
    ) -> None:
        self.registry = registry
        self.config = config if config is not None else DEFAULT_CONFIG
        self.event_sink: EventSink = event_sink if event_sink is not None else EventLog()
        self.evaluator = RouteEvaluator(registry)
        self.path_finder = PathFinder(
            registry,
            evaluator=self.evaluator,
            allow_repeated_pools=self.config.allow_repeated_pools,
        )
        self.executor = RouteExecutor(registry, evaluator=self.evaluator)

    # --- Quoting ---

    def quote(
        self,
        supply_token: str,
        target_token: str,
        amount: int,
        mode: SwapMode = SwapMode.EXACT_SUPPLY,
    ) -> RouteQuote:
        """Best route for a request without executing it.

        Raises:
            InvalidAmount: If the amount is outside the balance range
            InvalidCurrencyId: If the token pair is invalid
            NoPossibleTradingPath: If no route exists within the path limit
        """
        direction = self._direction(supply_token, target_token)
        return self._best_route(direction, amount, mode)

    # --- Swaps ---

    def swap_with_exact_supply(
        self,
        caller: str,
        supply_token: str,
        target_token: str,
        supply_amount: int,
        min_target_amount: int,
    ) -> SwapEvent:
        """Swap exactly ``supply_amount`` of the supply token.

        The quoted target amount must strictly exceed ``min_target_amount``.

        Raises:
            InvalidCurrencyId: If the token pair is invalid
            NoPossibleTradingPath: If no route exists within the path limit
            BelowMinimumTarget: If the best route does not beat the minimum
            InvalidAmount: If an amount is outside the balance range
            ExecutionFailed: If a hop failed during execution (state reverted)
        """
        _require_caller(caller)
        _require_balance("min_target_amount", min_target_amount)
        direction = self._direction(supply_token, target_token)
        route = self._best_route(direction, supply_amount, SwapMode.EXACT_SUPPLY)

        if route.amount <= min_target_amount:
            logger.warning(
                "below_minimum_target",
                caller=caller,
                direction=str(direction),
                quoted=route.amount,
                min_target_amount=min_target_amount,
            )
            raise BelowMinimumTarget(
                f"Best route yields {route.amount}, minimum is {min_target_amount}"
            )

        target_amount = self.executor.execute_exact_supply(
            caller, route.path, supply_amount, min_target_amount
        )
        return self._emit(caller, direction, supply_amount, target_amount, route)

    def swap_with_exact_target(
        self,
        caller: str,
        supply_token: str,
        target_token: str,
        target_amount: int,
        max_supply_amount: int,
    ) -> SwapEvent:
        """Swap for exactly ``target_amount`` of the target token.

        The quoted supply amount must be strictly below ``max_supply_amount``.

        Raises:
            InvalidCurrencyId: If the token pair is invalid
            NoPossibleTradingPath: If no route exists within the path limit
            AboveMaximumSupply: If the best route needs at least the maximum
            InvalidAmount: If an amount is outside the balance range
            ExecutionFailed: If a hop failed during execution (state reverted)
        """
        _require_caller(caller)
        _require_balance("max_supply_amount", max_supply_amount)
        direction = self._direction(supply_token, target_token)
        route = self._best_route(direction, target_amount, SwapMode.EXACT_TARGET)

        if route.amount >= max_supply_amount:
            logger.warning(
                "above_maximum_supply",
                caller=caller,
                direction=str(direction),
                quoted=route.amount,
                max_supply_amount=max_supply_amount,
            )
            raise AboveMaximumSupply(
                f"Best route needs {route.amount}, maximum is {max_supply_amount}"
            )

        supply_amount = self.executor.execute_exact_target(
            caller, route.path, target_amount, max_supply_amount
        )
        return self._emit(caller, direction, supply_amount, target_amount, route)

    # --- Internals ---

    def _direction(self, supply_token: str, target_token: str) -> TradingDirection:
        direction = TradingDirection.from_tokens(supply_token, target_token)
        known = self.registry.known_tokens()
        for token in (direction.source, direction.destination):
            if token not in known:
                logger.warning("unknown_token", token=token)
                raise InvalidCurrencyId(f"Unknown token: {token}")
        return direction

    def _best_route(self, direction: TradingDirection, amount: int, mode: SwapMode) -> RouteQuote:
        _require_balance("amount", amount)
        hop_limit = self.config.trading_path_limit
        route = self.path_finder.find_best_path(direction, amount, mode, hop_limit)
        if route is None:
            logger.warning(
                "no_trading_path",
                direction=str(direction),
                amount=amount,
                mode=mode.value,
                hop_limit=hop_limit,
            )
            raise NoPossibleTradingPath(
                f"No route from {direction.source} to {direction.destination} "
                f"within {hop_limit} tokens"
            )

        assert route.path, "path finder returned an empty path"
        assert len(route.path) < hop_limit, "path finder exceeded the trading path limit"
        assert route.path[0].supply_token == direction.source
        assert route.path[-1].target_token == direction.destination

        logger.debug(
            "route_found",
            direction=str(direction),
            mode=mode.value,
            tokens=route.tokens,
            amount=route.amount,
        )
        return route

    def _emit(
        self,
        caller: str,
        direction: TradingDirection,
        supply_amount: int,
        target_amount: int,
        route: RouteQuote,
    ) -> SwapEvent:
        event = SwapEvent(
            caller=caller,
            supply_token=direction.source,
            target_token=direction.destination,
            supply_amount=supply_amount,
            target_amount=target_amount,
        )
        self.event_sink.emit(event)
        logger.info(
            "swap_executed",
            caller=caller,
            supply_token=event.supply_token,
            target_token=event.target_token,
            supply_amount=supply_amount,
            target_amount=target_amount,
            hops=route.hop_count,
            mode=route.mode.value,
        )
        return event


def _require_caller(caller: str) -> None:
    if not isinstance(caller, str) or not caller:
        raise InvalidAmount(f"Caller must be a non-empty string, got {caller!r}")


def _require_balance(name: str, value: int) -> None:
    if not is_balance(value):
        raise InvalidAmount(f"{name} must be an integer in the balance range, got {value!r}")


_default_aggregator: DexAggregator | None = None


def _create_default_aggregator() -> DexAggregator:
    """Create the default aggregator over empty in-memory venues.

    Both venues start with no pools; an operator lists pools on
    ``aggregator.registry`` before routing. Routing options come from
    AggregatorConfig.from_env().
    """
    ledger = Ledger()
    registry = PoolRegistry(
        ledger,
        {
            Venue.DEX: ConstantProductDex(ledger),
            Venue.FIXED_RATE: FixedRateVenue(ledger),
        },
    )
    config = AggregatorConfig.from_env()
    logger.info(
        "aggregator_created",
        trading_path_limit=config.trading_path_limit,
        allow_repeated_pools=config.allow_repeated_pools,
    )
    return DexAggregator(registry, config)


def get_default_aggregator() -> DexAggregator:
    """Process-wide aggregator, created on first use."""
    global _default_aggregator
    if _default_aggregator is None:
        _default_aggregator = _create_default_aggregator()
    return _default_aggregator


__all__ = ["DexAggregator", "get_default_aggregator"]
