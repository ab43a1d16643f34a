"""API endpoints for the DEX aggregator."""

import threading

import structlog
from fastapi import APIRouter, Depends

from aggregator.aggregator import DexAggregator, get_default_aggregator
from aggregator.models.api import (
    PoolInfo,
    QuoteRequest,
    QuoteResponse,
    SwapExactSupplyRequest,
    SwapExactTargetRequest,
    SwapResponse,
)

logger = structlog.get_logger()

router = APIRouter()

# Swaps mutate shared venue state and must run one at a time
_swap_lock = threading.Lock()


def get_aggregator() -> DexAggregator:
    """Dependency provider for the aggregator instance.

    Override this in tests to inject a prepared aggregator:
        app.dependency_overrides[get_aggregator] = lambda: aggregator

    Returns:
        The aggregator instance to route requests through.
    """
    return get_default_aggregator()


@router.get("/pools")
def list_pools(aggregator: DexAggregator = Depends(get_aggregator)) -> list[PoolInfo]:
    """List every pool currently open for trading."""
    return [PoolInfo.from_pool(pool) for pool in aggregator.registry.all_active_pools()]


@router.post("/quote")
def quote(
    request: QuoteRequest,
    aggregator: DexAggregator = Depends(get_aggregator),
) -> QuoteResponse:
    """Find the best route for a request without executing it.

    Error Handling:
        - Invalid request schema: Returns 422 Validation Error (Pydantic)
        - Unknown or identical tokens: Returns 400
        - No route within the trading path limit: Returns 404
    """
    logger.info(
        "received_quote",
        supply_token=request.supply_token,
        target_token=request.target_token,
        amount=request.amount,
        mode=request.mode.value,
    )
    with _swap_lock:
        route = aggregator.quote(
            request.supply_token,
            request.target_token,
            int(request.amount),
            request.mode,
        )
    return QuoteResponse.from_quote(route)


@router.post("/swap/exact-supply")
def swap_exact_supply(
    request: SwapExactSupplyRequest,
    aggregator: DexAggregator = Depends(get_aggregator),
) -> SwapResponse:
    """Swap an exact supply amount along the best route.

    Error Handling:
        - Best route does not beat minTargetAmount: Returns 409
        - A hop failed (state reverted): Returns 409
    """
    logger.info(
        "received_swap",
        mode="exactSupply",
        caller=request.caller,
        supply_token=request.supply_token,
        target_token=request.target_token,
    )
    with _swap_lock:
        event = aggregator.swap_with_exact_supply(
            request.caller,
            request.supply_token,
            request.target_token,
            int(request.supply_amount),
            int(request.min_target_amount),
        )
    return SwapResponse.from_event(event)


@router.post("/swap/exact-target")
def swap_exact_target(
    request: SwapExactTargetRequest,
    aggregator: DexAggregator = Depends(get_aggregator),
) -> SwapResponse:
    """Swap along the best route for an exact target amount.

    Error Handling:
        - Best route needs at least maxSupplyAmount: Returns 409
        - A hop failed (state reverted): Returns 409
    """
    logger.info(
        "received_swap",
        mode="exactTarget",
        caller=request.caller,
        supply_token=request.supply_token,
        target_token=request.target_token,
    )
    with _swap_lock:
        event = aggregator.swap_with_exact_target(
            request.caller,
            request.supply_token,
            request.target_token,
            int(request.target_amount),
            int(request.max_supply_amount),
        )
    return SwapResponse.from_event(event)
