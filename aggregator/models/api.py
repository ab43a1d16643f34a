"""Pydantic models for the HTTP API request and response bodies.

Amounts travel as decimal strings validated to the ledger's 128-bit width;
tokens are normalized on input.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

from aggregator.models.pool import AvailablePool, Venue
from aggregator.models.types import AccountId, Balance, Token
from aggregator.routing.types import RouteQuote, SwapEvent, SwapMode


class PoolInfo(BaseModel):
    """A pool open for trading, in canonical orientation."""

    venue: Venue
    first: Token
    second: Token

    @classmethod
    def from_pool(cls, pool: AvailablePool) -> PoolInfo:
        return cls(venue=pool.venue, first=pool.pair.first, second=pool.pair.second)


class HopInfo(BaseModel):
    """One hop of a quoted route."""

    venue: Venue
    supply_token: Token = Field(alias="supplyToken")
    target_token: Token = Field(alias="targetToken")

    model_config = {"populate_by_name": True}

    @classmethod
    def from_pool(cls, pool: AvailablePool) -> HopInfo:
        return cls(venue=pool.venue, supply_token=pool.supply_token, target_token=pool.target_token)


class QuoteRequest(BaseModel):
    """Request for the best route without executing it.

    ``amount`` is the supply amount for exactSupply and the target amount
    for exactTarget.
    """

    supply_token: Token = Field(alias="supplyToken")
    target_token: Token = Field(alias="targetToken")
    amount: Balance
    mode: SwapMode = SwapMode.EXACT_SUPPLY

    model_config = {"populate_by_name": True}


class QuoteResponse(BaseModel):
    """Best route found and the amount on its free end."""

    mode: SwapMode
    amount: Balance = Field(
        description="Target amount for exactSupply, required supply amount for exactTarget"
    )
    tokens: list[Token]
    hops: list[HopInfo]

    @classmethod
    def from_quote(cls, quote: RouteQuote) -> QuoteResponse:
        return cls(
            mode=quote.mode,
            amount=quote.amount,
            tokens=quote.tokens,
            hops=[HopInfo.from_pool(hop) for hop in quote.path],
        )


class SwapExactSupplyRequest(BaseModel):
    """Swap an exact supply amount for at least a minimum target amount."""

    caller: AccountId
    supply_token: Token = Field(alias="supplyToken")
    target_token: Token = Field(alias="targetToken")
    supply_amount: Balance = Field(alias="supplyAmount")
    min_target_amount: Balance = Field(alias="minTargetAmount")

    model_config = {"populate_by_name": True}


class SwapExactTargetRequest(BaseModel):
    """Swap for an exact target amount spending at most a maximum supply."""

    caller: AccountId
    supply_token: Token = Field(alias="supplyToken")
    target_token: Token = Field(alias="targetToken")
    target_amount: Balance = Field(alias="targetAmount")
    max_supply_amount: Balance = Field(alias="maxSupplyAmount")

    model_config = {"populate_by_name": True}


class SwapResponse(BaseModel):
    """The swap event of an executed swap."""

    caller: AccountId
    supply_token: Token = Field(alias="supplyToken")
    target_token: Token = Field(alias="targetToken")
    supply_amount: Balance = Field(alias="supplyAmount")
    target_amount: Balance = Field(alias="targetAmount")

    model_config = {"populate_by_name": True}

    @classmethod
    def from_event(cls, event: SwapEvent) -> SwapResponse:
        return cls(
            caller=event.caller,
            supply_token=event.supply_token,
            target_token=event.target_token,
            supply_amount=event.supply_amount,
            target_amount=event.target_amount,
        )


class ErrorResponse(BaseModel):
    """Body of every rejected request."""

    error: str = Field(description="Stable error code")
    detail: str


__all__ = [
    "ErrorResponse",
    "HopInfo",
    "PoolInfo",
    "QuoteRequest",
    "QuoteResponse",
    "SwapExactSupplyRequest",
    "SwapExactTargetRequest",
    "SwapResponse",
]
