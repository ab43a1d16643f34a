"""Base classes for venue implementations."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Protocol, runtime_checkable

import structlog

from aggregator.amm.ledger import Ledger
from aggregator.errors import (
    ExcessiveSupplyAmount,
    InsufficientLiquidity,
    InsufficientTargetAmount,
)
from aggregator.models.pool import TokenPair

logger = structlog.get_logger()


@dataclass
class SwapResult:
    """Result of a swap executed against a venue."""

    pair: TokenPair
    amount_in: int
    amount_out: int


@runtime_checkable
class VenueAdapter(Protocol):
    """Pricing and execution contract every venue implements.

    Pairs are passed in the orientation of the trade: ``pair.first`` is
    supplied and ``pair.second`` received.
    """

    def listed_pairs(self) -> list[TokenPair]:
        """Every listed pair, tradable or not, in canonical orientation."""
        ...

    def active_pairs(self) -> list[TokenPair]:
        """Pairs currently open for trading, in canonical orientation."""
        ...

    def get_target_amount(self, pair: TokenPair, supply_amount: int) -> int | None:
        """Output for an exact input, or None if the pool cannot quote it."""
        ...

    def get_supply_amount(self, pair: TokenPair, target_amount: int) -> int | None:
        """Input required for an exact output, or None if unreachable."""
        ...

    def swap_with_exact_supply(
        self,
        caller: str,
        pair: TokenPair,
        supply_amount: int,
        min_target_amount: int,
    ) -> int:
        """Execute an exact-input swap and return the output amount."""
        ...

    def swap_with_exact_target(
        self,
        caller: str,
        pair: TokenPair,
        target_amount: int,
        max_supply_amount: int,
    ) -> int:
        """Execute an exact-output swap and return the input amount."""
        ...

    def snapshot(self) -> Any:
        """Capture the venue's mutable state."""
        ...

    def restore(self, snapshot: Any) -> None:
        """Put back state captured by ``snapshot``."""
        ...


class BaseVenue(ABC):
    """Shared swap execution for venues that settle through a Ledger.

    Subclasses provide pricing and reserve bookkeeping; this class enforces
    the caller's bound and moves balances.
    """

    name: str = "venue"

    def __init__(self, ledger: Ledger) -> None:
        self.ledger = ledger

    @abstractmethod
    def listed_pairs(self) -> list[TokenPair]: ...

    @abstractmethod
    def active_pairs(self) -> list[TokenPair]: ...

    @abstractmethod
    def get_target_amount(self, pair: TokenPair, supply_amount: int) -> int | None: ...

    @abstractmethod
    def get_supply_amount(self, pair: TokenPair, target_amount: int) -> int | None: ...

    @abstractmethod
    def _require_tradable(self, pair: TokenPair) -> None:
        """Raise PoolNotFound or PoolNotEnabled if the pair cannot trade."""
        ...

    @abstractmethod
    def _apply_swap(self, pair: TokenPair, amount_in: int, amount_out: int) -> None:
        """Move ``amount_in`` into and ``amount_out`` out of the pool."""
        ...

    @abstractmethod
    def snapshot(self) -> Any: ...

    @abstractmethod
    def restore(self, snapshot: Any) -> None: ...

    def swap_with_exact_supply(
        self,
        caller: str,
        pair: TokenPair,
        supply_amount: int,
        min_target_amount: int,
    ) -> int:
        """Swap exactly ``supply_amount`` of ``pair.first``.

        Raises:
            PoolNotFound, PoolNotEnabled: If the pair cannot trade
            InsufficientLiquidity: If the pool cannot price the input
            InsufficientTargetAmount: If the output is below the minimum
            InsufficientBalance: If the caller cannot pay
        """
        self._require_tradable(pair)
        target_amount = self.get_target_amount(pair, supply_amount)
        if target_amount is None:
            raise InsufficientLiquidity(f"{self.name} {pair}: cannot price supply {supply_amount}")
        if target_amount < min_target_amount:
            raise InsufficientTargetAmount(
                f"{self.name} {pair}: target {target_amount} below minimum {min_target_amount}"
            )
        self._settle(caller, SwapResult(pair, supply_amount, target_amount))
        return target_amount

    def swap_with_exact_target(
        self,
        caller: str,
        pair: TokenPair,
        target_amount: int,
        max_supply_amount: int,
    ) -> int:
        """Swap for exactly ``target_amount`` of ``pair.second``.

        Raises:
            PoolNotFound, PoolNotEnabled: If the pair cannot trade
            InsufficientLiquidity: If the pool cannot provide the output
            ExcessiveSupplyAmount: If the input is above the maximum
            InsufficientBalance: If the caller cannot pay
        """
        self._require_tradable(pair)
        supply_amount = self.get_supply_amount(pair, target_amount)
        if supply_amount is None:
            raise InsufficientLiquidity(f"{self.name} {pair}: cannot provide target {target_amount}")
        if supply_amount > max_supply_amount:
            raise ExcessiveSupplyAmount(
                f"{self.name} {pair}: supply {supply_amount} above maximum {max_supply_amount}"
            )
        self._settle(caller, SwapResult(pair, supply_amount, target_amount))
        return supply_amount

    def _settle(self, caller: str, result: SwapResult) -> None:
        self.ledger.withdraw(caller, result.pair.first, result.amount_in)
        self._apply_swap(result.pair, result.amount_in, result.amount_out)
        self.ledger.deposit(caller, result.pair.second, result.amount_out)
        logger.debug(
            "venue_swap",
            venue=self.name,
            caller=caller,
            pair=str(result.pair),
            amount_in=result.amount_in,
            amount_out=result.amount_out,
        )


__all__ = ["BaseVenue", "SwapResult", "VenueAdapter"]
