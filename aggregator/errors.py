"""Aggregator error classes.

AggregatorError subclasses are the only failures the public entry points
raise. Each carries a stable ``code`` used by the HTTP layer.

VenueError subclasses are raised by the in-memory AMM venues. The route
executor never lets them escape: they surface as the ``__cause__`` of an
ExecutionFailed.
"""


class AggregatorError(Exception):
    """Base error for aggregator operations."""

    code = "aggregator_error"


class InvalidAmount(AggregatorError):
    """An amount is outside the balance range, or the caller is missing."""

    code = "invalid_amount"


class InvalidCurrencyId(AggregatorError):
    """Source and destination are the same token, or a token is unknown."""

    code = "invalid_currency_id"


class NoPossibleTradingPath(AggregatorError):
    """No path connects the tokens within the trading path limit."""

    code = "no_possible_trading_path"


class BelowMinimumTarget(AggregatorError):
    """Minimum target was higher than the best path's expected target."""

    code = "below_minimum_target"


class AboveMaximumSupply(AggregatorError):
    """Maximum supply was lower than the best path's required supply."""

    code = "above_maximum_supply"


class ExecutionFailed(AggregatorError):
    """A hop failed during execution; every state change was reverted."""

    code = "execution_failed"


class VenueError(Exception):
    """Base error for venue-side swap failures."""

    pass


class PoolNotFound(VenueError):
    """No pool is listed for the pair on this venue."""

    pass


class PoolNotEnabled(VenueError):
    """The pool is listed but not enabled for trading."""

    pass


class InsufficientLiquidity(VenueError):
    """Pool reserves cannot satisfy the requested amount."""

    pass


class InsufficientTargetAmount(VenueError):
    """Swap output is below the caller's minimum."""

    pass


class ExcessiveSupplyAmount(VenueError):
    """Swap input is above the caller's maximum."""

    pass


class InsufficientBalance(VenueError):
    """Account does not hold enough of the supply token."""

    pass
