"""Data models for the aggregator.

Pool identity types used by the routing core and pydantic models for the
HTTP API.
"""

from aggregator.models.pool import AvailablePool, TokenPair, Venue
from aggregator.models.types import (
    Balance,
    Token,
    is_valid_token,
    normalize_token,
    validate_balance,
)

__all__ = [
    "AvailablePool",
    "TokenPair",
    "Venue",
    "Balance",
    "Token",
    "is_valid_token",
    "normalize_token",
    "validate_balance",
]
