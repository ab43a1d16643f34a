"""Shared type definitions for aggregator models.

These types are used by the pool listing, the routing core and the API
request/response models.
"""

import re
from typing import Annotated, Any

from pydantic import BeforeValidator, Field

from aggregator.safe_int import BALANCE_MAX

_TOKEN_PATTERN = re.compile(r"^[A-Za-z0-9_.:\-]{1,64}$")


def validate_balance(value: Any) -> str:
    """Validate that a value is a balance decimal string.

    Args:
        value: Value to validate (string or int)

    Returns:
        Valid balance as decimal string

    Raises:
        ValueError: If value is not a non-negative integer within the balance width
    """
    if isinstance(value, bool):
        raise ValueError("Balance must be string or int, got bool")

    if isinstance(value, int):
        int_value = value
    elif isinstance(value, str):
        try:
            int_value = int(value)
        except ValueError as err:
            raise ValueError(f"Balance must be a decimal integer string: '{value}'") from err
    else:
        raise ValueError(f"Balance must be string or int, got {type(value).__name__}")

    if int_value < 0:
        raise ValueError(f"Balance cannot be negative: {value}")
    if int_value > BALANCE_MAX:
        raise ValueError(f"Balance overflow: {value} > 2^128-1")

    return str(int_value)


def normalize_token(token: str, *, validate: bool = False) -> str:
    """Normalize a token identifier to its canonical form.

    Token identifiers are opaque symbols; the only normalization applied is
    stripping whitespace and upper-casing, so "ausd" and "AUSD" name the
    same token.

    Raises:
        ValueError: If validate=True and the identifier is malformed
    """
    symbol = token.strip().upper()
    if validate and not is_valid_token(symbol):
        raise ValueError(f"Invalid token identifier: {token!r}")
    return symbol


def is_valid_token(token: str) -> bool:
    """Check if a string is a well-formed token identifier."""
    if not isinstance(token, str):
        return False
    return bool(_TOKEN_PATTERN.match(token))


def _validate_token(value: Any) -> str:
    if not isinstance(value, str):
        raise ValueError(f"Token must be a string, got {type(value).__name__}")
    return normalize_token(value, validate=True)


# Balance as decimal string (validated to the 128-bit ledger width)
Balance = Annotated[
    str,
    BeforeValidator(validate_balance),
    Field(description="128-bit unsigned integer as decimal string"),
]

# Token identifier, normalized on input
Token = Annotated[
    str,
    BeforeValidator(_validate_token),
    Field(description="Token identifier (upper-case symbol)"),
]

# Account identifier of the trader
AccountId = Annotated[str, Field(min_length=1, max_length=128)]
