"""Test helpers module for shared test utilities.

This module consolidates common test utilities to reduce duplication:
- constants: Token symbols, accounts and reference route amounts
- factories: Pool and registry factory functions
"""

from tests.helpers.constants import (
    ACA,
    ALICE,
    AUSD,
    BOB,
    DOT,
    INITIAL_BALANCE,
    LDOT,
    RENBTC,
)
from tests.helpers.factories import make_pool, make_registry, registry_state

__all__ = [
    # Constants
    "ACA",
    "AUSD",
    "DOT",
    "LDOT",
    "RENBTC",
    "ALICE",
    "BOB",
    "INITIAL_BALANCE",
    # Factories
    "make_pool",
    "make_registry",
    "registry_state",
]
