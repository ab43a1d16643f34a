"""Pytest configuration and fixtures."""

import pytest

from aggregator.aggregator import DexAggregator
from aggregator.amm import ConstantProductDex, FixedRateVenue
from aggregator.config import AggregatorConfig
from aggregator.events import EventLog
from aggregator.models.pool import Venue
from aggregator.pools import PoolRegistry
from tests.helpers.constants import (
    ACA,
    ACA_AUSD_RESERVES,
    ALICE,
    AUSD,
    AUSD_DOT_RESERVES,
    DOT,
)
from tests.helpers.factories import make_registry


@pytest.fixture
def registry() -> PoolRegistry:
    """Registry with the reference route ACA-AUSD-DOT and ALICE funded in every token."""
    return make_registry(
        dex_pools=[
            (ACA, AUSD, *ACA_AUSD_RESERVES),
            (AUSD, DOT, *AUSD_DOT_RESERVES),
        ],
        funded=[(ALICE, ACA), (ALICE, AUSD), (ALICE, DOT)],
    )


@pytest.fixture
def dex(registry: PoolRegistry) -> ConstantProductDex:
    """The registry's constant-product venue."""
    venue = registry.get_venue(Venue.DEX)
    assert isinstance(venue, ConstantProductDex)
    return venue


@pytest.fixture
def fixed_rate(registry: PoolRegistry) -> FixedRateVenue:
    """The registry's fixed-rate venue (no pools listed)."""
    venue = registry.get_venue(Venue.FIXED_RATE)
    assert isinstance(venue, FixedRateVenue)
    return venue


@pytest.fixture
def events() -> EventLog:
    return EventLog()


@pytest.fixture
def aggregator(registry: PoolRegistry, events: EventLog) -> DexAggregator:
    """Aggregator over the reference route with the default path limit of 3."""
    return DexAggregator(registry, AggregatorConfig(), events)
