"""Integration tests routing across the DEX and the fixed-rate venue."""

import pytest

from aggregator.aggregator import DexAggregator
from aggregator.errors import BelowMinimumTarget
from aggregator.events import EventLog
from aggregator.models.pool import TokenPair, Venue
from tests.helpers import ACA, ALICE, AUSD, DOT, INITIAL_BALANCE, LDOT, make_pool, make_registry, registry_state
from tests.helpers.constants import ACA_AUSD_RESERVES, AUSD_DOT_RESERVES


@pytest.fixture
def registry():
    """Reference DEX route plus fixed-rate pools ACA-LDOT (4 per ACA) and LDOT-DOT (1:1)."""
    return make_registry(
        dex_pools=[
            (ACA, AUSD, *ACA_AUSD_RESERVES),
            (AUSD, DOT, *AUSD_DOT_RESERVES),
        ],
        fixed_rate_pools=[
            (ACA, LDOT, (4, 1), 0, 10_000),
            (LDOT, DOT, (1, 1), 0, 3_000),
        ],
        funded=[(ALICE, ACA)],
    )


class TestMixedVenues:
    """Routes may mix venues hop by hop."""

    def test_fixed_rate_route_wins_within_inventory(self, registry):
        """1,000 ACA -> 4,000 LDOT -> capped by 3,000 DOT inventory, so the DEX route wins."""
        aggregator = DexAggregator(registry)
        quote = aggregator.quote(ACA, DOT, 1_000)
        assert quote.path == (make_pool(ACA, AUSD), make_pool(AUSD, DOT))

    def test_small_swap_through_fixed_rate(self, registry):
        """500 ACA buys 2,000 DOT at fixed rates, beating the DEX route's 1,956."""
        events = EventLog()
        aggregator = DexAggregator(registry, event_sink=events)

        quote = aggregator.quote(ACA, DOT, 500)
        assert quote.path == (
            make_pool(ACA, LDOT, Venue.FIXED_RATE),
            make_pool(LDOT, DOT, Venue.FIXED_RATE),
        )
        assert quote.amount == 2_000

        event = aggregator.swap_with_exact_supply(ALICE, ACA, DOT, 500, 1_999)

        assert event.target_amount == 2_000
        assert registry.ledger.balance(ALICE, ACA) == INITIAL_BALANCE - 500
        assert registry.ledger.balance(ALICE, LDOT) == 0
        assert registry.ledger.balance(ALICE, DOT) == 2_000
        fixed_rate = registry.get_venue(Venue.FIXED_RATE)
        assert fixed_rate.get_pool(TokenPair(LDOT, DOT)).inventory_second == 1_000
        assert len(events) == 1

    def test_drained_inventory_falls_back_to_dex(self, registry):
        aggregator = DexAggregator(registry)
        aggregator.swap_with_exact_supply(ALICE, ACA, DOT, 500, 0)
        aggregator.swap_with_exact_supply(ALICE, ACA, DOT, 250, 0)

        quote = aggregator.quote(ACA, DOT, 500)
        assert quote.path[0].venue is Venue.DEX

    def test_rejection_leaves_both_venues_untouched(self, registry):
        before = registry_state(registry)
        with pytest.raises(BelowMinimumTarget):
            DexAggregator(registry).swap_with_exact_supply(ALICE, ACA, DOT, 500, 2_000)
        assert registry_state(registry) == before
