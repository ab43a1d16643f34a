"""Tests for the constant-product DEX venue."""

import pytest

from aggregator.amm import ConstantProductDex, Ledger, PoolStatus, VenueAdapter
from aggregator.errors import (
    ExcessiveSupplyAmount,
    InsufficientBalance,
    InsufficientTargetAmount,
    PoolNotEnabled,
    PoolNotFound,
)
from aggregator.models.pool import TokenPair
from aggregator.safe_int import BALANCE_MAX
from tests.helpers import ACA, ALICE, AUSD, BOB, DOT, INITIAL_BALANCE, LDOT

ACA_AUSD = TokenPair(ACA, AUSD)
AUSD_DOT = TokenPair(AUSD, DOT)


class TestConstantProductFormula:
    """Tests for get_amount_out / get_amount_in."""

    def test_amount_out(self):
        """1,000 in against 1,000,000 / 2,000,000 at 1% fee gives 1,978."""
        dex = ConstantProductDex(Ledger())
        assert dex.get_amount_out(1_000, 1_000_000, 2_000_000) == 1_978

    def test_amount_in(self):
        """1,000 out of 1,000,000 / 2,000,000 at 1% fee needs 506."""
        dex = ConstantProductDex(Ledger())
        assert dex.get_amount_in(1_000, 1_000_000, 2_000_000) == 506

    def test_amount_in_covers_amount_out(self):
        """The inverse formula rounds so its input buys at least the output."""
        dex = ConstantProductDex(Ledger())
        for target in (1, 17, 1_000, 99_999):
            supply = dex.get_amount_in(target, 1_000_000, 2_000_000)
            assert dex.get_amount_out(supply, 1_000_000, 2_000_000) >= target

    def test_zero_fee(self):
        """With no fee the formula reduces to x * y = k."""
        dex = ConstantProductDex(Ledger(), exchange_fee=(0, 1))
        assert dex.get_amount_out(1_000, 1_000_000, 1_000_000) == 999

    def test_empty_inputs_return_zero(self):
        dex = ConstantProductDex(Ledger())
        assert dex.get_amount_out(0, 1_000, 1_000) == 0
        assert dex.get_amount_out(10, 0, 1_000) == 0
        assert dex.get_amount_in(10, 1_000, 0) == 0

    def test_cannot_drain_reserve(self):
        """Asking for the whole output reserve is unreachable."""
        dex = ConstantProductDex(Ledger())
        assert dex.get_amount_in(2_000_000, 1_000_000, 2_000_000) == 0
        assert dex.get_amount_in(3_000_000, 1_000_000, 2_000_000) == 0

    @pytest.mark.parametrize("fee", [(100, 100), (101, 100), (1, 0), (-1, 100)])
    def test_invalid_fee_rejected(self, fee):
        with pytest.raises(ValueError):
            ConstantProductDex(Ledger(), exchange_fee=fee)


class TestPricing:
    """Tests for pair-level pricing."""

    def test_is_venue_adapter(self, dex):
        assert isinstance(dex, VenueAdapter)

    def test_target_amount_canonical_orientation(self, dex):
        assert dex.get_target_amount(ACA_AUSD, 1_000) == 1_978

    def test_target_amount_flipped_orientation(self, dex):
        """The flipped orientation trades against swapped reserves."""
        assert dex.get_target_amount(ACA_AUSD.swap(), 1_000) == 494

    def test_supply_amount(self, dex):
        assert dex.get_supply_amount(AUSD_DOT, 1_000) == 506

    def test_unlisted_pair_is_unpriceable(self, dex):
        assert dex.get_target_amount(TokenPair(ACA, DOT), 1_000) is None
        assert dex.get_supply_amount(TokenPair(ACA, DOT), 1_000) is None
        assert dex.get_reserves(TokenPair(ACA, DOT)) == (0, 0)

    def test_zero_output_is_unpriceable(self, dex):
        """An input too small to produce any output cannot be quoted."""
        assert dex.get_target_amount(ACA_AUSD.swap(), 1) is None

    def test_overflow_is_unpriceable(self, dex):
        """A required supply past the balance width is treated as unreachable."""
        dex.list_pool(TokenPair(ACA, LDOT), BALANCE_MAX, 2)
        assert dex.get_supply_amount(TokenPair(ACA, LDOT), 1) is None

    def test_disabled_pool(self, dex):
        """A disabled pool is neither listed as active nor priced."""
        dex.disable_pool(ACA_AUSD)
        assert ACA_AUSD not in dex.active_pairs()
        assert ACA_AUSD in dex.listed_pairs()
        assert dex.get_target_amount(ACA_AUSD, 1_000) is None

        dex.enable_pool(ACA_AUSD)
        assert ACA_AUSD in dex.active_pairs()

    def test_empty_reserves_not_active(self, dex):
        dex.list_pool(TokenPair(DOT, LDOT), 0, 1_000)
        assert TokenPair(DOT, LDOT) not in dex.active_pairs()

    def test_list_pool_rejects_non_balances(self, dex):
        with pytest.raises(ValueError):
            dex.list_pool(TokenPair(DOT, LDOT), -1, 1_000)
        with pytest.raises(ValueError):
            dex.list_pool(TokenPair(DOT, LDOT), 1_000, BALANCE_MAX + 1)

    def test_list_pool_replaces_existing(self, dex):
        """Listing either orientation of a pair replaces the pool."""
        dex.list_pool(ACA_AUSD.swap(), 5_000, 7_000)
        assert dex.get_reserves(ACA_AUSD) == (7_000, 5_000)
        assert len(dex.active_pairs()) == 2


class TestSwaps:
    """Tests for executed swaps."""

    def test_exact_supply_moves_balances_and_reserves(self, dex):
        ledger = dex.ledger
        target = dex.swap_with_exact_supply(ALICE, ACA_AUSD, 1_000, 0)

        assert target == 1_978
        assert ledger.balance(ALICE, ACA) == INITIAL_BALANCE - 1_000
        assert ledger.balance(ALICE, AUSD) == INITIAL_BALANCE + 1_978
        assert dex.get_reserves(ACA_AUSD) == (1_001_000, 1_998_022)

    def test_exact_supply_flipped_updates_right_reserves(self, dex):
        dex.swap_with_exact_supply(ALICE, ACA_AUSD.swap(), 1_000, 0)
        assert dex.get_reserves(ACA_AUSD) == (1_000_000 - 494, 2_001_000)

    def test_exact_target_moves_balances_and_reserves(self, dex):
        ledger = dex.ledger
        supply = dex.swap_with_exact_target(ALICE, AUSD_DOT, 1_000, 1_000)

        assert supply == 506
        assert ledger.balance(ALICE, AUSD) == INITIAL_BALANCE - 506
        assert ledger.balance(ALICE, DOT) == INITIAL_BALANCE + 1_000
        assert dex.get_reserves(AUSD_DOT) == (1_000_506, 1_999_000)

    def test_exact_supply_below_minimum(self, dex):
        """The bound is checked before any state changes."""
        with pytest.raises(InsufficientTargetAmount):
            dex.swap_with_exact_supply(ALICE, ACA_AUSD, 1_000, 1_979)
        assert dex.get_reserves(ACA_AUSD) == (1_000_000, 2_000_000)
        assert dex.ledger.balance(ALICE, ACA) == INITIAL_BALANCE

    def test_exact_supply_at_minimum_succeeds(self, dex):
        """The venue's own bound is inclusive."""
        assert dex.swap_with_exact_supply(ALICE, ACA_AUSD, 1_000, 1_978) == 1_978

    def test_exact_target_above_maximum(self, dex):
        with pytest.raises(ExcessiveSupplyAmount):
            dex.swap_with_exact_target(ALICE, AUSD_DOT, 1_000, 505)
        assert dex.get_reserves(AUSD_DOT) == (1_000_000, 2_000_000)

    def test_insufficient_balance(self, dex):
        """An unfunded caller cannot pay; reserves are untouched."""
        with pytest.raises(InsufficientBalance):
            dex.swap_with_exact_supply(BOB, ACA_AUSD, 1_000, 0)
        assert dex.get_reserves(ACA_AUSD) == (1_000_000, 2_000_000)

    def test_unlisted_pool(self, dex):
        with pytest.raises(PoolNotFound):
            dex.swap_with_exact_supply(ALICE, TokenPair(ACA, DOT), 1_000, 0)

    def test_disabled_pool(self, dex):
        dex.disable_pool(ACA_AUSD)
        with pytest.raises(PoolNotEnabled):
            dex.swap_with_exact_supply(ALICE, ACA_AUSD, 1_000, 0)


class TestSnapshot:
    """Tests for snapshot / restore."""

    def test_restore_puts_back_reserves_and_status(self, dex):
        snapshot = dex.snapshot()
        dex.swap_with_exact_supply(ALICE, ACA_AUSD, 1_000, 0)
        dex.disable_pool(AUSD_DOT)

        dex.restore(snapshot)

        assert dex.get_reserves(ACA_AUSD) == (1_000_000, 2_000_000)
        pool = dex.get_pool(AUSD_DOT)
        assert pool is not None
        assert pool.status is PoolStatus.ENABLED

    def test_snapshot_is_a_copy(self, dex):
        """Swaps after a snapshot do not leak into it."""
        snapshot = dex.snapshot()
        dex.swap_with_exact_supply(ALICE, ACA_AUSD, 1_000, 0)
        assert snapshot[ACA_AUSD.key].reserve_first == 1_000_000
