"""
Integration tests for the membership lifecycle.

Walks records through payment, expiry, grace period, renewal and deletion
the way a payment processor plus a scheduled sweep would drive the engine.
"""

from datetime import UTC, datetime, timedelta

import pytest

from membership_engine import (
    CommissionSplitter,
    MembershipStatus,
    MembershipStatusMachine,
    TerminalStateError,
    lookup_tier,
)


def utc(*args) -> datetime:
    return datetime(*args, tzinfo=UTC)


@pytest.fixture
def machine():
    """Status machine over the default tiers with a 7 day grace period."""
    return MembershipStatusMachine()


@pytest.fixture
def splitter():
    """Default commission rules."""
    return CommissionSplitter()


class TestPaymentFlow:
    """Payment confirmed -> membership activated -> commissions paid."""

    def test_annual_purchase_with_full_upline(self, machine, splitter, new_year):
        """Activation and commissions for one annual payment."""
        tier = lookup_tier("annual")
        record = machine.activate(None, tier.tier_id, new_year, member_id="payer")

        payouts = splitter.distribute(
            tier.price_cents, "sponsor", ["l2", "l3", "l4", "l5", "l6", "l7", "l8"]
        )
        pool = splitter.split(tier.price_cents).total_pool_cents

        assert record.status is MembershipStatus.ACTIVE
        assert record.expires_at == utc(2024, 12, 31)
        assert [p.level for p in payouts] == [1, 2, 3, 4, 5, 6, 7]
        assert "l8" not in {p.member_id for p in payouts}
        assert sum(p.amount_cents for p in payouts) == pool == 14950

    def test_short_upline_leaves_money_with_platform(self, splitter):
        """Levels that do not exist are not redistributed."""
        payouts = splitter.distribute(10000, "sponsor", ["l2"])
        assert sum(p.amount_cents for p in payouts) == 2500


class TestLifecycle:
    """Full active -> inactive -> active -> inactive -> deleted path."""

    def test_full_lifecycle(self, machine, new_year):
        """Sweeps drive the record through every state."""
        record = machine.activate(None, "trial_weekly", new_year, member_id="m-1")
        records = {"m-1": record}

        # Still active on the last day
        result = machine.sweep(records, utc(2024, 1, 8))
        assert result.updated == {}

        # Expired: inactive with a countdown
        result = machine.sweep(records, utc(2024, 1, 9))
        records.update(result.updated)
        assert records["m-1"].status is MembershipStatus.INACTIVE
        decision = machine.evaluate(records["m-1"], utc(2024, 1, 13))
        assert decision.time_remaining.days == 2
        assert machine.is_at_risk(records["m-1"], utc(2024, 1, 13))

        # Renewed inside grace
        renewed_at = utc(2024, 1, 13)
        records["m-1"] = machine.activate(records["m-1"], "trial_weekly", renewed_at)
        assert records["m-1"].status is MembershipStatus.ACTIVE
        assert records["m-1"].expires_at == renewed_at + timedelta(days=7)

        # Lapses again and is swept past the deadline
        result = machine.sweep(records, utc(2024, 1, 21))
        records.update(result.updated)
        assert records["m-1"].status is MembershipStatus.INACTIVE

        result = machine.sweep(records, utc(2024, 1, 28))
        records.update(result.updated)
        assert records["m-1"].status is MembershipStatus.DELETED
        assert result.deleted_count == 1

        # Deleted is terminal
        with pytest.raises(TerminalStateError):
            machine.activate(records["m-1"], "annual", utc(2024, 2, 1))

        # Later sweeps skip it
        assert machine.sweep(records, utc(2024, 3, 1)).evaluated_count == 0

    def test_lazy_evaluation_matches_sweeps(self, machine, new_year):
        """Evaluating without sweeping gives the same status as sweeping."""
        record = machine.activate(None, "trial_weekly", new_year)
        for day in range(1, 20):
            now = new_year + timedelta(days=day, hours=6)
            lazy = machine.evaluate(record, now).status
            swept = machine.apply(machine.apply(record, now - timedelta(hours=12)), now).status
            assert lazy is swept

    def test_lifetime_survives_sweeps(self, machine, new_year):
        """Lifetime members are never expired by a sweep."""
        record = machine.activate(None, "lifetime", new_year, member_id="vip")
        for year in range(2024, 2040, 3):
            result = machine.sweep({"vip": record}, utc(year, 6, 1))
            assert result.updated == {}
