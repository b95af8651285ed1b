"""
Shared fixtures for unit tests.

This module provides common fixtures used across multiple test modules:
- Tier catalogs (default and custom)
- Commission splitters
- Status machine instance
"""

from decimal import Decimal

import pytest

from membership_engine import (
    CommissionRules,
    CommissionSplitter,
    ExpirationCalculator,
    MembershipStatusMachine,
    TierCatalog,
    TierDefinition,
)
from membership_engine.constants import DEFAULT_TIERS


@pytest.fixture
def catalog():
    """
    Catalog with the default tiers.

    Returns:
        TierCatalog: trial_weekly, annual and lifetime
    """
    return TierCatalog(DEFAULT_TIERS)


@pytest.fixture
def custom_catalog():
    """
    Catalog with a withdrawn tier and custom ordering.

    Returns:
        TierCatalog: monthly (active), legacy (inactive), founder (lifetime)
    """
    return TierCatalog(
        [
            TierDefinition(tier_id="founder", name="Founder", price_cents=99900,
                           duration_days=None, sort_order=5),
            TierDefinition(tier_id="monthly", name="Monthly", price_cents=2900,
                           duration_days=30, sort_order=1),
            TierDefinition(tier_id="legacy", name="Legacy", price_cents=1900,
                           duration_days=30, is_active=False, sort_order=0),
        ]
    )


@pytest.fixture
def expiration(catalog):
    """ExpirationCalculator over the default catalog."""
    return ExpirationCalculator(catalog)


@pytest.fixture
def splitter():
    """CommissionSplitter with the default rules (20% / 5% x 6, pool 50%)."""
    return CommissionSplitter()


@pytest.fixture
def two_level_splitter():
    """CommissionSplitter capped at two upline levels."""
    return CommissionSplitter(
        CommissionRules(
            sponsor_pct=Decimal("0.2"),
            upline_pct=Decimal("0.05"),
            max_upline_levels=2,
        )
    )


@pytest.fixture
def machine(catalog):
    """Status machine with a 7 day grace period."""
    return MembershipStatusMachine(catalog=catalog, deletion_days=7)
