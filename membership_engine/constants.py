"""
Default constants for the membership engine.

Contains the default tier table and commission rules. Both are loaded once
at startup and never mutated; override them by building a TierCatalog or
CommissionRules of your own.
"""

from decimal import Decimal

from membership_engine.core.models import CommissionRules, TierDefinition


# Grace window between becoming inactive and permanent deletion
MEMBERSHIP_DELETION_DAYS = 7

# Share of every payment that forms the referral commission pool
POOL_FRACTION = Decimal("0.5")

MS_PER_SECOND = 1000
MS_PER_MINUTE = 60 * MS_PER_SECOND
MS_PER_HOUR = 60 * MS_PER_MINUTE
MS_PER_DAY = 24 * MS_PER_HOUR


DEFAULT_TIERS: tuple[TierDefinition, ...] = (
    TierDefinition(
        tier_id="trial_weekly",
        name="Weekly Trial",
        price_cents=900,
        duration_days=7,
        sort_order=0,
    ),
    TierDefinition(
        tier_id="annual",
        name="Annual",
        price_cents=29900,
        duration_days=365,
        sort_order=1,
    ),
    TierDefinition(
        tier_id="lifetime",
        name="Lifetime",
        price_cents=49900,
        duration_days=None,  # never expires
        sort_order=2,
    ),
)


DEFAULT_COMMISSION_RULES = CommissionRules(
    sponsor_level=1,
    sponsor_pct=Decimal("0.2"),
    upline_pct=Decimal("0.05"),
    max_upline_levels=6,
    pool_fraction=POOL_FRACTION,
)
