"""
Expiration calculator.

Derives a membership expiration instant from a tier and an activation
instant. Pure logic without any database or clock access.
"""

from datetime import datetime

from membership_engine.core.catalog import DEFAULT_CATALOG, TierCatalog
from membership_engine.core.models import MembershipRecord, MembershipStatus
from membership_engine.utils.datetime_utils import add_utc_days, to_utc


class ExpirationCalculator:
    """
    Calculator for plan expiration dates.

    Durations are added as whole UTC days so daylight-saving transitions
    in any local timezone never move the result.
    """

    def __init__(self, catalog: TierCatalog | None = None) -> None:
        """
        Initialize expiration calculator.

        Args:
            catalog: Tier catalog, defaults to the built-in tiers
        """
        self.catalog = catalog if catalog is not None else DEFAULT_CATALOG

    def compute_expiration(
        self,
        tier_id: str,
        activated_at: datetime,
    ) -> datetime | None:
        """
        Compute when a plan activated at ``activated_at`` expires.

        Formula: activated_at + duration_days (UTC calendar days)

        Args:
            tier_id: Tier identifier
            activated_at: Activation instant, naive values are read as UTC

        Returns:
            Expiration instant in UTC, or None for unbounded tiers

        Raises:
            UnknownTierError: If the tier is not in the catalog
            InvalidArgumentError: If activated_at is missing

        Example:
            >>> from datetime import UTC
            >>> calc = ExpirationCalculator()
            >>> calc.compute_expiration("trial_weekly", datetime(2024, 3, 1, tzinfo=UTC))
            datetime.datetime(2024, 3, 8, 0, 0, tzinfo=datetime.timezone.utc)
            >>> calc.compute_expiration("lifetime", datetime(2024, 3, 1, tzinfo=UTC)) is None
            True
        """
        tier = self.catalog.lookup(tier_id)
        activated_at = to_utc(activated_at, "activated_at")

        if tier.is_unbounded:
            return None

        return add_utc_days(activated_at, tier.duration_days)

    def compute_renewal_expiration(
        self,
        tier_id: str,
        now: datetime,
        current: MembershipRecord | None = None,
    ) -> datetime | None:
        """
        Compute expiration for a renewal payment.

        An early renewal of a still-active bounded plan extends from the
        current expiry so paid days are not lost; anything else starts
        from ``now``.

        Args:
            tier_id: Tier being purchased
            now: Payment confirmation instant
            current: Existing membership record, if any

        Returns:
            New expiration instant, or None for unbounded tiers
        """
        now = to_utc(now, "now")
        base = now
        if (
            current is not None
            and current.status is MembershipStatus.ACTIVE
            and current.expires_at is not None
            and current.expires_at > now
        ):
            base = current.expires_at
        return self.compute_expiration(tier_id, base)


def compute_expiration(
    tier_id: str,
    activated_at: datetime,
    catalog: TierCatalog | None = None,
) -> datetime | None:
    """Compute an expiration instant using the given or default catalog."""
    return ExpirationCalculator(catalog).compute_expiration(tier_id, activated_at)
