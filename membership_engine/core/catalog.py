"""
Tier catalog.

Read-only registry of membership tiers, built once at startup and passed
by reference to the calculators that need it.
"""

from collections.abc import Iterable, Iterator
from types import MappingProxyType

from loguru import logger

from membership_engine.constants import DEFAULT_TIERS
from membership_engine.core.models import TierDefinition
from membership_engine.exceptions import (
    InactiveTierError,
    InvalidArgumentError,
    UnknownTierError,
)


class TierCatalog:
    """
    Immutable mapping of tier id to TierDefinition.

    Example:
        >>> catalog = TierCatalog(DEFAULT_TIERS)
        >>> catalog.lookup("annual").duration_days
        365
        >>> "gold" in catalog
        False
    """

    def __init__(self, tiers: Iterable[TierDefinition]) -> None:
        """
        Initialize catalog.

        Args:
            tiers: Tier definitions, ids must be unique

        Raises:
            InvalidArgumentError: If a tier id appears twice
        """
        registry: dict[str, TierDefinition] = {}
        for tier in tiers:
            if tier.tier_id in registry:
                raise InvalidArgumentError(f"Duplicate tier id: {tier.tier_id!r}")
            registry[tier.tier_id] = tier
        self._tiers = MappingProxyType(registry)

    def __contains__(self, tier_id: object) -> bool:
        return tier_id in self._tiers

    def __iter__(self) -> Iterator[str]:
        return iter(self._tiers)

    def __len__(self) -> int:
        return len(self._tiers)

    def __repr__(self) -> str:
        return f"TierCatalog({list(self._tiers)!r})"

    def lookup(self, tier_id: str) -> TierDefinition:
        """
        Resolve a tier by id.

        Args:
            tier_id: Tier identifier

        Returns:
            The complete tier definition

        Raises:
            UnknownTierError: If the tier is not in the catalog
        """
        tier = self._tiers.get(tier_id)
        if tier is None:
            logger.debug("Unknown tier lookup", extra={"tier_id": tier_id})
            raise UnknownTierError(tier_id)
        return tier

    def get(self, tier_id: str) -> TierDefinition | None:
        """Resolve a tier, returning None when it is unknown."""
        return self._tiers.get(tier_id)

    def require_active(self, tier_id: str) -> TierDefinition:
        """
        Resolve a tier that is currently on sale.

        Raises:
            UnknownTierError: If the tier is not in the catalog
            InactiveTierError: If the tier is withdrawn from sale
        """
        tier = self.lookup(tier_id)
        if not tier.is_active:
            raise InactiveTierError(tier_id)
        return tier

    def list_tiers(self, include_inactive: bool = False) -> list[TierDefinition]:
        """
        List tiers ordered for display.

        Args:
            include_inactive: Also return tiers withdrawn from sale

        Returns:
            Tiers sorted by sort_order, then display name
        """
        tiers = [
            tier for tier in self._tiers.values()
            if include_inactive or tier.is_active
        ]
        return sorted(tiers, key=lambda t: (t.sort_order, t.display_name))


DEFAULT_CATALOG = TierCatalog(DEFAULT_TIERS)


def lookup_tier(tier_id: str, catalog: TierCatalog | None = None) -> TierDefinition:
    """Look up a tier in the given catalog, or in the default one."""
    if catalog is None:
        catalog = DEFAULT_CATALOG
    return catalog.lookup(tier_id)
