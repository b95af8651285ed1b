"""
Core membership engine functionality.

Contains the tier catalog, expiration calculator, commission splitter,
status machine and their data models.
"""

from membership_engine.core.catalog import DEFAULT_CATALOG, TierCatalog, lookup_tier
from membership_engine.core.commission import CommissionSplitter, split_commission
from membership_engine.core.expiration import ExpirationCalculator, compute_expiration
from membership_engine.core.models import (
    ActiveState,
    CommissionRules,
    CommissionSplit,
    DeletedState,
    InactiveState,
    MembershipRecord,
    MembershipState,
    MembershipStatus,
    StatusDecision,
    TierDefinition,
    TimeRemaining,
    UplinePayout,
)
from membership_engine.core.status import (
    MembershipStatusMachine,
    SweepResult,
    activate,
    apply_status,
    deletion_deadline,
    evaluate_status,
    is_at_risk,
    sweep,
    time_remaining,
)

__all__ = [
    "TierCatalog",
    "DEFAULT_CATALOG",
    "lookup_tier",
    "ExpirationCalculator",
    "compute_expiration",
    "CommissionSplitter",
    "split_commission",
    "MembershipStatusMachine",
    "SweepResult",
    "evaluate_status",
    "apply_status",
    "activate",
    "is_at_risk",
    "sweep",
    "deletion_deadline",
    "time_remaining",
    "TierDefinition",
    "CommissionRules",
    "CommissionSplit",
    "UplinePayout",
    "MembershipStatus",
    "MembershipRecord",
    "MembershipState",
    "ActiveState",
    "InactiveState",
    "DeletedState",
    "TimeRemaining",
    "StatusDecision",
]
