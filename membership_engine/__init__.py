"""
Membership lifecycle and commission distribution engine.

Standalone package with no storage or network dependencies: it takes tier
ids, cent amounts and timestamps, and returns dates, cent splits and status
decisions for the caller to persist.

Example:
    >>> from datetime import UTC, datetime
    >>> from membership_engine import compute_expiration, split_commission
    >>>
    >>> compute_expiration("trial_weekly", datetime(2024, 3, 1, tzinfo=UTC))
    datetime.datetime(2024, 3, 8, 0, 0, tzinfo=datetime.timezone.utc)
    >>> split_commission(10000, 3).sponsor_amount_cents
    2000
"""

from membership_engine.core import (
    DEFAULT_CATALOG,
    CommissionRules,
    CommissionSplit,
    CommissionSplitter,
    ExpirationCalculator,
    MembershipRecord,
    MembershipStatus,
    MembershipStatusMachine,
    StatusDecision,
    SweepResult,
    TierCatalog,
    TierDefinition,
    TimeRemaining,
    UplinePayout,
    activate,
    apply_status,
    compute_expiration,
    evaluate_status,
    is_at_risk,
    lookup_tier,
    split_commission,
    sweep,
)
from membership_engine.constants import (
    DEFAULT_COMMISSION_RULES,
    DEFAULT_TIERS,
    MEMBERSHIP_DELETION_DAYS,
)
from membership_engine.exceptions import (
    CorruptStateError,
    InactiveTierError,
    InvalidArgumentError,
    MembershipEngineError,
    TerminalStateError,
    UnknownTierError,
)


__version__ = "1.0.0"
__all__ = [
    # Operations
    "lookup_tier",
    "compute_expiration",
    "split_commission",
    "evaluate_status",
    "apply_status",
    "activate",
    "is_at_risk",
    "sweep",
    # Components
    "TierCatalog",
    "ExpirationCalculator",
    "CommissionSplitter",
    "MembershipStatusMachine",
    # Models
    "TierDefinition",
    "CommissionRules",
    "CommissionSplit",
    "UplinePayout",
    "MembershipStatus",
    "MembershipRecord",
    "TimeRemaining",
    "StatusDecision",
    "SweepResult",
    # Constants
    "DEFAULT_CATALOG",
    "DEFAULT_TIERS",
    "DEFAULT_COMMISSION_RULES",
    "MEMBERSHIP_DELETION_DAYS",
    # Errors
    "MembershipEngineError",
    "UnknownTierError",
    "InactiveTierError",
    "InvalidArgumentError",
    "TerminalStateError",
    "CorruptStateError",
]
