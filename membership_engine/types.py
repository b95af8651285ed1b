"""
Type definitions for the membership engine.

TypedDict shapes returned by the ``to_dict()`` helpers, for presentation
layers that serialize results to JSON.
"""

from typing import TypedDict


class CommissionSplitDict(TypedDict):
    """
    Commission split for one payment.

    Attributes:
        total_pool_cents: Distributable pool
        sponsor_amount_cents: Direct sponsor payout including the remainder
        level_amount_cents: Payout per upline level
    """
    total_pool_cents: int
    sponsor_amount_cents: int
    level_amount_cents: int


class CountdownDict(TypedDict):
    """
    Deletion countdown.

    Attributes:
        days: Whole days remaining
        hours: Hours component (0-23)
        minutes: Minutes component (0-59)
        seconds: Seconds component (0-59)
        percentage: Remaining share of the grace window, may exceed 100
    """
    days: int
    hours: int
    minutes: int
    seconds: int
    percentage: float


class StatusDecisionDict(TypedDict):
    """
    Status evaluation result. Datetimes are ISO 8601 strings in UTC.

    Attributes:
        status: Effective status value
        previous_status: Stored status value
        expires_at: Plan expiration, None for lifetime plans
        inactive_at: Start of the grace period
        deletion_deadline: Instant of permanent deletion
        time_remaining: Countdown, None while active
    """
    status: str
    previous_status: str
    expires_at: str | None
    inactive_at: str | None
    deletion_deadline: str | None
    time_remaining: CountdownDict | None
