"""Pydantic models for the membership engine."""

from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from membership_engine.exceptions import CorruptStateError
from membership_engine.types import CommissionSplitDict, CountdownDict, StatusDecisionDict
from membership_engine.utils.datetime_utils import optional_utc


def _isoformat(value: datetime | None) -> str | None:
    return value.isoformat() if value is not None else None


class MembershipStatus(str, Enum):
    """Membership lifecycle states."""

    ACTIVE = "active"
    INACTIVE = "inactive"
    DELETED = "deleted"  # terminal


class TierDefinition(BaseModel):
    """Model for a membership plan tier.

    A tier with ``duration_days=None`` is unbounded (lifetime) and never
    expires.
    """

    model_config = ConfigDict(frozen=True)

    tier_id: str = Field(..., min_length=1, description="Unique tier identifier")
    price_cents: int = Field(..., ge=0, description="Tier price in USD cents")
    duration_days: int | None = Field(
        ..., gt=0, description="Plan length in days, None for lifetime"
    )
    name: str | None = Field(default=None, description="Optional display name")
    description: str | None = Field(default=None, description="Optional marketing copy")
    is_active: bool = Field(default=True, description="Whether the tier is on sale")
    sort_order: int = Field(default=0, ge=0, description="Position in plan listings")

    @field_validator("tier_id")
    @classmethod
    def validate_tier_id(cls, v: str) -> str:
        """Reject blank identifiers."""
        if not v.strip():
            raise ValueError("tier_id must not be blank")
        return v

    @property
    def is_unbounded(self) -> bool:
        return self.duration_days is None

    @property
    def display_name(self) -> str:
        return self.name or self.tier_id


class CommissionRules(BaseModel):
    """Referral commission configuration.

    Percentages apply to the full payment amount, not to the pool.
    """

    model_config = ConfigDict(frozen=True)

    sponsor_level: int = Field(default=1, ge=1, description="Depth of the direct sponsor")
    sponsor_pct: Decimal = Field(..., gt=0, lt=1, description="Direct sponsor share")
    upline_pct: Decimal = Field(..., gt=0, lt=1, description="Share per upline level")
    max_upline_levels: int = Field(..., ge=1, description="Upline levels above the sponsor that get paid")
    pool_fraction: Decimal = Field(
        default=Decimal("0.5"), gt=0, le=1, description="Share of payment forming the pool"
    )

    @property
    def max_committed_fraction(self) -> Decimal:
        """Fraction of a payment promised when every level is filled."""
        return self.sponsor_pct + self.upline_pct * self.max_upline_levels

    @property
    def is_overcommitted(self) -> bool:
        return self.max_committed_fraction > self.pool_fraction


class CommissionSplit(BaseModel):
    """Result of splitting one payment into commission amounts.

    ``level_amount_cents`` is the unit paid to each eligible upline level.
    """

    model_config = ConfigDict(frozen=True)

    total_pool_cents: int = Field(..., ge=0, description="Distributable pool")
    sponsor_amount_cents: int = Field(..., ge=0, description="Direct sponsor payout incl. remainder")
    level_amount_cents: int = Field(..., ge=0, description="Payout per upline level")

    def to_dict(self) -> CommissionSplitDict:
        return {
            "total_pool_cents": self.total_pool_cents,
            "sponsor_amount_cents": self.sponsor_amount_cents,
            "level_amount_cents": self.level_amount_cents,
        }


class UplinePayout(BaseModel):
    """A single commission line for one upline member."""

    model_config = ConfigDict(frozen=True)

    member_id: str = Field(..., description="Upline member receiving the payout")
    level: int = Field(..., ge=1, description="Distance from payer, 1 = direct sponsor")
    amount_cents: int = Field(..., gt=0, description="Payout amount in cents")


class ActiveState(BaseModel):
    """Active membership; ``expires_at=None`` means lifetime."""

    model_config = ConfigDict(frozen=True)

    status: Literal[MembershipStatus.ACTIVE] = MembershipStatus.ACTIVE
    activated_at: datetime
    expires_at: datetime | None = None


class InactiveState(BaseModel):
    """Expired membership inside (or past) its grace period."""

    model_config = ConfigDict(frozen=True)

    status: Literal[MembershipStatus.INACTIVE] = MembershipStatus.INACTIVE
    inactive_at: datetime | None = None
    deletion_at: datetime | None = None

    @model_validator(mode="after")
    def require_deadline_source(self) -> "InactiveState":
        if self.inactive_at is None and self.deletion_at is None:
            raise ValueError("inactive state needs inactive_at or deletion_at")
        return self


class DeletedState(BaseModel):
    model_config = ConfigDict(frozen=True)

    status: Literal[MembershipStatus.DELETED] = MembershipStatus.DELETED
    inactive_at: datetime | None = None


MembershipState = Annotated[
    Union[ActiveState, InactiveState, DeletedState],
    Field(discriminator="status"),
]


class MembershipRecord(BaseModel):
    """Caller-owned membership snapshot.

    The engine never mutates a record in place; transitions return copies
    that the caller persists.
    """

    model_config = ConfigDict(validate_assignment=True)

    tier_id: str = Field(..., min_length=1, description="Tier the member paid for")
    status: MembershipStatus = Field(default=MembershipStatus.ACTIVE)
    activated_at: datetime | None = Field(default=None, description="Last activation instant")
    expires_at: datetime | None = Field(default=None, description="None means lifetime")
    inactive_at: datetime | None = Field(default=None, description="When the record went inactive")
    deletion_at: datetime | None = Field(default=None, description="Explicit deletion deadline override")
    member_id: str | None = Field(default=None, description="Optional owner id, used in logs")

    @field_validator("activated_at", "expires_at", "inactive_at", "deletion_at")
    @classmethod
    def normalize_utc(cls, v: datetime | None) -> datetime | None:
        return optional_utc(v)

    def to_state(self) -> ActiveState | InactiveState | DeletedState:
        """
        Convert the nullable-field record into its tagged state.

        Raises:
            CorruptStateError: If the fields contradict the status
        """
        if self.status is MembershipStatus.ACTIVE:
            if self.activated_at is None:
                raise CorruptStateError(
                    "Active membership has no activation time", self.member_id
                )
            return ActiveState(activated_at=self.activated_at, expires_at=self.expires_at)

        if self.status is MembershipStatus.INACTIVE:
            if self.inactive_at is None and self.deletion_at is None:
                raise CorruptStateError(
                    "Inactive membership has neither inactive_at nor deletion_at",
                    self.member_id,
                )
            return InactiveState(inactive_at=self.inactive_at, deletion_at=self.deletion_at)

        return DeletedState(inactive_at=self.inactive_at)


class TimeRemaining(BaseModel):
    """Countdown until permanent deletion."""

    model_config = ConfigDict(frozen=True)

    remaining_ms: int = Field(..., ge=0)
    days: int = Field(..., ge=0)
    hours: int = Field(..., ge=0, le=23)
    minutes: int = Field(..., ge=0, le=59)
    seconds: int = Field(..., ge=0, le=59)
    percentage: float = Field(
        ..., ge=0, description="Raw remaining/configured-window ratio, may exceed 100"
    )

    @classmethod
    def zero(cls) -> "TimeRemaining":
        return cls(remaining_ms=0, days=0, hours=0, minutes=0, seconds=0, percentage=0.0)

    @property
    def is_elapsed(self) -> bool:
        return self.remaining_ms == 0

    @property
    def display_percentage(self) -> float:
        """Percentage clamped to [0, 100] for progress bars."""
        return min(max(self.percentage, 0.0), 100.0)

    def to_dict(self) -> CountdownDict:
        """Countdown components for presentation layers."""
        return {
            "days": self.days,
            "hours": self.hours,
            "minutes": self.minutes,
            "seconds": self.seconds,
            "percentage": self.percentage,
        }


class StatusDecision(BaseModel):
    """Outcome of evaluating a record at a given instant."""

    model_config = ConfigDict(frozen=True)

    status: MembershipStatus
    previous_status: MembershipStatus
    expires_at: datetime | None = None
    inactive_at: datetime | None = None
    deletion_deadline: datetime | None = None
    time_remaining: TimeRemaining | None = Field(
        default=None, description="Countdown, absent while active"
    )

    @property
    def changed(self) -> bool:
        return self.status is not self.previous_status

    @property
    def is_deleted(self) -> bool:
        return self.status is MembershipStatus.DELETED

    def to_dict(self) -> StatusDecisionDict:
        """
        Convert decision to a JSON-ready dict.

        Returns:
            StatusDecisionDict with ISO 8601 UTC timestamps
        """
        return {
            "status": self.status.value,
            "previous_status": self.previous_status.value,
            "expires_at": _isoformat(self.expires_at),
            "inactive_at": _isoformat(self.inactive_at),
            "deletion_deadline": _isoformat(self.deletion_deadline),
            "time_remaining": (
                self.time_remaining.to_dict() if self.time_remaining is not None else None
            ),
        }
