"""
Membership status machine.

Governs the active -> inactive -> deleted lifecycle and the grace-period
countdown. Every function here is a pure function of its inputs: the
caller supplies a single ``now`` per call and persists whatever record
comes back. Writes for the same record must be serialized by the caller.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import TYPE_CHECKING

from loguru import logger

from membership_engine.constants import (
    MEMBERSHIP_DELETION_DAYS,
    MS_PER_DAY,
    MS_PER_HOUR,
    MS_PER_MINUTE,
    MS_PER_SECOND,
)
from membership_engine.core.catalog import DEFAULT_CATALOG, TierCatalog
from membership_engine.core.expiration import ExpirationCalculator
from membership_engine.core.models import (
    ActiveState,
    DeletedState,
    MembershipRecord,
    MembershipStatus,
    StatusDecision,
    TimeRemaining,
)
from membership_engine.exceptions import (
    CorruptStateError,
    InvalidArgumentError,
    TerminalStateError,
)
from membership_engine.utils.datetime_utils import add_utc_days, to_utc


if TYPE_CHECKING:
    from membership_engine.config import EngineSettings


_ONE_MS = timedelta(milliseconds=1)


def _validate_deletion_days(deletion_days: int) -> None:
    if isinstance(deletion_days, bool) or not isinstance(deletion_days, int):
        raise InvalidArgumentError("deletion_days must be an integer")
    if deletion_days <= 0:
        raise InvalidArgumentError(f"deletion_days must be > 0, got {deletion_days}")


def deletion_deadline(
    inactive_at: datetime | None,
    deletion_at: datetime | None,
    deletion_days: int = MEMBERSHIP_DELETION_DAYS,
) -> datetime:
    """
    Resolve when an inactive membership is permanently deleted.

    An explicit ``deletion_at`` wins; otherwise the deadline is
    ``inactive_at`` plus ``deletion_days`` whole UTC days.

    Raises:
        InvalidArgumentError: If neither timestamp is given
    """
    _validate_deletion_days(deletion_days)
    if deletion_at is not None:
        return to_utc(deletion_at, "deletion_at")
    if inactive_at is None:
        raise InvalidArgumentError("inactive_at or deletion_at is required")
    return add_utc_days(inactive_at, deletion_days)


def time_remaining(
    deadline: datetime,
    now: datetime,
    deletion_days: int = MEMBERSHIP_DELETION_DAYS,
) -> TimeRemaining:
    """
    Countdown from ``now`` to ``deadline``.

    Remaining time is rounded up to the millisecond, so it only reaches
    zero once ``now >= deadline``. The percentage is measured against the
    configured window even when the deadline was overridden, and is not
    clamped above 100.

    Example:
        >>> from datetime import UTC
        >>> t = time_remaining(datetime(2024, 1, 8, tzinfo=UTC), datetime(2024, 1, 6, tzinfo=UTC), 7)
        >>> (t.days, t.hours, round(t.percentage, 1))
        (2, 0, 28.6)
    """
    _validate_deletion_days(deletion_days)
    deadline = to_utc(deadline, "deadline")
    now = to_utc(now, "now")

    # ceil((deadline - now) / 1ms)
    remaining_ms = max(0, -((now - deadline) // _ONE_MS))

    return TimeRemaining(
        remaining_ms=remaining_ms,
        days=remaining_ms // MS_PER_DAY,
        hours=(remaining_ms % MS_PER_DAY) // MS_PER_HOUR,
        minutes=(remaining_ms % MS_PER_HOUR) // MS_PER_MINUTE,
        seconds=(remaining_ms % MS_PER_MINUTE) // MS_PER_SECOND,
        percentage=remaining_ms / (deletion_days * MS_PER_DAY) * 100,
    )


def _grace_decision(
    previous: MembershipStatus,
    expires_at: datetime | None,
    inactive_at: datetime | None,
    deletion_at: datetime | None,
    now: datetime,
    deletion_days: int,
) -> StatusDecision:
    deadline = deletion_deadline(inactive_at, deletion_at, deletion_days)
    remaining = time_remaining(deadline, now, deletion_days)
    status = MembershipStatus.DELETED if remaining.is_elapsed else MembershipStatus.INACTIVE
    return StatusDecision(
        status=status,
        previous_status=previous,
        expires_at=expires_at,
        inactive_at=inactive_at,
        deletion_deadline=deadline,
        time_remaining=remaining,
    )


def evaluate_status(
    record: MembershipRecord,
    now: datetime,
    deletion_days: int = MEMBERSHIP_DELETION_DAYS,
) -> StatusDecision:
    """
    Decide the status of a membership at ``now``.

    Lazy expiry uses the expiry instant itself as ``inactive_at``, so
    evaluating the same record at the same ``now`` always gives the same
    answer no matter when a sweep last ran.

    Args:
        record: Membership snapshot
        now: Evaluation instant
        deletion_days: Grace window length in days

    Returns:
        StatusDecision with the status, deadline and countdown

    Raises:
        InvalidArgumentError: If now is missing or deletion_days <= 0
        CorruptStateError: If the record contradicts its own status
    """
    _validate_deletion_days(deletion_days)
    now = to_utc(now, "now")
    state = record.to_state()

    if isinstance(state, ActiveState):
        if state.expires_at is None or now <= state.expires_at:
            return StatusDecision(
                status=MembershipStatus.ACTIVE,
                previous_status=MembershipStatus.ACTIVE,
                expires_at=state.expires_at,
            )
        return _grace_decision(
            previous=MembershipStatus.ACTIVE,
            expires_at=state.expires_at,
            inactive_at=state.expires_at,
            deletion_at=record.deletion_at,
            now=now,
            deletion_days=deletion_days,
        )

    if isinstance(state, DeletedState):
        deadline = None
        if state.inactive_at is not None or record.deletion_at is not None:
            deadline = deletion_deadline(state.inactive_at, record.deletion_at, deletion_days)
        return StatusDecision(
            status=MembershipStatus.DELETED,
            previous_status=MembershipStatus.DELETED,
            expires_at=record.expires_at,
            inactive_at=state.inactive_at,
            deletion_deadline=deadline,
            time_remaining=TimeRemaining.zero(),
        )

    return _grace_decision(
        previous=MembershipStatus.INACTIVE,
        expires_at=record.expires_at,
        inactive_at=state.inactive_at,
        deletion_at=state.deletion_at,
        now=now,
        deletion_days=deletion_days,
    )


def is_at_risk(
    record: MembershipRecord,
    now: datetime,
    deletion_days: int = MEMBERSHIP_DELETION_DAYS,
) -> bool:
    """Check if a membership is inactive but still renewable."""
    return evaluate_status(record, now, deletion_days).status is MembershipStatus.INACTIVE


def apply_status(
    record: MembershipRecord,
    now: datetime,
    deletion_days: int = MEMBERSHIP_DELETION_DAYS,
) -> MembershipRecord:
    """
    Return a copy of ``record`` with the evaluated status written into it.

    Args:
        record: Membership snapshot
        now: Evaluation instant
        deletion_days: Grace window length in days

    Returns:
        Updated copy; equal to the input when nothing changed
    """
    decision = evaluate_status(record, now, deletion_days)
    if not decision.changed:
        return record.model_copy()

    logger.info(
        "Membership status transition",
        extra={
            "member_id": record.member_id,
            "from_status": decision.previous_status.value,
            "to_status": decision.status.value,
            "deletion_deadline": decision.deletion_deadline,
        },
    )
    return record.model_copy(
        update={
            "status": decision.status,
            "inactive_at": decision.inactive_at,
        }
    )


def activate(
    record: MembershipRecord | None,
    tier_id: str,
    now: datetime,
    catalog: TierCatalog | None = None,
    deletion_days: int = MEMBERSHIP_DELETION_DAYS,
    member_id: str | None = None,
) -> MembershipRecord:
    """
    Activate or renew a membership after a confirmed payment.

    A first activation creates a new active record. A renewal of an active
    or inactive-but-renewable record refreshes ``activated_at`` and
    ``expires_at`` and clears ``inactive_at``.

    Args:
        record: Existing membership, None for a first activation
        tier_id: Tier that was paid for
        now: Payment confirmation instant
        catalog: Tier catalog, defaults to the built-in tiers
        deletion_days: Grace window length in days
        member_id: Owner id for a new record

    Returns:
        New active record

    Raises:
        UnknownTierError: If the tier is not in the catalog
        InactiveTierError: If the tier is withdrawn from sale
        TerminalStateError: If the membership is deleted or past its grace period
    """
    catalog = catalog if catalog is not None else DEFAULT_CATALOG
    catalog.require_active(tier_id)
    now = to_utc(now, "now")
    calculator = ExpirationCalculator(catalog)

    if record is None:
        return MembershipRecord(
            tier_id=tier_id,
            status=MembershipStatus.ACTIVE,
            activated_at=now,
            expires_at=calculator.compute_expiration(tier_id, now),
            member_id=member_id,
        )

    decision = evaluate_status(record, now, deletion_days)
    if decision.is_deleted:
        raise TerminalStateError(record.member_id)

    current = record if decision.status is MembershipStatus.ACTIVE else None
    expires_at = calculator.compute_renewal_expiration(tier_id, now, current)

    return record.model_copy(
        update={
            "tier_id": tier_id,
            "status": MembershipStatus.ACTIVE,
            "activated_at": now,
            "expires_at": expires_at,
            "inactive_at": None,
            "deletion_at": None,
        }
    )


@dataclass
class SweepResult:
    """Result of a batch status sweep."""

    evaluated_count: int = 0
    expired_count: int = 0
    deleted_count: int = 0
    updated: dict[str, MembershipRecord] = field(default_factory=dict)
    errors: dict[str, CorruptStateError] = field(default_factory=dict)

    @property
    def success(self) -> bool:
        return not self.errors


def sweep(
    records: Mapping[str, MembershipRecord],
    now: datetime,
    deletion_days: int = MEMBERSHIP_DELETION_DAYS,
) -> SweepResult:
    """
    Evaluate many memberships at one fixed instant.

    Corrupt records are logged and reported in ``errors``; they never abort
    the batch. Records that are already deleted are skipped.

    Args:
        records: Membership snapshots keyed by member id
        now: Single evaluation instant for the whole batch
        deletion_days: Grace window length in days

    Returns:
        SweepResult with changed records and counters
    """
    _validate_deletion_days(deletion_days)
    now = to_utc(now, "now")
    result = SweepResult()

    for member_id, record in records.items():
        if record.status is MembershipStatus.DELETED:
            continue
        result.evaluated_count += 1
        try:
            updated = apply_status(record, now, deletion_days)
        except CorruptStateError as exc:
            logger.error(
                "Skipping corrupt membership record",
                extra={"member_id": member_id, "error": str(exc)},
            )
            result.errors[member_id] = exc
            continue

        if updated.status is record.status:
            continue
        result.updated[member_id] = updated
        if record.status is MembershipStatus.ACTIVE:
            result.expired_count += 1
        if updated.status is MembershipStatus.DELETED:
            result.deleted_count += 1

    logger.info(
        "Membership sweep finished",
        extra={
            "evaluated": result.evaluated_count,
            "expired": result.expired_count,
            "deleted": result.deleted_count,
            "errors": len(result.errors),
        },
    )
    return result


class MembershipStatusMachine:
    """
    Status machine bound to a catalog and a grace window.

    Convenience wrapper around the module functions for callers that keep
    one configured instance around.
    """

    def __init__(
        self,
        catalog: TierCatalog | None = None,
        deletion_days: int = MEMBERSHIP_DELETION_DAYS,
    ) -> None:
        _validate_deletion_days(deletion_days)
        self.catalog = catalog if catalog is not None else DEFAULT_CATALOG
        self.deletion_days = deletion_days

    @classmethod
    def from_settings(
        cls,
        settings: "EngineSettings",
        catalog: TierCatalog | None = None,
    ) -> "MembershipStatusMachine":
        return cls(catalog=catalog, deletion_days=settings.deletion_days)

    def evaluate(self, record: MembershipRecord, now: datetime) -> StatusDecision:
        return evaluate_status(record, now, self.deletion_days)

    def apply(self, record: MembershipRecord, now: datetime) -> MembershipRecord:
        return apply_status(record, now, self.deletion_days)

    def activate(
        self,
        record: MembershipRecord | None,
        tier_id: str,
        now: datetime,
        member_id: str | None = None,
    ) -> MembershipRecord:
        return activate(
            record,
            tier_id,
            now,
            catalog=self.catalog,
            deletion_days=self.deletion_days,
            member_id=member_id,
        )

    def is_at_risk(self, record: MembershipRecord, now: datetime) -> bool:
        return is_at_risk(record, now, self.deletion_days)

    def sweep(self, records: Mapping[str, MembershipRecord], now: datetime) -> SweepResult:
        return sweep(records, now, self.deletion_days)
