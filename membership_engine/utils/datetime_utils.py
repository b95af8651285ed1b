"""
Datetime utilities.

Provides timezone-aware datetime functions. All engine arithmetic is done
on UTC instants so local daylight-saving shifts never leak into results.
"""

from datetime import UTC, datetime, timedelta

from membership_engine.exceptions import InvalidArgumentError


def utc_now() -> datetime:
    """
    Get current UTC datetime with timezone info.

    Returns:
        Current datetime in UTC with timezone awareness
    """
    return datetime.now(UTC)


def to_utc(value: datetime | None, field_name: str = "value") -> datetime:
    """
    Normalize a datetime to an aware UTC instant.

    Naive datetimes are interpreted as UTC; aware datetimes are converted.

    Args:
        value: Datetime to normalize
        field_name: Name used in the error message

    Returns:
        Aware datetime in UTC

    Raises:
        InvalidArgumentError: If value is None or not a datetime
    """
    if value is None:
        raise InvalidArgumentError(f"{field_name} is required")
    if not isinstance(value, datetime):
        raise InvalidArgumentError(
            f"{field_name} must be a datetime, got {type(value).__name__}"
        )
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def optional_utc(value: datetime | None, field_name: str = "value") -> datetime | None:
    """Same as to_utc but passes None through."""
    if value is None:
        return None
    return to_utc(value, field_name)


def add_utc_days(value: datetime, days: int) -> datetime:
    """
    Add whole UTC calendar days to an instant.

    Example:
        >>> add_utc_days(datetime(2024, 1, 1, tzinfo=UTC), 365)
        datetime.datetime(2024, 12, 31, 0, 0, tzinfo=datetime.timezone.utc)
    """
    return to_utc(value) + timedelta(days=days)
