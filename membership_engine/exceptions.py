"""
Exception handling utilities.

Defines categorized exception types for the membership engine.
The engine never retries and never repairs state: every error propagates
to the caller, which decides whether to fail the request, skip the record
or page an operator.
"""


class MembershipEngineError(Exception):
    """Base class for all membership engine errors."""
    pass


class UnknownTierError(MembershipEngineError, LookupError):
    """Raised when a tier id is not present in the catalog."""

    def __init__(self, tier_id: str) -> None:
        self.tier_id = tier_id
        super().__init__(f"Unknown membership tier: {tier_id!r}")


class InactiveTierError(MembershipEngineError):
    """Raised when a tier exists but is not available for purchase."""

    def __init__(self, tier_id: str) -> None:
        self.tier_id = tier_id
        super().__init__(f"Membership tier is not available: {tier_id!r}")


class InvalidArgumentError(MembershipEngineError, ValueError):
    """Raised when a caller passes an argument that violates the contract."""
    pass


class TerminalStateError(InvalidArgumentError):
    """Raised when a transition is requested on a deleted membership."""

    def __init__(self, member_id: str | None = None) -> None:
        self.member_id = member_id
        label = f" for member {member_id}" if member_id else ""
        super().__init__(
            f"Membership{label} is deleted; create a new record to re-onboard"
        )


class CorruptStateError(MembershipEngineError):
    """Raised when a membership record violates a structural invariant."""

    def __init__(self, message: str, member_id: str | None = None) -> None:
        self.member_id = member_id
        if member_id:
            message = f"{message} (member {member_id})"
        super().__init__(message)


# Exception categories based on handling strategy

# Caller bugs - fail the enclosing request
CALLER_ERRORS = (
    InvalidArgumentError,
)

# Recoverable - caller falls back to "no recognized plan"
RECOVERABLE_ERRORS = (
    UnknownTierError,
    InactiveTierError,
)

# Must be logged and surfaced to an operator; sweeps skip the record
OPERATOR_ERRORS = (
    CorruptStateError,
)


def is_caller_error(exc: Exception) -> bool:
    """
    Check if exception is a caller contract violation.

    Args:
        exc: Exception to check

    Returns:
        True if the caller passed invalid arguments
    """
    return isinstance(exc, CALLER_ERRORS)


def is_recoverable(exc: Exception) -> bool:
    """
    Check if exception allows a "no plan" fallback.

    Args:
        exc: Exception to check

    Returns:
        True if the caller can degrade gracefully
    """
    return isinstance(exc, RECOVERABLE_ERRORS)


def is_operator_error(exc: Exception) -> bool:
    """
    Check if exception must be surfaced to an operator.

    Args:
        exc: Exception to check

    Returns:
        True if the record itself is corrupt
    """
    return isinstance(exc, OPERATOR_ERRORS)
