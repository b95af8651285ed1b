"""
Commission splitter.

Pure business logic for splitting a membership payment into referral
commissions. Works with integer cents only; every intermediate amount is
floored so no fractional cent ever appears in the output.
"""

from collections.abc import Sequence
from decimal import Decimal

from loguru import logger

from membership_engine.constants import DEFAULT_COMMISSION_RULES
from membership_engine.core.models import CommissionRules, CommissionSplit, UplinePayout
from membership_engine.exceptions import InvalidArgumentError


def _floor_cents(amount_cents: int, fraction: Decimal) -> int:
    # floor(amount * fraction) in exact integer arithmetic
    numerator, denominator = fraction.as_integer_ratio()
    return amount_cents * numerator // denominator


def _validate_amount(amount_cents: int) -> None:
    # bool is an int subclass but never a valid amount
    if isinstance(amount_cents, bool) or not isinstance(amount_cents, int):
        raise InvalidArgumentError(
            f"amount_cents must be an integer, got {type(amount_cents).__name__}"
        )
    if amount_cents < 0:
        raise InvalidArgumentError(f"amount_cents must be >= 0, got {amount_cents}")


def _validate_depth(actual_upline_depth: int) -> None:
    if isinstance(actual_upline_depth, bool) or not isinstance(actual_upline_depth, int):
        raise InvalidArgumentError("actual_upline_depth must be an integer")
    if actual_upline_depth < 0:
        raise InvalidArgumentError(
            f"actual_upline_depth must be >= 0, got {actual_upline_depth}"
        )


class CommissionSplitter:
    """
    Splits payments into a sponsor share and per-level upline shares.

    Sponsor and level amounts are computed against the full payment, not
    against the pool. The payout cap always uses ``max_upline_levels``
    regardless of how deep the real upline is; unclaimed level amounts stay
    with the platform.
    """

    def __init__(self, rules: CommissionRules | None = None) -> None:
        """
        Initialize commission splitter.

        Args:
            rules: Commission rules, defaults to the built-in rules
        """
        self.rules = rules if rules is not None else DEFAULT_COMMISSION_RULES
        if self.rules.is_overcommitted:
            logger.warning(
                "Commission rules promise more than the pool holds",
                extra={
                    "max_committed_fraction": str(self.rules.max_committed_fraction),
                    "pool_fraction": str(self.rules.pool_fraction),
                },
            )

    def split(self, amount_cents: int, actual_upline_depth: int = 0) -> CommissionSplit:
        """
        Split a payment into commission amounts.

        Algorithm:
            pool    = floor(amount * pool_fraction)
            sponsor = floor(amount * sponsor_pct)
            level   = floor(amount * upline_pct)
            remainder = pool - (sponsor + level * max_upline_levels)
            sponsor += remainder when remainder > 0

        Args:
            amount_cents: Confirmed payment amount in cents
            actual_upline_depth: Upline members above the sponsor that exist.
                Validated but it does not change the split.

        Returns:
            CommissionSplit with pool, sponsor and per-level amounts

        Raises:
            InvalidArgumentError: If amount or depth is negative or not an int

        Example:
            >>> splitter = CommissionSplitter()
            >>> splitter.split(10000, 3)
            CommissionSplit(total_pool_cents=5000, sponsor_amount_cents=2000, level_amount_cents=500)
        """
        _validate_amount(amount_cents)
        _validate_depth(actual_upline_depth)

        total_pool_cents = _floor_cents(amount_cents, self.rules.pool_fraction)
        sponsor_amount_cents = _floor_cents(amount_cents, self.rules.sponsor_pct)
        level_amount_cents = _floor_cents(amount_cents, self.rules.upline_pct)

        max_distributable = (
            sponsor_amount_cents + level_amount_cents * self.rules.max_upline_levels
        )
        remainder = total_pool_cents - max_distributable

        return CommissionSplit(
            total_pool_cents=total_pool_cents,
            sponsor_amount_cents=sponsor_amount_cents + max(remainder, 0),
            level_amount_cents=level_amount_cents,
        )

    def level_payout(
        self,
        split: CommissionSplit,
        level: int,
        actual_upline_depth: int,
    ) -> int:
        """
        Payout for upline level ``level`` (1 = first member above the sponsor).

        Levels beyond the configured cap or beyond the real depth get 0.
        """
        if level < 1:
            raise InvalidArgumentError(f"level must be >= 1, got {level}")
        _validate_depth(actual_upline_depth)
        if level > self.rules.max_upline_levels or level > actual_upline_depth:
            return 0
        return split.level_amount_cents

    def distributed_cents(
        self,
        split: CommissionSplit,
        actual_upline_depth: int,
        has_sponsor: bool = True,
    ) -> int:
        """Total cents actually paid out for a chain of the given shape."""
        _validate_depth(actual_upline_depth)
        paid_levels = min(actual_upline_depth, self.rules.max_upline_levels)
        sponsor_cents = split.sponsor_amount_cents if has_sponsor else 0
        return sponsor_cents + split.level_amount_cents * paid_levels

    def distribute(
        self,
        amount_cents: int,
        sponsor_id: str | None,
        upline_ids: Sequence[str] = (),
    ) -> list[UplinePayout]:
        """
        Build payout lines for a concrete referral chain.

        Args:
            amount_cents: Confirmed payment amount in cents
            sponsor_id: Direct sponsor of the payer, None when there is none
            upline_ids: Members above the sponsor, nearest first

        Returns:
            Payout lines ordered by level; zero amounts are omitted
        """
        split = self.split(amount_cents, len(upline_ids))
        payouts: list[UplinePayout] = []

        if sponsor_id is not None and split.sponsor_amount_cents > 0:
            payouts.append(
                UplinePayout(
                    member_id=sponsor_id,
                    level=self.rules.sponsor_level,
                    amount_cents=split.sponsor_amount_cents,
                )
            )

        if split.level_amount_cents > 0:
            for offset, member_id in enumerate(upline_ids[: self.rules.max_upline_levels], start=1):
                payouts.append(
                    UplinePayout(
                        member_id=member_id,
                        level=self.rules.sponsor_level + offset,
                        amount_cents=split.level_amount_cents,
                    )
                )

        logger.debug(
            "Commission distributed",
            extra={
                "amount_cents": amount_cents,
                "payouts": len(payouts),
                "pool_cents": split.total_pool_cents,
            },
        )
        return payouts


def split_commission(
    amount_cents: int,
    actual_upline_depth: int = 0,
    rules: CommissionRules | None = None,
) -> CommissionSplit:
    """Split a payment using the given or default commission rules."""
    return CommissionSplitter(rules).split(amount_cents, actual_upline_depth)
