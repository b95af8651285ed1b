"""
Formatting utilities for cents, percentages and countdowns.

Helpers for presentation layers that render engine results to users.
"""

from decimal import Decimal
from typing import TYPE_CHECKING, Union


if TYPE_CHECKING:
    from membership_engine.core.models import CommissionSplit, TimeRemaining


def format_cents(
    amount_cents: int,
    currency: str = "USD",
    thousands_separator: str = ",",
    decimal_separator: str = ".",
) -> str:
    """
    Format an integer cent amount as currency.

    Args:
        amount_cents: Amount in cents
        currency: Symbol or code of the currency
        thousands_separator: Thousands separator
        decimal_separator: Decimal separator

    Returns:
        Formatted string with currency

    Example:
        >>> format_cents(29900)
        '299.00 USD'
        >>> format_cents(123456, currency="$")
        '$1,234.56'
    """
    sign = "-" if amount_cents < 0 else ""
    units, cents = divmod(abs(amount_cents), 100)
    whole = f"{units:,}".replace(",", thousands_separator)
    formatted = f"{sign}{whole}{decimal_separator}{cents:02d}"

    if currency.startswith("$") or currency.startswith("€"):
        return f"{currency}{formatted}"
    return f"{formatted} {currency}"


def format_percentage(
    value: Union[float, Decimal],
    decimals: int = 1,
    show_sign: bool = False
) -> str:
    """
    Format a value that is already a percentage.

    Example:
        >>> format_percentage(28.571428)
        '28.6%'
        >>> format_percentage(50.0, decimals=0, show_sign=True)
        '+50%'
    """
    sign = ""
    if show_sign and float(value) > 0:
        sign = "+"
    return f"{sign}{float(value):.{decimals}f}%"


def format_duration_days(duration_days: int | None) -> str:
    """
    Format a tier duration.

    Example:
        >>> format_duration_days(365)
        '365 days'
        >>> format_duration_days(None)
        'Lifetime'
    """
    if duration_days is None:
        return "Lifetime"
    if duration_days == 1:
        return "1 day"
    return f"{duration_days} days"


def format_countdown(remaining: "TimeRemaining", show_seconds: bool = False) -> str:
    """
    Format a deletion countdown like "2d 0h 0m".

    Args:
        remaining: TimeRemaining from the status machine
        show_seconds: Append seconds

    Returns:
        Compact countdown string
    """
    text = f"{remaining.days}d {remaining.hours}h {remaining.minutes}m"
    if show_seconds:
        text += f" {remaining.seconds}s"
    return text


def format_split(split: "CommissionSplit", currency: str = "USD") -> str:
    """
    Format a commission split to a text report.

    Args:
        split: CommissionSplit object
        currency: Currency symbol

    Returns:
        Multi-line formatted report
    """
    lines = [
        "Commission split:",
        f"  Pool:      {format_cents(split.total_pool_cents, currency)}",
        f"  Sponsor:   {format_cents(split.sponsor_amount_cents, currency)}",
        f"  Per level: {format_cents(split.level_amount_cents, currency)}",
    ]
    return "\n".join(lines)
