"""
Utility functions for the membership engine.

Datetime normalization, display formatting and logging setup.
"""

from membership_engine.utils.datetime_utils import add_utc_days, optional_utc, to_utc, utc_now
from membership_engine.utils.formatters import (
    format_cents,
    format_countdown,
    format_duration_days,
    format_percentage,
    format_split,
)
from membership_engine.utils.logging import setup_logging

__all__ = [
    "utc_now",
    "to_utc",
    "optional_utc",
    "add_utc_days",
    "format_cents",
    "format_percentage",
    "format_duration_days",
    "format_countdown",
    "format_split",
    "setup_logging",
]
