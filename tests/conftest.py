"""Pytest configuration and shared fixtures for all tests."""

import os
import sys
from pathlib import Path

# Keep engine settings deterministic regardless of the host environment
os.environ.setdefault("MEMBERSHIP_ENVIRONMENT", "test")
os.environ.setdefault("MEMBERSHIP_LOG_LEVEL", "DEBUG")

# Добавить корень проекта в PYTHONPATH
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

import pytest
from datetime import UTC, datetime

from membership_engine import MembershipRecord, MembershipStatus


@pytest.fixture
def new_year() -> datetime:
    """2024-01-01T00:00:00Z, the reference instant used across tests."""
    return datetime(2024, 1, 1, tzinfo=UTC)


@pytest.fixture
def active_annual_record(new_year) -> MembershipRecord:
    """Annual membership activated on 2024-01-01."""
    return MembershipRecord(
        member_id="member-1",
        tier_id="annual",
        status=MembershipStatus.ACTIVE,
        activated_at=new_year,
        expires_at=datetime(2024, 12, 31, tzinfo=UTC),
    )


@pytest.fixture
def inactive_record(new_year) -> MembershipRecord:
    """Membership that went inactive on 2024-01-01."""
    return MembershipRecord(
        member_id="member-2",
        tier_id="trial_weekly",
        status=MembershipStatus.INACTIVE,
        activated_at=datetime(2023, 12, 25, tzinfo=UTC),
        expires_at=new_year,
        inactive_at=new_year,
    )
