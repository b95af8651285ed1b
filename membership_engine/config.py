"""
Engine settings.

Loads configuration from environment variables using pydantic-settings.
All variables use the ``MEMBERSHIP_`` prefix, e.g. ``MEMBERSHIP_DELETION_DAYS``.
"""

from decimal import Decimal

from loguru import logger
from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from membership_engine.constants import (
    DEFAULT_COMMISSION_RULES,
    MEMBERSHIP_DELETION_DAYS,
    POOL_FRACTION,
)
from membership_engine.core.models import CommissionRules
from membership_engine.utils.logging import setup_logging


class EngineSettings(BaseSettings):
    """Membership engine settings loaded from environment variables."""

    # Lifecycle
    deletion_days: int = Field(
        default=MEMBERSHIP_DELETION_DAYS,
        gt=0,
        description="Grace period in days before an inactive membership is deleted"
    )

    # Commission rules
    pool_fraction: Decimal = Field(
        default=POOL_FRACTION, gt=0, le=1,
        description="Share of each payment that forms the commission pool"
    )
    sponsor_pct: Decimal = Field(
        default=DEFAULT_COMMISSION_RULES.sponsor_pct, gt=0, lt=1,
        description="Direct sponsor share of the full payment"
    )
    upline_pct: Decimal = Field(
        default=DEFAULT_COMMISSION_RULES.upline_pct, gt=0, lt=1,
        description="Per-level upline share of the full payment"
    )
    max_upline_levels: int = Field(
        default=DEFAULT_COMMISSION_RULES.max_upline_levels, ge=1,
        description="Upline levels above the sponsor that receive a payout"
    )

    # Application
    environment: str = "production"
    log_level: str = "INFO"
    log_file: str | None = None

    model_config = SettingsConfigDict(
        env_prefix="MEMBERSHIP_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Normalize and check the log level name."""
        level = v.upper()
        if level not in {"TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unknown log level: {v}")
        return level

    @model_validator(mode='after')
    def warn_overcommitted_pool(self) -> 'EngineSettings':
        """Warn when full upline payouts would exceed the pool."""
        committed = self.sponsor_pct + self.upline_pct * self.max_upline_levels
        if committed > self.pool_fraction:
            logger.warning(
                "Commission settings over-commit the pool",
                extra={
                    "committed_fraction": str(committed),
                    "pool_fraction": str(self.pool_fraction),
                },
            )
        return self

    def commission_rules(self) -> CommissionRules:
        """Build CommissionRules from these settings."""
        return CommissionRules(
            sponsor_level=1,
            sponsor_pct=self.sponsor_pct,
            upline_pct=self.upline_pct,
            max_upline_levels=self.max_upline_levels,
            pool_fraction=self.pool_fraction,
        )


settings = EngineSettings()


def commission_rules_from_settings(engine_settings: EngineSettings | None = None) -> CommissionRules:
    """Commission rules for the given settings, or the process settings."""
    return (engine_settings or settings).commission_rules()


def configure_logging(engine_settings: EngineSettings | None = None) -> None:
    """Set up loguru sinks from the log settings."""
    active = engine_settings or settings
    setup_logging(
        level=active.log_level,
        log_file=active.log_file,
        environment=active.environment,
    )
