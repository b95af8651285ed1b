"""Unit tests for engine settings."""

from decimal import Decimal

import pytest
from loguru import logger
from pydantic import ValidationError

from membership_engine.config import (
    EngineSettings,
    commission_rules_from_settings,
    configure_logging,
)
from membership_engine.constants import DEFAULT_COMMISSION_RULES, MEMBERSHIP_DELETION_DAYS


class TestEngineSettings:
    """Tests for EngineSettings."""

    def test_defaults(self, monkeypatch):
        """Defaults match the built-in constants."""
        monkeypatch.delenv("MEMBERSHIP_DELETION_DAYS", raising=False)
        settings = EngineSettings(_env_file=None)
        assert settings.deletion_days == MEMBERSHIP_DELETION_DAYS
        assert settings.commission_rules() == DEFAULT_COMMISSION_RULES

    def test_env_override(self, monkeypatch):
        """Environment variables use the MEMBERSHIP_ prefix."""
        monkeypatch.setenv("MEMBERSHIP_DELETION_DAYS", "14")
        monkeypatch.setenv("MEMBERSHIP_MAX_UPLINE_LEVELS", "2")
        settings = EngineSettings(_env_file=None)
        assert settings.deletion_days == 14
        assert settings.commission_rules().max_upline_levels == 2

    def test_decimal_from_env(self, monkeypatch):
        """Percentages are parsed as Decimal."""
        monkeypatch.setenv("MEMBERSHIP_SPONSOR_PCT", "0.15")
        settings = EngineSettings(_env_file=None)
        assert settings.sponsor_pct == Decimal("0.15")

    def test_invalid_deletion_days(self):
        """deletion_days must be positive."""
        with pytest.raises(ValidationError):
            EngineSettings(_env_file=None, deletion_days=0)

    @pytest.mark.parametrize("pct", ["0", "1", "-0.1"])
    def test_invalid_sponsor_pct(self, pct):
        """Sponsor share must be strictly between 0 and 1."""
        with pytest.raises(ValidationError):
            EngineSettings(_env_file=None, sponsor_pct=Decimal(pct))

    def test_log_level_normalized(self):
        """Log level names are upper-cased."""
        assert EngineSettings(_env_file=None, log_level="debug").log_level == "DEBUG"

    def test_unknown_log_level(self):
        """Unknown log levels are rejected."""
        with pytest.raises(ValidationError):
            EngineSettings(_env_file=None, log_level="verbose")

    def test_overcommitted_settings_allowed(self):
        """Over-committing the pool is warned about, not rejected."""
        settings = EngineSettings(
            _env_file=None, sponsor_pct=Decimal("0.4"), upline_pct=Decimal("0.1")
        )
        assert settings.commission_rules().is_overcommitted

    def test_rules_from_settings(self):
        """commission_rules_from_settings() builds rules from an instance."""
        rules = commission_rules_from_settings(EngineSettings(_env_file=None, max_upline_levels=3))
        assert rules.max_upline_levels == 3


class TestConfigureLogging:
    """Tests for logging configured from settings."""

    def test_log_file_from_settings(self, tmp_path):
        """log_level and log_file settings drive the loguru sinks."""
        log_file = tmp_path / "membership.log"
        engine_settings = EngineSettings(
            _env_file=None, log_level="debug", log_file=str(log_file), environment="test"
        )
        try:
            configure_logging(engine_settings)
            logger.debug("debug record")
        finally:
            logger.remove()
        content = log_file.read_text(encoding="utf-8")
        assert "Membership engine logging configured" in content
        assert "debug record" in content

    def test_level_filters_file(self, tmp_path):
        """Records below log_level are not written."""
        log_file = tmp_path / "membership.log"
        try:
            configure_logging(
                EngineSettings(_env_file=None, log_level="WARNING", log_file=str(log_file))
            )
            logger.info("quiet record")
            logger.warning("loud record")
        finally:
            logger.remove()
        content = log_file.read_text(encoding="utf-8")
        assert "quiet record" not in content
        assert "loud record" in content
