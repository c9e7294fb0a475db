"""Tests for configuration loading."""

import pytest
from pydantic import ValidationError

from habitquest.core.config import Constants, Settings, constants, get_settings


def test_defaults() -> None:
    """Test settings fall back to UTC and a six hour grace period."""
    settings = Settings()

    assert settings.default_timezone == "UTC"
    assert settings.grace_period_hours == 6
    assert settings.service_name == "habitquest"


def test_settings_read_prefixed_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    """Test HABITQUEST_ environment variables override defaults."""
    monkeypatch.setenv("HABITQUEST_DEFAULT_TIMEZONE", "Europe/Berlin")
    monkeypatch.setenv("HABITQUEST_GRACE_PERIOD_HOURS", "3")

    settings = get_settings()

    assert settings.default_timezone == "Europe/Berlin"
    assert settings.grace_period_hours == 3


def test_negative_grace_period_rejected() -> None:
    """Test a negative grace period fails validation."""
    with pytest.raises(ValidationError, match="grace_period_hours"):
        Settings(grace_period_hours=-1)


def test_constants_match_progression_rules() -> None:
    """Test the fixed progression constants."""
    assert isinstance(constants, Constants)
    assert constants.STREAK_MULTIPLIER_INTERVAL == 5
    assert constants.STREAK_MULTIPLIER_RATE == 1.1
    assert constants.MAX_STREAK_MULTIPLIER == 2.0
    assert constants.LEVEL_XP_BASE == 100
    assert constants.STAT_CEILING == 100
    assert constants.STAT_POINTS_PER_LEVEL == 2
