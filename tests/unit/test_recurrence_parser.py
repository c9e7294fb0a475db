"""Unit tests for recurrence_parser module."""

import pytest

from habitquest.core.recurrence_parser import (
    DAILY_FALLBACK,
    WEEKDAYS,
    WEEKENDS,
    default_recurrence_rule,
    describe_recurrence,
    parse_recurrence_rule,
)
from habitquest.domain.streak import RecurrenceKind, RecurrencePattern
from habitquest.domain.task import TaskKind


@pytest.mark.unit
class TestParseRecurrenceRule:
    """Tests for parse_recurrence_rule function."""

    @pytest.mark.parametrize(
        ("rule", "kind", "interval"),
        [
            ("DAILY", RecurrenceKind.DAILY, 1),
            ("weekly", RecurrenceKind.WEEKLY, 1),
            ("  Monthly ", RecurrenceKind.MONTHLY, 1),
            ("EVERY 2 DAYS", RecurrenceKind.DAILY, 2),
            ("every 1 day", RecurrenceKind.DAILY, 1),
            ("Every 3 weeks", RecurrenceKind.WEEKLY, 3),
            ("EVERY 6 MONTHS", RecurrenceKind.MONTHLY, 6),
        ],
    )
    def test_recognised_rules(self, rule, kind, interval):
        """Test keywords and EVERY forms are parsed case-insensitively."""
        pattern = parse_recurrence_rule(rule)

        assert pattern.kind == kind
        assert pattern.interval == interval
        assert pattern.days_of_week is None

    def test_once_never_recurs(self):
        """Test ONCE parses to a one-time pattern."""
        pattern = parse_recurrence_rule("once")

        assert pattern == RecurrencePattern(kind=RecurrenceKind.CUSTOM, interval=0)
        assert pattern.is_one_time

    def test_weekdays(self):
        """Test WEEKDAYS is a weekly pattern restricted to Monday-Friday."""
        pattern = parse_recurrence_rule("WEEKDAYS")

        assert pattern.kind == RecurrenceKind.WEEKLY
        assert pattern.days_of_week == frozenset({0, 1, 2, 3, 4})

    def test_weekends(self):
        """Test WEEKENDS is a weekly pattern restricted to Saturday and Sunday."""
        assert parse_recurrence_rule("weekends").days_of_week == frozenset({5, 6})

    @pytest.mark.parametrize("rule", ["", None, "whenever", "EVERY FEW DAYS", "EVERY 2 YEARS", "fortnightly"])
    def test_unrecognised_rules_fall_back_to_daily(self, rule):
        """Test parsing is total and unknown rules become DAILY/1."""
        assert parse_recurrence_rule(rule) == DAILY_FALLBACK

    def test_every_zero_days_parses(self):
        """Test a zero interval is kept; evaluation handles it."""
        assert parse_recurrence_rule("EVERY 0 DAYS") == RecurrencePattern(kind=RecurrenceKind.DAILY, interval=0)


@pytest.mark.unit
class TestDefaultRecurrenceRule:
    """Tests for default_recurrence_rule function."""

    def test_defaults_per_kind(self):
        """Test the rule applied when a task has none."""
        assert default_recurrence_rule(TaskKind.DAILY) == "DAILY"
        assert default_recurrence_rule(TaskKind.HABIT) == "DAILY"
        assert default_recurrence_rule(TaskKind.TODO) == "ONCE"


@pytest.mark.unit
class TestDescribeRecurrence:
    """Tests for describe_recurrence function."""

    @pytest.mark.parametrize(
        ("rule", "expected"),
        [
            ("DAILY", "daily"),
            ("WEEKLY", "weekly"),
            ("MONTHLY", "monthly"),
            ("ONCE", "once"),
            ("WEEKDAYS", "weekdays"),
            ("WEEKENDS", "weekends"),
            ("EVERY 3 DAYS", "every 3 days"),
            ("EVERY 2 WEEKS", "every 2 weeks"),
            ("EVERY 1 MONTH", "monthly"),
            ("gibberish", "daily"),
        ],
    )
    def test_descriptions(self, rule, expected):
        """Test human-readable descriptions."""
        assert describe_recurrence(rule) == expected

    def test_day_sets_are_exported(self):
        """Test the weekday and weekend sets do not overlap."""
        assert WEEKDAYS.isdisjoint(WEEKENDS)
        assert WEEKDAYS | WEEKENDS == frozenset(range(7))
