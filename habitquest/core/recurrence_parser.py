"""Recurrence rule parsing for recurring tasks.

Rules are short, case-insensitive directives. Supported forms:
- "DAILY", "WEEKLY", "MONTHLY"
- "ONCE" (never recurs)
- "EVERY <n> DAYS", "EVERY <n> WEEKS", "EVERY <n> MONTHS" (singular units accepted)
- "WEEKDAYS" (Monday to Friday), "WEEKENDS" (Saturday and Sunday)

Parsing is total: anything else is treated as DAILY with interval 1.
"""

import logging
import re

from habitquest.domain.streak import RecurrenceKind, RecurrencePattern
from habitquest.domain.task import TaskKind


logger = logging.getLogger(__name__)

DAILY_FALLBACK = RecurrencePattern(kind=RecurrenceKind.DAILY, interval=1)

WEEKDAYS = frozenset({0, 1, 2, 3, 4})
WEEKENDS = frozenset({5, 6})

_EVERY_PATTERN = re.compile(r"EVERY\s+(\d+)\s+(DAY|WEEK|MONTH)S?")

_UNIT_KINDS = {
    "DAY": RecurrenceKind.DAILY,
    "WEEK": RecurrenceKind.WEEKLY,
    "MONTH": RecurrenceKind.MONTHLY,
}

_KEYWORD_PATTERNS = {
    "DAILY": DAILY_FALLBACK,
    "WEEKLY": RecurrencePattern(kind=RecurrenceKind.WEEKLY, interval=1),
    "MONTHLY": RecurrencePattern(kind=RecurrenceKind.MONTHLY, interval=1),
    "ONCE": RecurrencePattern(kind=RecurrenceKind.CUSTOM, interval=0),
    "WEEKDAYS": RecurrencePattern(kind=RecurrenceKind.WEEKLY, interval=1, days_of_week=WEEKDAYS),
    "WEEKENDS": RecurrencePattern(kind=RecurrenceKind.WEEKLY, interval=1, days_of_week=WEEKENDS),
}

_DEFAULT_RULES = {
    TaskKind.DAILY: "DAILY",
    TaskKind.HABIT: "DAILY",
    TaskKind.TODO: "ONCE",
}


def default_recurrence_rule(kind: TaskKind) -> str:
    """Rule applied to a task whose own rule is empty."""
    return _DEFAULT_RULES.get(kind, "DAILY")


def parse_recurrence_rule(rule: str | None) -> RecurrencePattern:
    """Parse a recurrence rule into a RecurrencePattern.

    Args:
        rule: Recurrence rule (e.g., "DAILY", "every 2 days", "weekdays")

    Returns:
        The parsed pattern; DAILY/1 when the rule is not recognised
    """
    normalized = (rule or "").strip().upper()

    pattern = _KEYWORD_PATTERNS.get(normalized)
    if pattern is not None:
        return pattern

    if "EVERY" in normalized:
        match = _EVERY_PATTERN.search(normalized)
        if match:
            return RecurrencePattern(kind=_UNIT_KINDS[match.group(2)], interval=int(match.group(1)))

    logger.debug("Unrecognised recurrence rule %r, using daily cadence", rule)
    return DAILY_FALLBACK


def describe_recurrence(rule: str | None) -> str:
    """Convert a recurrence rule to human-readable text.

    Args:
        rule: Recurrence rule string

    Returns:
        Human-readable description (e.g., "every 3 days", "weekdays")
    """
    pattern = parse_recurrence_rule(rule)

    if pattern.is_one_time:
        return "once"

    if pattern.days_of_week == WEEKDAYS:
        return "weekdays"
    if pattern.days_of_week == WEEKENDS:
        return "weekends"

    singular = {
        RecurrenceKind.DAILY: ("daily", "day"),
        RecurrenceKind.WEEKLY: ("weekly", "week"),
        RecurrenceKind.MONTHLY: ("monthly", "month"),
        RecurrenceKind.CUSTOM: ("daily", "day"),
    }
    adverb, unit = singular[pattern.kind]
    if pattern.interval == 1:
        return adverb
    return f"every {pattern.interval} {unit}s"
