"""Streak state machine for recurring tasks.

A task's streak state is never stored. It is recomputed on demand from the
task snapshot, its recurrence rule, the user's timezone and the current
instant:

- NeverCompleted: no completion recorded yet
- Active: completed within its cadence
- GracePeriod: past its due date but inside the grace window
- Broken: past the grace window

The due date of a recurring task is local midnight of the day it becomes
due; the grace window extends a fixed number of hours past it.
"""

import logging
import math
from collections.abc import Iterable
from datetime import UTC, datetime, timedelta, tzinfo

from habitquest.core.config import constants, settings
from habitquest.core.recurrence_parser import DAILY_FALLBACK, default_recurrence_rule, parse_recurrence_rule
from habitquest.core.time_utils import (
    add_days,
    add_months,
    add_years,
    days_between,
    hours_between,
    is_after,
    is_before,
    is_same_day,
    local_now,
    months_between,
    resolve_timezone,
    start_of_day,
    to_local,
)
from habitquest.domain.streak import (
    RecurrenceCheck,
    RecurrenceKind,
    RecurrencePattern,
    StreakReward,
    StreakStatus,
    StreakSummary,
    StreakTier,
    StreakUpdateResult,
    UpcomingDueTask,
)
from habitquest.domain.task import TaskKind, TaskSnapshot
from habitquest.services import xp_calculator


logger = logging.getLogger(__name__)


MILESTONE_TIERS: dict[int, StreakTier] = {
    3: StreakTier.BRONZE,
    7: StreakTier.SILVER,
    14: StreakTier.GOLD,
    30: StreakTier.PLATINUM,
    50: StreakTier.DIAMOND,
    100: StreakTier.MASTER,
    200: StreakTier.GRANDMASTER,
    365: StreakTier.LEGENDARY,
    500: StreakTier.MYTHIC,
    1000: StreakTier.IMMORTAL,
}

TIER_BASE_BONUS_XP: dict[StreakTier, int] = {
    StreakTier.BRONZE: 50,
    StreakTier.SILVER: 100,
    StreakTier.GOLD: 200,
    StreakTier.PLATINUM: 500,
    StreakTier.DIAMOND: 1000,
    StreakTier.MASTER: 2000,
    StreakTier.GRANDMASTER: 5000,
    StreakTier.LEGENDARY: 10000,
    StreakTier.MYTHIC: 20000,
    StreakTier.IMMORTAL: 50000,
}

TIER_ITEM_IDS: dict[StreakTier, list[str]] = {
    StreakTier.BRONZE: ["streak_badge_bronze", "xp_potion_minor"],
    StreakTier.SILVER: ["streak_badge_silver", "xp_potion_minor", "stat_boost_minor"],
    StreakTier.GOLD: ["streak_badge_gold", "xp_potion_major", "stat_boost_minor"],
    StreakTier.PLATINUM: ["streak_badge_platinum", "xp_potion_major", "stat_boost_major"],
    StreakTier.DIAMOND: ["streak_badge_diamond", "xp_potion_epic", "stat_boost_major", "title_dedicated"],
    StreakTier.MASTER: ["streak_badge_master", "xp_potion_epic", "stat_boost_epic", "title_master"],
    StreakTier.GRANDMASTER: [
        "streak_badge_grandmaster",
        "xp_potion_legendary",
        "stat_boost_epic",
        "title_grandmaster",
    ],
    StreakTier.LEGENDARY: ["streak_badge_legendary", "xp_potion_legendary", "stat_boost_legendary", "title_legend"],
    StreakTier.MYTHIC: [
        "streak_badge_mythic",
        "xp_potion_mythic",
        "stat_boost_legendary",
        "title_mythic",
        "special_aura",
    ],
    StreakTier.IMMORTAL: [
        "streak_badge_immortal",
        "xp_potion_immortal",
        "stat_boost_immortal",
        "title_immortal",
        "legendary_aura",
    ],
}

TIER_TITLES: dict[StreakTier, str] = {
    StreakTier.BRONZE: "Getting Started",
    StreakTier.SILVER: "Building Momentum",
    StreakTier.GOLD: "Streak Warrior",
    StreakTier.PLATINUM: "Dedicated Champion",
    StreakTier.DIAMOND: "Elite Performer",
    StreakTier.MASTER: "Streak Master",
    StreakTier.GRANDMASTER: "Grandmaster of Habits",
    StreakTier.LEGENDARY: "Legendary Dedication",
    StreakTier.MYTHIC: "Mythic Consistency",
    StreakTier.IMMORTAL: "Immortal Legend",
}

CENTURY_STREAK_DAYS = 100

STREAK_DISTRIBUTION_BUCKETS = ("0", "1-7", "8-30", "31-100", "100+")


def _grace_period_end(next_due_date: datetime) -> datetime:
    # Elapsed hours, unaffected by a DST change inside the window
    return next_due_date.astimezone(UTC) + timedelta(hours=settings.grace_period_hours)


def _next_due_date(last_completed: datetime, pattern: RecurrencePattern) -> datetime:
    """Next due date after a completion, in the completion's timezone."""
    if pattern.kind == RecurrenceKind.DAILY:
        return start_of_day(add_days(last_completed, pattern.interval))

    if pattern.kind == RecurrenceKind.WEEKLY:
        if pattern.days_of_week:
            candidate = add_days(last_completed, 1)
            while candidate.weekday() not in pattern.days_of_week:
                candidate = add_days(candidate, 1)
            return start_of_day(candidate)
        return start_of_day(add_days(last_completed, 7 * pattern.interval))

    if pattern.kind == RecurrenceKind.MONTHLY:
        return start_of_day(add_months(last_completed, pattern.interval))

    if pattern.is_one_time:
        return add_years(last_completed, constants.ONE_TIME_HORIZON_YEARS)

    return start_of_day(add_days(last_completed, pattern.interval))


def _missed_completions(last_completed: datetime, now: datetime, pattern: RecurrencePattern) -> int:
    """Whole cadence periods skipped since the last completion, beyond the one now due."""
    if pattern.is_one_time:
        return 0

    days_since = days_between(now, last_completed)

    if pattern.kind == RecurrenceKind.DAILY:
        return max(0, days_since // pattern.interval - 1)
    if pattern.kind == RecurrenceKind.WEEKLY:
        return max(0, days_since // (pattern.interval * 7) - 1)
    if pattern.kind == RecurrenceKind.MONTHLY:
        return max(0, months_between(now, last_completed) - 1)
    return 0


def _evaluate_recurrence(pattern: RecurrencePattern, last_completed: datetime | None, now: datetime) -> RecurrenceCheck:
    if last_completed is None:
        return RecurrenceCheck(
            is_due=True,
            next_due_date=now,
            days_since_last_completion=0,
            missed_completions=0,
            is_overdue=False,
            grace_period_active=False,
        )

    next_due_date = _next_due_date(last_completed, pattern)
    grace_period_end = _grace_period_end(next_due_date)

    return RecurrenceCheck(
        is_due=not is_before(now, next_due_date) or is_same_day(now, next_due_date),
        next_due_date=next_due_date,
        days_since_last_completion=max(0, days_between(now, last_completed)),
        missed_completions=_missed_completions(last_completed, now, pattern),
        is_overdue=is_after(now, grace_period_end),
        grace_period_active=is_after(now, next_due_date) and is_before(now, grace_period_end),
    )


def _recurrence_check(rule: str, last_completed: datetime | None, now: datetime, tz: tzinfo) -> RecurrenceCheck:
    local_last = to_local(last_completed, tz) if last_completed is not None else None
    try:
        return _evaluate_recurrence(parse_recurrence_rule(rule), local_last, now)
    except (ArithmeticError, ValueError):
        logger.exception("Failed to evaluate recurrence rule %r, falling back to daily", rule)
        return _evaluate_recurrence(DAILY_FALLBACK, local_last, now)


def calculate_recurrence(
    rule: str,
    last_completed_at: datetime | None,
    *,
    timezone: str | None = None,
    now: datetime | None = None,
) -> RecurrenceCheck:
    """Evaluate a recurrence rule against the last completion.

    Never raises for malformed rules: unrecognised rules and rules that fail
    to evaluate (e.g. "EVERY 0 DAYS") are treated as DAILY.

    Args:
        rule: Recurrence rule string
        last_completed_at: Last completion instant, or None if never completed
        timezone: IANA timezone of the user (defaults to settings.default_timezone)
        now: Current instant (defaults to the wall clock)

    Returns:
        RecurrenceCheck with due/overdue/grace flags and the next due date
    """
    tz = resolve_timezone(timezone)
    return _recurrence_check(rule, last_completed_at, local_now(tz, now), tz)


def _determine_active(kind: TaskKind, days_since: int, check: RecurrenceCheck) -> bool:
    if kind in (TaskKind.DAILY, TaskKind.HABIT):
        return days_since <= 1 and not check.is_overdue
    if kind == TaskKind.TODO:
        return False
    return not check.is_overdue


def _determine_broken(kind: TaskKind, days_since: int, check: RecurrenceCheck) -> bool:
    if check.grace_period_active:
        return False
    if kind in (TaskKind.DAILY, TaskKind.HABIT):
        return check.is_overdue or days_since > 1
    if kind == TaskKind.TODO:
        return False
    return check.is_overdue


def _determine_eligible(kind: TaskKind, last_completed: datetime, now: datetime, check: RecurrenceCheck) -> bool:
    if kind in (TaskKind.DAILY, TaskKind.HABIT):
        # Once per calendar day, unless the next cycle is already due
        return not is_same_day(now, last_completed) or check.is_due
    if kind == TaskKind.TODO:
        return False
    return check.is_due


def _grace_period_remaining_hours(next_due_date: datetime, now: datetime) -> float:
    if not is_after(now, next_due_date):
        return 0.0
    grace_period_end = _grace_period_end(next_due_date)
    if not is_before(now, grace_period_end):
        return 0.0
    return hours_between(grace_period_end, now)


def check_streak_status(
    task: TaskSnapshot,
    *,
    timezone: str | None = None,
    now: datetime | None = None,
) -> StreakStatus:
    """Compute the current streak state of a task.

    Args:
        task: Task snapshot
        timezone: IANA timezone of the user (defaults to settings.default_timezone)
        now: Current instant (defaults to the wall clock)

    Returns:
        StreakStatus for the task at ``now``
    """
    tz = resolve_timezone(timezone)
    current = local_now(tz, now)

    if task.last_completed_at is None:
        return StreakStatus(
            is_active=False,
            current_streak=0,
            days_since_last_completion=0,
            is_eligible_for_update=True,
            next_due_date=None,
            streak_broken=False,
            grace_period_remaining_hours=0.0,
        )

    last_completed = to_local(task.last_completed_at, tz)
    rule = task.recurrence_rule or default_recurrence_rule(task.kind)
    check = _recurrence_check(rule, last_completed, current, tz)
    days_since = max(0, days_between(current, last_completed))

    return StreakStatus(
        is_active=_determine_active(task.kind, days_since, check),
        current_streak=task.streak_count,
        days_since_last_completion=days_since,
        is_eligible_for_update=_determine_eligible(task.kind, last_completed, current, check),
        next_due_date=check.next_due_date,
        streak_broken=_determine_broken(task.kind, days_since, check),
        grace_period_remaining_hours=_grace_period_remaining_hours(check.next_due_date, current),
    )


def get_streak_rewards(streak_count: int) -> StreakReward | None:
    """Reward for reaching a milestone streak, or None if ``streak_count`` is not a milestone."""
    tier = MILESTONE_TIERS.get(streak_count)
    if tier is None:
        return None

    achievement_ids = [f"STREAK_{streak_count}_DAYS"]
    if tier == StreakTier.LEGENDARY:
        achievement_ids.append("YEAR_STREAK_LEGEND")
    if tier == StreakTier.IMMORTAL:
        achievement_ids.append("ULTIMATE_DEDICATION")
    if streak_count >= CENTURY_STREAK_DAYS:
        achievement_ids.append("CENTURY_STREAK")

    return StreakReward(
        milestone_day=streak_count,
        tier=tier,
        bonus_xp=math.floor(TIER_BASE_BONUS_XP[tier] * math.log10(streak_count + 1)),
        bonus_item_ids=list(TIER_ITEM_IDS[tier]),
        multiplier=xp_calculator.calculate_streak_multiplier(streak_count),
        achievement_ids=achievement_ids,
        title=TIER_TITLES[tier],
        description=(
            f"Congratulations! You've maintained a {streak_count}-day streak, "
            f"reaching {tier} tier. Your dedication is truly remarkable!"
        ),
    )


def evaluate_completion(
    task: TaskSnapshot,
    *,
    timezone: str | None = None,
    now: datetime | None = None,
) -> StreakUpdateResult:
    """Decide what a completion at ``now`` does to the task's streak.

    - First completion ever starts the streak at 1
    - On time or inside the grace window increments it
    - After the grace window resets it to 1
    - A completion that is not eligible (same period, finished todo) leaves it unchanged
    """
    status = check_streak_status(task, timezone=timezone, now=now)
    previous_streak = task.streak_count
    new_streak = previous_streak
    streak_incremented = False
    streak_reset = False
    grace_period_used = False
    reward = None

    if not status.is_eligible_for_update:
        logger.info("Task %s already completed for this period", task.id)
    elif task.last_completed_at is None:
        # A first completion always starts the streak at one, whatever the status says
        new_streak = 1
        streak_incremented = True
        reward = get_streak_rewards(new_streak)
    elif status.is_active or status.grace_period_remaining_hours > 0:
        new_streak = previous_streak + 1
        streak_incremented = True
        grace_period_used = 0 < status.grace_period_remaining_hours < settings.grace_period_hours
        reward = get_streak_rewards(new_streak)
    elif status.streak_broken:
        new_streak = 1
        streak_reset = True

    return StreakUpdateResult(
        previous_streak=previous_streak,
        new_streak=new_streak,
        streak_incremented=streak_incremented,
        streak_reset=streak_reset,
        reward=reward,
        status_changed=new_streak != previous_streak,
        grace_period_used=grace_period_used,
    )


def _distribution_bucket(streak_count: int) -> str:
    if streak_count == 0:
        return "0"
    if streak_count <= 7:  # noqa: PLR2004
        return "1-7"
    if streak_count <= 30:  # noqa: PLR2004
        return "8-30"
    if streak_count <= 100:  # noqa: PLR2004
        return "31-100"
    return "100+"


def summarize_streaks(
    tasks: Iterable[TaskSnapshot],
    *,
    timezone: str | None = None,
    now: datetime | None = None,
    horizon_hours: int = constants.UPCOMING_DUE_HORIZON_HOURS,
) -> StreakSummary:
    """Aggregate streak statistics and upcoming due dates for a set of tasks."""
    tz = resolve_timezone(timezone)
    current = local_now(tz, now)
    task_list = list(tasks)

    streak_counts = [task.streak_count for task in task_list]
    total_streak_days = sum(streak_counts)
    average_streak = round(total_streak_days / len(task_list), 2) if task_list else 0.0

    distribution = dict.fromkeys(STREAK_DISTRIBUTION_BUCKETS, 0)
    for count in streak_counts:
        distribution[_distribution_bucket(count)] += 1

    active_streaks = 0
    upcoming: list[UpcomingDueTask] = []
    for task in task_list:
        if check_streak_status(task, timezone=timezone, now=current).is_active:
            active_streaks += 1

        check = _recurrence_check(
            task.recurrence_rule or default_recurrence_rule(task.kind), task.last_completed_at, current, tz
        )
        hours_until_due = math.trunc(hours_between(check.next_due_date, current))
        if 0 <= hours_until_due <= horizon_hours:
            upcoming.append(
                UpcomingDueTask(
                    task_id=task.id,
                    title=task.title,
                    next_due_date=check.next_due_date,
                    hours_until_due=hours_until_due,
                )
            )

    upcoming.sort(key=lambda item: item.hours_until_due)

    return StreakSummary(
        total_active_streaks=active_streaks,
        longest_streak=max(streak_counts, default=0),
        total_streak_days=total_streak_days,
        average_streak=average_streak,
        streak_distribution=distribution,
        upcoming_due_tasks=upcoming,
    )


def find_expired_streaks(
    tasks: Iterable[TaskSnapshot],
    *,
    timezone: str | None = None,
    now: datetime | None = None,
) -> list[TaskSnapshot]:
    """Active tasks whose positive streak is broken with no grace time left."""
    expired = []
    for task in tasks:
        if not task.is_active or task.streak_count <= 0:
            continue
        status = check_streak_status(task, timezone=timezone, now=now)
        if status.streak_broken and status.grace_period_remaining_hours == 0:
            expired.append(task)
    return expired
