"""XP, level and stat calculations.

Everything here is pure and deterministic: no clock, no randomness, no I/O.

Leveling curve:
- Level L starts at (L - 1)^2 * 100 total XP
- level = floor(sqrt(total_xp / 100)) + 1, negative XP counts as 0

XP award:
- Base XP by difficulty (EASY 10, MEDIUM 25, HARD 50)
- Multiplied by 1.1 for every completed 5-day streak interval, capped at 2.0
- Floored to an integer
- One stat point of the category's stat per 25 XP gained
"""

import math
from collections.abc import Mapping

from habitquest.core.config import constants
from habitquest.core.errors import InputOutOfRangeError
from habitquest.domain.progression import (
    LevelProgressInfo,
    StatBonuses,
    StatName,
    StreakMilestoneInfo,
    UserStats,
    XPAward,
)
from habitquest.domain.task import DifficultyTier


BASE_XP_VALUES: dict[DifficultyTier, int] = {
    DifficultyTier.EASY: 10,
    DifficultyTier.MEDIUM: 25,
    DifficultyTier.HARD: 50,
}

TASK_CATEGORY_STATS: dict[str, StatName] = {
    "fitness": StatName.STRENGTH,
    "learning": StatName.WISDOM,
    "creative": StatName.WISDOM,
    "social": StatName.AGILITY,
    "productivity": StatName.ENDURANCE,
    "mindfulness": StatName.WISDOM,
    "health": StatName.ENDURANCE,
    "skills": StatName.WISDOM,
    "work": StatName.ENDURANCE,
    "hobby": StatName.AGILITY,
}


def get_base_xp(difficulty: DifficultyTier) -> int:
    """Base XP for a difficulty tier.

    Raises:
        ValueError: If ``difficulty`` is not a known tier
    """
    return BASE_XP_VALUES[DifficultyTier(difficulty)]


def calculate_streak_multiplier(streak_count: int) -> float:
    """XP multiplier for a streak: 1.1 per completed 5-day interval, capped at 2.0.

    Streaks 5-9 share the same multiplier (1.1), 10-14 yield 1.21, and so on.
    """
    if streak_count < constants.STREAK_MULTIPLIER_INTERVAL:
        return 1.0

    intervals = streak_count // constants.STREAK_MULTIPLIER_INTERVAL
    multiplier = math.pow(constants.STREAK_MULTIPLIER_RATE, intervals)
    return min(multiplier, constants.MAX_STREAK_MULTIPLIER)


def calculate_level(total_xp: int) -> int:
    """Level reached with ``total_xp`` experience."""
    return math.isqrt(int(max(total_xp, 0)) // constants.LEVEL_XP_BASE) + 1


def calculate_xp_required_for_level(level: int) -> int:
    """Absolute total XP at which ``level`` starts."""
    if level <= 1:
        return 0
    return (level - 1) ** 2 * constants.LEVEL_XP_BASE


def calculate_xp_for_next_level(current_total_xp: int) -> int:
    """Additional XP needed to reach the next level."""
    next_level = calculate_level(current_total_xp) + 1
    return calculate_xp_required_for_level(next_level) - current_total_xp


def calculate_stat_bonuses(category: str, xp_gained: int) -> StatBonuses:
    """Stat points earned by gaining ``xp_gained`` in ``category``.

    Unknown categories earn nothing; a zero bonus is omitted entirely.
    """
    stat = TASK_CATEGORY_STATS.get(category.strip().lower())
    if stat is None:
        return {}

    bonus_points = xp_gained // constants.XP_PER_STAT_POINT
    if bonus_points <= 0:
        return {}

    return {stat: bonus_points}


def calculate_task_xp(
    difficulty: DifficultyTier,
    streak_count: int,
    current_total_xp: int,
    category: str,
) -> XPAward:
    """Calculate the XP award for one task completion.

    Args:
        difficulty: Task difficulty tier
        streak_count: Streak value the completion is credited with
        current_total_xp: Character's total XP before the completion
        category: Task category, used for stat bonuses

    Returns:
        XPAward with the award, the new total and the level change
    """
    base_xp = get_base_xp(difficulty)
    streak_multiplier = calculate_streak_multiplier(streak_count)
    final_xp = math.floor(base_xp * streak_multiplier)

    level_before = calculate_level(current_total_xp)
    total_xp_after = current_total_xp + final_xp
    level_after = calculate_level(total_xp_after)

    return XPAward(
        base_xp=base_xp,
        streak_multiplier=streak_multiplier,
        final_xp=final_xp,
        total_xp_after=total_xp_after,
        level_before=level_before,
        level_after=level_after,
        leveled_up=level_after > level_before,
        xp_for_next_level=calculate_xp_for_next_level(total_xp_after),
        stat_bonuses=calculate_stat_bonuses(category, final_xp),
    )


def apply_stat_bonuses(current_stats: UserStats, bonuses: Mapping[str, int]) -> UserStats:
    """Add stat bonuses to a set of stats; absent keys add zero.

    Negative bonuses (cursed equipment, penalties) floor each stat at zero.
    """
    return UserStats(
        **{stat: max(getattr(current_stats, stat) + bonuses.get(stat, 0), 0) for stat in StatName}
    )


def simulate_xp_gain(
    difficulty: DifficultyTier,
    start_streak: int,
    start_xp: int,
    category: str,
    completions: int = 1,
) -> list[XPAward]:
    """Preview ``completions`` consecutive on-time completions.

    Each step feeds the previous total XP forward and increments the streak
    by one. This is an idealised projection: it does not check recurrence,
    grace periods or eligibility.
    """
    results: list[XPAward] = []
    running_xp = start_xp
    running_streak = start_streak

    for _ in range(completions):
        award = calculate_task_xp(difficulty, running_streak, running_xp, category)
        results.append(award)
        running_xp = award.total_xp_after
        running_streak += 1

    return results


def get_level_progression_info(total_xp: int) -> LevelProgressInfo:
    """Progress of ``total_xp`` between the current and next level thresholds."""
    current_level = calculate_level(total_xp)
    xp_required_for_current_level = calculate_xp_required_for_level(current_level)
    xp_required_for_next_level = calculate_xp_required_for_level(current_level + 1)
    xp_in_current_level = total_xp - xp_required_for_current_level
    level_span = xp_required_for_next_level - xp_required_for_current_level

    progress = (xp_in_current_level / level_span) * 100 if level_span > 0 else 100.0

    return LevelProgressInfo(
        current_level=current_level,
        xp_in_current_level=xp_in_current_level,
        xp_required_for_current_level=xp_required_for_current_level,
        xp_required_for_next_level=xp_required_for_next_level,
        progress_to_next_level=min(max(progress, 0.0), 100.0),
    )


def get_streak_milestones(current_streak: int) -> StreakMilestoneInfo:
    """Next streak multiplier step and how far away it is."""
    current_multiplier = calculate_streak_multiplier(current_streak)

    if current_multiplier >= constants.MAX_STREAK_MULTIPLIER:
        return StreakMilestoneInfo(
            current_multiplier=current_multiplier,
            next_milestone=current_streak,
            streaks_to_next_milestone=0,
            next_multiplier=current_multiplier,
            is_at_max_multiplier=True,
        )

    interval = constants.STREAK_MULTIPLIER_INTERVAL
    next_milestone = math.ceil(current_streak / interval) * interval
    next_multiplier = calculate_streak_multiplier(next_milestone)

    return StreakMilestoneInfo(
        current_multiplier=current_multiplier,
        next_milestone=next_milestone,
        streaks_to_next_milestone=next_milestone - current_streak,
        next_multiplier=min(next_multiplier, constants.MAX_STREAK_MULTIPLIER),
        is_at_max_multiplier=False,
    )


def calculate_stats_from_categories(category_completions: Mapping[str, int]) -> UserStats:
    """Rebuild stats from completion counts per category.

    Starts from the base value for every stat and adds one point of the
    category's stat per five completions.
    """
    totals = dict.fromkeys(StatName, constants.BASE_STAT_VALUE)

    for category, completions in category_completions.items():
        stat = TASK_CATEGORY_STATS.get(category.strip().lower())
        if stat is not None and completions > 0:
            totals[stat] += completions // constants.COMPLETIONS_PER_STAT_POINT

    return UserStats(**totals)


def calculate_event_bonus(base_xp: int, event_multiplier: float = constants.DEFAULT_EVENT_MULTIPLIER) -> int:
    """XP for a special event or achievement, floored.

    Raises:
        InputOutOfRangeError: If ``event_multiplier`` is negative
    """
    if event_multiplier < 0:
        msg = f"Event multiplier must be non-negative, got {event_multiplier}"
        raise InputOutOfRangeError(msg)
    return math.floor(base_xp * event_multiplier)
