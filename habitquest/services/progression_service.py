"""Progression aggregation: level-up consequences and stat point accounting.

Stat points are never stored. A character earns a fixed starting pool plus
a few points per level gained, and whatever is not allocated to a stat yet
is available:

    available = 25 + 2 * (level - 1) - sum(stats)
"""

import logging
from collections.abc import Iterable, Mapping

from habitquest.core.config import constants
from habitquest.core.errors import InputOutOfRangeError, InsufficientStatPointsError, StatCeilingExceededError
from habitquest.domain.character import Character, ExperienceResult, LevelUpResult
from habitquest.domain.progression import StatBonuses, StatName, UserStats
from habitquest.services import xp_calculator


logger = logging.getLogger(__name__)


# Level -> feature unlocked on reaching it
LEVEL_UNLOCKS: dict[int, str] = {
    5: "Advanced Task Categories",
    10: "Story Branching Choices",
    15: "Legendary Equipment",
    20: "Guild Features",
    25: "Epic Quests",
    30: "Prestige System",
}

STARTING_STAT_POINTS = constants.BASE_STAT_VALUE * len(StatName)


def get_unlocked_features(old_level: int, new_level: int) -> list[str]:
    """Features unlocked by going from ``old_level`` to ``new_level``, in level order."""
    return [feature for level, feature in sorted(LEVEL_UNLOCKS.items()) if old_level < level <= new_level]


def calculate_available_stat_points(level: int, stats: UserStats) -> int:
    """Stat points earned up to ``level`` and not yet allocated.

    Negative when stat bonuses from completions have pushed the stats past
    the earned pool.
    """
    earned = STARTING_STAT_POINTS + constants.STAT_POINTS_PER_LEVEL * (level - 1)
    return earned - stats.total()


def handle_level_up(old_level: int, new_level: int, stats: UserStats) -> LevelUpResult:
    """Consequences of moving from ``old_level`` to ``new_level``."""
    levels_gained = max(new_level - old_level, 0)
    return LevelUpResult(
        old_level=old_level,
        new_level=new_level,
        stat_points_gained=levels_gained * constants.STAT_POINTS_PER_LEVEL,
        new_features_unlocked=get_unlocked_features(old_level, new_level),
        total_stat_points=calculate_available_stat_points(new_level, stats),
    )


def _parse_stat(name: str) -> StatName:
    try:
        return StatName(name.strip().lower())
    except ValueError:
        msg = f"Unknown stat: {name}"
        raise InputOutOfRangeError(msg) from None


def apply_experience(
    character: Character,
    xp: int,
    *,
    source: str = "task_completion",
    stat_bonuses: Mapping[str, int] | None = None,
) -> ExperienceResult:
    """Merge an XP gain and its stat bonuses into a character.

    Stat bonuses are capped at the stat ceiling. The character passed in is
    left untouched; the updated copy is returned in the result.

    Args:
        character: Character before the gain
        xp: Experience gained (non-negative)
        source: Where the XP came from, for logging
        stat_bonuses: Partial stat -> points map to add

    Returns:
        ExperienceResult with the updated character and the level-up, if any

    Raises:
        InputOutOfRangeError: If ``xp`` or any bonus is negative
    """
    if xp < 0:
        msg = f"Experience gained must be non-negative, got {xp}"
        raise InputOutOfRangeError(msg)

    bonuses: StatBonuses = {}
    for name, points in (stat_bonuses or {}).items():
        if points < 0:
            msg = f"Stat bonus must be non-negative, got {points} for {name}"
            raise InputOutOfRangeError(msg)
        bonuses[_parse_stat(name)] = points

    boosted = xp_calculator.apply_stat_bonuses(character.stats, bonuses)
    new_stats = UserStats(**{stat: min(getattr(boosted, stat), constants.STAT_CEILING) for stat in StatName})

    total_xp = character.total_xp + xp
    old_level = xp_calculator.calculate_level(character.total_xp)
    new_level = xp_calculator.calculate_level(total_xp)

    level_up = None
    if new_level > old_level:
        level_up = handle_level_up(old_level, new_level, new_stats)
        logger.info(
            "Character %s leveled up from %d to %d (%s)", character.id, old_level, new_level, source
        )

    updated = character.model_copy(update={"total_xp": total_xp, "level": new_level, "stats": new_stats})

    return ExperienceResult(
        character=updated,
        xp_gained=xp,
        total_xp=total_xp,
        stat_bonuses=bonuses,
        source=source,
        level_up=level_up,
    )


def allocate_stat_points(level: int, stats: UserStats, allocation: Mapping[str, int]) -> UserStats:
    """Spend available stat points.

    All checks run before anything is applied, so a rejected allocation
    leaves the caller's stats as they were.

    Args:
        level: Character level, which determines the earned pool
        stats: Current stats
        allocation: Stat name -> points to add

    Returns:
        The new stats

    Raises:
        InputOutOfRangeError: If an amount is negative or a stat name is unknown
        InsufficientStatPointsError: If the allocation spends more than is available
        StatCeilingExceededError: If a stat would go above the ceiling
    """
    requested: StatBonuses = {}
    for name, points in allocation.items():
        if points < 0:
            msg = f"Cannot allocate a negative amount ({points}) to {name}"
            raise InputOutOfRangeError(msg)
        stat = _parse_stat(name)
        requested[stat] = requested.get(stat, 0) + points

    total_requested = sum(requested.values())
    available = calculate_available_stat_points(level, stats)
    if total_requested > available:
        raise InsufficientStatPointsError(available=available, requested=total_requested)

    for stat, points in requested.items():
        new_value = getattr(stats, stat) + points
        if new_value > constants.STAT_CEILING:
            raise StatCeilingExceededError(stat=stat, value=new_value, ceiling=constants.STAT_CEILING)

    return xp_calculator.apply_stat_bonuses(stats, requested)


def calculate_effective_stats(stats: UserStats, equipment_bonuses: Iterable[Mapping[str, int]]) -> UserStats:
    """Allocated stats plus the flat bonuses of every equipped item."""
    effective = stats
    for bonuses in equipment_bonuses:
        effective = xp_calculator.apply_stat_bonuses(effective, bonuses)
    return effective
