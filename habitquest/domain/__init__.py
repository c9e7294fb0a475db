"""Domain models and DTOs."""

from habitquest.domain.character import (
    Character,
    CharacterSheet,
    ExperienceResult,
    LevelUpResult,
    TaskCompletionResult,
)
from habitquest.domain.progression import (
    LevelProgressInfo,
    StatBonuses,
    StatName,
    StreakMilestoneInfo,
    UserStats,
    XPAward,
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
from habitquest.domain.task import DifficultyTier, TaskKind, TaskSnapshot


__all__ = [
    "Character",
    "CharacterSheet",
    "DifficultyTier",
    "ExperienceResult",
    "LevelProgressInfo",
    "LevelUpResult",
    "RecurrenceCheck",
    "RecurrenceKind",
    "RecurrencePattern",
    "StatBonuses",
    "StatName",
    "StreakMilestoneInfo",
    "StreakReward",
    "StreakStatus",
    "StreakSummary",
    "StreakTier",
    "StreakUpdateResult",
    "TaskCompletionResult",
    "TaskKind",
    "TaskSnapshot",
    "UpcomingDueTask",
    "UserStats",
    "XPAward",
]
