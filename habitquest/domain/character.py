"""Character record and aggregate progression results."""

from pydantic import BaseModel, Field

from habitquest.domain.progression import LevelProgressInfo, StatBonuses, StreakMilestoneInfo, UserStats, XPAward
from habitquest.domain.streak import StreakReward, StreakUpdateResult


class Character(BaseModel):
    """A user's persistent progression totals, as read from and written to the store."""

    id: str = Field(..., description="User ID")
    username: str = Field(default="", description="Display name")
    total_xp: int = Field(default=0, ge=0, description="Lifetime experience")
    level: int = Field(default=1, ge=1, description="Level derived from total_xp")
    stats: UserStats = Field(default_factory=UserStats, description="Allocated stats")
    current_streak: int = Field(default=0, ge=0, description="Overall streak across tasks")
    equipment_bonuses: list[StatBonuses] = Field(
        default_factory=list, description="Flat stat bonuses of equipped items"
    )


class LevelUpResult(BaseModel):
    """Consequences of crossing one or more level thresholds."""

    old_level: int
    new_level: int
    stat_points_gained: int
    new_features_unlocked: list[str]
    total_stat_points: int


class ExperienceResult(BaseModel):
    """Outcome of merging an XP gain into a character."""

    character: Character
    xp_gained: int
    total_xp: int
    stat_bonuses: StatBonuses
    source: str
    level_up: LevelUpResult | None = None


class TaskCompletionResult(BaseModel):
    """Everything a single task completion produced.

    ``award`` is None when the completion was not eligible to count (already
    completed this period, or a finished todo).
    """

    task_id: str
    streak: StreakUpdateResult
    award: XPAward | None = None
    reward: StreakReward | None = None
    xp_gained: int
    total_xp: int
    stats: UserStats
    level_up: LevelUpResult | None = None


class CharacterSheet(BaseModel):
    """Read model combining a character's totals with derived progression info."""

    character: Character
    stats: UserStats
    effective_stats: UserStats
    available_stat_points: int
    xp_for_next_level: int
    progression: LevelProgressInfo
    streak_outlook: StreakMilestoneInfo
