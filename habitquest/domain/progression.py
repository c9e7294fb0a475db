"""Experience, level and stat value types."""

from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field, model_validator


class StatName(StrEnum):
    """Character attributes."""

    STRENGTH = "strength"
    WISDOM = "wisdom"
    AGILITY = "agility"
    ENDURANCE = "endurance"
    LUCK = "luck"


# Partial map of stat -> points; absent keys mean zero
StatBonuses = dict[StatName, int]


class UserStats(BaseModel):
    """Allocated character stats."""

    model_config = ConfigDict(frozen=True)

    strength: int = Field(default=5, ge=0)
    wisdom: int = Field(default=5, ge=0)
    agility: int = Field(default=5, ge=0)
    endurance: int = Field(default=5, ge=0)
    luck: int = Field(default=5, ge=0)

    def total(self) -> int:
        """Sum of all stats."""
        return sum(getattr(self, stat) for stat in StatName)


class XPAward(BaseModel):
    """Result of a single task completion's XP calculation."""

    model_config = ConfigDict(frozen=True)

    base_xp: int
    streak_multiplier: float = Field(..., ge=1.0, le=2.0)
    final_xp: int
    total_xp_after: int
    level_before: int = Field(..., ge=1)
    level_after: int = Field(..., ge=1)
    leveled_up: bool
    xp_for_next_level: int
    stat_bonuses: StatBonuses = Field(default_factory=dict)

    @model_validator(mode="after")
    def _check_levels(self) -> "XPAward":
        if self.level_after < self.level_before:
            raise ValueError("level_after cannot be lower than level_before")
        if self.leveled_up != (self.level_after > self.level_before):
            raise ValueError("leveled_up must match level change")
        return self


class LevelProgressInfo(BaseModel):
    """Where a character sits between two level thresholds."""

    model_config = ConfigDict(frozen=True)

    current_level: int
    xp_in_current_level: int
    xp_required_for_current_level: int
    xp_required_for_next_level: int
    progress_to_next_level: float = Field(..., ge=0, le=100)


class StreakMilestoneInfo(BaseModel):
    """Outlook for the next streak multiplier step."""

    model_config = ConfigDict(frozen=True)

    current_multiplier: float
    next_milestone: int
    streaks_to_next_milestone: int
    next_multiplier: float
    is_at_max_multiplier: bool
