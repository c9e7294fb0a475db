"""Recurrence and streak value types."""

from datetime import datetime
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field, model_validator


class RecurrenceKind(StrEnum):
    """Cadence family of a parsed recurrence rule."""

    DAILY = "DAILY"
    WEEKLY = "WEEKLY"
    MONTHLY = "MONTHLY"
    CUSTOM = "CUSTOM"


class RecurrencePattern(BaseModel):
    """Parsed recurrence rule.

    ``days_of_week`` uses ``date.weekday()`` numbering (Monday=0 .. Sunday=6)
    and is only set for WEEKLY patterns restricted to particular days.
    A CUSTOM pattern with ``interval == 0`` never recurs.
    """

    model_config = ConfigDict(frozen=True)

    kind: RecurrenceKind
    interval: int = Field(..., ge=0)
    days_of_week: frozenset[int] | None = None

    @property
    def is_one_time(self) -> bool:
        return self.kind == RecurrenceKind.CUSTOM and self.interval == 0


class RecurrenceCheck(BaseModel):
    """Where a task stands relative to its next due date."""

    model_config = ConfigDict(frozen=True)

    is_due: bool
    next_due_date: datetime
    days_since_last_completion: int = Field(..., ge=0)
    missed_completions: int = Field(..., ge=0)
    is_overdue: bool
    grace_period_active: bool


class StreakStatus(BaseModel):
    """Computed streak state of a task at a given instant."""

    model_config = ConfigDict(frozen=True)

    is_active: bool
    current_streak: int = Field(..., ge=0)
    days_since_last_completion: int = Field(default=0, ge=0)
    is_eligible_for_update: bool
    next_due_date: datetime | None = None
    streak_broken: bool
    grace_period_remaining_hours: float = Field(default=0.0, ge=0)

    @model_validator(mode="after")
    def _grace_excludes_broken(self) -> "StreakStatus":
        if self.grace_period_remaining_hours > 0 and self.streak_broken:
            raise ValueError("a streak inside its grace period cannot be broken")
        return self


class StreakTier(StrEnum):
    """Reward bracket attached to a streak milestone."""

    BRONZE = "bronze"
    SILVER = "silver"
    GOLD = "gold"
    PLATINUM = "platinum"
    DIAMOND = "diamond"
    MASTER = "master"
    GRANDMASTER = "grandmaster"
    LEGENDARY = "legendary"
    MYTHIC = "mythic"
    IMMORTAL = "immortal"


class StreakReward(BaseModel):
    """One-time reward for reaching a milestone streak."""

    model_config = ConfigDict(frozen=True)

    milestone_day: int
    tier: StreakTier
    bonus_xp: int
    bonus_item_ids: list[str]
    multiplier: float
    achievement_ids: list[str]
    title: str
    description: str


class StreakUpdateResult(BaseModel):
    """Proposed streak change for one completion."""

    model_config = ConfigDict(frozen=True)

    previous_streak: int
    new_streak: int
    streak_incremented: bool
    streak_reset: bool
    reward: StreakReward | None = None
    status_changed: bool
    grace_period_used: bool


class UpcomingDueTask(BaseModel):
    """A task coming due soon."""

    task_id: str | None
    title: str
    next_due_date: datetime
    hours_until_due: int


class StreakSummary(BaseModel):
    """Aggregate streak statistics across a user's tasks."""

    total_active_streaks: int
    longest_streak: int
    total_streak_days: int
    average_streak: float
    streak_distribution: dict[str, int]
    upcoming_due_tasks: list[UpcomingDueTask]
