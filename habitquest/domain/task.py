"""Task snapshot model and enums."""

from datetime import datetime
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field


class TaskKind(StrEnum):
    """How a task recurs."""

    DAILY = "DAILY"
    HABIT = "HABIT"
    TODO = "TODO"  # One-shot, never carries an active streak


class DifficultyTier(StrEnum):
    """Task difficulty, which sets the base XP award."""

    EASY = "EASY"
    MEDIUM = "MEDIUM"
    HARD = "HARD"


class TaskSnapshot(BaseModel):
    """Read-only view of a task as supplied by the task-management layer.

    The engine never mutates a snapshot; it returns proposed values that the
    caller persists.
    """

    model_config = ConfigDict(frozen=True)

    id: str | None = Field(default=None, description="Task ID, needed only by the orchestration layer")
    user_id: str | None = Field(default=None, description="Owner user ID")
    title: str = Field(default="", description="Task title")
    kind: TaskKind = Field(..., description="DAILY, HABIT or TODO")
    difficulty: DifficultyTier = Field(..., description="Difficulty tier")
    category: str = Field(default="", description="Free-form category (e.g. 'fitness')")
    streak_count: int = Field(default=0, ge=0, description="Consecutive on-cadence completions")
    last_completed_at: datetime | None = Field(default=None, description="Last completion instant")
    recurrence_rule: str = Field(default="", description="Recurrence rule (e.g. 'DAILY', 'EVERY 2 DAYS')")
    is_active: bool = Field(default=True, description="Whether the task is still tracked")
