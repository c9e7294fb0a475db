"""Completion workflow: fetch snapshots, run the engine, write results back."""

import logging
from collections.abc import Mapping
from datetime import UTC, datetime

from habitquest.core.errors import TaskNotFoundError, UserNotFoundError
from habitquest.core.logging import log_progression_event, span
from habitquest.core.store import ProgressionStore
from habitquest.domain.character import Character, CharacterSheet, TaskCompletionResult
from habitquest.domain.progression import UserStats, XPAward
from habitquest.domain.streak import StreakStatus, StreakSummary, StreakUpdateResult
from habitquest.domain.task import TaskSnapshot
from habitquest.services import progression_service, streak_state_machine, xp_calculator


logger = logging.getLogger(__name__)


async def _require_task(store: ProgressionStore, task_id: str, user_id: str | None = None) -> TaskSnapshot:
    task = await store.get_task(task_id)
    if task is None or (user_id is not None and task.user_id != user_id):
        raise TaskNotFoundError(task_id)
    return task


async def _require_character(store: ProgressionStore, user_id: str) -> Character:
    character = await store.get_character(user_id)
    if character is None:
        raise UserNotFoundError(user_id)
    return character


async def _longest_active_streak(store: ProgressionStore, user_id: str) -> int:
    tasks = await store.list_user_tasks(user_id)
    return max((task.streak_count for task in tasks), default=0)


async def complete_task(
    *,
    store: ProgressionStore,
    task_id: str,
    user_id: str,
    timezone: str | None = None,
    completed_at: datetime | None = None,
) -> TaskCompletionResult:
    """Record a task completion and credit the character.

    The streak is decided first; XP is then computed with the resulting
    streak and merged into the character together with any milestone
    bonus XP. A completion that is not eligible (already done this period)
    changes nothing.

    Args:
        store: Persistence for tasks and characters
        task_id: Task being completed
        user_id: Owner of the task
        timezone: User's IANA timezone
        completed_at: Completion instant (defaults to now)

    Returns:
        TaskCompletionResult with the streak change, XP award and level-up

    Raises:
        TaskNotFoundError: If the task does not exist or belongs to another user
        UserNotFoundError: If the user has no character
    """
    with span("completion_service.complete_task", user_id=user_id, task_id=task_id):
        task = await _require_task(store, task_id, user_id)
        character = await _require_character(store, user_id)
        completed_at = completed_at or datetime.now(UTC)

        streak = streak_state_machine.evaluate_completion(task, timezone=timezone, now=completed_at)

        if not (streak.streak_incremented or streak.streak_reset):
            logger.info("Completion of task %s not counted: already completed for this period", task_id)
            return TaskCompletionResult(
                task_id=task_id,
                streak=streak,
                xp_gained=0,
                total_xp=character.total_xp,
                stats=character.stats,
            )

        award = xp_calculator.calculate_task_xp(
            task.difficulty, streak.new_streak, character.total_xp, task.category
        )
        bonus_xp = streak.reward.bonus_xp if streak.reward else 0

        experience = progression_service.apply_experience(
            character,
            award.final_xp + bonus_xp,
            source=f"task:{task_id}",
            stat_bonuses=award.stat_bonuses,
        )

        await store.save_task_progress(task_id, streak_count=streak.new_streak, last_completed_at=completed_at)

        updated = experience.character.model_copy(
            update={"current_streak": await _longest_active_streak(store, user_id)}
        )
        await store.save_character(updated)

        log_progression_event(
            logger,
            "info",
            "Task completed",
            user_id=user_id,
            task_id=task_id,
            new_streak=streak.new_streak,
            xp_gained=experience.xp_gained,
            total_xp=experience.total_xp,
        )
        if streak.reward:
            logger.info("User %s reached a %d-day %s streak", user_id, streak.new_streak, streak.reward.tier)

        return TaskCompletionResult(
            task_id=task_id,
            streak=streak,
            award=award,
            reward=streak.reward,
            xp_gained=experience.xp_gained,
            total_xp=experience.total_xp,
            stats=updated.stats,
            level_up=experience.level_up,
        )


async def update_streak(
    *,
    store: ProgressionStore,
    task_id: str,
    timezone: str | None = None,
    completed_at: datetime | None = None,
) -> StreakUpdateResult:
    """Apply a completion to a task's streak without touching the character.

    Raises:
        TaskNotFoundError: If the task does not exist
    """
    with span("completion_service.update_streak", task_id=task_id):
        task = await _require_task(store, task_id)
        completed_at = completed_at or datetime.now(UTC)

        result = streak_state_machine.evaluate_completion(task, timezone=timezone, now=completed_at)

        if result.streak_incremented or result.streak_reset:
            await store.save_task_progress(task_id, streak_count=result.new_streak, last_completed_at=completed_at)
            logger.info("Streak for task %s: %d -> %d", task_id, result.previous_streak, result.new_streak)

        return result


async def get_multiple_streak_statuses(
    *,
    store: ProgressionStore,
    task_ids: list[str],
    timezone: str | None = None,
    now: datetime | None = None,
) -> dict[str, StreakStatus]:
    """Streak status for each task ID; unknown IDs are skipped."""
    with span("completion_service.get_multiple_streak_statuses"):
        statuses: dict[str, StreakStatus] = {}
        for task_id in task_ids:
            task = await store.get_task(task_id)
            if task is None:
                logger.warning("Skipping unknown task %s", task_id)
                continue
            statuses[task_id] = streak_state_machine.check_streak_status(task, timezone=timezone, now=now)
        return statuses


async def get_user_streak_stats(
    *,
    store: ProgressionStore,
    user_id: str,
    timezone: str | None = None,
    now: datetime | None = None,
) -> StreakSummary:
    """Streak statistics across a user's active tasks."""
    with span("completion_service.get_user_streak_stats", user_id=user_id):
        tasks = await store.list_user_tasks(user_id)
        return streak_state_machine.summarize_streaks(tasks, timezone=timezone, now=now)


async def reset_expired_streaks(
    *,
    store: ProgressionStore,
    user_id: str,
    timezone: str | None = None,
    now: datetime | None = None,
) -> list[str]:
    """Zero the streak of every task that is past its grace period.

    Returns:
        IDs of the tasks that were reset
    """
    with span("completion_service.reset_expired_streaks", user_id=user_id):
        tasks = await store.list_user_tasks(user_id)
        expired = streak_state_machine.find_expired_streaks(tasks, timezone=timezone, now=now)

        for task in expired:
            await store.save_task_progress(task.id, streak_count=0, last_completed_at=task.last_completed_at)

        if expired:
            log_progression_event(logger, "info", "Expired streaks reset", user_id=user_id, reset_count=len(expired))

        return [task.id for task in expired]


async def allocate_user_stats(
    *,
    store: ProgressionStore,
    user_id: str,
    allocation: Mapping[str, int],
) -> UserStats:
    """Spend a character's available stat points and persist the result.

    Raises:
        UserNotFoundError: If the user has no character
        InputOutOfRangeError: If an amount is negative or a stat name is unknown
        InsufficientStatPointsError: If the allocation exceeds the available points
        StatCeilingExceededError: If a stat would exceed the ceiling
    """
    with span("completion_service.allocate_user_stats", user_id=user_id):
        character = await _require_character(store, user_id)
        level = xp_calculator.calculate_level(character.total_xp)

        new_stats = progression_service.allocate_stat_points(level, character.stats, allocation)

        await store.save_character(character.model_copy(update={"stats": new_stats}))
        logger.info("Allocated stat points for user %s: %s", user_id, dict(allocation))
        return new_stats


async def get_character_sheet(*, store: ProgressionStore, user_id: str) -> CharacterSheet:
    """Character totals with everything derived from them."""
    with span("completion_service.get_character_sheet", user_id=user_id):
        character = await _require_character(store, user_id)
        level = xp_calculator.calculate_level(character.total_xp)

        return CharacterSheet(
            character=character,
            stats=character.stats,
            effective_stats=progression_service.calculate_effective_stats(
                character.stats, character.equipment_bonuses
            ),
            available_stat_points=progression_service.calculate_available_stat_points(level, character.stats),
            xp_for_next_level=xp_calculator.calculate_xp_for_next_level(character.total_xp),
            progression=xp_calculator.get_level_progression_info(character.total_xp),
            streak_outlook=xp_calculator.get_streak_milestones(character.current_streak),
        )


async def simulate_task_completion(
    *,
    store: ProgressionStore,
    user_id: str,
    task_id: str,
    completions: int = 1,
) -> list[XPAward]:
    """Preview the XP of the next ``completions`` on-time completions of a task."""
    with span("completion_service.simulate_task_completion", user_id=user_id, task_id=task_id):
        task = await _require_task(store, task_id, user_id)
        character = await _require_character(store, user_id)

        return xp_calculator.simulate_xp_gain(
            task.difficulty, task.streak_count, character.total_xp, task.category, completions
        )
