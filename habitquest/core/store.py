"""Persistence seam for the completion workflow.

The progression engine never talks to a database itself. Callers hand the
completion service any object implementing ``ProgressionStore``; lookups
return None when the record does not exist and the service turns that into
TaskNotFoundError / UserNotFoundError.

Each ``complete_task`` call does one read-compute-write cycle. Guaranteeing
at most one concurrent completion per task is the store's job.
"""

from datetime import datetime
from typing import Protocol

from habitquest.domain.character import Character
from habitquest.domain.task import TaskSnapshot


class ProgressionStore(Protocol):
    """Async storage for task snapshots and characters."""

    async def get_task(self, task_id: str) -> TaskSnapshot | None: ...

    async def list_user_tasks(self, user_id: str, *, active_only: bool = True) -> list[TaskSnapshot]: ...

    async def save_task_progress(
        self,
        task_id: str,
        *,
        streak_count: int,
        last_completed_at: datetime | None,
    ) -> None: ...

    async def get_character(self, user_id: str) -> Character | None: ...

    async def save_character(self, character: Character) -> None: ...
