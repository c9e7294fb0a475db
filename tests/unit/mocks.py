"""Pure Python test doubles: an in-memory progression store and snapshot builders."""

from datetime import UTC, datetime

from habitquest.domain.character import Character
from habitquest.domain.task import DifficultyTier, TaskKind, TaskSnapshot


# Tuesday, 2024-03-12 15:00 UTC
FIXED_NOW = datetime(2024, 3, 12, 15, 0, tzinfo=UTC)


def make_task(**overrides) -> TaskSnapshot:
    """Build a task snapshot with sensible defaults."""
    data = {
        "id": "task_1",
        "user_id": "user_1",
        "title": "Morning run",
        "kind": TaskKind.DAILY,
        "difficulty": DifficultyTier.MEDIUM,
        "category": "fitness",
        "streak_count": 0,
        "last_completed_at": None,
        "recurrence_rule": "DAILY",
        "is_active": True,
    }
    data.update(overrides)
    return TaskSnapshot(**data)


class InMemoryProgressionStore:
    """In-memory implementation of the ProgressionStore protocol.

    Records are pydantic models; reads hand out deep copies so tests can
    only change stored state through the store's write methods.
    """

    def __init__(self):
        """Initialize an empty store."""
        self._tasks: dict[str, TaskSnapshot] = {}
        self._characters: dict[str, Character] = {}
        self.saved_progress: list[tuple[str, int, datetime | None]] = []

    def add_task(self, task: TaskSnapshot) -> TaskSnapshot:
        """Seed a task snapshot."""
        self._tasks[task.id] = task
        return task.model_copy(deep=True)

    def add_character(self, character: Character) -> Character:
        """Seed a character."""
        self._characters[character.id] = character
        return character.model_copy(deep=True)

    async def get_task(self, task_id: str) -> TaskSnapshot | None:
        task = self._tasks.get(task_id)
        return task.model_copy(deep=True) if task else None

    async def list_user_tasks(self, user_id: str, *, active_only: bool = True) -> list[TaskSnapshot]:
        return [
            task.model_copy(deep=True)
            for task in self._tasks.values()
            if task.user_id == user_id and (task.is_active or not active_only)
        ]

    async def save_task_progress(
        self,
        task_id: str,
        *,
        streak_count: int,
        last_completed_at: datetime | None,
    ) -> None:
        task = self._tasks[task_id]
        self._tasks[task_id] = task.model_copy(
            update={"streak_count": streak_count, "last_completed_at": last_completed_at}
        )
        self.saved_progress.append((task_id, streak_count, last_completed_at))

    async def get_character(self, user_id: str) -> Character | None:
        character = self._characters.get(user_id)
        return character.model_copy(deep=True) if character else None

    async def save_character(self, character: Character) -> None:
        self._characters[character.id] = character.model_copy(deep=True)
