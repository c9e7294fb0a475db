from habitquest.services import (
    completion_service,
    progression_service,
    streak_state_machine,
    xp_calculator,
)


__all__ = [
    "completion_service",
    "progression_service",
    "streak_state_machine",
    "xp_calculator",
]
