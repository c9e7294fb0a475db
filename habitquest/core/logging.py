"""Logging and observability configuration using Pydantic Logfire.

All modules use Python's standard logging library (logging.getLogger(__name__)),
and Logfire captures and enriches those logs once configured.

Progression events that other systems care about (completions, level ups,
streak resets) go through log_progression_event so every record carries the
engine name and the user/task identifiers in the same fields:
    log_progression_event(logger, "info", "Task completed", user_id="u1", task_id="t1", new_streak=4)
"""

import logging

import logfire

from habitquest import __version__
from habitquest.core.config import settings


def configure_logfire() -> None:
    """Configure Pydantic Logfire with token from environment.

    Nothing is sent unless a token is configured; spans still work locally.
    """
    logfire.configure(
        token=settings.logfire_token,
        service_name=settings.service_name,
        service_version=__version__,
        environment=settings.environment,
        send_to_logfire="if-token-present",
    )

    logger = logging.getLogger(__name__)
    logger.info("Logfire configured successfully")


def engine_context(**fields: object) -> dict[str, object]:
    """Build the structured fields shared by engine logs and spans.

    Fields whose value is None are left out, so an anonymous call carries no
    empty user_id. Caller fields win over the engine defaults.
    """
    context: dict[str, object] = {"engine": settings.service_name, "environment": settings.environment}
    context.update({key: value for key, value in fields.items() if value is not None})
    return context


def span(name: str, **attributes: object) -> logfire.LogfireSpan:
    """Open a Logfire span tagged with the engine context.

    Usage:
        with span("completion_service.complete_task", user_id=user_id, task_id=task_id):
            ...
    """
    return logfire.span(name, **engine_context(**attributes))


def log_progression_event(
    logger: logging.Logger,
    level: str,
    message: str,
    *,
    user_id: str | None = None,
    task_id: str | None = None,
    **fields: object,
) -> None:
    """Log a progression event with the engine context attached as record attributes."""
    log_method = getattr(logger, level.lower())
    log_method(message, extra=engine_context(user_id=user_id, task_id=task_id, **fields))
