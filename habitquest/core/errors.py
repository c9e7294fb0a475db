"""Typed errors for the progression engine and their user-facing classification."""

from enum import Enum

from pydantic import BaseModel


class ErrorSeverity(Enum):
    """Severity levels for errors."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class ErrorCode:
    """Error codes for specific error conditions."""

    # Validation errors
    ERR_INPUT_OUT_OF_RANGE = "ERR_INPUT_OUT_OF_RANGE"
    ERR_INSUFFICIENT_STAT_POINTS = "ERR_INSUFFICIENT_STAT_POINTS"
    ERR_STAT_CEILING_EXCEEDED = "ERR_STAT_CEILING_EXCEEDED"

    # Lookup errors
    ERR_TASK_NOT_FOUND = "ERR_TASK_NOT_FOUND"
    ERR_USER_NOT_FOUND = "ERR_USER_NOT_FOUND"

    # Generic errors
    ERR_UNKNOWN = "ERR_UNKNOWN"


class ProgressionError(Exception):
    """Base class for rejected progression operations."""

    code: str = ErrorCode.ERR_UNKNOWN


class InputOutOfRangeError(ProgressionError, ValueError):
    """A quantity is outside its allowed range (e.g. a negative allocation)."""

    code = ErrorCode.ERR_INPUT_OUT_OF_RANGE


class InsufficientStatPointsError(ProgressionError):
    """A stat allocation spends more points than the character has earned."""

    code = ErrorCode.ERR_INSUFFICIENT_STAT_POINTS

    def __init__(self, *, available: int, requested: int) -> None:
        self.available = available
        self.requested = requested
        super().__init__(f"Insufficient stat points. Available: {available}, Requested: {requested}")


class StatCeilingExceededError(ProgressionError):
    """A stat allocation would push a stat above the hard ceiling."""

    code = ErrorCode.ERR_STAT_CEILING_EXCEEDED

    def __init__(self, *, stat: str, value: int, ceiling: int) -> None:
        self.stat = stat
        self.value = value
        self.ceiling = ceiling
        super().__init__(f"{stat} cannot exceed {ceiling} points (would be {value})")


class TaskNotFoundError(ProgressionError, LookupError):
    """No task snapshot exists for the requested ID."""

    code = ErrorCode.ERR_TASK_NOT_FOUND

    def __init__(self, task_id: str) -> None:
        self.task_id = task_id
        super().__init__(f"Task not found: {task_id}")


class UserNotFoundError(ProgressionError, LookupError):
    """No character exists for the requested user ID."""

    code = ErrorCode.ERR_USER_NOT_FOUND

    def __init__(self, user_id: str) -> None:
        self.user_id = user_id
        super().__init__(f"User not found: {user_id}")


class ErrorResponse(BaseModel):
    """Structured error response with user-friendly messaging."""

    code: str
    message: str
    suggestion: str
    severity: ErrorSeverity


def classify_error_with_response(exception: Exception) -> ErrorResponse:  # noqa: PLR0911
    """Classify an error and return a structured response with recovery suggestions.

    Args:
        exception: The exception raised by a progression operation

    Returns:
        ErrorResponse with code, message, suggestion, and severity
    """
    if isinstance(exception, InsufficientStatPointsError):
        return ErrorResponse(
            code=exception.code,
            message=f"Not enough stat points: {exception.available} available, {exception.requested} requested.",
            suggestion="Complete more tasks to level up and earn stat points.",
            severity=ErrorSeverity.LOW,
        )

    if isinstance(exception, StatCeilingExceededError):
        return ErrorResponse(
            code=exception.code,
            message=f"{exception.stat.capitalize()} cannot go above {exception.ceiling}.",
            suggestion="Spend the points on a different stat.",
            severity=ErrorSeverity.LOW,
        )

    if isinstance(exception, InputOutOfRangeError):
        return ErrorResponse(
            code=exception.code,
            message=str(exception),
            suggestion="Check the values you entered and try again.",
            severity=ErrorSeverity.LOW,
        )

    if isinstance(exception, TaskNotFoundError):
        return ErrorResponse(
            code=exception.code,
            message="I couldn't find that task.",
            suggestion="Refresh your task list and try again.",
            severity=ErrorSeverity.LOW,
        )

    if isinstance(exception, UserNotFoundError):
        return ErrorResponse(
            code=exception.code,
            message="User not found.",
            suggestion="Make sure you're signed in with a registered account.",
            severity=ErrorSeverity.MEDIUM,
        )

    return ErrorResponse(
        code=ErrorCode.ERR_UNKNOWN,
        message="An unexpected error occurred.",
        suggestion="Please try again later. If the problem persists, contact support.",
        severity=ErrorSeverity.MEDIUM,
    )
