"""Unit tests for error classification utilities."""

import pytest

from habitquest.core.errors import (
    ErrorCode,
    ErrorSeverity,
    InputOutOfRangeError,
    InsufficientStatPointsError,
    ProgressionError,
    StatCeilingExceededError,
    TaskNotFoundError,
    UserNotFoundError,
    classify_error_with_response,
)


@pytest.mark.unit
class TestErrorHierarchy:
    """Tests for the exception types."""

    def test_all_errors_are_progression_errors(self):
        """Test every typed error shares the ProgressionError base."""
        errors = [
            InputOutOfRangeError("bad"),
            InsufficientStatPointsError(available=1, requested=2),
            StatCeilingExceededError(stat="strength", value=101, ceiling=100),
            TaskNotFoundError("t1"),
            UserNotFoundError("u1"),
        ]
        for error in errors:
            assert isinstance(error, ProgressionError)

    def test_input_out_of_range_is_value_error(self):
        """Test InputOutOfRangeError can be caught as ValueError."""
        with pytest.raises(ValueError, match="bad"):
            raise InputOutOfRangeError("bad")

    def test_not_found_errors_are_lookup_errors(self):
        """Test not-found errors can be caught as LookupError."""
        assert isinstance(TaskNotFoundError("t1"), LookupError)
        assert isinstance(UserNotFoundError("u1"), LookupError)

    def test_insufficient_points_message(self):
        """Test the insufficient points message carries both amounts."""
        error = InsufficientStatPointsError(available=3, requested=5)

        assert str(error) == "Insufficient stat points. Available: 3, Requested: 5"
        assert error.available == 3
        assert error.requested == 5

    def test_ceiling_message(self):
        """Test the ceiling message names the stat and the ceiling."""
        error = StatCeilingExceededError(stat="wisdom", value=104, ceiling=100)

        assert str(error) == "wisdom cannot exceed 100 points (would be 104)"


@pytest.mark.unit
class TestClassifyErrorWithResponse:
    """Tests for classify_error_with_response function."""

    def test_insufficient_stat_points(self):
        """Test classification of an over-allocation."""
        response = classify_error_with_response(InsufficientStatPointsError(available=0, requested=2))

        assert response.code == ErrorCode.ERR_INSUFFICIENT_STAT_POINTS
        assert response.severity == ErrorSeverity.LOW
        assert "level up" in response.suggestion.lower()

    def test_stat_ceiling(self):
        """Test classification of a ceiling violation."""
        response = classify_error_with_response(StatCeilingExceededError(stat="luck", value=101, ceiling=100))

        assert response.code == ErrorCode.ERR_STAT_CEILING_EXCEEDED
        assert "Luck" in response.message

    def test_input_out_of_range(self):
        """Test classification keeps the original message."""
        response = classify_error_with_response(InputOutOfRangeError("Cannot allocate a negative amount"))

        assert response.code == ErrorCode.ERR_INPUT_OUT_OF_RANGE
        assert response.message == "Cannot allocate a negative amount"

    def test_task_not_found(self):
        """Test classification of a missing task."""
        response = classify_error_with_response(TaskNotFoundError("t1"))

        assert response.code == ErrorCode.ERR_TASK_NOT_FOUND
        assert response.severity == ErrorSeverity.LOW

    def test_user_not_found(self):
        """Test classification of a missing user."""
        response = classify_error_with_response(UserNotFoundError("u1"))

        assert response.code == ErrorCode.ERR_USER_NOT_FOUND
        assert response.severity == ErrorSeverity.MEDIUM

    def test_unknown_error(self):
        """Test classification of an unexpected exception."""
        response = classify_error_with_response(RuntimeError("boom"))

        assert response.code == ErrorCode.ERR_UNKNOWN
        assert response.severity == ErrorSeverity.MEDIUM
        assert "try again" in response.suggestion.lower()
