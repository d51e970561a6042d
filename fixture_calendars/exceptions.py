"""Custom exception hierarchy for the fixture calendar generator.

Provides structured exceptions with error context and correction hints so
that failures can be logged as structured events and summarised per run.
"""

from typing import Any


class CalendarError(Exception):
    """Base exception for all calendar generation errors.

    Attributes:
        message: Human-readable error message.
        error_data: Structured error information.
        suggestion: Hint for how to resolve the error.
    """

    def __init__(
        self,
        message: str,
        error_data: dict[str, Any] | None = None,
        suggestion: str | None = None,
    ):
        """Initialize the calendar error.

        Args:
            message: Human-readable error message.
            error_data: Structured context (paths, teams, fields, etc.).
            suggestion: Actionable correction hint.
        """
        super().__init__(message)
        self.message = message
        self.error_data = error_data or {}
        self.suggestion = suggestion

    def __str__(self) -> str:
        """Return formatted error message with suggestion if available."""
        base = self.message
        if self.suggestion:
            return f"{base}\nSuggestion: {self.suggestion}"
        return base

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to structured dictionary for logging.

        Returns:
            Dictionary with error type, message, data, and suggestion.
        """
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "error_data": self.error_data,
            "suggestion": self.suggestion,
        }


class ParseFailure(CalendarError):
    """A match row whose date/time and round range both fail to resolve.

    Built by the aggregator for each dropped row and kept in its
    ``failures`` list; it is recorded and logged, never raised.
    """

    def __init__(
        self,
        message: str,
        raw_datetime: str | None = None,
        round_range_text: str | None = None,
        teams: tuple[str, str] | None = None,
        error_data: dict[str, Any] | None = None,
        suggestion: str | None = None,
    ):
        """Initialize parse failure.

        Args:
            message: Human-readable error message.
            raw_datetime: The raw date/time text of the row.
            round_range_text: The round window text, if any.
            teams: The raw team strings of the row.
            error_data: Additional context.
            suggestion: How to resolve the error.
        """
        data = error_data or {}
        data.update(
            {
                "raw_datetime": raw_datetime,
                "round_range_text": round_range_text,
                "teams": list(teams) if teams else None,
            }
        )

        default_suggestion = suggestion or (
            "The listing carries neither a parseable date nor a round window. "
            "Check the extracted date column or add the round range."
        )

        super().__init__(message, data, default_suggestion)
        self.raw_datetime = raw_datetime
        self.round_range_text = round_range_text
        self.teams = teams


class SerializationIOFailure(CalendarError):
    """A team's calendar file could not be written.

    Examples:
        - Output directory is read-only
        - Disk full
        - Path component is a regular file
    """

    def __init__(
        self,
        message: str,
        path: str | None = None,
        team: str | None = None,
        error_data: dict[str, Any] | None = None,
        suggestion: str | None = None,
    ):
        """Initialize serialization failure.

        Args:
            message: Human-readable error message.
            path: Target file path.
            team: Display name of the team whose calendar failed.
            error_data: Additional context.
            suggestion: How to resolve the error.
        """
        data = error_data or {}
        data.update({"path": path, "team": team})

        default_suggestion = suggestion or (
            f"Check that '{path}' is writable and that the disk is not full."
            if path
            else "Check the permissions of the output directory."
        )

        super().__init__(message, data, default_suggestion)
        self.path = path
        self.team = team


class ValidationError(CalendarError):
    """Fixture input that does not meet the schema requirements.

    Examples:
        - Missing ``competition`` key
        - A match without team names
        - Wrong value types
    """

    def __init__(
        self,
        message: str,
        path: str | None = None,
        field: str | None = None,
        expected: str | None = None,
        received: Any = None,
        error_data: dict[str, Any] | None = None,
        suggestion: str | None = None,
    ):
        """Initialize validation error.

        Args:
            message: Human-readable error message.
            path: Fixture file that was rejected.
            field: Field (JSON path) that failed validation.
            expected: Expected data type or format.
            received: Actual value received.
            error_data: Additional context.
            suggestion: How to resolve the error.
        """
        data = error_data or {}
        data.update(
            {
                "path": path,
                "field": field,
                "expected": expected,
                "received": str(received)[:200] if received else None,
            }
        )

        default_suggestion = suggestion or (
            f"Expected {expected} for field '{field}', but received: {received}. "
            f"Check the extraction output."
            if field and expected
            else "Review the fixture file against schema.json."
        )

        super().__init__(message, data, default_suggestion)
        self.path = path
        self.field = field
        self.expected = expected
        self.received = received


class ConfigurationError(CalendarError):
    """Invalid configuration file or CLI arguments.

    Examples:
        - Unknown time zone name
        - Unknown configuration key
        - Unreadable configuration file
    """

    def __init__(
        self,
        message: str,
        parameter: str | None = None,
        expected_format: str | None = None,
        example: str | None = None,
        error_data: dict[str, Any] | None = None,
        suggestion: str | None = None,
    ):
        """Initialize configuration error.

        Args:
            message: Human-readable error message.
            parameter: Parameter name that's invalid.
            expected_format: Expected format for the parameter.
            example: Example of valid value.
            error_data: Additional context.
            suggestion: How to resolve the error.
        """
        data = error_data or {}
        data.update(
            {
                "parameter": parameter,
                "expected_format": expected_format,
                "example": example,
            }
        )

        default_suggestion = suggestion or (
            f"Parameter '{parameter}' must be in format: {expected_format}. "
            f"Example: {example}"
            if parameter and expected_format and example
            else "Check the command-line arguments and configuration file."
        )

        super().__init__(message, data, default_suggestion)
        self.parameter = parameter
        self.expected_format = expected_format
        self.example = example
