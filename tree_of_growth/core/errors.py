"""Error classification utilities for service and storage errors."""

from enum import Enum
from typing import Literal

from pydantic import BaseModel, ValidationError


class ErrorSeverity(Enum):
    """Severity levels for errors."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class ErrorCode:
    """Error codes for specific error conditions."""

    # Lookup errors
    ERR_TASK_NOT_FOUND = "ERR_TASK_NOT_FOUND"
    ERR_IMAGE_NOT_FOUND = "ERR_IMAGE_NOT_FOUND"

    # Validation errors
    ERR_INVALID_TASK = "ERR_INVALID_TASK"
    ERR_INVALID_BACKUP = "ERR_INVALID_BACKUP"

    # Storage errors
    ERR_STORAGE_FAILURE = "ERR_STORAGE_FAILURE"

    # Generic errors
    ERR_UNKNOWN = "ERR_UNKNOWN"


class ErrorResponse(BaseModel):
    """Structured error response with user-friendly messaging."""

    code: str
    message: str
    suggestion: str
    severity: ErrorSeverity


_ERROR_PATTERNS: dict[
    Literal["storage", "backup"],
    dict[str, list[str] | set[str]],
] = {
    "storage": {
        "phrases": [
            "failed to read",
            "failed to write",
            "failed to remove",
            "database is locked",
            "disk i/o error",
        ],
        "exception_types": {"OperationalError", "DatabaseError"},
    },
    "backup": {
        "phrases": [
            "invalid backup",
            "backup data",
        ],
        "exception_types": {"JSONDecodeError"},
    },
}


def _match_error_pattern(
    *,
    error_str: str,
    exception_type: str,
    pattern_type: Literal["storage", "backup"],
) -> bool:
    """Return True if the error matches the configured pattern type."""
    patterns = _ERROR_PATTERNS[pattern_type]
    return any(phrase in error_str for phrase in patterns["phrases"]) or exception_type in patterns["exception_types"]


def classify_error_with_response(exception: Exception) -> ErrorResponse:  # noqa: PLR0911
    """Classify an error and return a structured response with recovery suggestions.

    Args:
        exception: The exception raised during execution

    Returns:
        ErrorResponse with code, message, suggestion, and severity
    """
    error_str = str(exception).lower()
    exception_type = type(exception).__name__

    if exception_type == "KeyError" and "task not found" in error_str:
        return ErrorResponse(
            code=ErrorCode.ERR_TASK_NOT_FOUND,
            message="I couldn't find that task.",
            suggestion="Reload the task list and try again.",
            severity=ErrorSeverity.LOW,
        )

    if exception_type == "KeyError" and "image not found" in error_str:
        return ErrorResponse(
            code=ErrorCode.ERR_IMAGE_NOT_FOUND,
            message="I couldn't find that image.",
            suggestion="Reload the gallery and try again.",
            severity=ErrorSeverity.LOW,
        )

    if _match_error_pattern(error_str=error_str, exception_type=exception_type, pattern_type="backup"):
        return ErrorResponse(
            code=ErrorCode.ERR_INVALID_BACKUP,
            message="The backup file could not be imported.",
            suggestion="Make sure the file is an unmodified export from this app.",
            severity=ErrorSeverity.MEDIUM,
        )

    if isinstance(exception, ValidationError) or exception_type == "ValueError":
        return ErrorResponse(
            code=ErrorCode.ERR_INVALID_TASK,
            message="Some of the task details are invalid.",
            suggestion="Check the category, priority and dates, then try again.",
            severity=ErrorSeverity.LOW,
        )

    if _match_error_pattern(error_str=error_str, exception_type=exception_type, pattern_type="storage"):
        return ErrorResponse(
            code=ErrorCode.ERR_STORAGE_FAILURE,
            message="Your data could not be saved or loaded.",
            suggestion="Please try again. If the problem persists, check the data directory permissions.",
            severity=ErrorSeverity.HIGH,
        )

    return ErrorResponse(
        code=ErrorCode.ERR_UNKNOWN,
        message="An unexpected error occurred.",
        suggestion="Please try again later.",
        severity=ErrorSeverity.MEDIUM,
    )
