"""Error codes and error handling utilities for ThemeEdit."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto
from pathlib import Path
from typing import Any


class ErrorCode(Enum):
    """Standardized error codes for ThemeEdit operations."""

    # File system errors
    FILE_NOT_FOUND = auto()
    FILE_ACCESS_DENIED = auto()
    FILE_ENCODING = auto()
    DISK_FULL = auto()
    PATH_INVALID = auto()

    # Theme document errors
    THEME_PARSE_FAILED = auto()
    THEME_INVALID = auto()
    COLOR_INVALID = auto()
    COLOR_PATH_NOT_FOUND = auto()
    VARIANT_NOT_FOUND = auto()

    # Operation errors
    OPERATION_FAILED = auto()


ERROR_MESSAGES: dict[ErrorCode, str] = {
    ErrorCode.FILE_NOT_FOUND: "The file was not found. It may have been moved or deleted.",
    ErrorCode.FILE_ACCESS_DENIED: "Access denied. Check file permissions or if the file is read-only.",
    ErrorCode.FILE_ENCODING: "The file is not valid UTF-8 text.",
    ErrorCode.DISK_FULL: "The destination disk is full. Free up space and try again.",
    ErrorCode.PATH_INVALID: "The specified path is invalid or inaccessible.",

    ErrorCode.THEME_PARSE_FAILED: "The theme file could not be parsed. Check for syntax errors.",
    ErrorCode.THEME_INVALID: "The theme file does not have the expected structure.",
    ErrorCode.COLOR_INVALID: "The color value is not a supported hex, rgb(), hsl() or oklch() literal.",
    ErrorCode.COLOR_PATH_NOT_FOUND: "No color exists at that path in the selected theme.",
    ErrorCode.VARIANT_NOT_FOUND: "The theme family has no variant at that index.",

    ErrorCode.OPERATION_FAILED: "Operation failed. See details for more information.",
}


@dataclass
class ThemeEditError(Exception):
    """Base exception for ThemeEdit with error code and context."""

    code: ErrorCode
    message: str = ""
    path: Path | None = None
    details: dict[str, Any] = field(default_factory=dict)
    suggestion: str = ""

    def __post_init__(self) -> None:
        if not self.message:
            self.message = ERROR_MESSAGES.get(self.code, "An unexpected error occurred.")
        if not self.suggestion and self.code in ERROR_MESSAGES:
            self.suggestion = ERROR_MESSAGES[self.code]

    def __str__(self) -> str:
        parts = [self.message]
        if self.path:
            parts.append(f"\nFile: {self.path}")
        if self.details:
            details_str = " | ".join(f"{k}={v}" for k, v in self.details.items())
            parts.append(f"\nDetails: {details_str}")
        return "".join(parts)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for logging or UI display."""
        return {
            "code": self.code.name,
            "message": self.message,
            "path": str(self.path) if self.path else None,
            "details": self.details,
            "suggestion": self.suggestion,
        }


def theme_error_from_message(message: str, path: Path | None = None) -> ThemeEditError:
    """Wrap a parse-result error string in the matching error code."""
    if message.startswith("JSON parse error"):
        code = ErrorCode.THEME_PARSE_FAILED
    else:
        code = ErrorCode.THEME_INVALID
    return ThemeEditError(code, message=message, path=path)


def classify_exception(exc: Exception, path: Path | None = None) -> ThemeEditError:
    """Classify a generic exception into a ThemeEditError with appropriate code."""
    if isinstance(exc, ThemeEditError):
        return exc
    exc_name = type(exc).__name__
    exc_str = str(exc).lower()

    if isinstance(exc, FileNotFoundError) or "no such file" in exc_str:
        return ThemeEditError(ErrorCode.FILE_NOT_FOUND, path=path, details={"original": exc_str})
    if isinstance(exc, PermissionError) or "permission denied" in exc_str or "access is denied" in exc_str:
        return ThemeEditError(ErrorCode.FILE_ACCESS_DENIED, path=path, details={"original": exc_str})
    if isinstance(exc, IsADirectoryError):
        return ThemeEditError(ErrorCode.PATH_INVALID, path=path, details={"original": exc_str})
    if isinstance(exc, UnicodeDecodeError):
        return ThemeEditError(ErrorCode.FILE_ENCODING, path=path, details={"original": exc_str})
    if "disk full" in exc_str or "no space left" in exc_str:
        return ThemeEditError(ErrorCode.DISK_FULL, path=path, details={"original": exc_str})
    if "json parse error" in exc_str:
        return ThemeEditError(ErrorCode.THEME_PARSE_FAILED, path=path, details={"original": exc_str})
    if "invalid theme structure" in exc_str:
        return ThemeEditError(ErrorCode.THEME_INVALID, path=path, details={"original": exc_str})

    return ThemeEditError(
        ErrorCode.OPERATION_FAILED,
        message=f"{exc_name}: {exc}",
        path=path,
        details={"original": exc_str},
    )


def format_error_for_user(error: ThemeEditError | Exception) -> str:
    """Format an error for display to the user with actionable suggestions."""
    if isinstance(error, ThemeEditError):
        parts = [error.message]
        if error.suggestion and error.suggestion != error.message:
            parts.append(f"\n\n{error.suggestion}")
        if error.path:
            parts.append(f"\n\nFile: {error.path.name}")
        return "".join(parts)

    classified = classify_exception(error)
    return format_error_for_user(classified)
