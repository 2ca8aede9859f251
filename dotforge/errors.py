"""Error codes and error handling utilities for Dotforge."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any


class ErrorCode(Enum):
    """Standardized error codes for Dotforge operations."""

    # Config text errors
    CONFIG_TYPE_UNKNOWN = auto()

    # Theme errors
    THEME_NOT_FOUND = auto()
    THEME_INVALID = auto()
    THEME_DUPLICATE = auto()

    # Schedule errors
    SCHEDULE_INVALID = auto()

    # Settings errors
    SETTINGS_CORRUPT = auto()


ERROR_MESSAGES: dict[ErrorCode, str] = {
    ErrorCode.CONFIG_TYPE_UNKNOWN: "Unsupported configuration type.",
    ErrorCode.THEME_NOT_FOUND: "The theme was not found. It may have been removed.",
    ErrorCode.THEME_INVALID: "The theme is incomplete or malformed.",
    ErrorCode.THEME_DUPLICATE: "A theme with this id already exists.",
    ErrorCode.SCHEDULE_INVALID: "The theme schedule is invalid. Check holidays and location.",
    ErrorCode.SETTINGS_CORRUPT: "Stored settings could not be read. Using defaults.",
}

_SUGGESTIONS: dict[ErrorCode, str] = {
    ErrorCode.CONFIG_TYPE_UNKNOWN: "Use one of: bash, zsh, tmux, kitty, starship.",
    ErrorCode.THEME_NOT_FOUND: "Reload the theme list or pick another theme.",
    ErrorCode.THEME_INVALID: "Fill in every palette color and give the theme an id and name.",
    ErrorCode.THEME_DUPLICATE: "Choose a different theme id.",
    ErrorCode.SCHEDULE_INVALID: "Dates use MM-DD and every holiday needs a theme.",
}


@dataclass
class DotforgeError(Exception):
    """Base exception for Dotforge with error code and context."""

    code: ErrorCode
    message: str = ""
    details: dict[str, Any] = field(default_factory=dict)
    suggestion: str = ""

    def __post_init__(self) -> None:
        if not self.message:
            self.message = ERROR_MESSAGES.get(self.code, "An unexpected error occurred.")
        if not self.suggestion:
            self.suggestion = _SUGGESTIONS.get(self.code, "")

    def __str__(self) -> str:
        parts = [self.message]
        if self.details:
            details_str = " | ".join(f"{k}={v}" for k, v in self.details.items())
            parts.append(f"\nDetails: {details_str}")
        return "".join(parts)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for logging or UI display."""
        return {
            "code": self.code.name,
            "message": self.message,
            "details": self.details,
            "suggestion": self.suggestion,
        }


def format_error_for_user(error: DotforgeError | Exception) -> str:
    """Format an error for display to the user with actionable suggestions."""
    if isinstance(error, DotforgeError):
        parts = [error.message]
        if error.suggestion and error.suggestion != error.message:
            parts.append(f"\n\n{error.suggestion}")
        return "".join(parts)
    return f"{type(error).__name__}: {error}"
