"""Theme engine exports."""

from dotforge.themes.constants import DEFAULT_THEME_ID
from dotforge.themes.models import (
    ResolvedTheme,
    Theme,
    ThemeMetadata,
    ThemePalette,
    ThemeSchedule,
    ThemeValidationError,
    ThemeVariant,
)
from dotforge.themes.registry import ThemeRegistry
from dotforge.themes.service import ThemeService

__all__ = [
    "DEFAULT_THEME_ID",
    "ResolvedTheme",
    "Theme",
    "ThemeMetadata",
    "ThemePalette",
    "ThemeSchedule",
    "ThemeValidationError",
    "ThemeVariant",
    "ThemeRegistry",
    "ThemeService",
]
