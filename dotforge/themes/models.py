"""Theme engine models."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Any, Mapping

from dotforge.themes.constants import PALETTE_KEYS


class ThemeValidationError(ValueError):
    """Raised when theme or schedule data cannot be read into a model."""


@dataclass(frozen=True, slots=True)
class ThemePalette:
    """The 17 base colors every theme variant defines."""

    base: str = ""
    mantle: str = ""
    crust: str = ""
    surface0: str = ""
    surface1: str = ""
    surface2: str = ""
    text: str = ""
    subtext0: str = ""
    subtext1: str = ""
    accent: str = ""
    secondary: str = ""
    red: str = ""
    green: str = ""
    yellow: str = ""
    blue: str = ""
    pink: str = ""
    teal: str = ""

    def as_dict(self) -> dict[str, str]:
        return {key: getattr(self, key) for key in PALETTE_KEYS}

    @classmethod
    def from_mapping(cls, data: Mapping[str, object], *, context: str = "palette") -> ThemePalette:
        return cls(**_palette_values(data, context))

    def merged(self, overrides: Mapping[str, object]) -> ThemePalette:
        """Return a copy with ``overrides`` applied; empty override values are ignored."""
        values = {key: value for key, value in _palette_values(overrides, "overrides").items() if value}
        return replace(self, **values)


def _palette_values(data: Mapping[str, object], context: str) -> dict[str, str]:
    unknown = sorted(str(key) for key in data.keys() if key not in PALETTE_KEYS)
    if unknown:
        raise ThemeValidationError(f"{context}: unknown palette keys: {', '.join(unknown)}")
    values: dict[str, str] = {}
    for key, value in data.items():
        if value is None:
            continue
        if not isinstance(value, str):
            raise ThemeValidationError(f"{context}: color {key!r} must be a string")
        values[str(key)] = value
    return values


@dataclass(frozen=True, slots=True)
class ThemeVariant:
    """Day or night look of a theme."""

    wallpaper: str = ""
    palette: ThemePalette | None = None
    semantic_tokens: dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class Theme:
    id: str
    name: str
    day: ThemeVariant | None = None
    night: ThemeVariant | None = None
    apps: dict[str, Any] = field(default_factory=dict)
    tags: tuple[str, ...] = ()
    month: int | None = None
    is_holiday: bool = False
    description: str = ""
    author: str = ""
    version: str = ""
    created_at: str = ""
    updated_at: str = ""


@dataclass(frozen=True, slots=True)
class ThemeMetadata:
    """Display-ready theme listing row."""

    id: str
    name: str
    description: str
    author: str
    version: str
    tags: tuple[str, ...]
    month: int | None
    is_holiday: bool
    day_wallpaper: str
    night_wallpaper: str | None
    accent_color: str
    is_builtin: bool = False
    created_at: str = ""
    updated_at: str = ""

    @classmethod
    def from_theme(cls, theme: Theme, *, is_builtin: bool = False) -> ThemeMetadata:
        day = theme.day or ThemeVariant()
        return cls(
            id=theme.id,
            name=theme.name,
            description=theme.description,
            author=theme.author,
            version=theme.version,
            tags=theme.tags,
            month=theme.month,
            is_holiday=theme.is_holiday,
            day_wallpaper=day.wallpaper,
            night_wallpaper=theme.night.wallpaper if theme.night else None,
            accent_color=day.palette.accent if day.palette else "",
            is_builtin=is_builtin,
            created_at=theme.created_at,
            updated_at=theme.updated_at,
        )


@dataclass(frozen=True, slots=True)
class ResolvedTheme:
    """A theme variant with every color reference resolved to a hex value."""

    theme_id: str
    variant: str
    palette: ThemePalette
    tokens: dict[str, str]
    apps: dict[str, Any]


@dataclass(frozen=True, slots=True)
class ThemeLocation:
    latitude: float = 40.7128
    longitude: float = -74.006
    timezone: str = "America/New_York"


@dataclass(frozen=True, slots=True)
class ThemeHoliday:
    """Date range (``MM-DD`` bounds, inclusive) that overrides the monthly theme."""

    name: str
    theme: str
    start_date: str
    end_date: str
    year: int | None = None
    enabled: bool = True


@dataclass(frozen=True, slots=True)
class ThemeSchedule:
    """Automatic theme switching configuration.

    ``monthly`` maps month numbers 1-12 to theme ids. Holidays are checked in
    tuple order.
    """

    default_mode: str = "monthly"
    location: ThemeLocation = field(default_factory=ThemeLocation)
    day_night_enabled: bool = True
    sunrise_offset: int = 0
    sunset_offset: int = 0
    monthly: dict[int, str] = field(default_factory=dict)
    holidays: tuple[ThemeHoliday, ...] = ()
    fixed_theme: str | None = None
    fixed_variant: str | None = None
    last_evaluated: str | None = None


@dataclass(frozen=True, slots=True)
class ThemeSelection:
    theme_id: str
    reason: str
    holiday: str | None = None


@dataclass(frozen=True, slots=True)
class ThemeChange:
    time: datetime
    type: str
    reason: str


@dataclass(frozen=True, slots=True)
class ScheduleEvaluation:
    theme_id: str
    variant: str
    reason: str
    holiday: str | None = None
    next_change: datetime | None = None
    next_change_type: str | None = None


@dataclass(frozen=True, slots=True)
class ValidationResult:
    valid: bool
    errors: tuple[str, ...] = ()

    @classmethod
    def from_errors(cls, errors: list[str]) -> ValidationResult:
        return cls(valid=not errors, errors=tuple(errors))
