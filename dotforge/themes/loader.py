"""Theme and schedule (de)serialisation.

Persisted documents use camelCase keys. Text may be JSON or YAML; both are
read through ``yaml.safe_load``.
"""

from __future__ import annotations

import json
from typing import Any, Mapping

import yaml

from dotforge.themes.constants import SCHEDULE_MODES, VARIANTS
from dotforge.themes.models import (
    Theme,
    ThemeHoliday,
    ThemeLocation,
    ThemePalette,
    ThemeSchedule,
    ThemeValidationError,
    ThemeVariant,
)

_THEME_KEYS = {
    "id",
    "name",
    "description",
    "author",
    "version",
    "variants",
    "apps",
    "tags",
    "month",
    "isHoliday",
    "createdAt",
    "updatedAt",
}
_VARIANT_KEYS = {"wallpaper", "palette", "semanticTokens"}
_SCHEDULE_KEYS = {
    "defaultMode",
    "location",
    "dayNightEnabled",
    "sunriseOffset",
    "sunsetOffset",
    "monthly",
    "holidays",
    "fixedTheme",
    "fixedVariant",
    "lastEvaluated",
}
_LOCATION_KEYS = {"latitude", "longitude", "timezone"}
_HOLIDAY_KEYS = {"name", "theme", "startDate", "endDate", "year", "enabled"}


# -- themes --


def theme_from_dict(data: Mapping[str, object]) -> Theme:
    """Build a :class:`Theme`; missing id/name are left for the validator."""
    _require_mapping(data, "theme")
    _reject_unknown_keys(data, allowed=_THEME_KEYS, context="theme")
    context = f"theme {data.get('id')!r}" if data.get("id") else "theme"

    variants = data.get("variants") or {}
    _require_mapping(variants, f"{context}: variants")
    _reject_unknown_keys(variants, allowed=set(VARIANTS), context=f"{context}: variants")

    apps = data.get("apps") or {}
    _require_mapping(apps, f"{context}: apps")

    return Theme(
        id=_optional_str(data, "id", context),
        name=_optional_str(data, "name", context),
        description=_optional_str(data, "description", context),
        author=_optional_str(data, "author", context),
        version=_optional_str(data, "version", context),
        day=_variant_from_dict(variants.get("day"), f"{context}: day"),
        night=_variant_from_dict(variants.get("night"), f"{context}: night"),
        apps=dict(apps),
        tags=tuple(_str_list(data.get("tags"), f"{context}: tags")),
        month=_optional_month(data.get("month"), context),
        is_holiday=_optional_bool(data, "isHoliday", context, default=False),
        created_at=_optional_str(data, "createdAt", context),
        updated_at=_optional_str(data, "updatedAt", context),
    )


def theme_to_dict(theme: Theme) -> dict[str, Any]:
    variants: dict[str, Any] = {}
    if theme.day is not None:
        variants["day"] = _variant_to_dict(theme.day)
    if theme.night is not None:
        variants["night"] = _variant_to_dict(theme.night)
    data: dict[str, Any] = {
        "id": theme.id,
        "name": theme.name,
        "description": theme.description,
        "author": theme.author,
        "version": theme.version,
        "variants": variants,
        "apps": dict(theme.apps),
        "tags": list(theme.tags),
        "isHoliday": theme.is_holiday,
        "createdAt": theme.created_at,
        "updatedAt": theme.updated_at,
    }
    if theme.month is not None:
        data["month"] = theme.month
    return data


def load_theme_text(text: str) -> Theme:
    return theme_from_dict(_load_document(text, "theme"))


def dump_theme_text(theme: Theme, fmt: str = "json") -> str:
    return _dump_document(theme_to_dict(theme), fmt)


def _variant_from_dict(data: object, context: str) -> ThemeVariant | None:
    if data is None:
        return None
    _require_mapping(data, context)
    _reject_unknown_keys(data, allowed=_VARIANT_KEYS, context=context)
    palette_data = data.get("palette")
    palette = None
    if palette_data is not None:
        _require_mapping(palette_data, f"{context}: palette")
        palette = ThemePalette.from_mapping(palette_data, context=f"{context}: palette")
    tokens = data.get("semanticTokens") or {}
    _require_mapping(tokens, f"{context}: semanticTokens")
    for key, value in tokens.items():
        if not isinstance(key, str) or not isinstance(value, str):
            raise ThemeValidationError(f"{context}: semantic tokens must map strings to strings")
    return ThemeVariant(
        wallpaper=_optional_str(data, "wallpaper", context),
        palette=palette,
        semantic_tokens=dict(tokens),
    )


def _variant_to_dict(variant: ThemeVariant) -> dict[str, Any]:
    data: dict[str, Any] = {
        "wallpaper": variant.wallpaper,
        "semanticTokens": dict(variant.semantic_tokens),
    }
    if variant.palette is not None:
        data["palette"] = variant.palette.as_dict()
    return data


# -- schedules --


def schedule_from_dict(data: Mapping[str, object]) -> ThemeSchedule:
    _require_mapping(data, "schedule")
    _reject_unknown_keys(data, allowed=_SCHEDULE_KEYS, context="schedule")
    defaults = ThemeSchedule()

    mode = data.get("defaultMode", defaults.default_mode)
    if mode not in SCHEDULE_MODES:
        raise ThemeValidationError(f"schedule: unsupported defaultMode {mode!r}")

    fixed_variant = data.get("fixedVariant")
    if fixed_variant is not None and fixed_variant not in VARIANTS:
        raise ThemeValidationError(f"schedule: fixedVariant must be day or night, got {fixed_variant!r}")

    holidays = data.get("holidays") or []
    if not isinstance(holidays, list):
        raise ThemeValidationError("schedule: holidays must be a list")

    return ThemeSchedule(
        default_mode=str(mode),
        location=_location_from_dict(data.get("location")),
        day_night_enabled=_optional_bool(data, "dayNightEnabled", "schedule", default=True),
        sunrise_offset=_optional_int(data, "sunriseOffset", "schedule"),
        sunset_offset=_optional_int(data, "sunsetOffset", "schedule"),
        monthly=_monthly_from_dict(data.get("monthly")),
        holidays=tuple(_holiday_from_dict(item) for item in holidays),
        fixed_theme=_nullable_str(data, "fixedTheme", "schedule"),
        fixed_variant=fixed_variant,
        last_evaluated=_nullable_str(data, "lastEvaluated", "schedule"),
    )


def schedule_to_dict(schedule: ThemeSchedule) -> dict[str, Any]:
    data: dict[str, Any] = {
        "defaultMode": schedule.default_mode,
        "location": {
            "latitude": schedule.location.latitude,
            "longitude": schedule.location.longitude,
            "timezone": schedule.location.timezone,
        },
        "dayNightEnabled": schedule.day_night_enabled,
        "sunriseOffset": schedule.sunrise_offset,
        "sunsetOffset": schedule.sunset_offset,
        "monthly": {
            str(month): schedule.monthly[month] for month in range(1, 13) if month in schedule.monthly
        },
        "holidays": [_holiday_to_dict(holiday) for holiday in schedule.holidays],
    }
    if schedule.fixed_theme is not None:
        data["fixedTheme"] = schedule.fixed_theme
    if schedule.fixed_variant is not None:
        data["fixedVariant"] = schedule.fixed_variant
    if schedule.last_evaluated is not None:
        data["lastEvaluated"] = schedule.last_evaluated
    return data


def load_schedule_text(text: str) -> ThemeSchedule:
    return schedule_from_dict(_load_document(text, "schedule"))


def dump_schedule_text(schedule: ThemeSchedule, fmt: str = "json") -> str:
    return _dump_document(schedule_to_dict(schedule), fmt)


def _location_from_dict(data: object) -> ThemeLocation:
    defaults = ThemeLocation()
    if data is None:
        return defaults
    _require_mapping(data, "schedule: location")
    _reject_unknown_keys(data, allowed=_LOCATION_KEYS, context="schedule: location")
    return ThemeLocation(
        latitude=_optional_number(data, "latitude", "schedule: location", defaults.latitude),
        longitude=_optional_number(data, "longitude", "schedule: location", defaults.longitude),
        timezone=_optional_str(data, "timezone", "schedule: location") or defaults.timezone,
    )


def _monthly_from_dict(data: object) -> dict[int, str]:
    if data is None:
        return {}
    _require_mapping(data, "schedule: monthly")
    monthly: dict[int, str] = {}
    for key, value in data.items():
        try:
            month = int(key)
        except (TypeError, ValueError) as exc:
            raise ThemeValidationError(f"schedule: monthly key {key!r} is not a month number") from exc
        if not 1 <= month <= 12:
            raise ThemeValidationError(f"schedule: monthly key {key!r} must be between 1 and 12")
        if not isinstance(value, str):
            raise ThemeValidationError(f"schedule: monthly theme for {month} must be a string")
        monthly[month] = value
    return {month: monthly[month] for month in range(1, 13) if month in monthly}


def _holiday_from_dict(data: object) -> ThemeHoliday:
    _require_mapping(data, "schedule: holiday")
    _reject_unknown_keys(data, allowed=_HOLIDAY_KEYS, context="schedule: holiday")
    context = f"holiday {data.get('name')!r}"
    year = data.get("year")
    if year is not None and (isinstance(year, bool) or not isinstance(year, int)):
        raise ThemeValidationError(f"{context}: year must be an integer")
    return ThemeHoliday(
        name=_optional_str(data, "name", context),
        theme=_optional_str(data, "theme", context),
        start_date=_optional_str(data, "startDate", context),
        end_date=_optional_str(data, "endDate", context),
        year=year,
        enabled=_optional_bool(data, "enabled", context, default=True),
    )


def _holiday_to_dict(holiday: ThemeHoliday) -> dict[str, Any]:
    data: dict[str, Any] = {
        "name": holiday.name,
        "theme": holiday.theme,
        "startDate": holiday.start_date,
        "endDate": holiday.end_date,
        "enabled": holiday.enabled,
    }
    if holiday.year is not None:
        data["year"] = holiday.year
    return data


# -- helpers --


def _load_document(text: str, context: str) -> Mapping[str, object]:
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ThemeValidationError(f"Invalid {context} document: {exc}") from exc
    if not isinstance(data, dict):
        raise ThemeValidationError(f"Expected a {context} object")
    return data


def _dump_document(data: Mapping[str, Any], fmt: str) -> str:
    if fmt == "json":
        return json.dumps(data, indent=2, ensure_ascii=False) + "\n"
    if fmt == "yaml":
        return yaml.safe_dump(dict(data), sort_keys=False, allow_unicode=True)
    raise ValueError(f"Unsupported format: {fmt!r}")


def _require_mapping(data: object, context: str) -> None:
    if not isinstance(data, Mapping):
        raise ThemeValidationError(f"{context}: expected an object")


def _optional_str(data: Mapping[str, object], key: str, context: str) -> str:
    value = data.get(key)
    if value is None:
        return ""
    if not isinstance(value, str):
        raise ThemeValidationError(f"{context}: field {key!r} must be a string")
    return value


def _nullable_str(data: Mapping[str, object], key: str, context: str) -> str | None:
    if data.get(key) is None:
        return None
    return _optional_str(data, key, context)


def _optional_bool(data: Mapping[str, object], key: str, context: str, *, default: bool) -> bool:
    value = data.get(key)
    if value is None:
        return default
    if not isinstance(value, bool):
        raise ThemeValidationError(f"{context}: field {key!r} must be true or false")
    return value


def _optional_int(data: Mapping[str, object], key: str, context: str) -> int:
    value = data.get(key)
    if value is None:
        return 0
    if isinstance(value, bool) or not isinstance(value, int):
        raise ThemeValidationError(f"{context}: field {key!r} must be an integer")
    return value


def _optional_number(data: Mapping[str, object], key: str, context: str, default: float) -> float:
    value = data.get(key)
    if value is None:
        return default
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ThemeValidationError(f"{context}: field {key!r} must be a number")
    return value


def _optional_month(value: object, context: str) -> int | None:
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, int) or not 1 <= value <= 12:
        raise ThemeValidationError(f"{context}: month must be an integer between 1 and 12")
    return value


def _str_list(value: object, context: str) -> list[str]:
    if value is None:
        return []
    if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
        raise ThemeValidationError(f"{context}: expected a list of strings")
    return list(value)


def _reject_unknown_keys(
    data: Mapping[str, object],
    *,
    allowed: set[str],
    context: str,
) -> None:
    unknown = sorted(str(key) for key in data.keys() if key not in allowed)
    if unknown:
        joined = ", ".join(unknown)
        raise ThemeValidationError(f"{context}: unknown keys: {joined}")
