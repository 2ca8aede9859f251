"""Theme compilation helpers."""

from __future__ import annotations

from typing import Any

from dotforge.themes.models import ResolvedTheme, Theme, ThemePalette, ThemeValidationError, ThemeVariant
from dotforge.themes.palette import merge_semantic_tokens, resolve_all_tokens, resolve_color_refs


def get_variant_for_time(theme: Theme, is_day: bool) -> ThemeVariant | None:
    """Night falls back to the day variant when a theme has no night look."""
    if is_day:
        return theme.day
    return theme.night or theme.day


def compile_theme(theme: Theme, variant: str = "day") -> ResolvedTheme:
    """Resolve a theme variant into concrete colors.

    A night palette only needs to list the slots it changes; the rest come
    from the day palette. ``{slot}`` references inside ``apps`` are replaced
    with the resolved colors.
    """
    chosen = get_variant_for_time(theme, variant != "night")
    if chosen is None or theme.day is None or theme.day.palette is None:
        raise ThemeValidationError(f"Theme {theme.id!r} has no day palette")

    palette = theme.day.palette
    if chosen is not theme.day and chosen.palette is not None:
        palette = palette.merged(chosen.palette.as_dict())

    tokens = resolve_all_tokens(merge_semantic_tokens(chosen.semantic_tokens), palette)
    return ResolvedTheme(
        theme_id=theme.id,
        variant="night" if variant == "night" else "day",
        palette=palette,
        tokens=tokens,
        apps=_resolve_refs(theme.apps, palette),
    )


def _resolve_refs(value: Any, palette: ThemePalette) -> Any:
    if isinstance(value, str):
        return resolve_color_refs(value, palette)
    if isinstance(value, dict):
        return {key: _resolve_refs(item, palette) for key, item in value.items()}
    if isinstance(value, list):
        return [_resolve_refs(item, palette) for item in value]
    return value
