"""Tests for theme validation."""

from dataclasses import replace

import pytest

from dotforge.themes.constants import PALETTE_KEYS
from dotforge.themes.models import Theme, ThemePalette, ThemeVariant
from dotforge.themes.validator import validate_theme


def _palette(**overrides: str) -> ThemePalette:
    values = {key: "#112233" for key in PALETTE_KEYS}
    values.update(overrides)
    return ThemePalette(**values)


def _theme(**overrides) -> Theme:
    theme = Theme(id="ocean", name="Ocean", day=ThemeVariant(palette=_palette()))
    return replace(theme, **overrides)


def test_complete_theme_is_valid():
    result = validate_theme(_theme())
    assert result.valid is True
    assert result.errors == ()


def test_hex_format_is_not_checked():
    result = validate_theme(_theme(day=ThemeVariant(palette=_palette(accent="not-a-color"))))
    assert result.valid is True


@pytest.mark.parametrize("key", PALETTE_KEYS)
def test_missing_slot_is_named(key):
    result = validate_theme(_theme(day=ThemeVariant(palette=_palette(**{key: ""}))))
    assert result.valid is False
    assert result.errors == (f"Palette missing required color: {key}",)


def test_blank_identity_fields():
    result = validate_theme(_theme(id="  ", name=""))
    assert result.errors == ("Theme ID is required", "Theme name is required")


def test_missing_day_variant():
    result = validate_theme(_theme(day=None))
    assert result.errors == ("Day variant is required", "Day variant must have a palette")


def test_day_variant_without_palette():
    result = validate_theme(_theme(day=ThemeVariant(wallpaper="sea.jpg")))
    assert result.errors == ("Day variant must have a palette",)
