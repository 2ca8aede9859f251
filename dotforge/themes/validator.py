"""Structural theme validation."""

from __future__ import annotations

from dotforge.themes.constants import PALETTE_KEYS
from dotforge.themes.models import Theme, ValidationResult


def validate_theme(theme: Theme) -> ValidationResult:
    """Check identity fields and that the day palette fills every slot.

    Hex syntax is not checked here; see ``palette.is_valid_hex_color``.
    """
    errors: list[str] = []
    if not (theme.id or "").strip():
        errors.append("Theme ID is required")
    if not (theme.name or "").strip():
        errors.append("Theme name is required")
    if theme.day is None:
        errors.append("Day variant is required")

    palette = theme.day.palette if theme.day is not None else None
    if palette is None:
        errors.append("Day variant must have a palette")
    else:
        for key in PALETTE_KEYS:
            if not getattr(palette, key):
                errors.append(f"Palette missing required color: {key}")

    return ValidationResult.from_errors(errors)
