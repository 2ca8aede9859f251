"""Palette slots, semantic tokens and color helpers."""

from __future__ import annotations

import math
import re
from datetime import datetime, timezone
from typing import Mapping

from dotforge.themes.constants import DEFAULT_AUTHOR, DEFAULT_SEMANTIC_TOKENS, PALETTE_KEYS
from dotforge.themes.models import Theme, ThemePalette, ThemeVariant

_HEX_COLOR_RE = re.compile(r"^#([0-9A-Fa-f]{6}|[0-9A-Fa-f]{8})$")
_COLOR_REF_RE = re.compile(r"\{([A-Za-z0-9_]+)\}")

_NIGHT_PALETTE = ThemePalette(
    base="#24273a",
    mantle="#1e2030",
    crust="#181926",
    surface0="#363a4f",
    surface1="#494d64",
    surface2="#5b6078",
    text="#cad3f5",
    subtext0="#a5adcb",
    subtext1="#8087a2",
    accent="#8aadf4",
    secondary="#b7bdf8",
    red="#ed8796",
    green="#a6da95",
    yellow="#eed49f",
    blue="#8aadf4",
    pink="#f5bde6",
    teal="#8bd5ca",
)

_DAY_PALETTE = ThemePalette(
    base="#eff1f5",
    mantle="#e6e9ef",
    crust="#dce0e8",
    surface0="#ccd0da",
    surface1="#bcc0cc",
    surface2="#acb0be",
    text="#4c4f69",
    subtext0="#5c5f77",
    subtext1="#6c6f85",
    accent="#1e66f5",
    secondary="#7287fd",
    red="#d20f39",
    green="#40a02b",
    yellow="#df8e1d",
    blue="#1e66f5",
    pink="#ea76cb",
    teal="#179299",
)


def resolve_token(token_name: str, palette: ThemePalette) -> str | None:
    """Look ``token_name`` up as a palette slot; None for unknown or empty slots."""
    if token_name not in PALETTE_KEYS:
        return None
    return getattr(palette, token_name) or None


def resolve_all_tokens(semantic_tokens: Mapping[str, str], palette: ThemePalette) -> dict[str, str]:
    """Resolve every semantic token to a color, omitting ones that do not resolve."""
    resolved: dict[str, str] = {}
    for token, slot in semantic_tokens.items():
        color = resolve_token(slot, palette)
        if color:
            resolved[token] = color
    return resolved


def is_valid_hex_color(color: str) -> bool:
    return bool(_HEX_COLOR_RE.match(color))


def hex_with_alpha(hex_color: str, alpha: float) -> str:
    """Return ``#rrggbbaa``, replacing any alpha already on ``hex_color``."""
    clamped = min(max(alpha, 0.0), 1.0)
    alpha_byte = math.floor(clamped * 255 + 0.5)
    base = hex_color[:7] if len(hex_color) == 9 else hex_color
    return f"{base}{alpha_byte:02x}"


def merge_palettes(base: ThemePalette, overrides: Mapping[str, str]) -> ThemePalette:
    return base.merged(overrides)


def merge_semantic_tokens(overrides: Mapping[str, str] | None = None) -> dict[str, str]:
    tokens = dict(DEFAULT_SEMANTIC_TOKENS)
    if overrides:
        tokens.update(overrides)
    return tokens


def create_default_palette(variant: str = "day") -> ThemePalette:
    """Catppuccin Macchiato for night, Latte for anything else."""
    return _NIGHT_PALETTE if variant == "night" else _DAY_PALETTE


def resolve_color_refs(template: str, palette: ThemePalette) -> str:
    """Replace ``{slot}`` references; unknown or empty slots are left as written."""

    def _substitute(match: re.Match[str]) -> str:
        return resolve_token(match.group(1), palette) or match.group(0)

    return _COLOR_REF_RE.sub(_substitute, template)


def create_default_theme(theme_id: str, name: str) -> Theme:
    timestamp = datetime.now(timezone.utc).isoformat()
    return Theme(
        id=theme_id,
        name=name,
        author=DEFAULT_AUTHOR,
        version="1.0.0",
        day=ThemeVariant(
            palette=create_default_palette("day"),
            semantic_tokens=dict(DEFAULT_SEMANTIC_TOKENS),
        ),
        night=ThemeVariant(
            palette=create_default_palette("night"),
            semantic_tokens=dict(DEFAULT_SEMANTIC_TOKENS),
        ),
        created_at=timestamp,
        updated_at=timestamp,
    )
