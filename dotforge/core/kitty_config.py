"""Parse and generate ``kitty.conf`` text."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable

from dotforge.core.shell_common import (
    DEFAULT_MANAGED_BY,
    format_number,
    iter_content_lines,
    managed_header,
    parse_float,
    parse_int,
)

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class KittyFont:
    family: str = "JetBrains Mono Nerd Font"
    size: float = 12.0
    bold: str = "auto"
    italic: str = "auto"
    bold_italic: str = "auto"


@dataclass(slots=True)
class KittyAppearance:
    background_opacity: float = 1.0
    cursor_shape: str = "beam"
    cursor_blink: bool = True
    cursor_blink_interval: float = 0.5


@dataclass(slots=True)
class KittyWindow:
    initial_width: str = "120c"
    initial_height: str = "40c"
    padding_width: int = 8
    margin_width: int = 0
    border_width: int = 0
    remember_size: bool = True


@dataclass(slots=True)
class KittyTabBar:
    style: str = "powerline"
    edge: str = "bottom"


@dataclass(slots=True)
class KittyBehavior:
    shell: str = "."
    scrollback_lines: int = 10000
    copy_on_select: str = "clipboard"
    enable_audio_bell: bool = False


@dataclass(frozen=True, slots=True)
class KittyKeybinding:
    key: str
    action: str
    mods: str | None = None

    @property
    def shortcut(self) -> str:
        return f"{self.mods}+{self.key}" if self.mods else self.key


@dataclass(slots=True)
class KittyTheme:
    include_file: str = ""


@dataclass(slots=True)
class KittyConfig:
    font: KittyFont = field(default_factory=KittyFont)
    appearance: KittyAppearance = field(default_factory=KittyAppearance)
    window: KittyWindow = field(default_factory=KittyWindow)
    tab_bar: KittyTabBar = field(default_factory=KittyTabBar)
    behavior: KittyBehavior = field(default_factory=KittyBehavior)
    keybindings: list[KittyKeybinding] = field(default_factory=list)
    theme: KittyTheme = field(default_factory=KittyTheme)
    raw_lines: list[str] = field(default_factory=list)


def default_kitty_config() -> KittyConfig:
    return KittyConfig()


def _as_text(value: str) -> str:
    return value


def _as_yes_no(value: str) -> bool:
    return value == "yes"


def _as_int(default: int) -> Callable[[str], int]:
    return lambda value: parse_int(value, default)


def _as_float(default: float) -> Callable[[str], float]:
    return lambda value: parse_float(value, default)


# kitty key -> (record, attribute, converter)
_KEY_TABLE: dict[str, tuple[str, str, Callable[[str], object]]] = {
    "font_family": ("font", "family", _as_text),
    "font_size": ("font", "size", _as_float(12.0)),
    "bold_font": ("font", "bold", _as_text),
    "italic_font": ("font", "italic", _as_text),
    "bold_italic_font": ("font", "bold_italic", _as_text),
    "background_opacity": ("appearance", "background_opacity", _as_float(1.0)),
    "cursor_shape": ("appearance", "cursor_shape", _as_text),
    "initial_window_width": ("window", "initial_width", _as_text),
    "initial_window_height": ("window", "initial_height", _as_text),
    "window_padding_width": ("window", "padding_width", _as_int(8)),
    "window_margin_width": ("window", "margin_width", _as_int(0)),
    "window_border_width": ("window", "border_width", _as_int(0)),
    "remember_window_size": ("window", "remember_size", _as_yes_no),
    "tab_bar_style": ("tab_bar", "style", _as_text),
    "tab_bar_edge": ("tab_bar", "edge", _as_text),
    "shell": ("behavior", "shell", _as_text),
    "scrollback_lines": ("behavior", "scrollback_lines", _as_int(10000)),
    "copy_on_select": ("behavior", "copy_on_select", _as_text),
    "enable_audio_bell": ("behavior", "enable_audio_bell", _as_yes_no),
}


def _apply_blink_interval(config: KittyConfig, value: str) -> None:
    interval = parse_float(value, 0.0)
    if interval > 0:
        config.appearance.cursor_blink_interval = interval
        config.appearance.cursor_blink = True
    else:
        config.appearance.cursor_blink = False


def parse_kitty_config(content: str) -> KittyConfig:
    """Parse ``kitty.conf`` text on top of the defaults.

    A ``map`` line's first token is the whole shortcut, so a binding written
    from ``mods="ctrl+shift", key="t"`` reads back as ``key="ctrl+shift+t"``
    with no ``mods``. The shortcut itself is unchanged.
    """
    config = KittyConfig()
    include_seen = False
    for line, trimmed in iter_content_lines(content):
        parts = trimmed.split(None, 1)
        if len(parts) < 2:
            config.raw_lines.append(line)
            continue
        key, value = parts[0], parts[1].strip()

        if key in _KEY_TABLE:
            record_name, attribute, convert = _KEY_TABLE[key]
            setattr(getattr(config, record_name), attribute, convert(value))
        elif key == "cursor_blink_interval":
            _apply_blink_interval(config, value)
        elif key == "map":
            tokens = value.split()
            if len(tokens) >= 2:
                config.keybindings.append(KittyKeybinding(key=tokens[0], action=" ".join(tokens[1:])))
            else:
                config.raw_lines.append(line)
        elif key == "include" and not include_seen:
            include_seen = True
            config.theme.include_file = value
        else:
            config.raw_lines.append(line)

    logger.debug("parsed kitty.conf: %d raw lines", len(config.raw_lines))
    return config


def _yes_no(value: bool) -> str:
    return "yes" if value else "no"


def stringify_kitty_config(config: KittyConfig, managed_by: str = DEFAULT_MANAGED_BY) -> str:
    """Render a :class:`KittyConfig` as ``kitty.conf`` text, newline-terminated."""
    font = config.font
    appearance = config.appearance
    window = config.window
    behavior = config.behavior
    blink_interval = appearance.cursor_blink_interval if appearance.cursor_blink else 0

    lines = managed_header("Kitty Terminal Configuration", managed_by)
    lines.extend(
        [
            "# Font",
            f"font_family      {font.family}",
            f"bold_font        {font.bold}",
            f"italic_font      {font.italic}",
            f"bold_italic_font {font.bold_italic}",
            f"font_size        {format_number(font.size)}",
            "",
            "# Cursor",
            f"cursor_shape {appearance.cursor_shape}",
            f"cursor_blink_interval {format_number(blink_interval)}",
            "",
            "# Appearance",
            f"background_opacity {format_number(appearance.background_opacity)}",
            "",
            "# Scrollback",
            f"scrollback_lines {behavior.scrollback_lines}",
            "",
            "# Mouse",
            f"copy_on_select {behavior.copy_on_select}",
            "",
            "# Window",
            f"remember_window_size  {_yes_no(window.remember_size)}",
            f"initial_window_width  {window.initial_width}",
            f"initial_window_height {window.initial_height}",
            f"window_padding_width  {window.padding_width}",
        ]
    )
    if window.margin_width > 0:
        lines.append(f"window_margin_width   {window.margin_width}")
    if window.border_width > 0:
        lines.append(f"window_border_width   {window.border_width}")

    lines.extend(
        [
            "",
            "# Tab bar",
            f"tab_bar_edge {config.tab_bar.edge}",
            f"tab_bar_style {config.tab_bar.style}",
            "",
            "# Bell",
            f"enable_audio_bell {_yes_no(behavior.enable_audio_bell)}",
            "",
            "# Shell",
            f"shell {behavior.shell}",
        ]
    )
    if config.theme.include_file:
        lines.extend(["", "# Theme", f"include {config.theme.include_file}"])
    if config.keybindings:
        lines.extend(["", "# Keybindings"])
        lines.extend(f"map {kb.shortcut} {kb.action}" for kb in config.keybindings)
    if config.raw_lines:
        lines.extend(["", "# Additional Configuration"])
        lines.extend(config.raw_lines)
    return "\n".join(lines) + "\n"
