"""Parse and generate ``.tmux.conf`` text."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import Callable

from dotforge.core.shell_common import (
    DEFAULT_MANAGED_BY,
    LineRule,
    append_section,
    apply_rules,
    iter_content_lines,
    managed_header,
    parse_int,
    unquote,
)

logger = logging.getLogger(__name__)

_SET_RE = re.compile(r"^(set|set-option|setw|set-window-option)\s+((?:-[a-zA-Z]+\s+)*)(\S+)\s+(.+)$")
_BIND_RE = re.compile(r"^bind(?:-key)?\s+((?:-(?:[nr]+|T\s+\S+)\s+)*)(\S+)\s+(.+)$")
_DESCRIPTION_RE = re.compile(r"\s#\s(.*)$")
_UNBIND_DEFAULT_RE = re.compile(r"^unbind(?:-key)?\s+C-b$")


@dataclass(slots=True)
class TmuxGeneral:
    prefix: str = "C-a"
    mouse: bool = True
    history_limit: int = 10000
    base_index: int = 1
    pane_base_index: int = 1
    renumber_windows: bool = True
    escape_time: int = 0
    default_terminal: str = "tmux-256color"
    terminal_overrides: str = ",xterm-256color:RGB"


@dataclass(slots=True)
class TmuxAppearance:
    status_position: str = "bottom"
    status_style: str = "bg=#1e1e2e fg=#cdd6f4"
    status_left: str = "#[fg=#89b4fa,bold] #S "
    status_right: str = "#[fg=#a6adc8] %H:%M "
    status_left_length: int = 20
    status_right_length: int = 20
    window_status_format: str = "#[fg=#6c7086] #I:#W "
    window_status_current_format: str = "#[fg=#89b4fa,bold] #I:#W "


@dataclass(frozen=True, slots=True)
class TmuxKeybinding:
    key: str
    command: str
    flags: str | None = None
    description: str | None = None


@dataclass(slots=True)
class TmuxConfig:
    general: TmuxGeneral = field(default_factory=TmuxGeneral)
    appearance: TmuxAppearance = field(default_factory=TmuxAppearance)
    keybindings: list[TmuxKeybinding] = field(default_factory=list)
    raw_lines: list[str] = field(default_factory=list)


@dataclass(slots=True)
class _ParseState:
    config: TmuxConfig
    overrides_seen: bool = False


def _as_text(value: str) -> str:
    return value


def _as_on_off(value: str) -> bool:
    return value == "on"


def _as_int(default: int) -> Callable[[str], int]:
    return lambda value: parse_int(value, default)


# tmux option -> (record, attribute, converter)
_OPTION_TABLE: dict[str, tuple[str, str, Callable[[str], object]]] = {
    "prefix": ("general", "prefix", _as_text),
    "mouse": ("general", "mouse", _as_on_off),
    "history-limit": ("general", "history_limit", _as_int(10000)),
    "base-index": ("general", "base_index", _as_int(1)),
    "pane-base-index": ("general", "pane_base_index", _as_int(1)),
    "renumber-windows": ("general", "renumber_windows", _as_on_off),
    "escape-time": ("general", "escape_time", _as_int(0)),
    "default-terminal": ("general", "default_terminal", _as_text),
    "terminal-overrides": ("general", "terminal_overrides", _as_text),
    "status-position": ("appearance", "status_position", _as_text),
    "status-style": ("appearance", "status_style", _as_text),
    "status-left": ("appearance", "status_left", _as_text),
    "status-right": ("appearance", "status_right", _as_text),
    "status-left-length": ("appearance", "status_left_length", _as_int(20)),
    "status-right-length": ("appearance", "status_right_length", _as_int(20)),
    "window-status-format": ("appearance", "window_status_format", _as_text),
    "window-status-current-format": ("appearance", "window_status_current_format", _as_text),
}


# Commands offered when editing a key binding.
TMUX_COMMANDS: tuple[str, ...] = (
    "select-pane",
    "split-window",
    "select-window",
    "new-window",
    "kill-pane",
    "kill-window",
    "resize-pane",
    "swap-pane",
    "swap-window",
    "source-file",
    "display",
    "send-prefix",
)


def default_tmux_config() -> TmuxConfig:
    return TmuxConfig(
        keybindings=[
            TmuxKeybinding("|", 'split-window -h -c "#{pane_current_path}"', description="Split horizontal"),
            TmuxKeybinding("-", 'split-window -v -c "#{pane_current_path}"', description="Split vertical"),
            TmuxKeybinding("h", "select-pane -L", description="Move left"),
            TmuxKeybinding("j", "select-pane -D", description="Move down"),
            TmuxKeybinding("k", "select-pane -U", description="Move up"),
            TmuxKeybinding("l", "select-pane -R", description="Move right"),
            TmuxKeybinding("H", "resize-pane -L 5", flags="-r", description="Resize left"),
            TmuxKeybinding("J", "resize-pane -D 5", flags="-r", description="Resize down"),
            TmuxKeybinding("K", "resize-pane -U 5", flags="-r", description="Resize up"),
            TmuxKeybinding("L", "resize-pane -R 5", flags="-r", description="Resize right"),
            TmuxKeybinding(
                "r",
                'source-file ~/.tmux.conf \\; display "Config reloaded!"',
                description="Reload config",
            ),
        ]
    )


def _handle_set(state: _ParseState, line: str, trimmed: str) -> bool:
    match = _SET_RE.match(trimmed)
    if match is None:
        return False
    flags = match.group(2).replace("-", "").replace(" ", "")
    key, value = match.group(3), unquote(match.group(4).strip())
    entry = _OPTION_TABLE.get(key)
    if entry is None:
        state.config.raw_lines.append(line)
        return True
    if key == "terminal-overrides":
        # Only the first override line is modelled; the stringifier emits exactly one.
        if state.overrides_seen:
            state.config.raw_lines.append(line)
        else:
            state.overrides_seen = True
            state.config.general.terminal_overrides = value
        return True
    if "a" in flags or "u" in flags:
        state.config.raw_lines.append(line)
        return True
    record_name, attribute, convert = entry
    setattr(getattr(state.config, record_name), attribute, convert(value))
    return True


def _handle_bind(state: _ParseState, line: str, trimmed: str) -> bool:
    match = _BIND_RE.match(trimmed)
    if match is None:
        return False
    flags = " ".join(match.group(1).split()) or None
    key, command = match.group(2), match.group(3)
    description = None
    comment = _DESCRIPTION_RE.search(command)
    if comment is not None:
        description = comment.group(1).strip() or None
        command = command[: comment.start()].rstrip()
    if flags is None and key == state.config.general.prefix and command == "send-prefix":
        return True
    state.config.keybindings.append(TmuxKeybinding(key, command, flags, description))
    return True


def _handle_unbind(state: _ParseState, line: str, trimmed: str) -> bool:
    if not (trimmed.startswith("unbind ") or trimmed.startswith("unbind-key ")):
        return False
    if _UNBIND_DEFAULT_RE.match(trimmed) is None:
        state.config.raw_lines.append(line)
    return True


TMUX_RULES: tuple[LineRule[_ParseState], ...] = (
    LineRule("set", _handle_set),
    LineRule("bind", _handle_bind),
    LineRule("unbind", _handle_unbind),
)


def parse_tmux_config(content: str) -> TmuxConfig:
    """Parse ``.tmux.conf`` text.

    Options missing from the file keep their defaults. Keybindings start
    empty. The managed prefix lines are consumed so they are not duplicated
    on save.
    """
    state = _ParseState(config=TmuxConfig())
    for line, trimmed in iter_content_lines(content):
        if not apply_rules(TMUX_RULES, state, line, trimmed):
            state.config.raw_lines.append(line)
    logger.debug("parsed tmux.conf: %d raw lines", len(state.config.raw_lines))
    return state.config


def _on_off(value: bool) -> str:
    return "on" if value else "off"


def format_keybinding(binding: TmuxKeybinding) -> str:
    flags = f"{binding.flags} " if binding.flags else ""
    comment = f" # {binding.description}" if binding.description else ""
    return f"bind {flags}{binding.key} {binding.command}{comment}"


def stringify_tmux_config(config: TmuxConfig, managed_by: str = DEFAULT_MANAGED_BY) -> str:
    """Render a :class:`TmuxConfig` as ``.tmux.conf`` text."""
    general = config.general
    appearance = config.appearance
    lines = managed_header("Tmux Configuration", managed_by)

    append_section(
        lines,
        "Prefix key",
        [f"set -g prefix {general.prefix}", "unbind C-b", f"bind {general.prefix} send-prefix"],
    )
    general_lines = [
        f"set -g mouse {_on_off(general.mouse)}",
        f"set -g history-limit {general.history_limit}",
        f"set -g base-index {general.base_index}",
        f"setw -g pane-base-index {general.pane_base_index}",
        f"set -g renumber-windows {_on_off(general.renumber_windows)}",
        f"set -sg escape-time {general.escape_time}",
        f'set -g default-terminal "{general.default_terminal}"',
    ]
    if general.terminal_overrides:
        general_lines.append(f'set -ag terminal-overrides "{general.terminal_overrides}"')
    append_section(lines, "General Settings", general_lines)
    append_section(
        lines,
        "Status Bar",
        [
            f"set -g status-position {appearance.status_position}",
            f"set -g status-style '{appearance.status_style}'",
            f"set -g status-left '{appearance.status_left}'",
            f"set -g status-right '{appearance.status_right}'",
            f"set -g status-left-length {appearance.status_left_length}",
            f"set -g status-right-length {appearance.status_right_length}",
        ],
    )
    append_section(
        lines,
        "Window Status",
        [
            f"setw -g window-status-format '{appearance.window_status_format}'",
            f"setw -g window-status-current-format '{appearance.window_status_current_format}'",
        ],
    )
    append_section(lines, "Keybindings", [format_keybinding(kb) for kb in config.keybindings])
    append_section(lines, "Additional Configuration", list(config.raw_lines))
    return "\n".join(lines)
