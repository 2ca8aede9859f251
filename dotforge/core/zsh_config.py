"""Parse and generate ``.zshrc`` text."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field

from dotforge.core.shell_common import (
    DEFAULT_MANAGED_BY,
    BlockTracker,
    EnvironmentVar,
    LineRule,
    ShellAlias,
    append_section,
    apply_rules,
    format_alias_line,
    format_env_line,
    iter_content_lines,
    join_path_additions,
    managed_header,
    parse_alias,
    parse_int,
    references_path,
    split_path_additions,
    unquote,
)

logger = logging.getLogger(__name__)

DEFAULT_HISTORY_FILE = "~/.zsh_history"
DEFAULT_HISTORY_SIZE = 10000
DEFAULT_AUTOSUGGEST_STRATEGY: tuple[str, ...] = ("history", "completion")
DEFAULT_AUTOSUGGEST_STYLE = "fg=#666666"
DEFAULT_AUTOSUGGEST_BUFFER = 20

KNOWN_PLUGINS: tuple[str, ...] = (
    "zsh-autosuggestions",
    "zsh-syntax-highlighting",
    "zsh-completions",
)
_HISTORY_OPTIONS = {
    "SHAREHISTORY",
    "APPENDHISTORY",
    "INCAPPENDHISTORY",
    "INCAPPENDHISTORYTIME",
    "EXTENDEDHISTORY",
}

_EXPORT_RE = re.compile(r"^export\s+([A-Za-z_][A-Za-z0-9_]*)=(.*)$")
_ASSIGN_RE = re.compile(r"^([A-Za-z_][A-Za-z0-9_]*)=(.*)$")
_AUTOSUGGEST_RE = re.compile(r"^ZSH_AUTOSUGGEST_([A-Z_]+)=(.*)$")
_HIGHLIGHT_RE = re.compile(r"^ZSH_HIGHLIGHT_STYLES\[([^\]]+)\]=(.*)$")
_BINDKEY_RE = re.compile(r"""^bindkey\s+['"]([^'"]+)['"]\s+(\S+)(?:\s+#\s*(.*))?$""")
_SOURCE_PREFIX_RE = re.compile(r"^(?:source|\.) ")
_DISABLED_PLUGIN_RE = re.compile(r"^#\s*disabled:\s+(?:source|\.)\s+(.+)$")


@dataclass(slots=True)
class ZshHistory:
    file: str = DEFAULT_HISTORY_FILE
    size: int = DEFAULT_HISTORY_SIZE
    save_size: int = DEFAULT_HISTORY_SIZE
    options: list[str] = field(default_factory=list)


@dataclass(frozen=True, slots=True)
class ZshPlugin:
    name: str
    path: str
    enabled: bool = True


@dataclass(frozen=True, slots=True)
class ZshKeybinding:
    key: str
    widget: str
    description: str | None = None


@dataclass(slots=True)
class ZshAutosuggestions:
    strategy: list[str] = field(default_factory=lambda: list(DEFAULT_AUTOSUGGEST_STRATEGY))
    highlight_style: str = DEFAULT_AUTOSUGGEST_STYLE
    buffer_max_size: int = DEFAULT_AUTOSUGGEST_BUFFER

    def is_customized(self) -> bool:
        return bool(self.strategy) or (
            self.highlight_style != DEFAULT_AUTOSUGGEST_STYLE
            or self.buffer_max_size != DEFAULT_AUTOSUGGEST_BUFFER
        )


@dataclass(slots=True)
class ZshConfig:
    """Structured view of a ``.zshrc`` plus the lines it did not understand."""

    environment: list[EnvironmentVar] = field(default_factory=list)
    path_additions: list[str] = field(default_factory=list)
    history: ZshHistory = field(default_factory=ZshHistory)
    options: list[str] = field(default_factory=list)
    plugins: list[ZshPlugin] = field(default_factory=list)
    aliases: list[ShellAlias] = field(default_factory=list)
    keybindings: list[ZshKeybinding] = field(default_factory=list)
    autosuggestions: ZshAutosuggestions = field(default_factory=ZshAutosuggestions)
    syntax_highlighting: dict[str, str] = field(default_factory=dict)
    startup_commands: list[str] = field(default_factory=list)
    raw_lines: list[str] = field(default_factory=list)


ZSH_OPTIONS: tuple[str, ...] = (
    "AUTO_CD",
    "AUTO_PUSHD",
    "PUSHD_IGNORE_DUPS",
    "PUSHD_SILENT",
    "CORRECT",
    "CORRECT_ALL",
    "INTERACTIVE_COMMENTS",
    "EXTENDED_GLOB",
    "NOMATCH",
    "NOTIFY",
    "PROMPT_SUBST",
    "SHARE_HISTORY",
    "APPEND_HISTORY",
    "INC_APPEND_HISTORY",
    "HIST_IGNORE_DUPS",
    "HIST_IGNORE_ALL_DUPS",
    "HIST_IGNORE_SPACE",
    "HIST_FIND_NO_DUPS",
    "HIST_REDUCE_BLANKS",
    "HIST_VERIFY",
    "HIST_EXPIRE_DUPS_FIRST",
)


def default_zsh_config() -> ZshConfig:
    return ZshConfig(
        history=ZshHistory(options=["SHARE_HISTORY", "HIST_IGNORE_DUPS", "HIST_IGNORE_SPACE"]),
        options=["AUTO_CD", "INTERACTIVE_COMMENTS", "CORRECT"],
        aliases=[
            ShellAlias("ls", "ls --color=auto"),
            ShellAlias("ll", "ls -la"),
            ShellAlias("la", "ls -A"),
            ShellAlias("grep", "grep --color=auto"),
        ],
    )


def is_history_option(option: str) -> bool:
    """Zsh option names ignore case and underscores."""
    normalized = option.upper().replace("_", "")
    return normalized.startswith("HIST") or normalized in _HISTORY_OPTIONS


def plugin_name_for_path(path: str) -> str:
    for known in KNOWN_PLUGINS:
        if known in path:
            return known
    return unquote(path).rsplit("/", 1)[-1].replace(".zsh", "", 1)


def _handle_export(config: ZshConfig, line: str, trimmed: str) -> bool:
    if not trimmed.startswith("export "):
        return False
    match = _EXPORT_RE.match(trimmed)
    if match is None:
        return False
    key, value = match.group(1), unquote(match.group(2))
    if key == "PATH" and references_path(value):
        config.path_additions.extend(split_path_additions(value))
    else:
        config.environment.append(EnvironmentVar(key, value, export=True))
    return True


def _handle_autosuggest(config: ZshConfig, line: str, trimmed: str) -> bool:
    match = _AUTOSUGGEST_RE.match(trimmed)
    if match is None:
        return False
    key, value = match.group(1), match.group(2).strip()
    settings = config.autosuggestions
    if key == "STRATEGY":
        settings.strategy = [part for part in value.strip("()").split() if part]
    elif key == "HIGHLIGHT_STYLE":
        settings.highlight_style = unquote(value)
    elif key == "BUFFER_MAX_SIZE":
        settings.buffer_max_size = parse_int(unquote(value), DEFAULT_AUTOSUGGEST_BUFFER)
    else:
        config.raw_lines.append(line)
    return True


def _handle_highlight_style(config: ZshConfig, line: str, trimmed: str) -> bool:
    match = _HIGHLIGHT_RE.match(trimmed)
    if match is None:
        return False
    config.syntax_highlighting[match.group(1)] = unquote(match.group(2).strip())
    return True


def _handle_assignment(config: ZshConfig, line: str, trimmed: str) -> bool:
    match = _ASSIGN_RE.match(trimmed)
    if match is None or "(" in trimmed:
        return False
    key, value = match.group(1), unquote(match.group(2))
    if key == "HISTFILE":
        config.history.file = value
    elif key == "HISTSIZE":
        config.history.size = parse_int(value, DEFAULT_HISTORY_SIZE)
    elif key == "SAVEHIST":
        config.history.save_size = parse_int(value, DEFAULT_HISTORY_SIZE)
    elif key == "PATH" and references_path(value):
        config.path_additions.extend(split_path_additions(value))
    elif "$" in value or "`" in value:
        return False
    else:
        config.environment.append(EnvironmentVar(key, value, export=False))
    return True


def _handle_setopt(config: ZshConfig, line: str, trimmed: str) -> bool:
    if not trimmed.startswith("setopt "):
        return False
    for option in trimmed[len("setopt "):].split():
        if is_history_option(option):
            config.history.options.append(option)
        else:
            config.options.append(option)
    return True


def _handle_unsetopt(config: ZshConfig, line: str, trimmed: str) -> bool:
    if not trimmed.startswith("unsetopt "):
        return False
    config.raw_lines.append(line)
    return True


def _handle_alias(config: ZshConfig, line: str, trimmed: str) -> bool:
    if not trimmed.startswith("alias "):
        return False
    alias = parse_alias(trimmed)
    if alias is None:
        config.raw_lines.append(line)
    else:
        config.aliases.append(alias)
    return True


def _handle_bindkey(config: ZshConfig, line: str, trimmed: str) -> bool:
    if not trimmed.startswith("bindkey "):
        return False
    match = _BINDKEY_RE.match(trimmed)
    if match is None:
        config.raw_lines.append(line)
    else:
        config.keybindings.append(
            ZshKeybinding(match.group(1), match.group(2), match.group(3) or None)
        )
    return True


def _handle_source(config: ZshConfig, line: str, trimmed: str) -> bool:
    if not (trimmed.startswith("source ") or trimmed.startswith(". ")):
        return False
    path = _SOURCE_PREFIX_RE.sub("", trimmed, count=1).strip()
    config.plugins.append(ZshPlugin(name=plugin_name_for_path(path), path=path))
    return True


def _handle_disabled_plugin(config: ZshConfig, line: str, trimmed: str) -> bool:
    match = _DISABLED_PLUGIN_RE.match(trimmed)
    if match is None:
        return False
    path = match.group(1).strip()
    config.plugins.append(ZshPlugin(name=plugin_name_for_path(path), path=path, enabled=False))
    return True


def _handle_eval(config: ZshConfig, line: str, trimmed: str) -> bool:
    if not trimmed.startswith("eval "):
        return False
    config.startup_commands.append(trimmed)
    return True


ZSH_RULES: tuple[LineRule[ZshConfig], ...] = (
    LineRule("disabled-plugin", _handle_disabled_plugin),
    LineRule("export", _handle_export),
    LineRule("autosuggest", _handle_autosuggest),
    LineRule("highlight-style", _handle_highlight_style),
    LineRule("assignment", _handle_assignment),
    LineRule("setopt", _handle_setopt),
    LineRule("unsetopt", _handle_unsetopt),
    LineRule("alias", _handle_alias),
    LineRule("bindkey", _handle_bindkey),
    LineRule("source", _handle_source),
    LineRule("eval", _handle_eval),
)


def parse_zsh_config(content: str) -> ZshConfig:
    """Parse ``.zshrc`` text.

    History file and sizes keep their defaults unless the file sets them.
    Every list starts empty, including the autosuggestion strategy, so a
    file without autosuggestion settings does not gain them on save.
    Multi-line compound commands are kept whole in ``raw_lines``.
    """
    config = ZshConfig(autosuggestions=ZshAutosuggestions(strategy=[]))
    block = BlockTracker()
    for line, trimmed in iter_content_lines(content, keep_comment=_DISABLED_PLUGIN_RE.match):
        if block.consume(trimmed) or not apply_rules(ZSH_RULES, config, line, trimmed):
            config.raw_lines.append(line)
    logger.debug("parsed zshrc: %d raw lines", len(config.raw_lines))
    return config


def _format_bindkey(binding: ZshKeybinding) -> str:
    line = f"bindkey '{binding.key}' {binding.widget}"
    if binding.description:
        line += f" # {binding.description}"
    return line


def _format_plugin(plugin: ZshPlugin) -> str:
    if plugin.enabled:
        return f"source {plugin.path}"
    return f"# disabled: source {plugin.path}"


def stringify_zsh_config(config: ZshConfig, managed_by: str = DEFAULT_MANAGED_BY) -> str:
    """Render a :class:`ZshConfig` as ``.zshrc`` text."""
    lines = managed_header("Zsh Configuration", managed_by)

    history = config.history
    append_section(
        lines,
        "History",
        [
            f"HISTFILE={history.file}",
            f"HISTSIZE={history.size}",
            f"SAVEHIST={history.save_size}",
            *(f"setopt {opt}" for opt in history.options),
        ],
    )
    append_section(lines, "Shell Options", [f"setopt {opt}" for opt in config.options])
    append_section(lines, "Environment Variables", [format_env_line(env) for env in config.environment])
    if config.path_additions:
        append_section(
            lines, "PATH Additions", [f'export PATH="{join_path_additions(config.path_additions)}"']
        )
    append_section(lines, "Key Bindings", [_format_bindkey(kb) for kb in config.keybindings])
    append_section(lines, "Aliases", [format_alias_line(alias) for alias in config.aliases])

    suggest = config.autosuggestions
    if suggest.is_customized():
        append_section(
            lines,
            "Zsh Autosuggestions",
            [
                f"ZSH_AUTOSUGGEST_STRATEGY=({' '.join(suggest.strategy)})",
                f'ZSH_AUTOSUGGEST_HIGHLIGHT_STYLE="{suggest.highlight_style}"',
                f"ZSH_AUTOSUGGEST_BUFFER_MAX_SIZE={suggest.buffer_max_size}",
            ],
        )
    append_section(
        lines,
        "Syntax Highlighting",
        [f'ZSH_HIGHLIGHT_STYLES[{key}]="{value}"' for key, value in config.syntax_highlighting.items()],
    )
    append_section(
        lines,
        "Plugins",
        [_format_plugin(plugin) for plugin in config.plugins],
    )
    append_section(lines, "Startup Commands", list(config.startup_commands))
    append_section(lines, "Additional Configuration", list(config.raw_lines))
    return "\n".join(lines)
