"""Parse and generate ``.bashrc`` text."""

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

DEFAULT_HIST_SIZE = 1000
DEFAULT_HIST_FILE_SIZE = 2000

# Non-interactive guard; always regenerated by the stringifier.
_GUARD_LINES: tuple[str, ...] = ("case $- in", "*i*) ;;", "*) return;;", "esac")
_GUARD_OUTPUT: tuple[str, ...] = (
    "# If not running interactively, don't do anything",
    "case $- in",
    "    *i*) ;;",
    "      *) return;;",
    "esac",
    "",
)

_EXPORT_RE = re.compile(r"^export\s+([A-Za-z_][A-Za-z0-9_]*)=(.*)$")
_ASSIGN_RE = re.compile(r"^([A-Za-z_][A-Za-z0-9_]*)=(.*)$")
_GUARDED_SOURCE_RE = re.compile(
    r"""^\[\s+-f\s+"?([^"\s]+)"?\s+\]\s+&&\s+(?:\.|source)\s+"?\1"?$"""
)
_SOURCE_PREFIX_RE = re.compile(r"^(?:source|\.) ")
_SOURCE_STRIP_RE = re.compile(r"""['"`]""")


@dataclass(slots=True)
class BashHistory:
    hist_control: str = "ignoreboth"
    hist_size: int = DEFAULT_HIST_SIZE
    hist_file_size: int = DEFAULT_HIST_FILE_SIZE
    hist_ignore: str = ""


@dataclass(slots=True)
class BashConfig:
    """Structured view of a ``.bashrc`` plus the lines it did not understand."""

    environment: list[EnvironmentVar] = field(default_factory=list)
    aliases: list[ShellAlias] = field(default_factory=list)
    sources: list[str] = field(default_factory=list)
    path_additions: list[str] = field(default_factory=list)
    history: BashHistory = field(default_factory=BashHistory)
    shopt_options: list[str] = field(default_factory=list)
    startup_commands: list[str] = field(default_factory=list)
    raw_lines: list[str] = field(default_factory=list)


BASH_SHOPT_OPTIONS: tuple[str, ...] = (
    "histappend",
    "checkwinsize",
    "autocd",
    "cdspell",
    "dirspell",
    "dotglob",
    "extglob",
    "globstar",
    "nocaseglob",
    "nocasematch",
)


@dataclass(slots=True)
class _ParseState:
    config: BashConfig
    guard_block: list[str] | None = None
    block: BlockTracker = field(default_factory=BlockTracker)


def default_bash_config() -> BashConfig:
    """Return the starting configuration used when no ``.bashrc`` exists."""
    return BashConfig(
        aliases=[
            ShellAlias("ls", "ls --color=auto"),
            ShellAlias("ll", "ls -la"),
            ShellAlias("la", "ls -A"),
            ShellAlias("grep", "grep --color=auto"),
            ShellAlias("fgrep", "fgrep --color=auto"),
            ShellAlias("egrep", "egrep --color=auto"),
        ],
        shopt_options=["histappend", "checkwinsize"],
    )


def _normalize(text: str) -> str:
    return " ".join(text.split())


def _handle_case_guard(state: _ParseState, line: str, trimmed: str) -> bool:
    if state.guard_block is not None:
        state.guard_block.append(line)
        if trimmed == "esac":
            block = state.guard_block
            state.guard_block = None
            if tuple(_normalize(item) for item in block) != _GUARD_LINES:
                state.config.raw_lines.extend(block)
        return True
    if state.block.depth == 0 and _normalize(trimmed) == _GUARD_LINES[0]:
        state.guard_block = [line]
        return True
    return False


def _handle_compound_block(state: _ParseState, line: str, trimmed: str) -> bool:
    if not state.block.consume(trimmed):
        return False
    state.config.raw_lines.append(line)
    return True


def _handle_export(state: _ParseState, line: str, trimmed: str) -> bool:
    if not trimmed.startswith("export "):
        return False
    match = _EXPORT_RE.match(trimmed)
    if match is None:
        return False
    key, value = match.group(1), unquote(match.group(2))
    if key == "PATH" and references_path(value):
        state.config.path_additions.extend(split_path_additions(value))
    else:
        state.config.environment.append(EnvironmentVar(key, value, export=True))
    return True


def _handle_assignment(state: _ParseState, line: str, trimmed: str) -> bool:
    match = _ASSIGN_RE.match(trimmed)
    if match is None or "(" in trimmed:
        return False
    key, value = match.group(1), unquote(match.group(2))
    history = state.config.history
    if key == "HISTCONTROL":
        history.hist_control = value
    elif key == "HISTSIZE":
        history.hist_size = parse_int(value, DEFAULT_HIST_SIZE)
    elif key == "HISTFILESIZE":
        history.hist_file_size = parse_int(value, DEFAULT_HIST_FILE_SIZE)
    elif key == "HISTIGNORE":
        history.hist_ignore = value
    elif key == "PATH" and references_path(value):
        state.config.path_additions.extend(split_path_additions(value))
    elif "$" in value or "`" in value:
        return False
    else:
        state.config.environment.append(EnvironmentVar(key, value, export=False))
    return True


def _handle_shopt(state: _ParseState, line: str, trimmed: str) -> bool:
    if not trimmed.startswith("shopt -s "):
        return False
    state.config.shopt_options.extend(trimmed[len("shopt -s "):].split())
    return True


def _handle_alias(state: _ParseState, line: str, trimmed: str) -> bool:
    if not trimmed.startswith("alias "):
        return False
    alias = parse_alias(trimmed)
    if alias is None:
        state.config.raw_lines.append(line)
    else:
        state.config.aliases.append(alias)
    return True


def _handle_guarded_source(state: _ParseState, line: str, trimmed: str) -> bool:
    match = _GUARDED_SOURCE_RE.match(trimmed)
    if match is None or "$" not in match.group(1):
        return False
    state.config.sources.append(match.group(1))
    return True


def _handle_source(state: _ParseState, line: str, trimmed: str) -> bool:
    if not (trimmed.startswith("source ") or trimmed.startswith(". ")):
        return False
    path = _SOURCE_STRIP_RE.sub("", _SOURCE_PREFIX_RE.sub("", trimmed, count=1)).strip()
    state.config.sources.append(path)
    return True


def _handle_eval(state: _ParseState, line: str, trimmed: str) -> bool:
    if not trimmed.startswith("eval "):
        return False
    state.config.startup_commands.append(trimmed)
    return True


def _handle_lesspipe(state: _ParseState, line: str, trimmed: str) -> bool:
    if "lesspipe" not in trimmed:
        return False
    state.config.startup_commands.append(trimmed)
    return True


BASH_RULES: tuple[LineRule[_ParseState], ...] = (
    LineRule("case-guard", _handle_case_guard),
    LineRule("compound-block", _handle_compound_block),
    LineRule("export", _handle_export),
    LineRule("assignment", _handle_assignment),
    LineRule("shopt", _handle_shopt),
    LineRule("alias", _handle_alias),
    LineRule("guarded-source", _handle_guarded_source),
    LineRule("source", _handle_source),
    LineRule("eval", _handle_eval),
    LineRule("lesspipe", _handle_lesspipe),
)


def parse_bash_config(content: str) -> BashConfig:
    """Parse ``.bashrc`` text. Never raises; unknown lines land in ``raw_lines``."""
    state = _ParseState(config=BashConfig())
    for line, trimmed in iter_content_lines(content):
        if not apply_rules(BASH_RULES, state, line, trimmed):
            state.config.raw_lines.append(line)
    if state.guard_block is not None:
        # Unterminated case block; keep it verbatim.
        state.config.raw_lines.extend(state.guard_block)
    if state.block.depth:
        logger.debug("bashrc ends inside an open block")
    logger.debug("parsed bashrc: %d raw lines", len(state.config.raw_lines))
    return state.config


def _format_source(path: str) -> str:
    if "$" in path:
        return f'[ -f "{path}" ] && . "{path}"'
    if any(ch.isspace() for ch in path):
        return f'source "{path}"'
    return f"source {path}"


def stringify_bash_config(config: BashConfig, managed_by: str = DEFAULT_MANAGED_BY) -> str:
    """Render a :class:`BashConfig` as ``.bashrc`` text."""
    lines = managed_header("Bash Configuration", managed_by)
    lines.extend(_GUARD_OUTPUT)

    history = config.history
    history_lines = [
        f"HISTCONTROL={history.hist_control}",
        f"HISTSIZE={history.hist_size}",
        f"HISTFILESIZE={history.hist_file_size}",
    ]
    if history.hist_ignore:
        history_lines.append(f'HISTIGNORE="{history.hist_ignore}"')
    append_section(lines, "History", history_lines)

    append_section(lines, "Shell Options", [f"shopt -s {opt}" for opt in config.shopt_options])
    append_section(lines, "Environment Variables", [format_env_line(env) for env in config.environment])
    if config.path_additions:
        append_section(
            lines, "PATH Additions", [f'export PATH="{join_path_additions(config.path_additions)}"']
        )
    append_section(lines, "Aliases", [format_alias_line(alias) for alias in config.aliases])
    append_section(lines, "Sourced Files", [_format_source(src) for src in config.sources])
    append_section(lines, "Startup Commands", list(config.startup_commands))
    append_section(lines, "Additional Configuration", list(config.raw_lines))
    return "\n".join(lines)
