"""Shared records and line-grammar helpers for config text parsers."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Callable, Generic, Iterable, Sequence, TypeVar

DEFAULT_MANAGED_BY = "Dotforge"

_INT_PREFIX_RE = re.compile(r"^\s*([+-]?\d+)")
_FLOAT_PREFIX_RE = re.compile(r"^\s*([+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)")
_PATH_TOKENS = ("$PATH", "${PATH}")
_ALIAS_RE = re.compile(r"""^alias\s+([^=]+)=(?:(['"])(.*?)\2|(\S+))(?:\s+#\s*(.*))?$""")
_QUOTED_RE = re.compile(r"'[^']*'|\"(?:\\.|[^\"\\])*\"")
_TRAILING_COMMENT_RE = re.compile(r"\s#.*$")
_COMMAND_SEPARATOR_RE = re.compile(r";;|;|&&|\|\||\||&")
_BLOCK_OPENERS = frozenset({"if", "for", "while", "until", "case", "select"})
_BLOCK_CLOSERS = frozenset({"fi", "done", "esac"})
_LEADING_KEYWORDS = frozenset({"then", "do", "else", "!"})

StateT = TypeVar("StateT")


@dataclass(frozen=True, slots=True)
class EnvironmentVar:
    """A shell variable assignment, exported or not."""

    key: str
    value: str
    export: bool = True


@dataclass(frozen=True, slots=True)
class ShellAlias:
    """A shell alias definition."""

    name: str
    command: str
    description: str | None = None


@dataclass(frozen=True, slots=True)
class LineRule(Generic[StateT]):
    """One entry in a format's prioritized line grammar.

    ``handle`` receives the parse state, the original line and its trimmed
    form, and returns True when it consumed the line.
    """

    name: str
    handle: Callable[[StateT, str, str], bool]


def apply_rules(rules: Sequence[LineRule[StateT]], state: StateT, line: str, trimmed: str) -> bool:
    """Run rules top to bottom; the first one that consumes the line wins."""
    for rule in rules:
        if rule.handle(state, line, trimmed):
            return True
    return False


def iter_content_lines(
    content: str, keep_comment: Callable[[str], object] | None = None
) -> Iterable[tuple[str, str]]:
    """Yield ``(line, trimmed)`` for every non-blank, non-comment line.

    Comments for which ``keep_comment`` returns True are yielded as well.
    """
    for line in content.split("\n"):
        trimmed = line.strip()
        if not trimmed:
            continue
        if trimmed.startswith("#") and not (keep_comment and keep_comment(trimmed)):
            continue
        yield line, trimmed


def unquote(value: str) -> str:
    """Strip exactly one layer of matching double or single quotes."""
    if len(value) >= 2 and value[0] == value[-1] and value[0] in ("'", '"'):
        return value[1:-1]
    return value


def parse_int(text: str, default: int) -> int:
    """Parse a leading integer the way ``parseInt`` does, else ``default``."""
    match = _INT_PREFIX_RE.match(text)
    if match is None:
        return default
    return int(match.group(1))


def parse_float(text: str, default: float) -> float:
    """Parse a leading decimal number the way ``parseFloat`` does, else ``default``."""
    match = _FLOAT_PREFIX_RE.match(text)
    if match is None:
        return default
    return float(match.group(1))


def format_number(value: float) -> str:
    """Render a number without a redundant ``.0`` suffix."""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def references_path(value: str) -> bool:
    return any(token in value for token in _PATH_TOKENS)


def split_path_additions(value: str) -> list[str]:
    """Split a ``PATH`` value into its entries, dropping the ``$PATH`` token."""
    return [part for part in value.split(":") if part not in _PATH_TOKENS and part.strip()]


def join_path_additions(additions: Sequence[str]) -> str:
    return ":".join([*additions, "$PATH"])


def format_env_line(env: EnvironmentVar) -> str:
    # Unexported values containing `$`, a backtick or `(` read back as raw lines.
    if env.export:
        return f'export {env.key}="{env.value}"'
    return f'{env.key}="{env.value}"'


def parse_alias(trimmed: str) -> ShellAlias | None:
    """Parse ``alias name='command' [# description]``; None when malformed."""
    match = _ALIAS_RE.match(trimmed)
    if match is None:
        return None
    command = match.group(3) if match.group(2) else match.group(4)
    return ShellAlias(
        name=match.group(1).strip(),
        command=command,
        description=match.group(5) or None,
    )


def format_alias_line(alias: ShellAlias) -> str:
    line = f"alias {alias.name}='{alias.command}'"
    if alias.description:
        line += f" # {alias.description}"
    return line


def managed_header(title: str, managed_by: str) -> list[str]:
    return [f"# {title}", f"# Managed by {managed_by}", ""]


def append_section(lines: list[str], title: str, body: Sequence[str]) -> None:
    """Append a titled block followed by a blank line; empty bodies add nothing."""
    if not body:
        return
    lines.append(f"# {title}")
    lines.extend(body)
    lines.append("")


def count_block_keywords(trimmed: str) -> tuple[int, int]:
    """Count compound-command openers and closers on one line.

    Keywords only count in command position; quoted text and trailing
    comments are ignored. Standalone ``{`` and ``}`` words count as well.
    """
    text = _TRAILING_COMMENT_RE.sub("", _QUOTED_RE.sub("''", trimmed))
    opened = closed = 0
    for segment in _COMMAND_SEPARATOR_RE.split(text):
        words = segment.split()
        opened += words.count("{")
        closed += words.count("}")
        while words and words[0] in _LEADING_KEYWORDS:
            words = words[1:]
        if not words:
            continue
        if words[0] in _BLOCK_OPENERS:
            opened += 1
        elif words[0] in _BLOCK_CLOSERS:
            closed += 1
    return opened, closed


@dataclass(slots=True)
class BlockTracker:
    """Follow ``if``/``for``/``while``/``case`` and brace blocks across lines.

    A multi-line block only means something as a whole, so every line from
    the opener through the matching closer belongs to ``raw_lines``.
    """

    depth: int = 0

    def consume(self, trimmed: str) -> bool:
        """Return True when the line opens, continues or closes a block."""
        opened, closed = count_block_keywords(trimmed)
        if self.depth == 0 and opened == 0 and closed == 0:
            return False
        self.depth = max(0, self.depth + opened - closed)
        return True
