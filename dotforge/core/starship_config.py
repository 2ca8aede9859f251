"""Parse and generate ``starship.toml`` text.

The reader handles the subset of TOML that prompt configs use: tables,
``key = value`` pairs, basic and literal strings (single and multi-line),
numbers, booleans, and arrays or inline tables kept verbatim. Anything else
is preserved in ``raw_lines``.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Sequence

from dotforge.core.shell_common import DEFAULT_MANAGED_BY, append_section, managed_header

logger = logging.getLogger(__name__)

DEFAULT_FORMAT = (
    "$os$username$directory$git_branch$git_status$nodejs$rust$golang$python$line_break$character"
)
TOP_LEVEL_STRINGS = ("format", "right_format", "palette")

_HEADER_RE = re.compile(r"^\[([^\[\]]+)\]\s*(?:#.*)?$")
_KEY_VALUE_RE = re.compile(r"^([A-Za-z0-9_\-.]+)\s*=\s*(.*)$")
_INT_RE = re.compile(r"^[+-]?\d[\d_]*$")
_FLOAT_RE = re.compile(r"^[+-]?\d[\d_]*(?:\.\d[\d_]*)?(?:[eE][+-]?\d+)?$")
_MULTILINE_QUOTES = ('"""', "'''")


class ValueKind(Enum):
    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    LITERAL = "literal"


@dataclass(frozen=True, slots=True)
class StarshipValue:
    """One TOML value.

    Strings remember their quote delimiter so a round trip keeps it. LITERAL
    holds verbatim TOML (arrays, inline tables, dates).
    """

    kind: ValueKind
    value: str | int | float | bool
    quote: str = '"'

    @classmethod
    def string(cls, text: str, quote: str = '"') -> StarshipValue:
        return cls(ValueKind.STRING, text, quote)

    @classmethod
    def number(cls, number: int | float) -> StarshipValue:
        return cls(ValueKind.NUMBER, number)

    @classmethod
    def boolean(cls, flag: bool) -> StarshipValue:
        return cls(ValueKind.BOOLEAN, flag)

    @classmethod
    def literal(cls, toml_text: str) -> StarshipValue:
        return cls(ValueKind.LITERAL, toml_text)

    @classmethod
    def from_python(cls, value: str | int | float | bool) -> StarshipValue:
        if isinstance(value, bool):
            return cls.boolean(value)
        if isinstance(value, (int, float)):
            return cls.number(value)
        return cls.string(str(value))

    def to_toml(self) -> str:
        if self.kind is ValueKind.STRING:
            if self.quote in _MULTILINE_QUOTES and "\n" in str(self.value):
                return f"{self.quote}\n{self.value}{self.quote}"
            return f"{self.quote}{self.value}{self.quote}"
        if self.kind is ValueKind.BOOLEAN:
            return "true" if self.value else "false"
        return str(self.value)


@dataclass(slots=True)
class StarshipConfig:
    format: str = ""
    right_format: str = ""
    palette: str = ""
    settings: dict[str, StarshipValue] = field(default_factory=dict)
    palettes: dict[str, dict[str, str]] = field(default_factory=dict)
    modules: dict[str, dict[str, StarshipValue]] = field(default_factory=dict)
    raw_lines: list[str] = field(default_factory=list)


STARSHIP_MODULES: tuple[str, ...] = (
    "os",
    "username",
    "hostname",
    "directory",
    "git_branch",
    "git_status",
    "git_commit",
    "git_state",
    "git_metrics",
    "nodejs",
    "rust",
    "golang",
    "python",
    "java",
    "ruby",
    "php",
    "dotnet",
    "docker_context",
    "kubernetes",
    "terraform",
    "aws",
    "gcloud",
    "azure",
    "time",
    "line_break",
    "character",
    "cmd_duration",
    "memory_usage",
    "battery",
    "package",
)


def module_symbols() -> dict[str, str]:
    """Nerd Font symbol suggestions keyed by module name."""
    return {
        "directory": " ",
        "git_branch": " ",
        "git_status": "",
        "nodejs": " ",
        "rust": " ",
        "golang": " ",
        "python": " ",
        "java": " ",
        "ruby": " ",
        "php": " ",
        "docker_context": " ",
        "kubernetes": "󱃾 ",
        "aws": " ",
        "time": " ",
        "battery": "",
        "memory_usage": "󰍛 ",
        "package": " ",
    }


def default_starship_config() -> StarshipConfig:
    return StarshipConfig(
        format=DEFAULT_FORMAT,
        modules={
            "character": {
                "success_symbol": StarshipValue.string("[❯](green)"),
                "error_symbol": StarshipValue.string("[❯](red)"),
            },
            "os": {"disabled": StarshipValue.boolean(False)},
            "directory": {
                "truncation_length": StarshipValue.number(3),
                "truncate_to_repo": StarshipValue.boolean(True),
            },
            "git_branch": {"symbol": StarshipValue.string(" ")},
        },
    )


def _bracket_depth(text: str) -> int:
    """Net ``[``/``{`` depth of ``text``, ignoring quoted text and comments."""
    depth = 0
    quote = ""
    for char in text:
        if quote:
            if char == quote:
                quote = ""
        elif char in ("'", '"'):
            quote = char
        elif char == "#":
            break
        elif char in "[{":
            depth += 1
        elif char in "]}":
            depth -= 1
    return depth


def _collect_value(first: str, lines: Sequence[str], index: int) -> tuple[str, int]:
    """Accumulate a value that continues past its first line.

    Returns the full value text and the index of the next unread line.
    """
    text = first
    for delimiter in _MULTILINE_QUOTES:
        if first.startswith(delimiter):
            while delimiter not in text[3:] and index < len(lines):
                text += "\n" + lines[index]
                index += 1
            return text, index
    if first.startswith(("[", "{")):
        while _bracket_depth(text) > 0 and index < len(lines):
            text += "\n" + lines[index]
            index += 1
    return text, index


def _closing_quote(text: str, quote: str) -> int:
    position = 1
    while position < len(text):
        char = text[position]
        if quote == '"' and char == "\\":
            position += 2
            continue
        if char == quote:
            return position
        position += 1
    return -1


def _strip_trailing_comment(text: str) -> str:
    quote = ""
    for position, char in enumerate(text):
        if quote:
            if char == quote:
                quote = ""
        elif char in ("'", '"'):
            quote = char
        elif char == "#":
            return text[:position].rstrip()
    return text.rstrip()


def read_value(text: str) -> StarshipValue | None:
    """Read one TOML value; None when the text is not a value this reader knows."""
    text = text.strip()
    for delimiter in _MULTILINE_QUOTES:
        if text.startswith(delimiter):
            end = text.find(delimiter, 3)
            if end == -1:
                return None
            body = text[3:end]
            # A newline right after the opening delimiter is not part of the string.
            if body.startswith("\n"):
                body = body[1:]
            return StarshipValue.string(body, delimiter)
    if text[:1] in ('"', "'"):
        end = _closing_quote(text, text[0])
        if end == -1:
            return None
        # Quoted text stays a string even when it looks like a number or boolean.
        return StarshipValue.string(text[1:end], text[0])
    if text[:1] in ("[", "{"):
        if _bracket_depth(text) != 0:
            return None
        return StarshipValue.literal(_strip_trailing_comment(text))

    bare = _strip_trailing_comment(text)
    if not bare:
        return None
    if bare in ("true", "false"):
        return StarshipValue.boolean(bare == "true")
    if _INT_RE.match(bare):
        return StarshipValue.number(int(bare.replace("_", "")))
    if _FLOAT_RE.match(bare):
        return StarshipValue.number(float(bare.replace("_", "")))
    return StarshipValue.literal(bare)


def _value_text(value: StarshipValue) -> str:
    if value.kind is ValueKind.STRING:
        return str(value.value)
    return value.to_toml()


def parse_starship_config(content: str) -> StarshipConfig:
    """Parse ``starship.toml`` text into an empty model.

    Array-of-tables blocks (``[[...]]``) and the keys under them are kept
    verbatim in ``raw_lines``.
    """
    config = StarshipConfig()
    section: str | None = ""
    lines = content.split("\n")
    index = 0
    while index < len(lines):
        line = lines[index]
        index += 1
        trimmed = line.strip()
        if not trimmed or trimmed.startswith("#"):
            continue

        if trimmed.startswith("[["):
            section = None
            config.raw_lines.append(line)
            continue
        header = _HEADER_RE.match(trimmed)
        if header is not None:
            section = header.group(1).strip()
            if not section.startswith("palettes."):
                config.modules.setdefault(section, {})
            continue

        match = _KEY_VALUE_RE.match(trimmed)
        if match is None or section is None:
            config.raw_lines.append(line)
            continue

        start = index
        text, index = _collect_value(match.group(2), lines, index)
        value = read_value(text)
        if value is None:
            config.raw_lines.extend(lines[start - 1 : index])
            continue

        key = match.group(1)
        if section == "":
            if key in TOP_LEVEL_STRINGS and value.kind is ValueKind.STRING:
                setattr(config, key, str(value.value))
            else:
                config.settings[key] = value
        elif section.startswith("palettes."):
            name = section[len("palettes.") :]
            config.palettes.setdefault(name, {})[key] = _value_text(value)
        else:
            config.modules.setdefault(section, {})[key] = value

    logger.debug("parsed starship.toml: %d raw lines", len(config.raw_lines))
    return config


def _quote_top_level(text: str) -> str:
    if "\n" in text:
        return f'"""\n{text}"""'
    if '"' in text and "'" not in text:
        return f"'{text}'"
    return f'"{text}"'


def stringify_starship_config(config: StarshipConfig, managed_by: str = DEFAULT_MANAGED_BY) -> str:
    """Render a :class:`StarshipConfig` as ``starship.toml`` text."""
    lines = managed_header("Starship Prompt Configuration", managed_by)

    for key in TOP_LEVEL_STRINGS:
        text = getattr(config, key)
        if text:
            lines.append(f"{key} = {_quote_top_level(text)}")
            lines.append("")
    if config.settings:
        lines.extend(f"{key} = {value.to_toml()}" for key, value in config.settings.items())
        lines.append("")

    for name, colors in config.palettes.items():
        lines.append(f"[palettes.{name}]")
        lines.extend(f'{color} = "{value}"' for color, value in colors.items())
        lines.append("")

    for name, entries in config.modules.items():
        if not entries:
            continue
        lines.append(f"[{name}]")
        lines.extend(f"{key} = {value.to_toml()}" for key, value in entries.items())
        lines.append("")

    append_section(lines, "Additional Configuration", list(config.raw_lines))
    return "\n".join(lines)
