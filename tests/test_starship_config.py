"""Tests for dotforge.core.starship_config."""

import pytest

from dotforge.core.starship_config import (
    DEFAULT_FORMAT,
    STARSHIP_MODULES,
    StarshipConfig,
    StarshipValue,
    ValueKind,
    default_starship_config,
    module_symbols,
    parse_starship_config,
    read_value,
    stringify_starship_config,
)

SAMPLE_TOML = """\
# prompt
format = "$directory$character"
palette = 'mine'
add_newline = false
command_timeout = 1_000

[character]
success_symbol = "[➜](bold green)" # arrow
error_symbol = '[✗](bold red)'

[directory]
truncation_length = 3
style = "bold cyan"
substitutions = { "Documents" = "󰈙 " }

[git_status]
ahead = "⇡${count}"
disabled = true

[palettes.mine]
red = "#f38ba8"
blue = '#89b4fa'

[[custom.list]]
command = "echo hi"

[battery]
symbol = "unterminated
not a key value
"""


def test_top_level_fields():
    config = parse_starship_config(SAMPLE_TOML)
    assert config.format == "$directory$character"
    assert config.palette == "mine"
    assert config.right_format == ""
    assert config.settings == {
        "add_newline": StarshipValue.boolean(False),
        "command_timeout": StarshipValue.number(1000),
    }


def test_module_values_are_typed():
    config = parse_starship_config(SAMPLE_TOML)
    character = config.modules["character"]
    assert character["success_symbol"] == StarshipValue.string("[➜](bold green)")
    assert character["error_symbol"] == StarshipValue.string("[✗](bold red)", "'")
    directory = config.modules["directory"]
    assert directory["truncation_length"] == StarshipValue.number(3)
    assert directory["style"].value == "bold cyan"
    assert directory["substitutions"].kind is ValueKind.LITERAL
    assert config.modules["git_status"]["disabled"] == StarshipValue.boolean(True)


def test_palettes_are_separate():
    config = parse_starship_config(SAMPLE_TOML)
    assert config.palettes == {"mine": {"red": "#f38ba8", "blue": "#89b4fa"}}
    assert "palettes.mine" not in config.modules


def test_unreadable_lines_in_order():
    config = parse_starship_config(SAMPLE_TOML)
    assert config.raw_lines == [
        "[[custom.list]]",
        'command = "echo hi"',
        'symbol = "unterminated',
        "not a key value",
    ]


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ("true", StarshipValue.boolean(True)),
        ("42", StarshipValue.number(42)),
        ("-1.5", StarshipValue.number(-1.5)),
        ('"a # b"', StarshipValue.string("a # b")),
        ("'C:\\path'", StarshipValue.string("C:\\path", "'")),
        ('["a", "b"] # list', StarshipValue.literal('["a", "b"]')),
        ('"open', None),
        ("[1, 2", None),
    ],
)
def test_read_value(text, expected):
    assert read_value(text) == expected


def test_multiline_format_round_trip():
    content = 'format = """\n$directory\\\n$git_branch\n$character"""\n'
    config = parse_starship_config(content)
    assert config.format == "$directory\\\n$git_branch\n$character"
    again = parse_starship_config(stringify_starship_config(config))
    assert again.format == config.format


def test_multiline_array_is_kept_as_literal():
    content = "[aws]\nexpiration_symbol = [\n  'X',\n  'Y',\n]\n"
    value = parse_starship_config(content).modules["aws"]["expiration_symbol"]
    assert value.kind is ValueKind.LITERAL
    assert value.value == "[\n  'X',\n  'Y',\n]"


def test_round_trip_structured_model():
    config = StarshipConfig(
        format="$all",
        right_format='$time "quoted"',
        palette="night",
        settings={"add_newline": StarshipValue.boolean(True), "scan_timeout": StarshipValue.number(30)},
        palettes={"night": {"accent": "#8aadf4"}},
        modules={
            "time": {"disabled": StarshipValue.boolean(False), "format": StarshipValue.string("at [$time]($style)")},
            "python": {"symbol": StarshipValue.string(" ", "'"), "detect_extensions": StarshipValue.literal('["py"]')},
            "cmd_duration": {"min_time": StarshipValue.number(2.5)},
        },
    )
    assert parse_starship_config(stringify_starship_config(config)) == config


def test_default_round_trip():
    config = default_starship_config()
    assert config.format == DEFAULT_FORMAT
    assert parse_starship_config(stringify_starship_config(config)) == config


def test_from_python():
    assert StarshipValue.from_python(True) == StarshipValue.boolean(True)
    assert StarshipValue.from_python(7) == StarshipValue.number(7)
    assert StarshipValue.from_python("x").to_toml() == '"x"'


def test_raw_lines_emitted_last():
    text = stringify_starship_config(parse_starship_config(SAMPLE_TOML))
    assert text.rstrip("\n").endswith("not a key value")


@pytest.mark.parametrize("text", ['"3"', "'true'", '"1.5"'])
def test_quoted_values_stay_strings(text):
    value = read_value(text)
    assert value.kind is ValueKind.STRING
    assert value.quote == text[0]


def test_quoted_number_round_trips_with_quotes():
    config = parse_starship_config('[directory]\ntruncation_length = "3"\n')
    assert config.modules["directory"]["truncation_length"] == StarshipValue.string("3")
    assert 'truncation_length = "3"' in stringify_starship_config(config)


def test_module_catalog_covers_symbols_and_defaults():
    assert set(module_symbols()) <= set(STARSHIP_MODULES)
    assert set(default_starship_config().modules) <= set(STARSHIP_MODULES)
    assert len(STARSHIP_MODULES) == len(set(STARSHIP_MODULES))
