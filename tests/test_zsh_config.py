"""Tests for dotforge.core.zsh_config."""

import pytest

from dotforge.core.shell_common import EnvironmentVar, ShellAlias
from dotforge.core.zsh_config import (
    ZshAutosuggestions,
    ZshConfig,
    ZshHistory,
    ZshKeybinding,
    ZSH_OPTIONS,
    ZshPlugin,
    default_zsh_config,
    is_history_option,
    parse_zsh_config,
    plugin_name_for_path,
    stringify_zsh_config,
)

SAMPLE_ZSHRC = """\
HISTFILE=~/.histfile
HISTSIZE=50000
SAVEHIST=oops
setopt SHARE_HISTORY autocd
unsetopt beep
export EDITOR="nvim"
export PATH="$HOME/bin:$PATH"
ZSH_AUTOSUGGEST_STRATEGY=(history)
ZSH_AUTOSUGGEST_HIGHLIGHT_STYLE="fg=8"
ZSH_AUTOSUGGEST_USE_ASYNC=1
ZSH_HIGHLIGHT_STYLES[command]="fg=green"
alias gst='git status'
bindkey '^R' history-incremental-search-backward # search history
bindkey -v
source ~/.zsh/zsh-autosuggestions/zsh-autosuggestions.zsh
. ~/.zsh/local/extras.zsh
eval "$(zoxide init zsh)"
zstyle ':completion:*' menu select
"""


def test_parse_sample():
    config = parse_zsh_config(SAMPLE_ZSHRC)
    assert config.history == ZshHistory(
        file="~/.histfile", size=50000, save_size=10000, options=["SHARE_HISTORY"]
    )
    assert config.options == ["autocd"]
    assert config.environment == [EnvironmentVar("EDITOR", "nvim")]
    assert config.path_additions == ["$HOME/bin"]
    assert config.autosuggestions.strategy == ["history"]
    assert config.autosuggestions.highlight_style == "fg=8"
    assert config.syntax_highlighting == {"command": "fg=green"}
    assert config.aliases == [ShellAlias("gst", "git status")]
    assert config.keybindings == [
        ZshKeybinding("^R", "history-incremental-search-backward", "search history")
    ]
    assert config.plugins == [
        ZshPlugin("zsh-autosuggestions", "~/.zsh/zsh-autosuggestions/zsh-autosuggestions.zsh"),
        ZshPlugin("extras", "~/.zsh/local/extras.zsh"),
    ]
    assert config.startup_commands == ['eval "$(zoxide init zsh)"']


def test_unrecognized_lines_in_order():
    config = parse_zsh_config(SAMPLE_ZSHRC)
    assert config.raw_lines == [
        "unsetopt beep",
        "ZSH_AUTOSUGGEST_USE_ASYNC=1",
        "bindkey -v",
        "zstyle ':completion:*' menu select",
    ]


def test_file_without_autosuggest_does_not_gain_it():
    text = stringify_zsh_config(parse_zsh_config("alias l='ls'\n"))
    assert "ZSH_AUTOSUGGEST" not in text


@pytest.mark.parametrize(
    ("option", "expected"),
    [
        ("SHARE_HISTORY", True),
        ("hist_ignore_dups", True),
        ("incappendhistory", True),
        ("AUTO_CD", False),
        ("CORRECT", False),
    ],
)
def test_is_history_option(option, expected):
    assert is_history_option(option) is expected


def test_plugin_name_for_path():
    assert plugin_name_for_path("/usr/share/zsh-syntax-highlighting/x.zsh") == "zsh-syntax-highlighting"
    assert plugin_name_for_path("~/.zsh/fzf.zsh") == "fzf"
    assert plugin_name_for_path('"~/plugins/git-prompt.zsh"') == "git-prompt"


def test_round_trip_structured_model():
    config = ZshConfig(
        environment=[EnvironmentVar("EDITOR", "vim"), EnvironmentVar("LESS", "-R", export=False)],
        path_additions=["/opt/bin"],
        history=ZshHistory(file="~/.zhist", size=100, save_size=200, options=["HIST_IGNORE_DUPS"]),
        options=["AUTO_CD", "EXTENDED_GLOB"],
        plugins=[ZshPlugin("zsh-completions", "~/.zsh/zsh-completions/zsh-completions.plugin.zsh")],
        aliases=[ShellAlias("v", "nvim", "editor")],
        keybindings=[ZshKeybinding("^[[A", "up-line-or-search"), ZshKeybinding("^E", "end-of-line", "end")],
        autosuggestions=ZshAutosuggestions(strategy=["completion"], highlight_style="fg=244", buffer_max_size=30),
        syntax_highlighting={"alias": "fg=blue", "path": "underline"},
        startup_commands=['eval "$(starship init zsh)"'],
    )
    assert parse_zsh_config(stringify_zsh_config(config)) == config


def test_default_round_trip():
    config = default_zsh_config()
    assert parse_zsh_config(stringify_zsh_config(config)) == config


def test_disabled_plugin_survives_reload():
    config = ZshConfig(
        plugins=[
            ZshPlugin("fzf", "~/.zsh/fzf.zsh", enabled=False),
            ZshPlugin("zsh-completions", "~/.zsh/zsh-completions/init.zsh"),
        ]
    )
    text = stringify_zsh_config(config)
    assert "# disabled: source ~/.zsh/fzf.zsh" in text
    assert parse_zsh_config(text).plugins == config.plugins


def test_ordinary_comments_are_not_plugins():
    config = parse_zsh_config("# source the aliases file\n# source ~/.old.zsh\n")
    assert config.plugins == []
    assert config.raw_lines == []


def test_raw_lines_trail_output():
    text = stringify_zsh_config(parse_zsh_config(SAMPLE_ZSHRC))
    assert text.rstrip("\n").endswith("zstyle ':completion:*' menu select")


def test_block_bodies_stay_inside_their_block():
    content = (
        "if [[ -r ~/.p10k.zsh ]]; then\n"
        "  source ~/.p10k.zsh\n"
        "  export P10K=1\n"
        "fi\n"
        "for f in ~/.zsh/conf.d/*.zsh; do\n"
        '  source "$f"\n'
        "done\n"
        "alias l='ls'\n"
    )
    config = parse_zsh_config(content)
    assert config.plugins == []
    assert config.environment == []
    assert config.aliases == [ShellAlias("l", "ls")]
    assert config.raw_lines == content.splitlines()[:-1]


def test_blocks_survive_repeated_saves():
    content = "if (( $+commands[fzf] )); then\n  source <(fzf --zsh)\nfi\n"
    first = stringify_zsh_config(parse_zsh_config(content))
    assert first.rstrip("\n").endswith("if (( $+commands[fzf] )); then\n  source <(fzf --zsh)\nfi")
    assert stringify_zsh_config(parse_zsh_config(first)) == first


def test_default_options_are_catalogued():
    defaults = default_zsh_config()
    assert set(defaults.options) <= set(ZSH_OPTIONS)
    assert set(defaults.history.options) <= set(ZSH_OPTIONS)
