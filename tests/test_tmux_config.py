"""Tests for dotforge.core.tmux_config."""

from dotforge.core.tmux_config import (
    TMUX_COMMANDS,
    TmuxAppearance,
    TmuxConfig,
    TmuxGeneral,
    TmuxKeybinding,
    default_tmux_config,
    format_keybinding,
    parse_tmux_config,
    stringify_tmux_config,
)

SAMPLE_TMUX = """\
set -g prefix C-Space
unbind C-b
bind C-Space send-prefix
set -g mouse off
set-option -g history-limit lots
setw -g pane-base-index 0
set -sg escape-time 10
set -g default-terminal "screen-256color"
set -ag terminal-overrides ",alacritty:RGB"
set -ag terminal-overrides ",*:Tc"
set -g status-left '#[fg=red] #S '
set -ag status-right ' #H'
set -g @plugin 'tmux-plugins/tpm'
bind -r H resize-pane -L 5
bind-key -n M-Left select-pane -L # jump left
bind r source-file ~/.tmux.conf \\; display "reloaded"
unbind %
run '~/.tmux/plugins/tpm/tpm'
"""


def test_bind_with_repeat_flag():
    config = parse_tmux_config("bind -r H resize-pane -L 5")
    assert config.keybindings == [TmuxKeybinding(key="H", command="resize-pane -L 5", flags="-r")]
    assert format_keybinding(config.keybindings[0]) == "bind -r H resize-pane -L 5"


def test_parse_sample_options():
    config = parse_tmux_config(SAMPLE_TMUX)
    general = config.general
    assert general.prefix == "C-Space"
    assert general.mouse is False
    assert general.history_limit == 10000
    assert general.pane_base_index == 0
    assert general.escape_time == 10
    assert general.default_terminal == "screen-256color"
    assert general.terminal_overrides == ",alacritty:RGB"
    assert config.appearance.status_left == "#[fg=red] #S "
    assert config.appearance.status_right == TmuxAppearance().status_right


def test_parse_sample_keybindings():
    config = parse_tmux_config(SAMPLE_TMUX)
    assert config.keybindings == [
        TmuxKeybinding("H", "resize-pane -L 5", "-r"),
        TmuxKeybinding("M-Left", "select-pane -L", "-n", "jump left"),
        TmuxKeybinding("r", 'source-file ~/.tmux.conf \\; display "reloaded"'),
    ]


def test_unrecognized_lines_in_order():
    config = parse_tmux_config(SAMPLE_TMUX)
    assert config.raw_lines == [
        'set -ag terminal-overrides ",*:Tc"',
        "set -ag status-right ' #H'",
        "set -g @plugin 'tmux-plugins/tpm'",
        "unbind %",
        "run '~/.tmux/plugins/tpm/tpm'",
    ]


def test_managed_lines_do_not_accumulate():
    first = stringify_tmux_config(parse_tmux_config(SAMPLE_TMUX))
    second = stringify_tmux_config(parse_tmux_config(first))
    assert first == second
    assert first.count("unbind C-b") == 1
    assert first.count("send-prefix") == 1
    assert first.count("set -ag terminal-overrides \",alacritty:RGB\"") == 1


def test_round_trip_structured_model():
    config = TmuxConfig(
        general=TmuxGeneral(
            prefix="C-s",
            mouse=False,
            history_limit=5000,
            base_index=0,
            pane_base_index=0,
            renumber_windows=False,
            escape_time=5,
            default_terminal="xterm-256color",
            terminal_overrides=",xterm*:Tc",
        ),
        appearance=TmuxAppearance(status_position="top", status_left_length=40),
        keybindings=[
            TmuxKeybinding("v", "split-window -h", description="Split"),
            TmuxKeybinding("M-h", "select-pane -L", flags="-n"),
        ],
    )
    assert parse_tmux_config(stringify_tmux_config(config)) == config


def test_default_round_trip():
    config = default_tmux_config()
    assert parse_tmux_config(stringify_tmux_config(config)) == config


def test_default_keybindings():
    keys = [binding.key for binding in default_tmux_config().keybindings]
    assert keys == ["|", "-", "h", "j", "k", "l", "H", "J", "K", "L", "r"]


def test_empty_overrides_not_emitted():
    config = TmuxConfig(general=TmuxGeneral(terminal_overrides=""))
    assert "terminal-overrides" not in stringify_tmux_config(config)


def test_keybinding_section_omitted_when_empty():
    text = stringify_tmux_config(TmuxConfig())
    assert "# Keybindings" not in text
    assert "set -g prefix C-a" in text


def test_default_bindings_use_catalogued_commands():
    for binding in default_tmux_config().keybindings:
        assert binding.command.split()[0] in TMUX_COMMANDS
