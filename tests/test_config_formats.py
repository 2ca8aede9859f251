"""Tests for the config format registry and editing session."""

import pytest

from dotforge.core.bash_config import BashConfig
from dotforge.core.config_formats import (
    CONFIG_FORMATS,
    ConfigType,
    TerminalBackup,
    get_config_format,
)
from dotforge.core.config_session import ConfigSession
from dotforge.core.shell_common import ShellAlias
from dotforge.errors import DotforgeError, ErrorCode


class TestConfigFormats:
    def test_every_type_registered(self):
        assert set(CONFIG_FORMATS) == set(ConfigType)

    def test_lookup_by_string(self):
        fmt = get_config_format("tmux")
        assert fmt.config_type is ConfigType.TMUX
        assert fmt.filename == ".tmux.conf"

    def test_unknown_type_raises(self):
        with pytest.raises(DotforgeError) as excinfo:
            get_config_format("fish")
        assert excinfo.value.code is ErrorCode.CONFIG_TYPE_UNKNOWN
        assert excinfo.value.details == {"config_type": "fish"}

    @pytest.mark.parametrize("config_type", list(ConfigType))
    def test_default_survives_round_trip(self, config_type):
        fmt = get_config_format(config_type)
        model = fmt.default()
        assert fmt.parse(fmt.stringify(model)) == model

    @pytest.mark.parametrize("config_type", list(ConfigType))
    def test_empty_input_parses(self, config_type):
        fmt = get_config_format(config_type)
        assert fmt.parse("").raw_lines == []


class TestTerminalBackup:
    def test_from_camel_case(self):
        backup = TerminalBackup.from_dict(
            {"filename": ".zshrc.bak", "path": "/tmp/.zshrc.bak", "timestamp": "2024-01-01", "configType": "zsh"}
        )
        assert backup.config_type == "zsh"
        assert backup.to_dict()["configType"] == "zsh"

    def test_missing_fields_default_to_empty(self):
        backup = TerminalBackup.from_dict({})
        assert backup == TerminalBackup("", "", "", "")


class TestConfigSession:
    def test_starts_with_default(self):
        session = ConfigSession(ConfigType.BASH)
        assert isinstance(session.config, BashConfig)
        assert session.config.aliases
        assert session.has_unsaved_changes() is False

    def test_load_text_emits_and_marks_saved(self):
        session = ConfigSession("bash")
        emitted = []
        session.config_changed.connect(lambda: emitted.append(True))
        session.load_text("alias g='git'\n")
        assert emitted == [True]
        assert session.config.aliases == [ShellAlias("g", "git")]
        assert session.has_unsaved_changes() is False

    def test_update_in_place_and_reset(self):
        session = ConfigSession("bash")
        session.load_text("alias g='git'\n")
        original = session.config

        session.update(lambda config: config.aliases.append(ShellAlias("k", "kubectl")))
        assert session.has_unsaved_changes() is True
        assert original.aliases == [ShellAlias("g", "git")]
        assert [alias.name for alias in session.config.aliases] == ["g", "k"]

        session.reset()
        assert session.has_unsaved_changes() is False
        assert session.config.aliases == [ShellAlias("g", "git")]

    def test_update_may_return_replacement(self):
        session = ConfigSession("bash")
        session.update(lambda config: BashConfig())
        assert session.config == BashConfig()

    def test_to_text_uses_managed_by(self):
        session = ConfigSession("tmux", managed_by="Someone")
        assert "# Managed by Someone" in session.to_text()

    def test_mark_saved_clears_dirty_state(self):
        session = ConfigSession("kitty")
        session.update(lambda config: setattr(config.font, "size", 15.0))
        assert session.has_unsaved_changes() is True
        session.mark_saved()
        assert session.has_unsaved_changes() is False

    def test_unknown_type_rejected(self):
        with pytest.raises(DotforgeError):
            ConfigSession("nano")
