"""Tests for dotforge.config.settings."""

from dataclasses import replace
from pathlib import Path

import pytest
from PySide6.QtCore import QSettings

from dotforge.config.settings import AppSettings
from dotforge.errors import DotforgeError, ErrorCode
from dotforge.themes.schedule import default_schedule


@pytest.fixture
def settings(tmp_path: Path) -> AppSettings:
    qs = QSettings(str(tmp_path / "dotforge.ini"), QSettings.Format.IniFormat)
    return AppSettings(qs)


def test_theme_defaults(settings):
    assert settings.theme_id == "default"
    assert settings.theme_last_known_good_id == "default"


def test_theme_id_blank_becomes_default(settings):
    settings.theme_id = "aurora"
    assert settings.theme_id == "aurora"
    settings.theme_id = "   "
    assert settings.theme_id == "default"


def test_last_known_good_strips(settings):
    settings.theme_last_known_good_id = "  ocean "
    assert settings.theme_last_known_good_id == "ocean"


def test_schedule_default_and_round_trip(settings):
    assert settings.schedule == default_schedule()
    custom = replace(default_schedule(), default_mode="fixed", fixed_theme="mono", fixed_variant="night")
    settings.schedule = custom
    assert settings.schedule == custom


def test_corrupt_schedule_falls_back(settings, caplog):
    settings._qs.setValue("themes/schedule", "{broken")
    with caplog.at_level("WARNING", logger="dotforge.config.settings"):
        assert settings.schedule == default_schedule()
    assert "Using defaults" in caplog.text


def test_invalid_schedule_shape_falls_back(settings):
    settings._qs.setValue("themes/schedule", '{"defaultMode": "weekly"}')
    assert settings.schedule == default_schedule()


def test_managed_by(settings):
    assert settings.managed_by == "Dotforge"
    settings.managed_by = "Me"
    assert settings.managed_by == "Me"
    settings.managed_by = ""
    assert settings.managed_by == "Dotforge"


def test_log_level_normalised(settings):
    assert settings.log_level == "INFO"
    settings.log_level = "debug"
    assert settings.log_level == "DEBUG"
    settings.log_level = "chatty"
    assert settings.log_level == "INFO"


def test_values_persist_across_instances(tmp_path):
    path = str(tmp_path / "shared.ini")
    first = AppSettings(QSettings(path, QSettings.Format.IniFormat))
    first.theme_id = "aurora"
    first.sync()
    second = AppSettings(QSettings(path, QSettings.Format.IniFormat))
    assert second.theme_id == "aurora"


def test_app_data_dir_uses_appdata(settings, tmp_path, monkeypatch):
    monkeypatch.setenv("APPDATA", str(tmp_path / "appdata"))
    assert settings.app_data_dir == tmp_path / "appdata" / "dotforge"
    assert settings.app_data_dir.is_dir()
    assert settings.themes_dir.is_dir()


def test_invalid_schedule_rejected(settings):
    bad = replace(default_schedule(), holidays=(replace(default_schedule().holidays[0], theme=""),))
    with pytest.raises(DotforgeError) as excinfo:
        settings.schedule = bad
    assert excinfo.value.code is ErrorCode.SCHEDULE_INVALID
    assert settings.schedule == default_schedule()
