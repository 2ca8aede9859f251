"""Tests for service bootstrap."""

import json
import logging
from pathlib import Path

import pytest
from PySide6.QtCore import QSettings

from dotforge.app import create_services
from dotforge.config.settings import AppSettings
from dotforge.themes.loader import theme_to_dict
from dotforge.themes.palette import create_default_theme


@pytest.fixture
def settings(tmp_path: Path, monkeypatch) -> AppSettings:
    monkeypatch.setenv("APPDATA", str(tmp_path / "appdata"))
    return AppSettings(QSettings(str(tmp_path / "app.ini"), QSettings.Format.IniFormat))


@pytest.fixture(autouse=True)
def reset_logger():
    logger = logging.getLogger("dotforge")
    yield
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.propagate = True


def test_create_services_registers_default(settings):
    services = create_services(settings)
    assert services.settings is settings
    assert services.registry.is_builtin("default")
    assert services.theme_service.registry is services.registry


def test_logger_configured_once(settings):
    create_services(settings)
    create_services(settings)
    logger = logging.getLogger("dotforge")
    assert len(logger.handlers) == 1
    assert logger.propagate is False
    assert (settings.app_data_dir / "logs" / "dotforge.log").exists()


def test_user_theme_files_loaded(settings):
    theme = create_default_theme("dusk", "Dusk")
    (settings.themes_dir / "dusk.json").write_text(json.dumps(theme_to_dict(theme)), encoding="utf-8")
    (settings.themes_dir / "notes.txt").write_text("ignored", encoding="utf-8")
    (settings.themes_dir / "bad.yaml").write_text("id: [", encoding="utf-8")

    services = create_services(settings)
    assert services.registry.get_theme("dusk") == theme
    errors = services.registry.load_errors()
    assert len(errors) == 1
    assert "bad.yaml" in errors[0]


def test_startup_theme_applies(settings):
    services = create_services(settings)
    ok, _ = services.theme_service.apply_startup_theme()
    assert ok is True
    assert services.theme_service.active_theme_id == "default"
