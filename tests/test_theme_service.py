"""Tests for ThemeService apply and startup fallback."""

from datetime import datetime, timezone
from unittest.mock import MagicMock

import pytest

from dotforge.themes.models import Theme, ThemeVariant
from dotforge.themes.palette import create_default_theme
from dotforge.themes.registry import ThemeRegistry
from dotforge.themes.schedule import default_schedule
from dotforge.themes.service import ThemeService


@pytest.fixture
def settings():
    mock = MagicMock()
    mock.theme_id = "default"
    mock.theme_last_known_good_id = "default"
    mock.schedule = default_schedule()
    return mock


@pytest.fixture
def registry():
    reg = ThemeRegistry()
    reg.register_builtin(create_default_theme("default", "Default"))
    reg.register_builtin(create_default_theme("aurora", "Aurora"))
    return reg


def _record(service: ThemeService) -> list[str]:
    emitted: list[str] = []
    service.theme_changed.connect(emitted.append)
    return emitted


def test_apply_theme_persists_and_emits(settings, registry):
    service = ThemeService(settings, registry)
    emitted = _record(service)
    ok, message = service.apply_theme("aurora", "night")
    assert ok is True
    assert message == "Applied theme: Aurora"
    assert service.active_theme_id == "aurora"
    assert service.active_variant == "night"
    assert service.resolved.palette.base == "#24273a"
    assert settings.theme_id == "aurora"
    assert settings.theme_last_known_good_id == "aurora"
    assert emitted == ["aurora"]


def test_apply_theme_without_persist(settings, registry):
    service = ThemeService(settings, registry)
    service.apply_theme("aurora", persist=False)
    assert settings.theme_id == "default"
    assert settings.theme_last_known_good_id == "aurora"


def test_apply_missing_theme(settings, registry):
    service = ThemeService(settings, registry)
    ok, message = service.apply_theme("ghost")
    assert ok is False
    assert message == "Theme not found: ghost"
    assert service.active_theme_id == ""


def test_apply_uncompilable_theme(settings, registry):
    registry.register_builtin(Theme(id="hollow", name="Hollow", day=ThemeVariant()))
    service = ThemeService(settings, registry)
    ok, message = service.apply_theme("hollow")
    assert ok is False
    assert message.startswith("Could not compile theme hollow")


def test_startup_uses_requested(settings, registry):
    settings.theme_id = "aurora"
    service = ThemeService(settings, registry)
    ok, _ = service.apply_startup_theme()
    assert ok is True
    assert service.active_theme_id == "aurora"


def test_startup_falls_back_to_last_known_good(settings, registry):
    settings.theme_id = "ghost"
    settings.theme_last_known_good_id = "aurora"
    service = ThemeService(settings, registry)
    ok, _ = service.apply_startup_theme()
    assert ok is True
    assert service.active_theme_id == "aurora"
    assert settings.theme_id == "aurora"


def test_startup_falls_back_to_default(settings, registry):
    settings.theme_id = "ghost"
    settings.theme_last_known_good_id = "phantom"
    service = ThemeService(settings, registry)
    ok, _ = service.apply_startup_theme()
    assert ok is True
    assert service.active_theme_id == "default"


def test_startup_with_empty_registry_uses_builtin_palette(settings):
    settings.theme_id = "ghost"
    service = ThemeService(settings, ThemeRegistry())
    emitted = _record(service)
    ok, message = service.apply_startup_theme()
    assert ok is False
    assert "built-in default" in message
    assert service.active_theme_id == "default"
    assert service.resolved is not None
    assert settings.theme_id == "default"
    assert emitted == ["default"]


def test_evaluate_schedule_reads_settings(settings, registry):
    service = ThemeService(settings, registry)
    now = datetime(2024, 12, 31, 21, tzinfo=timezone.utc)
    evaluation = service.evaluate_schedule(now, is_day=False)
    assert evaluation.theme_id == "new-year"
    assert evaluation.variant == "night"


def test_apply_scheduled_unknown_theme(settings, registry):
    service = ThemeService(settings, registry)
    now = datetime(2024, 3, 5, tzinfo=timezone.utc)
    ok, message = service.apply_scheduled(now)
    assert ok is False
    assert message == "Theme not found: march-spring"


def test_apply_scheduled_registered_theme(settings, registry):
    registry.register_builtin(create_default_theme("march-spring", "March Spring"))
    service = ThemeService(settings, registry)
    now = datetime(2024, 3, 5, tzinfo=timezone.utc)
    ok, _ = service.apply_scheduled(now, is_day=False)
    assert ok is True
    assert service.active_theme_id == "march-spring"
    assert service.active_variant == "night"
    assert settings.theme_id == "default"
