"""Application settings via QSettings."""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path

from PySide6.QtCore import QSettings

from dotforge.core.shell_common import DEFAULT_MANAGED_BY
from dotforge.errors import DotforgeError, ErrorCode
from dotforge.themes.constants import DEFAULT_THEME_ID
from dotforge.themes.loader import schedule_from_dict, schedule_to_dict
from dotforge.themes.models import ThemeSchedule, ThemeValidationError
from dotforge.themes.schedule import default_schedule, validate_schedule

logger = logging.getLogger(__name__)

_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


class AppSettings:
    """Wraps QSettings for persistent app configuration."""

    def __init__(self, qsettings: QSettings | None = None) -> None:
        self._qs = qsettings if qsettings is not None else QSettings("Dotforge", "Dotforge")

    # -- theme --

    @property
    def theme_id(self) -> str:
        raw = self._qs.value("themes/theme_id", DEFAULT_THEME_ID, type=str)
        value = (raw or "").strip()
        return value or DEFAULT_THEME_ID

    @theme_id.setter
    def theme_id(self, value: str) -> None:
        cleaned = (value or "").strip() or DEFAULT_THEME_ID
        self._qs.setValue("themes/theme_id", cleaned)

    @property
    def theme_last_known_good_id(self) -> str:
        raw = self._qs.value("themes/last_known_good_id", DEFAULT_THEME_ID, type=str)
        value = (raw or "").strip()
        return value or DEFAULT_THEME_ID

    @theme_last_known_good_id.setter
    def theme_last_known_good_id(self, value: str) -> None:
        cleaned = (value or "").strip() or DEFAULT_THEME_ID
        self._qs.setValue("themes/last_known_good_id", cleaned)

    # -- schedule --

    @property
    def schedule(self) -> ThemeSchedule:
        raw = self._qs.value("themes/schedule", "", type=str)
        if not raw:
            return default_schedule()
        try:
            return schedule_from_dict(json.loads(raw))
        except (json.JSONDecodeError, ThemeValidationError) as exc:
            error = DotforgeError(
                ErrorCode.SETTINGS_CORRUPT,
                details={"key": "themes/schedule", "error": str(exc)},
            )
            logger.warning("%s", error)
            return default_schedule()

    @schedule.setter
    def schedule(self, value: ThemeSchedule) -> None:
        result = validate_schedule(value)
        if not result.valid:
            raise DotforgeError(
                ErrorCode.SCHEDULE_INVALID,
                details={"errors": "; ".join(result.errors)},
            )
        self._qs.setValue("themes/schedule", json.dumps(schedule_to_dict(value)))

    # -- general --

    @property
    def managed_by(self) -> str:
        raw = self._qs.value("general/managed_by", DEFAULT_MANAGED_BY, type=str)
        return (raw or "").strip() or DEFAULT_MANAGED_BY

    @managed_by.setter
    def managed_by(self, value: str) -> None:
        self._qs.setValue("general/managed_by", (value or "").strip() or DEFAULT_MANAGED_BY)

    @property
    def log_level(self) -> str:
        raw = self._qs.value("general/log_level", "INFO", type=str)
        level = (raw or "").strip().upper()
        if level in _LOG_LEVELS:
            return level
        return "INFO"

    @log_level.setter
    def log_level(self, value: str) -> None:
        level = (value or "").strip().upper()
        if level not in _LOG_LEVELS:
            level = "INFO"
        self._qs.setValue("general/log_level", level)

    # -- helpers --

    def sync(self) -> None:
        self._qs.sync()

    @property
    def app_data_dir(self) -> Path:
        path = self._app_data_dir()
        path.mkdir(parents=True, exist_ok=True)
        return path

    @property
    def themes_dir(self) -> Path:
        path = self.app_data_dir / "themes"
        path.mkdir(parents=True, exist_ok=True)
        return path

    @staticmethod
    def _app_data_dir() -> Path:
        base = Path(os.environ.get("APPDATA", Path.home() / ".config"))
        return base / "dotforge"
