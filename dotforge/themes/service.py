"""Runtime theme apply and persistence service."""

from __future__ import annotations

import logging
from datetime import datetime

from PySide6.QtCore import QObject, Signal

from dotforge.themes.compiler import compile_theme
from dotforge.themes.constants import DEFAULT_THEME_ID, DEFAULT_THEME_NAME
from dotforge.themes.models import ResolvedTheme, ScheduleEvaluation, Theme, ThemeValidationError
from dotforge.themes.palette import create_default_theme
from dotforge.themes.registry import ThemeRegistry
from dotforge.themes.schedule import evaluate_schedule

logger = logging.getLogger(__name__)


class ThemeService(QObject):
    """Resolve the active theme and persist the selection."""

    theme_changed = Signal(str)

    def __init__(self, settings, registry: ThemeRegistry) -> None:
        super().__init__()
        self._settings = settings
        self._registry = registry
        self._active_theme_id = ""
        self._active_variant = "day"
        self._resolved: ResolvedTheme | None = None

    @property
    def active_theme_id(self) -> str:
        return self._active_theme_id

    @property
    def active_variant(self) -> str:
        return self._active_variant

    @property
    def resolved(self) -> ResolvedTheme | None:
        return self._resolved

    @property
    def registry(self) -> ThemeRegistry:
        return self._registry

    def apply_theme(self, theme_id: str, variant: str = "day", *, persist: bool = True) -> tuple[bool, str]:
        theme = self._registry.get_theme(theme_id)
        if theme is None:
            return False, f"Theme not found: {theme_id}"
        try:
            resolved = compile_theme(theme, variant)
        except ThemeValidationError as exc:
            return False, f"Could not compile theme {theme_id}: {exc}"

        self._activate(theme, resolved)
        if persist:
            self._settings.theme_id = theme_id
        self._settings.theme_last_known_good_id = theme_id
        self.theme_changed.emit(theme_id)
        return True, f"Applied theme: {theme.name}"

    def apply_startup_theme(self, variant: str = "day") -> tuple[bool, str]:
        requested = self._settings.theme_id
        fallback = self._settings.theme_last_known_good_id
        candidates = [requested, fallback, DEFAULT_THEME_ID]
        seen: set[str] = set()

        for candidate in candidates:
            if not candidate or candidate in seen:
                continue
            seen.add(candidate)
            ok, message = self.apply_theme(candidate, variant, persist=True)
            if ok:
                return True, message
            logger.debug("Startup theme %s rejected: %s", candidate, message)

        theme = create_default_theme(DEFAULT_THEME_ID, DEFAULT_THEME_NAME)
        self._activate(theme, compile_theme(theme, variant))
        self._settings.theme_id = DEFAULT_THEME_ID
        self._settings.theme_last_known_good_id = DEFAULT_THEME_ID
        self.theme_changed.emit(DEFAULT_THEME_ID)
        return False, "No valid theme found; reverted to the built-in default palette."

    def evaluate_schedule(
        self,
        now: datetime | None = None,
        *,
        is_day: bool = True,
        next_transition: datetime | None = None,
    ) -> ScheduleEvaluation:
        """Evaluate the stored schedule. ``is_day`` comes from the solar-time service."""
        return evaluate_schedule(
            now or datetime.now().astimezone(),
            self._settings.schedule,
            is_day=is_day,
            next_transition=next_transition,
            active_theme_id=self._active_theme_id or None,
        )

    def apply_scheduled(
        self,
        now: datetime | None = None,
        *,
        is_day: bool = True,
        next_transition: datetime | None = None,
        persist: bool = False,
    ) -> tuple[bool, str]:
        evaluation = self.evaluate_schedule(now, is_day=is_day, next_transition=next_transition)
        return self.apply_theme(evaluation.theme_id, evaluation.variant, persist=persist)

    def _activate(self, theme: Theme, resolved: ResolvedTheme) -> None:
        self._active_theme_id = theme.id
        self._active_variant = resolved.variant
        self._resolved = resolved
