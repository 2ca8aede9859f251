"""In-memory theme registry."""

from __future__ import annotations

import logging
from dataclasses import replace
from datetime import datetime, timezone
from typing import Iterable

from dotforge.errors import DotforgeError, ErrorCode
from dotforge.themes.loader import dump_theme_text, load_theme_text
from dotforge.themes.models import Theme, ThemeMetadata, ThemeValidationError
from dotforge.themes.validator import validate_theme

logger = logging.getLogger(__name__)


class ThemeRegistry:
    """Holds built-in themes and user themes; user themes may shadow built-ins."""

    def __init__(self) -> None:
        self._builtin: dict[str, Theme] = {}
        self._user: dict[str, Theme] = {}
        self._load_errors: list[str] = []

    def register_builtin(self, theme: Theme) -> None:
        if theme.id in self._builtin:
            raise DotforgeError(ErrorCode.THEME_DUPLICATE, details={"theme_id": theme.id})
        self._builtin[theme.id] = theme
        logger.debug("Registered built-in theme %s", theme.id)

    def load_documents(self, documents: Iterable[tuple[str, str]]) -> None:
        """Replace the user themes with the given ``(source, text)`` documents.

        Problems are collected in :meth:`load_errors` instead of raised.
        """
        self._user = {}
        self._load_errors = []
        for source, text in documents:
            try:
                theme = load_theme_text(text)
            except ThemeValidationError as exc:
                self._record_error(f"{source}: {exc}")
                continue

            result = validate_theme(theme)
            if not result.valid:
                self._record_error(f"{source}: {'; '.join(result.errors)}")
                continue

            if theme.id in self._user:
                self._record_error(f"{source}: duplicate user theme id {theme.id!r}; skipping.")
                continue
            if theme.id in self._builtin:
                self._load_errors.append(f"User theme {theme.id!r} overrides built-in theme.")
            self._user[theme.id] = theme

    def load_errors(self) -> list[str]:
        return list(self._load_errors)

    def get_theme(self, theme_id: str) -> Theme | None:
        return self._user.get(theme_id) or self._builtin.get(theme_id)

    def is_builtin(self, theme_id: str) -> bool:
        return theme_id in self._builtin and theme_id not in self._user

    def list_themes(self) -> list[ThemeMetadata]:
        merged = {**self._builtin, **self._user}
        rows = [
            ThemeMetadata.from_theme(theme, is_builtin=self.is_builtin(theme_id))
            for theme_id, theme in merged.items()
        ]
        return sorted(rows, key=lambda row: (0 if row.is_builtin else 1, row.name.lower()))

    def remove(self, theme_id: str) -> bool:
        """Remove a user theme. Built-in themes cannot be removed."""
        return self._user.pop(theme_id, None) is not None

    def import_theme(self, text: str, *, overwrite: bool = False) -> Theme:
        try:
            theme = load_theme_text(text)
        except ThemeValidationError as exc:
            raise DotforgeError(ErrorCode.THEME_INVALID, details={"error": str(exc)}) from exc

        result = validate_theme(theme)
        if not result.valid:
            raise DotforgeError(ErrorCode.THEME_INVALID, details={"errors": "; ".join(result.errors)})
        if theme.id in self._user and not overwrite:
            raise DotforgeError(ErrorCode.THEME_DUPLICATE, details={"theme_id": theme.id})

        self._user[theme.id] = theme
        logger.debug("Imported theme %s", theme.id)
        return theme

    def export_theme(self, theme_id: str, fmt: str = "json") -> str:
        return dump_theme_text(self._require(theme_id), fmt)

    def duplicate_theme(self, theme_id: str, new_id: str, new_name: str) -> Theme:
        source = self._require(theme_id)
        if self.get_theme(new_id) is not None:
            raise DotforgeError(ErrorCode.THEME_DUPLICATE, details={"theme_id": new_id})
        timestamp = datetime.now(timezone.utc).isoformat()
        copy = replace(source, id=new_id, name=new_name, created_at=timestamp, updated_at=timestamp)
        self._user[new_id] = copy
        return copy

    def _require(self, theme_id: str) -> Theme:
        theme = self.get_theme(theme_id)
        if theme is None:
            raise DotforgeError(ErrorCode.THEME_NOT_FOUND, details={"theme_id": theme_id})
        return theme

    def _record_error(self, message: str) -> None:
        logger.warning("Theme load problem: %s", message)
        self._load_errors.append(message)
