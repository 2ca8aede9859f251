"""Service bootstrap."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from logging.handlers import RotatingFileHandler
from pathlib import Path

from dotforge.config.settings import AppSettings
from dotforge.themes.constants import DEFAULT_THEME_ID, DEFAULT_THEME_NAME
from dotforge.themes.palette import create_default_theme
from dotforge.themes.registry import ThemeRegistry
from dotforge.themes.service import ThemeService

_THEME_SUFFIXES = {".json", ".yaml", ".yml"}


@dataclass(frozen=True, slots=True)
class AppServices:
    settings: AppSettings
    registry: ThemeRegistry
    theme_service: ThemeService


def _configure_logger(settings: AppSettings) -> logging.Logger:
    logger = logging.getLogger("dotforge")
    if logger.handlers:
        return logger

    logger.setLevel(getattr(logging, settings.log_level, logging.INFO))
    log_dir = settings.app_data_dir / "logs"
    log_dir.mkdir(parents=True, exist_ok=True)
    handler = RotatingFileHandler(
        log_dir / "dotforge.log",
        maxBytes=512_000,
        backupCount=3,
        encoding="utf-8",
    )
    handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s %(message)s"))
    logger.addHandler(handler)
    logger.propagate = False
    return logger


def _read_theme_documents(root: Path, logger: logging.Logger) -> list[tuple[str, str]]:
    documents: list[tuple[str, str]] = []
    for path in sorted(root.iterdir()):
        if path.suffix.lower() not in _THEME_SUFFIXES or not path.is_file():
            continue
        try:
            documents.append((str(path), path.read_text(encoding="utf-8")))
        except OSError as exc:
            logger.warning("could not read theme file %s: %s", path, exc)
    return documents


def create_services(settings: AppSettings | None = None) -> AppServices:
    """Build settings, the theme registry and the theme service."""
    settings = settings or AppSettings()
    logger = _configure_logger(settings)

    registry = ThemeRegistry()
    registry.register_builtin(create_default_theme(DEFAULT_THEME_ID, DEFAULT_THEME_NAME))
    registry.load_documents(_read_theme_documents(settings.themes_dir, logger))
    errors = registry.load_errors()
    if errors:
        logger.warning("theme load warnings: %s", " | ".join(errors[:6]))

    theme_service = ThemeService(settings, registry)
    return AppServices(settings=settings, registry=registry, theme_service=theme_service)
