"""Editable in-memory session around one config format."""

from __future__ import annotations

import copy
import logging
from typing import Any, Callable

from PySide6.QtCore import QObject, Signal

from dotforge.core.config_formats import ConfigFormat, ConfigType, get_config_format
from dotforge.core.shell_common import DEFAULT_MANAGED_BY

logger = logging.getLogger(__name__)


class ConfigSession(QObject):
    """Own one config model plus the copy that was last loaded or saved.

    The caller does all file I/O: text comes in through ``load_text`` and goes
    out through ``to_text``.
    """

    config_changed = Signal()

    def __init__(self, config_type: ConfigType | str, *, managed_by: str = DEFAULT_MANAGED_BY) -> None:
        super().__init__()
        self._format: ConfigFormat = get_config_format(config_type)
        self._managed_by = managed_by
        self._config: Any = self._format.default()
        self._saved: Any = copy.deepcopy(self._config)

    @property
    def config_type(self) -> ConfigType:
        return self._format.config_type

    @property
    def config(self) -> Any:
        return self._config

    def load_text(self, text: str) -> None:
        self._replace(self._format.parse(text))
        self.mark_saved()
        logger.debug("loaded %s config (%d chars)", self.config_type.value, len(text))

    def load_default(self) -> None:
        self._replace(self._format.default())
        self.mark_saved()

    def update(self, updater: Callable[[Any], Any]) -> None:
        """Apply ``updater`` to a copy of the model and keep its result.

        ``updater`` may mutate the copy in place and return None.
        """
        working = copy.deepcopy(self._config)
        result = updater(working)
        self._replace(working if result is None else result)

    def reset(self) -> None:
        self._replace(copy.deepcopy(self._saved))

    def to_text(self) -> str:
        return self._format.stringify(self._config, self._managed_by)

    def mark_saved(self) -> None:
        self._saved = copy.deepcopy(self._config)

    def has_unsaved_changes(self) -> bool:
        return self._config != self._saved

    def _replace(self, config: Any) -> None:
        self._config = config
        self.config_changed.emit()
