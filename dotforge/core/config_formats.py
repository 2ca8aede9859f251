"""Registry of supported config text formats."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Mapping

from dotforge.core.bash_config import default_bash_config, parse_bash_config, stringify_bash_config
from dotforge.core.kitty_config import default_kitty_config, parse_kitty_config, stringify_kitty_config
from dotforge.core.starship_config import (
    default_starship_config,
    parse_starship_config,
    stringify_starship_config,
)
from dotforge.core.tmux_config import default_tmux_config, parse_tmux_config, stringify_tmux_config
from dotforge.core.zsh_config import default_zsh_config, parse_zsh_config, stringify_zsh_config
from dotforge.errors import DotforgeError, ErrorCode


class ConfigType(str, Enum):
    BASH = "bash"
    ZSH = "zsh"
    TMUX = "tmux"
    KITTY = "kitty"
    STARSHIP = "starship"


@dataclass(frozen=True, slots=True)
class ConfigFormat:
    """Parse/stringify/default triple for one config type."""

    config_type: ConfigType
    filename: str
    parse: Callable[[str], Any]
    stringify: Callable[..., str]
    default: Callable[[], Any]


CONFIG_FORMATS: dict[ConfigType, ConfigFormat] = {
    ConfigType.BASH: ConfigFormat(
        ConfigType.BASH, ".bashrc", parse_bash_config, stringify_bash_config, default_bash_config
    ),
    ConfigType.ZSH: ConfigFormat(
        ConfigType.ZSH, ".zshrc", parse_zsh_config, stringify_zsh_config, default_zsh_config
    ),
    ConfigType.TMUX: ConfigFormat(
        ConfigType.TMUX, ".tmux.conf", parse_tmux_config, stringify_tmux_config, default_tmux_config
    ),
    ConfigType.KITTY: ConfigFormat(
        ConfigType.KITTY, "kitty.conf", parse_kitty_config, stringify_kitty_config, default_kitty_config
    ),
    ConfigType.STARSHIP: ConfigFormat(
        ConfigType.STARSHIP,
        "starship.toml",
        parse_starship_config,
        stringify_starship_config,
        default_starship_config,
    ),
}


def get_config_format(config_type: ConfigType | str) -> ConfigFormat:
    try:
        return CONFIG_FORMATS[ConfigType(config_type)]
    except ValueError as exc:
        raise DotforgeError(
            ErrorCode.CONFIG_TYPE_UNKNOWN,
            details={"config_type": str(config_type)},
        ) from exc


@dataclass(frozen=True, slots=True)
class TerminalBackup:
    """Backup metadata reported by the file backend."""

    filename: str
    path: str
    timestamp: str
    config_type: str

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> TerminalBackup:
        return cls(
            filename=str(data.get("filename", "")),
            path=str(data.get("path", "")),
            timestamp=str(data.get("timestamp", "")),
            config_type=str(data.get("configType", data.get("config_type", ""))),
        )

    def to_dict(self) -> dict[str, str]:
        return {
            "filename": self.filename,
            "path": self.path,
            "timestamp": self.timestamp,
            "configType": self.config_type,
        }
