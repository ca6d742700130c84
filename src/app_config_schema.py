"""Dataclass schema objects used by runtime configuration loading."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

DEFAULT_CONFIG_FILE = "config.toml"
DEFAULT_HISTORY_FILE = "data/history.json"
DEFAULT_SETTINGS_FILE = "data/settings.json"


class AppConfigurationError(Exception):
    """Raised when application configuration fails."""


@dataclass(frozen=True)
class AppSettings:
    """Process-wide options from `[app]`."""
    log_level: str = "INFO"


@dataclass(frozen=True)
class TimerSettings:
    """Tick scheduling from `[timer]`."""
    tick_interval_seconds: float = 0.25


@dataclass(frozen=True)
class StorageSettings:
    """History and user-settings file locations from `[storage]`."""
    history_file: str = ""
    settings_file: str = ""


@dataclass(frozen=True)
class SoundSettings:
    """Notification sound settings from `[sound]`."""
    enabled: bool = True
    tick_file: str = ""
    ring_file: str = ""
    output_device: Optional[int] = None
    volume: float = 0.8


@dataclass(frozen=True)
class UIServerSettings:
    """Built-in widget server settings from `[ui_server]`."""
    enabled: bool = True
    host: str = "127.0.0.1"
    port: int = 8765
    ui: str = "widget"
    index_file: str = ""


@dataclass(frozen=True)
class AppConfig:
    """Complete typed runtime configuration loaded from `config.toml`."""
    app: AppSettings
    timer: TimerSettings
    storage: StorageSettings
    sound: SoundSettings
    ui_server: UIServerSettings
    source_file: str
