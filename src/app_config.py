from __future__ import annotations

import os
import sys
import tomllib
from pathlib import Path

from app_config_parser import parse_app_config
from app_config_schema import (
    DEFAULT_CONFIG_FILE,
    AppConfig,
    AppConfigurationError,
    AppSettings,
    SoundSettings,
    StorageSettings,
    TimerSettings,
    UIServerSettings,
)

CONFIG_FILE_ENV = "YAPA_CONFIG_FILE"

__all__ = [
    "AppConfig",
    "AppConfigurationError",
    "AppSettings",
    "CONFIG_FILE_ENV",
    "SoundSettings",
    "StorageSettings",
    "TimerSettings",
    "UIServerSettings",
    "load_app_config",
    "resolve_config_path",
]


def resolve_config_path(config_path: str | None = None) -> Path:
    env_path = os.getenv(CONFIG_FILE_ENV)
    raw = config_path or env_path or DEFAULT_CONFIG_FILE
    path = Path(raw).expanduser()
    if not path.is_absolute():
        path = (Path.cwd() / path).resolve()
    if path.exists():
        return path

    # Frozen builds keep config.toml next to the executable.
    if config_path is None and env_path is None and getattr(sys, "frozen", False):
        executable_dir_path = Path(sys.executable).resolve().parent / DEFAULT_CONFIG_FILE
        if executable_dir_path.exists():
            return executable_dir_path

    return path


def load_app_config(config_path: str | None = None) -> AppConfig:
    """Load `config.toml`; the implicit default file may be absent, explicit paths may not."""
    explicit = config_path is not None or os.getenv(CONFIG_FILE_ENV) is not None
    path = resolve_config_path(config_path)
    if not path.exists():
        if explicit:
            raise AppConfigurationError(f"Config file not found: {path}")
        return parse_app_config({}, base_dir=path.parent, source_file="")
    if not path.is_file():
        raise AppConfigurationError(f"Config path is not a file: {path}")

    try:
        with open(path, "rb") as fh:
            raw = tomllib.load(fh)
    except (OSError, tomllib.TOMLDecodeError) as error:
        raise AppConfigurationError(f"Failed to parse config TOML: {error}") from error

    return parse_app_config(raw, base_dir=path.parent, source_file=str(path))
