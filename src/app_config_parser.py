"""Typed parser for config.toml sections into immutable app settings."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Mapping

from app_config_schema import (
    DEFAULT_HISTORY_FILE,
    DEFAULT_SETTINGS_FILE,
    AppConfig,
    AppConfigurationError,
    AppSettings,
    SoundSettings,
    StorageSettings,
    TimerSettings,
    UIServerSettings,
)
from contracts.ui_protocol import UI_VARIANTS

_ALLOWED_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


def parse_app_config(
    raw: Mapping[str, Any],
    *,
    base_dir: Path,
    source_file: str,
) -> AppConfig:
    """Parse raw TOML mappings into strongly typed application settings."""
    app = _parse_app_settings(_section(raw, "app"))
    timer = _parse_timer_settings(_section(raw, "timer"))
    storage = _parse_storage_settings(_section(raw, "storage"), base_dir=base_dir)
    sound = _parse_sound_settings(_section(raw, "sound"), base_dir=base_dir)
    ui_server = _parse_ui_server_settings(_section(raw, "ui_server"), base_dir=base_dir)

    return AppConfig(
        app=app,
        timer=timer,
        storage=storage,
        sound=sound,
        ui_server=ui_server,
        source_file=source_file,
    )


def parse_log_level(value: Any, field: str = "app.log_level") -> str:
    level = _as_str(value, field).upper()
    if level not in _ALLOWED_LOG_LEVELS:
        allowed = ", ".join(sorted(_ALLOWED_LOG_LEVELS))
        raise AppConfigurationError(f"{field} must be one of: {allowed}.")
    return level


def log_level_number(level: str) -> int:
    return logging.getLevelName(level)


def _parse_app_settings(section: Mapping[str, Any]) -> AppSettings:
    return AppSettings(log_level=parse_log_level(section.get("log_level", "INFO")))


def _parse_timer_settings(section: Mapping[str, Any]) -> TimerSettings:
    interval = _as_float(
        section.get("tick_interval_seconds", 0.25),
        "timer.tick_interval_seconds",
    )
    if not 0.0 < interval <= 1.0:
        raise AppConfigurationError(
            "timer.tick_interval_seconds must be in (0, 1]."
        )
    return TimerSettings(tick_interval_seconds=interval)


def _parse_storage_settings(
    section: Mapping[str, Any],
    *,
    base_dir: Path,
) -> StorageSettings:
    history_file = _as_str(
        section.get("history_file", DEFAULT_HISTORY_FILE),
        "storage.history_file",
    )
    settings_file = _as_str(
        section.get("settings_file", DEFAULT_SETTINGS_FILE),
        "storage.settings_file",
    )
    return StorageSettings(
        history_file=_resolve_path(base_dir, history_file or DEFAULT_HISTORY_FILE),
        settings_file=_resolve_path(base_dir, settings_file or DEFAULT_SETTINGS_FILE),
    )


def _parse_sound_settings(
    section: Mapping[str, Any],
    *,
    base_dir: Path,
) -> SoundSettings:
    volume = _as_float(section.get("volume", 0.8), "sound.volume")
    if not 0.0 <= volume <= 1.0:
        raise AppConfigurationError("sound.volume must be in [0, 1].")
    return SoundSettings(
        enabled=_as_bool(section.get("enabled", True), "sound.enabled"),
        tick_file=_resolve_path(
            base_dir,
            _as_str(section.get("tick_file", ""), "sound.tick_file"),
        ),
        ring_file=_resolve_path(
            base_dir,
            _as_str(section.get("ring_file", ""), "sound.ring_file"),
        ),
        output_device=(
            _as_int(section.get("output_device"), "sound.output_device")
            if "output_device" in section
            else None
        ),
        volume=volume,
    )


def _parse_ui_server_settings(
    section: Mapping[str, Any],
    *,
    base_dir: Path,
) -> UIServerSettings:
    ui = _as_ui_name(section.get("ui", "widget"), "ui_server.ui")
    index_file = _as_str(section.get("index_file", ""), "ui_server.index_file")
    return UIServerSettings(
        enabled=_as_bool(section.get("enabled", True), "ui_server.enabled"),
        host=_as_str(section.get("host", "127.0.0.1"), "ui_server.host"),
        port=_as_int(section.get("port", 8765), "ui_server.port"),
        ui=ui,
        index_file=_resolve_path(base_dir, index_file) if index_file else "",
    )


def _section(root: Mapping[str, Any], name: str) -> Mapping[str, Any]:
    raw = root.get(name) or {}
    if not isinstance(raw, Mapping):
        raise AppConfigurationError(f"[{name}] must be a table.")
    return raw


# TOML values arrive typed; bool is excluded from the numeric checks
# because it subclasses int.

def _as_str(value: Any, field: str) -> str:
    if value is None:
        return ""
    if not isinstance(value, str):
        raise AppConfigurationError(f"{field} must be a string.")
    return value.strip()


def _as_bool(value: Any, field: str) -> bool:
    if not isinstance(value, bool):
        raise AppConfigurationError(f"{field} must be true or false.")
    return value


def _as_int(value: Any, field: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise AppConfigurationError(f"{field} must be an integer.")
    return value


def _as_float(value: Any, field: str) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise AppConfigurationError(f"{field} must be a number.")
    return float(value)


def _as_ui_name(value: Any, field: str) -> str:
    name = _as_str(value, field).lower()
    if name not in UI_VARIANTS:
        raise AppConfigurationError(f"{field} must be one of: {', '.join(UI_VARIANTS)}.")
    return name


def _resolve_path(base_dir: Path, raw: str) -> str:
    if not raw:
        return ""
    path = Path(raw).expanduser()
    return str(path if path.is_absolute() else (base_dir / path).resolve())
