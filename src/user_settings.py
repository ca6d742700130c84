"""User-adjustable widget settings persisted as JSON."""

from __future__ import annotations

import json
import logging
from dataclasses import asdict, dataclass, fields, replace
from pathlib import Path
from typing import Any, Mapping, Optional

from pomodoro import CycleConfig, CycleConfigurationError
from pomodoro.constants import (
    DEFAULT_BREAK_MINUTES,
    DEFAULT_LONG_BREAK_MINUTES,
    DEFAULT_WORK_MINUTES,
)

_logger = logging.getLogger("settings")


class SettingsError(Exception):
    """Raised when user settings are invalid or cannot be persisted."""


@dataclass(frozen=True)
class WidgetSettings:
    """Settings edited from the widget's settings view."""
    work_minutes: int = DEFAULT_WORK_MINUTES
    break_minutes: int = DEFAULT_BREAK_MINUTES
    long_break_minutes: int = DEFAULT_LONG_BREAK_MINUTES
    count_backwards: bool = False
    sound_notification: bool = True
    clock_opacity: float = 0.6
    shadow_opacity: float = 0.6
    use_white_text: bool = True
    is_first_run: bool = True

    def __post_init__(self) -> None:
        try:
            self.cycle_config()
        except CycleConfigurationError as error:
            raise SettingsError(str(error)) from error

        for name in ("count_backwards", "sound_notification", "use_white_text", "is_first_run"):
            if not isinstance(getattr(self, name), bool):
                raise SettingsError(f"{name} must be a boolean.")

        for name in ("clock_opacity", "shadow_opacity"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise SettingsError(f"{name} must be a number.")
            if not 0.0 <= value <= 1.0:
                raise SettingsError(f"{name} must be in [0, 1], got: {value}")

    def cycle_config(self) -> CycleConfig:
        return CycleConfig(
            work_minutes=self.work_minutes,
            break_minutes=self.break_minutes,
            long_break_minutes=self.long_break_minutes,
            count_backwards=self.count_backwards,
        )

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    def merged(self, changes: Mapping[str, Any]) -> "WidgetSettings":
        """Return a copy with the known keys of `changes` applied."""
        allowed = {item.name for item in fields(self)}
        unknown = sorted(set(changes) - allowed)
        if unknown:
            raise SettingsError(f"Unknown settings: {', '.join(unknown)}")
        try:
            return replace(self, **dict(changes))
        except TypeError as error:
            raise SettingsError(str(error)) from error


def load_settings(path: str | Path) -> WidgetSettings:
    settings_path = Path(path)
    if not settings_path.exists():
        _logger.info("No settings file at %s; using defaults", settings_path)
        return WidgetSettings()

    try:
        raw = json.loads(settings_path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as error:
        raise SettingsError(f"Failed to read settings file {settings_path}: {error}") from error

    if not isinstance(raw, dict):
        raise SettingsError(f"Settings file {settings_path} must contain a JSON object.")
    return WidgetSettings().merged(raw)


def save_settings(
    path: str | Path,
    settings: WidgetSettings,
    logger: Optional[logging.Logger] = None,
) -> None:
    log = logger or _logger
    settings_path = Path(path)
    temp_path = settings_path.with_suffix(".tmp")
    try:
        settings_path.parent.mkdir(parents=True, exist_ok=True)
        temp_path.write_text(json.dumps(settings.to_dict(), indent=2), encoding="utf-8")
        temp_path.replace(settings_path)
    except OSError as error:
        raise SettingsError(f"Failed to write settings file {settings_path}: {error}") from error
    log.debug("Saved settings to %s", settings_path)
