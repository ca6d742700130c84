"""Application-owned settings state and the single settings view."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Mapping, Optional

from contracts.ui_protocol import VIEW_CLOSED, VIEW_FOCUSED, VIEW_OPENED
from user_settings import WidgetSettings, save_settings


class SettingsState:
    """Current user settings plus their backing file; saved on commit and shutdown."""
    def __init__(
        self,
        settings: WidgetSettings,
        path: str | Path,
        logger: Optional[logging.Logger] = None,
    ):
        self._settings = settings
        self._path = Path(path)
        self._logger = logger or logging.getLogger("settings")

    @property
    def current(self) -> WidgetSettings:
        return self._settings

    @property
    def path(self) -> Path:
        return self._path

    def sound_enabled(self) -> bool:
        return self._settings.sound_notification

    def commit(self, changes: Mapping[str, Any]) -> WidgetSettings:
        """Validate and persist changes; raises SettingsError and keeps the old state."""
        updated = self._settings.merged(changes)
        save_settings(self._path, updated, logger=self._logger)
        self._settings = updated
        self._logger.info("Settings committed: %s", ", ".join(sorted(changes)) or "none")
        return updated

    def save(self) -> None:
        if self._settings.is_first_run:
            self._settings = self._settings.merged({"is_first_run": False})
        save_settings(self._path, self._settings, logger=self._logger)


class SettingsViewRegistry:
    """Tracks the one settings view the application may show at a time."""
    def __init__(self):
        self._open = False

    @property
    def is_open(self) -> bool:
        return self._open

    def present(self) -> str:
        """Open the view, or focus it when it is already open."""
        if self._open:
            return VIEW_FOCUSED
        self._open = True
        return VIEW_OPENED

    def dismiss(self) -> str:
        self._open = False
        return VIEW_CLOSED
