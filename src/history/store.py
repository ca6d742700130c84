"""JSON-backed store of completed work sessions."""

from __future__ import annotations

import datetime as dt
import json
import logging
import threading
from pathlib import Path
from typing import Any, Optional

from .weekly import WeekHistory, daily_counts, group_by_week

_FORMAT_VERSION = 1


class HistoryError(Exception):
    """Raised when the session history cannot be read or written."""


class SessionStore:
    """Append-only list of completed session timestamps persisted as JSON."""

    def __init__(self, path: str | Path, logger: Optional[logging.Logger] = None):
        self._path = Path(path).expanduser()
        self._logger = logger or logging.getLogger("history")
        self._lock = threading.Lock()
        self._timestamps: Optional[list[dt.datetime]] = None

    @property
    def path(self) -> Path:
        return self._path

    def record(self, completed_at: dt.datetime) -> None:
        with self._lock:
            timestamps = self._load_locked()
            timestamps.append(completed_at)
            self._write_locked(timestamps)
        self._logger.info("Recorded completed session at %s", completed_at.isoformat())

    def timestamps(self) -> list[dt.datetime]:
        with self._lock:
            return list(self._load_locked())

    def count(self) -> int:
        with self._lock:
            return len(self._load_locked())

    def daily_counts(self) -> dict[dt.date, int]:
        return daily_counts(self.timestamps())

    def weekly_history(self) -> list[WeekHistory]:
        return group_by_week(self.daily_counts())

    def _load_locked(self) -> list[dt.datetime]:
        if self._timestamps is not None:
            return self._timestamps

        if not self._path.exists():
            self._timestamps = []
            return self._timestamps

        try:
            raw = json.loads(self._path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as error:
            raise HistoryError(f"Failed to read history file {self._path}: {error}") from error

        self._timestamps = _parse_sessions(raw, self._path)
        self._logger.debug(
            "Loaded %d completed sessions from %s",
            len(self._timestamps),
            self._path,
        )
        return self._timestamps

    def _write_locked(self, timestamps: list[dt.datetime]) -> None:
        payload = {
            "version": _FORMAT_VERSION,
            "sessions": [{"completed_at": stamp.isoformat()} for stamp in timestamps],
        }
        temp_path = self._path.with_suffix(".tmp")
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            temp_path.write_text(json.dumps(payload, indent=2), encoding="utf-8")
            temp_path.replace(self._path)
        except OSError as error:
            # The cached list already holds the unsaved entry.
            self._timestamps = None
            raise HistoryError(
                f"Failed to write history file {self._path}: {error}"
            ) from error


def _parse_sessions(raw: Any, path: Path) -> list[dt.datetime]:
    if not isinstance(raw, dict) or not isinstance(raw.get("sessions"), list):
        raise HistoryError(f"History file {path} must contain a 'sessions' list.")

    timestamps: list[dt.datetime] = []
    for index, entry in enumerate(raw["sessions"]):
        value = entry.get("completed_at") if isinstance(entry, dict) else None
        if not isinstance(value, str):
            raise HistoryError(f"sessions[{index}].completed_at must be a string.")
        try:
            timestamps.append(dt.datetime.fromisoformat(value))
        except ValueError as error:
            raise HistoryError(
                f"sessions[{index}].completed_at is not an ISO timestamp: {value}"
            ) from error
    return timestamps
