"""Protocols describing runtime-facing collaborator capabilities."""

from __future__ import annotations

import datetime as dt
from typing import Protocol

from history import WeekHistory


class SessionStoreLike(Protocol):
    """Persistence for completed work sessions."""
    def record(self, completed_at: dt.datetime) -> None:
        ...

    def weekly_history(self) -> list[WeekHistory]:
        ...


class NotificationSinkLike(Protocol):
    """Audible alerts for cycle notification events."""
    def notify(self, event: str) -> None:
        ...

    def stop(self) -> None:
        ...
