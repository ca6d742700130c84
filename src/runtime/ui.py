from __future__ import annotations

from typing import Any, Optional, Protocol

from contracts.ui_protocol import EVENT_CYCLE, EVENT_ERROR, EVENT_HISTORY, EVENT_SETTINGS
from history import WeekHistory
from pomodoro import CycleUpdate
from user_settings import WidgetSettings

from .messages import window_title


class UIServerLike(Protocol):
    def publish(self, event_type: str, **payload: Any) -> None:
        ...

    def publish_state(
        self,
        state: str,
        *,
        message: Optional[str] = None,
        **payload: Any,
    ) -> None:
        ...


class RuntimeUIPublisher:
    def __init__(self, ui_server: Optional[UIServerLike]):
        self._ui_server = ui_server

    def publish(self, event_type: str, **payload: Any) -> None:
        if self._ui_server:
            self._ui_server.publish(event_type, **payload)

    def publish_state(
        self,
        state: str,
        *,
        message: Optional[str] = None,
        **payload: Any,
    ) -> None:
        if self._ui_server:
            self._ui_server.publish_state(state, message=message, **payload)

    def publish_cycle_update(
        self,
        update: CycleUpdate,
        *,
        command: Optional[str] = None,
        accepted: Optional[bool] = None,
        message: Optional[str] = None,
    ) -> None:
        snapshot = update.snapshot
        display = update.display
        payload: dict[str, Any] = {
            "action": update.action,
            "reason": update.reason,
            "phase": snapshot.phase,
            "period_count": snapshot.period_count,
            "elapsed_seconds": snapshot.elapsed_seconds,
            "duration_seconds": snapshot.duration_seconds,
            "running": snapshot.running,
            "text": display.text,
            "period": display.period,
            "progress": display.progress,
            "display_state": display.state,
            "title": window_title(display),
        }
        if update.completed_at is not None:
            payload["completed_at"] = update.completed_at.isoformat()
        if command:
            payload["command"] = command
        if accepted is not None:
            payload["accepted"] = accepted
        if message:
            payload["message"] = message
        self.publish(EVENT_CYCLE, **payload)

    def publish_settings(
        self,
        settings: WidgetSettings,
        *,
        view: Optional[str] = None,
    ) -> None:
        payload: dict[str, Any] = {"settings": settings.to_dict()}
        if view:
            payload["view"] = view
        self.publish(EVENT_SETTINGS, **payload)

    def publish_history(self, weeks: list[WeekHistory]) -> None:
        self.publish(
            EVENT_HISTORY,
            weeks=[
                {
                    "year": week.year,
                    "week": week.week,
                    "total": week.total,
                    "days": [
                        {
                            "date": day.date.isoformat(),
                            "count": day.count,
                            "level": day.level,
                        }
                        for day in week.days
                    ],
                }
                for week in weeks
            ],
        )

    def publish_error(self, message: str, **payload: Any) -> None:
        self.publish(EVENT_ERROR, message=message, **payload)
