"""Fan-out of controller updates to the display, session store, and notification sink."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Optional

from history import HistoryError
from pomodoro import CycleUpdate

from .contracts import NotificationSinkLike, SessionStoreLike
from .ui import RuntimeUIPublisher


@dataclass(frozen=True)
class CycleEffectDependencies:
    """Collaborators that receive the side effects of cycle updates."""
    ui: RuntimeUIPublisher
    session_store: Optional[SessionStoreLike]
    notifier: Optional[NotificationSinkLike]
    logger: logging.Logger
    on_session_recorded: Optional[Callable[[], None]] = None


class CycleEffects:
    """Publishes display updates, records completed sessions, and triggers sounds."""
    def __init__(self, dependencies: CycleEffectDependencies):
        self._dependencies = dependencies

    def handle(self, update: CycleUpdate, *, command: Optional[str] = None) -> None:
        deps = self._dependencies
        deps.ui.publish_cycle_update(update, command=command, accepted=True if command else None)

        if update.completed_at is not None:
            self._record_session(update)

        for event in update.notifications:
            self._notify(event)

    def _record_session(self, update: CycleUpdate) -> None:
        deps = self._dependencies
        if deps.session_store is None or update.completed_at is None:
            return
        try:
            deps.session_store.record(update.completed_at)
        except HistoryError as error:
            deps.logger.error("Failed to record completed session: %s", error)
            deps.ui.publish_error(f"Failed to record completed session: {error}")
            return
        if deps.on_session_recorded is not None:
            deps.on_session_recorded()

    def _notify(self, event: str) -> None:
        deps = self._dependencies
        if deps.notifier is None:
            return
        try:
            deps.notifier.notify(event)
        except Exception as error:
            deps.logger.error("Notification %s failed: %s", event, error)
