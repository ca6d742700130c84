"""Runtime orchestration loop for widget commands, cycle ticks, and history jobs."""

from __future__ import annotations

import concurrent.futures
import datetime as dt
import logging
from dataclasses import dataclass
from queue import Empty, Queue
from typing import Any, Callable, Optional

from app_config_schema import AppConfig
from contracts.ui_protocol import STATE_ERROR, STATE_READY, STATE_STOPPING
from history import WeekHistory
from pomodoro import PomodoroCycleController
from pomodoro.constants import REASON_STARTUP
from server import CommandRequest, UIServer
from user_settings import SettingsError

from .commands import CommandDependencies, RuntimeCommandDispatcher
from .contracts import NotificationSinkLike, SessionStoreLike
from .events import (
    CommandReceivedEvent,
    EventPublisher,
    QueueEventPublisher,
    ShutdownRequestedEvent,
)
from .messages import cycle_status_message
from .settings import SettingsState, SettingsViewRegistry
from .ticks import CycleEffectDependencies, CycleEffects
from .ui import RuntimeUIPublisher


@dataclass(frozen=True)
class RuntimeHooks:
    """Injectable lifecycle hooks used by runtime startup."""
    setup_signal_handlers: Callable[[EventPublisher], None]


@dataclass(frozen=True)
class RuntimeBootstrap:
    """Dependency bundle required to construct the runtime engine."""
    logger: logging.Logger
    app_config: AppConfig
    controller: PomodoroCycleController
    settings: SettingsState
    session_store: Optional[SessionStoreLike]
    notifier: Optional[NotificationSinkLike]
    ui_server: Optional[UIServer]
    hooks: RuntimeHooks


@dataclass
class RuntimeResources:
    """Mutable runtime resources created for the event loop lifecycle."""
    event_queue: Queue[Any]
    publisher: QueueEventPublisher
    history_executor: concurrent.futures.ThreadPoolExecutor
    pending_history: Optional[concurrent.futures.Future[list[WeekHistory]]] = None
    history_stale: bool = False


class RuntimeEngine:
    """Main runtime loop; the only thread that mutates the cycle controller."""
    def __init__(self, bootstrap: RuntimeBootstrap):
        self._bootstrap = bootstrap
        self._logger = bootstrap.logger
        self._controller = bootstrap.controller
        self._tick_interval = bootstrap.app_config.timer.tick_interval_seconds

        self._ui = RuntimeUIPublisher(bootstrap.ui_server)
        self._settings_view = SettingsViewRegistry()
        self._effects = CycleEffects(
            CycleEffectDependencies(
                ui=self._ui,
                session_store=bootstrap.session_store,
                notifier=bootstrap.notifier,
                logger=self._logger,
                on_session_recorded=self._on_session_recorded,
            )
        )
        self._dispatcher = RuntimeCommandDispatcher(
            CommandDependencies(
                controller=self._controller,
                effects=self._effects,
                ui=self._ui,
                settings=bootstrap.settings,
                settings_view=self._settings_view,
                request_history=self._request_history,
                logger=self._logger,
            )
        )

        event_queue: Queue[Any] = Queue()
        self._resources = RuntimeResources(
            event_queue=event_queue,
            publisher=QueueEventPublisher(event_queue),
            history_executor=concurrent.futures.ThreadPoolExecutor(
                max_workers=1,
                thread_name_prefix="history",
            ),
        )

    @property
    def publisher(self) -> EventPublisher:
        return self._resources.publisher

    @property
    def settings_view(self) -> SettingsViewRegistry:
        return self._settings_view

    def run(self) -> int:
        self._bootstrap.hooks.setup_signal_handlers(self._resources.publisher)
        ui_server = self._bootstrap.ui_server
        if ui_server is not None:
            ui_server.set_command_handler(self.enqueue_command)

        try:
            self._publish_startup_sync()
            self._logger.info("Ready! %s", cycle_status_message(self._controller.snapshot()))

            while True:
                self._finalize_pending_history()
                self._emit_cycle_tick()

                event = self._poll_event()
                if event is None:
                    continue

                event_exit = self._handle_event(event)
                if event_exit is not None:
                    return event_exit

        except KeyboardInterrupt:
            self._logger.info("Shutdown requested by keyboard interrupt.")
            return 0
        except Exception as error:
            self._logger.error("Unexpected error: %s", error, exc_info=True)
            self._ui.publish_state(STATE_ERROR, message=f"Unexpected error: {error}")
            return 1
        finally:
            self._shutdown()

    def enqueue_command(self, request: CommandRequest) -> None:
        """Called from the UI server thread; the command runs on the loop thread."""
        self._resources.publisher.publish(
            CommandReceivedEvent(
                request=request,
                received_at=dt.datetime.now().astimezone(),
            )
        )

    def _publish_startup_sync(self) -> None:
        self._ui.publish_cycle_update(
            self._controller.sync(reason=REASON_STARTUP),
            accepted=True,
        )
        self._ui.publish_settings(self._bootstrap.settings.current)
        self._ui.publish_state(STATE_READY, message="Widget ready")

    def _emit_cycle_tick(self) -> None:
        update = self._controller.tick()
        if update is not None:
            self._effects.handle(update)

    def _poll_event(self) -> Optional[Any]:
        try:
            return self._resources.event_queue.get(timeout=self._tick_interval)
        except Empty:
            return None

    def _handle_event(self, event: Any) -> Optional[int]:
        if isinstance(event, CommandReceivedEvent):
            self._logger.info(
                "Command %s received at %s",
                event.request.name,
                event.received_at.isoformat(timespec="seconds"),
            )
            self._dispatcher.handle(event.request)
            return None

        if isinstance(event, ShutdownRequestedEvent):
            self._logger.info("Shutdown requested: %s", event.reason)
            return 0

        self._logger.warning("Ignoring unknown event type: %s", type(event).__name__)
        return None

    def _on_session_recorded(self) -> None:
        self._dispatcher.refresh_history()

    def _request_history(self) -> None:
        session_store = self._bootstrap.session_store
        if session_store is None:
            self._ui.publish_history([])
            return

        pending = self._resources.pending_history
        if pending is not None and not pending.done():
            # the running load may predate the latest session; reload once it lands
            self._logger.debug("History load already in progress; queued a reload")
            self._resources.history_stale = True
            return

        try:
            self._resources.pending_history = self._resources.history_executor.submit(
                session_store.weekly_history
            )
        except RuntimeError as error:
            self._logger.error("Failed to submit history task: %s", error)
            self._ui.publish_error(f"Failed to load history: {error}")
            self._resources.pending_history = None

    def _finalize_pending_history(self) -> None:
        pending = self._resources.pending_history
        if pending is None or not pending.done():
            return

        try:
            weeks = pending.result()
        except Exception as error:
            self._logger.error("History worker failed: %s", error, exc_info=True)
            self._ui.publish_error(f"Failed to load history: {error}")
        else:
            self._logger.debug("Loaded %d week(s) of history", len(weeks))
            self._ui.publish_history(weeks)
        finally:
            self._resources.pending_history = None

        if self._resources.history_stale:
            self._resources.history_stale = False
            self._request_history()

    def _shutdown(self) -> None:
        self._ui.publish_state(STATE_STOPPING, message="Widget stopping")

        try:
            self._bootstrap.settings.save()
        except SettingsError as error:
            self._logger.error("Failed to save settings: %s", error)

        notifier = self._bootstrap.notifier
        if notifier is not None:
            try:
                notifier.stop()
            except Exception as error:
                self._logger.error("Error stopping notifications: %s", error, exc_info=True)

        self._logger.info("Stopping history executor...")
        self._resources.history_executor.shutdown(wait=False, cancel_futures=True)

        ui_server = self._bootstrap.ui_server
        if ui_server is not None:
            self._logger.info("Stopping UI server...")
            try:
                ui_server.stop(timeout_seconds=5.0)
            except Exception as error:
                self._logger.error("Error stopping UI server: %s", error, exc_info=True)
