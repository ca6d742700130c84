"""Dispatcher that applies widget and CLI commands to the cycle controller."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable

from contracts.command_contract import (
    COMMAND_CLOSE_SETTINGS,
    COMMAND_LOAD_HISTORY,
    COMMAND_OPEN_SETTINGS,
    COMMAND_PAUSE,
    COMMAND_RESET,
    COMMAND_RESUME,
    COMMAND_SAVE_SETTINGS,
    COMMAND_START,
    COMMAND_STOP,
    CYCLE_COMMAND_NAMES,
    REASON_ALREADY_RUNNING,
    REASON_INVALID_SETTINGS,
    REASON_NOT_RUNNING,
    REASON_UNSUPPORTED_COMMAND,
    SETTINGS_COMMAND_NAMES,
)
from pomodoro import PomodoroCycleController
from server import CommandRequest
from user_settings import SettingsError

from .messages import command_rejection_text
from .settings import SettingsState, SettingsViewRegistry
from .ticks import CycleEffects
from .ui import RuntimeUIPublisher


@dataclass(frozen=True)
class CommandDependencies:
    """Services a command may touch; all of them live on the loop thread."""
    controller: PomodoroCycleController
    effects: CycleEffects
    ui: RuntimeUIPublisher
    settings: SettingsState
    settings_view: SettingsViewRegistry
    request_history: Callable[[], None]
    logger: logging.Logger


class RuntimeCommandDispatcher:
    """Routes commands to cycle, settings, and history handlers."""
    def __init__(self, dependencies: CommandDependencies):
        self._dependencies = dependencies

    def handle(self, request: CommandRequest) -> bool:
        """Apply one command; returns whether it was accepted."""
        name = request.name
        if name in CYCLE_COMMAND_NAMES:
            return self._handle_cycle_command(name)
        if name in SETTINGS_COMMAND_NAMES:
            return self._handle_settings_command(name, request.payload)
        if name == COMMAND_LOAD_HISTORY:
            self._dependencies.request_history()
            return True

        deps = self._dependencies
        deps.logger.warning("Unsupported command: %s", name)
        deps.ui.publish_error(
            command_rejection_text(name, REASON_UNSUPPORTED_COMMAND),
            command=name,
            reason=REASON_UNSUPPORTED_COMMAND,
        )
        return False

    def refresh_history(self) -> bool:
        """Reload history for an open settings view after sessions change."""
        if not self._dependencies.settings_view.is_open:
            return False
        self._dependencies.request_history()
        return True

    def _handle_cycle_command(self, name: str) -> bool:
        controller = self._dependencies.controller
        if name == COMMAND_START:
            update = controller.start()
        elif name == COMMAND_STOP:
            update = controller.stop()
        elif name == COMMAND_RESET:
            update = controller.reset()
        elif name == COMMAND_RESUME:
            if controller.snapshot().running:
                return self._reject_cycle_command(name, REASON_ALREADY_RUNNING)
            update = controller.start()
        else:
            # pause and restart only act on a running clock
            if not controller.snapshot().running:
                return self._reject_cycle_command(name, REASON_NOT_RUNNING)
            update = controller.stop() if name == COMMAND_PAUSE else controller.start()

        self._dependencies.effects.handle(update, command=name)
        return True

    def _reject_cycle_command(self, name: str, reason: str) -> bool:
        deps = self._dependencies
        deps.logger.info("Rejected command %s: %s", name, reason)
        deps.ui.publish_cycle_update(
            deps.controller.sync(reason=reason),
            command=name,
            accepted=False,
            message=command_rejection_text(name, reason),
        )
        return False

    def _handle_settings_command(self, name: str, payload: dict[str, Any]) -> bool:
        deps = self._dependencies
        if name == COMMAND_OPEN_SETTINGS:
            view = deps.settings_view.present()
            deps.ui.publish_settings(deps.settings.current, view=view)
            deps.request_history()
            return True

        if name == COMMAND_CLOSE_SETTINGS:
            view = deps.settings_view.dismiss()
            deps.ui.publish_settings(deps.settings.current, view=view)
            return True

        if name == COMMAND_SAVE_SETTINGS:
            return self._save_settings(payload.get("settings"))

        return False

    def _save_settings(self, changes: Any) -> bool:
        deps = self._dependencies
        if not isinstance(changes, dict):
            changes_error = "save_settings requires a 'settings' object"
            return self._reject_settings(changes_error)

        try:
            updated = deps.settings.commit(changes)
        except SettingsError as error:
            return self._reject_settings(str(error))

        update = deps.controller.update_config(updated.cycle_config())
        deps.effects.handle(update, command=COMMAND_SAVE_SETTINGS)
        deps.ui.publish_settings(updated)
        return True

    def _reject_settings(self, detail: str) -> bool:
        deps = self._dependencies
        deps.logger.warning("Rejected settings: %s", detail)
        deps.ui.publish_error(
            command_rejection_text(COMMAND_SAVE_SETTINGS, REASON_INVALID_SETTINGS),
            command=COMMAND_SAVE_SETTINGS,
            reason=REASON_INVALID_SETTINGS,
            detail=detail,
        )
        return False
