"""Canonical command names accepted from widget clients and the CLI."""

from __future__ import annotations

COMMAND_START = "start"
COMMAND_RESUME = "resume"
COMMAND_STOP = "stop"
COMMAND_PAUSE = "pause"
COMMAND_RESTART = "restart"
COMMAND_RESET = "reset"
COMMAND_OPEN_SETTINGS = "open_settings"
COMMAND_CLOSE_SETTINGS = "close_settings"
COMMAND_SAVE_SETTINGS = "save_settings"
COMMAND_LOAD_HISTORY = "load_history"

CYCLE_COMMAND_NAMES: frozenset[str] = frozenset(
    {
        COMMAND_START,
        COMMAND_RESUME,
        COMMAND_STOP,
        COMMAND_PAUSE,
        COMMAND_RESTART,
        COMMAND_RESET,
    }
)

SETTINGS_COMMAND_NAMES: frozenset[str] = frozenset(
    {
        COMMAND_OPEN_SETTINGS,
        COMMAND_CLOSE_SETTINGS,
        COMMAND_SAVE_SETTINGS,
    }
)

COMMAND_NAME_ORDER: tuple[str, ...] = (
    COMMAND_START,
    COMMAND_RESUME,
    COMMAND_STOP,
    COMMAND_PAUSE,
    COMMAND_RESTART,
    COMMAND_RESET,
    COMMAND_OPEN_SETTINGS,
    COMMAND_CLOSE_SETTINGS,
    COMMAND_SAVE_SETTINGS,
    COMMAND_LOAD_HISTORY,
)

COMMAND_NAMES: frozenset[str] = frozenset(COMMAND_NAME_ORDER)

# Arguments accepted by `yapa <command>`; each forwards one runtime command.
# `start` resumes a stopped clock and leaves a running one untouched.
CLI_COMMAND_TO_RUNTIME_COMMAND: dict[str, str] = {
    "start": COMMAND_RESUME,
    "pause": COMMAND_PAUSE,
    "restart": COMMAND_RESTART,
    "reset": COMMAND_RESET,
    "settings": COMMAND_OPEN_SETTINGS,
}

REASON_NOT_RUNNING = "not_running"
REASON_ALREADY_RUNNING = "already_running"
REASON_INVALID_SETTINGS = "invalid_settings"
REASON_UNSUPPORTED_COMMAND = "unsupported_command"
