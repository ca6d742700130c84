"""Status and rejection text builders for widget flows."""

from __future__ import annotations

from contracts.command_contract import (
    COMMAND_PAUSE,
    COMMAND_RESTART,
    COMMAND_RESUME,
    REASON_ALREADY_RUNNING,
    REASON_INVALID_SETTINGS,
    REASON_NOT_RUNNING,
)
from pomodoro import CycleSnapshot, DisplayUpdate, format_clock
from pomodoro.constants import PHASE_LONG_BREAK, PHASE_SHORT_BREAK, PHASE_WORK

APP_TITLE = "YAPA"

_PHASE_NAMES = {
    PHASE_WORK: "Work",
    PHASE_SHORT_BREAK: "Short break",
    PHASE_LONG_BREAK: "Long break",
}


def window_title(display: DisplayUpdate) -> str:
    """Title shown in the browser tab, e.g. `YAPA - 12:34`."""
    return f"{APP_TITLE} - {display.text}"


def phase_name(phase: str) -> str:
    return _PHASE_NAMES.get(phase, phase)


def cycle_status_message(snapshot: CycleSnapshot) -> str:
    """Build a one-line status for the current cycle snapshot."""
    name = phase_name(snapshot.phase)
    if snapshot.running:
        return f"{name} running ({format_clock(snapshot.remaining_seconds)} left)"
    if snapshot.elapsed_seconds > 0:
        return f"{name} paused ({format_clock(snapshot.remaining_seconds)} left)"
    return f"Ready for {name.lower()}"


def command_rejection_text(command: str, reason: str) -> str:
    if reason == REASON_NOT_RUNNING and command == COMMAND_PAUSE:
        return "Nothing to pause: the clock is not running."
    if reason == REASON_NOT_RUNNING and command == COMMAND_RESTART:
        return "Nothing to restart: the clock is not running."
    if reason == REASON_ALREADY_RUNNING and command == COMMAND_RESUME:
        return "Already running: the clock keeps its progress."
    if reason == REASON_INVALID_SETTINGS:
        return "Settings were not saved because they are invalid."
    return f"Command '{command}' is not possible right now."
