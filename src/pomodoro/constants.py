"""Phase, action, reason, and display constants used by the cycle controller."""

from __future__ import annotations

DEFAULT_WORK_MINUTES = 25
DEFAULT_BREAK_MINUTES = 5
DEFAULT_LONG_BREAK_MINUTES = 15

PERIODS_PER_SET = 4

PHASE_WORK = "work"
PHASE_SHORT_BREAK = "short_break"
PHASE_LONG_BREAK = "long_break"

LABEL_WORK = "work"
LABEL_BREAK = "break"
RESET_TEXT = "00:00"

DISPLAY_NORMAL = "normal"
DISPLAY_PAUSED = "paused"
DISPLAY_ERROR = "error"
DISPLAY_NONE = "none"

NOTIFY_TICK_STARTED = "tick_started"
NOTIFY_PHASE_COMPLETED = "phase_completed"
NOTIFY_SILENCE = "silence"

ACTION_START = "start"
ACTION_STOP = "stop"
ACTION_RESET = "reset"
ACTION_TICK = "tick"
ACTION_COMPLETED = "completed"
ACTION_SYNC = "sync"

REASON_STARTED = "started"
REASON_RESUMED = "resumed"
REASON_RESTARTED = "restarted"
REASON_PAUSED = "paused"
REASON_RESET = "reset"
REASON_TICK = "tick"
REASON_COMPLETED = "completed"
REASON_STARTUP = "startup"
REASON_SETTINGS = "settings"
