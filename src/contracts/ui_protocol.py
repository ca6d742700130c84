"""Web UI websocket event and state constants."""

from __future__ import annotations

# Websocket event types
EVENT_HELLO = "hello"
EVENT_STATE_UPDATE = "state_update"
EVENT_CYCLE = "cycle"
EVENT_SETTINGS = "settings"
EVENT_HISTORY = "history"
EVENT_ERROR = "error"

# Inbound message type sent by widget clients and the CLI
MESSAGE_COMMAND = "command"

# Application states
STATE_READY = "ready"
STATE_STOPPING = "stopping"
STATE_ERROR = "error"

# Settings view transitions
VIEW_OPENED = "opened"
VIEW_FOCUSED = "focused"
VIEW_CLOSED = "closed"

# Built-in page variants, each a directory under web_ui/ holding index.html
UI_VARIANTS: tuple[str, ...] = ("widget", "compact")

STICKY_EVENT_TYPES: frozenset[str] = frozenset(
    {
        EVENT_STATE_UPDATE,
        EVENT_CYCLE,
        EVENT_SETTINGS,
        EVENT_HISTORY,
        EVENT_ERROR,
    }
)

STICKY_EVENT_ORDER: tuple[str, ...] = (
    EVENT_CYCLE,
    EVENT_SETTINGS,
    EVENT_HISTORY,
    EVENT_ERROR,
    EVENT_STATE_UPDATE,
)
