"""Blocking websocket client used to forward CLI commands to a running widget."""

from __future__ import annotations

import json
import logging
from typing import Any, Optional

from websockets.exceptions import WebSocketException
from websockets.sync.client import connect

from contracts.ui_protocol import EVENT_HELLO

from .commands import make_command_message


class CommandForwardError(Exception):
    """Raised when a command cannot be delivered to the running instance."""


def forward_command(
    url: str,
    name: str,
    *,
    payload: Optional[dict[str, Any]] = None,
    timeout_seconds: float = 3.0,
    logger: Optional[logging.Logger] = None,
) -> None:
    """Connect, wait for the hello greeting, send one command, and disconnect."""
    log = logger or logging.getLogger("ui_client")
    try:
        with connect(url, open_timeout=timeout_seconds, close_timeout=timeout_seconds) as websocket:
            greeting = json.loads(websocket.recv(timeout=timeout_seconds))
            if greeting.get("type") != EVENT_HELLO:
                raise CommandForwardError(
                    f"Unexpected greeting from {url}: {greeting.get('type')!r}"
                )
            websocket.send(make_command_message(name, payload))
            log.info("Forwarded command %s to %s", name, url)
    except (OSError, TimeoutError, WebSocketException, ValueError) as error:
        raise CommandForwardError(f"Could not reach widget at {url}: {error}") from error
