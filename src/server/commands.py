"""Parsing of inbound websocket messages into runtime command requests."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Optional

from contracts.command_contract import COMMAND_NAMES
from contracts.ui_protocol import MESSAGE_COMMAND


class CommandMessageError(ValueError):
    """Raised when a websocket message is not a valid command."""


@dataclass(frozen=True)
class CommandRequest:
    """A named command and its optional arguments."""
    name: str
    payload: dict[str, Any] = field(default_factory=dict)


def parse_command_message(raw: str | bytes) -> CommandRequest:
    """Decode `{"type": "command", "command": <name>, ...}` into a request."""
    if isinstance(raw, bytes):
        try:
            raw = raw.decode("utf-8")
        except UnicodeDecodeError as error:
            raise CommandMessageError("Command message must be UTF-8 text") from error

    try:
        decoded = json.loads(raw)
    except ValueError as error:
        raise CommandMessageError(f"Command message is not valid JSON: {error}") from error

    if not isinstance(decoded, dict):
        raise CommandMessageError("Command message must be a JSON object")
    if decoded.get("type") != MESSAGE_COMMAND:
        raise CommandMessageError(f"Unsupported message type: {decoded.get('type')!r}")

    name = decoded.get("command")
    if not isinstance(name, str) or name.strip() not in COMMAND_NAMES:
        raise CommandMessageError(f"Unknown command: {name!r}")

    payload = {
        key: value
        for key, value in decoded.items()
        if key not in ("type", "command")
    }
    return CommandRequest(name=name.strip(), payload=payload)


def make_command_message(name: str, payload: Optional[dict[str, Any]] = None) -> str:
    return json.dumps({"type": MESSAGE_COMMAND, "command": name, **(payload or {})})
