"""Plain-HTTP routes served next to the widget websocket."""

from __future__ import annotations

import json
import mimetypes
from dataclasses import dataclass
from http import HTTPStatus
from pathlib import Path
from typing import Optional
from urllib.parse import unquote

from contracts.ui_protocol import EVENT_CYCLE, EVENT_SETTINGS

from .config import HEALTHZ_PATH, INDEX_PATH, ROOT_PATH, STATE_PATH, UIServerConfig
from .events import EventReplayCache

_TEXT_MIME_TYPES = {"application/javascript", "application/json", "application/xml"}


@dataclass(frozen=True)
class HttpReply:
    status: HTTPStatus
    body: bytes
    content_type: str


def resolve_static_file(ui_root: Path, request_path: str) -> Optional[Path]:
    """Map a request path to an existing file under `ui_root`, or None.

    Percent-escapes are decoded before resolving; hidden files and anything
    that resolves outside the root are refused.
    """
    relative = unquote(request_path).lstrip("/")
    if not relative:
        return None
    if any(part.startswith(".") for part in Path(relative).parts if part != ".."):
        return None

    root = ui_root.resolve()
    candidate = (root / relative).resolve()
    if candidate == root or not candidate.is_relative_to(root):
        return None
    return candidate if candidate.is_file() else None


def guess_content_type(path: Path) -> str:
    mime_type, _ = mimetypes.guess_type(path.name)
    if mime_type is None:
        return "application/octet-stream"
    if mime_type.startswith("text/") or mime_type in _TEXT_MIME_TYPES:
        return f"{mime_type}; charset=utf-8"
    return mime_type


class WidgetRoutes:
    """Index page, health check, current state as JSON, and UI assets."""

    def __init__(self, config: UIServerConfig, replay: EventReplayCache):
        self._config = config
        self._replay = replay
        self._index_html = Path(config.index_file).read_bytes()

    def reply_for(self, path: str) -> HttpReply:
        if path in (ROOT_PATH, INDEX_PATH):
            return HttpReply(HTTPStatus.OK, self._index_html, "text/html; charset=utf-8")

        if path == HEALTHZ_PATH:
            return HttpReply(HTTPStatus.OK, b"ok\n", "text/plain; charset=utf-8")

        if path == STATE_PATH:
            return HttpReply(
                HTTPStatus.OK,
                json.dumps(self._current_state()).encode("utf-8"),
                "application/json",
            )

        asset = resolve_static_file(self._config.ui_root, path)
        if asset is None:
            return HttpReply(HTTPStatus.NOT_FOUND, b"not found\n", "text/plain; charset=utf-8")
        return HttpReply(HTTPStatus.OK, asset.read_bytes(), guess_content_type(asset))

    def _current_state(self) -> dict[str, object]:
        state: dict[str, object] = {}
        for key in (EVENT_CYCLE, EVENT_SETTINGS):
            event = self._replay.latest(key)
            state[key] = event.to_dict() if event is not None else None
        return state
