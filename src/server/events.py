"""Widget event envelopes and the replay cache used to catch up new clients."""

from __future__ import annotations

import json
import threading
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Callable, Optional

from contracts.ui_protocol import STICKY_EVENT_ORDER, STICKY_EVENT_TYPES


@dataclass(frozen=True)
class UIEvent:
    """One outbound event; serialized as `{type, timestamp, **payload}`."""
    type: str
    timestamp: datetime
    payload: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.type, "timestamp": self.timestamp.isoformat(), **self.payload}

    def to_json(self) -> str:
        return json.dumps(self.to_dict())


def make_event(
    event_type: str,
    *,
    now_fn: Optional[Callable[[], datetime]] = None,
    **payload: Any,
) -> UIEvent:
    now = now_fn() if now_fn is not None else datetime.now(timezone.utc)
    return UIEvent(type=event_type, timestamp=now, payload=payload)


class EventReplayCache:
    """Latest event per sticky type, replayed in a fixed order to late joiners.

    Publishing happens on the runtime thread while replay happens on the
    server thread, so every access goes through one lock.
    """

    def __init__(self):
        self._latest: dict[str, UIEvent] = {}
        self._lock = threading.Lock()

    def remember(self, event: UIEvent) -> bool:
        if event.type not in STICKY_EVENT_TYPES:
            return False
        with self._lock:
            self._latest[event.type] = event
        return True

    def latest(self, event_type: str) -> Optional[UIEvent]:
        with self._lock:
            return self._latest.get(event_type)

    def replay(self) -> list[str]:
        with self._lock:
            events = [self._latest[key] for key in STICKY_EVENT_ORDER if key in self._latest]
        return [event.to_json() for event in events]
