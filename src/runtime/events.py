"""Events consumed by the runtime loop and the publisher that enqueues them."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from queue import Queue
from typing import Protocol

from server import CommandRequest


@dataclass(frozen=True)
class CommandReceivedEvent:
    """A widget or CLI command waiting to be applied on the loop thread."""
    request: CommandRequest
    received_at: datetime


@dataclass(frozen=True)
class ShutdownRequestedEvent:
    """Asks the loop to exit cleanly, e.g. after SIGTERM."""
    reason: str


RuntimeEvent = CommandReceivedEvent | ShutdownRequestedEvent


class EventPublisher(Protocol):
    """Protocol for publishing runtime events."""

    def publish(self, event: RuntimeEvent) -> None: ...


class QueueEventPublisher:
    """Event publisher that pushes events to a queue."""

    def __init__(self, queue: Queue):
        self._queue = queue

    def publish(self, event: RuntimeEvent) -> None:
        self._queue.put(event)
