"""Monotonic stopwatch used as the controller's clock source."""

from __future__ import annotations

import time
from typing import Optional


class Stopwatch:
    """Accumulates elapsed time across start/stop cycles."""

    def __init__(self):
        self._started_at_monotonic: Optional[float] = None
        self._accumulated_seconds: float = 0.0

    @property
    def is_running(self) -> bool:
        return self._started_at_monotonic is not None

    def start(self) -> None:
        if self._started_at_monotonic is None:
            self._started_at_monotonic = time.monotonic()

    def stop(self) -> None:
        started_at = self._started_at_monotonic
        if started_at is None:
            return
        self._accumulated_seconds += max(0.0, time.monotonic() - started_at)
        self._started_at_monotonic = None

    def restart(self) -> None:
        self._accumulated_seconds = 0.0
        self._started_at_monotonic = time.monotonic()

    def reset(self) -> None:
        self._accumulated_seconds = 0.0
        self._started_at_monotonic = None

    def elapsed(self) -> float:
        started_at = self._started_at_monotonic
        if started_at is None:
            return self._accumulated_seconds
        return self._accumulated_seconds + max(0.0, time.monotonic() - started_at)

    def elapsed_seconds(self) -> int:
        return int(self.elapsed())
