"""Tick-driven pomodoro cycle state machine: work, short break, long break."""

from __future__ import annotations

import datetime as dt
import logging
import threading
from dataclasses import dataclass, replace
from typing import Callable, Literal, Optional

from .config import CycleConfig
from .constants import (
    ACTION_COMPLETED,
    ACTION_RESET,
    ACTION_START,
    ACTION_STOP,
    ACTION_SYNC,
    ACTION_TICK,
    DISPLAY_ERROR,
    DISPLAY_NONE,
    DISPLAY_NORMAL,
    DISPLAY_PAUSED,
    LABEL_BREAK,
    LABEL_WORK,
    NOTIFY_PHASE_COMPLETED,
    NOTIFY_SILENCE,
    NOTIFY_TICK_STARTED,
    PERIODS_PER_SET,
    PHASE_LONG_BREAK,
    PHASE_SHORT_BREAK,
    PHASE_WORK,
    REASON_COMPLETED,
    REASON_PAUSED,
    REASON_RESET,
    REASON_RESTARTED,
    REASON_RESUMED,
    REASON_SETTINGS,
    REASON_STARTED,
    REASON_STARTUP,
    REASON_TICK,
    RESET_TEXT,
)
from .stopwatch import Stopwatch

CyclePhase = Literal["work", "short_break", "long_break"]
DisplayState = Literal["normal", "paused", "error", "none"]
NotificationEvent = Literal["tick_started", "phase_completed", "silence"]


@dataclass(frozen=True)
class CycleSnapshot:
    """Immutable view of the controller state."""
    phase: CyclePhase
    period_count: int
    elapsed_seconds: int
    duration_seconds: int
    running: bool
    count_backwards: bool = False

    @property
    def remaining_seconds(self) -> int:
        return max(0, self.duration_seconds - self.elapsed_seconds)

    @property
    def progress(self) -> float:
        return self.elapsed_seconds / self.duration_seconds

    @property
    def in_progress(self) -> bool:
        return self.running or self.elapsed_seconds > 0

    @property
    def period(self) -> int:
        """Ordinal of the pomodoro shown next to the clock."""
        if self.phase == PHASE_WORK and self.in_progress:
            return self.period_count + 1
        return self.period_count


@dataclass(frozen=True)
class DisplayUpdate:
    """What the clock widget should render."""
    text: str
    period: Optional[int]
    progress: float
    state: DisplayState


@dataclass(frozen=True)
class CycleUpdate:
    """Result envelope returned by every controller operation."""
    action: str
    reason: str
    snapshot: CycleSnapshot
    display: DisplayUpdate
    notifications: tuple[NotificationEvent, ...] = ()
    completed_at: Optional[dt.datetime] = None

    @property
    def completed(self) -> bool:
        return self.action == ACTION_COMPLETED


def format_clock(seconds: int) -> str:
    """Format whole seconds as `MM:SS` using total minutes."""
    minutes, remainder = divmod(max(0, int(seconds)), 60)
    return f"{minutes:02d}:{remainder:02d}"


def _local_now() -> dt.datetime:
    return dt.datetime.now().astimezone()


class PomodoroCycleController:
    """Owns the cycle state and advances phases on periodic ticks."""

    def __init__(
        self,
        config: Optional[CycleConfig] = None,
        *,
        now_fn: Optional[Callable[[], dt.datetime]] = None,
        logger: Optional[logging.Logger] = None,
    ):
        self._config = config or CycleConfig()
        self._pending_config: Optional[CycleConfig] = None
        self._now_fn = now_fn or _local_now
        self._logger = logger or logging.getLogger("pomodoro")
        self._lock = threading.Lock()
        self._stopwatch = Stopwatch()

        self._phase: CyclePhase = PHASE_WORK
        self._period_count = 0
        self._elapsed_seconds = 0
        self._last_emitted_elapsed: Optional[int] = None
        self._display = _reset_display()

    @property
    def config(self) -> CycleConfig:
        with self._lock:
            return self._config

    def snapshot(self) -> CycleSnapshot:
        with self._lock:
            return self._snapshot_locked()

    def sync(self, reason: str = REASON_STARTUP) -> CycleUpdate:
        with self._lock:
            return self._update_locked(ACTION_SYNC, reason)

    def start(self) -> CycleUpdate:
        with self._lock:
            if self._stopwatch.is_running:
                self._stopwatch.restart()
                self._elapsed_seconds = 0
                reason = REASON_RESTARTED
                self._logger.info("Phase restarted: phase=%s", self._phase)
            else:
                reason = REASON_RESUMED if self._stopwatch.elapsed() > 0 else REASON_STARTED
                self._stopwatch.start()
                self._logger.info(
                    "Phase %s: phase=%s duration=%ss",
                    reason,
                    self._phase,
                    self._config.seconds_for(self._phase),
                )

            self._last_emitted_elapsed = self._elapsed_seconds
            self._display = self._clock_display_locked(DISPLAY_NORMAL)
            return self._update_locked(
                ACTION_START,
                reason,
                notifications=(NOTIFY_TICK_STARTED,),
            )

    def stop(self) -> CycleUpdate:
        with self._lock:
            if self._stopwatch.is_running:
                self._stopwatch.stop()
                self._elapsed_seconds = self._stopwatch.elapsed_seconds()
                self._display = replace(self._display, state=DISPLAY_PAUSED)
                self._logger.info(
                    "Phase paused: phase=%s elapsed=%ss",
                    self._phase,
                    self._elapsed_seconds,
                )
                return self._update_locked(
                    ACTION_STOP,
                    REASON_PAUSED,
                    notifications=(NOTIFY_SILENCE,),
                )

            self._reset_locked()
            return self._update_locked(
                ACTION_STOP,
                REASON_RESET,
                notifications=(NOTIFY_SILENCE,),
            )

    def reset(self) -> CycleUpdate:
        with self._lock:
            self._reset_locked()
            return self._update_locked(ACTION_RESET, REASON_RESET)

    def tick(self) -> Optional[CycleUpdate]:
        """Advance the cycle; returns None while stopped or within the same second."""
        with self._lock:
            if not self._stopwatch.is_running:
                return None

            elapsed = self._stopwatch.elapsed_seconds()
            self._elapsed_seconds = elapsed
            duration = self._config.seconds_for(self._phase)
            if elapsed >= duration:
                return self._complete_phase_locked(elapsed / duration)

            if self._last_emitted_elapsed == elapsed:
                return None

            self._last_emitted_elapsed = elapsed
            self._display = self._clock_display_locked(DISPLAY_NORMAL)
            return self._update_locked(ACTION_TICK, REASON_TICK)

    def update_config(self, config: CycleConfig) -> CycleUpdate:
        """Apply new settings; durations wait for the next phase boundary."""
        with self._lock:
            self._config = replace(self._config, count_backwards=config.count_backwards)
            if not self._stopwatch.is_running and self._stopwatch.elapsed() == 0:
                self._config = config
                self._pending_config = None
            else:
                self._pending_config = config
                self._logger.debug(
                    "Deferring duration change until the current %s phase ends",
                    self._phase,
                )

            if self._snapshot_locked().in_progress:
                self._display = self._clock_display_locked(self._display.state)
            return self._update_locked(ACTION_SYNC, REASON_SETTINGS)

    def _complete_phase_locked(self, progress: float) -> CycleUpdate:
        finished = self._phase
        completed_at: Optional[dt.datetime] = None

        if finished == PHASE_WORK:
            self._period_count += 1
            completed_at = self._now_fn()
            if self._period_count >= PERIODS_PER_SET:
                self._phase = PHASE_LONG_BREAK
            else:
                self._phase = PHASE_SHORT_BREAK
            label = LABEL_BREAK
        else:
            if finished == PHASE_LONG_BREAK:
                self._period_count = 0
            self._phase = PHASE_WORK
            label = LABEL_WORK

        self._stopwatch.reset()
        self._elapsed_seconds = 0
        self._last_emitted_elapsed = None
        self._apply_pending_config_locked()
        self._display = DisplayUpdate(
            text=label,
            period=self._period_count or None,
            progress=progress,
            state=DISPLAY_ERROR,
        )
        self._logger.info(
            "Phase completed: finished=%s next=%s period_count=%d",
            finished,
            self._phase,
            self._period_count,
        )
        return self._update_locked(
            ACTION_COMPLETED,
            REASON_COMPLETED,
            notifications=(NOTIFY_PHASE_COMPLETED,),
            completed_at=completed_at,
        )

    def _reset_locked(self) -> None:
        self._stopwatch.reset()
        self._phase = PHASE_WORK
        self._period_count = 0
        self._elapsed_seconds = 0
        self._last_emitted_elapsed = None
        self._apply_pending_config_locked()
        self._display = _reset_display()
        self._logger.info("Cycle reset")

    def _apply_pending_config_locked(self) -> None:
        if self._pending_config is None:
            return
        self._config = self._pending_config
        self._pending_config = None
        self._logger.info(
            "Applied durations: work=%sm break=%sm long_break=%sm",
            self._config.work_minutes,
            self._config.break_minutes,
            self._config.long_break_minutes,
        )

    def _clock_display_locked(self, state: DisplayState) -> DisplayUpdate:
        snapshot = self._snapshot_locked()
        shown = (
            snapshot.remaining_seconds
            if snapshot.count_backwards
            else snapshot.elapsed_seconds
        )
        return DisplayUpdate(
            text=format_clock(shown),
            period=snapshot.period or None,
            progress=snapshot.progress,
            state=state,
        )

    def _snapshot_locked(self) -> CycleSnapshot:
        return CycleSnapshot(
            phase=self._phase,
            period_count=self._period_count,
            elapsed_seconds=self._elapsed_seconds,
            duration_seconds=self._config.seconds_for(self._phase),
            running=self._stopwatch.is_running,
            count_backwards=self._config.count_backwards,
        )

    def _update_locked(
        self,
        action: str,
        reason: str,
        *,
        notifications: tuple[NotificationEvent, ...] = (),
        completed_at: Optional[dt.datetime] = None,
    ) -> CycleUpdate:
        return CycleUpdate(
            action=action,
            reason=reason,
            snapshot=self._snapshot_locked(),
            display=self._display,
            notifications=notifications,
            completed_at=completed_at,
        )


def _reset_display() -> DisplayUpdate:
    return DisplayUpdate(
        text=RESET_TEXT,
        period=None,
        progress=0.0,
        state=DISPLAY_NONE,
    )
