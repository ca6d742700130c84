"""Validated phase durations for the pomodoro cycle."""

from __future__ import annotations

from dataclasses import dataclass

from .constants import (
    DEFAULT_BREAK_MINUTES,
    DEFAULT_LONG_BREAK_MINUTES,
    DEFAULT_WORK_MINUTES,
    PHASE_LONG_BREAK,
    PHASE_SHORT_BREAK,
    PHASE_WORK,
)


class CycleConfigurationError(ValueError):
    """Raised when cycle durations are not positive whole minutes."""


@dataclass(frozen=True)
class CycleConfig:
    """Phase durations in minutes plus the count direction of the clock."""
    work_minutes: int = DEFAULT_WORK_MINUTES
    break_minutes: int = DEFAULT_BREAK_MINUTES
    long_break_minutes: int = DEFAULT_LONG_BREAK_MINUTES
    count_backwards: bool = False

    def __post_init__(self) -> None:
        for field_name in ("work_minutes", "break_minutes", "long_break_minutes"):
            value = getattr(self, field_name)
            if isinstance(value, bool) or not isinstance(value, int):
                raise CycleConfigurationError(
                    f"{field_name} must be an integer, got: {value!r}"
                )
            if value <= 0:
                raise CycleConfigurationError(
                    f"{field_name} must be greater than zero, got: {value}"
                )
        if not isinstance(self.count_backwards, bool):
            raise CycleConfigurationError("count_backwards must be a boolean")

    def minutes_for(self, phase: str) -> int:
        if phase == PHASE_WORK:
            return self.work_minutes
        if phase == PHASE_SHORT_BREAK:
            return self.break_minutes
        if phase == PHASE_LONG_BREAK:
            return self.long_break_minutes
        raise CycleConfigurationError(f"Unknown phase: {phase}")

    def seconds_for(self, phase: str) -> int:
        return self.minutes_for(phase) * 60
