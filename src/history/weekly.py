"""Weekly grouping and intensity levels for completed pomodoro sessions."""

from __future__ import annotations

import datetime as dt
from collections import Counter
from dataclasses import dataclass
from typing import Iterable

MAX_LEVEL = 4


@dataclass(frozen=True)
class DayHistory:
    """Completed sessions on one calendar day."""
    date: dt.date
    count: int
    level: int


@dataclass(frozen=True)
class WeekHistory:
    """One ISO calendar week with a day entry for every weekday."""
    year: int
    week: int
    days: tuple[DayHistory, ...]

    @property
    def total(self) -> int:
        return sum(day.count for day in self.days)


def level_for_count(count: int, max_count: int) -> int:
    """Map a daily count onto a 0-4 intensity scale relative to the busiest day."""
    if count <= 0:
        return 0
    if max_count <= MAX_LEVEL:
        return MAX_LEVEL

    ratio = count / max_count
    if ratio < 0.25:
        return 1
    if ratio < 0.50:
        return 2
    if ratio < 0.75:
        return 3
    return MAX_LEVEL


def daily_counts(timestamps: Iterable[dt.datetime]) -> dict[dt.date, int]:
    counts = Counter(stamp.date() for stamp in timestamps)
    return dict(sorted(counts.items()))


def group_by_week(counts: dict[dt.date, int]) -> list[WeekHistory]:
    """Group day counts into ISO weeks, filling days without sessions with zero."""
    if not counts:
        return []

    max_count = max(counts.values())
    weeks: dict[tuple[int, int], dt.date] = {}
    for day in counts:
        iso = day.isocalendar()
        key = (iso.year, iso.week)
        if key not in weeks:
            weeks[key] = day - dt.timedelta(days=iso.weekday - 1)

    history: list[WeekHistory] = []
    for (year, week), monday in sorted(weeks.items()):
        days = []
        for offset in range(7):
            day = monday + dt.timedelta(days=offset)
            count = counts.get(day, 0)
            days.append(
                DayHistory(date=day, count=count, level=level_for_count(count, max_count))
            )
        history.append(WeekHistory(year=year, week=week, days=tuple(days)))
    return history
