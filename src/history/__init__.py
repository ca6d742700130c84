"""Completed-session history and weekly aggregation."""

from .store import HistoryError, SessionStore
from .weekly import DayHistory, WeekHistory, daily_counts, group_by_week, level_for_count

__all__ = [
    "DayHistory",
    "HistoryError",
    "SessionStore",
    "WeekHistory",
    "daily_counts",
    "group_by_week",
    "level_for_count",
]
