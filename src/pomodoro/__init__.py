from .config import CycleConfig, CycleConfigurationError
from .service import (
    CyclePhase,
    CycleSnapshot,
    CycleUpdate,
    DisplayState,
    DisplayUpdate,
    NotificationEvent,
    PomodoroCycleController,
    format_clock,
)
from .stopwatch import Stopwatch

__all__ = [
    "CycleConfig",
    "CycleConfigurationError",
    "CyclePhase",
    "CycleSnapshot",
    "CycleUpdate",
    "DisplayState",
    "DisplayUpdate",
    "NotificationEvent",
    "PomodoroCycleController",
    "Stopwatch",
    "format_clock",
]
