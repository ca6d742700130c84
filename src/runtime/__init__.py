"""Runtime engine exports."""

from .events import CommandReceivedEvent, ShutdownRequestedEvent
from .loop import RuntimeBootstrap, RuntimeEngine, RuntimeHooks
from .settings import SettingsState, SettingsViewRegistry

__all__ = [
    "CommandReceivedEvent",
    "RuntimeBootstrap",
    "RuntimeEngine",
    "RuntimeHooks",
    "SettingsState",
    "SettingsViewRegistry",
    "ShutdownRequestedEvent",
]
