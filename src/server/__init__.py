"""UI server module for the widget page and websocket streaming."""

from .client import CommandForwardError, forward_command
from .commands import CommandMessageError, CommandRequest, parse_command_message
from .config import ServerConfigurationError, UIServerConfig
from .service import UIServer

__all__ = [
    "CommandForwardError",
    "CommandMessageError",
    "CommandRequest",
    "ServerConfigurationError",
    "UIServerConfig",
    "UIServer",
    "forward_command",
    "parse_command_message",
]
