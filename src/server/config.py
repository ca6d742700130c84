"""Validated settings for the widget HTTP/websocket server."""

from __future__ import annotations

import sys
from dataclasses import dataclass
from pathlib import Path

from contracts.ui_protocol import UI_VARIANTS

WEBSOCKET_PATH = "/ws"
ROOT_PATH = "/"
INDEX_PATH = "/index.html"
HEALTHZ_PATH = "/healthz"
STATE_PATH = "/api/state"


class ServerConfigurationError(Exception):
    """Raised when UI server configuration is invalid."""


def _bundle_root() -> Path:
    # PyInstaller unpacks data files under sys._MEIPASS.
    frozen_root = getattr(sys, "_MEIPASS", None)
    if frozen_root:
        return Path(frozen_root)
    return Path(__file__).resolve().parents[2]


def builtin_index_file(ui: str) -> Path:
    if ui not in UI_VARIANTS:
        raise ServerConfigurationError(
            f"ui_server.ui must be one of: {', '.join(UI_VARIANTS)}"
        )
    return _bundle_root() / "web_ui" / ui / "index.html"


@dataclass(frozen=True)
class UIServerConfig:
    """Where the widget is served from and which page it serves."""
    enabled: bool = True
    host: str = "127.0.0.1"
    port: int = 8765
    ui: str = "widget"
    index_file: str = ""

    def __post_init__(self) -> None:
        if not self.host.strip():
            raise ServerConfigurationError("ui_server.host cannot be empty")
        if not 0 < self.port < 65536:
            raise ServerConfigurationError(
                f"ui_server.port must be in [1, 65535], got: {self.port}"
            )
        if self.ui not in UI_VARIANTS:
            raise ServerConfigurationError(
                f"ui_server.ui must be one of: {', '.join(UI_VARIANTS)}"
            )
        # A disabled server never reads the page, so only an enabled one needs it.
        if self.enabled and not Path(self.index_file or ".").is_file():
            raise ServerConfigurationError(
                f"UI index file not found: {self.index_file or '<empty>'}"
            )

    @property
    def websocket_path(self) -> str:
        return WEBSOCKET_PATH

    @property
    def ui_root(self) -> Path:
        return Path(self.index_file).parent

    @property
    def websocket_url(self) -> str:
        return f"ws://{self.host}:{self.port}{WEBSOCKET_PATH}"

    @classmethod
    def from_settings(cls, settings) -> "UIServerConfig":
        ui = (settings.ui or "widget").strip().lower()
        index_file = (settings.index_file or "").strip() or str(builtin_index_file(ui))
        return cls(
            enabled=settings.enabled,
            host=settings.host,
            port=settings.port,
            ui=ui,
            index_file=index_file,
        )
