"""Threaded websocket server that renders the widget and relays its commands."""

from __future__ import annotations

import asyncio
import logging
import threading
from typing import Callable, Optional
from urllib.parse import urlsplit

from websockets.asyncio.server import ServerConnection, broadcast, serve
from websockets.datastructures import Headers
from websockets.exceptions import ConnectionClosed
from websockets.http11 import Request, Response

from contracts.ui_protocol import EVENT_ERROR, EVENT_HELLO, EVENT_STATE_UPDATE, STATE_READY

from .commands import CommandMessageError, CommandRequest, parse_command_message
from .config import UIServerConfig
from .events import EventReplayCache, make_event
from .routes import HttpReply, WidgetRoutes

CommandHandler = Callable[[CommandRequest], None]


class UIServer:
    """Serves the widget page and streams cycle events over `/ws`.

    The asyncio loop lives on a daemon thread. `publish()` may be called from
    any thread; inbound commands are handed to `on_command` on the server
    thread, so the handler must only enqueue work.
    """

    def __init__(
        self,
        config: UIServerConfig,
        logger: Optional[logging.Logger] = None,
        on_command: Optional[CommandHandler] = None,
    ):
        self._config = config
        self._logger = logger or logging.getLogger("ui_server")
        self._on_command = on_command
        self._replay = EventReplayCache()
        self._routes = WidgetRoutes(config, self._replay)
        self._clients: set[ServerConnection] = set()

        self._thread: Optional[threading.Thread] = None
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._shutdown: Optional[asyncio.Event] = None
        self._ready = threading.Event()
        self._startup_error: Optional[BaseException] = None

    @property
    def host(self) -> str:
        return self._config.host

    @property
    def port(self) -> int:
        return self._config.port

    @property
    def websocket_path(self) -> str:
        return self._config.websocket_path

    @property
    def is_running(self) -> bool:
        thread = self._thread
        return thread is not None and thread.is_alive() and self._startup_error is None

    def set_command_handler(self, on_command: CommandHandler) -> None:
        self._on_command = on_command

    def start(self, timeout_seconds: float = 5.0) -> None:
        if self.is_running:
            self._logger.warning("UI server is already running")
            return

        self._startup_error = None
        self._ready.clear()
        self._thread = threading.Thread(target=self._thread_main, daemon=True, name="ui-server")
        self._thread.start()

        if not self._ready.wait(timeout_seconds):
            raise RuntimeError(f"UI server did not start within {timeout_seconds:.1f}s")
        if self._startup_error is not None:
            raise RuntimeError(f"UI server startup failed: {self._startup_error}")

    def stop(self, timeout_seconds: float = 5.0) -> None:
        thread = self._thread
        if thread is None:
            return

        self._call_in_loop(self._request_shutdown)
        thread.join(timeout=timeout_seconds)
        if thread.is_alive():
            self._logger.error("UI server thread did not stop within %.1fs", timeout_seconds)
        self._thread = None

    def publish_state(self, state: str, *, message: Optional[str] = None, **payload) -> None:
        if message:
            payload["message"] = message
        self.publish(EVENT_STATE_UPDATE, state=state, **payload)

    def publish(self, event_type: str, **payload) -> None:
        """Broadcast an event; sticky types are kept for clients that join later."""
        event = make_event(event_type, **payload)
        self._replay.remember(event)
        self._call_in_loop(self._broadcast, event.to_json())

    def _call_in_loop(self, callback: Callable[..., None], *args) -> None:
        loop = self._loop
        if loop is None or loop.is_closed():
            return
        try:
            loop.call_soon_threadsafe(callback, *args)
        except RuntimeError:
            # loop closed between the check and the call
            self._logger.debug("UI server loop closed; dropped %s", callback.__name__)

    def _request_shutdown(self) -> None:
        if self._shutdown is not None:
            self._shutdown.set()

    def _broadcast(self, message: str) -> None:
        broadcast(self._clients, message)

    def _thread_main(self) -> None:
        try:
            asyncio.run(self._serve())
        except (OSError, RuntimeError) as error:
            self._startup_error = error
            self._logger.error("UI server failed: %s", error, exc_info=True)
        finally:
            self._loop = None
            self._ready.set()

    async def _serve(self) -> None:
        self._loop = asyncio.get_running_loop()
        self._shutdown = asyncio.Event()
        async with serve(
            self._handle_connection,
            host=self._config.host,
            port=self._config.port,
            process_request=self._process_request,
            logger=self._logger,
        ):
            self._logger.info(
                "Widget served at http://%s:%d (websocket: %s)",
                self._config.host,
                self._config.port,
                self._config.websocket_path,
            )
            self._ready.set()
            await self._shutdown.wait()
        self._logger.info("UI server stopped")

    async def _handle_connection(self, websocket: ServerConnection) -> None:
        self._clients.add(websocket)
        self._logger.info("Widget connected: %s", websocket.remote_address)
        try:
            hello = make_event(EVENT_HELLO, state=STATE_READY, message="Widget websocket connected")
            await websocket.send(hello.to_json())
            for message in self._replay.replay():
                await websocket.send(message)

            async for message in websocket:
                await self._receive(websocket, message)
        except ConnectionClosed:
            pass
        finally:
            self._clients.discard(websocket)
            self._logger.info("Widget disconnected: %s", websocket.remote_address)

    async def _receive(self, websocket: ServerConnection, message: str | bytes) -> None:
        self._logger.debug("Received from widget: %s", message)
        try:
            request = parse_command_message(message)
        except CommandMessageError as error:
            self._logger.warning("Rejected widget message: %s", error)
            await websocket.send(make_event(EVENT_ERROR, message=str(error)).to_json())
            return

        if self._on_command is None:
            self._logger.warning("No command handler registered; dropping %s", request.name)
            return
        self._on_command(request)

    def _process_request(
        self,
        connection: ServerConnection,
        request: Request,
    ) -> Optional[Response]:
        path = urlsplit(request.path).path
        if path == self._config.websocket_path:
            return None
        return _to_response(self._routes.reply_for(path))


def _to_response(reply: HttpReply) -> Response:
    headers = Headers()
    headers["Content-Type"] = reply.content_type
    headers["Content-Length"] = str(len(reply.body))
    headers["Cache-Control"] = "no-store"
    return Response(reply.status.value, reply.status.phrase, headers, reply.body)
