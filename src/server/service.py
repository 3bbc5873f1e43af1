from __future__ import annotations

import asyncio
import contextlib
import logging
import threading
from pathlib import Path
from typing import Any, Callable, Mapping, Optional
from urllib.parse import urlsplit

import websockets
from websockets.asyncio.server import ServerConnection
from websockets.datastructures import Headers
from websockets.http11 import Request, Response

from contracts.ui_protocol import (
    EVENT_ERROR,
    EVENT_HELLO,
    EVENT_STATE_UPDATE,
    STATE_ERROR,
    STATE_IDLE,
)

from .config import HEALTHZ_PATH, INDEX_PATH, ROOT_PATH, UIServerConfig
from .events import CommandDecodeError, StickyEventStore, decode_command, make_event
from .static_files import load_static_asset

CommandHandler = Callable[[Mapping[str, Any]], object]

_HTML = "text/html; charset=utf-8"
_PLAIN_TEXT = "text/plain; charset=utf-8"


class UIServer:
    """Serves the session timer page and relays websocket events and commands.

    The asyncio loop runs on a daemon thread. `publish` may be called from any
    thread; sticky events are cached even before the server starts so that
    clients connecting later see the latest session state.
    """

    def __init__(
        self,
        config: UIServerConfig,
        logger: Optional[logging.Logger] = None,
        command_handler: Optional[CommandHandler] = None,
    ):
        self._config = config
        self._logger = logger or logging.getLogger("ui_server")
        self._command_handler = command_handler
        self._sticky_events = StickyEventStore()
        self._clients: set[ServerConnection] = set()
        self._fixed_routes = _fixed_routes(config.index_file)

        self._thread: Optional[threading.Thread] = None
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._shutdown: Optional[asyncio.Event] = None
        self._ready = threading.Event()
        self._failure: Optional[Exception] = None

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
    def client_count(self) -> int:
        return len(self._clients)

    @property
    def is_running(self) -> bool:
        thread = self._thread
        return thread is not None and thread.is_alive() and self._failure is None

    def set_command_handler(self, handler: Optional[CommandHandler]) -> None:
        self._command_handler = handler

    def start(self, timeout_seconds: float = 5.0) -> None:
        if self.is_running:
            self._logger.warning("UI server is already running")
            return

        self._failure = None
        self._ready.clear()
        self._thread = threading.Thread(target=self._thread_main, daemon=True, name="ui-server")
        self._thread.start()

        if not self._ready.wait(timeout_seconds):
            raise RuntimeError(f"UI server did not start within {timeout_seconds:.1f}s")
        if self._failure is not None:
            raise RuntimeError(f"UI server startup failed: {self._failure}")

    def stop(self, timeout_seconds: float = 5.0) -> None:
        thread = self._thread
        if thread is None:
            return

        loop, shutdown = self._loop, self._shutdown
        if loop is not None and shutdown is not None:
            with contextlib.suppress(RuntimeError):
                loop.call_soon_threadsafe(shutdown.set)

        thread.join(timeout=timeout_seconds)
        if thread.is_alive():
            self._logger.error("UI server thread did not stop within %.1fs", timeout_seconds)

        self._thread = None
        self._loop = None
        self._shutdown = None

    def publish_state(self, state: str, *, message: Optional[str] = None, **payload) -> None:
        if message:
            payload["message"] = message
        self.publish(EVENT_STATE_UPDATE, state=state, **payload)

    def publish(self, event_type: str, **payload) -> None:
        message = make_event(event_type, **payload)
        self._sticky_events.remember(event_type, message)

        loop = self._loop
        if loop is None or not self.is_running:
            return
        try:
            future = asyncio.run_coroutine_threadsafe(self._broadcast(message), loop)
        except RuntimeError:
            # Loop already closed.
            return
        future.add_done_callback(_ignore_result)

    def _thread_main(self) -> None:
        loop = asyncio.new_event_loop()
        asyncio.set_event_loop(loop)
        self._loop = loop
        self._shutdown = asyncio.Event()

        try:
            loop.run_until_complete(self._serve())
        except Exception as error:  # pragma: no cover - bind failures
            self._failure = error
            self._logger.error("UI server failed: %s", error, exc_info=True)
            self._ready.set()
        finally:
            _cancel_pending(loop)
            loop.close()

    async def _serve(self) -> None:
        async with websockets.serve(
            self._on_connection,
            host=self._config.host,
            port=self._config.port,
            process_request=self._process_request,
            logger=self._logger,
        ):
            self._logger.info(
                "UI server listening on %s (websocket: %s)",
                self._config.http_url,
                self._config.websocket_path,
            )
            self._ready.set()
            if self._shutdown is not None:
                await self._shutdown.wait()
            await self._disconnect_all()

    async def _on_connection(self, websocket: ServerConnection) -> None:
        request = websocket.request
        path = urlsplit(request.path).path if request is not None else ""
        if path != self._config.websocket_path:
            await websocket.close(code=1008, reason="Invalid websocket path")
            return

        self._clients.add(websocket)
        self._logger.info("Client connected: %s", websocket.remote_address)
        try:
            await websocket.send(
                make_event(EVENT_HELLO, state=STATE_IDLE, message="UI websocket connected")
            )
            for sticky in self._sticky_events.snapshot():
                await websocket.send(sticky)

            async for raw in websocket:
                self._logger.debug("Received from UI: %s", raw)
                error_message = await self._dispatch(raw)
                if error_message:
                    await websocket.send(
                        make_event(EVENT_ERROR, state=STATE_ERROR, message=error_message)
                    )
        except websockets.exceptions.ConnectionClosed:
            self._logger.info("Client disconnected: %s", websocket.remote_address)
        finally:
            self._clients.discard(websocket)

    async def _dispatch(self, raw: str | bytes) -> Optional[str]:
        """Run one inbound command; returns an error message for the sender, if any."""
        try:
            command = decode_command(raw)
        except CommandDecodeError as error:
            self._logger.warning("Rejected UI message: %s", error)
            return str(error)

        handler = self._command_handler
        if handler is None:
            self._logger.warning("No command handler registered; dropping %s", command.get("action"))
            return None

        try:
            # Handlers take the timer lock; keep the event loop free.
            await asyncio.to_thread(handler, command)
        except Exception as error:
            self._logger.error("Command handler failed: %s", error, exc_info=True)
            return f"Command failed: {error}"
        return None

    async def _process_request(
        self,
        connection: ServerConnection,
        request: Request,
    ) -> Response | None:
        del connection
        path = urlsplit(request.path).path
        if path == self._config.websocket_path:
            return None

        fixed = self._fixed_routes.get(path)
        if fixed is not None:
            body, content_type = fixed
            return _http_response(200, "OK", body, content_type)

        asset = load_static_asset(self._config.ui_root, path)
        if asset is not None:
            body, content_type = asset
            return _http_response(200, "OK", body, content_type)

        return _http_response(404, "Not Found", b"not found\n", _PLAIN_TEXT)

    async def _disconnect_all(self) -> None:
        clients = tuple(self._clients)
        self._clients.clear()
        await asyncio.gather(
            *(client.close(code=1001, reason="Server shutting down") for client in clients),
            return_exceptions=True,
        )

    async def _broadcast(self, message: str) -> None:
        clients = tuple(self._clients)
        if not clients:
            return

        results = await asyncio.gather(
            *(client.send(message) for client in clients),
            return_exceptions=True,
        )
        for client, result in zip(clients, results):
            if isinstance(result, Exception):
                self._logger.warning("Dropping client after failed send: %s", result)
                self._clients.discard(client)


def _fixed_routes(index_file: str) -> dict[str, tuple[bytes, str]]:
    index_html = Path(index_file).read_bytes() if index_file else b""
    return {
        ROOT_PATH: (index_html, _HTML),
        INDEX_PATH: (index_html, _HTML),
        HEALTHZ_PATH: (b"ok\n", _PLAIN_TEXT),
    }


def _http_response(
    status_code: int,
    reason_phrase: str,
    body: bytes,
    content_type: str,
) -> Response:
    headers = Headers()
    headers["Content-Type"] = content_type
    headers["Content-Length"] = str(len(body))
    headers["Cache-Control"] = "no-store"
    return Response(status_code, reason_phrase, headers, body)


def _cancel_pending(loop: asyncio.AbstractEventLoop) -> None:
    pending = asyncio.all_tasks(loop)
    for task in pending:
        task.cancel()
    with contextlib.suppress(Exception):
        loop.run_until_complete(asyncio.gather(*pending, return_exceptions=True))


def _ignore_result(future) -> None:
    with contextlib.suppress(Exception):
        future.result()
