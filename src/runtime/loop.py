"""Runtime orchestration for the session timer, tick driver, and UI server."""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import Callable, Optional

from app_config import AppConfig
from pomodoro import SessionTimer, TickDriver
from pomodoro.constants import ACTION_SYNC, REASON_STARTUP
from server import UIServer

from .command_dispatch import RuntimeCommandDispatcher
from .ticks import TickDependencies, TickProcessor
from .ui import RuntimeUIPublisher


@dataclass(frozen=True)
class RuntimeHooks:
    """Injectable lifecycle hooks used by runtime startup and shutdown flow."""
    setup_signal_handlers: Callable[["RuntimeEngine"], None]


@dataclass(frozen=True)
class RuntimeBootstrap:
    """Dependency bundle required to construct the runtime engine."""
    logger: logging.Logger
    app_config: AppConfig
    ui_server: Optional[UIServer]
    hooks: RuntimeHooks


class RuntimeEngine:
    """Owns the session timer and keeps it wired to the UI until stopped."""
    def __init__(
        self,
        bootstrap: RuntimeBootstrap,
        *,
        clock: Optional[Callable[[], float]] = None,
    ):
        self._bootstrap = bootstrap
        self._logger = bootstrap.logger
        self._stop_event = threading.Event()

        self._ui = RuntimeUIPublisher(bootstrap.ui_server)
        self._driver = TickDriver(
            interval_seconds=bootstrap.app_config.timer.tick_interval_seconds,
            logger=logging.getLogger("tick_driver"),
        )
        self._session_timer = SessionTimer(
            driver=self._driver,
            clock=clock,
            logger=logging.getLogger("pomodoro"),
        )
        self._dispatcher = RuntimeCommandDispatcher(
            logger=self._logger,
            session_timer=self._session_timer,
            ui=self._ui,
        )
        self._tick_processor = TickProcessor(
            TickDependencies(
                logger=self._logger,
                ui=self._ui,
                publish_idle_state=self._dispatcher.publish_current_state,
            )
        )
        self._session_timer.set_tick_listener(self._tick_processor.handle_session_tick)

        if bootstrap.ui_server is not None:
            bootstrap.ui_server.set_command_handler(self._dispatcher.handle_command)

    @property
    def session_timer(self) -> SessionTimer:
        return self._session_timer

    @property
    def dispatcher(self) -> RuntimeCommandDispatcher:
        return self._dispatcher

    def stop(self) -> None:
        self._stop_event.set()

    def run(self) -> int:
        self._publish_startup_sync()

        try:
            self._bootstrap.hooks.setup_signal_handlers(self)
            self._logger.info(
                "Session timer ready (tick interval %.2fs)",
                self._driver.interval_seconds,
            )
            self._dispatcher.publish_current_state()

            while not self._stop_event.wait(0.25):
                ui_server = self._bootstrap.ui_server
                if ui_server is not None and not ui_server.is_running:
                    self._logger.error("UI server stopped unexpectedly")
                    return 1
            return 0

        except KeyboardInterrupt:
            self._logger.info("Shutdown requested by keyboard interrupt.")
            return 0
        except Exception as error:
            self._logger.error("Unexpected error: %s", error, exc_info=True)
            return 1
        finally:
            self._shutdown()

    def _publish_startup_sync(self) -> None:
        self._ui.publish_session_update(
            self._session_timer.snapshot(),
            action=ACTION_SYNC,
            accepted=True,
            reason=REASON_STARTUP,
        )

    def _shutdown(self) -> None:
        self._logger.info("Stopping tick driver...")
        self._session_timer.close()
        self._driver.close()

        ui_server = self._bootstrap.ui_server
        if ui_server is not None:
            self._logger.info("Stopping UI server...")
            try:
                ui_server.stop(timeout_seconds=5.0)
            except Exception as error:
                self._logger.error("Error stopping UI server: %s", error, exc_info=True)
