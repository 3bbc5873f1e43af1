"""Launcher for the pomodoro session timer with its web UI."""

import logging
import os
import signal
import sys
from pathlib import Path
from typing import Optional

if __package__ is None or __package__ == "":
    sys.path.insert(0, str(Path(__file__).resolve().parent))

from app_config import (
    AppConfig,
    AppConfigurationError,
    default_app_config,
    load_app_config,
    log_level_value,
    resolve_config_path,
)
from runtime import RuntimeBootstrap, RuntimeEngine, RuntimeHooks
from server import ServerConfigurationError, UIServer, UIServerConfig


def setup_logging(level: int = logging.INFO) -> logging.Logger:
    """Configure logging for the application."""
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    return logging.getLogger("runtime")


def setup_signal_handlers(engine: RuntimeEngine) -> None:
    """Stop the runtime gracefully on SIGTERM and SIGINT."""
    logger = logging.getLogger("runtime")

    def signal_handler(signum: int, frame) -> None:
        del frame
        logger.info("Signal %s received, stopping.", signal.Signals(signum).name)
        engine.stop()

    signal.signal(signal.SIGTERM, signal_handler)
    signal.signal(signal.SIGINT, signal_handler)


def load_runtime_config(logger: logging.Logger) -> AppConfig:
    """Load config.toml, falling back to defaults when none was requested."""
    config_path = resolve_config_path()
    explicit = os.getenv("APP_CONFIG_FILE") is not None
    if not config_path.exists() and not explicit:
        logger.info("No config file at %s, using defaults", config_path)
        return default_app_config()

    app_config = load_app_config(str(config_path))
    logger.info("Loaded runtime config: %s", config_path)
    return app_config


def start_ui_server(app_config: AppConfig, logger: logging.Logger) -> Optional[UIServer]:
    try:
        ui_server_config = UIServerConfig.from_settings(app_config.ui_server)
    except ServerConfigurationError as error:
        logger.error("UI server configuration error: %s", error)
        logger.warning("Continuing without UI server.")
        return None

    if not ui_server_config.enabled:
        logger.info("UI server disabled via ui_server.enabled=false")
        return None

    ui_server = UIServer(
        config=ui_server_config,
        logger=logging.getLogger("ui_server"),
    )
    logger.info("Starting UI server...")
    ui_server.start(timeout_seconds=5.0)
    logger.info("UI server ready at http://%s:%d", ui_server.host, ui_server.port)
    return ui_server


def main() -> int:
    """Run the session timer until interrupted."""
    logger = setup_logging(level=logging.INFO)

    try:
        app_config = load_runtime_config(logger)
    except AppConfigurationError as error:
        logger.error("App configuration error: %s", error)
        return 1

    logging.getLogger().setLevel(log_level_value(app_config.logging))

    try:
        ui_server = start_ui_server(app_config, logger)
    except RuntimeError as error:
        logger.error("UI server startup failed: %s", error)
        return 1

    engine = RuntimeEngine(
        RuntimeBootstrap(
            logger=logger,
            app_config=app_config,
            ui_server=ui_server,
            hooks=RuntimeHooks(setup_signal_handlers=setup_signal_handlers),
        )
    )
    return engine.run()


if __name__ == "__main__":
    raise SystemExit(main())
