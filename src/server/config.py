"""Validated settings for the session timer web UI and websocket endpoint."""

from __future__ import annotations

import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Any


class ServerConfigurationError(Exception):
    """Raised when UI server configuration is invalid."""


WEBSOCKET_PATH = "/ws"
ROOT_PATH = "/"
INDEX_PATH = "/index.html"
HEALTHZ_PATH = "/healthz"


def default_index_file() -> Path:
    """Return the `web_ui/index.html` shipped inside this package, honouring frozen builds."""
    bundle_root = getattr(sys, "_MEIPASS", None)
    package_dir = Path(bundle_root) / "server" if bundle_root else Path(__file__).resolve().parent
    return package_dir / "web_ui" / "index.html"


@dataclass(frozen=True)
class UIServerConfig:
    enabled: bool = True
    host: str = "127.0.0.1"
    port: int = 8765
    index_file: str = ""

    def __post_init__(self) -> None:
        if not self.host.strip():
            raise ServerConfigurationError("ui_server.host cannot be empty")
        if not 1 <= self.port <= 65535:
            raise ServerConfigurationError(
                f"ui_server.port must be in [1, 65535], got: {self.port}"
            )
        if not self.enabled:
            return

        if not self.index_file:
            raise ServerConfigurationError("ui_server.index_file cannot be empty")
        index_path = Path(self.index_file)
        if not index_path.is_file():
            problem = "is not a file" if index_path.exists() else "was not found"
            raise ServerConfigurationError(f"UI index file {problem}: {index_path}")

    @property
    def websocket_path(self) -> str:
        return WEBSOCKET_PATH

    @property
    def http_url(self) -> str:
        return f"http://{self.host}:{self.port}"

    @property
    def ui_root(self) -> Path:
        """Directory that static assets next to the index page are served from."""
        return Path(self.index_file).resolve().parent

    @classmethod
    def from_settings(cls, settings: Any) -> "UIServerConfig":
        """Build from `app_config.UIServerSettings`, defaulting to the bundled page."""
        index_file = (settings.index_file or "").strip() or str(default_index_file())
        return cls(
            enabled=bool(settings.enabled),
            host=settings.host,
            port=settings.port,
            index_file=index_file,
        )
