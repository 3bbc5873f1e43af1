"""Safe static-file resolution and content-type helpers for web UI assets."""

from __future__ import annotations

import mimetypes
from pathlib import Path
from typing import Optional

_TEXT_MIME_TYPES = frozenset(
    {
        "application/javascript",
        "application/json",
        "application/xml",
        "image/svg+xml",
    }
)


def resolve_static_file(ui_root: Path, request_path: str) -> Optional[Path]:
    """Resolve `request_path` to a file inside `ui_root`, refusing traversal."""
    relative = request_path.lstrip("/")
    if not relative:
        return None

    root = ui_root.resolve()
    candidate = (root / relative).resolve()
    if root not in candidate.parents or not candidate.is_file():
        return None
    return candidate


def guess_content_type(path: Path) -> str:
    """Guess an HTTP content type, adding a UTF-8 charset for text assets."""
    mime_type, _ = mimetypes.guess_type(str(path))
    if not mime_type:
        return "application/octet-stream"
    if mime_type.startswith("text/") or mime_type in _TEXT_MIME_TYPES:
        return f"{mime_type}; charset=utf-8"
    return mime_type


def load_static_asset(ui_root: Path, request_path: str) -> Optional[tuple[bytes, str]]:
    """Return `(body, content_type)` for a UI asset, or `None` when not servable."""
    path = resolve_static_file(ui_root, request_path)
    if path is None:
        return None
    return path.read_bytes(), guess_content_type(path)
