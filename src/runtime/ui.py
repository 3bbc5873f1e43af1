from __future__ import annotations

import threading
from typing import Any, Optional, Protocol

from pomodoro import SessionSnapshot, time_string
from contracts.ui_protocol import EVENT_SESSION

from .messages import (
    category_time_text,
    primary_action_label,
    primary_command,
    reset_visible,
    session_counter_text,
)


class UIServerLike(Protocol):
    def publish(self, event_type: str, **payload: Any) -> None:
        ...

    def publish_state(
        self,
        state: str,
        *,
        message: Optional[str] = None,
        **payload: Any,
    ) -> None:
        ...


def session_payload(snapshot: SessionSnapshot) -> dict[str, Any]:
    """Flatten a snapshot into the JSON-ready fields rendered by the web UI."""
    return {
        "phase": snapshot.phase,
        "session_type": snapshot.current_session_type,
        "is_running": snapshot.is_running,
        "just_completed": snapshot.just_completed,
        "time_remaining": round(snapshot.time_remaining, 3),
        "time_text": time_string(snapshot.time_remaining),
        "state_description": snapshot.state_description,
        "completed_work_sessions": snapshot.completed_work_sessions,
        "work_sessions_before_long_break": snapshot.work_sessions_before_long_break,
        "session_counter": session_counter_text(snapshot),
        "categories": [
            {"name": name, "seconds": round(seconds, 3), "time_text": time_string(seconds)}
            for name, seconds in snapshot.sorted_categories
        ],
        "selected_category": snapshot.selected_category,
        "category_time": category_time_text(snapshot),
        "controls": {
            "primary_command": primary_command(snapshot),
            "primary_label": primary_action_label(snapshot),
            "reset_visible": reset_visible(snapshot),
        },
    }


class RuntimeUIPublisher:
    """Null-safe UI publisher that never replaces newer timer state with older.

    Ticks are published from the driver thread and command results from the
    server thread, so a snapshot can arrive after a newer one was already
    sent. Session and state updates carry the snapshot revision and are
    dropped when older than the last one published.
    """

    def __init__(self, ui_server: Optional[UIServerLike]):
        self._ui_server = ui_server
        self._lock = threading.Lock()
        self._session_revision = -1
        self._state_revision = -1

    def publish(self, event_type: str, **payload: Any) -> None:
        with self._lock:
            if self._ui_server:
                self._ui_server.publish(event_type, **payload)

    def publish_state(
        self,
        state: str,
        *,
        message: Optional[str] = None,
        revision: Optional[int] = None,
        **payload: Any,
    ) -> bool:
        with self._lock:
            if revision is not None:
                if revision < self._state_revision:
                    return False
                self._state_revision = revision
            if self._ui_server:
                self._ui_server.publish_state(state, message=message, **payload)
        return True

    def publish_session_update(
        self,
        snapshot: SessionSnapshot,
        *,
        action: str,
        accepted: Optional[bool] = None,
        reason: str = "",
        message: Optional[str] = None,
    ) -> bool:
        payload: dict[str, Any] = {"action": action, **session_payload(snapshot)}
        if accepted is not None:
            payload["accepted"] = accepted
        if reason:
            payload["reason"] = reason
        if message:
            payload["message"] = message

        with self._lock:
            if snapshot.revision < self._session_revision:
                return False
            self._session_revision = snapshot.revision
            if self._ui_server:
                self._ui_server.publish(EVENT_SESSION, **payload)
        return True
