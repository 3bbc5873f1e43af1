"""Dispatcher that executes web UI commands against the session timer."""

from __future__ import annotations

import logging
from typing import Any, Mapping, Optional

from pomodoro import SessionActionResult, SessionTimer
from pomodoro.constants import REASON_REQUESTED, REASON_UNSUPPORTED_ACTION
from contracts.command_contract import (
    CATEGORY_COMMAND_NAMES,
    COMMAND_SYNC,
    TIMER_COMMAND_NAMES,
    normalize_command_name,
)
from contracts.ui_protocol import EVENT_ERROR, STATE_ERROR, STATE_IDLE, STATE_RUNNING

from .messages import default_action_text, rejection_text, status_message
from .ui import RuntimeUIPublisher


class RuntimeCommandDispatcher:
    """Routes inbound UI commands to timer and category operations."""
    def __init__(
        self,
        *,
        logger: logging.Logger,
        session_timer: SessionTimer,
        ui: RuntimeUIPublisher,
    ):
        self._logger = logger
        self._session_timer = session_timer
        self._ui = ui

    def active_runtime_message(self) -> str:
        return status_message(self._session_timer.snapshot())

    def publish_current_state(self) -> None:
        snapshot = self._session_timer.snapshot()
        state = STATE_RUNNING if snapshot.is_running else STATE_IDLE
        self._ui.publish_state(
            state,
            message=status_message(snapshot),
            revision=snapshot.revision,
        )

    def handle_command(self, command: Mapping[str, Any]) -> Optional[SessionActionResult]:
        raw_name = command.get("action")
        if not isinstance(raw_name, str) or not raw_name.strip():
            self._logger.warning("Ignoring command without action: %r", command)
            self._ui.publish(
                EVENT_ERROR,
                state=STATE_ERROR,
                message="Command is missing an action name",
            )
            return None

        name = normalize_command_name(raw_name)
        if name == COMMAND_SYNC:
            snapshot = self._session_timer.snapshot()
            self._ui.publish_session_update(
                snapshot,
                action=COMMAND_SYNC,
                accepted=True,
                reason=REASON_REQUESTED,
            )
            self.publish_current_state()
            return SessionActionResult(
                action=COMMAND_SYNC,
                accepted=True,
                reason=REASON_REQUESTED,
                snapshot=snapshot,
            )

        if name in TIMER_COMMAND_NAMES:
            result = self._session_timer.apply(name)
        elif name in CATEGORY_COMMAND_NAMES:
            raw_category = command.get("category")
            category = raw_category if isinstance(raw_category, str) else ""
            result = self._session_timer.apply(name, category=category)
        else:
            self._logger.warning("Unsupported command: %s", raw_name)
            result = SessionActionResult(
                action=raw_name,
                accepted=False,
                reason=REASON_UNSUPPORTED_ACTION,
                snapshot=self._session_timer.snapshot(),
            )

        if result.accepted:
            message = default_action_text(result.action, result.reason, result.snapshot)
        else:
            message = rejection_text(result.action, result.reason)

        self._ui.publish_session_update(
            result.snapshot,
            action=result.action,
            accepted=result.accepted,
            reason=result.reason,
            message=message,
        )
        if result.accepted:
            self.publish_current_state()
        return result
