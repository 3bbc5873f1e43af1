"""Tick handlers that publish countdown and completion updates."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable

from pomodoro import SessionTick
from pomodoro.constants import (
    ACTION_COMPLETED,
    ACTION_TICK,
    REASON_COMPLETED,
    REASON_TICK,
)
from contracts.ui_protocol import STATE_COMPLETED

from .messages import completion_text
from .ui import RuntimeUIPublisher


@dataclass(frozen=True)
class TickDependencies:
    """Dependencies required for processing session tick events."""
    logger: logging.Logger
    ui: RuntimeUIPublisher
    publish_idle_state: Callable[[], None]


class TickProcessor:
    """Handles tick side effects such as UI updates and completion messages."""
    def __init__(self, dependencies: TickDependencies):
        self._dependencies = dependencies

    def handle_session_tick(self, tick: SessionTick) -> None:
        deps = self._dependencies
        if tick.completed:
            message = completion_text(tick.finished_session_type, tick.snapshot)
            deps.logger.info("Interval completed: %s", tick.finished_session_type)
            published = deps.ui.publish_session_update(
                tick.snapshot,
                action=ACTION_COMPLETED,
                accepted=True,
                reason=REASON_COMPLETED,
                message=message,
            )
            if not published:
                deps.logger.debug("Completion superseded by a newer timer state")
                return
            deps.ui.publish_state(
                STATE_COMPLETED,
                message=message,
                revision=tick.snapshot.revision,
            )
            deps.publish_idle_state()
            return

        deps.ui.publish_session_update(
            tick.snapshot,
            action=ACTION_TICK,
            accepted=True,
            reason=REASON_TICK,
        )
