from .constants import (
    DEFAULT_CATEGORY,
    DEFAULT_LONG_BREAK_DURATION_SECONDS,
    DEFAULT_SHORT_BREAK_DURATION_SECONDS,
    DEFAULT_TICK_INTERVAL_SECONDS,
    DEFAULT_WORK_DURATION_SECONDS,
    DEFAULT_WORK_SESSIONS_BEFORE_LONG_BREAK,
)
from .driver import TickDriver, TickSubscription
from .errors import InvalidArgumentError, InvalidTransitionError, SessionTimerError
from .formatting import state_description, time_string
from .service import (
    SessionAction,
    SessionActionResult,
    SessionPhase,
    SessionSnapshot,
    SessionTick,
    SessionTimer,
    SessionType,
)

__all__ = [
    "DEFAULT_CATEGORY",
    "DEFAULT_LONG_BREAK_DURATION_SECONDS",
    "DEFAULT_SHORT_BREAK_DURATION_SECONDS",
    "DEFAULT_TICK_INTERVAL_SECONDS",
    "DEFAULT_WORK_DURATION_SECONDS",
    "DEFAULT_WORK_SESSIONS_BEFORE_LONG_BREAK",
    "InvalidArgumentError",
    "InvalidTransitionError",
    "SessionAction",
    "SessionActionResult",
    "SessionPhase",
    "SessionSnapshot",
    "SessionTick",
    "SessionTimer",
    "SessionTimerError",
    "SessionType",
    "TickDriver",
    "TickSubscription",
    "state_description",
    "time_string",
]
