"""Phase, session, action, and reason constants used by the session timer."""

from __future__ import annotations

DEFAULT_WORK_DURATION_SECONDS = 25 * 60
DEFAULT_SHORT_BREAK_DURATION_SECONDS = 5 * 60
DEFAULT_LONG_BREAK_DURATION_SECONDS = 30 * 60
DEFAULT_WORK_SESSIONS_BEFORE_LONG_BREAK = 4
DEFAULT_TICK_INTERVAL_SECONDS = 0.1
DEFAULT_CATEGORY = "General"

SESSION_WORK = "work"
SESSION_SHORT_BREAK = "short_break"
SESSION_LONG_BREAK = "long_break"

PHASE_PAUSED = "paused"
PHASE_WORK = SESSION_WORK
PHASE_SHORT_BREAK = SESSION_SHORT_BREAK
PHASE_LONG_BREAK = SESSION_LONG_BREAK

BREAK_SESSIONS: frozenset[str] = frozenset({SESSION_SHORT_BREAK, SESSION_LONG_BREAK})
RUNNING_PHASES: frozenset[str] = frozenset({PHASE_WORK, PHASE_SHORT_BREAK, PHASE_LONG_BREAK})

ACTION_START_OR_RESUME = "start_or_resume"
ACTION_START_BREAK = "start_break"
ACTION_PAUSE = "pause"
ACTION_RESET = "reset"
ACTION_ADD_CATEGORY = "add_category"
ACTION_SELECT_CATEGORY = "select_category"

ACTION_SYNC = "sync"
ACTION_TICK = "tick"
ACTION_COMPLETED = "completed"

REASON_STARTED = "started"
REASON_RESUMED = "resumed"
REASON_BREAK_STARTED = "break_started"
REASON_PAUSED = "paused"
REASON_ALREADY_PAUSED = "already_paused"
REASON_RESET = "reset"
REASON_CATEGORY_ADDED = "category_added"
REASON_CATEGORY_SELECTED = "category_selected"
REASON_NOT_PAUSED = "not_paused"
REASON_NOT_WORK_PENDING = "not_work_pending"
REASON_NOT_BREAK_PENDING = "not_break_pending"
REASON_INVALID_ARGUMENT = "invalid_argument"
REASON_UNSUPPORTED_ACTION = "unsupported_action"

REASON_TICK = "tick"
REASON_COMPLETED = "completed"
REASON_STARTUP = "startup"
REASON_REQUESTED = "requested"
