from __future__ import annotations

from pomodoro.constants import (
    ACTION_ADD_CATEGORY,
    ACTION_PAUSE,
    ACTION_RESET,
    ACTION_SELECT_CATEGORY,
    ACTION_START_BREAK,
    ACTION_START_OR_RESUME,
    ACTION_SYNC,
)

COMMAND_START_OR_RESUME = ACTION_START_OR_RESUME
COMMAND_START_BREAK = ACTION_START_BREAK
COMMAND_PAUSE = ACTION_PAUSE
COMMAND_RESET = ACTION_RESET
COMMAND_ADD_CATEGORY = ACTION_ADD_CATEGORY
COMMAND_SELECT_CATEGORY = ACTION_SELECT_CATEGORY
COMMAND_SYNC = ACTION_SYNC

# Canonical command names accepted from the web UI.
COMMAND_NAME_ORDER: tuple[str, ...] = (
    COMMAND_START_OR_RESUME,
    COMMAND_START_BREAK,
    COMMAND_PAUSE,
    COMMAND_RESET,
    COMMAND_ADD_CATEGORY,
    COMMAND_SELECT_CATEGORY,
    COMMAND_SYNC,
)

COMMAND_NAMES: frozenset[str] = frozenset(COMMAND_NAME_ORDER)

TIMER_COMMAND_NAMES: frozenset[str] = frozenset(
    {
        COMMAND_START_OR_RESUME,
        COMMAND_START_BREAK,
        COMMAND_PAUSE,
        COMMAND_RESET,
    }
)

CATEGORY_COMMAND_NAMES: frozenset[str] = frozenset(
    {
        COMMAND_ADD_CATEGORY,
        COMMAND_SELECT_CATEGORY,
    }
)

# Button labels and shorthands sent by simpler clients.
COMMAND_ALIASES: dict[str, str] = {
    "start": COMMAND_START_OR_RESUME,
    "resume": COMMAND_START_OR_RESUME,
    "start_work": COMMAND_START_OR_RESUME,
    "break": COMMAND_START_BREAK,
    "start_short_break": COMMAND_START_BREAK,
    "start_long_break": COMMAND_START_BREAK,
}


def normalize_command_name(raw: str) -> str:
    """Return the canonical command name for `raw`, or `raw` stripped and lowered."""
    name = raw.strip().lower().replace("-", "_").replace(" ", "_")
    return COMMAND_ALIASES.get(name, name)
