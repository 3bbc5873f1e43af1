"""Status, control label, and response text builders for session flows."""

from __future__ import annotations

from typing import Optional

from pomodoro import SessionSnapshot, time_string
from pomodoro.constants import (
    ACTION_ADD_CATEGORY,
    ACTION_PAUSE,
    ACTION_RESET,
    ACTION_SELECT_CATEGORY,
    ACTION_START_BREAK,
    ACTION_START_OR_RESUME,
    PHASE_PAUSED,
    REASON_ALREADY_PAUSED,
    REASON_INVALID_ARGUMENT,
    REASON_NOT_BREAK_PENDING,
    REASON_NOT_PAUSED,
    REASON_NOT_WORK_PENDING,
    REASON_RESUMED,
    REASON_UNSUPPORTED_ACTION,
    SESSION_LONG_BREAK,
    SESSION_SHORT_BREAK,
    SESSION_WORK,
)

_SESSION_LABELS = {
    SESSION_WORK: "Work",
    SESSION_SHORT_BREAK: "Short Break",
    SESSION_LONG_BREAK: "Long Break",
}


def session_label(session_type: str) -> str:
    return _SESSION_LABELS.get(session_type, session_type)


def primary_command(snapshot: SessionSnapshot) -> str:
    """Return the command bound to the main button for the current state."""
    if snapshot.phase != PHASE_PAUSED:
        return ACTION_PAUSE
    if snapshot.current_session_type == SESSION_WORK:
        return ACTION_START_OR_RESUME
    return ACTION_START_BREAK


def primary_action_label(snapshot: SessionSnapshot) -> str:
    if snapshot.phase != PHASE_PAUSED:
        return "Pause"
    if snapshot.current_session_type == SESSION_LONG_BREAK:
        return "Start Long Break"
    if snapshot.current_session_type == SESSION_SHORT_BREAK:
        return "Start Short Break"
    if snapshot.time_remaining == snapshot.work_duration:
        return "Start Work"
    return "Resume"


def reset_visible(snapshot: SessionSnapshot) -> bool:
    return snapshot.is_running or snapshot.time_remaining != snapshot.work_duration


def session_counter_text(snapshot: SessionSnapshot) -> str:
    return (
        f"Session {snapshot.completed_work_sessions}/"
        f"{snapshot.work_sessions_before_long_break}"
    )


def category_time_text(snapshot: SessionSnapshot) -> str:
    seconds = snapshot.categories.get(snapshot.selected_category, 0.0)
    return f"{snapshot.selected_category}: {time_string(seconds)}"


def status_message(snapshot: SessionSnapshot) -> str:
    """Build the one-line status shown next to the UI state indicator."""
    if snapshot.is_running:
        return (
            f"{session_label(snapshot.current_session_type)} running "
            f"({time_string(snapshot.time_remaining)} remaining)"
        )
    return snapshot.state_description


def completion_text(finished_session_type: Optional[str], snapshot: SessionSnapshot) -> str:
    """Return the message announced when an interval reaches zero."""
    if finished_session_type == SESSION_WORK:
        next_break = session_label(snapshot.current_session_type).lower()
        return (
            f"Work session complete. {time_string(snapshot.work_duration)} logged to "
            f"{snapshot.selected_category}. Ready for a {next_break}."
        )
    if finished_session_type == SESSION_LONG_BREAK:
        return "Long break over. The cycle starts again, ready to work."
    return "Break over. Ready to work."


def default_action_text(action: str, reason: str, snapshot: SessionSnapshot) -> str:
    """Return the text reported for an accepted command."""
    if action == ACTION_START_OR_RESUME:
        if reason == REASON_RESUMED:
            return f"Work resumed with {time_string(snapshot.time_remaining)} remaining."
        return f"Work started for {snapshot.selected_category}."
    if action == ACTION_START_BREAK:
        label = session_label(snapshot.current_session_type).lower()
        return f"{label.capitalize()} started ({time_string(snapshot.time_remaining)})."
    if action == ACTION_PAUSE:
        if reason == REASON_ALREADY_PAUSED:
            return "The timer is already paused."
        return f"Paused with {time_string(snapshot.time_remaining)} remaining."
    if action == ACTION_RESET:
        return "Timer reset."
    if action == ACTION_ADD_CATEGORY:
        return "Category added."
    if action == ACTION_SELECT_CATEGORY:
        return f"Tracking work time for {snapshot.selected_category}."
    return "Session updated."


def rejection_text(action: str, reason: str) -> str:
    """Return the text reported for a rejected command."""
    if reason == REASON_NOT_PAUSED:
        return "The timer is already running. Pause it first."
    if reason == REASON_NOT_WORK_PENDING:
        return "A break is due. Start the break or reset the timer."
    if reason == REASON_NOT_BREAK_PENDING:
        return "No break is due yet. Finish a work session first."
    if reason == REASON_INVALID_ARGUMENT and action == ACTION_ADD_CATEGORY:
        return "Category names must be non-empty and unique."
    if reason == REASON_INVALID_ARGUMENT and action == ACTION_SELECT_CATEGORY:
        return "That category does not exist."
    if reason == REASON_UNSUPPORTED_ACTION:
        return f"Unsupported command: {action}"
    return "That command is not possible right now."
