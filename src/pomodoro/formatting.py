"""Pure display helpers derived from session timer state."""

from __future__ import annotations

from .constants import (
    PHASE_PAUSED,
    SESSION_LONG_BREAK,
    SESSION_SHORT_BREAK,
    SESSION_WORK,
)


def time_string(seconds: float) -> str:
    """Format seconds as `MM:SS` without rolling minutes over into hours."""
    whole = max(0, int(seconds))
    minutes, remainder = divmod(whole, 60)
    return f"{minutes:02d}:{remainder:02d}"


def state_description(
    phase: str,
    current_session_type: str,
    time_remaining: float,
    work_duration: float,
) -> str:
    """Return the status line shown under the countdown."""
    if phase == PHASE_PAUSED:
        if current_session_type == SESSION_SHORT_BREAK:
            return "Work Complete - Ready for Short Break"
        if current_session_type == SESSION_LONG_BREAK:
            return "Work Complete - Ready for Long Break"
        return "Ready to Start" if time_remaining == work_duration else "Paused"

    if phase == SESSION_WORK:
        return "Work Time - Stay Focused!"
    if phase == SESSION_SHORT_BREAK:
        return "Short Break - Relax!"
    if phase == SESSION_LONG_BREAK:
        return "Long Break - Recharge!"
    return "Paused"
