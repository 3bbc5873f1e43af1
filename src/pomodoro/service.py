"""Thread-safe in-memory pomodoro session state machine."""

from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass
from typing import Callable, Literal, Optional

from .constants import (
    ACTION_ADD_CATEGORY,
    ACTION_PAUSE,
    ACTION_RESET,
    ACTION_SELECT_CATEGORY,
    ACTION_START_BREAK,
    ACTION_START_OR_RESUME,
    BREAK_SESSIONS,
    DEFAULT_CATEGORY,
    DEFAULT_LONG_BREAK_DURATION_SECONDS,
    DEFAULT_SHORT_BREAK_DURATION_SECONDS,
    DEFAULT_WORK_DURATION_SECONDS,
    DEFAULT_WORK_SESSIONS_BEFORE_LONG_BREAK,
    PHASE_PAUSED,
    REASON_ALREADY_PAUSED,
    REASON_BREAK_STARTED,
    REASON_CATEGORY_ADDED,
    REASON_CATEGORY_SELECTED,
    REASON_INVALID_ARGUMENT,
    REASON_NOT_BREAK_PENDING,
    REASON_NOT_PAUSED,
    REASON_NOT_WORK_PENDING,
    REASON_PAUSED,
    REASON_RESET,
    REASON_RESUMED,
    REASON_STARTED,
    REASON_UNSUPPORTED_ACTION,
    RUNNING_PHASES,
    SESSION_LONG_BREAK,
    SESSION_SHORT_BREAK,
    SESSION_WORK,
)
from .driver import TickDriverLike, TickSubscriptionLike
from .errors import InvalidArgumentError, InvalidTransitionError, SessionTimerError
from .formatting import state_description as describe_state

SessionPhase = Literal["paused", "work", "short_break", "long_break"]
SessionType = Literal["work", "short_break", "long_break"]
SessionAction = Literal[
    "start_or_resume",
    "start_break",
    "pause",
    "reset",
    "add_category",
    "select_category",
]


@dataclass(frozen=True)
class SessionSnapshot:
    """Immutable copy of the timer state exposed to runtime and UI publishers."""
    phase: SessionPhase
    current_session_type: SessionType
    time_remaining: float
    completed_work_sessions: int
    categories: dict[str, float]
    selected_category: str
    last_tick_timestamp: Optional[float]
    just_completed: bool
    work_duration: float
    short_break_duration: float
    long_break_duration: float
    work_sessions_before_long_break: int
    revision: int = 0

    @property
    def is_running(self) -> bool:
        return self.phase in RUNNING_PHASES

    @property
    def state_description(self) -> str:
        return describe_state(
            self.phase,
            self.current_session_type,
            self.time_remaining,
            self.work_duration,
        )

    @property
    def sorted_categories(self) -> list[tuple[str, float]]:
        return sorted(self.categories.items())


@dataclass(frozen=True)
class SessionActionResult:
    """Result envelope returned after applying a command to the timer."""
    action: str
    accepted: bool
    reason: str
    snapshot: SessionSnapshot


@dataclass(frozen=True)
class SessionTick:
    """Tick payload emitted while an interval counts down."""
    snapshot: SessionSnapshot
    completed: bool = False
    finished_session_type: Optional[SessionType] = None


class SessionTimer:
    """Pomodoro state machine cycling between work, short and long breaks.

    The timer never reads the clock inside `tick`; callers pass the current
    wall-clock time, and the optional tick driver supplies it from `clock`.
    All state changes are serialized by a single lock so the driver thread
    and UI commands can call in concurrently.
    """

    def __init__(
        self,
        *,
        work_duration: float = DEFAULT_WORK_DURATION_SECONDS,
        short_break_duration: float = DEFAULT_SHORT_BREAK_DURATION_SECONDS,
        long_break_duration: float = DEFAULT_LONG_BREAK_DURATION_SECONDS,
        work_sessions_before_long_break: int = DEFAULT_WORK_SESSIONS_BEFORE_LONG_BREAK,
        driver: Optional[TickDriverLike] = None,
        clock: Optional[Callable[[], float]] = None,
        on_tick: Optional[Callable[[SessionTick], None]] = None,
        logger: Optional[logging.Logger] = None,
    ):
        for name, value in (
            ("work_duration", work_duration),
            ("short_break_duration", short_break_duration),
            ("long_break_duration", long_break_duration),
            ("work_sessions_before_long_break", work_sessions_before_long_break),
        ):
            if value <= 0:
                raise InvalidArgumentError(f"{name} must be greater than zero")

        self._work_duration = float(work_duration)
        self._short_break_duration = float(short_break_duration)
        self._long_break_duration = float(long_break_duration)
        self._work_sessions_before_long_break = int(work_sessions_before_long_break)
        self._driver = driver
        self._clock = clock
        self._on_tick = on_tick
        self._logger = logger or logging.getLogger("pomodoro")
        self._lock = threading.Lock()
        self._subscription: Optional[TickSubscriptionLike] = None

        self._phase: SessionPhase = PHASE_PAUSED
        self._current_session_type: SessionType = SESSION_WORK
        self._time_remaining = self._work_duration
        self._completed_work_sessions = 0
        self._last_tick_timestamp: Optional[float] = None
        self._categories: dict[str, float] = {DEFAULT_CATEGORY: 0.0}
        self._selected_category = DEFAULT_CATEGORY
        self._just_completed = False
        self._last_emitted_second: Optional[int] = None
        self._revision = 0

    @property
    def work_duration(self) -> float:
        return self._work_duration

    @property
    def short_break_duration(self) -> float:
        return self._short_break_duration

    @property
    def long_break_duration(self) -> float:
        return self._long_break_duration

    @property
    def work_sessions_before_long_break(self) -> int:
        return self._work_sessions_before_long_break

    @property
    def phase(self) -> SessionPhase:
        with self._lock:
            return self._phase

    @property
    def current_session_type(self) -> SessionType:
        with self._lock:
            return self._current_session_type

    @property
    def time_remaining(self) -> float:
        with self._lock:
            return self._time_remaining

    @property
    def completed_work_sessions(self) -> int:
        with self._lock:
            return self._completed_work_sessions

    @property
    def last_tick_timestamp(self) -> Optional[float]:
        with self._lock:
            return self._last_tick_timestamp

    @property
    def categories(self) -> dict[str, float]:
        with self._lock:
            return dict(self._categories)

    @property
    def selected_category(self) -> str:
        with self._lock:
            return self._selected_category

    @property
    def just_completed(self) -> bool:
        with self._lock:
            return self._just_completed

    @property
    def is_running(self) -> bool:
        with self._lock:
            return self._phase in RUNNING_PHASES

    @property
    def state_description(self) -> str:
        return self.snapshot().state_description

    def sorted_categories(self) -> list[tuple[str, float]]:
        return self.snapshot().sorted_categories

    def set_tick_listener(self, listener: Optional[Callable[[SessionTick], None]]) -> None:
        self._on_tick = listener

    def snapshot(self) -> SessionSnapshot:
        with self._lock:
            return self._snapshot_locked()

    def start_or_resume(self) -> SessionSnapshot:
        snapshot, _ = self._start_or_resume()
        return snapshot

    def _start_or_resume(self) -> tuple[SessionSnapshot, bool]:
        with self._lock:
            if self._phase != PHASE_PAUSED:
                raise InvalidTransitionError(
                    "Timer is already running",
                    reason=REASON_NOT_PAUSED,
                )
            if self._current_session_type != SESSION_WORK:
                raise InvalidTransitionError(
                    "A break is pending; start the break instead",
                    reason=REASON_NOT_WORK_PENDING,
                )

            resuming = self._time_remaining != self._work_duration
            self._current_session_type = SESSION_WORK
            self._phase = SESSION_WORK
            self._run_locked()
            self._logger.info(
                "Work session %s: remaining=%.1fs category=%s",
                "resumed" if resuming else "started",
                self._time_remaining,
                self._selected_category,
            )
            return self._snapshot_locked(), resuming

    def start_break(self) -> SessionSnapshot:
        with self._lock:
            if self._phase != PHASE_PAUSED:
                raise InvalidTransitionError(
                    "Timer is already running",
                    reason=REASON_NOT_PAUSED,
                )
            if self._current_session_type not in BREAK_SESSIONS:
                raise InvalidTransitionError(
                    "No break is pending",
                    reason=REASON_NOT_BREAK_PENDING,
                )

            break_kind = self._next_break_locked()
            self._current_session_type = break_kind
            self._phase = break_kind
            self._time_remaining = self._duration_for_locked(break_kind)
            self._run_locked()
            self._logger.info(
                "Break started: type=%s duration=%.0fs completed_work_sessions=%d",
                break_kind,
                self._time_remaining,
                self._completed_work_sessions,
            )
            return self._snapshot_locked()

    def pause(self) -> SessionSnapshot:
        snapshot, _ = self._pause()
        return snapshot

    def _pause(self) -> tuple[SessionSnapshot, bool]:
        with self._lock:
            if self._phase == PHASE_PAUSED:
                return self._snapshot_locked(), False

            self._cancel_subscription_locked()
            self._phase = PHASE_PAUSED
            self._last_tick_timestamp = None
            self._just_completed = False
            self._revision += 1
            self._logger.info(
                "Session paused: type=%s remaining=%.1fs",
                self._current_session_type,
                self._time_remaining,
            )
            return self._snapshot_locked(), True

    def reset(self) -> SessionSnapshot:
        with self._lock:
            self._cancel_subscription_locked()
            self._phase = PHASE_PAUSED
            self._current_session_type = SESSION_WORK
            self._time_remaining = self._work_duration
            self._last_tick_timestamp = None
            self._completed_work_sessions = 0
            self._just_completed = False
            self._last_emitted_second = None
            self._revision += 1
            self._logger.info("Session timer reset")
            return self._snapshot_locked()

    def close(self) -> None:
        """Release the active tick subscription without changing state."""
        with self._lock:
            self._cancel_subscription_locked()

    def tick(self, now: Optional[float] = None) -> Optional[SessionTick]:
        """Advance the countdown to `now`.

        Returns a tick when the displayed second changed or the interval
        completed, `None` otherwise or when the timer is not running. Without
        `now` the clock is read under the lock. A `now` older than the last
        anchor is ignored and leaves the anchor in place.
        """
        with self._lock:
            if self._phase == PHASE_PAUSED or self._last_tick_timestamp is None:
                return None

            if now is None:
                now = self._now()
            if now < self._last_tick_timestamp:
                self._logger.debug(
                    "Ignoring tick older than anchor: now=%.3f anchor=%.3f",
                    now,
                    self._last_tick_timestamp,
                )
                return None

            elapsed = now - self._last_tick_timestamp
            self._last_tick_timestamp = now
            self._time_remaining = max(0.0, self._time_remaining - elapsed)
            self._revision += 1

            if self._time_remaining <= 0:
                finished = self._current_session_type
                self._complete_locked(finished)
                return SessionTick(
                    snapshot=self._snapshot_locked(),
                    completed=True,
                    finished_session_type=finished,
                )

            displayed_second = int(self._time_remaining)
            if displayed_second == self._last_emitted_second:
                return None
            self._last_emitted_second = displayed_second
            return SessionTick(snapshot=self._snapshot_locked())

    def add_category(self, name: str) -> SessionSnapshot:
        category = name.strip() if isinstance(name, str) else ""
        with self._lock:
            if not category:
                raise InvalidArgumentError("Category name cannot be empty")
            if category in self._categories:
                raise InvalidArgumentError(f"Category already exists: {category}")

            self._categories[category] = 0.0
            self._revision += 1
            self._logger.info("Category added: %s", category)
            return self._snapshot_locked()

    def select_category(self, name: str) -> SessionSnapshot:
        with self._lock:
            if name not in self._categories:
                raise InvalidArgumentError(f"Unknown category: {name}")

            self._selected_category = name
            self._revision += 1
            self._logger.info("Category selected: %s", name)
            return self._snapshot_locked()

    def apply(
        self,
        action: str,
        *,
        category: Optional[str] = None,
    ) -> SessionActionResult:
        """Apply a named command and report acceptance instead of raising."""
        try:
            if action == ACTION_START_OR_RESUME:
                snapshot, resuming = self._start_or_resume()
                reason = REASON_RESUMED if resuming else REASON_STARTED
            elif action == ACTION_START_BREAK:
                snapshot = self.start_break()
                reason = REASON_BREAK_STARTED
            elif action == ACTION_PAUSE:
                snapshot, was_running = self._pause()
                reason = REASON_PAUSED if was_running else REASON_ALREADY_PAUSED
            elif action == ACTION_RESET:
                snapshot = self.reset()
                reason = REASON_RESET
            elif action == ACTION_ADD_CATEGORY:
                snapshot = self.add_category(category or "")
                reason = REASON_CATEGORY_ADDED
            elif action == ACTION_SELECT_CATEGORY:
                snapshot = self.select_category(category or "")
                reason = REASON_CATEGORY_SELECTED
            else:
                return SessionActionResult(
                    action=action,
                    accepted=False,
                    reason=REASON_UNSUPPORTED_ACTION,
                    snapshot=self.snapshot(),
                )
        except SessionTimerError as error:
            self._logger.warning("Rejected %s: %s", action, error)
            return SessionActionResult(
                action=action,
                accepted=False,
                reason=error.reason or REASON_INVALID_ARGUMENT,
                snapshot=self.snapshot(),
            )

        return SessionActionResult(
            action=action,
            accepted=True,
            reason=reason,
            snapshot=snapshot,
        )

    def _on_driver_tick(self) -> None:
        tick = self.tick()
        listener = self._on_tick
        if tick is not None and listener is not None:
            listener(tick)

    def _now(self) -> float:
        if self._clock is not None:
            return self._clock()
        return time.time()

    def _run_locked(self) -> None:
        self._revision += 1
        self._just_completed = False
        self._last_emitted_second = None
        self._last_tick_timestamp = self._now()
        self._cancel_subscription_locked()
        if self._driver is not None:
            self._subscription = self._driver.subscribe(self._on_driver_tick)

    def _cancel_subscription_locked(self) -> None:
        if self._subscription is not None:
            self._subscription.cancel()
            self._subscription = None

    def _complete_locked(self, finished: SessionType) -> None:
        self._cancel_subscription_locked()
        self._phase = PHASE_PAUSED
        self._last_tick_timestamp = None
        self._last_emitted_second = None
        self._just_completed = True

        if finished == SESSION_WORK:
            time_spent = self._work_duration - self._time_remaining
            self._categories[self._selected_category] = (
                self._categories.get(self._selected_category, 0.0) + time_spent
            )
            self._completed_work_sessions += 1
            next_break = self._next_break_locked()
            self._current_session_type = next_break
            self._time_remaining = self._duration_for_locked(next_break)
            self._logger.info(
                "Work session completed: category=%s completed_work_sessions=%d next=%s",
                self._selected_category,
                self._completed_work_sessions,
                next_break,
            )
            return

        if finished == SESSION_LONG_BREAK:
            self._completed_work_sessions = 0
        self._current_session_type = SESSION_WORK
        self._time_remaining = self._work_duration
        self._logger.info("Break completed: type=%s", finished)

    def _next_break_locked(self) -> SessionType:
        if self._completed_work_sessions >= self._work_sessions_before_long_break:
            return SESSION_LONG_BREAK
        return SESSION_SHORT_BREAK

    def _duration_for_locked(self, session_type: SessionType) -> float:
        if session_type == SESSION_SHORT_BREAK:
            return self._short_break_duration
        if session_type == SESSION_LONG_BREAK:
            return self._long_break_duration
        return self._work_duration

    def _snapshot_locked(self) -> SessionSnapshot:
        return SessionSnapshot(
            phase=self._phase,
            current_session_type=self._current_session_type,
            time_remaining=self._time_remaining,
            completed_work_sessions=self._completed_work_sessions,
            categories=dict(self._categories),
            selected_category=self._selected_category,
            last_tick_timestamp=self._last_tick_timestamp,
            just_completed=self._just_completed,
            work_duration=self._work_duration,
            short_break_duration=self._short_break_duration,
            long_break_duration=self._long_break_duration,
            work_sessions_before_long_break=self._work_sessions_before_long_break,
            revision=self._revision,
        )
