"""Background tick driver delivering periodic callbacks to one subscriber."""

from __future__ import annotations

import logging
import threading
from typing import Callable, Optional, Protocol

from .constants import DEFAULT_TICK_INTERVAL_SECONDS


class TickSubscriptionLike(Protocol):
    @property
    def active(self) -> bool:
        ...

    def cancel(self) -> None:
        ...


class TickDriverLike(Protocol):
    def subscribe(self, callback: Callable[[], None]) -> TickSubscriptionLike:
        ...

    def cancel(self) -> None:
        ...


class TickSubscription:
    """Handle for one running tick thread; cancelling it stops further callbacks."""

    def __init__(
        self,
        callback: Callable[[], None],
        *,
        interval_seconds: float,
        logger: logging.Logger,
    ):
        self._callback = callback
        self._interval_seconds = interval_seconds
        self._logger = logger
        self._cancelled = threading.Event()
        self._thread = threading.Thread(target=self._run, daemon=True, name="tick-driver")

    @property
    def active(self) -> bool:
        return not self._cancelled.is_set() and self._thread.is_alive()

    def start(self) -> None:
        self._thread.start()

    def cancel(self) -> None:
        self._cancelled.set()

    def join(self, timeout_seconds: float = 1.0) -> None:
        if self._thread is threading.current_thread() or not self._thread.is_alive():
            return
        self._thread.join(timeout=timeout_seconds)
        if self._thread.is_alive():
            self._logger.error(
                "Tick thread did not stop within %.1fs",
                timeout_seconds,
            )

    def _run(self) -> None:
        while not self._cancelled.wait(self._interval_seconds):
            try:
                self._callback()
            except Exception as error:
                self._logger.error("Tick callback failed: %s", error, exc_info=True)


class TickDriver:
    """Owns at most one active tick subscription at a time."""

    def __init__(
        self,
        *,
        interval_seconds: float = DEFAULT_TICK_INTERVAL_SECONDS,
        logger: Optional[logging.Logger] = None,
    ):
        if interval_seconds <= 0:
            raise ValueError("interval_seconds must be greater than zero")

        self._interval_seconds = float(interval_seconds)
        self._logger = logger or logging.getLogger("tick_driver")
        self._lock = threading.Lock()
        self._subscription: Optional[TickSubscription] = None

    @property
    def interval_seconds(self) -> float:
        return self._interval_seconds

    @property
    def active(self) -> bool:
        with self._lock:
            return self._subscription is not None and self._subscription.active

    def subscribe(self, callback: Callable[[], None]) -> TickSubscription:
        with self._lock:
            if self._subscription is not None:
                self._subscription.cancel()
            subscription = TickSubscription(
                callback,
                interval_seconds=self._interval_seconds,
                logger=self._logger,
            )
            self._subscription = subscription
            subscription.start()
        self._logger.debug("Tick subscription started (interval=%.2fs)", self._interval_seconds)
        return subscription

    def cancel(self) -> None:
        with self._lock:
            subscription = self._subscription
            self._subscription = None
        if subscription is not None:
            subscription.cancel()
            self._logger.debug("Tick subscription cancelled")

    def close(self, timeout_seconds: float = 1.0) -> None:
        with self._lock:
            subscription = self._subscription
            self._subscription = None
        if subscription is not None:
            subscription.cancel()
            subscription.join(timeout_seconds)
