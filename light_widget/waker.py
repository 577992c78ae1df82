# light_widget/waker.py
"""
In-process wake-up service used by the midnight scheduler.

Registrations are one-shot and keyed by identity: registering again under the same
identity replaces the pending wake-up.
"""

from __future__ import annotations

import threading
import time
from datetime import datetime
from typing import Callable, Dict, Optional

from .log import get_logger

L = get_logger(__name__)

# Slack added to inexact wake-ups, like an OS batching alarms
INEXACT_WINDOW_SECONDS = 60.0


class ExactWakeUnavailable(Exception):
    """Exact wake-ups are not permitted; callers should fall back to inexact ones."""


class TimerWaker:
    """Wake-up service backed by daemon threading.Timer objects."""

    def __init__(self, allow_exact: bool = True,
                 wall_clock: Callable[[], float] = time.time) -> None:
        self.allow_exact = allow_exact
        self._wall_clock = wall_clock
        self._timers: Dict[str, threading.Timer] = {}
        self._lock = threading.Lock()

    def can_schedule_exact(self) -> bool:
        return self.allow_exact

    def set_exact(self, instant: datetime, identity: str, callback: Callable[[], None]) -> None:
        if not self.allow_exact:
            raise ExactWakeUnavailable("exact wake-ups are disabled")
        self._register(instant, identity, callback, slack=0.0)

    def set_inexact(self, instant: datetime, identity: str, callback: Callable[[], None]) -> None:
        self._register(instant, identity, callback, slack=INEXACT_WINDOW_SECONDS)

    def pending(self, identity: str) -> bool:
        with self._lock:
            timer = self._timers.get(identity)
        return timer is not None and timer.is_alive()

    def cancel_all(self) -> None:
        with self._lock:
            timers = list(self._timers.values())
            self._timers.clear()
        for timer in timers:
            timer.cancel()

    def _register(self, instant: datetime, identity: str,
                  callback: Callable[[], None], slack: float) -> None:
        delay = max(0.0, instant.timestamp() - self._wall_clock()) + slack

        def run() -> None:
            with self._lock:
                if self._timers.get(identity) is timer:
                    del self._timers[identity]
            callback()

        timer = threading.Timer(delay, run)
        timer.daemon = True
        with self._lock:
            previous: Optional[threading.Timer] = self._timers.get(identity)
            self._timers[identity] = timer
        if previous is not None:
            previous.cancel()
        timer.start()
        L.info(f"Wake-up '{identity}' registered for {instant.isoformat()} (in {delay:.0f}s)")
