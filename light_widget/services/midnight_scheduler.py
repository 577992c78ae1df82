# light_widget/services/midnight_scheduler.py
"""
Daily re-render timer.

Once armed, the scheduler wakes up shortly after midnight, re-renders every widget
instance (so the day rollover picks tomorrow's schedule) and arms itself again.

States:
  IDLE  -> arm() -> ARMED
  ARMED -> fire() -> IDLE -> arm() -> ARMED
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from datetime import datetime
from typing import Iterable, Optional, Protocol, Callable

from dateutil.relativedelta import relativedelta

from ..handlers.widget_handler import WidgetHandler
from ..log import get_logger

L = get_logger(__name__)

WAKE_IDENTITY = "midnight-update"


class Waker(Protocol):
    """One-shot wake-up service keyed by identity."""

    def can_schedule_exact(self) -> bool: ...

    def set_exact(self, instant: datetime, identity: str, callback: Callable[[], None]) -> None: ...

    def set_inexact(self, instant: datetime, identity: str, callback: Callable[[], None]) -> None: ...


class SchedulerState(enum.Enum):
    IDLE = "idle"
    ARMED = "armed"


@dataclass
class MidnightScheduler:
    """Self re-arming timer forcing one render pass per calendar day."""

    handler: WidgetHandler
    waker: Waker
    hour: int = 0
    minute: int = 1
    identity: str = WAKE_IDENTITY
    state: SchedulerState = field(default=SchedulerState.IDLE)
    next_fire: Optional[datetime] = None

    def next_fire_time(self, now: datetime) -> datetime:
        """Today's hour:minute plus one calendar day; never in the past."""
        target = now.replace(hour=self.hour, minute=self.minute, second=0, microsecond=0)
        return target + relativedelta(days=1)

    def arm(self, now: Optional[datetime] = None) -> Optional[datetime]:
        """
        Register the next wake-up.

        Uses an exact wake-up when allowed and falls back to an inexact one when exact
        registration is refused. If both fail the error is logged and the scheduler
        stays IDLE until the next activation.

        Returns:
            The registered instant, or None if nothing could be registered.
        """
        target = self.next_fire_time(now or self.handler.now_local())

        registered = False
        try:
            if self.waker.can_schedule_exact():
                self.waker.set_exact(target, self.identity, self.fire)
                registered = True
        except Exception as e:
            L.warning(f"Exact wake-up unavailable ({e}); falling back to inexact")

        if not registered:
            try:
                self.waker.set_inexact(target, self.identity, self.fire)
                registered = True
            except Exception:
                L.exception("Could not register midnight wake-up; daily refresh is not armed")

        if not registered:
            self.state = SchedulerState.IDLE
            self.next_fire = None
            return None

        self.state = SchedulerState.ARMED
        self.next_fire = target
        L.info(f"Midnight update armed for {target.isoformat()}")
        return target

    def fire(self) -> None:
        """Wake-up callback: passive re-render of every instance, then re-arm."""
        self.state = SchedulerState.IDLE
        self.next_fire = None
        try:
            rendered = self.handler.render_all()
            L.info(f"Midnight update rendered {rendered} widget(s)")
        except Exception:
            L.exception("Midnight update render failed")
        finally:
            self.arm()

    def activate(self, instance_ids: Optional[Iterable[str]] = None) -> None:
        """Lifecycle entry point (instance added / host update): arm and render."""
        self.arm()
        self.handler.render_all(instance_ids)
