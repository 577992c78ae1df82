# light_widget/handlers/widget_handler.py
"""
Handler responsible for building widget snapshots and committing them to the surface.

Keeps Flask routes, the refresh controller and the midnight scheduler simple by
concentrating the render pass here.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable, Dict, Iterable, Optional

from dateutil import tz

from ..day_key import date_key, resolve_key, schedule_key
from ..log import get_logger
from ..models import DayKey, NO_UPDATE_TIME, ScheduleSnapshot, group_label
from ..schedule_codec import decode_schedule
from ..store import LAST_UPDATE_DATE, LAST_UPDATE_TIME, LoadingFlags, MemoryStore
from ..surface import WidgetSurface

L = get_logger(__name__)


@dataclass
class WidgetHandler:
    """Builds ScheduleSnapshot view models and hands them to the rendering surface."""

    store: MemoryStore
    surface: WidgetSurface
    tz_name: str
    clock: Optional[Callable[[], datetime]] = None

    @property
    def app_tz(self):
        """Return the configured timezone object used for all local conversions."""
        return tz.gettz(self.tz_name)

    @property
    def loading(self) -> LoadingFlags:
        return LoadingFlags(self.store)

    def now_local(self) -> datetime:
        """Return the current time in the app timezone (or the injected clock's time)."""
        if self.clock is not None:
            return self.clock()
        return datetime.now(tz=self.app_tz)

    def build_snapshot(self, group: str) -> ScheduleSnapshot:
        """
        Read the store and assemble the snapshot for one group.

        Raises whatever the store raises; render() is the boundary that contains it.
        """
        is_loading = self.loading.get_loading(group)

        today = date_key(self.now_local())
        last_update_date = self.store.get_string(LAST_UPDATE_DATE, "")
        tomorrow = self.store.get_string(schedule_key(group, DayKey.TOMORROW), "")
        day = resolve_key(last_update_date, today, bool(tomorrow))

        raw = tomorrow if day is DayKey.TOMORROW else self.store.get_string(schedule_key(group, DayKey.TODAY), "")
        last_update = self.store.get_string(LAST_UPDATE_TIME, "") or NO_UPDATE_TIME

        return ScheduleSnapshot(
            group=group,
            group_label=group_label(group),
            last_update=last_update,
            is_loading=is_loading,
            hours=decode_schedule(raw),
            day_key=day,
        )

    def render(self, instance_id: str) -> bool:
        """
        Run one render pass for an on-screen instance.

        The snapshot is fully built before the surface is touched. Any failure is
        logged and the pass abandoned, leaving the previous snapshot in place.

        Returns:
            True if a new snapshot was committed.
        """
        try:
            group = self.surface.group_of(instance_id)
            snapshot = self.build_snapshot(group)
            self.surface.apply(instance_id, snapshot)
        except Exception:
            L.exception(f"Render of widget {instance_id} failed; keeping previous state")
            return False

        L.debug(f"Rendered widget {instance_id} ({snapshot.group}, {snapshot.day_key.value}, loading={snapshot.is_loading})")
        return True

    def render_all(self, instance_ids: Optional[Iterable[str]] = None) -> int:
        """Render the given instances (default: every registered one); return the commit count."""
        ids = list(instance_ids) if instance_ids is not None else self.surface.instances()
        return sum(1 for instance_id in ids if self.render(instance_id))


def snapshot_to_dict(s: ScheduleSnapshot) -> Dict[str, Any]:
    """Serialize a ScheduleSnapshot into JSON-safe primitives."""
    return {
        "group": s.group,
        "groupLabel": s.group_label,
        "title": s.title,
        "lastUpdate": s.last_update,
        "isLoading": s.is_loading,
        "noData": s.no_data,
        "day": s.day_key.value,
        "hours": [
            {"hour": h.hour, "left": h.left.value, "right": h.right.value}
            for h in s.hours
        ],
    }
