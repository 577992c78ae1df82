# light_widget/services/feed_service.py
"""
Fetch pipeline: the collaborator that repopulates the store after a refresh tap.

Responsibilities:
  - fetch the encoded schedules document (every request goes to the feed)
  - write schedule_*, last_update_date and last_update_time keys
  - clear every is_loading_<index> flag, whether the fetch worked or not
  - re-render all instances so the spinner disappears

Expected document:
  {
    "date": "2024-3-2",          # optional, defaults to today's date
    "time": "12:30",             # optional, display string
    "groups": {"GPV1.1": {"today": "000111...", "tomorrow": "..."}, ...}
  }
"""

from __future__ import annotations

from concurrent.futures import Executor
from dataclasses import dataclass
from typing import Any, Dict, Optional

from ..day_key import date_key, schedule_key
from ..feed_client import FeedClient, FeedError
from ..handlers.widget_handler import WidgetHandler
from ..log import get_logger
from ..models import GROUP_INDEX, DayKey
from ..store import LAST_UPDATE_DATE, LAST_UPDATE_TIME

L = get_logger(__name__)


@dataclass
class FeedRefresher:
    """Fire-and-forget refresh of the store from the schedule feed."""

    handler: WidgetHandler
    client: Optional[FeedClient]
    executor: Optional[Executor] = None

    def request_refresh(self) -> None:
        """Start a refresh; returns immediately when an executor is configured."""
        if self.executor is None:
            self.run()
        else:
            self.executor.submit(self.run)

    def run(self) -> bool:
        """
        Fetch and store the feed, then clear the loading flags and re-render.

        Returns:
            True if the store was updated from the feed.
        """
        updated = False
        try:
            if self.client is None:
                L.warning("No FEED_URL configured; refresh only clears the loading state")
            else:
                payload = self.client.get_json()
                updated = self.apply_payload(payload)
        except FeedError as e:
            L.error(f"Schedule refresh failed: {e}")
        except Exception:
            L.exception("Schedule refresh failed")
        finally:
            self._complete()
        return updated

    def apply_payload(self, payload: Dict[str, Any]) -> bool:
        """
        Write a feed document into the store.

        Raises:
            FeedError if the document has no usable groups.
        """
        groups = payload.get("groups")
        if not isinstance(groups, dict):
            raise FeedError("feed payload has no 'groups' object")

        values: Dict[str, Any] = {}
        stored = 0
        for group, slots in groups.items():
            if group not in GROUP_INDEX:
                L.debug(f"Skipping unknown group {group!r} in feed")
                continue
            if not isinstance(slots, dict):
                continue
            today = slots.get("today")
            tomorrow = slots.get("tomorrow")
            values[schedule_key(group, DayKey.TODAY)] = today if isinstance(today, str) else ""
            values[schedule_key(group, DayKey.TOMORROW)] = tomorrow if isinstance(tomorrow, str) else ""
            stored += 1

        if not values:
            raise FeedError("feed payload contains no known groups")

        update_date = payload.get("date")
        if not isinstance(update_date, str) or not update_date:
            update_date = date_key(self.handler.now_local())
        update_time = payload.get("time")
        if not isinstance(update_time, str) or not update_time:
            update_time = self.handler.now_local().strftime("%H:%M")

        values[LAST_UPDATE_DATE] = update_date
        values[LAST_UPDATE_TIME] = update_time
        self.handler.store.put_many(values)
        L.info(f"Stored schedules for {stored} groups (updated {update_date} {update_time})")
        return True

    def _complete(self) -> None:
        try:
            self.handler.loading.clear_all()
        except Exception:
            L.exception("Could not clear loading flags")
        self.handler.render_all()
