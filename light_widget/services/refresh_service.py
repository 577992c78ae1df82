# light_widget/services/refresh_service.py
"""
Refresh tap handling: optimistic spinner, immediate re-render, background fetch.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol

from ..handlers.widget_handler import WidgetHandler
from ..log import get_logger

L = get_logger(__name__)


class Fetcher(Protocol):
    """Anything that can start an out-of-band schedule refresh."""

    def request_refresh(self) -> None: ...


@dataclass
class RefreshController:
    """
    Runs the loading transition for one tapped widget.

    The controller only ever sets the loading flag; clearing it is the fetcher's job.
    Repeated taps are not de-duplicated.
    """

    handler: WidgetHandler
    fetcher: Fetcher

    def request_refresh(self, group: str, instance_id: str) -> None:
        """
        Steps (no rollback if a later one fails):
          1) mark the group as loading
          2) re-render the tapped instance so the spinner shows right away
          3) ask the fetcher to refresh the store
        """
        try:
            self.handler.loading.set_loading(group, True)
        except Exception:
            L.exception(f"Could not set loading flag for {group}")

        self.handler.render(instance_id)

        try:
            self.fetcher.request_refresh()
        except Exception:
            L.exception(f"Could not start refresh for {group}")
