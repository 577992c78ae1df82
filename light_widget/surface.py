# light_widget/surface.py
"""
Rendering surface: the latest snapshot of every on-screen widget instance.

The Flask routes read from here; render passes write here. A snapshot is replaced
in a single assignment, so readers see either the previous or the new one.
"""

from __future__ import annotations

import threading
from typing import Dict, List, Optional

from .models import ScheduleSnapshot


class UnknownInstance(KeyError):
    """Raised when an instance id has not been registered."""


class WidgetSurface:
    """Instance registry plus the last applied snapshot per instance."""

    def __init__(self) -> None:
        self._groups: Dict[str, str] = {}
        self._snapshots: Dict[str, ScheduleSnapshot] = {}
        self._lock = threading.Lock()

    def add_instance(self, instance_id: str, group: str) -> None:
        with self._lock:
            self._groups[instance_id] = group

    def remove_instance(self, instance_id: str) -> None:
        with self._lock:
            self._groups.pop(instance_id, None)
            self._snapshots.pop(instance_id, None)

    def group_of(self, instance_id: str) -> str:
        with self._lock:
            try:
                return self._groups[instance_id]
            except KeyError:
                raise UnknownInstance(instance_id) from None

    def instances(self, group: Optional[str] = None) -> List[str]:
        """Registered instance ids, optionally limited to one group."""
        with self._lock:
            return [i for i, g in self._groups.items() if group is None or g == group]

    def apply(self, instance_id: str, snapshot: ScheduleSnapshot) -> None:
        with self._lock:
            if instance_id not in self._groups:
                raise UnknownInstance(instance_id)
            self._snapshots[instance_id] = snapshot

    def snapshot(self, instance_id: str) -> Optional[ScheduleSnapshot]:
        with self._lock:
            return self._snapshots.get(instance_id)
