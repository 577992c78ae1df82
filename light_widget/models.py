# light_widget/models.py
"""
Domain models for the widget.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Sequence, Tuple

GROUP_PREFIX = "GPV"

# Group -> storage index (suffix of is_loading_<index>)
GROUP_INDEX = {
    "GPV1.1": 1, "GPV1.2": 2,
    "GPV2.1": 3, "GPV2.2": 4,
    "GPV3.1": 5, "GPV3.2": 6,
    "GPV4.1": 7, "GPV4.2": 8,
    "GPV5.1": 9, "GPV5.2": 10,
    "GPV6.1": 11, "GPV6.2": 12,
}

GROUPS: Tuple[str, ...] = tuple(GROUP_INDEX)

HOURS_PER_DAY = 24
GRID_COLUMNS = 6
NO_UPDATE_TIME = "--:--"


def group_index(group: str) -> int:
    """Return the 1..12 storage index of a group; unknown groups fall back to 1."""
    return GROUP_INDEX.get(group, 1)


def group_label(group: str) -> str:
    """Strip the GPV prefix for display ("GPV3.2" -> "3.2")."""
    return group.replace(GROUP_PREFIX, "")


class HalfState(enum.Enum):
    """Visual state of one half-hour of an hourly cell."""

    ON = "on"
    OFF = "off"
    NEUTRAL = "neutral"
    UNKNOWN = "unknown"  # placeholder gray, treated like off


class DayKey(enum.Enum):
    """Which stored schedule slot a render pass reads."""

    TODAY = "today"
    TOMORROW = "tomorrow"


@dataclass(frozen=True)
class HourState:
    """One hourly cell: left = first half-hour, right = second half-hour."""
    hour: int
    left: HalfState
    right: HalfState


@dataclass(frozen=True)
class ScheduleSnapshot:
    """All data needed to render one widget instance."""
    group: str
    group_label: str
    last_update: str
    is_loading: bool
    hours: Sequence[HourState] = ()
    day_key: DayKey = DayKey.TODAY

    @property
    def no_data(self) -> bool:
        return len(self.hours) == 0

    @property
    def title(self) -> str:
        if self.no_data:
            return f"Гр. {self.group_label} (Немає даних)"
        return f"Група {self.group_label}"

    @property
    def rows(self) -> list[Sequence[HourState]]:
        """Hours split into grid rows of GRID_COLUMNS cells."""
        return [
            self.hours[i:i + GRID_COLUMNS]
            for i in range(0, len(self.hours), GRID_COLUMNS)
        ]
