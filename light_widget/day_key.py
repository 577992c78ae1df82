# light_widget/day_key.py
"""
Day rollover logic: which stored schedule ("today" or "tomorrow") to display.

The fetch pipeline stores both slots together with the date of the fetch. Once the
calendar has moved past that date, the slot that was "tomorrow" at fetch time is
the one describing the current day.
"""

from __future__ import annotations

from datetime import datetime

from .models import DayKey


def date_key(moment: datetime) -> str:
    """Format a date as YYYY-M-D without zero padding (e.g. 2024-3-2)."""
    return f"{moment.year}-{moment.month}-{moment.day}"


def resolve_key(last_update_date: str, today: str, tomorrow_has_data: bool) -> DayKey:
    """
    Pick the schedule slot to read.

    Rules:
      - never updated, or updated today -> TODAY
      - updated on another date -> TOMORROW if that slot has data, else TODAY
    """
    if not last_update_date or last_update_date == today:
        return DayKey.TODAY
    return DayKey.TOMORROW if tomorrow_has_data else DayKey.TODAY


def schedule_key(group: str, day: DayKey) -> str:
    """Store key of a group's schedule for the given slot."""
    if day is DayKey.TOMORROW:
        return f"schedule_tomorrow_{group}"
    return f"schedule_{group}"
