# light_widget/schedule_codec.py
"""
Decoder for the 24-character hourly outage schedule.

Each character describes one hour of the day (index 0 = 00:00-01:00):

    '0'  power on for the whole hour
    '1'  power off for the whole hour
    '2'  off during the first half, on during the second
    '3'  on during the first half, off during the second
    '4'  possible outage ("maybe")
    '9'  no information (gray placeholder)

Any other character decodes like '9' so newer feed codes never break rendering.
"""

from __future__ import annotations

from typing import Dict, Optional, Tuple

from .models import HOURS_PER_DAY, HalfState, HourState

_CODES: Dict[str, Tuple[HalfState, HalfState]] = {
    "0": (HalfState.ON, HalfState.ON),
    "1": (HalfState.OFF, HalfState.OFF),
    "2": (HalfState.OFF, HalfState.ON),
    "3": (HalfState.ON, HalfState.OFF),
    "4": (HalfState.NEUTRAL, HalfState.NEUTRAL),
    "9": (HalfState.UNKNOWN, HalfState.UNKNOWN),
}

_FALLBACK = (HalfState.UNKNOWN, HalfState.UNKNOWN)

HALF_STATE_COLORS: Dict[HalfState, str] = {
    HalfState.ON: "#66BB6A",
    HalfState.OFF: "#EF5350",
    HalfState.NEUTRAL: "#BDBDBD",
    HalfState.UNKNOWN: "#888888",
}


def decode(code: str) -> Tuple[HalfState, HalfState]:
    """Return the (left, right) half states for a single schedule character."""
    return _CODES.get(code, _FALLBACK)


def decode_schedule(schedule: Optional[str]) -> Tuple[HourState, ...]:
    """
    Decode an encoded day into 24 HourState cells.

    Returns an empty tuple when the string is missing or shorter than 24 characters;
    characters past the 24th are ignored.
    """
    if not schedule or len(schedule) < HOURS_PER_DAY:
        return ()

    out = []
    for hour, code in enumerate(schedule[:HOURS_PER_DAY]):
        left, right = decode(code)
        out.append(HourState(hour=hour, left=left, right=right))
    return tuple(out)
