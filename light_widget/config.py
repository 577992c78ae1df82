# light_widget/config.py
"""
Configuration for the light schedule widget.

This module centralizes all tunable settings (timezone, data file, feed URL and timeout,
midnight re-render time and the widget instances registered at startup).
"""

from __future__ import annotations

from dataclasses import dataclass, field
import os
from typing import Dict, List


def _env_int(name: str, default: int) -> int:
    """Read an integer environment variable, returning default on missing/invalid values."""
    try:
        return int(os.getenv(name, str(default)))
    except Exception:
        return default


def _env_bool(name: str, default: bool) -> bool:
    """
    Read a boolean-ish environment variable.

    Treats these as false: 0, false, no, off
    """
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return raw.strip().lower() not in ("0", "false", "no", "off")


def _env_list(name: str, default: List[str]) -> List[str]:
    """
    Read a comma-delimited string list from the environment.

    Example:
      WIDGET_INSTANCES="1=GPV1.1,2=GPV3.2"
    """
    raw = os.getenv(name)
    if not raw:
        return default
    out = [x.strip() for x in raw.split(",") if x.strip()]
    return out or default


def _env_instances(name: str) -> Dict[str, str]:
    """
    Read ID=GROUP pairs describing the widget instances to register at startup.

    Malformed entries are skipped.
    """
    pairs: Dict[str, str] = {}
    for part in _env_list(name, []):
        if "=" not in part:
            continue
        instance_id, group = part.split("=", 1)
        instance_id = instance_id.strip()
        group = group.strip()
        if instance_id and group:
            pairs[instance_id] = group
    return pairs


@dataclass(frozen=True)
class AppConfig:
    """Immutable app configuration."""

    # Core settings
    tz: str = os.getenv("TZ", "Europe/Kyiv")
    store_path: str = os.getenv("STORE_PATH", "widget_data.json")

    # Fetch pipeline (empty URL disables fetching; refresh then only toggles the spinner)
    feed_url: str = os.getenv("FEED_URL", "")
    feed_timeout_seconds: int = _env_int("FEED_TIMEOUT_SECONDS", 10)

    # Daily re-render
    midnight_hour: int = _env_int("MIDNIGHT_HOUR", 0)
    midnight_minute: int = _env_int("MIDNIGHT_MINUTE", 1)
    exact_wake: bool = _env_bool("EXACT_WAKE", True)

    # instance id -> group
    instances: Dict[str, str] = field(default_factory=lambda: _env_instances("WIDGET_INSTANCES"))

    def __post_init__(self):
        """Clamp the midnight time into a valid clock time."""
        # dataclass frozen => use object.__setattr__
        if not 0 <= self.midnight_hour <= 23:
            object.__setattr__(self, "midnight_hour", 0)
        if not 0 <= self.midnight_minute <= 59:
            object.__setattr__(self, "midnight_minute", 1)
