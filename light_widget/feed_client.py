# light_widget/feed_client.py
"""
Thin HTTP client for the schedule feed consumed by the fetch pipeline.
"""

from __future__ import annotations

import requests
from typing import Any, Dict


class FeedError(Exception):
    """Raised when the feed payload is unreachable or malformed."""


class FeedClient:
    """A minimal client retrieving the encoded schedules document."""

    def __init__(self, url: str, timeout: int = 10) -> None:
        self.url = url
        self.timeout = timeout
        self._headers = {"User-Agent": "light-schedule-widget/1.0", "Accept": "application/json"}

    def get_json(self) -> Dict[str, Any]:
        """
        GET the feed URL and return parsed JSON.

        Raises:
            FeedError on transport errors, non-2xx responses or non-object payloads.
        """
        try:
            r = requests.get(self.url, timeout=self.timeout, headers=self._headers)
            r.raise_for_status()
            payload = r.json()
        except (requests.RequestException, ValueError) as e:
            raise FeedError(f"feed request failed: {e}") from e

        if not isinstance(payload, dict):
            raise FeedError("feed payload is not a JSON object")
        return payload
