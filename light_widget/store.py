# light_widget/store.py
"""
Key/value store holding the widget data shared with the fetch pipeline.

Keys:
  - schedule_<GROUP>            today's encoded schedule
  - schedule_tomorrow_<GROUP>   tomorrow's encoded schedule
  - last_update_date            YYYY-M-D of the last successful fetch
  - last_update_time            display string of the last successful fetch
  - is_loading_<INDEX>          refresh spinner flag, per group index

Single keys are read and written atomically; there are no multi-key transactions.
"""

from __future__ import annotations

import json
import os
import tempfile
import threading
from typing import Any, Dict, Mapping, Optional

from .models import GROUP_INDEX, group_index

LAST_UPDATE_DATE = "last_update_date"
LAST_UPDATE_TIME = "last_update_time"


def loading_key(index: int) -> str:
    return f"is_loading_{index}"


class StoreError(Exception):
    """Raised when the backing store cannot be read or written."""


class MemoryStore:
    """In-process store; the default for tests and for running without a data file."""

    def __init__(self, initial: Optional[Mapping[str, Any]] = None) -> None:
        self._data: Dict[str, Any] = dict(initial or {})
        self._lock = threading.Lock()

    def _read(self) -> Dict[str, Any]:
        return self._data

    def _write(self, data: Dict[str, Any]) -> None:
        self._data = data

    def get_string(self, key: str, default: str = "") -> str:
        with self._lock:
            value = self._read().get(key)
        return value if isinstance(value, str) else default

    def get_bool(self, key: str, default: bool = False) -> bool:
        with self._lock:
            value = self._read().get(key)
        return value if isinstance(value, bool) else default

    def put_string(self, key: str, value: str) -> None:
        self.put_many({key: value})

    def put_bool(self, key: str, value: bool) -> None:
        self.put_many({key: bool(value)})

    def put_many(self, values: Mapping[str, Any]) -> None:
        """Write several keys; each key lands atomically, the batch is not a transaction."""
        with self._lock:
            data = dict(self._read())
            data.update(values)
            self._write(data)


class JsonFileStore(MemoryStore):
    """
    Store persisted as a single JSON document.

    Every write goes to a temp file in the same directory and is moved into place
    with os.replace, so readers never see a half-written file.
    """

    def __init__(self, path: str) -> None:
        super().__init__()
        self.path = path

    def _read(self) -> Dict[str, Any]:
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except FileNotFoundError:
            return {}
        except (OSError, ValueError) as e:
            raise StoreError(f"cannot read {self.path}: {e}") from e
        return data if isinstance(data, dict) else {}

    def _write(self, data: Dict[str, Any]) -> None:
        directory = os.path.dirname(os.path.abspath(self.path))
        try:
            fd, tmp = tempfile.mkstemp(prefix=".widget-", suffix=".json", dir=directory)
        except OSError as e:
            raise StoreError(f"cannot write {self.path}: {e}") from e

        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(data, f, ensure_ascii=False, indent=2)
            os.replace(tmp, self.path)
        except (OSError, TypeError, ValueError) as e:
            try:
                os.unlink(tmp)
            except FileNotFoundError:
                pass
            raise StoreError(f"cannot write {self.path}: {e}") from e


class LoadingFlags:
    """
    Typed access to the per-group refresh flag.

    The flag is keyed by group index, so every on-screen instance of a group sees
    the same value.
    """

    def __init__(self, store: MemoryStore) -> None:
        self.store = store

    def get_loading(self, group: str) -> bool:
        return self.store.get_bool(loading_key(group_index(group)), False)

    def set_loading(self, group: str, value: bool) -> None:
        self.store.put_bool(loading_key(group_index(group)), value)

    def clear_all(self) -> None:
        """Reset every group's flag (used by the fetch pipeline on completion)."""
        self.store.put_many({loading_key(i): False for i in GROUP_INDEX.values()})
