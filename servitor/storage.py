"""
servitor/storage.py -- Device-scoped key/value persistence ports.

The recency tracker never talks to a file or a settings backend directly;
it is handed a :class:`StoragePort`.  Two implementations ship here:

    MemoryStorage     In-process dict, used by tests and headless runs.
    JsonFileStorage   One JSON object file per device profile, written
                      atomically.  Lives under the platformdirs user data
                      directory when used by the desktop app.

Both honour the port contract: ``get`` returns ``None`` when the key is
absent or the medium is unreadable, and ``set`` swallows write failures
after logging them.
"""

from __future__ import annotations

import logging
import threading
from typing import Protocol, runtime_checkable

from servitor.utils import safe_read_json, safe_write_json

logger = logging.getLogger(__name__)


@runtime_checkable
class StoragePort(Protocol):
    """Synchronous string key/value store."""

    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str) -> None: ...


class MemoryStorage:
    """Dict-backed storage.

    ``fail_writes`` simulates a quota-exceeded medium: writes are logged and
    dropped, reads keep returning what was stored before.
    """

    def __init__(self, initial: dict[str, str] | None = None, *, fail_writes: bool = False):
        self._data: dict[str, str] = dict(initial or {})
        self.fail_writes = fail_writes
        self.write_count = 0

    def get(self, key: str) -> str | None:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self.write_count += 1
        if self.fail_writes:
            logger.warning("Storage write for %r rejected (quota exceeded)", key)
            return
        self._data[key] = value

    def snapshot(self) -> dict[str, str]:
        return dict(self._data)


class JsonFileStorage:
    """Persist string values in a single JSON object file.

    The file is re-read on every ``get`` so two stores pointed at the same
    path observe each other's writes, and written back in full on every
    ``set``.  Corrupt or non-object content reads as empty.
    """

    def __init__(self, path: str):
        self._path = str(path)
        self._lock = threading.Lock()

    @property
    def path(self) -> str:
        return self._path

    def get(self, key: str) -> str | None:
        with self._lock:
            data = self._load()
        value = data.get(key)
        return value if isinstance(value, str) else None

    def set(self, key: str, value: str) -> None:
        with self._lock:
            data = self._load()
            data[key] = value
            try:
                safe_write_json(self._path, data)
            except (OSError, TypeError, ValueError) as exc:
                logger.warning("Could not persist %r to %s: %s", key, self._path, exc)

    def _load(self) -> dict:
        data = safe_read_json(self._path, default={})
        if not isinstance(data, dict):
            logger.warning("Ignoring non-object storage file %s", self._path)
            return {}
        return data
