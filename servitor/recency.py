"""
servitor/recency.py -- Bounded most-recently-used list over a storage port.

The tracker owns the capacity and dedup policy; the storage port only sees
a JSON-encoded list of strings under one key.  The list is read once when
the tracker is created and written back synchronously after every
``touch``.  Storage failures never reach the caller: a corrupt value reads
as "no recents" and a failed write still returns the updated list, which
stays visible for the rest of the session.

Usage::

    from servitor.recency import RecencyTracker, RECENT_FACTIONS_KEY
    from servitor.storage import MemoryStorage

    tracker = RecencyTracker(MemoryStorage(), RECENT_FACTIONS_KEY)
    tracker.touch("kommandos")      # -> ["kommandos"]
    tracker.current()
"""

from __future__ import annotations

import json
import logging
from typing import Iterable

from servitor.models.records import CatalogEntry
from servitor.storage import StoragePort
from servitor.utils import parse_json_list

logger = logging.getLogger(__name__)

RECENT_FACTIONS_KEY = "kt-servitor-recent-factions"
RECENT_KILLTEAMS_KEY = "kt-servitor-recent-killteams"
MAX_RECENT = 3


class RecencyTracker:
    """Most-recent-first, duplicate-free list of at most ``capacity`` ids.

    Ids are compared by exact string equality.  Callers canonicalize
    before calling :meth:`touch`.
    """

    def __init__(self, storage: StoragePort, key: str, capacity: int = MAX_RECENT):
        if capacity < 1:
            raise ValueError(f"capacity must be positive, got {capacity}")
        self._storage = storage
        self._key = key
        self._capacity = capacity
        self._items: list[str] = self._load()

    @property
    def key(self) -> str:
        return self._key

    @property
    def capacity(self) -> int:
        return self._capacity

    def current(self) -> list[str]:
        """Return a copy of the current list, most recent first."""
        return list(self._items)

    def touch(self, item_id: str) -> list[str]:
        """Move *item_id* to the front, evict past capacity, persist.

        Blank ids are ignored and the current list is returned unchanged.
        """
        if not isinstance(item_id, str) or not item_id:
            return self.current()

        updated = [item_id] + [existing for existing in self._items if existing != item_id]
        self._items = updated[: self._capacity]
        self._persist()
        return self.current()

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def _load(self) -> list[str]:
        try:
            raw = self._storage.get(self._key)
        except Exception:
            logger.warning("Recents storage unavailable for %r", self._key, exc_info=True)
            return []
        if raw is None:
            return []

        stored = parse_json_list(raw)
        if stored is None:
            logger.warning("Ignoring malformed recents under %r", self._key)
            return []

        items: list[str] = []
        for value in stored:
            if isinstance(value, str) and value and value not in items:
                items.append(value)
        return items[: self._capacity]

    def _persist(self) -> None:
        try:
            self._storage.set(self._key, json.dumps(self._items))
        except Exception:
            logger.warning("Failed to save recents under %r", self._key, exc_info=True)


def resolve_recent(
    recent_ids: Iterable[str],
    catalog: Iterable[CatalogEntry],
    exclude: str | None = None,
) -> list[CatalogEntry]:
    """Map recent ids to catalog entries, in recency order.

    Ids missing from the catalog are skipped, as is *exclude* (the entry
    currently on screen).  All ids are expected in canonical form.
    """
    by_id = {}
    for entry in catalog:
        by_id.setdefault(entry.id, entry)

    resolved = []
    for item_id in recent_ids:
        if item_id == exclude:
            continue
        entry = by_id.get(item_id)
        if entry is not None:
            resolved.append(entry)
    return resolved
