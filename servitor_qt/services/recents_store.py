"""
servitor_qt/services/recents_store.py -- Reactive recents for the selectors.

Wraps two :class:`~servitor.recency.RecencyTracker` instances (factions and
kill teams) over one storage port and emits a Qt signal after every
change.  This is the boundary where raw ids from routes and the data set
are canonicalized, so the trackers only ever see canonical ids.

Usage::

    from servitor_qt.services.recents_store import RecentsStore

    store = RecentsStore.instance(storage)
    store.faction_recents_changed.connect(selector.set_recents)
    bus.faction_selected.connect(store.record_faction)
"""

from __future__ import annotations

import logging
import threading

from PySide6.QtCore import QObject, Signal, Slot

from servitor.ids import canonical_faction_id, canonical_killteam_id
from servitor.recency import (
    MAX_RECENT,
    RECENT_FACTIONS_KEY,
    RECENT_KILLTEAMS_KEY,
    RecencyTracker,
)
from servitor.storage import StoragePort

logger = logging.getLogger(__name__)


def _canonical_unique(ids: list[str], canonicalize) -> list[str]:
    """Canonicalize stored ids, collapsing spellings that now coincide."""
    result: list[str] = []
    for raw in ids:
        value = canonicalize(raw)
        if value and value not in result:
            result.append(value)
    return result


class RecentsStore(QObject):
    """Reactive wrapper around the faction and kill team recency lists.

    Signals
    -------
    faction_recents_changed(list)
        Emitted after a faction is recorded. Payload is the new list.
    killteam_recents_changed(list)
        Emitted after a kill team is recorded. Payload is the new list.
    """

    faction_recents_changed = Signal(list)
    killteam_recents_changed = Signal(list)

    _instance: RecentsStore | None = None
    _singleton_lock = threading.Lock()

    def __init__(self, storage: StoragePort, parent: QObject | None = None, capacity: int = MAX_RECENT):
        super().__init__(parent)
        self._storage = storage
        self._factions = RecencyTracker(storage, RECENT_FACTIONS_KEY, capacity)
        self._killteams = RecencyTracker(storage, RECENT_KILLTEAMS_KEY, capacity)

    @classmethod
    def instance(cls, storage: StoragePort | None = None) -> RecentsStore:
        """Return the singleton RecentsStore instance."""
        if cls._instance is None:
            with cls._singleton_lock:
                if cls._instance is None:
                    if storage is None:
                        raise RuntimeError("RecentsStore.instance() requires storage on first call.")
                    cls._instance = cls(storage)
        return cls._instance

    @classmethod
    def reset(cls) -> None:
        """Reset the singleton (for testing)."""
        with cls._singleton_lock:
            if cls._instance is not None:
                cls._instance.deleteLater()
            cls._instance = None

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    @property
    def recent_factions(self) -> list[str]:
        # Lists written before canonicalization may still hold fac_ spellings.
        return _canonical_unique(self._factions.current(), canonical_faction_id)

    @property
    def recent_killteams(self) -> list[str]:
        return _canonical_unique(self._killteams.current(), canonical_killteam_id)

    # ------------------------------------------------------------------
    # Mutations (emit signals)
    # ------------------------------------------------------------------

    @Slot(str)
    def record_faction(self, raw_id: str) -> list[str]:
        """Record a faction visit and emit :attr:`faction_recents_changed`."""
        faction_id = canonical_faction_id(raw_id)
        if not faction_id:
            return self.recent_factions
        self._factions.touch(faction_id)
        recents = self.recent_factions
        logger.debug("Recent factions: %s", recents)
        self.faction_recents_changed.emit(recents)
        return recents

    @Slot(str)
    def record_killteam(self, raw_id: str) -> list[str]:
        """Record a kill team visit and emit :attr:`killteam_recents_changed`."""
        killteam_id = canonical_killteam_id(raw_id)
        if not killteam_id:
            return self.recent_killteams
        self._killteams.touch(killteam_id)
        recents = self.recent_killteams
        logger.debug("Recent kill teams: %s", recents)
        self.killteam_recents_changed.emit(recents)
        return recents
