"""
servitor_qt/services/data_source.py -- Read reference data from a local folder.

Layout::

    <data_dir>/factions.json            [{"id": "fac_kommandos", "name": "Kommandos"}, ...]
    <data_dir>/factions/<id>.json       one faction document per file
    <data_dir>/killteams.json           [{"killteamId": "IMP-AOD", "killteamName": "..."}, ...]
    <data_dir>/killteams/<id>.json      one kill team document per file

Faction files may be named with or without the ``fac_`` prefix; lookups
try the canonical name first.  Missing or corrupt files read as absent.
"""

from __future__ import annotations

import logging
import os

from servitor.ids import canonical_faction_id, canonical_killteam_id, prefixed_faction_id
from servitor.models.records import CatalogEntry, FactionRecord, KillteamRecord
from servitor.utils import safe_read_json

logger = logging.getLogger(__name__)


def _sorted_catalog(entries: list[CatalogEntry]) -> list[CatalogEntry]:
    entries = [entry for entry in entries if entry.id]
    return sorted(entries, key=lambda entry: (entry.name or entry.id).lower())


class LocalDataSource:
    """Catalog, faction and kill team documents from a directory on disk."""

    def __init__(self, data_dir: str):
        self._data_dir = data_dir

    @property
    def data_dir(self) -> str:
        return self._data_dir

    def _read_list(self, filename: str) -> list:
        raw = safe_read_json(os.path.join(self._data_dir, filename), default=[])
        if not isinstance(raw, list):
            logger.warning("%s is not a list; ignoring it", filename)
            return []
        return [item for item in raw if isinstance(item, dict)]

    # ------------------------------------------------------------------
    # Factions
    # ------------------------------------------------------------------

    def load_catalog(self) -> list[CatalogEntry]:
        """Return the faction catalog sorted by name; empty if unavailable."""
        return _sorted_catalog(
            [CatalogEntry.model_validate(item) for item in self._read_list("factions.json")]
        )

    def load_faction(self, faction_id: str) -> FactionRecord | None:
        """Return the faction record for *faction_id*, or ``None`` if absent."""
        canonical = canonical_faction_id(faction_id)
        if not canonical:
            return None
        folder = os.path.join(self._data_dir, "factions")
        for filename in (canonical, prefixed_faction_id(canonical)):
            raw = safe_read_json(os.path.join(folder, f"{filename}.json"))
            if raw is not None:
                record = FactionRecord.from_raw(raw)
                if not record.id:
                    record = record.model_copy(update={"id": canonical})
                return record
        logger.info("No data file for faction %r in %s", canonical, folder)
        return None

    # ------------------------------------------------------------------
    # Kill teams
    # ------------------------------------------------------------------

    def load_killteam_catalog(self) -> list[CatalogEntry]:
        """Return the kill team catalog sorted by name; empty if unavailable."""
        entries = []
        for item in self._read_list("killteams.json"):
            record = KillteamRecord.from_raw(item)
            # Bypasses the faction-id validator: kill team ids are kept verbatim.
            entries.append(CatalogEntry.model_construct(id=record.killteam_id, name=record.killteam_name))
        return _sorted_catalog(entries)

    def load_killteam(self, killteam_id: str) -> KillteamRecord | None:
        """Return the kill team record for *killteam_id*, or ``None`` if absent."""
        canonical = canonical_killteam_id(killteam_id)
        if not canonical:
            return None
        path = os.path.join(self._data_dir, "killteams", f"{canonical}.json")
        raw = safe_read_json(path)
        if raw is None:
            logger.info("No data file for kill team %r at %s", canonical, path)
            return None
        record = KillteamRecord.from_raw(raw)
        if not record.killteam_id:
            record = record.model_copy(update={"killteam_id": canonical})
        return record
