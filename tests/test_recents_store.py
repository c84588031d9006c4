"""
Tests for servitor_qt/services/recents_store.py -- canonicalizing, reactive recents.
"""

import json
from unittest.mock import MagicMock

import pytest

from servitor.recency import RECENT_FACTIONS_KEY, RECENT_KILLTEAMS_KEY
from servitor.storage import JsonFileStorage, MemoryStorage
from servitor_qt.services.recents_store import RecentsStore


@pytest.fixture(autouse=True)
def _reset_recents_store():
    RecentsStore.reset()
    yield
    RecentsStore.reset()


class TestSingleton:
    def test_instance_returns_same_object(self, memory_storage, _ensure_qapp):
        assert RecentsStore.instance(memory_storage) is RecentsStore.instance()

    def test_instance_requires_storage_on_first_call(self, _ensure_qapp):
        with pytest.raises(RuntimeError, match="requires storage"):
            RecentsStore.instance()


class TestFactionRecents:
    def test_prefixed_and_plain_ids_are_one_entry(self, memory_storage, _ensure_qapp):
        store = RecentsStore(memory_storage)
        store.record_faction("fac_kommandos")
        store.record_faction("pathfinders")
        assert store.record_faction("kommandos") == ["kommandos", "pathfinders"]

    def test_emits_new_list(self, memory_storage, _ensure_qapp):
        store = RecentsStore(memory_storage)
        receiver = MagicMock()
        store.faction_recents_changed.connect(receiver)
        store.record_faction("fac_a")
        receiver.assert_called_once_with(["a"])

    def test_blank_id_no_signal_no_write(self, memory_storage, _ensure_qapp):
        store = RecentsStore(memory_storage)
        receiver = MagicMock()
        store.faction_recents_changed.connect(receiver)
        store.record_faction("  ")
        receiver.assert_not_called()
        assert memory_storage.write_count == 0

    def test_capacity(self, memory_storage, _ensure_qapp):
        store = RecentsStore(memory_storage)
        for faction in ("a", "b", "c", "d"):
            store.record_faction(faction)
        assert store.recent_factions == ["d", "c", "b"]

    def test_legacy_prefixed_entries_read_canonical(self, _ensure_qapp):
        storage = MemoryStorage({RECENT_FACTIONS_KEY: json.dumps(["fac_a", "a", "b"])})
        assert RecentsStore(storage).recent_factions == ["a", "b"]

    def test_quota_failure_keeps_session_list(self, failing_storage, _ensure_qapp):
        store = RecentsStore(failing_storage)
        assert store.record_faction("a") == ["a"]
        assert store.recent_factions == ["a"]
        assert RecentsStore(failing_storage).recent_factions == []


class TestKillteamRecents:
    def test_separate_key(self, memory_storage, _ensure_qapp):
        store = RecentsStore(memory_storage)
        store.record_faction("a")
        store.record_killteam("IMP-AOD")
        assert json.loads(memory_storage.get(RECENT_KILLTEAMS_KEY)) == ["IMP-AOD"]
        assert json.loads(memory_storage.get(RECENT_FACTIONS_KEY)) == ["a"]

    def test_emits_signal(self, memory_storage, _ensure_qapp):
        store = RecentsStore(memory_storage)
        receiver = MagicMock()
        store.killteam_recents_changed.connect(receiver)
        store.record_killteam(" CHAOS-LEG ")
        receiver.assert_called_once_with(["CHAOS-LEG"])


class TestFilePersistence:
    def test_recents_survive_restart(self, tmp_path, _ensure_qapp):
        path = str(tmp_path / "recents.json")
        RecentsStore(JsonFileStorage(path)).record_faction("fac_kommandos")
        assert RecentsStore(JsonFileStorage(path)).recent_factions == ["kommandos"]
