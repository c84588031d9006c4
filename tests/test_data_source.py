"""
Tests for servitor_qt/services/data_source.py -- catalog and faction file loading.
"""

import os

from servitor_qt.services.data_source import LocalDataSource


class TestCatalog:
    def test_sorted_by_name_with_canonical_ids(self, data_dir):
        catalog = LocalDataSource(data_dir).load_catalog()
        assert [e.name for e in catalog] == ["Kommandos", "Legionaries", "Pathfinders"]
        assert [e.id for e in catalog] == ["kommandos", "legionaries", "pathfinders"]

    def test_missing_catalog_is_empty(self, tmp_path):
        assert LocalDataSource(str(tmp_path)).load_catalog() == []

    def test_non_list_catalog_is_empty(self, tmp_path):
        (tmp_path / "factions.json").write_text('{"id": "a"}', encoding="utf-8")
        assert LocalDataSource(str(tmp_path)).load_catalog() == []

    def test_entries_without_id_dropped(self, tmp_path):
        (tmp_path / "factions.json").write_text(
            '[{"name": "Nameless"}, {"id": "a", "name": "A"}, "junk"]', encoding="utf-8",
        )
        assert [e.id for e in LocalDataSource(str(tmp_path)).load_catalog()] == ["a"]


class TestLoadFaction:
    def test_plain_filename(self, data_dir):
        record = LocalDataSource(data_dir).load_faction("fac_kommandos")
        assert record is not None
        assert record.id == "kommandos"
        assert record.name == "Kommandos"

    def test_prefixed_filename_fallback(self, data_dir):
        record = LocalDataSource(data_dir).load_faction("pathfinders")
        assert record is not None
        assert record.operatives[0].name == "Shas'ui"

    def test_missing_faction(self, data_dir):
        assert LocalDataSource(data_dir).load_faction("legionaries") is None

    def test_blank_id(self, data_dir):
        assert LocalDataSource(data_dir).load_faction("") is None

    def test_record_without_id_gets_requested_id(self, data_dir):
        with open(os.path.join(data_dir, "factions", "wyrmblade.json"), "w", encoding="utf-8") as fh:
            fh.write('{"name": "Wyrmblade"}')
        assert LocalDataSource(data_dir).load_faction("fac_wyrmblade").id == "wyrmblade"

    def test_corrupt_file_reads_absent(self, data_dir):
        with open(os.path.join(data_dir, "factions", "broken.json"), "w", encoding="utf-8") as fh:
            fh.write("{oops")
        assert LocalDataSource(data_dir).load_faction("broken") is None


class TestKillteams:
    def test_catalog_sorted_with_verbatim_ids(self, data_dir):
        catalog = LocalDataSource(data_dir).load_killteam_catalog()
        assert [e.name for e in catalog] == ["Angels of Death", "Chaos Legionaries"]
        assert [e.id for e in catalog] == ["IMP-AOD", "CHAOS-LEG"]

    def test_missing_catalog_is_empty(self, tmp_path):
        assert LocalDataSource(str(tmp_path)).load_killteam_catalog() == []

    def test_load_killteam(self, data_dir):
        record = LocalDataSource(data_dir).load_killteam(" IMP-AOD ")
        assert record is not None
        assert record.killteam_name == "Angels of Death"
        assert len(record.ploys) == 3

    def test_missing_killteam(self, data_dir):
        assert LocalDataSource(data_dir).load_killteam("CHAOS-LEG") is None

    def test_blank_id(self, data_dir):
        assert LocalDataSource(data_dir).load_killteam("") is None

    def test_record_without_id_gets_requested_id(self, data_dir):
        with open(os.path.join(data_dir, "killteams", "XEN-HRN.json"), "w", encoding="utf-8") as fh:
            fh.write('{"killteamName": "Hearthkyn Salvagers"}')
        assert LocalDataSource(data_dir).load_killteam("XEN-HRN").killteam_id == "XEN-HRN"
