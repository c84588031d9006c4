"""
Tests for servitor/ids.py -- faction and kill team id canonicalization.
"""

import pytest

from servitor.ids import canonical_faction_id, canonical_killteam_id, prefixed_faction_id


class TestCanonicalFactionId:
    @pytest.mark.parametrize(
        "raw, expected",
        [
            ("fac_kommandos", "kommandos"),
            ("kommandos", "kommandos"),
            ("  fac_kommandos ", "kommandos"),
            ("fac_fac_odd", "fac_odd"),
            ("", ""),
            ("   ", ""),
            (None, ""),
            (42, "42"),
            (True, ""),
            (["fac_x"], ""),
        ],
    )
    def test_canonical_forms(self, raw, expected):
        assert canonical_faction_id(raw) == expected

    def test_both_spellings_compare_equal(self):
        assert canonical_faction_id("fac_pathfinders") == canonical_faction_id("pathfinders")

    def test_prefix_not_stripped_mid_string(self):
        assert canonical_faction_id("old_fac_x") == "old_fac_x"


class TestPrefixedFactionId:
    def test_adds_prefix_once(self):
        assert prefixed_faction_id("kommandos") == "fac_kommandos"
        assert prefixed_faction_id("fac_kommandos") == "fac_kommandos"

    def test_blank_stays_blank(self):
        assert prefixed_faction_id("") == ""
        assert prefixed_faction_id(None) == ""


class TestCanonicalKillteamId:
    def test_strips_whitespace_only(self):
        assert canonical_killteam_id(" IMP-AOD ") == "IMP-AOD"

    def test_no_prefix_handling(self):
        assert canonical_killteam_id("fac_x") == "fac_x"

    def test_blank(self):
        assert canonical_killteam_id(None) == ""
