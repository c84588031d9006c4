"""
Shared pytest fixtures for the Servitor test suite.

Provides:
    - memory_storage: an empty in-process storage port
    - failing_storage: a storage port whose writes are rejected
    - _ensure_qapp: the session QApplication (from pytest-qt)
    - sample_faction_data: a faction document with every optional slot
    - sample_killteam_data: a kill team document in the newer data shape
    - data_dir: a temporary reference data folder (catalogs + record files)
"""

import json
import os
import sys
from pathlib import Path

import pytest

# ---------------------------------------------------------------------------
# Ensure servitor/ is importable regardless of where pytest is invoked
# ---------------------------------------------------------------------------

PROJECT_ROOT = Path(__file__).resolve().parent.parent

if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

# Widget tests run without a display.
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from servitor.storage import MemoryStorage  # noqa: E402


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def memory_storage():
    """Return an empty MemoryStorage."""
    return MemoryStorage()


@pytest.fixture
def failing_storage():
    """Return a MemoryStorage that rejects every write."""
    return MemoryStorage(fail_writes=True)


@pytest.fixture
def _ensure_qapp(qapp):
    """Provide the shared QApplication for signal/slot tests.

    Uses pytest-qt's ``qapp`` so that widget tests later in the same
    session find a full QApplication rather than a bare QCoreApplication.
    """
    yield qapp


@pytest.fixture
def sample_faction_data():
    """Return a faction document exercising every outline section."""
    return {
        "id": "fac_kommandos",
        "name": "Kommandos",
        "operativeSelection": True,
        "rules": [
            {"id": "sneaky-gits", "name": "Sneaky Gits"},
            {"title": "Waaagh!"},
        ],
        "operatives": [
            {"id": "boss-nob", "name": "Kommando Boss Nob"},
            {"id": "slasha", "name": "Slasha Boy"},
        ],
        "strategicPloys": [{"id": "dakka", "name": "Dakka Dakka Dakka"}],
        "tacticalPloys": [{"id": "krump", "name": "Krump 'Em"}],
        "equipment": [{"id": "choppa", "name": "Choppa"}],
        "tacops": [{"id": "sabotage", "title": "Sabotage"}],
    }


@pytest.fixture
def sample_killteam_data():
    """Return a kill team document with ploys of both types."""
    return {
        "killteamId": "IMP-AOD",
        "killteamName": "Angels of Death",
        "composition": "1 Sergeant and 5 Warriors",
        "opTypes": [
            {"opTypeId": "sgt", "opTypeName": "Sergeant"},
            {"opTypeId": "war", "opName": "Warrior"},
        ],
        "ploys": [
            {"ployId": "p1", "ployName": "Combat Doctrine", "ployType": "S"},
            {"ployId": "p2", "ployName": "Transhuman", "ployType": "F"},
            {"ployId": "p3", "ployName": "Adaptive", "ployType": "S"},
        ],
        "equipments": [{"eqId": "grenade", "eqName": "Frag Grenade"}],
        "defaultRoster": {"name": "Starter"},
    }


@pytest.fixture
def data_dir(tmp_path, sample_faction_data, sample_killteam_data):
    """Create a reference data folder with catalogs, two factions and a kill team.

    One faction file is stored under its prefixed name to exercise the
    lookup fallback.  The kill team catalog lists CHAOS-LEG without a file.
    """
    root = tmp_path / "data"
    factions = root / "factions"
    factions.mkdir(parents=True)

    catalog = [
        {"id": "fac_kommandos", "name": "Kommandos"},
        {"id": "pathfinders", "name": "Pathfinders"},
        {"id": "fac_legionaries", "name": "Legionaries"},
    ]
    with open(str(root / "factions.json"), "w", encoding="utf-8") as fh:
        json.dump(catalog, fh)

    with open(str(factions / "kommandos.json"), "w", encoding="utf-8") as fh:
        json.dump(sample_faction_data, fh)

    pathfinders = {
        "id": "pathfinders",
        "name": "Pathfinders",
        "operatives": [{"name": "Shas'ui"}],
    }
    with open(str(factions / "fac_pathfinders.json"), "w", encoding="utf-8") as fh:
        json.dump(pathfinders, fh)

    killteams = root / "killteams"
    killteams.mkdir()
    killteam_catalog = [
        {"killteamId": "IMP-AOD", "killteamName": "Angels of Death"},
        {"killteamId": "CHAOS-LEG", "killteamName": "Chaos Legionaries"},
    ]
    with open(str(root / "killteams.json"), "w", encoding="utf-8") as fh:
        json.dump(killteam_catalog, fh)
    with open(str(killteams / "IMP-AOD.json"), "w", encoding="utf-8") as fh:
        json.dump(sample_killteam_data, fh)

    return str(root)
