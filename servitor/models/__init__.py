"""
servitor/models/ -- Pydantic v2 models for the reference data documents.

Submodules:
    records     Faction, kill team and catalog records with lenient parsing.
"""

from servitor.models.records import (
    CatalogEntry,
    EquipmentEntry,
    FactionRecord,
    KillteamRecord,
    OperativeTypeEntry,
    PloyEntry,
    RecordEntry,
)

__all__ = [
    "CatalogEntry",
    "EquipmentEntry",
    "FactionRecord",
    "KillteamRecord",
    "OperativeTypeEntry",
    "PloyEntry",
    "RecordEntry",
]
