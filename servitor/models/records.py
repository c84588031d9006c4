"""
servitor/models/records.py -- Lenient Pydantic v2 models for reference data.

Faction and kill team documents come from an external data set with many
optional, inconsistently typed fields.  These models give every slot an
explicit type while staying total: ``from_raw`` never raises, list slots
that are not lists become empty, and list elements that are not mappings
are kept as ``None`` placeholders so that positional fallbacks downstream
still see each element's original index.

Both camelCase (as stored) and snake_case field names are accepted.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from servitor.ids import canonical_faction_id, canonical_killteam_id

logger = logging.getLogger(__name__)


def _scalar_text(value: Any) -> Optional[str]:
    """Coerce ids and labels: numbers become strings, blanks become None."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        value = str(value)
    if not isinstance(value, str):
        return None
    value = value.strip()
    return value or None


def _entry_list(value: Any) -> list:
    """Keep list positions; non-mapping elements become None placeholders."""
    if not isinstance(value, (list, tuple)):
        return []
    return [item if isinstance(item, (dict, BaseModel)) else None for item in value]


class _LenientModel(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True, frozen=True)


class RecordEntry(_LenientModel):
    """One element of a rules, ploys, equipment or operatives list."""

    id: Optional[str] = None
    name: Optional[str] = None
    title: Optional[str] = None

    @field_validator("id", "name", "title", mode="before")
    @classmethod
    def coerce_text(cls, v: Any) -> Optional[str]:
        return _scalar_text(v)

    @property
    def label(self) -> Optional[str]:
        return self.name or self.title


class CatalogEntry(_LenientModel):
    """A faction or kill team as listed in the selector catalog."""

    id: str = ""
    name: str = ""

    @field_validator("id", mode="before")
    @classmethod
    def canonical_id(cls, v: Any) -> str:
        return canonical_faction_id(v)

    @field_validator("name", mode="before")
    @classmethod
    def coerce_name(cls, v: Any) -> str:
        return _scalar_text(v) or ""


class FactionRecord(_LenientModel):
    """A faction document as consumed by the section index builder."""

    id: str = ""
    name: str = ""
    operative_selection: Any = Field(default=None, alias="operativeSelection")
    operatives: list[Optional[RecordEntry]] = Field(default_factory=list)
    rules: list[Optional[RecordEntry]] = Field(default_factory=list)
    strategic_ploys: list[Optional[RecordEntry]] = Field(default_factory=list, alias="strategicPloys")
    tactical_ploys: list[Optional[RecordEntry]] = Field(default_factory=list, alias="tacticalPloys")
    equipment: list[Optional[RecordEntry]] = Field(default_factory=list)
    tacops: list[Optional[RecordEntry]] = Field(default_factory=list)

    @field_validator("id", mode="before")
    @classmethod
    def canonical_id(cls, v: Any) -> str:
        return canonical_faction_id(v)

    @field_validator("name", mode="before")
    @classmethod
    def coerce_name(cls, v: Any) -> str:
        return _scalar_text(v) or ""

    @field_validator(
        "operatives", "rules", "strategic_ploys", "tactical_ploys",
        "equipment", "tacops", mode="before",
    )
    @classmethod
    def coerce_entries(cls, v: Any) -> list:
        return _entry_list(v)

    @classmethod
    def from_raw(cls, data: Any) -> FactionRecord:
        """Build a record from parsed JSON without ever raising."""
        return _build(cls, data)


# ------------------------------------------------------------------
# Kill team records
# ------------------------------------------------------------------

class OperativeTypeEntry(_LenientModel):
    op_type_id: Optional[str] = Field(default=None, alias="opTypeId")
    op_type_name: Optional[str] = Field(default=None, alias="opTypeName")
    op_name: Optional[str] = Field(default=None, alias="opName")

    @field_validator("op_type_id", "op_type_name", "op_name", mode="before")
    @classmethod
    def coerce_text(cls, v: Any) -> Optional[str]:
        return _scalar_text(v)


class PloyEntry(_LenientModel):
    ploy_id: Optional[str] = Field(default=None, alias="ployId")
    ploy_name: Optional[str] = Field(default=None, alias="ployName")
    ploy_type: Optional[str] = Field(default=None, alias="ployType")

    @field_validator("ploy_id", "ploy_name", "ploy_type", mode="before")
    @classmethod
    def coerce_text(cls, v: Any) -> Optional[str]:
        return _scalar_text(v)

    @property
    def is_strategic(self) -> bool:
        return self.ploy_type == "S"


class EquipmentEntry(_LenientModel):
    eq_id: Optional[str] = Field(default=None, alias="eqId")
    eq_name: Optional[str] = Field(default=None, alias="eqName")

    @field_validator("eq_id", "eq_name", mode="before")
    @classmethod
    def coerce_text(cls, v: Any) -> Optional[str]:
        return _scalar_text(v)


class KillteamRecord(_LenientModel):
    """A kill team document (the newer data set shape)."""

    killteam_id: str = Field(default="", alias="killteamId")
    killteam_name: str = Field(default="", alias="killteamName")
    composition: Any = None
    op_types: list[Optional[OperativeTypeEntry]] = Field(default_factory=list, alias="opTypes")
    ploys: list[Optional[PloyEntry]] = Field(default_factory=list)
    equipments: list[Optional[EquipmentEntry]] = Field(default_factory=list)
    default_roster: Any = Field(default=None, alias="defaultRoster")

    @field_validator("killteam_id", mode="before")
    @classmethod
    def canonical_id(cls, v: Any) -> str:
        return canonical_killteam_id(v)

    @field_validator("killteam_name", mode="before")
    @classmethod
    def coerce_name(cls, v: Any) -> str:
        return _scalar_text(v) or ""

    @field_validator("op_types", "ploys", "equipments", mode="before")
    @classmethod
    def coerce_entries(cls, v: Any) -> list:
        return _entry_list(v)

    @classmethod
    def from_raw(cls, data: Any) -> KillteamRecord:
        """Build a record from parsed JSON without ever raising."""
        return _build(cls, data)


def _build(model: type[BaseModel], data: Any):
    if isinstance(data, model):
        return data
    if not isinstance(data, dict):
        logger.warning("Expected a mapping for %s, got %s", model.__name__, type(data).__name__)
        return model()
    try:
        return model.model_validate(data)
    except ValidationError as exc:
        logger.warning(
            "Discarding unparseable %s (%d errors)", model.__name__, exc.error_count(),
        )
        return model()
