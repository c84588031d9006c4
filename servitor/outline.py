"""
servitor/outline.py -- Section outlines for the faction and kill team pages.

Turns a loaded record into the two-level "Jump to Section" outline: a fixed,
ordered list of top-level sections, each shown only when the record has
content for it, with one subsection per element of the backing list.

The builders are pure and total.  Missing or malformed slots simply omit
the corresponding section or subsection; nothing here raises on bad data.

Usage::

    from servitor.models import FactionRecord
    from servitor.outline import build_section_outline

    outline = build_section_outline(FactionRecord.from_raw(data))
    for section in outline:
        print(section.label, [child.label for child in section.children])
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Iterable, Optional, Sequence

from servitor.models.records import FactionRecord, KillteamRecord

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Subsection:
    id: str
    label: str


@dataclass(frozen=True)
class Section:
    id: str
    label: str
    children: tuple[Subsection, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class SectionKind:
    """A candidate top-level section.

    ``item_noun`` is used for position-based fallback labels
    ("Strategic Ploy 2").  ``None`` means the section has no subsections.
    """

    id: str
    label: str
    item_noun: Optional[str] = None


FACTION_SECTIONS: tuple[SectionKind, ...] = (
    SectionKind("operative-selection", "Operative Selection"),
    SectionKind("faction-rules", "Faction Rules", "Rule"),
    SectionKind("datacards", "Datacards", "Operative"),
    SectionKind("strategic-ploys", "Strategic Ploys", "Strategic Ploy"),
    SectionKind("tactical-ploys", "Tactical Ploys", "Tactical Ploy"),
    SectionKind("equipment", "Equipment", "Equipment"),
    SectionKind("tac-ops", "Tac Ops", "Tac Op"),
)

KILLTEAM_SECTIONS: tuple[SectionKind, ...] = (
    SectionKind("killteam-overview", "Overview"),
    SectionKind("killteam-composition", "Composition"),
    SectionKind("operative-types", "Operative Types", "Operative"),
    SectionKind("strategic-ploys", "Strategic Ploys", "Strategic Ploy"),
    SectionKind("firefight-ploys", "Firefight Ploys", "Firefight Ploy"),
    SectionKind("equipment", "Equipment", "Equipment"),
    SectionKind("default-roster", "Default Roster"),
)


# ------------------------------------------------------------------
# Presence checks
# ------------------------------------------------------------------

def has_content(value: Any) -> bool:
    """Uniform presence predicate for optional record slots.

    Lists, tuples, mappings and strings must be non-empty (strings after
    stripping); booleans must be ``True``; any other non-None value counts.
    """
    if value is None:
        return False
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        return bool(value.strip())
    if isinstance(value, (list, tuple, dict)):
        return len(value) > 0
    return True


# ------------------------------------------------------------------
# Subsection derivation
# ------------------------------------------------------------------

def build_children(
    kind: SectionKind,
    items: Sequence[Any],
    get_id: Callable[[Any], Optional[str]],
    get_label: Callable[[Any], Optional[str]],
) -> tuple[Subsection, ...]:
    """Derive subsections from *items*, keeping source order.

    ``None`` placeholders (elements that were not records) are dropped; the
    survivors keep their original index for synthetic ids and fallback
    labels.  A duplicate id within the section falls back to the synthetic
    ``{kind}-{index}`` id, then to a numeric suffix.
    """
    children: list[Subsection] = []
    seen: set[str] = set()
    noun = kind.item_noun or kind.label

    for index, item in enumerate(items):
        if item is None:
            continue

        synthetic = f"{kind.id}-{index}"
        child_id = get_id(item) or synthetic
        if child_id in seen:
            logger.debug("Duplicate subsection id %r in %s", child_id, kind.id)
            child_id = synthetic
        suffix = 2
        base = child_id
        while child_id in seen:
            child_id = f"{base}-{suffix}"
            suffix += 1

        label = get_label(item) or f"{noun} {index + 1}"
        seen.add(child_id)
        children.append(Subsection(child_id, label))

    return tuple(children)


def _entry_id(entry) -> Optional[str]:
    return entry.id


def _entry_label(entry) -> Optional[str]:
    return entry.label


# ------------------------------------------------------------------
# Faction outline
# ------------------------------------------------------------------

def build_section_outline(record: FactionRecord) -> list[Section]:
    """Return the outline for a faction page.

    Sections appear in :data:`FACTION_SECTIONS` order.  The selection
    section needs both a selection value and at least one operative.
    """
    if not isinstance(record, FactionRecord):
        record = FactionRecord.from_raw(record)

    list_slots = {
        "faction-rules": record.rules,
        "datacards": record.operatives,
        "strategic-ploys": record.strategic_ploys,
        "tactical-ploys": record.tactical_ploys,
        "equipment": record.equipment,
        "tac-ops": record.tacops,
    }

    outline: list[Section] = []
    for kind in FACTION_SECTIONS:
        if kind.id == "operative-selection":
            if has_content(record.operative_selection) and has_content(record.operatives):
                outline.append(Section(kind.id, kind.label))
            continue

        items = list_slots[kind.id]
        if not has_content(items):
            continue
        children = build_children(kind, items, _entry_id, _entry_label)
        outline.append(Section(kind.id, kind.label, children))

    return outline


# ------------------------------------------------------------------
# Kill team outline
# ------------------------------------------------------------------

def _prefixed(prefix: str, value: Optional[str]) -> Optional[str]:
    return f"{prefix}-{value}" if value else None


def build_killteam_outline(record: KillteamRecord) -> list[Section]:
    """Return the outline for a kill team page.

    The overview is always present.  Ploys are split by type: ``S`` is
    strategic, any other non-empty type is a firefight ploy; ploys without
    a type are listed under neither.
    """
    if not isinstance(record, KillteamRecord):
        record = KillteamRecord.from_raw(record)
    kinds = {kind.id: kind for kind in KILLTEAM_SECTIONS}
    outline: list[Section] = [Section("killteam-overview", kinds["killteam-overview"].label)]

    if has_content(record.composition):
        outline.append(Section("killteam-composition", kinds["killteam-composition"].label))

    if has_content(record.op_types):
        kind = kinds["operative-types"]
        children = build_children(
            kind,
            record.op_types,
            lambda op: _prefixed("operative", op.op_type_id),
            lambda op: op.op_type_name or op.op_name,
        )
        outline.append(Section(kind.id, kind.label, children))

    ploys = [p for p in record.ploys if p is not None]
    strategic = [p for p in ploys if p.is_strategic]
    firefight = [p for p in ploys if p.ploy_type and not p.is_strategic]
    for kind_id, group in (("strategic-ploys", strategic), ("firefight-ploys", firefight)):
        if not group:
            continue
        kind = kinds[kind_id]
        children = build_children(
            kind,
            group,
            lambda ploy: _prefixed("ploy", ploy.ploy_id),
            lambda ploy: ploy.ploy_name,
        )
        outline.append(Section(kind.id, kind.label, children))

    if has_content(record.equipments):
        kind = kinds["equipment"]
        children = build_children(
            kind,
            record.equipments,
            lambda eq: _prefixed("equipment", eq.eq_id),
            lambda eq: eq.eq_name,
        )
        outline.append(Section(kind.id, kind.label, children))

    if has_content(record.default_roster):
        outline.append(Section("default-roster", kinds["default-roster"].label))

    return outline


def flatten_outline(outline: Iterable[Section]) -> list[tuple[str, str, int]]:
    """Return ``(id, label, depth)`` rows for a flat jump list."""
    rows: list[tuple[str, str, int]] = []
    for section in outline:
        rows.append((section.id, section.label, 0))
        for child in section.children:
            rows.append((child.id, child.label, 1))
    return rows
