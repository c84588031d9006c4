"""
servitor/ids.py -- Identifier canonicalization.

Faction ids reach the engine in two spellings: with the ``fac_`` variant
prefix used by the reference data set (``fac_kommandos``) and without it,
as they appear in routes (``kommandos``).  Every boundary where an external
id enters the engine runs it through one of these functions, so the
recency tracker and the outline builder only ever compare canonical ids.

Usage::

    from servitor.ids import canonical_faction_id

    canonical_faction_id("fac_kommandos")   # -> "kommandos"
    canonical_faction_id(" kommandos ")     # -> "kommandos"
"""

from __future__ import annotations

from typing import Any

FACTION_PREFIX = "fac_"


def _clean(raw: Any) -> str:
    if raw is None or isinstance(raw, bool):
        return ""
    if isinstance(raw, (int, float)):
        raw = str(raw)
    if not isinstance(raw, str):
        return ""
    return raw.strip()


def canonical_faction_id(raw: Any) -> str:
    """Return the canonical (unprefixed) form of a faction id.

    Blank, ``None`` and non-scalar values canonicalize to ``""``.  Only one
    leading prefix is stripped.
    """
    value = _clean(raw)
    if value.startswith(FACTION_PREFIX):
        value = value[len(FACTION_PREFIX):]
    return value


def prefixed_faction_id(raw: Any) -> str:
    """Return the ``fac_``-prefixed form used by the stored data set."""
    value = canonical_faction_id(raw)
    return f"{FACTION_PREFIX}{value}" if value else ""


def canonical_killteam_id(raw: Any) -> str:
    """Kill team ids carry no variant prefix; only whitespace is trimmed."""
    return _clean(raw)
