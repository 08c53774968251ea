"""Spell catalog records and lookup helpers.

The catalog itself is supplied by the consuming application through the
SpellCatalog protocol. Known and prepared spells are tracked by name only,
so nothing here is consulted when spells are learned or prepared;
``unknown_to_catalog`` reports names the catalog does not list.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Sequence
from typing import Protocol, runtime_checkable

from pydantic import BaseModel, ConfigDict, Field, field_validator

from dnd_sheet.core.logging import get_logger


logger = get_logger(__name__)

STANDARD_SOURCE_KEY = "player's handbook"
UNEARTHED_ARCANA_SOURCE_KEY = "unearthed arcana"
SOURCE_LABELS = {
    STANDARD_SOURCE_KEY: "Player's Handbook",
    UNEARTHED_ARCANA_SOURCE_KEY: "Unearthed Arcana",
}

UNEARTHED_ARCANA_PATTERN = re.compile(r"\bunearthed\s+arcana\b", re.IGNORECASE)
PLAYERS_HANDBOOK_PATTERN = re.compile(r"^player'?s handbook$", re.IGNORECASE)
COMPONENT_SUMMARY_LIMIT = 12


class Spell(BaseModel):
    """A spell record from the catalog.

    Attributes:
        name: Spell name, used as the identifier.
        level: 0 for cantrips, otherwise 1-9.
        school: School of magic.
        casting_time: Casting time text.
        range: Range text.
        components: Component text, e.g. 'V, S, M (a pinch of salt)'.
        duration: Duration text.
        description: Rules text.
        source: Source book, e.g. "Player's Handbook".
        classes: Comma-separated class names.
    """

    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)

    name: str = Field(..., min_length=1)
    level: int = Field(default=0, ge=0, le=9)
    school: str = ""
    casting_time: str = Field(default="", alias="castingTime")
    range: str = ""
    components: str = ""
    duration: str = ""
    description: str = ""
    source: str = ""
    classes: str = ""

    @field_validator("level", mode="before")
    @classmethod
    def coerce_level(cls, value: object) -> object:
        if value is None or value == "":
            return 0
        return value

    @property
    def class_list(self) -> list[str]:
        return [name.strip().lower() for name in self.classes.split(",") if name.strip()]

    def is_for_class(self, class_name: str) -> bool:
        return class_name.strip().lower() in self.class_list


@runtime_checkable
class SpellCatalog(Protocol):
    """Source of spell records."""

    def all_spells(self) -> Sequence[Spell]:
        """Return every spell in the catalog."""
        ...


class StaticSpellCatalog:
    """An in-memory catalog."""

    def __init__(self, spells: Iterable[Spell | dict] = ()) -> None:
        self._spells = tuple(spell if isinstance(spell, Spell) else Spell.model_validate(spell) for spell in spells)
        self._names = frozenset(spell.name for spell in self._spells)
        logger.debug("Spell catalog loaded", spell_count=len(self._spells))

    def all_spells(self) -> Sequence[Spell]:
        return self._spells

    def __contains__(self, name: object) -> bool:
        return name in self._names

    def __len__(self) -> int:
        return len(self._spells)


# =============================================================================
# Source Helpers
# =============================================================================


def is_unearthed_arcana(source: str | None) -> bool:
    return bool(UNEARTHED_ARCANA_PATTERN.search(source or ""))


def canonicalize_source(source: str | None) -> str:
    """First source of a multi-source string ('PHB / XGE' -> 'PHB')."""
    trimmed = (source or "").strip()
    if not trimmed:
        return ""
    return trimmed.split("/")[0].strip() or trimmed


def normalize_source_key(source: str | None) -> str:
    """Lower-case source key; missing sources count as the Player's Handbook."""
    if is_unearthed_arcana(source):
        return UNEARTHED_ARCANA_SOURCE_KEY
    canonical = canonicalize_source(source)
    if PLAYERS_HANDBOOK_PATTERN.match(canonical):
        return STANDARD_SOURCE_KEY
    return canonical.lower() or STANDARD_SOURCE_KEY


def source_label(source: str | None) -> str:
    key = normalize_source_key(source)
    if key in SOURCE_LABELS:
        return SOURCE_LABELS[key]
    return canonicalize_source(source) or SOURCE_LABELS[STANDARD_SOURCE_KEY]


def render_key(spell: Spell) -> str:
    """Key unique per name, source and level, e.g. 'Shield::player's handbook::1'."""
    return f"{spell.name}::{normalize_source_key(spell.source)}::{spell.level}"


def summarize_components(components: str | None) -> str:
    """Short component summary such as 'V/S/M'.

    Text without V, S or M is shown as-is, truncated to 12 characters.
    """
    raw = (components or "").upper()
    if not raw.strip():
        return "N/A"
    parts = [letter for letter in ("V", "S", "M") if letter in raw]
    if parts:
        return "/".join(parts)
    return f"{raw[:COMPONENT_SUMMARY_LIMIT]}…" if len(raw) > COMPONENT_SUMMARY_LIMIT else raw


# =============================================================================
# Filtering
# =============================================================================


def filter_spells(
    spells: Iterable[Spell],
    *,
    known: Iterable[str] | None = None,
    class_name: str | None = None,
    level: int | None = None,
) -> list[Spell]:
    """Filter spells by known names, class and level.

    Args:
        spells: Spells to filter.
        known: Only keep these names, when given.
        class_name: Only keep spells for this class; None or 'all' keeps all.
        level: Only keep this spell level, when given.

    Returns:
        Matching spells in their original order.
    """
    known_names = frozenset(known) if known is not None else None
    filter_class = class_name if class_name and class_name.lower() != "all" else None

    result = []
    for spell in spells:
        if known_names is not None and spell.name not in known_names:
            continue
        if filter_class is not None and not spell.is_for_class(filter_class):
            continue
        if level is not None and spell.level != level:
            continue
        result.append(spell)
    return result


def group_by_level(spells: Iterable[Spell]) -> dict[int, list[Spell]]:
    """Group spells by level, each group sorted by name."""
    grouped: dict[int, list[Spell]] = {}
    for spell in spells:
        grouped.setdefault(spell.level, []).append(spell)
    return {level: sorted(grouped[level], key=lambda spell: spell.name) for level in sorted(grouped)}


def unknown_to_catalog(names: Iterable[str], catalog: SpellCatalog) -> list[str]:
    """Names absent from the catalog, sorted. Reporting only."""
    listed = {spell.name for spell in catalog.all_spells()}
    return sorted(name for name in set(names) if name not in listed)


__all__ = [
    "STANDARD_SOURCE_KEY",
    "UNEARTHED_ARCANA_SOURCE_KEY",
    "Spell",
    "SpellCatalog",
    "StaticSpellCatalog",
    "is_unearthed_arcana",
    "canonicalize_source",
    "normalize_source_key",
    "source_label",
    "render_key",
    "summarize_components",
    "filter_spells",
    "group_by_level",
    "unknown_to_catalog",
]
