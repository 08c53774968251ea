"""Spellcasting rules.

Submodules:
    slot_table: Default slot tables and caster classification.
    slots: Slot state manager and dirtiness check.
    known: Known/prepared spell tracking.
    stats: Spell save DC and spell attack calculation.
    transitions: Class/level change detection and confirmations.
    catalog: Spell records, source and component helpers.
    spellbook: The Spellbook aggregate.
"""

from __future__ import annotations

from dnd_sheet.spellcasting.catalog import (
    Spell,
    SpellCatalog,
    StaticSpellCatalog,
    canonicalize_source,
    filter_spells,
    group_by_level,
    normalize_source_key,
    render_key,
    source_label,
    summarize_components,
    unknown_to_catalog,
)
from dnd_sheet.spellcasting.known import KnownSpellTracker
from dnd_sheet.spellcasting.slot_table import classify, default_slots
from dnd_sheet.spellcasting.slots import SlotDirtiness, SpellSlotManager
from dnd_sheet.spellcasting.spellbook import Spellbook
from dnd_sheet.spellcasting.stats import (
    SpellcastingStats,
    calculate_stats,
    format_signed,
    infer_spellcasting_ability,
    parse_spellcasting_ability,
    resolve_spellcasting_ability,
    stats_for,
)
from dnd_sheet.spellcasting.transitions import (
    Resolution,
    TransitionDecision,
    detect_transition,
    resolve_confirmation,
)


__all__ = [
    # Slot table
    "classify",
    "default_slots",
    # Slots
    "SlotDirtiness",
    "SpellSlotManager",
    # Known / prepared
    "KnownSpellTracker",
    # Stats
    "SpellcastingStats",
    "calculate_stats",
    "format_signed",
    "infer_spellcasting_ability",
    "parse_spellcasting_ability",
    "resolve_spellcasting_ability",
    "stats_for",
    # Transitions
    "TransitionDecision",
    "Resolution",
    "detect_transition",
    "resolve_confirmation",
    # Catalog
    "Spell",
    "SpellCatalog",
    "StaticSpellCatalog",
    "canonicalize_source",
    "normalize_source_key",
    "source_label",
    "render_key",
    "summarize_components",
    "filter_spells",
    "group_by_level",
    "unknown_to_catalog",
    # Aggregate
    "Spellbook",
]
