"""Rules constants for the character sheet engine.

This module collects the fixed D&D 5E numbers the rules engine relies on,
so the dice and spellcasting modules share one definition of each.
"""

from __future__ import annotations

# =============================================================================
# Character Progression
# =============================================================================

MAX_CHARACTER_LEVEL = 20
"""Highest level in the spell slot tables; higher levels are clamped to it."""

# =============================================================================
# Spellcasting
# =============================================================================

SPELL_SAVE_DC_BASE = 8
"""Spell save DC = 8 + proficiency bonus + spellcasting ability modifier."""

# =============================================================================
# Dice
# =============================================================================

PERCENTILE_TENS_SIDES = 100
"""The 'tens' die of a percentile roll (faces 00, 10, ..., 90)."""

PERCENTILE_ONES_SIDES = 10
"""The 'ones' die of a percentile roll (faces 0-9)."""

PERCENTILE_ZERO_RESULT = 100
"""A percentile roll of 00 + 0 reads as 100."""

ALERT_INITIATIVE_BONUS = 5
"""Initiative bonus granted by the Alert feat."""

RANGED_WEAPON_MIN_RANGE = 10
"""Weapons whose normal range exceeds this (in feet) attack with DEX."""
