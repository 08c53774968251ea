"""Pytest configuration and shared fixtures.

This module provides common fixtures and configuration for all tests
in the character sheet engine test suite.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import pytest


if TYPE_CHECKING:
    from collections.abc import Generator

    from dnd_sheet.engine.roller import DiceRoller
    from dnd_sheet.engine.sources import SequenceFaceSource
    from dnd_sheet.models.character import CharacterRecord


# =============================================================================
# Configuration Fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def reset_settings_cache() -> Generator[None, None, None]:
    """Reset the settings cache before and after each test."""
    from dnd_sheet.core.config import clear_settings_cache

    clear_settings_cache()
    yield
    clear_settings_cache()


@pytest.fixture
def mock_env_vars(monkeypatch: pytest.MonkeyPatch) -> dict[str, str]:
    """Set up mock environment variables for testing.

    Returns:
        Dictionary of environment variables that were set.
    """
    env_vars = {
        "DND_SHEET_DEBUG": "true",
        "DND_SHEET_LOG_LEVEL": "DEBUG",
        "DND_SHEET_DICE_SEED": "42",
        "DND_SHEET_SPELLS_FALLBACK_ABILITY": "Wisdom",
    }
    for key, value in env_vars.items():
        monkeypatch.setenv(key, value)
    return env_vars


# =============================================================================
# Character Fixtures
# =============================================================================


@pytest.fixture
def sample_abilities() -> dict[str, int]:
    """Provide sample ability scores keyed the way documents store them.

    Returns:
        Dictionary of ability scores.
    """
    return {
        "str": 16,
        "dex": 14,
        "con": 15,
        "int": 17,
        "wis": 12,
        "cha": 8,
    }


@pytest.fixture
def sample_character_data(sample_abilities: dict[str, int]) -> dict[str, Any]:
    """Provide a sample character document.

    Args:
        sample_abilities: Ability scores.

    Returns:
        Complete character document.
    """
    return {
        "identity": {"class": "Wizard", "subClass": "School of Evocation", "level": 5},
        "abilities": sample_abilities,
        "proficiency": 3,
        "initiative_bonus": 0,
        "save_proficiencies": ["int", "wis"],
        "weapons": [
            {"name": "Dagger", "damage": "1d4 piercing", "properties": ["finesse", "light"]},
            {"name": "Light Crossbow", "damage": "1d8 piercing", "range": 80},
            {"name": "Quarterstaff", "damage": "1d6 bludgeoning"},
        ],
        "feats": [{"title": "Alert", "lines": ["+5 to initiative"]}],
        "spells": {
            "slots": {"1": {"current": 3, "max": 4}, "2": {"current": 3, "max": 3}},
            "known": ["Fireball", "Magic Missile", "Shield"],
            "prepared": ["Magic Missile", "Shield"],
            "spellcasting_ability": None,
        },
    }


@pytest.fixture
def sample_character(sample_character_data: dict[str, Any]) -> CharacterRecord:
    """Provide a loaded character record."""
    from dnd_sheet.models.character import CharacterRecord

    return CharacterRecord.from_document(sample_character_data)


# =============================================================================
# Dice Fixtures
# =============================================================================


@pytest.fixture
def scripted_source() -> SequenceFaceSource:
    """Provide an empty scripted face source; tests push faces into it."""
    from dnd_sheet.engine.sources import SequenceFaceSource

    return SequenceFaceSource()


@pytest.fixture
def dice_roller(scripted_source: SequenceFaceSource) -> DiceRoller:
    """Provide a roller backed by the scripted face source."""
    from dnd_sheet.engine.roller import DiceRoller

    return DiceRoller(scripted_source)


@pytest.fixture
def seeded_roller() -> DiceRoller:
    """Provide a roller backed by the d20 library with a fixed seed."""
    from dnd_sheet.core.config import Settings
    from dnd_sheet.engine.roller import DiceRoller

    settings = Settings(dice={"seed": 42})
    return DiceRoller(settings=settings)
