"""Configuration management for the character sheet engine.

This module provides centralized configuration management using
pydantic-settings, supporting environment variables, .env files and
runtime overrides.

Example:
    >>> from dnd_sheet.core.config import get_settings
    >>> settings = get_settings()
    >>> settings.dice.max_dice_per_roll
    100

Environment Variables:
    DND_SHEET_LOG_LEVEL: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    DND_SHEET_LOG_JSON: Emit JSON logs instead of console output
    DND_SHEET_DICE_SEED: Seed for the library-backed face source
    DND_SHEET_DICE_MAX_DICE_PER_ROLL: Upper bound on dice in one request
    DND_SHEET_SPELLS_FALLBACK_ABILITY: Spellcasting ability when nothing else applies
"""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from dnd_sheet.core.exceptions import ConfigurationError
from dnd_sheet.models.enums import Ability


class DiceSettings(BaseSettings):
    """Configuration for dice rolling.

    Attributes:
        seed: Optional seed for reproducible library-backed rolls.
        max_dice_per_roll: Largest number of physical dice in one request
            (after advantage doubling).
        history_limit: Number of recent roll labels kept by the roller.
    """

    model_config = SettingsConfigDict(
        env_prefix="DND_SHEET_DICE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    seed: int | None = Field(
        default=None,
        ge=0,
        description="Random seed for reproducible rolls",
    )
    max_dice_per_roll: int = Field(
        default=100,
        ge=1,
        le=1000,
        description="Maximum dice in a single roll request",
    )
    history_limit: int = Field(
        default=5,
        ge=1,
        le=100,
        description="Recent roll labels to keep",
    )


class SpellcastingSettings(BaseSettings):
    """Configuration for spellcasting rules.

    Attributes:
        fallback_ability: Spellcasting ability used when no override is
            stored and the class does not imply one.
    """

    model_config = SettingsConfigDict(
        env_prefix="DND_SHEET_SPELLS_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    fallback_ability: Ability = Field(
        default=Ability.INT,
        description="Fallback spellcasting ability",
    )

    @field_validator("fallback_ability", mode="before")
    @classmethod
    def parse_ability(cls, value: object) -> Ability:
        """Accept full or abbreviated ability names.

        Raises:
            ConfigurationError: If the value names no ability.
        """
        if isinstance(value, Ability):
            return value
        parsed = Ability.parse(str(value))
        if parsed is None:
            raise ConfigurationError(
                f"Unknown spellcasting ability: {value!r}",
                config_key="fallback_ability",
            )
        return parsed


class Settings(BaseSettings):
    """Main application settings aggregating all configuration domains.

    Attributes:
        app_name: Application name.
        app_version: Application version string.
        debug: Enable debug mode.
        log_level: Application logging level.
        log_json: Emit structured JSON logs.
        dice: Dice settings.
        spellcasting: Spellcasting settings.
    """

    model_config = SettingsConfigDict(
        env_prefix="DND_SHEET_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        env_nested_delimiter="__",
    )

    app_name: str = Field(
        default="D&D Character Sheet Engine",
        description="Application name",
    )
    app_version: str = Field(
        default="0.1.0",
        description="Application version",
    )
    debug: bool = Field(
        default=False,
        description="Enable debug mode",
    )
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Logging level",
    )
    log_json: bool = Field(
        default=False,
        description="Emit JSON logs",
    )

    dice: DiceSettings = Field(default_factory=DiceSettings)
    spellcasting: SpellcastingSettings = Field(default_factory=SpellcastingSettings)

    @property
    def is_production(self) -> bool:
        return not self.debug


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get the application settings singleton.

    Returns:
        The cached Settings instance.

    Raises:
        ConfigurationError: If configuration is missing or invalid.
    """
    try:
        return Settings()
    except ConfigurationError:
        raise
    except Exception as exc:
        raise ConfigurationError(
            f"Failed to load application settings: {exc}",
            details={"original_error": str(exc)},
        ) from exc


def clear_settings_cache() -> None:
    """Clear the settings cache, forcing a reload on next access."""
    get_settings.cache_clear()


__all__ = [
    "DiceSettings",
    "SpellcastingSettings",
    "Settings",
    "get_settings",
    "clear_settings_cache",
]
