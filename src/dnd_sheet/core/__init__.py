"""Core module providing configuration, logging, and base exceptions.

Exports:
    Exceptions:
        DndSheetError: Base exception for all engine errors.
        ConfigurationError: Configuration-related errors.
        ValidationError: Boundary validation errors.
        RulesEngineError: Base for rules computation errors.
        DiceRollError: Unusable dice requests.
        InvalidStateTransitionError: Out-of-order confirmation choices.

    Configuration:
        Settings: Main application settings class.
        get_settings: Get the settings singleton.
        clear_settings_cache: Force settings reload.

    Logging:
        configure_logging: Set up application logging.
        configure_from_settings: Set up logging from Settings.
        get_logger: Get a configured logger instance.
        bind_context: Add context to log entries.
        clear_context: Clear logging context.
"""

from __future__ import annotations

from dnd_sheet.core.config import (
    DiceSettings,
    Settings,
    SpellcastingSettings,
    clear_settings_cache,
    get_settings,
)
from dnd_sheet.core.exceptions import (
    ConfigurationError,
    DiceRollError,
    DndSheetError,
    InvalidStateTransitionError,
    RulesEngineError,
    ValidationError,
)
from dnd_sheet.core.logging import (
    bind_context,
    clear_context,
    configure_from_settings,
    configure_logging,
    get_logger,
)


__all__ = [
    # Exceptions
    "DndSheetError",
    "ConfigurationError",
    "ValidationError",
    "RulesEngineError",
    "DiceRollError",
    "InvalidStateTransitionError",
    # Configuration
    "Settings",
    "DiceSettings",
    "SpellcastingSettings",
    "get_settings",
    "clear_settings_cache",
    # Logging
    "configure_logging",
    "configure_from_settings",
    "get_logger",
    "bind_context",
    "clear_context",
]
