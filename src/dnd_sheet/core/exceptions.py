"""Custom exception hierarchy for the D&D character sheet engine.

All exceptions inherit from DndSheetError, enabling unified error handling
at the boundary of the consuming application while preserving
domain-specific context.

Most rules-engine recoveries are silent (clamping slot values,
ignoring prepare requests for unknown spells). The exceptions below cover
the cases where the caller has to be told: bad configuration, malformed
documents, unusable dice notation and out-of-order confirmations.

Example:
    >>> from dnd_sheet.core.exceptions import DiceRollError
    >>> raise DiceRollError("Not a dice expression", expression="fireball")
"""

from __future__ import annotations

from typing import Any


class DndSheetError(Exception):
    """Base exception for all character sheet engine errors.

    Attributes:
        message: Human-readable error description.
        details: Optional dictionary containing additional error context.
    """

    def __init__(self, message: str, *, details: dict[str, Any] | None = None) -> None:
        """Initialize the base exception.

        Args:
            message: Human-readable error description.
            details: Optional dictionary containing additional error context.
        """
        self.message = message
        self.details = details or {}
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format the exception message with optional details.

        Returns:
            Formatted error message including any provided details.
        """
        if self.details:
            detail_str = ", ".join(f"{k}={v!r}" for k, v in self.details.items())
            return f"{self.message} [{detail_str}]"
        return self.message

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(message={self.message!r}, details={self.details!r})"


# =============================================================================
# Configuration & Validation Exceptions
# =============================================================================


class ConfigurationError(DndSheetError):
    """Raised when application configuration is missing or invalid."""

    def __init__(
        self,
        message: str,
        *,
        config_key: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize configuration error with the offending key.

        Args:
            message: Human-readable error description.
            config_key: The configuration key that caused the error.
            details: Optional dictionary containing additional error context.
        """
        combined_details = details or {}
        if config_key:
            combined_details["config_key"] = config_key
        super().__init__(message, details=combined_details)


class ValidationError(DndSheetError):
    """Raised when data crossing the engine boundary fails validation.

    Typically wraps pydantic validation failures raised while loading a
    persisted character document.
    """

    def __init__(
        self,
        message: str,
        *,
        field_name: str | None = None,
        invalid_value: Any = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize validation error with field context.

        Args:
            message: Human-readable error description.
            field_name: Name of the field that failed validation.
            invalid_value: The value that failed validation.
            details: Optional dictionary containing additional error context.
        """
        combined_details = details or {}
        if field_name:
            combined_details["field_name"] = field_name
        if invalid_value is not None:
            combined_details["invalid_value"] = invalid_value
        super().__init__(message, details=combined_details)


# =============================================================================
# Rules Engine Exceptions
# =============================================================================


class RulesEngineError(DndSheetError):
    """Base exception for rules computation errors (dice, spellcasting)."""


class DiceRollError(RulesEngineError):
    """Raised when a roll request cannot be carried out.

    The notation parser itself never raises; this is raised by the roller
    facade when notation is neither dice nor a literal number, when a
    request exceeds the configured dice limit, or when an advantage context
    is consumed twice.
    """

    def __init__(
        self,
        message: str,
        *,
        expression: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize dice roll error with expression context.

        Args:
            message: Human-readable error description.
            expression: The dice expression that caused the error.
            details: Optional dictionary containing additional error context.
        """
        combined_details = details or {}
        if expression is not None:
            combined_details["expression"] = expression
        super().__init__(message, details=combined_details)


class InvalidStateTransitionError(RulesEngineError):
    """Raised when a confirmation choice does not fit the pending state."""

    def __init__(
        self,
        message: str,
        *,
        current_state: str | None = None,
        expected_states: list[str] | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize transition error with state context.

        Args:
            message: Human-readable error description.
            current_state: The state the detector was in.
            expected_states: States in which the request would be valid.
            details: Optional dictionary containing additional error context.
        """
        combined_details = details or {}
        if current_state:
            combined_details["current_state"] = current_state
        if expected_states:
            combined_details["expected_states"] = expected_states
        super().__init__(message, details=combined_details)


__all__ = [
    "DndSheetError",
    "ConfigurationError",
    "ValidationError",
    "RulesEngineError",
    "DiceRollError",
    "InvalidStateTransitionError",
]
