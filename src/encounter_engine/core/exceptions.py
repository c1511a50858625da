"""Custom exception hierarchy for the encounter engine.

This module defines the exception hierarchy used across the engine. All
exceptions inherit from EncounterEngineError, enabling unified error handling
at the application boundary while preserving domain-specific context.

Example:
    >>> from encounter_engine.core.exceptions import CombatError
    >>> raise CombatError("Target is not in this encounter", combatant_id="Slime")
"""

from __future__ import annotations

from typing import Any


class EncounterEngineError(Exception):
    """Base exception for all encounter engine errors.

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
        """Return a detailed string representation of the exception."""
        return f"{self.__class__.__name__}(message={self.message!r}, details={self.details!r})"


# =============================================================================
# Game Engine Domain Exceptions
# =============================================================================


class GameEngineError(EncounterEngineError):
    """Base exception for all game engine errors.

    Raised when there are issues with combat resolution, turn handling
    or event dispatch.
    """


class InvalidGameStateError(GameEngineError):
    """Raised when an operation is attempted in the wrong engine state."""

    def __init__(
        self,
        message: str,
        *,
        current_state: str | None = None,
        expected_states: list[str] | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize invalid game state error with state context.

        Args:
            message: Human-readable error description.
            current_state: The current invalid state identifier.
            expected_states: List of valid states that were expected.
            details: Optional dictionary containing additional error context.
        """
        combined_details = details or {}
        if current_state:
            combined_details["current_state"] = current_state
        if expected_states:
            combined_details["expected_states"] = expected_states
        super().__init__(message, details=combined_details)


class CombatError(GameEngineError):
    """Raised when combat or encounter setup cannot proceed."""

    def __init__(
        self,
        message: str,
        *,
        combatant_id: str | None = None,
        round_number: int | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize combat error with combat context.

        Args:
            message: Human-readable error description.
            combatant_id: Name or identifier of the combatant involved.
            round_number: Current combat round when the error occurred.
            details: Optional dictionary containing additional error context.
        """
        combined_details = details or {}
        if combatant_id:
            combined_details["combatant_id"] = combatant_id
        if round_number is not None:
            combined_details["round_number"] = round_number
        super().__init__(message, details=combined_details)


class DiceRollError(GameEngineError):
    """Raised when dice rolling operations fail.

    This typically occurs when parsing invalid dice notation.
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
        if expression:
            combined_details["expression"] = expression
        super().__init__(message, details=combined_details)


class TurnManagementError(GameEngineError):
    """Raised when turn order cannot be established or advanced."""


class EventBusError(GameEngineError):
    """Raised when an event is emitted with a payload of the wrong shape."""

    def __init__(
        self,
        message: str,
        *,
        event_type: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize event bus error with the offending event kind.

        Args:
            message: Human-readable error description.
            event_type: The event kind that was emitted.
            details: Optional dictionary containing additional error context.
        """
        combined_details = details or {}
        if event_type:
            combined_details["event_type"] = event_type
        super().__init__(message, details=combined_details)


# =============================================================================
# Input Provider Exceptions
# =============================================================================


class InputProviderError(EncounterEngineError):
    """Base exception for failed decision requests.

    Every failure of an external decision request derives from this class,
    so callers that need a default decision catch it in one place.
    """

    def __init__(
        self,
        message: str,
        *,
        request_id: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize input provider error with request context.

        Args:
            message: Human-readable error description.
            request_id: Identifier of the request involved, if any.
            details: Optional dictionary containing additional error context.
        """
        combined_details = details or {}
        if request_id:
            combined_details["request_id"] = request_id
        super().__init__(message, details=combined_details)


class ChoiceAlreadyPendingError(InputProviderError):
    """Raised when a choice is requested while another one is still pending."""


class ChoiceTimeoutError(InputProviderError):
    """Raised when a choice request is not answered before its deadline."""

    def __init__(
        self,
        message: str,
        *,
        timeout_seconds: float | None = None,
        request_id: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize timeout error with the deadline that expired.

        Args:
            message: Human-readable error description.
            timeout_seconds: The timeout that was exceeded.
            request_id: Identifier of the request that expired.
            details: Optional dictionary containing additional error context.
        """
        combined_details = details or {}
        if timeout_seconds is not None:
            combined_details["timeout_seconds"] = timeout_seconds
        super().__init__(message, request_id=request_id, details=combined_details)


class ChoiceCancelledError(InputProviderError):
    """Raised when a pending choice is cancelled by the UI or on disposal."""


class ProviderUnavailableError(InputProviderError):
    """Raised when no UI handler is registered to answer a request."""


# =============================================================================
# Persistence Exceptions
# =============================================================================


class PersistenceError(EncounterEngineError):
    """Base exception for save/load failures."""

    def __init__(
        self,
        message: str,
        *,
        slot: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize persistence error with save slot context.

        Args:
            message: Human-readable error description.
            slot: The save slot involved.
            details: Optional dictionary containing additional error context.
        """
        combined_details = details or {}
        if slot:
            combined_details["slot"] = slot
        super().__init__(message, details=combined_details)


class SaveCorruptedError(PersistenceError):
    """Raised when a stored snapshot cannot be parsed into a character."""


# =============================================================================
# Configuration & Validation Exceptions
# =============================================================================


class ConfigurationError(EncounterEngineError):
    """Raised when engine configuration is invalid."""

    def __init__(
        self,
        message: str,
        *,
        config_key: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize configuration error with config key context.

        Args:
            message: Human-readable error description.
            config_key: The configuration key that caused the error.
            details: Optional dictionary containing additional error context.
        """
        combined_details = details or {}
        if config_key:
            combined_details["config_key"] = config_key
        super().__init__(message, details=combined_details)


class ValidationError(EncounterEngineError):
    """Raised when a domain value violates its constraints.

    This includes negative rewards and malformed content data.
    """

    def __init__(
        self,
        message: str,
        *,
        field_name: str | None = None,
        invalid_value: Any | None = None,
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


__all__ = [
    # Base exception
    "EncounterEngineError",
    # Game engine exceptions
    "GameEngineError",
    "InvalidGameStateError",
    "CombatError",
    "DiceRollError",
    "TurnManagementError",
    "EventBusError",
    # Input provider exceptions
    "InputProviderError",
    "ChoiceAlreadyPendingError",
    "ChoiceTimeoutError",
    "ChoiceCancelledError",
    "ProviderUnavailableError",
    # Persistence exceptions
    "PersistenceError",
    "SaveCorruptedError",
    # Configuration exceptions
    "ConfigurationError",
    "ValidationError",
]
