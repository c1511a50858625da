"""Tests for the exception hierarchy."""

from __future__ import annotations

import pytest

from encounter_engine.core.exceptions import (
    ChoiceAlreadyPendingError,
    ChoiceCancelledError,
    ChoiceTimeoutError,
    CombatError,
    ConfigurationError,
    DiceRollError,
    EncounterEngineError,
    EventBusError,
    GameEngineError,
    InputProviderError,
    InvalidGameStateError,
    PersistenceError,
    ProviderUnavailableError,
    SaveCorruptedError,
    TurnManagementError,
    ValidationError,
)


class TestEncounterEngineError:
    """Tests for the base EncounterEngineError exception."""

    def test_basic_message(self) -> None:
        """Test exception with basic message."""
        exc = EncounterEngineError("Test error message")
        assert exc.message == "Test error message"
        assert exc.details == {}
        assert str(exc) == "Test error message"

    def test_with_details(self) -> None:
        """Test exception with additional details."""
        exc = EncounterEngineError("Test error", details={"key": "value", "count": 42})
        assert "key='value'" in str(exc)
        assert "count=42" in str(exc)

    def test_repr(self) -> None:
        """Test exception repr output."""
        repr_str = repr(EncounterEngineError("Test", details={"x": 1}))
        assert "EncounterEngineError" in repr_str
        assert "x" in repr_str


class TestHierarchy:
    """Tests for the exception class tree."""

    @pytest.mark.parametrize(
        ("exc_class", "base"),
        [
            (InvalidGameStateError, GameEngineError),
            (CombatError, GameEngineError),
            (DiceRollError, GameEngineError),
            (TurnManagementError, GameEngineError),
            (EventBusError, GameEngineError),
            (ChoiceAlreadyPendingError, InputProviderError),
            (ChoiceTimeoutError, InputProviderError),
            (ChoiceCancelledError, InputProviderError),
            (ProviderUnavailableError, InputProviderError),
            (SaveCorruptedError, PersistenceError),
            (ConfigurationError, EncounterEngineError),
            (ValidationError, EncounterEngineError),
        ],
    )
    def test_subclassing(self, exc_class: type[Exception], base: type[Exception]) -> None:
        """Test every exception derives from its domain base."""
        assert issubclass(exc_class, base)
        assert issubclass(exc_class, EncounterEngineError)


class TestDomainDetails:
    """Tests for typed keyword details."""

    def test_invalid_game_state(self) -> None:
        exc = InvalidGameStateError("Bad", current_state="ended", expected_states=["idle"])
        assert exc.details["current_state"] == "ended"
        assert exc.details["expected_states"] == ["idle"]

    def test_choice_timeout(self) -> None:
        exc = ChoiceTimeoutError("Too slow", timeout_seconds=1.5, request_id="abc")
        assert exc.details["timeout_seconds"] == 1.5
        assert exc.details["request_id"] == "abc"

    def test_persistence_slot(self) -> None:
        exc = SaveCorruptedError("Broken", slot="slot-1")
        assert exc.details["slot"] == "slot-1"

    def test_validation_field(self) -> None:
        exc = ValidationError("Negative", field_name="gold", invalid_value=-5)
        assert exc.details["field_name"] == "gold"
        assert exc.details["invalid_value"] == -5
