"""Core module providing configuration, logging, exceptions and the actor boundaries.

Exports:
    Exceptions:
        EncounterEngineError: Base exception for all engine errors.
        InputProviderError: Base exception for failed decision requests.
        PersistenceError: Base exception for save/load failures.

    Configuration:
        Settings: Main engine settings class.
        get_settings: Get the settings singleton.
        clear_settings_cache: Force settings reload.

    Logging:
        configure_logging: Set up engine logging.
        get_logger: Get a configured logger instance.

    Boundaries:
        EventBus: Per-actor publish/subscribe channel.
        InputProvider: Contract for external player decisions.
"""

from __future__ import annotations

from encounter_engine.core.config import (
    CombatSettings,
    PacingSettings,
    ProgressionSettings,
    Settings,
    StorageSettings,
    clear_settings_cache,
    get_settings,
)
from encounter_engine.core.events import (
    BeingTargetedEvent,
    CombatEndEvent,
    CombatStatusEvent,
    DamageEvent,
    DeathEvent,
    DomainMessageEvent,
    EventBus,
    EventType,
    HealEvent,
    InventoryChangeEvent,
    ReactionChosenEvent,
    TurnEvent,
    new_message_id,
)
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
from encounter_engine.core.input_provider import (
    ChoiceContext,
    ChoiceContextType,
    ChoiceOption,
    ChoiceRequest,
    InputProvider,
    InteractiveInputProvider,
)
from encounter_engine.core.logging import (
    bind_context,
    clear_context,
    configure_logging,
    get_logger,
    unbind_context,
)


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
    # Configuration
    "Settings",
    "CombatSettings",
    "PacingSettings",
    "ProgressionSettings",
    "StorageSettings",
    "get_settings",
    "clear_settings_cache",
    # Logging
    "configure_logging",
    "get_logger",
    "bind_context",
    "unbind_context",
    "clear_context",
    # Event bus
    "EventBus",
    "EventType",
    "new_message_id",
    "DamageEvent",
    "HealEvent",
    "DeathEvent",
    "TurnEvent",
    "DomainMessageEvent",
    "CombatStatusEvent",
    "CombatEndEvent",
    "InventoryChangeEvent",
    "BeingTargetedEvent",
    "ReactionChosenEvent",
    # Input provider
    "ChoiceContextType",
    "ChoiceOption",
    "ChoiceContext",
    "ChoiceRequest",
    "InputProvider",
    "InteractiveInputProvider",
]
