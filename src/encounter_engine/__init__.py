"""Encounter Engine - turn-based combat and encounters for a small RPG.

Combat between a player-controlled hero and an adversary runs as an asyncio
state machine: actors act in speed order, hits are d20 checks against a
defense value, defenders may dodge or counter, and victories grant gold,
experience and loot. Every state change is published on per-actor event
buses; player decisions arrive through an input provider.

Example:
    >>> from encounter_engine import GameSession, HeroClass
    >>>
    >>> session = GameSession(on_choice_request=ui.show_choice, on_log=print)
    >>> session.init_hero("Aria", HeroClass.TANK)
    >>> outcome = await session.start_encounter()
    >>> session.save_game()
    >>> session.dispose()

Modules:
    core: Configuration, logging, exceptions, event bus and input provider.
    models: Items, inventory and characters.
    engine: Dice, attack resolution, turn management and adventures.
    content: Default enemy and item tables, loot generation.
    storage: Save payloads and SQLite save slots.
"""

from __future__ import annotations

# Core
from encounter_engine.core.config import Settings, get_settings
from encounter_engine.core.exceptions import EncounterEngineError
from encounter_engine.core.events import EventBus, EventType
from encounter_engine.core.input_provider import InputProvider, InteractiveInputProvider
from encounter_engine.core.logging import configure_logging, get_logger

# Models
from encounter_engine.models import (
    Character,
    CombatResult,
    CombatStatus,
    HeroClass,
    Inventory,
    Item,
    ReactionType,
)

# Engine
from encounter_engine.engine import (
    AdventureManager,
    CombatOutcome,
    CombatSystem,
    DiceRoller,
    TurnManager,
)

# Session
from encounter_engine.session import GameSession


__version__ = "0.1.0"
__all__ = [
    # Version info
    "__version__",
    # Core
    "EncounterEngineError",
    "Settings",
    "get_settings",
    "EventBus",
    "EventType",
    "InputProvider",
    "InteractiveInputProvider",
    "configure_logging",
    "get_logger",
    # Models
    "Character",
    "CombatResult",
    "CombatStatus",
    "HeroClass",
    "Inventory",
    "Item",
    "ReactionType",
    # Engine
    "AdventureManager",
    "CombatOutcome",
    "CombatSystem",
    "DiceRoller",
    "TurnManager",
    # Session
    "GameSession",
]
