"""Game engine module for the encounter engine.

Submodules:
    dice: Hit-die rolls through the d20 library
    combat: Attack resolution (reactions, hit checks, counter-attacks)
    turn_manager: Combat state machine for one encounter
    adventure: Encounter lifecycle, rewards and loot
    run_context: Per-run progress counters

Example:
    >>> from encounter_engine.engine import AdventureManager
    >>> adventure = AdventureManager(hero)
    >>> outcome = await adventure.handle_encounter()
    >>> outcome.result
    <CombatResult.VICTORY: 'victory'>
"""

from __future__ import annotations

# =============================================================================
# Dice Rolling
# =============================================================================
from encounter_engine.engine.dice import CheckRoll, DiceRoller

# =============================================================================
# Combat
# =============================================================================
from encounter_engine.engine.combat import AttackResult, CombatSystem
from encounter_engine.engine.turn_manager import (
    ACTION_OPTIONS,
    CombatOutcome,
    TurnManager,
)

# =============================================================================
# Adventure
# =============================================================================
from encounter_engine.engine.run_context import RunContext
from encounter_engine.engine.adventure import AdventureManager


__all__ = [
    # Dice
    "CheckRoll",
    "DiceRoller",
    # Combat
    "AttackResult",
    "CombatSystem",
    "ACTION_OPTIONS",
    "CombatOutcome",
    "TurnManager",
    # Adventure
    "RunContext",
    "AdventureManager",
]
