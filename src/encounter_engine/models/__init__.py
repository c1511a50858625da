"""Data model layer for the encounter engine.

Submodules:
    enums: Enumeration types (ItemType, Rarity, ReactionType, CombatStatus, ...)
    items: Immutable item and effect schemas (pydantic)
    inventory: Bounded item collection
    combatant: Capability interface used by combat
    character: Mutable actor with vitals, attributes and leveling

Example:
    >>> from encounter_engine.models import Character, Consumable, HealEffect
    >>> hero = Character("Aria", is_player=True)
    >>> potion = Consumable(name="Health Potion", effects=(HealEffect(value=30),))
    >>> hero.add_item(potion)
    True
"""

from __future__ import annotations

# =============================================================================
# Enumerations
# =============================================================================
from encounter_engine.models.enums import (
    CombatAction,
    CombatResult,
    CombatStatus,
    HeroClass,
    ItemType,
    Rarity,
    ReactionType,
)

# =============================================================================
# Items
# =============================================================================
from encounter_engine.models.items import (
    AnyItem,
    Consumable,
    DamageEffect,
    Effect,
    Equippable,
    HealEffect,
    Item,
    parse_item,
)

# =============================================================================
# Actors
# =============================================================================
from encounter_engine.models.inventory import Inventory
from encounter_engine.models.combatant import Combatant
from encounter_engine.models.character import Character, CharacterSnapshot


__all__ = [
    # Enumerations
    "CombatAction",
    "CombatResult",
    "CombatStatus",
    "HeroClass",
    "ItemType",
    "Rarity",
    "ReactionType",
    # Items
    "AnyItem",
    "Consumable",
    "DamageEffect",
    "Effect",
    "Equippable",
    "HealEffect",
    "Item",
    "parse_item",
    # Actors
    "Inventory",
    "Combatant",
    "Character",
    "CharacterSnapshot",
]
