"""Enumeration types for the encounter engine.

These enums are shared by the item model, characters, the combat system
and the event payloads.
"""

from __future__ import annotations

from enum import StrEnum


class ItemType(StrEnum):
    """Item categories."""

    CONSUMABLE = "consumable"
    WEAPON = "weapon"
    ARMOR = "armor"
    ACCESSORY = "accessory"

    @property
    def is_equippable(self) -> bool:
        """Whether items of this category can be equipped."""
        return self is not ItemType.CONSUMABLE


class Rarity(StrEnum):
    """Item rarity tiers, lowest first."""

    COMMON = "common"
    RARE = "rare"
    EPIC = "epic"
    LEGENDARY = "legendary"


class ReactionType(StrEnum):
    """Defensive choice made by a defender before the hit roll."""

    NONE = "none"
    DODGE = "dodge"
    COUNTER = "counter"


class CombatStatus(StrEnum):
    """Phases of the combat state machine."""

    IDLE = "idle"
    STARTING = "starting"
    PLAYER_TURN = "player_turn"
    ENEMY_TURN = "enemy_turn"
    ENDED = "ended"


class CombatResult(StrEnum):
    """How an encounter ended."""

    VICTORY = "victory"
    DEFEAT = "defeat"
    FLED = "fled"


class CombatAction(StrEnum):
    """Menu actions available to a player on their turn."""

    ATTACK = "attack"
    ITEM = "item"
    FLEE = "flee"


class HeroClass(StrEnum):
    """Starting archetypes for a new hero."""

    ADVENTURER = "Adventurer"
    TANK = "Tank"
    MAGE = "Mage"


__all__ = [
    "ItemType",
    "Rarity",
    "ReactionType",
    "CombatStatus",
    "CombatResult",
    "CombatAction",
    "HeroClass",
]
