"""Capability interface required to take part in combat.

The turn manager and the combat system only talk to this interface; they
never check for a concrete character class. Event emission is reached
through the ``events`` bus every combatant owns.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING


if TYPE_CHECKING:
    from encounter_engine.core.events import EventBus
    from encounter_engine.core.input_provider import InputProvider
    from encounter_engine.models.enums import ReactionType
    from encounter_engine.models.inventory import Inventory


class Combatant(ABC):
    """An actor that can attack, be attacked and react."""

    name: str
    speed: int
    agility: int
    dexterity: int
    weapon_damage: int
    current_life: int
    max_life: int
    is_player: bool
    inventory: Inventory
    events: EventBus
    input_provider: InputProvider | None

    @abstractmethod
    def is_alive(self) -> bool:
        """Whether the combatant still has vitality left."""

    @abstractmethod
    def take_damage(self, damage: int) -> int:
        """Reduce vitality.

        Args:
            damage: Damage to apply.

        Returns:
            Vitality actually lost.
        """

    @abstractmethod
    def heal(self, amount: int) -> int:
        """Restore vitality, capped at the maximum.

        Args:
            amount: Vitality to restore.

        Returns:
            Vitality actually restored.
        """

    @abstractmethod
    def use_item(self, item_id: str) -> bool:
        """Use an item from the combatant's own inventory on itself."""

    @abstractmethod
    async def handle_reaction(self, attacker: Combatant) -> ReactionType:
        """Decide how to react to an incoming attack."""

    @abstractmethod
    def ability_modifier(self, score: int) -> int:
        """Convert an attribute score into a roll modifier."""


__all__ = ["Combatant"]
