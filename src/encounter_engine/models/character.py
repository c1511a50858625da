"""Character entity: the actor behind both the hero and the adversaries.

A Character owns its Inventory and EventBus. Vitality changes always go
through :meth:`Character.take_damage` and :meth:`Character.heal` so damage,
heal and death events are emitted consistently, whether the change comes
from a weapon hit, an item effect or a counter-attack.
"""

from __future__ import annotations

import math
import random
from typing import Annotated, Any

from pydantic import BaseModel, ConfigDict, Field

from encounter_engine.core.config import Settings, get_settings
from encounter_engine.core.constants import (
    DEFAULT_ATTRIBUTE_SCORE,
    DEFAULT_CLASS_NAME,
    DEFAULT_MAX_LIFE,
    DEFAULT_SPEED,
    DEFAULT_WEAPON_DAMAGE,
    DEFAULT_WEAPON_NAME,
)
from encounter_engine.core.events import (
    DamageEvent,
    DeathEvent,
    DomainMessageEvent,
    EventBus,
    EventType,
    HealEvent,
    InventoryChangeEvent,
    new_message_id,
)
from encounter_engine.core.exceptions import InputProviderError, ValidationError
from encounter_engine.core.input_provider import (
    ChoiceContext,
    ChoiceContextType,
    ChoiceOption,
    InputProvider,
)
from encounter_engine.core.logging import get_logger
from encounter_engine.models.combatant import Combatant
from encounter_engine.models.enums import ReactionType
from encounter_engine.models.inventory import Inventory
from encounter_engine.models.items import AnyItem, Item


logger = get_logger(__name__)


REACTION_OPTIONS = (
    ChoiceOption(ReactionType.NONE.value, "Take the hit"),
    ChoiceOption(ReactionType.DODGE.value, "Try to dodge"),
    ChoiceOption(ReactionType.COUNTER.value, "Prepare a counter-attack"),
)


class CharacterSnapshot(BaseModel):
    """Plain-data form of a character, used for saving.

    Attributes mirror :class:`Character`; ``inventory`` holds the item
    descriptors in order.
    """

    model_config = ConfigDict(extra="ignore")

    name: str = Field(min_length=1, max_length=100)
    class_name: str = DEFAULT_CLASS_NAME
    max_life: Annotated[int, Field(ge=1)] = DEFAULT_MAX_LIFE
    current_life: Annotated[int, Field(ge=0)] | None = None
    weapon_damage: Annotated[int, Field(ge=0)] = DEFAULT_WEAPON_DAMAGE
    weapon_name: str = DEFAULT_WEAPON_NAME
    speed: int = DEFAULT_SPEED
    agility: int = DEFAULT_ATTRIBUTE_SCORE
    dexterity: int = DEFAULT_ATTRIBUTE_SCORE
    speech: int = DEFAULT_ATTRIBUTE_SCORE
    intelligence: int = DEFAULT_ATTRIBUTE_SCORE
    persistence: int = DEFAULT_ATTRIBUTE_SCORE
    gold: Annotated[int, Field(ge=0)] = 0
    level: Annotated[int, Field(ge=1)] = 1
    xp: Annotated[int, Field(ge=0)] = 0
    xp_to_next_level: Annotated[int, Field(ge=1)] | None = None
    is_player: bool = False
    inventory: list[AnyItem] = Field(default_factory=list)


class Character(Combatant):
    """Mutable actor with vitals, attributes, inventory and leveling.

    Attributes:
        name: Display name.
        class_name: Archetype label (e.g. "Tank").
        max_life: Maximum vitality.
        weapon_damage: Damage dealt by a successful hit.
        weapon_name: Name of the wielded weapon.
        speed: Turn-order key; higher acts first.
        agility: Defense attribute.
        dexterity: Attack attribute.
        speech: Social attribute, unused in combat.
        intelligence: Mental attribute, unused in combat.
        persistence: Endurance attribute, unused in combat.
        gold: Carried gold.
        level: Current level.
        xp: Experience accumulated toward the next level.
        xp_to_next_level: Experience threshold of the next level.
        is_player: Whether decisions come from an input provider.
        inventory: Owned items.
        events: Owned event bus.
        input_provider: Decision source for player characters.
    """

    def __init__(
        self,
        name: str,
        *,
        max_life: int = DEFAULT_MAX_LIFE,
        current_life: int | None = None,
        weapon_damage: int = DEFAULT_WEAPON_DAMAGE,
        weapon_name: str = DEFAULT_WEAPON_NAME,
        speed: int = DEFAULT_SPEED,
        agility: int = DEFAULT_ATTRIBUTE_SCORE,
        dexterity: int = DEFAULT_ATTRIBUTE_SCORE,
        speech: int = DEFAULT_ATTRIBUTE_SCORE,
        intelligence: int = DEFAULT_ATTRIBUTE_SCORE,
        persistence: int = DEFAULT_ATTRIBUTE_SCORE,
        gold: int = 0,
        level: int = 1,
        xp: int = 0,
        xp_to_next_level: int | None = None,
        class_name: str = DEFAULT_CLASS_NAME,
        is_player: bool = False,
        inventory: Inventory | None = None,
        input_provider: InputProvider | None = None,
        settings: Settings | None = None,
        rng: random.Random | None = None,
    ) -> None:
        """Create a character.

        Raises:
            ValidationError: If a vital or reward value is out of range.
        """
        if not name:
            raise ValidationError("Character name must not be empty", field_name="name")
        if max_life < 1:
            raise ValidationError(
                "max_life must be positive", field_name="max_life", invalid_value=max_life
            )
        if gold < 0 or xp < 0:
            raise ValidationError(
                "gold and xp must not be negative",
                details={"gold": gold, "xp": xp},
            )

        self._settings = settings or get_settings()
        self._rng = rng or random.Random()

        self.name = name
        self.class_name = class_name
        self.max_life = max_life
        self.current_life = max_life if current_life is None else min(max(0, current_life), max_life)
        self.weapon_damage = weapon_damage
        self.weapon_name = weapon_name
        self.speed = speed
        self.agility = agility
        self.dexterity = dexterity
        self.speech = speech
        self.intelligence = intelligence
        self.persistence = persistence
        self.gold = gold
        self.level = level
        self.xp = xp
        self.xp_to_next_level = (
            xp_to_next_level
            if xp_to_next_level is not None
            else self._settings.progression.initial_xp_threshold
        )
        self.is_player = is_player
        self.inventory = inventory if inventory is not None else Inventory()
        self.events = EventBus(owner=name)
        self.input_provider = input_provider

    def __repr__(self) -> str:
        return (
            f"Character(name={self.name!r}, life={self.current_life}/{self.max_life}, "
            f"level={self.level}, is_player={self.is_player})"
        )

    # =========================================================================
    # Vitals
    # =========================================================================

    def is_alive(self) -> bool:
        """Whether any vitality remains."""
        return self.current_life > 0

    def take_damage(self, damage: int) -> int:
        """Reduce vitality, clamping at zero.

        A dead character ignores further damage, so the death event fires
        exactly once.

        Args:
            damage: Damage to apply; non-positive values are ignored.

        Returns:
            Vitality actually lost.
        """
        if damage <= 0 or not self.is_alive():
            return 0

        lost = min(damage, self.current_life)
        self.current_life -= lost
        self.events.emit(
            EventType.DAMAGE,
            DamageEvent(damage=damage, current_life=self.current_life),
        )
        logger.debug(
            "Damage taken",
            character=self.name,
            damage=damage,
            current_life=self.current_life,
        )

        # Listeners (e.g. an emergency potion) may have healed in the meantime.
        if self.current_life == 0:
            self.events.emit(EventType.DEATH, DeathEvent(entity_name=self.name))
            logger.info("Character died", character=self.name)
        return lost

    def heal(self, amount: int) -> int:
        """Restore vitality up to the maximum.

        Args:
            amount: Vitality to restore; non-positive values are ignored.

        Returns:
            Vitality actually restored.
        """
        if amount <= 0 or not self.is_alive():
            return 0

        restored = min(self.max_life, self.current_life + amount) - self.current_life
        self.current_life += restored
        self.events.emit(EventType.HEAL, HealEvent(amount=restored))
        return restored

    def restore_full_life(self) -> None:
        """Refill vitality to the maximum, reviving a dead character."""
        self.current_life = self.max_life
        self.events.emit(EventType.HEAL, HealEvent(amount=self.max_life))

    def ability_modifier(self, score: int) -> int:
        """``floor((score - baseline) / divisor)``, e.g. 14 -> +2, 9 -> -1."""
        rules = self._settings.combat
        return math.floor((score - rules.ability_baseline) / rules.ability_divisor)

    # =========================================================================
    # Reactions
    # =========================================================================

    async def handle_reaction(self, attacker: Combatant) -> ReactionType:
        """Decide how to react to ``attacker``.

        AI characters draw from three fixed probability bands. Player
        characters ask their input provider; any provider failure means no
        reaction, so combat never stalls on an unresponsive UI.
        """
        if not self.is_player:
            return self._roll_ai_reaction()
        if self.input_provider is None:
            return ReactionType.NONE

        try:
            selected = await self.input_provider.request_choice(
                f"{self.name.upper()} is being attacked by {attacker.name}!",
                REACTION_OPTIONS,
                ChoiceContext(
                    actor_name=self.name,
                    kind=ChoiceContextType.COMBAT_REACTION,
                    metadata={"attacker_name": attacker.name},
                ),
                timeout=self._settings.combat.reaction_timeout_seconds,
            )
        except InputProviderError as exc:
            logger.warning(
                "Reaction request failed, defaulting to no reaction",
                character=self.name,
                error=str(exc),
            )
            return ReactionType.NONE

        try:
            return ReactionType(selected)
        except ValueError:
            logger.warning("Unknown reaction selected", character=self.name, selected=selected)
            return ReactionType.NONE

    def _roll_ai_reaction(self) -> ReactionType:
        rules = self._settings.combat
        draw = self._rng.random()
        if draw > rules.ai_dodge_threshold:
            return ReactionType.DODGE
        if draw > rules.ai_counter_threshold:
            return ReactionType.COUNTER
        return ReactionType.NONE

    # =========================================================================
    # Progression
    # =========================================================================

    def gain_xp(self, amount: int) -> int:
        """Add experience and level up as many times as it allows.

        Args:
            amount: Experience to add.

        Returns:
            Number of levels gained.

        Raises:
            ValidationError: If ``amount`` is negative.
        """
        if amount < 0:
            raise ValidationError("xp award must not be negative", field_name="xp", invalid_value=amount)

        self.xp += amount
        self._message("xp", f"{self.name} gained {amount} XP!")

        levels = 0
        while self.xp >= self.xp_to_next_level:
            self.level_up()
            levels += 1
        return levels

    def level_up(self) -> None:
        """Advance one level: spend the threshold, grow it, raise stats, heal fully."""
        rules = self._settings.progression
        self.level += 1
        self.xp -= self.xp_to_next_level
        self.xp_to_next_level = max(
            self.xp_to_next_level,
            math.floor(self.xp_to_next_level * rules.xp_growth),
        )
        self.max_life += rules.level_life_bonus
        self.current_life = self.max_life
        self.weapon_damage += rules.level_damage_bonus

        logger.info(
            "Level up",
            character=self.name,
            level=self.level,
            max_life=self.max_life,
            weapon_damage=self.weapon_damage,
        )
        self._message("lvl", f"LEVEL UP! {self.name} reached level {self.level}!")
        self._message("stats", f"Max HP: {self.max_life} | Damage: {self.weapon_damage}")

    def add_rewards(self, gold: int, xp: int) -> None:
        """Grant encounter rewards.

        Raises:
            ValidationError: If either reward is negative.
        """
        if gold < 0:
            raise ValidationError("gold reward must not be negative", field_name="gold", invalid_value=gold)
        if xp < 0:
            raise ValidationError("xp reward must not be negative", field_name="xp", invalid_value=xp)
        self.gold += gold
        self.gain_xp(xp)

    # =========================================================================
    # Inventory
    # =========================================================================

    def add_item(self, item: Item) -> bool:
        """Add an item to the inventory.

        Returns:
            False if the inventory is full or the item is not a concrete
            item kind.
        """
        added = self.inventory.add_item(item)
        if added:
            self._inventory_changed()
        return added

    def use_item(self, item_id: str) -> bool:
        """Use an item from the inventory on this character."""
        used = self.inventory.use_item(item_id, self)
        if used:
            self._inventory_changed()
        return used

    def _inventory_changed(self) -> None:
        self.events.emit(
            EventType.INVENTORY_CHANGE,
            InventoryChangeEvent(inventory=tuple(self.inventory.items)),
        )

    def _message(self, prefix: str, message: str) -> None:
        self.events.emit(
            EventType.DOMAIN_MESSAGE,
            DomainMessageEvent(id=new_message_id(f"{prefix}-{self.name}"), message=message),
        )

    # =========================================================================
    # Snapshots
    # =========================================================================

    def to_snapshot(self) -> CharacterSnapshot:
        """Capture the persistent state of this character."""
        return CharacterSnapshot(
            name=self.name,
            class_name=self.class_name,
            max_life=self.max_life,
            current_life=self.current_life,
            weapon_damage=self.weapon_damage,
            weapon_name=self.weapon_name,
            speed=self.speed,
            agility=self.agility,
            dexterity=self.dexterity,
            speech=self.speech,
            intelligence=self.intelligence,
            persistence=self.persistence,
            gold=self.gold,
            level=self.level,
            xp=self.xp,
            xp_to_next_level=self.xp_to_next_level,
            is_player=self.is_player,
            inventory=self.inventory.items,
        )

    @classmethod
    def from_snapshot(
        cls,
        snapshot: CharacterSnapshot,
        *,
        settings: Settings | None = None,
        rng: random.Random | None = None,
    ) -> Character:
        """Rebuild a character from a snapshot.

        The event bus starts empty and no input provider is attached.
        """
        data: dict[str, Any] = snapshot.model_dump(exclude={"inventory"})
        return cls(
            **data,
            inventory=Inventory(snapshot.inventory),
            settings=settings,
            rng=rng,
        )


__all__ = ["Character", "CharacterSnapshot", "REACTION_OPTIONS"]
