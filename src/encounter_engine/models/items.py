"""Pydantic V2 schemas for items and their effects.

Items are immutable descriptors. A consumable's remaining uses are tracked
by replacing the stored item with an updated copy, never by mutating it.
Effects are a discriminated union so inventories round-trip through plain
JSON snapshots without losing their behavior.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Annotated, Any, Literal
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter

from encounter_engine.models.enums import ItemType, Rarity


if TYPE_CHECKING:
    from encounter_engine.models.combatant import Combatant


def _new_item_id() -> str:
    return uuid4().hex[:9]


# =============================================================================
# Effects
# =============================================================================


class HealEffect(BaseModel):
    """Restores vitality, capped at the target's maximum.

    Attributes:
        value: Vitality restored.
        description: Human-readable summary.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    type: Literal["heal"] = "heal"
    value: Annotated[int, Field(ge=0, description="Vitality restored")]
    description: str = Field(default="", max_length=200)

    def apply(self, target: Combatant) -> None:
        """Heal the target."""
        target.heal(self.value)


class DamageEffect(BaseModel):
    """Deals damage through the same path as combat hits.

    Attributes:
        value: Damage dealt.
        description: Human-readable summary.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    type: Literal["damage"] = "damage"
    value: Annotated[int, Field(ge=0, description="Damage dealt")]
    description: str = Field(default="", max_length=200)

    def apply(self, target: Combatant) -> None:
        """Damage the target, emitting damage and death events as usual."""
        target.take_damage(self.value)


Effect = Annotated[HealEffect | DamageEffect, Field(discriminator="type")]


# =============================================================================
# Items
# =============================================================================


class Item(BaseModel):
    """Common item descriptor.

    Attributes:
        id: Unique item identifier.
        name: Display name.
        item_type: Item category.
        rarity: Rarity tier.
        level: Level the item was generated at.
        description: Human-readable description.
        effects: Effects applied when the item is used.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    id: str = Field(default_factory=_new_item_id, min_length=1)
    name: str = Field(min_length=1, max_length=100)
    item_type: ItemType
    rarity: Rarity = Rarity.COMMON
    level: Annotated[int, Field(ge=1)] = 1
    description: str = Field(default="", max_length=500)
    effects: tuple[Effect, ...] = ()

    def apply_effects(self, target: Combatant) -> None:
        """Apply every effect of this item to ``target`` in order."""
        for effect in self.effects:
            effect.apply(target)


class Consumable(Item):
    """Single- or multi-use item removed from the inventory when spent.

    Attributes:
        uses: Remaining uses.
    """

    item_type: Literal[ItemType.CONSUMABLE] = ItemType.CONSUMABLE
    uses: Annotated[int, Field(ge=0)] = 1

    def spend(self) -> Consumable:
        """Return a copy with one use fewer."""
        return self.model_copy(update={"uses": max(0, self.uses - 1)})


class Equippable(Item):
    """Weapon, armor or accessory.

    The equipped flag and stat modifiers are recorded but not yet read by
    combat resolution.

    Attributes:
        is_equipped: Whether the item is currently equipped.
        stat_modifiers: Stat bonuses granted when equipped (e.g. ``damage``).
    """

    item_type: Literal[ItemType.WEAPON, ItemType.ARMOR, ItemType.ACCESSORY]
    is_equipped: bool = False
    stat_modifiers: dict[str, int] = Field(default_factory=dict)


AnyItem = Annotated[Consumable | Equippable, Field(discriminator="item_type")]
"""Concrete item, discriminated by category."""

item_adapter: TypeAdapter[Consumable | Equippable] = TypeAdapter(AnyItem)


def parse_item(data: dict[str, Any]) -> Consumable | Equippable:
    """Build a concrete item from its plain-data form.

    Args:
        data: Item data as produced by ``model_dump(mode="json")``.

    Returns:
        A Consumable or Equippable, depending on ``item_type``.

    Raises:
        pydantic.ValidationError: If the data does not describe a valid item.
    """
    return item_adapter.validate_python(data)


__all__ = [
    "HealEffect",
    "DamageEffect",
    "Effect",
    "Item",
    "Consumable",
    "Equippable",
    "AnyItem",
    "item_adapter",
    "parse_item",
]
