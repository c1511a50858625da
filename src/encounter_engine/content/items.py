"""Default item templates, grouped by loot category."""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field

from encounter_engine.models.enums import ItemType, Rarity


class ItemCategory(StrEnum):
    """Loot tables the item factory draws from."""

    POTIONS = "potions"
    SWORDS = "swords"
    SHIELDS = "shields"
    STAVES = "staves"


class ItemTemplate(BaseModel):
    """Blueprint for a generated item.

    Attributes:
        name: Display name.
        description: Human-readable description.
        item_type: Category of the generated item.
        rarity: Rarity tier.
        base_value: Heal amount, damage or defense before level scaling.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    name: str = Field(min_length=1, max_length=100)
    description: str = ""
    item_type: ItemType
    rarity: Rarity = Rarity.COMMON
    base_value: int = Field(ge=0)


def _template(name: str, description: str, item_type: ItemType, rarity: Rarity, base_value: int) -> ItemTemplate:
    return ItemTemplate(
        name=name,
        description=description,
        item_type=item_type,
        rarity=rarity,
        base_value=base_value,
    )


ITEM_TEMPLATES: dict[ItemCategory, tuple[ItemTemplate, ...]] = {
    # Ordered by tier; the factory picks potions by index.
    ItemCategory.POTIONS: (
        _template("Small Health Potion", "Heals 20 HP.", ItemType.CONSUMABLE, Rarity.COMMON, 20),
        _template("Medium Health Potion", "Heals 50 HP.", ItemType.CONSUMABLE, Rarity.RARE, 50),
        _template("Large Health Potion", "Heals 100 HP.", ItemType.CONSUMABLE, Rarity.EPIC, 100),
    ),
    ItemCategory.SWORDS: (
        _template("Rusty Dagger", "+5 Damage.", ItemType.WEAPON, Rarity.COMMON, 5),
        _template("Short Sword", "+12 Damage.", ItemType.WEAPON, Rarity.COMMON, 12),
        _template("Iron Sword", "+20 Damage.", ItemType.WEAPON, Rarity.RARE, 20),
        _template("Steel Blade", "+35 Damage.", ItemType.WEAPON, Rarity.EPIC, 35),
        _template("Zweihander", "+60 Damage.", ItemType.WEAPON, Rarity.LEGENDARY, 60),
    ),
    ItemCategory.SHIELDS: (
        _template("Leather Buckler", "+2 Defense.", ItemType.ARMOR, Rarity.COMMON, 2),
        _template("Wooden Shield", "+5 Defense.", ItemType.ARMOR, Rarity.COMMON, 5),
        _template("Iron Shield", "+12 Defense.", ItemType.ARMOR, Rarity.RARE, 12),
    ),
    ItemCategory.STAVES: (
        _template("Oak Staff", "+10 Magic.", ItemType.WEAPON, Rarity.COMMON, 10),
        _template("Apprentice Staff", "+25 Magic.", ItemType.WEAPON, Rarity.RARE, 25),
        _template("Crystal Wand", "+50 Magic.", ItemType.WEAPON, Rarity.EPIC, 50),
    ),
}


__all__ = ["ItemCategory", "ItemTemplate", "ITEM_TEMPLATES"]
