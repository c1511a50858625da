"""Random loot generation and item rehydration."""

from __future__ import annotations

import random
from typing import Any

from encounter_engine.content.items import ITEM_TEMPLATES, ItemCategory, ItemTemplate
from encounter_engine.core.logging import get_logger
from encounter_engine.models.enums import ItemType, Rarity
from encounter_engine.models.items import (
    Consumable,
    DamageEffect,
    Equippable,
    HealEffect,
    Item,
    parse_item,
)


logger = get_logger(__name__)

POTION_CHANCE = 0.4
WEAPON_CHANCE = 0.3
LARGE_POTION_CHANCE = 0.1
MEDIUM_POTION_CHANCE = 0.3
STAFF_CHANCE = 0.2

FALLBACK_ITEM_ID = "fallback"


class ItemFactory:
    """Builds level-scaled items from the loot tables.

    Example:
        >>> factory = ItemFactory(rng=random.Random(7))
        >>> item = factory.create_random_item(level=3)
        >>> item.level
        3
    """

    def __init__(
        self,
        rng: random.Random | None = None,
        *,
        templates: dict[ItemCategory, tuple[ItemTemplate, ...]] | None = None,
    ) -> None:
        """Initialize the factory.

        Args:
            rng: Random source; injectable for reproducible loot.
            templates: Loot tables; defaults to the built-in tables.
        """
        self._rng = rng or random.Random()
        self._templates = templates or ITEM_TEMPLATES

    def create_random_item(self, level: int) -> Item:
        """Create a potion (40%), weapon (30%) or armor piece (30%).

        Args:
            level: Level the item is generated at; scales weapons and armor.
        """
        roll = self._rng.random()
        if roll < POTION_CHANCE:
            item = self.create_potion(level)
        elif roll < POTION_CHANCE + WEAPON_CHANCE:
            item = self.create_weapon(level)
        else:
            item = self.create_armor(level)

        logger.debug("Item generated", item=item.name, level=level, rarity=item.rarity.value)
        return item

    def create_potion(self, level: int) -> Consumable:
        """Small (60%), medium (30%) or large (10%) health potion."""
        templates = self._templates[ItemCategory.POTIONS]
        roll = self._rng.random()
        if roll < LARGE_POTION_CHANCE:
            template = templates[2]
        elif roll < LARGE_POTION_CHANCE + MEDIUM_POTION_CHANCE:
            template = templates[1]
        else:
            template = templates[0]

        return Consumable(
            name=template.name,
            rarity=template.rarity,
            level=level,
            description=template.description,
            effects=(HealEffect(value=template.base_value, description=template.description),),
            uses=1,
        )

    def create_weapon(self, level: int) -> Equippable:
        """Sword or staff (20%) with damage ``base + 2 * level``."""
        category = ItemCategory.STAVES if self._rng.random() < STAFF_CHANCE else ItemCategory.SWORDS
        template = self._rng.choice(self._templates[category])
        scaled_damage = template.base_value + level * 2

        return Equippable(
            name=template.name,
            item_type=ItemType.WEAPON,
            rarity=template.rarity,
            level=level,
            description=template.description,
            effects=(DamageEffect(value=scaled_damage, description=template.description),),
            stat_modifiers={"damage": scaled_damage},
        )

    def create_armor(self, level: int) -> Equippable:
        """Shield with defense ``base + level // 2``."""
        template = self._rng.choice(self._templates[ItemCategory.SHIELDS])
        scaled_defense = template.base_value + level // 2

        return Equippable(
            name=template.name,
            item_type=ItemType.ARMOR,
            rarity=template.rarity,
            level=level,
            description=template.description,
            stat_modifiers={"defense": scaled_defense},
        )

    @staticmethod
    def create_fallback_item() -> Consumable:
        """Minimal healing item handed out when nothing better is available."""
        return Consumable(
            id=FALLBACK_ITEM_ID,
            name="Stale Bread",
            rarity=Rarity.COMMON,
            level=1,
            description="Better than nothing.",
            effects=(HealEffect(value=5, description="Heals 5 HP"),),
            uses=1,
        )

    @staticmethod
    def rehydrate(data: dict[str, Any]) -> Item:
        """Rebuild a behavior-carrying item from its plain-data form.

        Effect kinds are matched case-insensitively.

        Raises:
            pydantic.ValidationError: If the data does not describe a valid item.
        """
        normalized = dict(data)
        normalized["effects"] = [
            {**effect, "type": str(effect.get("type", "")).lower()}
            for effect in data.get("effects") or ()
        ]
        return parse_item(normalized)


__all__ = ["FALLBACK_ITEM_ID", "ItemFactory"]
