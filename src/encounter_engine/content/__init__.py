"""Default content: adversary templates, item templates and loot generation.

Submodules:
    enemies: Adversary stat blocks
    items: Item templates grouped by loot category
    item_factory: Random level-scaled loot and item rehydration
"""

from __future__ import annotations

from encounter_engine.content.enemies import (
    ENEMY_TEMPLATES,
    EnemyTemplate,
    boss_enemies,
    regular_enemies,
)
from encounter_engine.content.item_factory import FALLBACK_ITEM_ID, ItemFactory
from encounter_engine.content.items import ITEM_TEMPLATES, ItemCategory, ItemTemplate


__all__ = [
    "ENEMY_TEMPLATES",
    "EnemyTemplate",
    "boss_enemies",
    "regular_enemies",
    "FALLBACK_ITEM_ID",
    "ItemFactory",
    "ITEM_TEMPLATES",
    "ItemCategory",
    "ItemTemplate",
]
