"""Tests for loot generation."""

from __future__ import annotations

import random

import pydantic
import pytest

from encounter_engine.content.item_factory import FALLBACK_ITEM_ID, ItemFactory
from encounter_engine.models.enums import ItemType, Rarity
from encounter_engine.models.items import Consumable, DamageEffect, Equippable, HealEffect


class SequenceRandom:
    """Random source replaying scripted draws; choice() takes the first entry."""

    def __init__(self, *draws: float) -> None:
        self._draws = list(draws)

    def random(self) -> float:
        return self._draws.pop(0)

    def choice(self, seq):
        return seq[0]


class TestPotions:
    """Tests for potion generation."""

    @pytest.mark.parametrize(
        ("draw", "name", "heal"),
        [
            (0.05, "Large Health Potion", 100),
            (0.2, "Medium Health Potion", 50),
            (0.5, "Small Health Potion", 20),
        ],
    )
    def test_potion_tiers(self, draw: float, name: str, heal: int) -> None:
        factory = ItemFactory(SequenceRandom(0.1, draw))

        item = factory.create_random_item(level=4)

        assert isinstance(item, Consumable)
        assert item.name == name
        assert item.level == 4
        assert item.uses == 1
        assert item.effects[0] == HealEffect(value=heal, description=item.description)


class TestGear:
    """Tests for weapon and armor generation."""

    def test_sword_scales_with_level(self) -> None:
        """Test sword damage is base plus two per level."""
        factory = ItemFactory(SequenceRandom(0.5, 0.9))

        item = factory.create_random_item(level=3)

        assert isinstance(item, Equippable)
        assert item.item_type is ItemType.WEAPON
        assert item.name == "Rusty Dagger"
        assert item.stat_modifiers == {"damage": 11}
        assert isinstance(item.effects[0], DamageEffect)
        assert item.effects[0].value == 11

    def test_staff(self) -> None:
        item = ItemFactory(SequenceRandom(0.5, 0.1)).create_random_item(level=1)

        assert item.name == "Oak Staff"
        assert item.stat_modifiers == {"damage": 12}

    def test_armor_scales_with_half_level(self) -> None:
        item = ItemFactory(SequenceRandom(0.8)).create_random_item(level=5)

        assert isinstance(item, Equippable)
        assert item.item_type is ItemType.ARMOR
        assert item.name == "Leather Buckler"
        assert item.stat_modifiers == {"defense": 4}
        assert item.effects == ()

    def test_random_items_are_valid(self) -> None:
        """Test many seeded draws all produce items at the requested level."""
        factory = ItemFactory(random.Random(42))

        items = [factory.create_random_item(level=2) for _ in range(100)]

        assert all(item.level == 2 for item in items)
        assert {type(item) for item in items} == {Consumable, Equippable}


class TestFallbackAndRehydrate:
    """Tests for the fallback item and rehydration."""

    def test_fallback_item(self) -> None:
        item = ItemFactory.create_fallback_item()

        assert item.id == FALLBACK_ITEM_ID
        assert item.name == "Stale Bread"
        assert item.rarity is Rarity.COMMON
        assert item.effects[0].value == 5

    def test_rehydrate_restores_behavior(self, make_character) -> None:
        """Test plain data with uppercase effect kinds becomes a working item."""
        data = {
            "id": "abc123def",
            "name": "Small Health Potion",
            "item_type": "consumable",
            "effects": [{"type": "HEAL", "value": 20}],
        }

        item = ItemFactory.rehydrate(data)
        target = make_character(current_life=50)
        item.apply_effects(target)

        assert item.id == "abc123def"
        assert target.current_life == 70

    def test_rehydrate_invalid(self) -> None:
        with pytest.raises(pydantic.ValidationError):
            ItemFactory.rehydrate({"name": "Mystery", "item_type": "relic"})
