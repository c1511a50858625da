"""Tests for the adversary templates."""

from __future__ import annotations

import pydantic
import pytest

from encounter_engine.content.enemies import (
    ENEMY_TEMPLATES,
    EnemyTemplate,
    boss_enemies,
    regular_enemies,
)


def test_default_table() -> None:
    names = [template.name for template in ENEMY_TEMPLATES]

    assert names == ["Goblin Spearman", "Slime", "Ogre", "Stone Golem"]
    assert [t.name for t in boss_enemies()] == ["Stone Golem"]
    assert len(regular_enemies()) == 3


def test_goblin_stats() -> None:
    goblin = ENEMY_TEMPLATES[0]

    assert (goblin.hp, goblin.damage, goblin.speed) == (40, 10, 15)
    assert goblin.gold_reward_range == (5, 15)
    assert goblin.xp_reward == 30


@pytest.mark.parametrize("gold_range", [(10, 5), (-1, 5)])
def test_invalid_gold_range(gold_range) -> None:
    with pytest.raises(pydantic.ValidationError):
        EnemyTemplate(name="Bandit", hp=20, damage=5, gold_reward_range=gold_range)


def test_templates_are_frozen() -> None:
    with pytest.raises(pydantic.ValidationError):
        ENEMY_TEMPLATES[1].hp = 999
