"""Default adversary templates.

Templates are read-only balancing data. The adventure manager builds a
fresh Character from a template for every encounter.
"""

from __future__ import annotations

from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field, model_validator

from encounter_engine.core.constants import (
    DEFAULT_ATTRIBUTE_SCORE,
    DEFAULT_MONSTER_WEAPON,
    DEFAULT_SPEED,
)


class EnemyTemplate(BaseModel):
    """Stat block for one kind of adversary.

    Attributes:
        name: Display name.
        hp: Maximum vitality.
        damage: Weapon damage.
        weapon: Weapon name.
        speed: Turn-order key.
        agility: Defense attribute.
        dexterity: Attack attribute.
        gold_reward_range: Inclusive gold bounds granted on defeat, if any.
        xp_reward: Experience granted on defeat, if any.
        is_boss: Whether the template is a boss, excluded from random draws.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    name: str = Field(min_length=1, max_length=100)
    hp: Annotated[int, Field(ge=1)]
    damage: Annotated[int, Field(ge=0)]
    weapon: str = DEFAULT_MONSTER_WEAPON
    speed: int = DEFAULT_SPEED
    agility: int = DEFAULT_ATTRIBUTE_SCORE
    dexterity: int = DEFAULT_ATTRIBUTE_SCORE
    gold_reward_range: tuple[int, int] | None = None
    xp_reward: Annotated[int, Field(ge=0)] | None = None
    is_boss: bool = False

    @model_validator(mode="after")
    def validate_gold_range(self) -> "EnemyTemplate":
        """Ensure the gold range is non-negative and not inverted."""
        if self.gold_reward_range is not None:
            low, high = self.gold_reward_range
            if low < 0 or low > high:
                raise ValueError(f"Invalid gold_reward_range {self.gold_reward_range}")
        return self


ENEMY_TEMPLATES: tuple[EnemyTemplate, ...] = (
    EnemyTemplate(
        name="Goblin Spearman",
        hp=40,
        damage=10,
        weapon="Short Spear",
        speed=15,
        agility=14,
        dexterity=12,
        gold_reward_range=(5, 15),
        xp_reward=30,
    ),
    EnemyTemplate(
        name="Slime",
        hp=30,
        damage=8,
        weapon="Goo",
        speed=5,
        agility=4,
        dexterity=6,
        gold_reward_range=(2, 8),
        xp_reward=20,
    ),
    EnemyTemplate(
        name="Ogre",
        hp=120,
        damage=25,
        weapon="Giant Club",
        speed=6,
        agility=5,
        dexterity=8,
        gold_reward_range=(20, 50),
        xp_reward=80,
    ),
    EnemyTemplate(
        name="Stone Golem",
        hp=300,
        damage=40,
        weapon="Rock Fists",
        speed=4,
        agility=2,
        dexterity=10,
        gold_reward_range=(200, 500),
        xp_reward=500,
        is_boss=True,
    ),
)


def regular_enemies(templates: tuple[EnemyTemplate, ...] = ENEMY_TEMPLATES) -> list[EnemyTemplate]:
    """Templates eligible for random encounters."""
    return [template for template in templates if not template.is_boss]


def boss_enemies(templates: tuple[EnemyTemplate, ...] = ENEMY_TEMPLATES) -> list[EnemyTemplate]:
    return [template for template in templates if template.is_boss]


__all__ = ["EnemyTemplate", "ENEMY_TEMPLATES", "regular_enemies", "boss_enemies"]
