"""Engine-wide constants for the encounter engine.

Tunable combat and progression numbers live in
:mod:`encounter_engine.core.config`; the values here are structural limits
that the rest of the engine relies on.
"""

from __future__ import annotations

# =============================================================================
# Inventory
# =============================================================================

MAX_INVENTORY_CAPACITY = 20
"""Maximum number of items a character can carry."""

# =============================================================================
# Persistence
# =============================================================================

SAVE_VERSION = 1
"""Version tag written alongside every character snapshot."""

DEFAULT_SAVE_SLOT = "default"
"""Save slot used when the caller does not name one."""

# =============================================================================
# Character Defaults
# =============================================================================

DEFAULT_MAX_LIFE = 100
"""Maximum vitality of a freshly created character."""

DEFAULT_WEAPON_DAMAGE = 15
"""Base weapon damage of a freshly created character."""

DEFAULT_WEAPON_NAME = "Sword"
"""Weapon name used when none is supplied."""

DEFAULT_MONSTER_WEAPON = "Claws"
"""Weapon name used for enemy templates that do not name one."""

DEFAULT_SPEED = 10
"""Movement speed used for turn order when none is supplied."""

DEFAULT_ATTRIBUTE_SCORE = 10
"""Neutral attribute score (modifier +0)."""

DEFAULT_CLASS_NAME = "Adventurer"
"""Archetype label of a character created without a class."""


__all__ = [
    # Inventory
    "MAX_INVENTORY_CAPACITY",
    # Persistence
    "SAVE_VERSION",
    "DEFAULT_SAVE_SLOT",
    # Character defaults
    "DEFAULT_MAX_LIFE",
    "DEFAULT_WEAPON_DAMAGE",
    "DEFAULT_WEAPON_NAME",
    "DEFAULT_MONSTER_WEAPON",
    "DEFAULT_SPEED",
    "DEFAULT_ATTRIBUTE_SCORE",
    "DEFAULT_CLASS_NAME",
]
