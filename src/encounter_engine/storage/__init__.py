"""Storage module for saving and loading heroes."""

from __future__ import annotations

from encounter_engine.storage.save_manager import SaveManager
from encounter_engine.storage.serialization import deserialize_character, serialize_character


__all__ = ["SaveManager", "deserialize_character", "serialize_character"]
