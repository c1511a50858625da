"""Persistence boundary between characters and save payloads.

A save payload is a plain JSON-compatible envelope::

    {"version": 1, "data": {...character snapshot...}}

Only the current version is written. Older or newer payloads are still
read; a mismatch is logged as a warning.
"""

from __future__ import annotations

from typing import Any

import pydantic

from encounter_engine.core.config import Settings
from encounter_engine.core.constants import SAVE_VERSION
from encounter_engine.core.exceptions import SaveCorruptedError
from encounter_engine.core.logging import get_logger
from encounter_engine.models.character import Character, CharacterSnapshot


logger = get_logger(__name__)


def serialize_character(character: Character) -> dict[str, Any]:
    """Wrap a character snapshot in a versioned envelope.

    Args:
        character: Character to serialize.

    Returns:
        JSON-compatible save payload.
    """
    return {
        "version": SAVE_VERSION,
        "data": character.to_snapshot().model_dump(mode="json"),
    }


def deserialize_character(
    payload: dict[str, Any],
    *,
    settings: Settings | None = None,
) -> Character:
    """Rebuild a character from a save payload.

    Args:
        payload: Envelope produced by :func:`serialize_character`.
        settings: Engine settings for the rebuilt character.

    Returns:
        The rebuilt character, without subscribers or input provider.

    Raises:
        SaveCorruptedError: If the payload is not a valid envelope or the
            character data fails validation.
    """
    if not isinstance(payload, dict) or not isinstance(payload.get("data"), dict):
        raise SaveCorruptedError(
            "Save payload must be an object with a 'data' object",
            details={"payload_type": type(payload).__name__},
        )

    version = payload.get("version")
    if version != SAVE_VERSION:
        logger.warning(
            "Save version mismatch",
            save_version=version,
            current_version=SAVE_VERSION,
        )

    try:
        snapshot = CharacterSnapshot.model_validate(payload["data"])
    except pydantic.ValidationError as exc:
        raise SaveCorruptedError(
            f"Invalid character data: {exc.error_count()} validation error(s)",
            details={"errors": exc.errors(include_url=False)},
        ) from exc

    return Character.from_snapshot(snapshot, settings=settings)


__all__ = ["serialize_character", "deserialize_character"]
