"""SQLite save slots for the encounter engine.

Each slot holds one serialized hero. Storage location defaults to
``~/.encounter_engine/saves.db`` (see ``StorageSettings.save_path``).
"""

from __future__ import annotations

import json
import sqlite3
from contextlib import contextmanager
from datetime import datetime
from pathlib import Path
from typing import Generator

import pydantic

from encounter_engine.core.config import Settings, get_settings
from encounter_engine.core.constants import DEFAULT_SAVE_SLOT, SAVE_VERSION
from encounter_engine.core.exceptions import PersistenceError, SaveCorruptedError
from encounter_engine.core.logging import get_logger
from encounter_engine.models.character import Character
from encounter_engine.storage.serialization import deserialize_character, serialize_character


logger = get_logger(__name__)


class SaveManager:
    """Slot-based save storage backed by SQLite."""

    SCHEMA_VERSION = 1

    def __init__(
        self,
        db_path: str | Path | None = None,
        *,
        settings: Settings | None = None,
    ) -> None:
        """Initialize the save database.

        Args:
            db_path: Path to the database file. If None, uses the configured path.
            settings: Engine settings; defaults to the cached settings.

        Raises:
            PersistenceError: If the database cannot be created or is not a
                valid SQLite file.
        """
        self._settings = settings or get_settings()
        self.db_path = Path(db_path) if db_path is not None else self._settings.storage.save_path

        try:
            self.db_path.parent.mkdir(parents=True, exist_ok=True)
            self._init_schema()
        except (sqlite3.Error, OSError) as exc:
            logger.error("Save database unavailable", path=str(self.db_path), error=str(exc))
            raise PersistenceError(f"Failed to open save database: {exc}") from exc

        logger.info("Save database initialized", path=str(self.db_path))

    @contextmanager
    def _get_connection(self) -> Generator[sqlite3.Connection, None, None]:
        """Get a database connection with proper cleanup."""
        conn = sqlite3.connect(str(self.db_path))
        conn.row_factory = sqlite3.Row
        try:
            yield conn
            conn.commit()
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()

    def _init_schema(self) -> None:
        with self._get_connection() as conn:
            cursor = conn.cursor()
            cursor.execute("""
                CREATE TABLE IF NOT EXISTS schema_version (
                    version INTEGER PRIMARY KEY
                )
            """)
            cursor.execute("""
                CREATE TABLE IF NOT EXISTS saves (
                    slot TEXT PRIMARY KEY,
                    version INTEGER NOT NULL,
                    hero_name TEXT NOT NULL,
                    hero_level INTEGER NOT NULL,
                    payload_json TEXT NOT NULL,
                    updated_at TEXT NOT NULL
                )
            """)
            cursor.execute(
                "INSERT OR REPLACE INTO schema_version (version) VALUES (?)",
                (self.SCHEMA_VERSION,),
            )

    # =========================================================================
    # Slot Operations
    # =========================================================================

    def save(self, character: Character, slot: str = DEFAULT_SAVE_SLOT) -> None:
        """Write a character into a slot, replacing any previous save.

        Raises:
            PersistenceError: If the character cannot be serialized or the
                database write fails.
        """
        try:
            payload = serialize_character(character)
        except pydantic.ValidationError as exc:
            raise PersistenceError(f"Character cannot be saved: {exc}", slot=slot) from exc
        try:
            with self._get_connection() as conn:
                conn.execute(
                    """
                    INSERT OR REPLACE INTO saves
                    (slot, version, hero_name, hero_level, payload_json, updated_at)
                    VALUES (?, ?, ?, ?, ?, ?)
                    """,
                    (
                        slot,
                        SAVE_VERSION,
                        character.name,
                        character.level,
                        json.dumps(payload),
                        datetime.now().isoformat(),
                    ),
                )
        except sqlite3.Error as exc:
            raise PersistenceError(f"Failed to write save: {exc}", slot=slot) from exc

        logger.info("Game saved", slot=slot, hero=character.name, level=character.level)

    def load(self, slot: str = DEFAULT_SAVE_SLOT) -> Character | None:
        """Read the character stored in a slot.

        Returns:
            The character, or None if the slot is empty or unreadable.
        """
        try:
            with self._get_connection() as conn:
                row = conn.execute(
                    "SELECT payload_json FROM saves WHERE slot = ?",
                    (slot,),
                ).fetchone()
        except sqlite3.Error as exc:
            logger.error("Failed to read save", slot=slot, error=str(exc))
            return None

        if row is None:
            logger.debug("No save in slot", slot=slot)
            return None

        try:
            payload = json.loads(row["payload_json"])
            character = deserialize_character(payload, settings=self._settings)
        except (json.JSONDecodeError, SaveCorruptedError) as exc:
            logger.error("Save is corrupted", slot=slot, error=str(exc))
            return None

        logger.info("Game loaded", slot=slot, hero=character.name, level=character.level)
        return character

    def has_save(self, slot: str = DEFAULT_SAVE_SLOT) -> bool:
        with self._get_connection() as conn:
            row = conn.execute("SELECT 1 FROM saves WHERE slot = ?", (slot,)).fetchone()
        return row is not None

    def delete(self, slot: str = DEFAULT_SAVE_SLOT) -> bool:
        """Delete a slot.

        Returns:
            True if deleted, False if the slot was empty.
        """
        with self._get_connection() as conn:
            cursor = conn.execute("DELETE FROM saves WHERE slot = ?", (slot,))
            deleted = cursor.rowcount > 0

        if deleted:
            logger.info("Save deleted", slot=slot)
        return deleted

    def list_slots(self) -> list[str]:
        """Occupied slots, most recently saved first."""
        with self._get_connection() as conn:
            rows = conn.execute("SELECT slot FROM saves ORDER BY updated_at DESC, rowid DESC").fetchall()
        return [row["slot"] for row in rows]


__all__ = ["SaveManager"]
