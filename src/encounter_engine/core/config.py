"""Configuration management for the encounter engine.

Combat rules, pacing and progression numbers are exposed as settings so
balance changes never require logic edits. Settings are read with
pydantic-settings from environment variables and an optional ``.env`` file.

Example:
    >>> from encounter_engine.core.config import get_settings
    >>> settings = get_settings()
    >>> settings.combat.die_size
    20

Environment Variables:
    ENCOUNTER_ENGINE_LOG_LEVEL: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    ENCOUNTER_ENGINE_COMBAT_DIE_SIZE: Number of faces of the hit die
    ENCOUNTER_ENGINE_COMBAT_REACTION_TIMEOUT_SECONDS: Deadline for player reactions
    ENCOUNTER_ENGINE_PACING_ACTION_DELAY: Seconds to pause after each action
    ENCOUNTER_ENGINE_SAVE_PATH: Path to the SQLite save database
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from encounter_engine.core.exceptions import ConfigurationError


class CombatSettings(BaseSettings):
    """Dice and defense rules used by attack resolution.

    Attributes:
        die_size: Faces of the hit die; the highest face is a critical hit.
        ability_baseline: Score that yields a +0 modifier.
        ability_divisor: Score points per modifier step.
        base_defense: Defense value before the agility modifier.
        dodge_bonus: Defense bonus granted by a dodge reaction.
        counter_difficulty: Target number for a counter-attack roll.
        emergency_heal_threshold: Fraction of max vitality below which a
            healing potion is used automatically.
        healing_potion_marker: Case-insensitive name fragment that marks a
            consumable as a healing potion.
        ai_dodge_threshold: AI draws above this value dodge.
        ai_counter_threshold: AI draws above this value (and not dodging) counter.
        reaction_timeout_seconds: Deadline for a player's reaction, or None
            to wait for the UI indefinitely.
        action_timeout_seconds: Deadline for the action menu and item picks,
            or None to wait for the UI indefinitely.
    """

    model_config = SettingsConfigDict(
        env_prefix="ENCOUNTER_ENGINE_COMBAT_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    die_size: int = Field(default=20, ge=2, le=100, description="Hit die faces")
    ability_baseline: int = Field(default=10, description="Score with a +0 modifier")
    ability_divisor: int = Field(default=2, ge=1, description="Score points per modifier step")
    base_defense: int = Field(default=10, ge=0, description="Defense before modifiers")
    dodge_bonus: int = Field(default=2, ge=0, description="Defense bonus when dodging")
    counter_difficulty: int = Field(default=12, ge=1, description="Counter-attack target number")
    emergency_heal_threshold: float = Field(
        default=0.25,
        ge=0.0,
        le=1.0,
        description="Vitality fraction that triggers an automatic potion",
    )
    healing_potion_marker: str = Field(
        default="potion",
        min_length=1,
        description="Name fragment identifying healing potions",
    )
    ai_dodge_threshold: float = Field(default=0.8, ge=0.0, le=1.0)
    ai_counter_threshold: float = Field(default=0.6, ge=0.0, le=1.0)
    reaction_timeout_seconds: float | None = Field(
        default=30.0,
        gt=0,
        description="Deadline for player reactions",
    )
    action_timeout_seconds: float | None = Field(
        default=30.0,
        gt=0,
        description="Deadline for player action and item choices",
    )

    @model_validator(mode="after")
    def validate_reaction_bands(self) -> "CombatSettings":
        """Ensure the AI reaction bands are ordered.

        Returns:
            Self if validation passes.

        Raises:
            ConfigurationError: If the counter band lies above the dodge band.
        """
        if self.ai_counter_threshold > self.ai_dodge_threshold:
            raise ConfigurationError(
                f"ai_counter_threshold ({self.ai_counter_threshold}) must not exceed "
                f"ai_dodge_threshold ({self.ai_dodge_threshold})",
                config_key="ai_counter_threshold",
            )
        return self


class PacingSettings(BaseSettings):
    """Presentation pacing delays, in seconds.

    Attributes:
        combat_start_delay: Pause after the combat-started announcement.
        round_delay: Pause after each round announcement.
        action_delay: Pause after every actor's action.
        counter_delay: Pause before a counter-attack roll.
    """

    model_config = SettingsConfigDict(
        env_prefix="ENCOUNTER_ENGINE_PACING_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    combat_start_delay: float = Field(default=1.0, ge=0)
    round_delay: float = Field(default=0.8, ge=0)
    action_delay: float = Field(default=1.0, ge=0)
    counter_delay: float = Field(default=0.5, ge=0)


class ProgressionSettings(BaseSettings):
    """Leveling and reward rules.

    Attributes:
        initial_xp_threshold: Experience needed for the first level-up.
        xp_growth: Multiplier applied to the threshold on every level-up.
        level_life_bonus: Max vitality gained per level.
        level_damage_bonus: Weapon damage gained per level.
        default_xp_reward: Experience granted when a template names none.
        default_gold_min: Lower gold bound when a template names no range.
        default_gold_max: Upper gold bound when a template names no range.
        loot_chance: Probability of a loot drop after a victory.
    """

    model_config = SettingsConfigDict(
        env_prefix="ENCOUNTER_ENGINE_PROGRESSION_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    initial_xp_threshold: int = Field(default=100, ge=1)
    xp_growth: float = Field(default=1.5, ge=1.0)
    level_life_bonus: int = Field(default=20, ge=0)
    level_damage_bonus: int = Field(default=5, ge=0)
    default_xp_reward: int = Field(default=20, ge=0)
    default_gold_min: int = Field(default=10, ge=0)
    default_gold_max: int = Field(default=50, ge=0)
    loot_chance: float = Field(default=0.6, ge=0.0, le=1.0)

    @model_validator(mode="after")
    def validate_gold_range(self) -> "ProgressionSettings":
        """Ensure the default gold range is not inverted.

        Returns:
            Self if validation passes.

        Raises:
            ConfigurationError: If default_gold_min > default_gold_max.
        """
        if self.default_gold_min > self.default_gold_max:
            raise ConfigurationError(
                f"default_gold_min ({self.default_gold_min}) must not exceed "
                f"default_gold_max ({self.default_gold_max})",
                config_key="default_gold_min",
            )
        return self


class StorageSettings(BaseSettings):
    """Configuration for save storage.

    Attributes:
        save_path: Path to the SQLite database holding save slots.
    """

    model_config = SettingsConfigDict(
        env_prefix="ENCOUNTER_ENGINE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    save_path: Path = Field(
        default=Path.home() / ".encounter_engine" / "saves.db",
        description="Path to SQLite save database",
    )


class Settings(BaseSettings):
    """Main engine settings aggregating all configuration domains.

    Attributes:
        app_name: Application name.
        app_version: Application version string.
        debug: Enable debug mode.
        log_level: Engine logging level.
        log_json: Render logs as JSON instead of the console renderer.
        combat: Combat rule settings.
        pacing: Presentation pacing settings.
        progression: Leveling and reward settings.
        storage: Save storage settings.
    """

    model_config = SettingsConfigDict(
        env_prefix="ENCOUNTER_ENGINE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        env_nested_delimiter="__",
    )

    app_name: str = Field(default="Encounter Engine", description="Application name")
    app_version: str = Field(default="0.1.0", description="Application version")
    debug: bool = Field(default=False, description="Enable debug mode")
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Logging level",
    )
    log_json: bool = Field(default=False, description="Render logs as JSON")

    combat: CombatSettings = Field(default_factory=CombatSettings)
    pacing: PacingSettings = Field(default_factory=PacingSettings)
    progression: ProgressionSettings = Field(default_factory=ProgressionSettings)
    storage: StorageSettings = Field(default_factory=StorageSettings)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get the engine settings singleton.

    Returns:
        The cached Settings instance.

    Raises:
        ConfigurationError: If configuration is missing or invalid.
    """
    try:
        return Settings()
    except Exception as exc:
        raise ConfigurationError(
            f"Failed to load engine settings: {exc}",
            details={"original_error": str(exc)},
        ) from exc


def clear_settings_cache() -> None:
    """Clear the settings cache, forcing a reload on next access."""
    get_settings.cache_clear()


__all__ = [
    "CombatSettings",
    "PacingSettings",
    "ProgressionSettings",
    "StorageSettings",
    "Settings",
    "get_settings",
    "clear_settings_cache",
]
