"""Game session: the object a UI layer talks to.

A GameSession wires one hero, the adventure manager, the interactive input
provider and save storage together. Sessions are created explicitly and
torn down with :meth:`GameSession.dispose` (or a ``with`` block), so several
independent sessions can coexist, e.g. in tests.

Example:
    >>> with GameSession(on_choice_request=ui.show_choice, on_log=ui.log) as session:
    ...     session.init_hero("Aria", HeroClass.TANK)
    ...     outcome = await session.start_encounter()
"""

from __future__ import annotations

import random
from collections.abc import Callable
from typing import Any

from encounter_engine.content.enemies import EnemyTemplate
from encounter_engine.core.config import Settings, get_settings
from encounter_engine.core.events import DomainMessageEvent, EventType
from encounter_engine.core.exceptions import InvalidGameStateError, PersistenceError
from encounter_engine.core.input_provider import ChoiceHandler, InteractiveInputProvider
from encounter_engine.core.logging import get_logger
from encounter_engine.engine.adventure import AdventureManager
from encounter_engine.engine.turn_manager import CombatOutcome
from encounter_engine.models.character import Character
from encounter_engine.models.enums import HeroClass
from encounter_engine.storage.save_manager import SaveManager


logger = get_logger(__name__)


HERO_CLASS_STATS: dict[HeroClass, dict[str, int]] = {
    HeroClass.ADVENTURER: {},
    HeroClass.TANK: {"max_life": 150},
    HeroClass.MAGE: {"weapon_damage": 25},
}


class GameSession:
    """One player's game: hero, adventure, decisions and saves.

    Attributes:
        input_provider: Provider the UI answers choices through.
        on_log: Callback receiving every narrative message for the hero.
        hero: The current hero, if any.
        active_enemy: The adversary of the running encounter, if any.
        adventure: Adventure manager of the current hero, if any.
    """

    def __init__(
        self,
        settings: Settings | None = None,
        save_manager: SaveManager | None = None,
        rng: random.Random | None = None,
        *,
        on_choice_request: ChoiceHandler | None = None,
        on_log: Callable[[str], None] | None = None,
    ) -> None:
        """Initialize the session.

        Args:
            settings: Engine settings; defaults to the cached settings.
            save_manager: Save storage; created from settings on first use.
            rng: Random source shared by characters and the adventure.
            on_choice_request: UI callback notified of every choice request.
            on_log: UI callback receiving narrative messages.
        """
        self._settings = settings or get_settings()
        self._save_manager = save_manager
        self._rng = rng or random.Random()
        self.input_provider = InteractiveInputProvider(
            on_choice_request=on_choice_request,
            default_timeout=self._settings.combat.action_timeout_seconds,
        )
        self.on_log = on_log

        self.hero: Character | None = None
        self.active_enemy: Character | None = None
        self.adventure: AdventureManager | None = None
        self._unsubscribers: list[Callable[[], None]] = []

    def __enter__(self) -> GameSession:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.dispose()

    @property
    def save_manager(self) -> SaveManager:
        """Save storage, created lazily at the configured path."""
        if self._save_manager is None:
            self._save_manager = SaveManager(settings=self._settings)
        return self._save_manager

    def log(self, message: str) -> None:
        """Forward a message to the UI log callback."""
        if self.on_log is not None:
            self.on_log(message)

    # =========================================================================
    # Hero lifecycle
    # =========================================================================

    def init_hero(self, name: str, hero_class: HeroClass | str = HeroClass.ADVENTURER) -> Character:
        """Create a new hero and adventure, replacing any previous game.

        Args:
            name: Hero name.
            hero_class: Archetype; unknown labels get the adventurer stats.

        Returns:
            The new hero.
        """
        self.dispose()

        try:
            archetype = HeroClass(hero_class)
        except ValueError:
            archetype = HeroClass.ADVENTURER
        class_name = str(hero_class)

        hero = Character(
            name,
            class_name=class_name,
            is_player=True,
            settings=self._settings,
            rng=self._rng,
            **HERO_CLASS_STATS[archetype],
        )
        self._attach_hero(hero)
        logger.info("Hero created", hero=name, hero_class=class_name)
        self.log(f"Welcome, {name} the {class_name}!")
        return hero

    def save_game(self, slot: str | None = None) -> bool:
        """Save the hero.

        Returns:
            True if a hero was saved.
        """
        if self.hero is None:
            logger.warning("Save requested without a hero")
            return False

        try:
            if slot is None:
                self.save_manager.save(self.hero)
            else:
                self.save_manager.save(self.hero, slot)
        except PersistenceError as exc:
            logger.error("Save failed", error=str(exc))
            self.log("Could not save the game.")
            return False

        self.log("Game saved successfully!")
        return True

    def load_game(self, slot: str | None = None) -> Character | None:
        """Load a saved hero, replacing the current game on success.

        Returns:
            The loaded hero, or None if nothing could be loaded.
        """
        try:
            loaded = self.save_manager.load() if slot is None else self.save_manager.load(slot)
        except PersistenceError as exc:
            logger.error("Load failed", error=str(exc))
            self.log("Could not load the game.")
            return None
        if loaded is None:
            return None

        self.dispose()
        self._attach_hero(loaded)
        self.log(f"Game loaded! Welcome back, {loaded.name}.")
        return loaded

    def _attach_hero(self, hero: Character) -> None:
        hero.input_provider = self.input_provider
        self._unsubscribers.append(
            hero.events.subscribe(EventType.DOMAIN_MESSAGE, self._on_domain_message)
        )
        self.hero = hero
        self.adventure = AdventureManager(
            hero,
            settings=self._settings,
            rng=self._rng,
            on_encounter_start=self._on_encounter_start,
            on_encounter_end=self._on_encounter_end,
        )

    def _on_domain_message(self, event: DomainMessageEvent) -> None:
        self.log(event.message)

    def _on_encounter_start(self, enemy: Character) -> None:
        self.active_enemy = enemy

    def _on_encounter_end(self) -> None:
        self.active_enemy = None

    # =========================================================================
    # Encounters and decisions
    # =========================================================================

    async def start_encounter(self, template: EnemyTemplate | None = None) -> CombatOutcome:
        """Run one encounter for the current hero.

        Raises:
            InvalidGameStateError: If no hero has been created or loaded.
        """
        if self.adventure is None:
            raise InvalidGameStateError(
                "No hero in session; call init_hero or load_game first",
                current_state="no_hero",
            )
        return await self.adventure.handle_encounter(template)

    def resolve_choice(self, option_id: str) -> bool:
        """Answer the pending choice request."""
        return self.input_provider.resolve_choice(option_id)

    def cancel_choice(self, reason: str = "User cancelled") -> bool:
        """Cancel the pending choice request."""
        return self.input_provider.cancel_choice(reason)

    # =========================================================================
    # Status snapshots
    # =========================================================================

    def hero_status(self) -> dict[str, Any] | None:
        """Plain-data vitals and progress of the hero, or None without one."""
        if self.hero is None:
            return None
        return {
            "name": self.hero.name,
            "class_name": self.hero.class_name,
            "hp": self.hero.current_life,
            "max_hp": self.hero.max_life,
            "level": self.hero.level,
            "gold": self.hero.gold,
            "xp": self.hero.xp,
            "xp_to_next_level": self.hero.xp_to_next_level,
        }

    def enemy_status(self) -> dict[str, Any] | None:
        """Name and vitality of the current adversary, or None outside combat."""
        if self.active_enemy is None:
            return None
        return {
            "name": self.active_enemy.name,
            "hp": self.active_enemy.current_life,
            "max_hp": self.active_enemy.max_life,
        }

    def hero_inventory(self) -> list[dict[str, Any]]:
        """Plain-data items of the hero, in inventory order."""
        if self.hero is None:
            return []
        return self.hero.inventory.to_snapshot()

    # =========================================================================
    # Teardown
    # =========================================================================

    def dispose(self) -> None:
        """Release the current game. Safe to call repeatedly."""
        if self.input_provider.has_pending:
            self.input_provider.cancel_choice("Game session disposed")

        for unsubscribe in self._unsubscribers:
            unsubscribe()
        self._unsubscribers.clear()

        if self.hero is not None:
            self.hero.events.clear()
        if self.active_enemy is not None:
            self.active_enemy.events.clear()

        self.hero = None
        self.active_enemy = None
        self.adventure = None


__all__ = ["GameSession", "HERO_CLASS_STATS"]
