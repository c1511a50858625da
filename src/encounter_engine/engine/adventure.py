"""Encounter lifecycle around a persistent hero.

The AdventureManager picks an adversary, runs the combat through a fresh
TurnManager and hands out gold, experience and loot after a victory.
"""

from __future__ import annotations

import random
from collections.abc import Callable, Sequence

from encounter_engine.content.enemies import ENEMY_TEMPLATES, EnemyTemplate, regular_enemies
from encounter_engine.content.item_factory import ItemFactory
from encounter_engine.core.config import Settings, get_settings
from encounter_engine.core.events import (
    CombatStatusEvent,
    DomainMessageEvent,
    EventType,
    new_message_id,
)
from encounter_engine.core.exceptions import CombatError
from encounter_engine.core.logging import bind_context, get_logger, unbind_context
from encounter_engine.engine.combat import CombatSystem
from encounter_engine.engine.run_context import RunContext
from encounter_engine.engine.turn_manager import CombatOutcome, TurnManager
from encounter_engine.models.character import Character
from encounter_engine.models.enums import CombatResult, CombatStatus


logger = get_logger(__name__)


class AdventureManager:
    """Runs encounters for one hero and tracks the run's progress.

    Attributes:
        hero: The player character.
        on_encounter_start: Called with the adversary before combat starts.
        on_encounter_end: Called after every encounter, whatever its outcome.
    """

    def __init__(
        self,
        hero: Character,
        *,
        enemies: Sequence[EnemyTemplate] | None = None,
        item_factory: ItemFactory | None = None,
        combat_system: CombatSystem | None = None,
        settings: Settings | None = None,
        rng: random.Random | None = None,
        on_encounter_start: Callable[[Character], None] | None = None,
        on_encounter_end: Callable[[], None] | None = None,
    ) -> None:
        """Initialize the adventure manager.

        Args:
            hero: The player character.
            enemies: Adversary templates; defaults to the built-in table.
            item_factory: Loot generator.
            combat_system: Attack resolver shared by every encounter.
            settings: Engine settings; defaults to the cached settings.
            rng: Random source for enemy picks, rewards and loot.
            on_encounter_start: Adversary-created callback.
            on_encounter_end: Encounter-finished callback.
        """
        self.hero = hero
        self._settings = settings or get_settings()
        self._rng = rng or random.Random()
        self._enemies = tuple(enemies) if enemies is not None else ENEMY_TEMPLATES
        self._item_factory = item_factory or ItemFactory(self._rng)
        self._combat = combat_system or CombatSystem(settings=self._settings)
        self._run_context = RunContext()
        self.on_encounter_start = on_encounter_start
        self.on_encounter_end = on_encounter_end

    @property
    def run_context(self) -> RunContext:
        """Progress counters of the current run."""
        return self._run_context

    def pick_enemy(self) -> EnemyTemplate:
        """Draw a non-boss template uniformly.

        Raises:
            CombatError: If no non-boss template is available.
        """
        candidates = regular_enemies(self._enemies)
        if not candidates:
            raise CombatError("No regular enemy templates available")
        return self._rng.choice(candidates)

    def build_adversary(self, template: EnemyTemplate) -> Character:
        """Create a fresh AI character from a template."""
        return Character(
            template.name,
            max_life=template.hp,
            weapon_damage=template.damage,
            weapon_name=template.weapon,
            speed=template.speed,
            agility=template.agility,
            dexterity=template.dexterity,
            is_player=False,
            settings=self._settings,
            rng=self._rng,
        )

    async def start_combat(self) -> CombatOutcome:
        """Fight a random regular enemy."""
        return await self.handle_encounter()

    async def handle_encounter(self, template: EnemyTemplate | None = None) -> CombatOutcome:
        """Run one encounter against ``template`` or a random regular enemy.

        Args:
            template: Adversary to fight; drawn at random when omitted.

        Returns:
            The combat outcome.

        Raises:
            CombatError: If no template is given and none can be drawn.
        """
        template = template or self.pick_enemy()
        enemy = self.build_adversary(template)
        bind_context(hero=self.hero.name, enemy=enemy.name)
        logger.info("Encounter started", encounter=self._run_context.encounter_count + 1)

        try:
            if self.on_encounter_start is not None:
                self.on_encounter_start(enemy)

            combat = TurnManager(
                [self.hero, enemy],
                input_provider=self.hero.input_provider,
                combat_system=self._combat,
                settings=self._settings,
            )
            outcome = await combat.start_combat()

            if outcome.result is CombatResult.VICTORY:
                self._grant_rewards(template)
                if template.is_boss:
                    self._run_context.is_boss_defeated = True

            self._run_context.increment_encounters()
            logger.info(
                "Encounter finished",
                result=outcome.result.value,
                rounds=outcome.rounds,
            )
            return outcome
        finally:
            unbind_context("hero", "enemy")
            self.hero.events.emit(
                EventType.COMBAT_STATUS_CHANGE,
                CombatStatusEvent(status=CombatStatus.IDLE),
            )
            if self.on_encounter_end is not None:
                self.on_encounter_end()

    def _grant_rewards(self, template: EnemyTemplate) -> None:
        progression = self._settings.progression
        low, high = template.gold_reward_range or (
            progression.default_gold_min,
            progression.default_gold_max,
        )
        gold = self._rng.randint(low, high)
        xp = template.xp_reward if template.xp_reward is not None else progression.default_xp_reward

        self.hero.add_rewards(gold, xp)
        logger.info("Rewards granted", hero=self.hero.name, gold=gold, xp=xp)

        if self._rng.random() >= progression.loot_chance:
            return

        item = self._item_factory.create_random_item(self.hero.level)
        self._message(f"Loot found: {item.name}!")
        if not self.hero.add_item(item):
            self._message(f"Inventory full, {item.name} was left behind.")

    def _message(self, message: str) -> None:
        self.hero.events.emit(
            EventType.DOMAIN_MESSAGE,
            DomainMessageEvent(id=new_message_id("loot"), message=message),
        )


__all__ = ["AdventureManager"]
