"""Attack resolution between two combatants.

One attack runs in three phases: the target is told it is being targeted
and picks a reaction, a d20 check is rolled against the target's defense,
and on a miss a countering target gets an independent counter-attack roll.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass

from encounter_engine.core.config import Settings, get_settings
from encounter_engine.core.events import (
    BeingTargetedEvent,
    EventType,
    ReactionChosenEvent,
)
from encounter_engine.core.logging import get_logger
from encounter_engine.engine.dice import DiceRoller
from encounter_engine.models.combatant import Combatant
from encounter_engine.models.enums import ReactionType


logger = get_logger(__name__)


@dataclass(frozen=True)
class AttackResult:
    """Outcome of a single attack.

    Attributes:
        hit: Whether the attack connected.
        damage: Vitality the target actually lost, which is less than the
            attacker's weapon damage when the blow overkills.
        reaction: Reaction the target chose.
        countered: Whether a counter-attack landed on the attacker.
        natural_roll: Face shown on the hit die.
        attack_total: Natural roll plus the attacker's dexterity modifier.
        defense: Defense value the attack was rolled against.
        is_critical: Whether the natural roll was the highest face.
    """

    hit: bool
    damage: int
    reaction: ReactionType
    countered: bool = False
    natural_roll: int = 0
    attack_total: int = 0
    defense: int = 0
    is_critical: bool = False


class CombatSystem:
    """Resolves attacks using the configured dice and defense rules."""

    def __init__(
        self,
        dice: DiceRoller | None = None,
        *,
        settings: Settings | None = None,
    ) -> None:
        """Initialize the combat system.

        Args:
            dice: Dice roller; defaults to one using the configured die size.
            settings: Engine settings; defaults to the cached settings.
        """
        self._settings = settings or get_settings()
        self._dice = dice or DiceRoller(die_size=self._settings.combat.die_size)

    @property
    def dice(self) -> DiceRoller:
        """Dice roller used for every check."""
        return self._dice

    def defense_of(self, target: Combatant, reaction: ReactionType) -> int:
        """Compute the defense value of ``target`` for the given reaction."""
        rules = self._settings.combat
        defense = rules.base_defense + target.ability_modifier(target.agility)
        if reaction is ReactionType.DODGE:
            defense += rules.dodge_bonus
        return defense

    async def resolve_attack(self, attacker: Combatant, target: Combatant) -> AttackResult:
        """Resolve one attack from ``attacker`` against ``target``.

        Args:
            attacker: Acting combatant.
            target: Combatant being attacked.

        Returns:
            AttackResult describing the roll and its consequences.
        """
        target.events.emit(
            EventType.BEING_TARGETED,
            BeingTargetedEvent(target_name=target.name, attacker_name=attacker.name),
        )
        reaction = await target.handle_reaction(attacker)
        target.events.emit(
            EventType.REACTION_CHOSEN,
            ReactionChosenEvent(
                actor_name=target.name,
                attacker_name=attacker.name,
                reaction=reaction,
            ),
        )

        check = self._dice.roll_check(attacker.ability_modifier(attacker.dexterity))
        defense = self.defense_of(target, reaction)
        hit = check.total >= defense or check.is_critical

        damage = 0
        countered = False
        if hit:
            damage = target.take_damage(attacker.weapon_damage)
        elif reaction is ReactionType.COUNTER and target.is_alive():
            countered = await self._counter_attack(target, attacker)

        logger.info(
            "Attack resolved",
            attacker=attacker.name,
            target=target.name,
            reaction=reaction.value,
            natural=check.natural,
            attack_total=check.total,
            defense=defense,
            hit=hit,
            damage=damage,
            countered=countered,
        )

        return AttackResult(
            hit=hit,
            damage=damage,
            reaction=reaction,
            countered=countered,
            natural_roll=check.natural,
            attack_total=check.total,
            defense=defense,
            is_critical=check.is_critical,
        )

    async def _counter_attack(self, defender: Combatant, attacker: Combatant) -> bool:
        """Roll a counter-attack from ``defender`` against ``attacker``.

        Returns:
            True if the counter-attack landed.
        """
        rules = self._settings.combat
        await asyncio.sleep(self._settings.pacing.counter_delay)

        check = self._dice.roll_check(defender.ability_modifier(defender.dexterity))
        if check.total < rules.counter_difficulty:
            logger.debug(
                "Counter-attack failed",
                defender=defender.name,
                total=check.total,
                difficulty=rules.counter_difficulty,
            )
            return False

        attacker.take_damage(defender.weapon_damage)
        return True


__all__ = ["AttackResult", "CombatSystem"]
