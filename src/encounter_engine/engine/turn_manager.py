"""Turn management for combat encounters.

The TurnManager owns the combat state machine for one encounter:

    IDLE -> STARTING -> (PLAYER_TURN | ENEMY_TURN)* -> ENDED

Combatants act once per round in descending speed order. Player-controlled
combatants pick an action through the input provider; everyone else attacks
the first other living combatant. While combat runs, the manager keeps
reactive subscriptions on every combatant's bus (emergency potion use and
heal notifications) and removes them when combat ends.
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable, Sequence
from dataclasses import dataclass

from encounter_engine.core.config import Settings, get_settings
from encounter_engine.core.events import (
    CombatEndEvent,
    CombatStatusEvent,
    DamageEvent,
    DomainMessageEvent,
    EventType,
    HealEvent,
    TurnEvent,
    new_message_id,
)
from encounter_engine.core.exceptions import (
    InputProviderError,
    InvalidGameStateError,
    TurnManagementError,
)
from encounter_engine.core.input_provider import (
    ChoiceContext,
    ChoiceContextType,
    ChoiceOption,
    InputProvider,
)
from encounter_engine.core.logging import get_logger
from encounter_engine.engine.combat import CombatSystem
from encounter_engine.models.combatant import Combatant
from encounter_engine.models.enums import CombatAction, CombatResult, CombatStatus
from encounter_engine.models.items import Consumable


logger = get_logger(__name__)


ACTION_OPTIONS = (
    ChoiceOption(CombatAction.ATTACK.value, "Attack"),
    ChoiceOption(CombatAction.ITEM.value, "Use item"),
    ChoiceOption(CombatAction.FLEE.value, "Flee"),
)

ITEM_USAGE = "item_usage"


@dataclass(frozen=True)
class CombatOutcome:
    """How a combat ended.

    Attributes:
        result: Victory, defeat or flight.
        winner: The surviving combatant, if any.
        rounds: Number of rounds played.
    """

    result: CombatResult
    winner: Combatant | None = None
    rounds: int = 0


class TurnManager:
    """Run one combat between a fixed set of combatants.

    A TurnManager is single-use: :meth:`start_combat` may be awaited once.

    Example:
        >>> manager = TurnManager([hero, goblin], input_provider=provider)
        >>> outcome = await manager.start_combat()
        >>> outcome.result
        <CombatResult.VICTORY: 'victory'>
    """

    def __init__(
        self,
        combatants: Sequence[Combatant],
        *,
        input_provider: InputProvider | None = None,
        combat_system: CombatSystem | None = None,
        settings: Settings | None = None,
    ) -> None:
        """Initialize the turn manager.

        Args:
            combatants: Participants; sorted by speed, highest first.
            input_provider: Decision source injected into player combatants
                that have none.
            combat_system: Attack resolver.
            settings: Engine settings; defaults to the cached settings.

        Raises:
            TurnManagementError: If fewer than two combatants are given.
        """
        if len(combatants) < 2:
            raise TurnManagementError(
                "Combat requires at least two combatants",
                details={"combatant_count": len(combatants)},
            )

        self._settings = settings or get_settings()
        self._combat = combat_system or CombatSystem(settings=self._settings)
        self._input_provider = input_provider
        self._combatants: list[Combatant] = sorted(combatants, key=lambda c: c.speed, reverse=True)
        self._status = CombatStatus.IDLE
        self._round = 0
        self._started = False
        self._unsubscribers: list[Callable[[], None]] = []

        for combatant in self._combatants:
            if combatant.is_player and combatant.input_provider is None:
                combatant.input_provider = input_provider

        self._setup_reactions()
        logger.info(
            "TurnManager initialized",
            turn_order=[c.name for c in self._combatants],
        )

    # =========================================================================
    # State
    # =========================================================================

    @property
    def status(self) -> CombatStatus:
        """Current phase of the combat state machine."""
        return self._status

    @property
    def round_number(self) -> int:
        """Current round (0 before combat starts)."""
        return self._round

    @property
    def turn_order(self) -> list[Combatant]:
        """Combatants in acting order."""
        return list(self._combatants)

    def living_combatants(self) -> list[Combatant]:
        """Combatants with vitality left, in turn order."""
        return [c for c in self._combatants if c.is_alive()]

    def is_combat_ongoing(self) -> bool:
        """Whether more than one combatant is still alive."""
        return len(self.living_combatants()) > 1

    # =========================================================================
    # Reactive subscriptions
    # =========================================================================

    def _setup_reactions(self) -> None:
        for combatant in self._combatants:
            self._unsubscribers.append(
                combatant.events.subscribe(
                    EventType.DAMAGE,
                    lambda event, c=combatant: self._on_damage(c, event),
                )
            )
            self._unsubscribers.append(
                combatant.events.subscribe(
                    EventType.HEAL,
                    lambda event, c=combatant: self._on_heal(c, event),
                )
            )

    def _on_damage(self, combatant: Combatant, event: DamageEvent) -> None:
        rules = self._settings.combat
        if not combatant.is_alive():
            return
        if event.current_life >= combatant.max_life * rules.emergency_heal_threshold:
            return

        marker = rules.healing_potion_marker.lower()
        potion = next(
            (
                item
                for item in combatant.inventory
                if isinstance(item, Consumable) and marker in item.name.lower()
            ),
            None,
        )
        if potion is None:
            return

        self._message(
            combatant,
            "react-potion",
            f"REACTION: {combatant.name} is in danger and drinks {potion.name} automatically!",
        )
        logger.info("Emergency potion used", combatant=combatant.name, item=potion.name)
        combatant.use_item(potion.id)

    def _on_heal(self, combatant: Combatant, event: HealEvent) -> None:
        self._message(combatant, "heal", f"{combatant.name} was healed for {event.amount}!")

    def dispose(self) -> None:
        """Remove every subscription this manager registered. Idempotent."""
        for unsubscribe in self._unsubscribers:
            unsubscribe()
        self._unsubscribers.clear()

    # =========================================================================
    # Combat loop
    # =========================================================================

    async def start_combat(self) -> CombatOutcome:
        """Run the combat to completion.

        Returns:
            CombatOutcome with the result, the winner and the rounds played.

        Raises:
            InvalidGameStateError: If combat was already started.
        """
        if self._started:
            raise InvalidGameStateError(
                "Combat has already been started",
                current_state=self._status.value,
                expected_states=[CombatStatus.IDLE.value],
            )
        self._started = True

        try:
            return await self._run()
        finally:
            self.dispose()

    async def _run(self) -> CombatOutcome:
        pacing = self._settings.pacing

        self._set_status(CombatStatus.STARTING)
        self._broadcast("Combat has started!")
        logger.info("Combat started", combatants=[c.name for c in self._combatants])
        await asyncio.sleep(pacing.combat_start_delay)

        while self.is_combat_ongoing():
            self._round += 1
            self._broadcast(f"--- Round {self._round} ---")
            logger.info("Round started", round=self._round)
            await asyncio.sleep(pacing.round_delay)

            for actor in self._combatants:
                if not actor.is_alive():
                    continue

                self._emit_turn(EventType.TURN_START, actor)
                if actor.is_player:
                    self._set_status(CombatStatus.PLAYER_TURN)
                    action = await self._request_action(actor)
                    if action is CombatAction.FLEE:
                        logger.info("Combatant fled", combatant=actor.name, round=self._round)
                        outcome = CombatOutcome(result=CombatResult.FLED, rounds=self._round)
                        self._end_combat(outcome)
                        return outcome
                    if action is CombatAction.ITEM:
                        await self._handle_item_usage(actor)
                    else:
                        await self._attack_first_opponent(actor)
                else:
                    self._set_status(CombatStatus.ENEMY_TURN)
                    await self._attack_first_opponent(actor)
                self._emit_turn(EventType.TURN_END, actor)

                await asyncio.sleep(pacing.action_delay)
                if not self.is_combat_ongoing():
                    break

        survivors = self.living_combatants()
        winner = survivors[0] if survivors else None
        result = CombatResult.VICTORY if winner is not None and winner.is_player else CombatResult.DEFEAT
        outcome = CombatOutcome(result=result, winner=winner, rounds=self._round)

        self._broadcast(f"Winner: {winner.name if winner else 'nobody (draw)'}")
        self._end_combat(outcome)
        return outcome

    async def _attack_first_opponent(self, actor: Combatant) -> None:
        target = next((c for c in self._combatants if c is not actor and c.is_alive()), None)
        if target is not None:
            await self._combat.resolve_attack(actor, target)

    async def _request_action(self, actor: Combatant) -> CombatAction:
        provider = actor.input_provider
        if provider is None:
            return CombatAction.ATTACK

        try:
            selected = await provider.request_choice(
                f"{actor.name}'s turn. What will you do?",
                ACTION_OPTIONS,
                ChoiceContext(actor_name=actor.name, kind=ChoiceContextType.COMBAT_REACTION),
                timeout=self._settings.combat.action_timeout_seconds,
            )
        except InputProviderError as exc:
            logger.warning("Action request failed, attacking", combatant=actor.name, error=str(exc))
            return CombatAction.ATTACK

        try:
            return CombatAction(selected)
        except ValueError:
            logger.warning("Unknown action selected", combatant=actor.name, selected=selected)
            return CombatAction.ATTACK

    async def _handle_item_usage(self, actor: Combatant) -> None:
        items = actor.inventory.items
        if not items:
            self._message(actor, "empty-inv", "Inventory is empty!")
            return

        provider = actor.input_provider
        if provider is None:
            return

        options = [
            ChoiceOption(item.id, f"{item.name} ({item.description})" if item.description else item.name)
            for item in items
        ]
        try:
            selected = await provider.request_choice(
                "Which item do you want to use?",
                options,
                ChoiceContext(
                    actor_name=actor.name,
                    kind=ChoiceContextType.ADVENTURE_DECISION,
                    metadata={"sub_type": ITEM_USAGE},
                ),
                timeout=self._settings.combat.action_timeout_seconds,
            )
        except InputProviderError as exc:
            logger.warning("Item request failed", combatant=actor.name, error=str(exc))
            return

        if selected and not actor.use_item(selected):
            self._message(actor, "item-unusable", "That item cannot be used right now.")

    # =========================================================================
    # Notifications
    # =========================================================================

    def _set_status(self, status: CombatStatus) -> None:
        self._status = status
        for combatant in self._combatants:
            combatant.events.emit(EventType.COMBAT_STATUS_CHANGE, CombatStatusEvent(status=status))

    def _end_combat(self, outcome: CombatOutcome) -> None:
        self._set_status(CombatStatus.ENDED)
        payload = CombatEndEvent(
            winner=outcome.winner.name if outcome.winner else None,
            result=outcome.result,
        )
        for combatant in self._combatants:
            combatant.events.emit(EventType.COMBAT_END, payload)
        logger.info(
            "Combat ended",
            result=outcome.result.value,
            winner=payload.winner,
            rounds=outcome.rounds,
        )

    def _emit_turn(self, event_type: EventType, actor: Combatant) -> None:
        actor.events.emit(event_type, TurnEvent(actor_name=actor.name, round_number=self._round))

    def _broadcast(self, message: str) -> None:
        for combatant in self._combatants:
            self._message(combatant, "combat", message)

    @staticmethod
    def _message(combatant: Combatant, prefix: str, message: str) -> None:
        combatant.events.emit(
            EventType.DOMAIN_MESSAGE,
            DomainMessageEvent(id=new_message_id(prefix), message=message),
        )


__all__ = ["ACTION_OPTIONS", "ITEM_USAGE", "CombatOutcome", "TurnManager"]
