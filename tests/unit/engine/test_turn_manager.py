"""Tests for the combat turn manager."""

from __future__ import annotations

import asyncio

import pytest

from encounter_engine.core.config import CombatSettings
from encounter_engine.core.events import EventType
from encounter_engine.core.exceptions import (
    ChoiceTimeoutError,
    InvalidGameStateError,
    ProviderUnavailableError,
    TurnManagementError,
)
from encounter_engine.core.input_provider import ChoiceContextType, InteractiveInputProvider
from encounter_engine.engine.turn_manager import ITEM_USAGE, TurnManager
from encounter_engine.models.enums import CombatResult, CombatStatus
from encounter_engine.models.items import Consumable, HealEffect


class StubRandom:
    """Random source whose draws are fixed."""

    def __init__(self, value: float) -> None:
        self.value = value

    def random(self) -> float:
        return self.value


NO_REACTION = StubRandom(0.1)


@pytest.fixture
def fast_hero(make_character):
    """Player who acts first and kills a weak enemy with one hit."""
    return make_character("Aria", is_player=True, speed=20, weapon_damage=50)


@pytest.fixture
def slime(make_character):
    return make_character("Slime", max_life=30, weapon_damage=8, speed=5, rng=NO_REACTION)


class TestSetup:
    """Tests for construction."""

    def test_requires_two_combatants(self, hero, settings) -> None:
        with pytest.raises(TurnManagementError) as exc_info:
            TurnManager([hero], settings=settings)

        assert exc_info.value.details["combatant_count"] == 1

    def test_turn_order_by_speed(self, make_character, settings) -> None:
        """Test combatants act in descending speed order."""
        slow = make_character("Slow", speed=5)
        fast = make_character("Fast", speed=40)
        mid = make_character("Mid", speed=15)

        manager = TurnManager([slow, fast, mid], settings=settings)

        assert [c.speed for c in manager.turn_order] == [40, 15, 5]
        assert manager.status is CombatStatus.IDLE
        assert manager.round_number == 0

    def test_equal_speed_keeps_input_order(self, make_character, settings) -> None:
        first = make_character("First")
        second = make_character("Second")

        manager = TurnManager([first, second], settings=settings)

        assert manager.turn_order == [first, second]

    def test_living_combatants(self, make_character, settings) -> None:
        fast = make_character("Fast", speed=40)
        fallen = make_character("Fallen", speed=15)
        slow = make_character("Slow", speed=5)
        manager = TurnManager([slow, fallen, fast], settings=settings)

        fallen.take_damage(fallen.max_life)

        assert manager.living_combatants() == [fast, slow]
        assert manager.is_combat_ongoing()

    def test_provider_injected_into_players(self, hero, goblin, make_provider, settings) -> None:
        """Test players without a provider receive the manager's provider."""
        provider = make_provider()

        TurnManager([hero, goblin], input_provider=provider, settings=settings)

        assert hero.input_provider is provider
        assert goblin.input_provider is None

    def test_existing_provider_kept(self, make_character, goblin, make_provider, settings) -> None:
        own = make_provider()
        hero = make_character("Aria", is_player=True, input_provider=own)

        TurnManager([hero, goblin], input_provider=make_provider(), settings=settings)

        assert hero.input_provider is own


class TestCombatLoop:
    """Tests for full combats."""

    @pytest.mark.asyncio
    async def test_one_round_victory(
        self, fast_hero, slime, make_provider, combat_system, settings, record_events
    ) -> None:
        """Test a max-face roller ends the combat in the first round."""
        provider = make_provider()
        statuses = record_events(fast_hero.events, EventType.COMBAT_STATUS_CHANGE)
        ends = record_events(slime.events, EventType.COMBAT_END)
        manager = TurnManager(
            [slime, fast_hero],
            input_provider=provider,
            combat_system=combat_system,
            settings=settings,
        )

        outcome = await manager.start_combat()

        assert outcome.result is CombatResult.VICTORY
        assert outcome.winner is fast_hero
        assert outcome.rounds == 1
        assert not slime.is_alive()
        assert fast_hero.current_life == fast_hero.max_life
        assert [e.status for e in statuses.of(EventType.COMBAT_STATUS_CHANGE)] == [
            CombatStatus.STARTING,
            CombatStatus.PLAYER_TURN,
            CombatStatus.ENDED,
        ]
        assert ends.of(EventType.COMBAT_END)[0].winner == "Aria"
        assert manager.status is CombatStatus.ENDED

    @pytest.mark.asyncio
    async def test_menu_offered_to_player(self, fast_hero, slime, make_provider, combat_system, settings) -> None:
        provider = make_provider()
        manager = TurnManager([fast_hero, slime], input_provider=provider, combat_system=combat_system, settings=settings)

        await manager.start_combat()

        title, option_ids, context = provider.requests[0]
        assert title == "Aria's turn. What will you do?"
        assert option_ids == ["attack", "item", "flee"]
        assert context.actor_name == "Aria"

    @pytest.mark.asyncio
    async def test_narration(self, fast_hero, slime, make_provider, combat_system, settings, record_events) -> None:
        """Test start, round and winner lines reach every combatant."""
        hero_log = record_events(fast_hero.events, EventType.DOMAIN_MESSAGE)
        slime_log = record_events(slime.events, EventType.DOMAIN_MESSAGE)
        manager = TurnManager(
            [fast_hero, slime], input_provider=make_provider(), combat_system=combat_system, settings=settings
        )

        await manager.start_combat()

        for log in (hero_log, slime_log):
            assert "Combat has started!" in log.messages()
            assert "--- Round 1 ---" in log.messages()
            assert "Winner: Aria" in log.messages()

    @pytest.mark.asyncio
    async def test_flee_ends_immediately(
        self, fast_hero, slime, make_provider, combat_system, settings, record_events
    ) -> None:
        """Test fleeing ends combat without touching anyone's vitality."""
        ends = record_events(slime.events, EventType.COMBAT_END)
        manager = TurnManager(
            [fast_hero, slime],
            input_provider=make_provider(["flee"]),
            combat_system=combat_system,
            settings=settings,
        )

        outcome = await manager.start_combat()

        assert outcome.result is CombatResult.FLED
        assert outcome.winner is None
        assert fast_hero.current_life == fast_hero.max_life
        assert slime.current_life == slime.max_life
        assert ends.of(EventType.COMBAT_END)[0].result is CombatResult.FLED
        assert manager.status is CombatStatus.ENDED

    @pytest.mark.asyncio
    @pytest.mark.parametrize("answer", [ProviderUnavailableError("gone"), ChoiceTimeoutError("slow"), "dance"])
    async def test_bad_action_means_attack(
        self, fast_hero, slime, make_provider, combat_system, settings, answer
    ) -> None:
        """Test provider failures and unknown actions fall back to attacking."""
        manager = TurnManager(
            [fast_hero, slime],
            input_provider=make_provider([answer]),
            combat_system=combat_system,
            settings=settings,
        )

        outcome = await manager.start_combat()

        assert outcome.result is CombatResult.VICTORY
        assert outcome.rounds == 1

    @pytest.mark.asyncio
    async def test_unanswered_menu_times_out(self, fast_hero, slime, combat_system, settings) -> None:
        """Test a UI that never answers cannot stall the encounter."""
        hasty = settings.model_copy(update={"combat": CombatSettings(action_timeout_seconds=0.01)})
        manager = TurnManager(
            [fast_hero, slime],
            input_provider=InteractiveInputProvider(),
            combat_system=combat_system,
            settings=hasty,
        )

        outcome = await asyncio.wait_for(manager.start_combat(), 5)

        assert outcome.result is CombatResult.VICTORY
        assert not fast_hero.input_provider.has_pending

    @pytest.mark.asyncio
    async def test_player_without_provider_attacks(self, fast_hero, slime, combat_system, settings) -> None:
        manager = TurnManager([fast_hero, slime], combat_system=combat_system, settings=settings)

        outcome = await manager.start_combat()

        assert outcome.result is CombatResult.VICTORY

    @pytest.mark.asyncio
    async def test_ai_only_combat_is_defeat(self, make_character, combat_system, settings) -> None:
        """Test that a non-player winner reports defeat."""
        brute = make_character("Ogre", weapon_damage=200, speed=8, rng=NO_REACTION)
        victim = make_character("Slime", rng=NO_REACTION)

        outcome = await TurnManager([victim, brute], combat_system=combat_system, settings=settings).start_combat()

        assert outcome.result is CombatResult.DEFEAT
        assert outcome.winner is brute

    @pytest.mark.asyncio
    async def test_hero_defeated(self, make_character, make_provider, combat_system, settings) -> None:
        hero = make_character("Aria", is_player=True, max_life=20, speed=1)
        ogre = make_character("Ogre", weapon_damage=25, speed=6, rng=NO_REACTION)

        outcome = await TurnManager(
            [hero, ogre], input_provider=make_provider(), combat_system=combat_system, settings=settings
        ).start_combat()

        assert outcome.result is CombatResult.DEFEAT
        assert outcome.winner is ogre
        assert not hero.is_alive()

    @pytest.mark.asyncio
    async def test_dead_combatants_skip_turns(
        self, fast_hero, slime, make_provider, combat_system, settings, record_events
    ) -> None:
        """Test the slain enemy never gets a turn."""
        turns = record_events(slime.events, EventType.TURN_START)
        manager = TurnManager(
            [fast_hero, slime], input_provider=make_provider(), combat_system=combat_system, settings=settings
        )

        await manager.start_combat()

        assert turns.of(EventType.TURN_START) == []

    @pytest.mark.asyncio
    async def test_second_start_rejected(self, fast_hero, slime, make_provider, combat_system, settings) -> None:
        manager = TurnManager(
            [fast_hero, slime], input_provider=make_provider(), combat_system=combat_system, settings=settings
        )
        await manager.start_combat()

        with pytest.raises(InvalidGameStateError):
            await manager.start_combat()


class TestItemUsage:
    """Tests for the item action."""

    @pytest.mark.asyncio
    async def test_use_item_from_menu(
        self, make_character, slime, make_provider, combat_system, settings, health_potion, record_events
    ) -> None:
        """Test choosing an item consumes it and heals."""
        hero = make_character("Aria", is_player=True, speed=20, weapon_damage=50, current_life=50)
        hero.add_item(health_potion)
        log = record_events(hero.events, EventType.DOMAIN_MESSAGE)
        provider = make_provider(["item", health_potion.id])

        outcome = await TurnManager(
            [hero, slime], input_provider=provider, combat_system=combat_system, settings=settings
        ).start_combat()

        assert outcome.result is CombatResult.VICTORY
        assert len(hero.inventory) == 0
        assert "Aria was healed for 30!" in log.messages()

        title, option_ids, context = provider.requests[1]
        assert title == "Which item do you want to use?"
        assert option_ids == [health_potion.id]
        assert context.kind is ChoiceContextType.ADVENTURE_DECISION
        assert context.metadata == {"sub_type": ITEM_USAGE}

    @pytest.mark.asyncio
    async def test_empty_inventory(
        self, fast_hero, slime, make_provider, combat_system, settings, record_events
    ) -> None:
        log = record_events(fast_hero.events, EventType.DOMAIN_MESSAGE)

        await TurnManager(
            [fast_hero, slime], input_provider=make_provider(["item"]), combat_system=combat_system, settings=settings
        ).start_combat()

        assert "Inventory is empty!" in log.messages()

    @pytest.mark.asyncio
    async def test_item_request_failure_uses_nothing(
        self, make_character, slime, make_provider, combat_system, settings, health_potion
    ) -> None:
        hero = make_character("Aria", is_player=True, speed=20, weapon_damage=50)
        hero.add_item(health_potion)
        provider = make_provider(["item", ProviderUnavailableError("gone")])

        await TurnManager([hero, slime], input_provider=provider, combat_system=combat_system, settings=settings).start_combat()

        assert len(hero.inventory) == 1


class TestEmergencyPotion:
    """Tests for the automatic potion reaction."""

    @pytest.mark.asyncio
    async def test_potion_drunk_below_threshold(
        self, make_character, make_provider, combat_system, settings, health_potion, record_events
    ) -> None:
        """Test a hit below a quarter of max vitality triggers the potion."""
        hero = make_character("Aria", is_player=True, current_life=30, speed=10)
        hero.add_item(health_potion)
        imp = make_character("Imp", max_life=15, weapon_damage=10, speed=20, rng=NO_REACTION)
        log = record_events(hero.events, EventType.DOMAIN_MESSAGE)

        outcome = await TurnManager(
            [hero, imp], input_provider=make_provider(), combat_system=combat_system, settings=settings
        ).start_combat()

        assert outcome.result is CombatResult.VICTORY
        assert hero.current_life == 50
        assert len(hero.inventory) == 0
        assert "REACTION: Aria is in danger and drinks Health Potion automatically!" in log.messages()

    @pytest.mark.asyncio
    async def test_no_potion_above_threshold(
        self, make_character, make_provider, combat_system, settings, health_potion
    ) -> None:
        hero = make_character("Aria", is_player=True, current_life=40, speed=10)
        hero.add_item(health_potion)
        imp = make_character("Imp", max_life=15, weapon_damage=10, speed=20, rng=NO_REACTION)

        await TurnManager(
            [hero, imp], input_provider=make_provider(), combat_system=combat_system, settings=settings
        ).start_combat()

        assert hero.current_life == 30
        assert len(hero.inventory) == 1

    @pytest.mark.asyncio
    async def test_dead_combatant_drinks_nothing(
        self, make_character, make_provider, combat_system, settings, health_potion
    ) -> None:
        """Test a killing blow leaves the potion untouched."""
        hero = make_character("Aria", is_player=True, current_life=5, speed=10)
        hero.add_item(health_potion)
        imp = make_character("Imp", max_life=15, weapon_damage=10, speed=20, rng=NO_REACTION)

        outcome = await TurnManager(
            [hero, imp], input_provider=make_provider(), combat_system=combat_system, settings=settings
        ).start_combat()

        assert outcome.result is CombatResult.DEFEAT
        assert len(hero.inventory) == 1

    @pytest.mark.asyncio
    async def test_non_potion_items_ignored(self, make_character, make_provider, combat_system, settings) -> None:
        hero = make_character("Aria", is_player=True, current_life=30, speed=10)
        hero.add_item(Consumable(name="Stale Bread", effects=(HealEffect(value=5),)))
        imp = make_character("Imp", max_life=15, weapon_damage=10, speed=20, rng=NO_REACTION)

        await TurnManager(
            [hero, imp], input_provider=make_provider(), combat_system=combat_system, settings=settings
        ).start_combat()

        assert hero.current_life == 20
        assert len(hero.inventory) == 1


class TestSubscriptions:
    """Tests for reactive subscription lifetime."""

    @pytest.mark.asyncio
    async def test_subscriptions_removed_after_combat(
        self, fast_hero, slime, make_provider, combat_system, settings
    ) -> None:
        manager = TurnManager(
            [fast_hero, slime], input_provider=make_provider(), combat_system=combat_system, settings=settings
        )
        assert slime.events.listener_count(EventType.DAMAGE) == 1

        await manager.start_combat()

        assert fast_hero.events.listener_count() == 0
        assert slime.events.listener_count() == 0

    def test_dispose_is_idempotent(self, hero, goblin, settings) -> None:
        manager = TurnManager([hero, goblin], settings=settings)

        manager.dispose()
        manager.dispose()

        assert hero.events.listener_count() == 0

    @pytest.mark.asyncio
    async def test_cancellation_cleans_up(self, make_character, slime, settings) -> None:
        """Test cancelling a combat waiting on input releases everything."""
        provider = InteractiveInputProvider(on_choice_request=lambda request: None)
        hero = make_character("Aria", is_player=True, speed=20)
        manager = TurnManager([hero, slime], input_provider=provider, settings=settings)

        task = asyncio.create_task(manager.start_combat())
        for _ in range(5):
            await asyncio.sleep(0)
        assert provider.has_pending

        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task

        assert not provider.has_pending
        assert hero.events.listener_count() == 0
        assert slime.events.listener_count() == 0
