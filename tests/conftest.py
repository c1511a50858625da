"""Pytest configuration and shared fixtures.

This module provides common fixtures and test doubles for the encounter
engine test suite: zero-delay settings, a dice roller with scripted faces
and an input provider with scripted answers.
"""

from __future__ import annotations

import itertools
import random
from collections.abc import Iterable, Sequence
from typing import TYPE_CHECKING, Any

import pytest

from encounter_engine.core.config import PacingSettings, Settings
from encounter_engine.core.events import EventBus, EventType
from encounter_engine.core.input_provider import (
    CONFIRM_YES,
    ChoiceContext,
    ChoiceContextType,
    ChoiceOption,
    InputProvider,
)
from encounter_engine.engine.combat import CombatSystem
from encounter_engine.engine.dice import DiceRoller
from encounter_engine.models.character import Character
from encounter_engine.models.items import Consumable, HealEffect


if TYPE_CHECKING:
    from collections.abc import Generator


# =============================================================================
# Test Doubles
# =============================================================================


class FixedDiceRoller(DiceRoller):
    """Dice roller returning scripted faces, cycling when exhausted."""

    def __init__(self, faces: int | Iterable[int], *, die_size: int = 20) -> None:
        super().__init__(die_size=die_size)
        values = [faces] if isinstance(faces, int) else list(faces)
        self._faces = itertools.cycle(values)
        self.rolls: list[int] = []

    def roll_die(self) -> int:
        face = next(self._faces)
        self.rolls.append(face)
        return face


class ScriptedInputProvider(InputProvider):
    """Input provider answering from a script.

    Each answer is either an option id or an exception instance to raise.
    When the script runs out, the first offered option is chosen.
    """

    def __init__(self, answers: Iterable[str | BaseException] = ()) -> None:
        self._answers = list(answers)
        self.requests: list[tuple[str, list[str], ChoiceContext]] = []

    async def request_choice(
        self,
        title: str,
        options: Sequence[ChoiceOption],
        context: ChoiceContext,
        *,
        timeout: float | None = None,
    ) -> str:
        self.requests.append((title, [option.id for option in options], context))
        if not self._answers:
            return options[0].id
        answer = self._answers.pop(0)
        if isinstance(answer, BaseException):
            raise answer
        return answer

    async def request_confirmation(self, message: str, *, timeout: float | None = None) -> bool:
        return await self.request_choice(
            message,
            [ChoiceOption(CONFIRM_YES, "Yes")],
            ChoiceContext(actor_name="", kind=ChoiceContextType.ADVENTURE_DECISION),
        ) == CONFIRM_YES


class EventRecorder:
    """Collects every payload emitted on a bus, per event kind."""

    def __init__(self, bus: EventBus, *event_types: EventType) -> None:
        self.events: dict[EventType, list[Any]] = {}
        for event_type in event_types or tuple(EventType):
            self.events[event_type] = []
            bus.subscribe(event_type, self.events[event_type].append)

    def of(self, event_type: EventType) -> list[Any]:
        return self.events.get(event_type, [])

    def messages(self) -> list[str]:
        return [event.message for event in self.of(EventType.DOMAIN_MESSAGE)]


# =============================================================================
# Configuration Fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def reset_settings_cache() -> Generator[None, None, None]:
    """Reset the settings cache before and after each test."""
    from encounter_engine.core.config import clear_settings_cache

    clear_settings_cache()
    yield
    clear_settings_cache()


@pytest.fixture
def settings() -> Settings:
    """Provide settings without pacing delays.

    Returns:
        Settings whose pacing delays are all zero.
    """
    return Settings(
        pacing=PacingSettings(
            combat_start_delay=0,
            round_delay=0,
            action_delay=0,
            counter_delay=0,
        )
    )


@pytest.fixture
def rng() -> random.Random:
    """Provide a seeded random source."""
    return random.Random(1234)


# =============================================================================
# Engine Fixtures
# =============================================================================


@pytest.fixture
def max_roller() -> FixedDiceRoller:
    """Dice roller that always shows the highest face."""
    return FixedDiceRoller(20)


@pytest.fixture
def min_roller() -> FixedDiceRoller:
    """Dice roller that always shows a 1."""
    return FixedDiceRoller(1)


@pytest.fixture
def combat_system(settings: Settings, max_roller: FixedDiceRoller) -> CombatSystem:
    """Combat system whose every check is a natural 20."""
    return CombatSystem(max_roller, settings=settings)


# =============================================================================
# Model Fixtures
# =============================================================================


@pytest.fixture
def make_character(settings: Settings, rng: random.Random):
    """Factory building characters with the test settings.

    Returns:
        Callable accepting the Character keyword arguments.
    """

    def factory(name: str = "Hero", **kwargs: Any) -> Character:
        kwargs.setdefault("settings", settings)
        kwargs.setdefault("rng", rng)
        return Character(name, **kwargs)

    return factory


@pytest.fixture
def hero(make_character) -> Character:
    """Provide a player character with default stats."""
    return make_character("Aria", is_player=True)


@pytest.fixture
def goblin(make_character) -> Character:
    """Provide a weak AI adversary."""
    return make_character("Goblin", max_life=40, weapon_damage=10, speed=15)


@pytest.fixture
def health_potion() -> Consumable:
    """Provide a 30-point healing potion."""
    return Consumable(
        name="Health Potion",
        description="Heals 30 HP.",
        effects=(HealEffect(value=30, description="Heals 30 HP."),),
    )


# =============================================================================
# Test Double Factories
# =============================================================================


@pytest.fixture
def make_roller():
    """Factory building FixedDiceRoller instances."""
    return FixedDiceRoller


@pytest.fixture
def make_provider():
    """Factory building ScriptedInputProvider instances."""
    return ScriptedInputProvider


@pytest.fixture
def record_events():
    """Factory attaching an EventRecorder to a bus."""
    return EventRecorder
