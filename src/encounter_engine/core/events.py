"""Per-actor event bus for domain notifications.

Every combatant owns one EventBus. The engine emits typed payloads on it
(damage, healing, death, turn boundaries, combat status, narrative
messages) and the presentation layer subscribes to render state without
polling engine internals.

Delivery rules:
    - Listeners run synchronously, highest priority first; equal priorities
      run in subscription order.
    - Each emission iterates over a snapshot of the listener list, so a
      listener may subscribe or unsubscribe while an event is in flight.
    - Listener exceptions propagate to whoever emitted the event.

Example:
    >>> bus = EventBus()
    >>> unsubscribe = bus.subscribe(EventType.HEAL, lambda e: print(e.amount))
    >>> bus.emit(EventType.HEAL, HealEvent(amount=20))
    20
    1
    >>> unsubscribe()
"""

from __future__ import annotations

import itertools
from dataclasses import dataclass, field
from enum import StrEnum
from typing import TYPE_CHECKING, Any, Callable
from uuid import uuid4

from encounter_engine.core.exceptions import EventBusError


if TYPE_CHECKING:
    from encounter_engine.models.enums import CombatResult, CombatStatus, ReactionType
    from encounter_engine.models.items import Item


class EventType(StrEnum):
    """Kinds of events an actor's bus carries."""

    DAMAGE = "on_damage"
    HEAL = "on_heal"
    DEATH = "on_death"
    TURN_START = "on_turn_start"
    TURN_END = "on_turn_end"
    DOMAIN_MESSAGE = "on_domain_message"
    COMBAT_STATUS_CHANGE = "on_combat_status_change"
    COMBAT_END = "on_combat_end"
    INVENTORY_CHANGE = "on_inventory_change"
    BEING_TARGETED = "on_being_targeted"
    REACTION_CHOSEN = "on_reaction_chosen"


# =============================================================================
# Payloads
# =============================================================================


@dataclass(frozen=True)
class DamageEvent:
    """Vitality was reduced."""

    damage: int
    current_life: int


@dataclass(frozen=True)
class HealEvent:
    """Vitality was restored by ``amount``."""

    amount: int


@dataclass(frozen=True)
class DeathEvent:
    """The actor's vitality reached zero."""

    entity_name: str


@dataclass(frozen=True)
class TurnEvent:
    """An actor's turn started or ended."""

    actor_name: str
    round_number: int


@dataclass(frozen=True)
class DomainMessageEvent:
    """Free-text narrative line meant for display."""

    id: str
    message: str


@dataclass(frozen=True)
class CombatStatusEvent:
    """The combat state machine changed phase."""

    status: CombatStatus


@dataclass(frozen=True)
class CombatEndEvent:
    """Combat finished; ``winner`` is the survivor's name, if any."""

    winner: str | None
    result: CombatResult


@dataclass(frozen=True)
class InventoryChangeEvent:
    """The actor's inventory contents changed."""

    inventory: tuple[Item, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class BeingTargetedEvent:
    """The actor is about to be attacked."""

    target_name: str
    attacker_name: str


@dataclass(frozen=True)
class ReactionChosenEvent:
    """The actor picked a defensive reaction against an attack."""

    actor_name: str
    attacker_name: str
    reaction: ReactionType


EVENT_PAYLOADS: dict[EventType, type] = {
    EventType.DAMAGE: DamageEvent,
    EventType.HEAL: HealEvent,
    EventType.DEATH: DeathEvent,
    EventType.TURN_START: TurnEvent,
    EventType.TURN_END: TurnEvent,
    EventType.DOMAIN_MESSAGE: DomainMessageEvent,
    EventType.COMBAT_STATUS_CHANGE: CombatStatusEvent,
    EventType.COMBAT_END: CombatEndEvent,
    EventType.INVENTORY_CHANGE: InventoryChangeEvent,
    EventType.BEING_TARGETED: BeingTargetedEvent,
    EventType.REACTION_CHOSEN: ReactionChosenEvent,
}
"""Payload class each event kind must be emitted with."""


EventCallback = Callable[[Any], None]


def new_message_id(prefix: str = "msg") -> str:
    """Build a unique identifier for a domain message.

    Args:
        prefix: Short label describing the message origin.

    Returns:
        Identifier such as ``"xp-3f9c2a1b"``.
    """
    return f"{prefix}-{uuid4().hex[:12]}"


@dataclass(eq=False)
class _Subscription:
    callback: EventCallback
    priority: int
    sequence: int


class EventBus:
    """Publish/subscribe channel owned by a single actor.

    Attributes:
        owner: Optional name of the owning actor, used in log context.
    """

    def __init__(self, owner: str | None = None) -> None:
        """Initialize an empty bus.

        Args:
            owner: Optional name of the owning actor.
        """
        self.owner = owner
        self._listeners: dict[EventType, list[_Subscription]] = {}
        self._sequence = itertools.count()

    def subscribe(
        self,
        event_type: EventType,
        callback: EventCallback,
        *,
        priority: int = 0,
    ) -> Callable[[], None]:
        """Register a listener for one event kind.

        Args:
            event_type: The event kind to listen to.
            callback: Called with the event payload.
            priority: Higher priorities are invoked first.

        Returns:
            A handle that removes the subscription; calling it again is a no-op.
        """
        subscription = _Subscription(callback, priority, next(self._sequence))
        listeners = self._listeners.setdefault(event_type, [])
        listeners.append(subscription)
        listeners.sort(key=lambda s: (-s.priority, s.sequence))

        def unsubscribe() -> None:
            current = self._listeners.get(event_type)
            if current and subscription in current:
                current.remove(subscription)

        return unsubscribe

    def emit(self, event_type: EventType, payload: Any) -> int:
        """Deliver a payload to every listener of ``event_type``.

        Args:
            event_type: The event kind being emitted.
            payload: Instance of the payload class registered for the kind.

        Returns:
            Number of listeners invoked.

        Raises:
            EventBusError: If the payload does not match the event kind.
        """
        expected = EVENT_PAYLOADS[event_type]
        if not isinstance(payload, expected):
            raise EventBusError(
                f"{event_type.value} expects {expected.__name__}, "
                f"got {type(payload).__name__}",
                event_type=event_type.value,
            )

        snapshot = list(self._listeners.get(event_type, ()))
        for subscription in snapshot:
            subscription.callback(payload)
        return len(snapshot)

    def listener_count(self, event_type: EventType | None = None) -> int:
        """Count active subscriptions.

        Args:
            event_type: Restrict the count to one kind; None counts all kinds.

        Returns:
            Number of registered listeners.
        """
        if event_type is not None:
            return len(self._listeners.get(event_type, ()))
        return sum(len(listeners) for listeners in self._listeners.values())

    def clear(self) -> None:
        """Remove every subscription."""
        self._listeners.clear()


__all__ = [
    "EventType",
    "EventBus",
    "EventCallback",
    "EVENT_PAYLOADS",
    "new_message_id",
    "DamageEvent",
    "HealEvent",
    "DeathEvent",
    "TurnEvent",
    "DomainMessageEvent",
    "CombatStatusEvent",
    "CombatEndEvent",
    "InventoryChangeEvent",
    "BeingTargetedEvent",
    "ReactionChosenEvent",
]
