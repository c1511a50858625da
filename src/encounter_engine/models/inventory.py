"""Bounded, order-preserving item collection owned by one character."""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from typing import TYPE_CHECKING, Any

from encounter_engine.core.constants import MAX_INVENTORY_CAPACITY
from encounter_engine.core.logging import get_logger
from encounter_engine.models.items import Consumable, Equippable, Item, parse_item


if TYPE_CHECKING:
    from encounter_engine.models.combatant import Combatant

logger = get_logger(__name__)


class Inventory:
    """Ordered list of items with a fixed capacity.

    Adding past capacity, or adding a bare Item that is neither a Consumable
    nor an Equippable, fails without mutating the inventory.

    Attributes:
        capacity: Maximum number of items.
    """

    def __init__(
        self,
        items: Iterable[Item] | None = None,
        *,
        capacity: int = MAX_INVENTORY_CAPACITY,
    ) -> None:
        """Initialize the inventory.

        Args:
            items: Initial items; anything beyond capacity is dropped.
            capacity: Maximum number of items.
        """
        self.capacity = capacity
        self._items: list[Item] = []
        for item in items or ():
            if not self.add_item(item):
                logger.warning("Initial item dropped", item=item.name)

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[Item]:
        return iter(list(self._items))

    def __contains__(self, item_id: object) -> bool:
        return any(item.id == item_id for item in self._items)

    @property
    def items(self) -> list[Item]:
        """Copy of the items, in insertion order."""
        return list(self._items)

    @property
    def is_full(self) -> bool:
        """Whether no further item fits."""
        return len(self._items) >= self.capacity

    def get_item(self, item_id: str) -> Item | None:
        """Find an item by id."""
        return next((item for item in self._items if item.id == item_id), None)

    def add_item(self, item: Item) -> bool:
        """Append an item.

        Args:
            item: Item to add.

        Returns:
            False if the inventory is full or the item is not a concrete
            item kind, True otherwise.
        """
        if not isinstance(item, (Consumable, Equippable)):
            logger.warning("Item rejected, not a concrete item kind", item=item.name, kind=type(item).__name__)
            return False
        if self.is_full:
            logger.info("Inventory full", item=item.name, capacity=self.capacity)
            return False
        self._items.append(item)
        logger.debug("Item added", item=item.name, size=len(self._items))
        return True

    def remove_item(self, item_id: str) -> Item | None:
        """Remove an item by id.

        Returns:
            The removed item, or None if it was not present.
        """
        for index, item in enumerate(self._items):
            if item.id == item_id:
                return self._items.pop(index)
        return None

    def use_item(self, item_id: str, target: Combatant) -> bool:
        """Apply a consumable's effects to ``target`` and spend one use.

        Args:
            item_id: Id of the item to use.
            target: Combatant receiving the effects.

        Returns:
            True if a consumable was used; False if the item is missing or
            cannot be used this way.
        """
        for index, item in enumerate(self._items):
            if item.id != item_id:
                continue
            if not isinstance(item, Consumable):
                logger.info("Item cannot be used directly", item=item.name)
                return False

            spent = item.spend()
            if spent.uses <= 0:
                self._items.pop(index)
            else:
                self._items[index] = spent
            item.apply_effects(target)
            logger.info("Item used", item=item.name, remaining_uses=spent.uses)
            return True

        return False

    def to_snapshot(self) -> list[dict[str, Any]]:
        """Plain-data form of every item."""
        return [item.model_dump(mode="json") for item in self._items]

    @classmethod
    def from_snapshot(
        cls,
        data: Iterable[dict[str, Any]],
        *,
        capacity: int = MAX_INVENTORY_CAPACITY,
    ) -> Inventory:
        """Rebuild an inventory from :meth:`to_snapshot` output.

        Raises:
            pydantic.ValidationError: If an entry does not describe a valid item.
        """
        return cls((parse_item(entry) for entry in data), capacity=capacity)


__all__ = ["Inventory"]
