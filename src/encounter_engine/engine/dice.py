"""Dice rolling for attack and counter-attack checks.

Rolls go through the d20 library. A check rolls the bare hit die and adds
the ability modifier separately, so the natural face stays available for
critical-hit detection regardless of the modifier's sign.
"""

from __future__ import annotations

from dataclasses import dataclass

import d20

from encounter_engine.core.exceptions import DiceRollError
from encounter_engine.core.logging import get_logger


logger = get_logger(__name__)


@dataclass(frozen=True)
class CheckRoll:
    """Result of a single check.

    Attributes:
        natural: Face shown on the hit die.
        modifier: Ability modifier added to the face.
        total: ``natural + modifier``.
        is_critical: Whether the natural face is the highest face.
    """

    natural: int
    modifier: int
    total: int
    is_critical: bool


class DiceRoller:
    """Dice roller backed by the d20 library.

    Example:
        >>> roller = DiceRoller()
        >>> check = roller.roll_check(2)
        >>> check.total == check.natural + 2
        True
    """

    def __init__(self, *, die_size: int = 20) -> None:
        """Initialize the dice roller.

        Args:
            die_size: Faces of the hit die.

        Raises:
            DiceRollError: If the die has fewer than two faces.
        """
        if die_size < 2:
            raise DiceRollError(f"Die must have at least two faces, got {die_size}")
        self.die_size = die_size

    def roll(self, expression: str) -> int:
        """Roll an arbitrary dice expression.

        Args:
            expression: Dice expression (e.g. '1d20', '2d6+3').

        Returns:
            The rolled total.

        Raises:
            DiceRollError: If the expression is empty or invalid.
        """
        if not expression or not expression.strip():
            raise DiceRollError("Empty dice expression", expression=expression)

        try:
            result = d20.roll(expression)
        except d20.RollError as exc:
            raise DiceRollError(
                f"Invalid dice expression: {exc}",
                expression=expression,
            ) from exc

        logger.debug("Dice rolled", expression=expression, total=result.total)
        return result.total

    def roll_die(self) -> int:
        """Roll the hit die once."""
        return self.roll(f"1d{self.die_size}")

    def roll_check(self, modifier: int) -> CheckRoll:
        """Roll the hit die and add an ability modifier.

        Args:
            modifier: Ability modifier to add.

        Returns:
            CheckRoll with the natural face and the total.
        """
        natural = self.roll_die()
        return CheckRoll(
            natural=natural,
            modifier=modifier,
            total=natural + modifier,
            is_critical=natural == self.die_size,
        )


__all__ = ["CheckRoll", "DiceRoller"]
