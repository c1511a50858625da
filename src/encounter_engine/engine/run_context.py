"""Per-run progress counters."""

from __future__ import annotations

from dataclasses import dataclass


DEFAULT_BIOME = "Spiral Fields"


@dataclass
class RunContext:
    """Progress of the current adventure run.

    Attributes:
        encounter_count: Encounters finished so far.
        current_biome: Name of the area being explored.
        is_boss_defeated: Whether the boss of this run has fallen.
        max_encounters: Encounters before the boss shows up.
    """

    encounter_count: int = 0
    current_biome: str = DEFAULT_BIOME
    is_boss_defeated: bool = False
    max_encounters: int = 5

    def increment_encounters(self) -> None:
        self.encounter_count += 1

    def should_spawn_boss(self) -> bool:
        """Whether enough encounters passed and the boss is still standing."""
        return self.encounter_count >= self.max_encounters and not self.is_boss_defeated

    def reset(self) -> None:
        """Start a new run in the same biome."""
        self.encounter_count = 0
        self.is_boss_defeated = False


__all__ = ["DEFAULT_BIOME", "RunContext"]
