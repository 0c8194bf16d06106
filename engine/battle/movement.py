"""
Per-tick unit movement.

A move in progress is an InTransit record: the remaining path (as a stack,
next step on top) plus the unit's fractional position in cell units. Each
tick moves the unit at most ``speed * dt`` cells toward the next step; the
unit's grid position only changes when it arrives on a cell.
"""

from dataclasses import dataclass
from typing import List, Optional

import pygame

from engine.battle.types import Cell, Path, Unit, UnitHandle

# Arrival tolerance in cells: one pixel of a 64px tile.
ARRIVAL_EPSILON = 1.0 / 64.0


@dataclass
class InTransit:
    """A unit walking a path, one cell at a time."""
    unit: UnitHandle
    remaining: List[Cell]
    position: pygame.Vector2
    speed: float
    steps_taken: int = 0

    @classmethod
    def start(cls, unit: Unit, path: Path, speed: float) -> "InTransit":
        """Begin walking ``path`` (travel order) from the unit's cell."""
        return cls(
            unit=unit.handle,
            remaining=list(reversed(path)),
            position=pygame.Vector2(unit.position),
            speed=speed,
        )

    @property
    def finished(self) -> bool:
        return not self.remaining

    @property
    def next_cell(self) -> Optional[Cell]:
        return self.remaining[-1] if self.remaining else None

    def path(self) -> Path:
        """Remaining cells in travel order."""
        return list(reversed(self.remaining))

    def advance(self, unit: Unit, dt: float) -> Optional[Cell]:
        """
        Move toward the next cell. Returns the cell the unit arrived on this
        tick, if any, after updating ``unit.position``.
        """
        next_cell = self.next_cell
        if next_cell is None:
            return None

        target = pygame.Vector2(next_cell)
        step = max(0.0, self.speed * dt)
        self.position = self.position.move_towards(target, step)

        if self.position.distance_to(target) > ARRIVAL_EPSILON:
            return None

        self.position = target
        self.remaining.pop()
        unit.position = next_cell
        self.steps_taken += 1
        return next_cell
