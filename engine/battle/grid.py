"""
Battle grid occupancy.

GridMap is the single source of truth for which cells are impassable. It is
rebuilt from the unit registry and the static obstacles at the start of every
phase that pathfinds, so searches never run against a stale picture.
"""

from typing import Dict, FrozenSet, Iterable, Iterator

from engine.battle.registry import UnitRegistry
from engine.battle.types import Cell


class GridMap:
    """Fixed-size grid of free/blocked cells."""

    def __init__(self, width: int, height: int, obstacles: Iterable[Cell] = ()) -> None:
        self.width = width
        self.height = height
        self.obstacles: FrozenSet[Cell] = frozenset(c for c in obstacles if self.in_bounds(c))
        self._blocked: Dict[Cell, bool] = {}
        self.clear()

    def in_bounds(self, cell: Cell) -> bool:
        x, y = cell
        return 0 <= x < self.width and 0 <= y < self.height

    def cells(self) -> Iterator[Cell]:
        """Every cell in scan order: x ascending, then y."""
        for x in range(self.width):
            for y in range(self.height):
                yield (x, y)

    def clear(self) -> None:
        """Mark every cell free except static obstacles."""
        self._blocked = {cell: cell in self.obstacles for cell in self.cells()}

    def recompute(self, registry: UnitRegistry) -> None:
        """Rebuild the blocked map from live units and obstacles."""
        self.clear()
        for unit in registry.all_units():
            if unit.is_alive and self.in_bounds(unit.position):
                self._blocked[unit.position] = True

    def is_blocked(self, cell: Cell) -> bool:
        """Off-grid cells count as blocked."""
        return self._blocked.get(cell, True)

    def is_free(self, cell: Cell) -> bool:
        return not self.is_blocked(cell)

    def occupy(self, cell: Cell) -> None:
        if self.in_bounds(cell):
            self._blocked[cell] = True

    def release(self, cell: Cell) -> None:
        """Free a cell (e.g. after its unit is defeated). Obstacles stay blocked."""
        if self.in_bounds(cell) and cell not in self.obstacles:
            self._blocked[cell] = False

    def blocked_cells(self) -> FrozenSet[Cell]:
        return frozenset(c for c, b in self._blocked.items() if b)
