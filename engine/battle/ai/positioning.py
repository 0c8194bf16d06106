"""
Positioning for AI units.

Finds the nearest opponent and the best tile to move toward it.
"""

from typing import List, Optional, Tuple

from engine.battle.grid import GridMap
from engine.battle.pathfinding import (
    chebyshev_distance,
    find_path,
    manhattan_distance,
    path_distance,
    reachable_cells,
)
from engine.battle.registry import UnitRegistry
from engine.battle.types import Cell, MoveDecision, Unit

UNREACHABLE = float("inf")


class PositioningHelper:
    """
    Ranks tiles for an AI unit.

    Distances are path lengths on the current grid. When no opponent can be
    reached at all (fully walled in), Manhattan distance is used instead so
    the unit still drifts toward the fight.
    """

    def __init__(self, registry: UnitRegistry, grid: GridMap):
        self.registry = registry
        self.grid = grid

    def nearest_opponent(self, unit: Unit) -> Optional[Tuple[Unit, bool]]:
        """
        Return (opponent, measured_by_path) for the closest opponent.

        Ties go to the earlier unit in scan order.
        """
        opponents = self.registry.opponents(unit)
        if not opponents:
            return None

        best: Optional[Unit] = None
        best_dist: Optional[int] = None
        for opp in opponents:
            dist = path_distance(unit.position, opp.position, self.grid, ignore=(opp.position,))
            if dist is not None and (best_dist is None or dist < best_dist):
                best, best_dist = opp, dist

        if best is not None:
            return best, True

        closest = min(opponents, key=lambda o: manhattan_distance(unit.position, o.position))
        return closest, False

    def tile_distance(self, cell: Cell, mover: Unit, target: Unit, by_path: bool) -> float:
        """Distance from a candidate tile to the target, as if the mover stood there."""
        if not by_path:
            return manhattan_distance(cell, target.position)
        dist = path_distance(cell, target.position, self.grid, ignore=(target.position, mover.position))
        return UNREACHABLE if dist is None else dist

    def rank_tiles(self, unit: Unit, target: Unit, by_path: bool) -> List[Tuple[float, Cell]]:
        """All tiles reachable this move (current tile included), best first."""
        candidates = reachable_cells(unit.position, unit.movement, self.grid)
        ranked = [(self.tile_distance(c, unit, target, by_path), c) for c in candidates]
        ranked.sort()
        return ranked

    def choose_destination(self, unit: Unit) -> MoveDecision:
        """
        Pick where the unit should move.

        Stays put if there is nobody to chase or the nearest opponent is
        already within attack range.
        """
        found = self.nearest_opponent(unit)
        if found is None:
            return MoveDecision(unit=unit.handle, destination=unit.position, path=[])

        target, by_path = found
        if chebyshev_distance(unit.position, target.position) <= unit.attack_range:
            return MoveDecision(unit=unit.handle, destination=unit.position, path=[], target=target.handle)

        _, destination = self.rank_tiles(unit, target, by_path)[0]
        path = find_path(unit.position, destination, self.grid)
        if path is None or len(path) > unit.movement:
            # Reachable-set and A* agree on a static grid; hold position if not.
            return MoveDecision(unit=unit.handle, destination=unit.position, path=[], target=target.handle)
        return MoveDecision(unit=unit.handle, destination=destination, path=path, target=target.handle)
