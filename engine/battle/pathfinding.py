"""
Battle pathfinding module.

Handles A* pathfinding and reachable cell calculations for battle movement.

Movement is 4-directional with a uniform cost of 1 per step, so the
Manhattan distance is an admissible and consistent heuristic.
"""

from collections import deque
import heapq
from typing import Collection, Dict, List, Optional, Set, Tuple

from engine.battle.grid import GridMap
from engine.battle.types import Cell, Path

EDGE_COST = 1

# Fixed neighbour order keeps searches reproducible.
NEIGHBOUR_OFFSETS: Tuple[Cell, ...] = ((0, 1), (0, -1), (1, 0), (-1, 0))


def manhattan_distance(a: Cell, b: Cell) -> int:
    return abs(a[0] - b[0]) + abs(a[1] - b[1])


def chebyshev_distance(a: Cell, b: Cell) -> int:
    return max(abs(a[0] - b[0]), abs(a[1] - b[1]))


def adjacent_cells(cell: Cell) -> List[Cell]:
    return [(cell[0] + dx, cell[1] + dy) for dx, dy in NEIGHBOUR_OFFSETS]


def _passable(cell: Cell, grid: GridMap, source: Cell, ignore: Collection[Cell]) -> bool:
    if not grid.in_bounds(cell):
        return False
    return cell == source or cell in ignore or not grid.is_blocked(cell)


def find_path(
    source: Cell,
    destination: Cell,
    grid: GridMap,
    ignore: Collection[Cell] = (),
) -> Optional[Path]:
    """
    Find the shortest orthogonal path from source to destination using A*.

    Returns the cells to walk through in travel order, excluding the source
    and ending at the destination, or None if no path exists. The path from
    a cell to itself is the empty list.

    Cells in ``ignore`` are treated as free even when blocked, which lets
    callers measure distance to a cell occupied by another unit.
    """
    if source == destination:
        return []
    if not _passable(destination, grid, source, ignore):
        return None

    # Heap entries are (f, h, cell): equal f prefers the cell nearer the
    # goal, then lexicographic cell order.
    start_h = manhattan_distance(source, destination)
    open_set: List[Tuple[int, int, Cell]] = [(start_h, start_h, source)]
    came_from: Dict[Cell, Optional[Cell]] = {source: None}
    g_score: Dict[Cell, int] = {source: 0}
    closed: Set[Cell] = set()

    while open_set:
        _, _, current = heapq.heappop(open_set)
        if current in closed:
            continue

        if current == destination:
            return _reconstruct_path(came_from, current)

        closed.add(current)

        for neighbour in adjacent_cells(current):
            if neighbour in closed or not _passable(neighbour, grid, source, ignore):
                continue

            tentative_g = g_score[current] + EDGE_COST
            if tentative_g < g_score.get(neighbour, tentative_g + 1):
                came_from[neighbour] = current
                g_score[neighbour] = tentative_g
                h = manhattan_distance(neighbour, destination)
                heapq.heappush(open_set, (tentative_g + h, h, neighbour))

    return None  # No path found


def _reconstruct_path(came_from: Dict[Cell, Optional[Cell]], current: Cell) -> Path:
    path: Path = []
    while came_from[current] is not None:
        path.append(current)
        current = came_from[current]
    path.reverse()
    return path


def path_distance(
    source: Cell,
    destination: Cell,
    grid: GridMap,
    ignore: Collection[Cell] = (),
) -> Optional[int]:
    """Length of the shortest path, or None if unreachable."""
    path = find_path(source, destination, grid, ignore)
    return None if path is None else len(path)


def reachable_cells(source: Cell, max_cost: int, grid: GridMap) -> Dict[Cell, int]:
    """
    Get all cells reachable within ``max_cost`` steps.

    Returns a dict mapping cell -> step count. The source is included at
    cost 0; every other entry is a free cell. Uses BFS, which is exact for
    uniform edge costs.
    """
    reachable: Dict[Cell, int] = {source: 0}
    queue = deque([source])

    while queue:
        pos = queue.popleft()
        cost = reachable[pos]
        if cost >= max_cost:
            continue
        for neighbour in adjacent_cells(pos):
            if neighbour in reachable or not _passable(neighbour, grid, source, ()):
                continue
            reachable[neighbour] = cost + EDGE_COST
            queue.append(neighbour)

    return reachable


class BattlePathfinding:
    """
    Pathfinding bound to a battle's grid.

    Takes a reference to the GridMap so callers don't have to thread it
    through every query.
    """

    def __init__(self, grid: GridMap):
        self.grid = grid

    def find_path(self, source: Cell, destination: Cell, ignore: Collection[Cell] = ()) -> Optional[Path]:
        return find_path(source, destination, self.grid, ignore)

    def path_distance(self, source: Cell, destination: Cell, ignore: Collection[Cell] = ()) -> Optional[int]:
        return path_distance(source, destination, self.grid, ignore)

    def get_reachable_cells(self, source: Cell, max_cost: int) -> Dict[Cell, int]:
        return reachable_cells(source, max_cost, self.grid)
