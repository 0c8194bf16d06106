"""
Unit registry.

Owns every unit in a battle. Units live in numbered slots; a slot freed by a
defeated unit is reused by the next spawn, but with a bumped generation, so
old handles stop resolving instead of pointing at the newcomer.
"""

import heapq
from typing import Iterator, List, Optional

from engine.battle.types import Cell, Team, Unit, UnitHandle
from engine.error_handler import get_logger

log = get_logger("registry")


class UnitRegistry:
    """Generation-checked arena of units."""

    def __init__(self) -> None:
        self._slots: List[Optional[Unit]] = []
        self._generations: List[int] = []
        self._free: List[int] = []  # min-heap, lowest free slot reused first

    def __len__(self) -> int:
        return sum(1 for u in self._slots if u is not None)

    def __iter__(self) -> Iterator[Unit]:
        return iter(self.all_units())

    # ----- Lifecycle -----

    def spawn(
        self,
        team: Team,
        position: Cell,
        *,
        max_health: int,
        movement: int,
        damage: int,
        attack_range: int,
        name: str = "Unit",
        archetype_id: str = "",
        visual_id: str = "",
        health: Optional[int] = None,
    ) -> UnitHandle:
        """Create a unit in the lowest free slot and return its handle."""
        if self._free:
            index = heapq.heappop(self._free)
            self._generations[index] += 1
        else:
            index = len(self._slots)
            self._slots.append(None)
            self._generations.append(0)

        handle = UnitHandle(index, self._generations[index])
        current = max_health if health is None else min(health, max_health)
        self._slots[index] = Unit(
            handle=handle,
            team=team,
            position=position,
            max_health=max_health,
            health=current,
            movement=movement,
            damage=damage,
            attack_range=attack_range,
            name=name,
            archetype_id=archetype_id,
            visual_id=visual_id,
        )
        log.debug(f"Spawned {name} {handle} ({team.value}) at {position}")
        return handle

    def remove(self, handle: UnitHandle) -> bool:
        """Remove a unit. Returns False if the handle is stale or unknown."""
        unit = self.get(handle)
        if unit is None:
            return False
        self._slots[handle.index] = None
        heapq.heappush(self._free, handle.index)
        log.debug(f"Removed {unit.name} {handle}")
        return True

    # ----- Queries -----

    def get(self, handle: Optional[UnitHandle]) -> Optional[Unit]:
        """Resolve a handle, or None if it no longer refers to a live unit."""
        if handle is None or handle.index < 0 or handle.index >= len(self._slots):
            return None
        if self._generations[handle.index] != handle.generation:
            return None
        return self._slots[handle.index]

    def all_units(self) -> List[Unit]:
        """All live units in slot order (the fixed scan order)."""
        return [u for u in self._slots if u is not None]

    def units(self, team: Team) -> List[Unit]:
        return [u for u in self._slots if u is not None and u.team is team]

    def opponents(self, unit: Unit) -> List[Unit]:
        return self.units(unit.team.opponent)

    def unit_at(self, cell: Cell) -> Optional[Unit]:
        for u in self._slots:
            if u is not None and u.position == cell:
                return u
        return None

    # ----- Has-acted bookkeeping -----

    def all_acted(self, team: Team) -> bool:
        """True when every live unit of the team has acted. O(units)."""
        return all(u.has_acted for u in self.units(team))

    def first_ready(self, team: Team) -> Optional[Unit]:
        for u in self.units(team):
            if not u.has_acted:
                return u
        return None

    def reset_acted(self, team: Team) -> None:
        for u in self.units(team):
            u.has_acted = False
