"""
Unit type definitions.

Contains the dataclasses for unit archetypes and wave definitions.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Tuple

from engine.battle.types import Cell, Team


@dataclass
class UnitArchetype:
    """
    Defines a *type* of unit that can be spawned into a battle.

    - id:           stable internal id (used for lookups)
    - name:         display name
    - movement:     max path length per move action
    - max_health:   starting (and maximum) health
    - damage:       damage dealt per attack
    - attack_range: Chebyshev reach of an attack (1 = adjacent incl. diagonals)
    - visual_id:    sprite key for the renderer
    """
    id: str
    name: str
    movement: int
    max_health: int
    damage: int
    attack_range: int
    visual_id: str = "chess_pawn"


@dataclass
class WaveDefinition:
    """
    One battle setup: which archetypes each team fields, where they may
    spawn, and which cells hold static obstacles.

    Units are placed on the team's candidate cells in order; a team with
    more units than free candidates fields only as many as fit.
    """
    id: str
    name: str
    grid_size: Tuple[int, int]
    units: Dict[Team, List[str]] = field(default_factory=dict)
    spawn_cells: Dict[Team, List[Cell]] = field(default_factory=dict)
    obstacles: List[Cell] = field(default_factory=list)

    def unit_count(self, team: Team) -> int:
        return len(self.units.get(team, []))
