"""
Battle type definitions.

Contains dataclasses, enums and type aliases used throughout the battle system.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Literal, List, Optional, Tuple


# Type aliases
Cell = Tuple[int, int]
Path = List[Cell]
BattleStatus = Literal["ongoing", "victory", "defeat"]


class Team(Enum):
    """The two sides of a battle."""
    PLAYER = "player"
    COMPUTER = "computer"

    @property
    def opponent(self) -> "Team":
        return Team.COMPUTER if self is Team.PLAYER else Team.PLAYER


class Phase(Enum):
    """
    Turn phases. Each team runs the same six phases in order; the active
    team is tracked alongside the phase.
    """
    SELECT_UNIT = "select_unit"
    SELECT_MOVE = "select_move"
    DO_MOVE = "do_move"
    SELECT_ATTACKER = "select_attacker"
    SELECT_TARGET = "select_target"
    DO_ATTACK = "do_attack"

    @property
    def is_move_phase(self) -> bool:
        return self in (Phase.SELECT_UNIT, Phase.SELECT_MOVE, Phase.DO_MOVE)

    @property
    def label(self) -> str:
        return self.value.replace("_", " ").title()


@dataclass(frozen=True, order=True)
class UnitHandle:
    """
    Reference to a unit slot in the registry.

    The generation changes every time a slot is recycled, so a handle to a
    defeated unit never resolves to the unit that later reuses its slot.
    """
    index: int
    generation: int

    def __str__(self) -> str:
        return f"#{self.index}.{self.generation}"


@dataclass
class Unit:
    """
    A unit on the battle grid.

    Stats come from the unit's archetype at spawn time; only position,
    health and has_acted change during play.
    """
    handle: UnitHandle
    team: Team
    position: Cell
    max_health: int
    health: int
    movement: int
    damage: int
    attack_range: int
    name: str = "Unit"
    archetype_id: str = ""
    visual_id: str = ""
    has_acted: bool = False

    @property
    def is_alive(self) -> bool:
        return self.health > 0

    @property
    def gx(self) -> int:
        return self.position[0]

    @property
    def gy(self) -> int:
        return self.position[1]

    def stat_block(self) -> "UnitStatBlock":
        return UnitStatBlock(
            handle=self.handle,
            name=self.name,
            team=self.team,
            position=self.position,
            health=self.health,
            max_health=self.max_health,
            movement=self.movement,
            damage=self.damage,
            attack_range=self.attack_range,
            has_acted=self.has_acted,
            visual_id=self.visual_id,
        )


@dataclass(frozen=True)
class UnitStatBlock:
    """Read-only snapshot of a unit for the HUD and renderer."""
    handle: UnitHandle
    name: str
    team: Team
    position: Cell
    health: int
    max_health: int
    movement: int
    damage: int
    attack_range: int
    has_acted: bool
    visual_id: str = ""


@dataclass(frozen=True)
class AttackOutcome:
    """Result of a resolved attack."""
    attacker: UnitHandle
    target: UnitHandle
    damage: int
    remaining_health: int
    defeated: bool


@dataclass(frozen=True)
class MoveDecision:
    """AI choice of destination for a unit; ``path`` is in travel order."""
    unit: UnitHandle
    destination: Cell
    path: Path
    target: Optional[UnitHandle] = None
