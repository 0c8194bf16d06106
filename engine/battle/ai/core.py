"""
Core battle AI module.

Contains the AIDecisionEngine, which makes every choice for the computer
team: which unit acts, where it moves, and whom it attacks.
"""

from typing import List, Optional

from engine.battle.combat import in_attack_range
from engine.battle.grid import GridMap
from engine.battle.registry import UnitRegistry
from engine.battle.types import MoveDecision, Team, Unit, UnitHandle
from engine.error_handler import get_logger

from .positioning import PositioningHelper
from .targeting import DEFAULT_POLICY, TargetPolicy, get_target_policy

log = get_logger("ai")


class AIDecisionEngine:
    """
    AI for computer-controlled units.

    Delegates to specialized helpers:
    - Positioning: nearest opponent and tile ranking
    - Targeting: named target selection policy

    Unit and attacker selection scan the registry in slot order, so the same
    battle state always yields the same decisions.
    """

    def __init__(self, registry: UnitRegistry, grid: GridMap, target_policy: str = DEFAULT_POLICY):
        self.registry = registry
        self.grid = grid
        self.positioning = PositioningHelper(registry, grid)
        self.target_policy: TargetPolicy = get_target_policy(target_policy)

    # ----- Move sub-phase -----

    def select_unit(self, team: Team) -> Optional[UnitHandle]:
        """First unit of the team that has not moved yet."""
        unit = self.registry.first_ready(team)
        return unit.handle if unit is not None else None

    def select_move(self, handle: UnitHandle) -> Optional[MoveDecision]:
        """Destination (and path) for the unit, or None if the handle is stale."""
        unit = self.registry.get(handle)
        if unit is None:
            return None
        decision = self.positioning.choose_destination(unit)
        log.debug(f"{unit.name} {handle} moves {unit.position} -> {decision.destination}")
        return decision

    # ----- Attack sub-phase -----

    def select_attacker(self, team: Team) -> Optional[UnitHandle]:
        """First unit of the team that has not attacked yet."""
        return self.select_unit(team)

    def targets_in_range(self, unit: Unit) -> List[Unit]:
        """Opponents within attack range, in scan order."""
        return [t for t in self.registry.opponents(unit) if in_attack_range(unit, t)]

    def select_target(self, handle: UnitHandle) -> Optional[UnitHandle]:
        """Target chosen by the policy, or None if nothing is in range."""
        unit = self.registry.get(handle)
        if unit is None:
            return None
        target = self.target_policy.choose_target(unit, self.targets_in_range(unit))
        if target is None:
            log.debug(f"{unit.name} {handle} has no target in range {unit.attack_range}")
            return None
        return target.handle
