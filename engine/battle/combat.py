"""
Battle combat module.

Resolves attacks: range checks, damage, and removal of defeated units.
"""

from typing import Optional

from engine.battle.grid import GridMap
from engine.battle.pathfinding import chebyshev_distance
from engine.battle.registry import UnitRegistry
from engine.battle.types import AttackOutcome, Unit, UnitHandle
from engine.error_handler import get_logger
from telemetry.logger import telemetry

log = get_logger("combat")


def in_attack_range(attacker: Unit, target: Unit) -> bool:
    """
    Chebyshev range test. Distance 0 never qualifies, which also rules out
    attacking yourself.
    """
    distance = chebyshev_distance(attacker.position, target.position)
    return 0 < distance <= attacker.attack_range


class CombatResolver:
    """
    Applies damage between units of opposing teams.

    Takes the registry and grid so defeated units can be removed and their
    cells freed in the same step.
    """

    def __init__(self, registry: UnitRegistry, grid: GridMap):
        self.registry = registry
        self.grid = grid

    def can_attack(self, attacker: Unit, target: Unit) -> bool:
        if attacker.team is target.team:
            return False
        if not attacker.is_alive or not target.is_alive:
            return False
        return in_attack_range(attacker, target)

    def apply_damage(self, attacker_handle: UnitHandle, target_handle: UnitHandle) -> Optional[AttackOutcome]:
        """
        Apply the attacker's damage to the target.

        Returns None (and changes nothing) if either unit is gone, they are on
        the same team, or the target is out of range.
        """
        attacker = self.registry.get(attacker_handle)
        target = self.registry.get(target_handle)
        if attacker is None or target is None:
            log.debug(f"Attack ignored: stale handle {attacker_handle} -> {target_handle}")
            return None
        if not self.can_attack(attacker, target):
            log.debug(f"Attack ignored: {attacker.name} cannot reach {target.name}")
            return None

        damage = attacker.damage
        target.health -= damage
        defeated = target.health <= 0

        telemetry.log(
            "attack",
            attacker=str(attacker.handle),
            target=str(target.handle),
            damage=damage,
            remaining=target.health,
        )

        if defeated:
            self.registry.remove(target.handle)
            self.grid.release(target.position)
            log.info(f"{attacker.name} defeats {target.name}")
            telemetry.log("unit_defeated", unit=str(target.handle), team=target.team.value)

        return AttackOutcome(
            attacker=attacker.handle,
            target=target.handle,
            damage=damage,
            remaining_health=target.health,
            defeated=defeated,
        )
