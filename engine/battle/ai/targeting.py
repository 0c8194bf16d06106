"""
Target selection policies.

A policy picks one unit out of the opponents already known to be in attack
range. Every policy is deterministic: candidates arrive in registry scan
order and the last tie-breaker is always that order.
"""

from typing import Dict, List, Optional, Protocol

from engine.battle.pathfinding import chebyshev_distance
from engine.battle.types import Unit
from engine.error_handler import get_logger

log = get_logger("ai.targeting")


class TargetPolicy(Protocol):
    """Protocol for target selection policies."""

    name: str

    def choose_target(self, attacker: Unit, candidates: List[Unit]) -> Optional[Unit]:
        """Choose a target from the in-range candidates."""
        ...


class ScanOrderPolicy:
    """First candidate in registry scan order."""

    name = "scan_order"

    def choose_target(self, attacker: Unit, candidates: List[Unit]) -> Optional[Unit]:
        if not candidates:
            return None
        return candidates[0]


class NearestPolicy(ScanOrderPolicy):
    """Closest by Chebyshev distance, then lowest current health."""

    name = "nearest"

    def choose_target(self, attacker: Unit, candidates: List[Unit]) -> Optional[Unit]:
        if not candidates:
            return None
        return min(
            candidates,
            key=lambda t: (chebyshev_distance(attacker.position, t.position), t.health, t.handle.index),
        )


class LowestHealthPolicy(ScanOrderPolicy):
    """Weakest target first (finish kills), then nearest."""

    name = "lowest_health"

    def choose_target(self, attacker: Unit, candidates: List[Unit]) -> Optional[Unit]:
        if not candidates:
            return None
        return min(
            candidates,
            key=lambda t: (t.health, chebyshev_distance(attacker.position, t.position), t.handle.index),
        )


# Policy registry
_POLICIES: Dict[str, TargetPolicy] = {}

DEFAULT_POLICY = "nearest"


def register_policy(policy: TargetPolicy) -> None:
    """Register a targeting policy under its name."""
    _POLICIES[policy.name] = policy


def get_target_policy(name: str) -> TargetPolicy:
    """Get a policy by name, falling back to the default for unknown names."""
    policy = _POLICIES.get(name)
    if policy is None:
        log.warning(f"Unknown target policy {name!r}, using {DEFAULT_POLICY!r}")
        policy = _POLICIES[DEFAULT_POLICY]
    return policy


def available_policies() -> List[str]:
    return sorted(_POLICIES)


register_policy(NearestPolicy())
register_policy(LowestHealthPolicy())
register_policy(ScanOrderPolicy())
