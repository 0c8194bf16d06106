"""
Battle AI system.

Decision-making for computer-controlled units, split into:
- core: AIDecisionEngine (unit, move, attacker and target selection)
- positioning: nearest opponent and tile ranking
- targeting: named, deterministic target policies
"""

from .core import AIDecisionEngine
from .positioning import PositioningHelper
from .targeting import (
    DEFAULT_POLICY,
    TargetPolicy,
    available_policies,
    get_target_policy,
    register_policy,
)

__all__ = [
    "AIDecisionEngine",
    "PositioningHelper",
    "DEFAULT_POLICY",
    "TargetPolicy",
    "available_policies",
    "get_target_policy",
    "register_policy",
]
