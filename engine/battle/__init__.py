"""
Battle engine module.

This module contains all battle-related engine code, split into logical components:
- types.py: Battle dataclasses and enums (Unit, UnitHandle, Team, Phase)
- registry.py: UnitRegistry, generation-checked unit storage
- grid.py: GridMap, blocked/free cells
- pathfinding.py: A* and reachable-cell search
- movement.py: per-tick InTransit movement
- combat.py: CombatResolver
- ai/: AIDecisionEngine for computer-controlled teams
- turns.py: TurnController phase state machine
- renderer.py: Rendering and drawing logic
"""

from .turns import BattleState, TurnController

__all__ = ["BattleState", "TurnController"]
