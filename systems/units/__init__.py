"""
Unit system module.

Unit archetypes, wave definitions, and spawning of waves onto a battle grid.
"""

from .types import UnitArchetype, WaveDefinition
from .registry import (
    UNIT_ARCHETYPES, WAVES,
    register_archetype, get_archetype,
    register_wave, get_wave,
)
from .spawning import build_grid, spawn_wave, spawn_wave_by_id

# Register all definitions on import
from .definitions import register_all_definitions
register_all_definitions()

__all__ = [
    "UnitArchetype",
    "WaveDefinition",
    "UNIT_ARCHETYPES",
    "WAVES",
    "register_archetype",
    "get_archetype",
    "register_wave",
    "get_wave",
    "build_grid",
    "spawn_wave",
    "spawn_wave_by_id",
]
