"""
Unit archetype registry.

Manages the global registries of unit archetypes and wave definitions.
"""

from typing import Dict

from .types import UnitArchetype, WaveDefinition


# Global registries
UNIT_ARCHETYPES: Dict[str, UnitArchetype] = {}
WAVES: Dict[str, WaveDefinition] = {}


def register_archetype(arch: UnitArchetype) -> UnitArchetype:
    """Register a unit archetype."""
    UNIT_ARCHETYPES[arch.id] = arch
    return arch


def get_archetype(arch_id: str) -> UnitArchetype:
    """Get a unit archetype by ID."""
    return UNIT_ARCHETYPES[arch_id]


def register_wave(wave: WaveDefinition) -> WaveDefinition:
    """Register a wave definition."""
    WAVES[wave.id] = wave
    return wave


def get_wave(wave_id: str) -> WaveDefinition:
    """Get a wave definition by ID."""
    return WAVES[wave_id]
