"""
Wave spawning.

Turns a WaveDefinition into live units on a grid. This is the only place
configuration data enters the battle core, and it happens once per battle.
"""

from typing import List, Optional, Tuple

from engine.battle.grid import GridMap
from engine.battle.registry import UnitRegistry
from engine.battle.types import Team, UnitHandle
from engine.error_handler import SpawnError, get_logger

from .registry import get_archetype, get_wave
from .types import WaveDefinition

log = get_logger("spawning")


def build_grid(wave: WaveDefinition, size: Optional[Tuple[int, int]] = None) -> GridMap:
    """Empty grid for the wave, with its static obstacles."""
    width, height = size or wave.grid_size
    return GridMap(width, height, obstacles=wave.obstacles)


def spawn_wave(wave: WaveDefinition, registry: UnitRegistry, grid: GridMap) -> List[UnitHandle]:
    """
    Spawn every unit of the wave onto the first free candidate cells.

    Returns the handles in spawn order (player team first). Raises
    SpawnError for an unknown archetype id.
    """
    handles: List[UnitHandle] = []
    grid.recompute(registry)

    for team in (Team.PLAYER, Team.COMPUTER):
        candidates = [c for c in wave.spawn_cells.get(team, []) if grid.is_free(c)]
        arch_ids = wave.units.get(team, [])
        if wave.unit_count(team) > len(candidates):
            log.warning(
                f"Wave {wave.id!r}: {wave.unit_count(team)} {team.value} units but only "
                f"{len(candidates)} free spawn cells; extra units skipped"
            )

        for i, (arch_id, cell) in enumerate(zip(arch_ids, candidates)):
            try:
                arch = get_archetype(arch_id)
            except KeyError:
                raise SpawnError(
                    f"Unknown archetype {arch_id!r} in wave {wave.id!r}",
                    user_message="This battle references a unit type that does not exist.",
                ) from None

            handle = registry.spawn(
                team,
                cell,
                max_health=arch.max_health,
                movement=arch.movement,
                damage=arch.damage,
                attack_range=arch.attack_range,
                name=f"{arch.name} {i + 1}",
                archetype_id=arch.id,
                visual_id=arch.visual_id,
            )
            grid.occupy(cell)
            handles.append(handle)

    log.info(f"Spawned wave {wave.id!r}: {len(handles)} units")
    return handles


def spawn_wave_by_id(
    wave_id: str,
    registry: UnitRegistry,
    grid: Optional[GridMap] = None,
    size: Optional[Tuple[int, int]] = None,
) -> Tuple[GridMap, List[UnitHandle]]:
    """Look up a registered wave, build its grid if needed, and spawn it."""
    try:
        wave = get_wave(wave_id)
    except KeyError:
        raise SpawnError(f"Unknown wave {wave_id!r}") from None
    grid = grid or build_grid(wave, size)
    return grid, spawn_wave(wave, registry, grid)
