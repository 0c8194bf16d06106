"""
Unit tests for unit archetypes, waves and spawning.
"""

import pytest

from engine.battle.grid import GridMap
from engine.battle.registry import UnitRegistry
from engine.battle.turns import TurnController
from engine.battle.types import Team
from engine.error_handler import SpawnError
from systems.units import (
    WaveDefinition,
    build_grid,
    get_archetype,
    get_wave,
    spawn_wave,
    spawn_wave_by_id,
)


class TestDefinitions:
    """Tests for the built-in archetypes and waves."""

    def test_footman_stats(self):
        footman = get_archetype("footman")
        assert (footman.movement, footman.max_health, footman.damage, footman.attack_range) == (4, 5, 3, 1)

    def test_unknown_archetype(self):
        with pytest.raises(KeyError):
            get_archetype("dragon")

    def test_skirmish_layout(self):
        wave = get_wave("skirmish")
        assert wave.grid_size == (9, 9)
        assert wave.units[Team.PLAYER] == ["footman"]
        assert len(wave.units[Team.COMPUTER]) == 4


class TestSpawning:
    """Tests for spawn_wave and friends."""

    def test_skirmish_spawn(self):
        registry = UnitRegistry()
        grid, handles = spawn_wave_by_id("skirmish", registry)

        assert len(handles) == 5
        players = registry.units(Team.PLAYER)
        computers = registry.units(Team.COMPUTER)
        assert [u.position for u in players] == [(0, 0)]
        assert [u.position for u in computers] == [(8, 0), (8, 1), (8, 2), (8, 3)]
        assert computers[0].name == "Raider 1"
        assert computers[0].archetype_id == "raider"
        assert grid.is_blocked((8, 3))

    def test_crossfire_obstacles(self):
        registry = UnitRegistry()
        grid, _ = spawn_wave_by_id("crossfire", registry)
        assert grid.is_blocked((4, 1))
        assert grid.is_free((4, 4))
        assert len(registry.units(Team.PLAYER)) == 3

    def test_occupied_spawn_cells_skipped(self):
        registry = UnitRegistry()
        registry.spawn(Team.COMPUTER, (0, 0), max_health=1, movement=1, damage=1, attack_range=1)
        grid = build_grid(get_wave("skirmish"))

        spawn_wave(get_wave("skirmish"), registry, grid)

        assert [u.position for u in registry.units(Team.PLAYER)] == [(0, 1)]

    def test_surplus_units_dropped(self):
        wave = WaveDefinition(
            id="crowded",
            name="Crowded",
            grid_size=(3, 3),
            units={Team.PLAYER: ["footman"] * 3, Team.COMPUTER: ["raider"]},
            spawn_cells={Team.PLAYER: [(0, 0), (0, 1)], Team.COMPUTER: [(2, 2)]},
        )
        registry = UnitRegistry()
        handles = spawn_wave(wave, registry, build_grid(wave))
        assert len(handles) == 3
        assert len(registry.units(Team.PLAYER)) == 2

    def test_unknown_archetype_raises(self):
        wave = WaveDefinition(
            id="broken",
            name="Broken",
            grid_size=(3, 3),
            units={Team.PLAYER: ["dragon"]},
            spawn_cells={Team.PLAYER: [(0, 0)]},
        )
        with pytest.raises(SpawnError):
            spawn_wave(wave, UnitRegistry(), GridMap(3, 3))

    def test_unknown_wave_raises(self):
        with pytest.raises(SpawnError):
            spawn_wave_by_id("nowhere", UnitRegistry())

    def test_smaller_grid_drops_off_grid_spawns(self):
        registry = UnitRegistry()
        grid, _ = spawn_wave_by_id("skirmish", registry, size=(9, 2))
        assert grid.height == 2
        assert [u.position for u in registry.units(Team.COMPUTER)] == [(8, 0), (8, 1)]

    def test_spawned_wave_is_playable(self):
        registry = UnitRegistry()
        grid, _ = spawn_wave_by_id("crossfire", registry)
        controller = TurnController(registry, grid, ai_teams=(Team.PLAYER, Team.COMPUTER), ai_delay=0.0)
        for _ in range(50):
            controller.tick(1.0)
        assert controller.state.ticks > 0
