"""
Built-in unit archetypes and waves.
"""

from engine.battle.types import Team

from .registry import register_archetype, register_wave
from .types import UnitArchetype, WaveDefinition


def register_archetypes() -> None:
    """Register the built-in unit archetypes."""

    register_archetype(
        UnitArchetype(
            id="footman",
            name="Footman",
            movement=4,
            max_health=5,
            damage=3,
            attack_range=1,
            visual_id="chess_pawn",
        )
    )

    register_archetype(
        UnitArchetype(
            id="archer",
            name="Archer",
            movement=3,
            max_health=4,
            damage=2,
            attack_range=3,
            visual_id="chess_bishop",
        )
    )

    register_archetype(
        UnitArchetype(
            id="raider",
            name="Raider",
            movement=2,
            max_health=5,
            damage=2,
            attack_range=1,
            visual_id="chess_pawn",
        )
    )


def register_waves() -> None:
    """Register the built-in waves."""

    # One footman in the corner against four raiders on the far column.
    register_wave(
        WaveDefinition(
            id="skirmish",
            name="Skirmish",
            grid_size=(9, 9),
            units={
                Team.PLAYER: ["footman"],
                Team.COMPUTER: ["raider"] * 4,
            },
            spawn_cells={
                Team.PLAYER: [(0, 0), (0, 1), (1, 0)],
                Team.COMPUTER: [(8, y) for y in range(9)],
            },
        )
    )

    register_wave(
        WaveDefinition(
            id="crossfire",
            name="Crossfire",
            grid_size=(9, 9),
            units={
                Team.PLAYER: ["footman", "archer", "footman"],
                Team.COMPUTER: ["raider", "raider", "archer", "raider"],
            },
            spawn_cells={
                Team.PLAYER: [(0, y) for y in range(2, 7)],
                Team.COMPUTER: [(8, y) for y in range(2, 7)],
            },
            obstacles=[(4, 1), (4, 2), (4, 3), (4, 5), (4, 6), (4, 7)],
        )
    )


def register_all_definitions() -> None:
    register_archetypes()
    register_waves()
