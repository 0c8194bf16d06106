"""
Pytest configuration and shared fixtures.

This file is automatically discovered by pytest and provides fixtures
available to all test files.
"""

import os

import pytest
import pygame
from typing import Callable, Generator

# Headless display for CI and terminals without a window server
os.environ.setdefault("SDL_VIDEODRIVER", "dummy")

from engine.battle.grid import GridMap
from engine.battle.registry import UnitRegistry
from engine.battle.turns import TurnController
from engine.battle.types import Cell, Team, UnitHandle


@pytest.fixture(scope="session", autouse=True)
def pygame_init() -> Generator[None, None, None]:
    """
    Initialize pygame for the test session.
    This runs once before all tests and cleans up after.
    """
    pygame.init()
    pygame.display.set_mode((800, 600))
    yield
    pygame.quit()


@pytest.fixture
def sample_screen() -> pygame.Surface:
    """
    Create a sample pygame surface for tests that need a screen.
    """
    return pygame.Surface((1024, 768))


@pytest.fixture
def registry() -> UnitRegistry:
    """
    Create an empty unit registry.
    """
    return UnitRegistry()


@pytest.fixture
def open_grid() -> GridMap:
    """
    Create an obstacle-free 9x9 grid.
    """
    return GridMap(9, 9)


@pytest.fixture
def spawn(registry, open_grid) -> Callable[..., UnitHandle]:
    """
    Spawn a unit into the shared registry and refresh the grid.

    Defaults match the footman: movement 4, health 5, damage 3, range 1.
    """
    def _spawn(
        team: Team,
        position: Cell,
        *,
        movement: int = 4,
        health: int = 5,
        damage: int = 3,
        attack_range: int = 1,
        name: str = "",
    ) -> UnitHandle:
        handle = registry.spawn(
            team,
            position,
            max_health=health,
            movement=movement,
            damage=damage,
            attack_range=attack_range,
            name=name or f"{team.value}@{position}",
        )
        open_grid.recompute(registry)
        return handle

    return _spawn


@pytest.fixture
def make_controller(registry, open_grid) -> Callable[..., TurnController]:
    """
    Build a TurnController over the shared registry and grid.

    AI delay is zero and units walk one cell per second, so ``tick(1.0)``
    moves a unit exactly one cell.
    """
    def _make(**kwargs) -> TurnController:
        kwargs.setdefault("ai_delay", 0.0)
        kwargs.setdefault("move_speed", 1.0)
        return TurnController(registry, open_grid, **kwargs)

    return _make


def run_until(controller: TurnController, predicate, max_ticks: int = 200, dt: float = 1.0) -> int:
    """Tick until ``predicate(controller)`` holds; returns ticks used."""
    for n in range(max_ticks):
        if predicate(controller):
            return n
        controller.tick(dt)
    raise AssertionError(f"condition not reached in {max_ticks} ticks")


@pytest.fixture
def ticker() -> Callable[..., int]:
    """
    Expose run_until to tests as a fixture.
    """
    return run_until
