"""
Unit tests for InTransit movement.
"""

import pygame
import pytest

from engine.battle.movement import InTransit
from engine.battle.types import Team


@pytest.fixture
def walker(registry, spawn):
    return registry.get(spawn(Team.PLAYER, (0, 0)))


class TestInTransit:
    """Tests for the per-tick movement sub-state."""

    def test_start_stacks_path_reversed(self, walker):
        transit = InTransit.start(walker, [(0, 1), (0, 2), (1, 2)], speed=1.0)
        assert transit.remaining == [(1, 2), (0, 2), (0, 1)]
        assert transit.next_cell == (0, 1)
        assert transit.path() == [(0, 1), (0, 2), (1, 2)]
        assert transit.position == pygame.Vector2(0, 0)

    def test_partial_step_keeps_grid_position(self, walker):
        transit = InTransit.start(walker, [(0, 1)], speed=1.0)
        arrived = transit.advance(walker, 0.5)
        assert arrived is None
        assert walker.position == (0, 0)
        assert transit.position.y == pytest.approx(0.5)
        assert not transit.finished

    def test_full_step_arrives(self, walker):
        transit = InTransit.start(walker, [(0, 1), (0, 2)], speed=1.0)
        assert transit.advance(walker, 1.0) == (0, 1)
        assert walker.position == (0, 1)
        assert transit.steps_taken == 1
        assert transit.next_cell == (0, 2)

    def test_never_skips_a_cell_in_one_tick(self, walker):
        transit = InTransit.start(walker, [(0, 1), (0, 2), (0, 3)], speed=1.0)
        transit.advance(walker, 10.0)
        assert walker.position == (0, 1)
        assert len(transit.remaining) == 2

    def test_runs_to_completion(self, walker):
        path = [(1, 0), (2, 0), (2, 1)]
        transit = InTransit.start(walker, path, speed=2.0)
        visited = []
        for _ in range(20):
            cell = transit.advance(walker, 0.25)
            if cell is not None:
                visited.append(cell)
            if transit.finished:
                break
        assert visited == path
        assert transit.finished
        assert walker.position == (2, 1)

    def test_empty_path_is_finished(self, walker):
        transit = InTransit.start(walker, [], speed=1.0)
        assert transit.finished
        assert transit.advance(walker, 1.0) is None
