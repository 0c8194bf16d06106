"""
Unit tests for the CombatResolver.
"""

import pytest

from engine.battle.combat import CombatResolver, in_attack_range
from engine.battle.types import Team


@pytest.fixture
def combat(registry, open_grid) -> CombatResolver:
    return CombatResolver(registry, open_grid)


class TestAttackRange:
    """Tests for the Chebyshev range check."""

    def test_diagonal_neighbour_in_melee_range(self, registry, spawn):
        a = registry.get(spawn(Team.PLAYER, (4, 4), attack_range=1))
        t = registry.get(spawn(Team.COMPUTER, (5, 5)))
        assert in_attack_range(a, t)

    def test_two_away_out_of_melee_range(self, registry, spawn):
        a = registry.get(spawn(Team.PLAYER, (4, 4), attack_range=1))
        t = registry.get(spawn(Team.COMPUTER, (6, 5)))
        assert not in_attack_range(a, t)

    def test_range_zero_never_hits(self, registry, spawn):
        a = registry.get(spawn(Team.PLAYER, (4, 4), attack_range=0))
        t = registry.get(spawn(Team.COMPUTER, (4, 5)))
        assert not in_attack_range(a, t)


class TestApplyDamage:
    """Tests for CombatResolver.apply_damage."""

    def test_lethal_hit_removes_target_and_frees_cell(self, registry, open_grid, spawn, combat):
        attacker = spawn(Team.PLAYER, (4, 4), damage=5)
        target = spawn(Team.COMPUTER, (4, 5), health=5)
        assert open_grid.is_blocked((4, 5))

        outcome = combat.apply_damage(attacker, target)

        assert outcome.defeated is True
        assert outcome.damage == 5
        assert registry.get(target) is None
        assert open_grid.is_free((4, 5))

    def test_partial_hit(self, registry, spawn, combat):
        attacker = spawn(Team.PLAYER, (4, 4), damage=2)
        target = spawn(Team.COMPUTER, (3, 3), health=5)

        outcome = combat.apply_damage(attacker, target)

        assert outcome.defeated is False
        assert outcome.remaining_health == 3
        assert registry.get(target).health == 3

    def test_overkill_still_removes(self, registry, spawn, combat):
        attacker = spawn(Team.PLAYER, (4, 4), damage=9)
        target = spawn(Team.COMPUTER, (4, 3), health=2)
        assert combat.apply_damage(attacker, target).defeated
        assert len(registry.units(Team.COMPUTER)) == 0

    def test_out_of_range_is_noop(self, registry, spawn, combat):
        attacker = spawn(Team.PLAYER, (0, 0), damage=3)
        target = spawn(Team.COMPUTER, (0, 2), health=5)
        assert combat.apply_damage(attacker, target) is None
        assert registry.get(target).health == 5

    def test_friendly_fire_is_noop(self, registry, spawn, combat):
        attacker = spawn(Team.PLAYER, (0, 0), damage=3)
        ally = spawn(Team.PLAYER, (0, 1), health=5)
        assert combat.apply_damage(attacker, ally) is None
        assert registry.get(ally).health == 5

    def test_removed_target_is_noop(self, registry, spawn, combat):
        attacker = spawn(Team.PLAYER, (4, 4), damage=5)
        target = spawn(Team.COMPUTER, (4, 5), health=5)
        combat.apply_damage(attacker, target)
        assert combat.apply_damage(attacker, target) is None

    def test_stale_attacker_is_noop(self, registry, spawn, combat):
        attacker = spawn(Team.PLAYER, (4, 4), damage=5)
        target = spawn(Team.COMPUTER, (4, 5), health=5)
        registry.remove(attacker)
        assert combat.apply_damage(attacker, target) is None
        assert registry.get(target).health == 5
