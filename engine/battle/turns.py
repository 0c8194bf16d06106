"""
Turn controller.

Sequences a battle through its phases:

    SelectUnit -> SelectMove -> DoMove -> (back to SelectUnit until every
    unit has moved) -> SelectAttacker -> SelectTarget -> DoAttack -> (back to
    SelectAttacker until every unit has attacked) -> other team's SelectUnit

Player requests (``select_unit``, ``select_move``, ...) are validated
against the current phase and return False without side effects when they
don't apply. Everything else happens in ``tick``, which performs at most one
phase transition per call: blocked-cell recompute, then AI decisions for
computer-controlled teams, then the transition.
"""

from dataclasses import dataclass
from typing import Iterable, List, Optional, Set

import pygame

from settings import AI_THINK_DELAY, BATTLE_LOG_SIZE, MOVE_SPEED_CELLS_PER_SEC
from engine.battle.ai import AIDecisionEngine, DEFAULT_POLICY
from engine.battle.combat import CombatResolver
from engine.battle.grid import GridMap
from engine.battle.movement import InTransit
from engine.battle.pathfinding import BattlePathfinding, manhattan_distance
from engine.battle.registry import UnitRegistry
from engine.battle.types import (
    AttackOutcome,
    BattleStatus,
    Cell,
    Path,
    Phase,
    Team,
    Unit,
    UnitHandle,
    UnitStatBlock,
)
from engine.error_handler import BattleError, get_logger, log_error, set_log_tick
from telemetry.logger import telemetry

log = get_logger("turns")


@dataclass
class BattleState:
    """Everything the controller mutates between ticks."""
    team: Team = Team.PLAYER
    phase: Phase = Phase.SELECT_UNIT
    active: Optional[UnitHandle] = None
    pending_target: Optional[UnitHandle] = None
    transit: Optional[InTransit] = None
    status: BattleStatus = "ongoing"
    round: int = 1
    ticks: int = 0
    ai_timer: float = 0.0


class TurnController:
    """
    Owns the battle state and drives it one tick at a time.

    Teams listed in ``ai_teams`` are played by the AIDecisionEngine; the
    rest wait for player requests.
    """

    def __init__(
        self,
        registry: UnitRegistry,
        grid: GridMap,
        *,
        ai_teams: Iterable[Team] = (Team.COMPUTER,),
        target_policy: str = DEFAULT_POLICY,
        move_speed: float = MOVE_SPEED_CELLS_PER_SEC,
        ai_delay: float = AI_THINK_DELAY,
        log_size: int = BATTLE_LOG_SIZE,
    ) -> None:
        self.registry = registry
        self.grid = grid
        self.pathfinding = BattlePathfinding(grid)
        self.combat = CombatResolver(registry, grid)
        self.ai = AIDecisionEngine(registry, grid, target_policy)
        self.ai_teams: Set[Team] = set(ai_teams)
        self.move_speed = move_speed
        self.ai_delay = ai_delay

        self.state = BattleState()
        self.last_outcome: Optional[AttackOutcome] = None

        # --- Combat log ---
        self.log: List[str] = []
        self.max_log_lines = log_size
        self.last_action = ""

        self._check_layout()
        self.grid.recompute(self.registry)
        self._update_status()

    # ------------ Log helpers ------------

    def _log(self, msg: str) -> None:
        """Append a message to the combat log and keep last_action in sync."""
        self.last_action = msg
        self.log.append(msg)
        if len(self.log) > self.max_log_lines:
            self.log.pop(0)

    def add_message(self, msg: str) -> None:
        self._log(msg)

    # ------------ Read-only queries ------------

    @property
    def phase(self) -> Phase:
        return self.state.phase

    @property
    def team(self) -> Team:
        return self.state.team

    @property
    def status(self) -> BattleStatus:
        return self.state.status

    @property
    def active_unit(self) -> Optional[UnitHandle]:
        return self.state.active

    def is_ai_turn(self) -> bool:
        return self.state.team in self.ai_teams

    def current_path(self) -> Path:
        """Cells still to walk in the current move, in travel order."""
        if self.state.transit is None:
            return []
        return self.state.transit.path()

    def stat_block(self, handle: Optional[UnitHandle]) -> Optional[UnitStatBlock]:
        unit = self.registry.get(handle)
        return unit.stat_block() if unit is not None else None

    def stat_blocks(self) -> List[UnitStatBlock]:
        return [u.stat_block() for u in self.registry.all_units()]

    def draw_position(self, handle: UnitHandle) -> Optional[pygame.Vector2]:
        """Fractional grid position, mid-step for a unit that is walking."""
        unit = self.registry.get(handle)
        if unit is None:
            return None
        transit = self.state.transit
        if transit is not None and transit.unit == handle:
            return pygame.Vector2(transit.position)
        return pygame.Vector2(unit.position)

    def highlighted_cells(self) -> List[Cell]:
        """Cells the active unit may move to (SelectMove only)."""
        unit = self._active()
        if self.state.phase is not Phase.SELECT_MOVE or unit is None:
            return []
        reachable = self.pathfinding.get_reachable_cells(unit.position, unit.movement)
        return sorted(c for c in reachable if c != unit.position)

    def attackable_units(self) -> List[UnitHandle]:
        """Opponents the active unit can hit (SelectTarget only)."""
        unit = self._active()
        if self.state.phase is not Phase.SELECT_TARGET or unit is None:
            return []
        return [t.handle for t in self.ai.targets_in_range(unit)]

    def preview_path(self, destination: Cell) -> Optional[Path]:
        """Path the active unit would take to ``destination``, if legal."""
        unit = self._active()
        if self.state.phase is not Phase.SELECT_MOVE or unit is None:
            return None
        path = self.pathfinding.find_path(unit.position, destination)
        if path is None or len(path) > unit.movement:
            return None
        return path

    # ------------ Player requests ------------

    def select_unit(self, handle: UnitHandle) -> bool:
        """SelectUnit -> SelectMove for a unit that has not moved yet."""
        if not self._accepts_request(Phase.SELECT_UNIT):
            return False
        unit = self._ready_unit(handle)
        if unit is None:
            return False
        self._begin_action(unit, Phase.SELECT_MOVE)
        return True

    def select_move(self, destination: Cell) -> bool:
        """SelectMove -> DoMove if the destination is within movement range."""
        if not self._accepts_request(Phase.SELECT_MOVE):
            return False
        self.grid.recompute(self.registry)
        return self._start_move(destination)

    def select_attacker(self, handle: UnitHandle) -> bool:
        """SelectAttacker -> SelectTarget for a unit that has not attacked yet."""
        if not self._accepts_request(Phase.SELECT_ATTACKER):
            return False
        unit = self._ready_unit(handle)
        if unit is None:
            return False
        self._begin_action(unit, Phase.SELECT_TARGET)
        return True

    def select_target(self, handle: UnitHandle) -> bool:
        """SelectTarget -> DoAttack if the target is an opponent in range."""
        if not self._accepts_request(Phase.SELECT_TARGET):
            return False
        return self._choose_target(handle)

    def skip_attack(self) -> bool:
        """End the active unit's attack without dealing damage."""
        if not self._accepts_request(Phase.SELECT_TARGET):
            return False
        self._finish_attack(None)
        return True

    def cancel(self) -> bool:
        """Drop the current selection without spending the unit's action."""
        if not self._accepts_request(self.state.phase):
            return False
        if self.state.phase is Phase.SELECT_MOVE:
            self._set_phase(Phase.SELECT_UNIT)
            return True
        if self.state.phase is Phase.SELECT_TARGET:
            self._set_phase(Phase.SELECT_ATTACKER)
            return True
        return False

    # ------------ Tick ------------

    def tick(self, dt: float) -> None:
        """
        Advance the simulation by one tick of ``dt`` seconds.

        Never raises: an unexpected error is logged and the phase is held.
        """
        if self.state.status != "ongoing":
            return
        self.state.ticks += 1
        set_log_tick(self.state.ticks)
        telemetry.tick()
        try:
            self._step(dt)
        except Exception as e:
            log_error(e, "turn_tick")

        if telemetry.should_log_tick():
            telemetry.log(
                "tick",
                n=self.state.ticks,
                team=self.state.team.value,
                phase=self.state.phase.value,
                units=len(self.registry),
            )

    def _step(self, dt: float) -> None:
        phase = self.state.phase

        if phase is Phase.DO_MOVE:
            self._advance_move(dt)
            return

        self.grid.recompute(self.registry)

        if phase is Phase.DO_ATTACK:
            self._resolve_attack()
            return

        if phase in (Phase.SELECT_MOVE, Phase.SELECT_TARGET) and self._active() is None:
            # Active unit vanished; go back to choosing.
            self._set_phase(Phase.SELECT_UNIT if phase is Phase.SELECT_MOVE else Phase.SELECT_ATTACKER)
            return

        if phase is Phase.SELECT_UNIT and self.registry.all_acted(self.state.team):
            self.registry.reset_acted(self.state.team)
            self._set_phase(Phase.SELECT_ATTACKER)
            return

        if phase is Phase.SELECT_ATTACKER and self.registry.all_acted(self.state.team):
            self.registry.reset_acted(self.state.team)
            self._hand_over()
            return

        if self.is_ai_turn() and self._ai_ready(dt):
            self._ai_step(phase)

    # ------------ AI ------------

    def _ai_ready(self, dt: float) -> bool:
        self.state.ai_timer -= dt
        return self.state.ai_timer <= 0.0

    def _ai_step(self, phase: Phase) -> None:
        team = self.state.team
        if phase is Phase.SELECT_UNIT:
            unit = self.registry.get(self.ai.select_unit(team))
            if unit is not None:
                self._begin_action(unit, Phase.SELECT_MOVE)
        elif phase is Phase.SELECT_MOVE:
            unit = self._active()
            decision = self.ai.select_move(unit.handle)
            if decision is not None and decision.target is not None:
                target = self.registry.get(decision.target)
                if target is not None:
                    log.debug(f"{unit.name} closes on {target.name} at {target.position}")
            if decision is None or not self._start_transit(unit, decision.path):
                self._start_transit(unit, [])
        elif phase is Phase.SELECT_ATTACKER:
            unit = self.registry.get(self.ai.select_attacker(team))
            if unit is not None:
                self._begin_action(unit, Phase.SELECT_TARGET)
        elif phase is Phase.SELECT_TARGET:
            target = self.ai.select_target(self.state.active)
            if target is None:
                self._finish_attack(None)
            else:
                self._choose_target(target)

    # ------------ Transitions ------------

    def _set_phase(self, phase: Phase, team: Optional[Team] = None) -> None:
        prev_team, prev_phase = self.state.team, self.state.phase
        if team is not None:
            self.state.team = team
        self.state.phase = phase
        if phase in (Phase.SELECT_UNIT, Phase.SELECT_ATTACKER):
            self.state.active = None
            self.state.pending_target = None
        self.state.ai_timer = self.ai_delay if self.is_ai_turn() else 0.0
        self.grid.recompute(self.registry)

        log.debug(f"{prev_team.value}/{prev_phase.value} -> {self.state.team.value}/{phase.value}")
        telemetry.log(
            "phase_change",
            frm=prev_phase.value,
            to=phase.value,
            team=self.state.team.value,
            round=self.state.round,
        )

    def _hand_over(self) -> None:
        nxt = self.state.team.opponent
        if nxt is Team.PLAYER:
            self.state.round += 1
        self._log(f"{nxt.value.title()} turn.")
        self._set_phase(Phase.SELECT_UNIT, team=nxt)

    def _begin_action(self, unit: Unit, phase: Phase) -> None:
        self._set_phase(phase)
        self.state.active = unit.handle

    def _start_move(self, destination: Cell) -> bool:
        unit = self._active()
        if unit is None:
            return False
        path = self.pathfinding.find_path(unit.position, destination)
        if path is None:
            log.debug(f"{unit.name}: no path to {destination}")
            return False
        return self._start_transit(unit, path)

    def _start_transit(self, unit: Unit, path: Path) -> bool:
        """DoMove along ``path`` if it is a legal walk for the unit right now."""
        if len(path) > unit.movement:
            log.debug(f"{unit.name}: path of {len(path)} steps, range {unit.movement}")
            return False
        prev = unit.position
        for cell in path:
            if manhattan_distance(prev, cell) != 1 or self.grid.is_blocked(cell):
                log.debug(f"{unit.name}: path blocked at {cell}")
                return False
            prev = cell

        self._set_phase(Phase.DO_MOVE)
        self.state.active = unit.handle
        self.state.transit = InTransit.start(unit, path, self.move_speed)
        return True

    def _advance_move(self, dt: float) -> None:
        transit = self.state.transit
        unit = self.registry.get(transit.unit) if transit is not None else None
        if transit is None or unit is None:
            self.state.transit = None
            self._set_phase(Phase.SELECT_UNIT)
            return

        transit.advance(unit, dt)
        if not transit.finished:
            return

        unit.has_acted = True
        self.state.transit = None
        if transit.steps_taken:
            self._log(f"{unit.name} moves to {unit.position}.")
        else:
            self._log(f"{unit.name} holds position.")
        telemetry.log("unit_moved", unit=str(unit.handle), to=list(unit.position), steps=transit.steps_taken)
        self._set_phase(Phase.SELECT_UNIT)

    def _choose_target(self, handle: UnitHandle) -> bool:
        attacker = self._active()
        target = self.registry.get(handle)
        if attacker is None or target is None:
            return False
        if not self.combat.can_attack(attacker, target):
            return False
        self._set_phase(Phase.DO_ATTACK)
        self.state.active = attacker.handle
        self.state.pending_target = target.handle
        return True

    def _resolve_attack(self) -> None:
        attacker = self._active()
        target = self.registry.get(self.state.pending_target)
        outcome = None
        if attacker is not None and target is not None:
            outcome = self.combat.apply_damage(attacker.handle, target.handle)
            if outcome is None:
                self._log(f"{attacker.name} can't reach {target.name}.")
            elif outcome.defeated:
                self._log(f"{attacker.name} slays {target.name} ({outcome.damage} dmg).")
            else:
                self._log(f"{attacker.name} hits {target.name} for {outcome.damage} dmg.")
        self._finish_attack(outcome)

    def _finish_attack(self, outcome: Optional[AttackOutcome]) -> None:
        attacker = self._active()
        self.last_outcome = outcome
        if attacker is not None:
            attacker.has_acted = True
            if outcome is None and self.state.phase is Phase.SELECT_TARGET:
                self._log(f"{attacker.name} has no target.")
        self._set_phase(Phase.SELECT_ATTACKER)
        self._update_status()

    # ------------ Helpers ------------

    def _check_layout(self) -> None:
        """Every unit must start on its own free, on-grid cell."""
        seen: Set[Cell] = set()
        for unit in self.registry.all_units():
            cell = unit.position
            if not self.grid.in_bounds(cell) or cell in self.grid.obstacles:
                raise BattleError(f"{unit.name} {unit.handle} starts on unusable cell {cell}")
            if cell in seen:
                raise BattleError(f"Two units start on {cell}")
            seen.add(cell)

    def _active(self) -> Optional[Unit]:
        return self.registry.get(self.state.active)

    def _ready_unit(self, handle: UnitHandle) -> Optional[Unit]:
        unit = self.registry.get(handle)
        if unit is None or unit.team is not self.state.team or unit.has_acted:
            return None
        return unit

    def _accepts_request(self, phase: Phase) -> bool:
        return (
            self.state.status == "ongoing"
            and self.state.phase is phase
            and not self.is_ai_turn()
        )

    def _update_status(self) -> None:
        if self.state.status != "ongoing":
            return
        if not self.registry.units(Team.PLAYER):
            self.state.status = "defeat"
            self._log("Your units have fallen.")
        elif not self.registry.units(Team.COMPUTER):
            self.state.status = "victory"
            self._log("The enemy is defeated!")
        else:
            return
        log.info(f"Battle ended: {self.state.status} after {self.state.round} rounds")
        telemetry.log("battle_end", status=self.state.status, round=self.state.round, events=telemetry.summary())
