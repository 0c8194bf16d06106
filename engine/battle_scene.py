from typing import Optional

import pygame

from settings import COLOR_BG, GRID_ORIGIN_X, GRID_ORIGIN_Y, TILE_SIZE
from engine.battle.renderer import BattleRenderer
from engine.battle.turns import TurnController
from engine.battle.types import Cell, Phase
from engine.error_handler import handle_critical_error


class BattleScene:
    """
    Pygame front end for a battle.

    - Left click: select a unit / destination / attacker / target,
      depending on the phase
    - Mouse over a cell in SelectMove: preview the path there
    - ESC: cancel the current selection
    - SPACE: end the active unit's attack without striking

    The y axis points up on screen, so cell (0, 0) is bottom-left.
    """

    def __init__(
        self,
        controller: TurnController,
        font: pygame.font.Font,
        *,
        cell_size: int = TILE_SIZE,
        origin: tuple = (GRID_ORIGIN_X, GRID_ORIGIN_Y),
    ) -> None:
        self.controller = controller
        self.font = font
        self.cell_size = cell_size
        self.grid_origin_x, self.grid_origin_y = origin
        self.finished = False
        self.hover_cell: Optional[Cell] = None
        self.renderer = BattleRenderer(self)

    # ------------ Coordinates ------------

    def cell_to_screen(self, gx: float, gy: float) -> tuple:
        rows = self.controller.grid.height
        x = self.grid_origin_x + gx * self.cell_size
        y = self.grid_origin_y + (rows - 1 - gy) * self.cell_size
        return (x, y)

    def screen_to_cell(self, pos) -> Optional[Cell]:
        rows = self.controller.grid.height
        gx = (pos[0] - self.grid_origin_x) // self.cell_size
        row = (pos[1] - self.grid_origin_y) // self.cell_size
        cell = (int(gx), int(rows - 1 - row))
        return cell if self.controller.grid.in_bounds(cell) else None

    # ------------ Input ------------

    def handle_event(self, event: pygame.event.Event) -> None:
        if self.controller.status != "ongoing":
            if event.type == pygame.KEYDOWN and event.key in (pygame.K_SPACE, pygame.K_RETURN):
                self.finished = True
            return

        if event.type == pygame.MOUSEMOTION:
            self.hover_cell = self.screen_to_cell(event.pos)
            return

        if event.type == pygame.KEYDOWN:
            if event.key == pygame.K_ESCAPE:
                self.controller.cancel()
            elif event.key == pygame.K_SPACE:
                self.controller.skip_attack()
            return

        if event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
            cell = self.screen_to_cell(event.pos)
            if cell is not None:
                self.click_cell(cell)

    def click_cell(self, cell: Cell) -> bool:
        """Route a clicked cell to the request the current phase expects."""
        controller = self.controller
        phase = controller.phase
        if phase is Phase.SELECT_MOVE:
            return controller.select_move(cell)

        unit = controller.registry.unit_at(cell)
        if unit is None:
            return False
        if phase is Phase.SELECT_UNIT:
            return controller.select_unit(unit.handle)
        if phase is Phase.SELECT_ATTACKER:
            return controller.select_attacker(unit.handle)
        if phase is Phase.SELECT_TARGET:
            return controller.select_target(unit.handle)
        return False

    # ------------ Update / draw ------------

    def update(self, dt: float) -> None:
        try:
            self.controller.tick(dt)
        except Exception as e:
            if not handle_critical_error(e, "battle_update", game=self.controller):
                raise

    def draw(self, surface: pygame.Surface) -> None:
        surface.fill(COLOR_BG)
        self.renderer.draw(surface)
