"""
Battle renderer module.

Handles all rendering/drawing logic for the battle scene. Reads the turn
controller's query surface only; never mutates battle state.
"""

from typing import Optional

import pygame

from settings import (
    COLOR_COMPUTER,
    COLOR_GRID,
    COLOR_OBSTACLE,
    COLOR_PATH,
    COLOR_PLAYER,
    COLOR_REACHABLE,
)
from engine.battle.types import Path, Team, UnitStatBlock


class BattleRenderer:
    """
    Handles all rendering for the battle scene.

    Takes a reference to the BattleScene to access its state.
    """

    def __init__(self, scene):
        """
        Initialize the renderer with a reference to the battle scene.

        Args:
            scene: The BattleScene instance to render
        """
        self.scene = scene
        self.font = scene.font

    def _cell_rect(self, gx: float, gy: float) -> pygame.Rect:
        x, y = self.scene.cell_to_screen(gx, gy)
        size = self.scene.cell_size
        return pygame.Rect(int(x), int(y), size, size)

    def hover_preview(self) -> Path:
        """Path to the hovered cell while the player picks a destination."""
        controller = self.scene.controller
        cell = self.scene.hover_cell
        if cell is None or controller.is_ai_turn():
            return []
        return controller.preview_path(cell) or []

    def draw_grid(self, surface: pygame.Surface) -> None:
        """Draw the battle grid with obstacles, move highlights and the path."""
        controller = self.scene.controller
        grid = controller.grid
        reachable = set(controller.highlighted_cells())
        path = set(controller.current_path())
        preview = set(self.hover_preview())

        for gx, gy in grid.cells():
            rect = self._cell_rect(gx, gy)
            if (gx, gy) in grid.obstacles:
                pygame.draw.rect(surface, COLOR_OBSTACLE, rect)
            elif (gx, gy) in path:
                pygame.draw.rect(surface, COLOR_PATH, rect.inflate(-24, -24))
            elif (gx, gy) in reachable:
                pygame.draw.rect(surface, COLOR_REACHABLE, rect)
                if (gx, gy) in preview:
                    pygame.draw.rect(surface, COLOR_PATH, rect.inflate(-40, -40))
            pygame.draw.rect(surface, COLOR_GRID, rect, width=1)

    def draw_units(self, surface: pygame.Surface) -> None:
        controller = self.scene.controller
        active = controller.active_unit
        targets = set(controller.attackable_units())

        for block in controller.stat_blocks():
            pos = controller.draw_position(block.handle)
            if pos is None:
                continue
            rect = self._cell_rect(pos.x, pos.y).inflate(-16, -16)
            color = COLOR_PLAYER if block.team is Team.PLAYER else COLOR_COMPUTER
            if block.has_acted:
                color = tuple(c // 2 for c in color)
            pygame.draw.ellipse(surface, color, rect)

            if block.handle == active:
                pygame.draw.ellipse(surface, (240, 240, 240), rect.inflate(6, 6), width=2)
            if block.handle in targets:
                pygame.draw.rect(surface, (255, 160, 60), rect.inflate(10, 10), width=2)

            # Health bar
            ratio = block.health / float(block.max_health) if block.max_health > 0 else 0.0
            bar = pygame.Rect(rect.x, rect.bottom + 2, rect.width, 4)
            pygame.draw.rect(surface, (60, 20, 20), bar)
            pygame.draw.rect(surface, (80, 200, 80), (bar.x, bar.y, int(bar.width * ratio), bar.height))

    def draw_active_unit_panel(self, surface: pygame.Surface, block: Optional[UnitStatBlock]) -> None:
        """Stat panel for the selected unit (health, movement, attack, can act)."""
        if block is None:
            return
        x, y = 16, 16
        panel = pygame.Rect(x, y, 200, 110)
        pygame.draw.rect(surface, (18, 18, 28), panel)
        border = COLOR_PLAYER if block.team is Team.PLAYER else COLOR_COMPUTER
        pygame.draw.rect(surface, border, panel, width=2)

        lines = [
            block.name,
            f"HP {block.health}/{block.max_health}",
            f"Move {block.movement}",
            f"ATK {block.damage}  RNG {block.attack_range}",
            "Done" if block.has_acted else "Ready",
        ]
        for i, line in enumerate(lines):
            surf = self.font.render(line, True, (220, 220, 220))
            surface.blit(surf, (x + 10, y + 8 + i * 20))

    def draw_hud(self, surface: pygame.Surface) -> None:
        controller = self.scene.controller
        screen_w, screen_h = surface.get_size()

        if controller.status == "ongoing":
            step = "Move" if controller.phase.is_move_phase else "Attack"
            header = f"Round {controller.state.round} - {controller.team.value.title()} {step}: {controller.phase.label}"
        else:
            header = controller.status.upper()
        surf = self.font.render(header, True, (230, 230, 230))
        surface.blit(surf, ((screen_w - surf.get_width()) // 2, 16))

        self.draw_active_unit_panel(surface, controller.stat_block(controller.active_unit))

        for i, msg in enumerate(controller.log):
            line = self.font.render(msg, True, (190, 190, 190))
            surface.blit(line, (16, screen_h - 20 * (len(controller.log) - i) - 8))

    def draw(self, surface: pygame.Surface) -> None:
        self.draw_grid(surface)
        self.draw_units(surface)
        self.draw_hud(surface)
