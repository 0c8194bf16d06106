import sys
from pathlib import Path

import pygame

from settings import TITLE, FPS
from engine.battle.registry import UnitRegistry
from engine.battle.turns import TurnController
from engine.battle_scene import BattleScene
from engine.config import load_config
from engine.error_handler import GameError, LOG_DIR, log_error
from systems.units import spawn_wave_by_id
from telemetry.logger import telemetry


def build_battle(config) -> TurnController:
    registry = UnitRegistry()
    grid, handles = spawn_wave_by_id(config.wave_id, registry, size=config.get_grid_size())
    telemetry.begin_battle(wave=config.wave_id, policy=config.target_policy, units=len(handles))
    return TurnController(
        registry,
        grid,
        target_policy=config.target_policy,
        move_speed=config.move_speed,
        ai_delay=config.ai_delay,
    )


def main() -> None:
    config = load_config()
    if config.telemetry:
        telemetry.init(Path(LOG_DIR) / "telemetry.jsonl")

    try:
        controller = build_battle(config)
    except GameError as e:
        log_error(e, "build_battle", user_message=e.user_message)
        print(e.user_message)
        sys.exit(1)

    pygame.init()
    pygame.display.set_caption(TITLE)
    flags = pygame.FULLSCREEN if config.fullscreen else 0
    screen = pygame.display.set_mode(config.get_resolution(), flags)
    clock = pygame.time.Clock()
    font = pygame.font.Font(None, 22)

    scene = BattleScene(controller, font)

    # --- Main loop ---
    running = True
    while running:
        dt = clock.tick(FPS) / 1000.0

        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                running = False
                continue
            scene.handle_event(event)

        if scene.finished:
            running = False

        scene.update(dt)
        scene.draw(screen)
        pygame.display.flip()

    pygame.quit()
    sys.exit()


if __name__ == "__main__":
    main()
