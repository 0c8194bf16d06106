# settings.py

# Window / display
WINDOW_WIDTH = 1024
WINDOW_HEIGHT = 768
FPS = 60
TITLE = "Grid Tactics"

# Colors
COLOR_BG = (15, 15, 20)
COLOR_GRID = (40, 40, 60)
COLOR_PLAYER = (90, 210, 110)
COLOR_COMPUTER = (210, 70, 70)
COLOR_OBSTACLE = (70, 70, 80)
COLOR_REACHABLE = (45, 70, 110)
COLOR_PATH = (220, 210, 90)

# World
TILE_SIZE = 64
GRID_WIDTH = 9
GRID_HEIGHT = 9
GRID_ORIGIN_X = 240
GRID_ORIGIN_Y = 96

# Battle
MOVE_SPEED_CELLS_PER_SEC = 1.0  # one tile per second
AI_THINK_DELAY = 0.35  # seconds a computer unit waits before deciding
DEFAULT_TARGET_POLICY = "nearest"
BATTLE_LOG_SIZE = 6
DEFAULT_WAVE_ID = "skirmish"
