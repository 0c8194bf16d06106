"""
Game configuration system for saving/loading user preferences.
"""

import json
from pathlib import Path
from typing import Optional, Dict, Any, Tuple

from settings import (
    WINDOW_WIDTH,
    WINDOW_HEIGHT,
    GRID_WIDTH,
    GRID_HEIGHT,
    MOVE_SPEED_CELLS_PER_SEC,
    AI_THINK_DELAY,
    DEFAULT_TARGET_POLICY,
    DEFAULT_WAVE_ID,
)
from engine.error_handler import ConfigError, get_logger

log = get_logger("config")

# Config file location
CONFIG_DIR = Path(__file__).resolve().parent.parent / "config"
CONFIG_FILE = CONFIG_DIR / "settings.json"


def _check_values(values: Dict[str, Any]) -> None:
    if values["grid_width"] < 1 or values["grid_height"] < 1:
        raise ConfigError(f"Grid size must be positive, got {values['grid_width']}x{values['grid_height']}")
    if values["move_speed"] <= 0:
        raise ConfigError(f"move_speed must be positive, got {values['move_speed']}")
    if values["ai_delay"] < 0:
        raise ConfigError(f"ai_delay must not be negative, got {values['ai_delay']}")


class GameConfig:
    """Manages game configuration/settings."""

    def __init__(self) -> None:
        self.width: int = WINDOW_WIDTH
        self.height: int = WINDOW_HEIGHT
        self.fullscreen: bool = False

        self.grid_width: int = GRID_WIDTH
        self.grid_height: int = GRID_HEIGHT
        self.move_speed: float = MOVE_SPEED_CELLS_PER_SEC
        self.ai_delay: float = AI_THINK_DELAY
        self.target_policy: str = DEFAULT_TARGET_POLICY
        self.wave_id: str = DEFAULT_WAVE_ID
        self.telemetry: bool = False

    def to_dict(self) -> Dict[str, Any]:
        """Convert config to dictionary for saving."""
        return {
            "width": self.width,
            "height": self.height,
            "fullscreen": self.fullscreen,
            "grid_width": self.grid_width,
            "grid_height": self.grid_height,
            "move_speed": self.move_speed,
            "ai_delay": self.ai_delay,
            "target_policy": self.target_policy,
            "wave_id": self.wave_id,
            "telemetry": self.telemetry,
        }

    def from_dict(self, data: Dict[str, Any]) -> None:
        """Load config from dictionary. Nothing changes if a value is rejected."""
        values = {
            "width": int(data.get("width", WINDOW_WIDTH)),
            "height": int(data.get("height", WINDOW_HEIGHT)),
            "fullscreen": bool(data.get("fullscreen", False)),
            "grid_width": int(data.get("grid_width", GRID_WIDTH)),
            "grid_height": int(data.get("grid_height", GRID_HEIGHT)),
            "move_speed": float(data.get("move_speed", MOVE_SPEED_CELLS_PER_SEC)),
            "ai_delay": float(data.get("ai_delay", AI_THINK_DELAY)),
            "target_policy": str(data.get("target_policy", DEFAULT_TARGET_POLICY)),
            "wave_id": str(data.get("wave_id", DEFAULT_WAVE_ID)),
            "telemetry": bool(data.get("telemetry", False)),
        }
        _check_values(values)
        for key, value in values.items():
            setattr(self, key, value)

    def validate(self) -> None:
        """Reject values the battle cannot run with."""
        _check_values(self.to_dict())

    def get_resolution(self) -> Tuple[int, int]:
        return (self.width, self.height)

    def get_grid_size(self) -> Tuple[int, int]:
        return (self.grid_width, self.grid_height)

    def save(self, path: Optional[Path] = None) -> bool:
        """Save config to file."""
        path = path or CONFIG_FILE
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            with path.open("w", encoding="utf-8") as f:
                json.dump(self.to_dict(), f, indent=2)
            return True
        except OSError as e:
            log.warning(f"Error saving config: {e}")
            return False

    def load(self, path: Optional[Path] = None) -> bool:
        """Load config from file. Unreadable files leave the defaults in place."""
        path = path or CONFIG_FILE
        if not path.exists():
            return False

        try:
            with path.open("r", encoding="utf-8") as f:
                data = json.load(f)
            self.from_dict(data)
            return True
        except (OSError, ValueError, TypeError, AttributeError, ConfigError) as e:
            log.warning(f"Error loading config: {e}")
            self.from_dict({})
            return False


# Global config instance
_config = GameConfig()


def get_config() -> GameConfig:
    """Get the global config instance."""
    return _config


def load_config() -> GameConfig:
    """Load and return the config."""
    _config.load()
    return _config


def save_config() -> bool:
    """Save the global config."""
    return _config.save()
