"""
Logging setup and error types for the battle core.

Everything logs through children of the "tactics" logger:
- a daily file under logs/ gets DEBUG and up
- the console only gets warnings and errors

Records are stamped with the current battle tick so file logs can be lined
up with telemetry rows.
"""
import logging
import traceback
from datetime import datetime
from pathlib import Path
from typing import Callable, Optional

LOG_DIR = Path(__file__).resolve().parent.parent / "logs"

FILE_FORMAT = "%(asctime)s [t%(tick)s] %(name)s %(levelname)s: %(message)s"
CONSOLE_FORMAT = "%(levelname)s: %(message)s"

logger = logging.getLogger("tactics")


class TickFilter(logging.Filter):
    """Adds ``record.tick`` (the battle tick being processed)."""

    def __init__(self) -> None:
        super().__init__()
        self.tick = 0

    def filter(self, record: logging.LogRecord) -> bool:
        record.tick = self.tick
        return True


_tick_filter = TickFilter()


def configure_logging(
    log_dir: Path = LOG_DIR,
    console_level: int = logging.WARNING,
    to_file: bool = True,
) -> logging.Logger:
    """
    Attach handlers to the "tactics" logger. Safe to call more than once;
    later calls replace the handlers from earlier ones.
    """
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(logging.DEBUG)

    if to_file:
        log_dir.mkdir(parents=True, exist_ok=True)
        log_file = log_dir / f"battle_{datetime.now().strftime('%Y%m%d')}.log"
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)
        file_handler.addFilter(_tick_filter)
        file_handler.setFormatter(logging.Formatter(FILE_FORMAT))
        logger.addHandler(file_handler)

    console_handler = logging.StreamHandler()
    console_handler.setLevel(console_level)
    console_handler.setFormatter(logging.Formatter(CONSOLE_FORMAT))
    logger.addHandler(console_handler)
    return logger


if not logger.handlers:
    configure_logging()


def get_logger(name: str) -> logging.Logger:
    """Child of the "tactics" logger, e.g. ``get_logger("turns")``."""
    return logger.getChild(name)


def set_log_tick(tick: int) -> None:
    _tick_filter.tick = tick


class GameError(Exception):
    """Base class for errors the player may need to hear about."""
    def __init__(self, message: str, user_message: Optional[str] = None):
        super().__init__(message)
        self.user_message = user_message or message


class BattleError(GameError):
    """A battle was set up in a state it cannot run from."""
    pass


class ConfigError(GameError):
    """A configuration value is out of range."""
    pass


class SpawnError(GameError):
    """A wave could not be spawned (unknown archetype or wave id)."""
    pass


def log_error(
    error: Exception,
    context: str = "",
    user_message: Optional[str] = None,
) -> None:
    """
    Log an exception with where it happened.

    Args:
        error: The exception that occurred
        context: Short tag for the call site, e.g. "turn_tick"
        user_message: Player-facing text, logged at INFO next to the error
    """
    trace = traceback.format_exc()
    logger.error(f"{context or 'unknown'}: {type(error).__name__}: {error}\n{trace}")
    if user_message:
        logger.info(f"{context}: shown to player: {user_message}")


def handle_critical_error(
    error: Exception,
    context: str,
    game: Optional[object] = None,
    recovery_action: Optional[Callable] = None
) -> bool:
    """
    Decide whether the main loop can survive an error.

    Args:
        error: The exception that occurred
        context: Where the error occurred
        game: Anything with ``add_message`` (the turn controller's battle log)
        recovery_action: Called once to try to get back to a good state

    Returns:
        True if the error was dealt with, False if the caller should re-raise
    """
    log_error(error, context)

    if recovery_action is not None:
        try:
            recovery_action()
        except Exception as recovery_error:
            log_error(recovery_error, f"{context}_recovery")
        else:
            logger.info(f"{context}: recovered")
            return True

    if game is not None and hasattr(game, "add_message"):
        game.add_message(f"Something went wrong ({context}); see logs.")
        return True

    return False
