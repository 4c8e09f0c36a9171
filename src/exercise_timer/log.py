"""Logger configuration for exercise-timer."""

import sys
from pathlib import Path

from loguru import logger


def setup_logger(level: str = "WARNING", log_file: str | Path | None = None) -> None:
    """Configure loguru output and enable the package's log messages.

    The package disables its own logger on import; applications call this
    once at startup to see them.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Optional path to a log file. If None, only stderr.
    """
    logger.remove()

    logger.add(
        sys.stderr,
        format="<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | <cyan>{name}</cyan>:<cyan>{function}</cyan> - <level>{message}</level>",
        level=level.upper(),
        colorize=True,
    )

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        logger.add(
            log_path,
            format="{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} - {message}",
            level=level.upper(),
            rotation="1 MB",
            retention=3,
        )

    logger.enable("exercise_timer")
