"""
Unified output system using Loguru.
File logging for everything, plus stdout printing for user-facing messages.
"""

from pathlib import Path

from loguru import logger

from .console import safe_print

_LEVEL_STYLES = {
    "debug": "cyan",
    "info": None,
    "warning": "yellow",
    "error": "red",
}


def setup_loguru(
    log_file: Path,
    level: str = "INFO",
    rotation: str = "10 MB",
    retention: int = 5,
) -> None:
    """
    Configure loguru for file-only logging.

    The terminal belongs to the playback controls while a session runs, so
    nothing is logged to stderr.

    Args:
        log_file: Path to log file
        level: Minimum level for file logging (DEBUG, INFO, WARNING, ERROR)
        rotation: Size at which the log file is rotated
        retention: Number of rotated files to keep
    """
    logger.remove()

    log_file.parent.mkdir(parents=True, exist_ok=True)
    logger.add(
        log_file,
        rotation=rotation,
        retention=retention,
        level=level.upper(),
        format="{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{line} | {message}",
        enqueue=False,  # Synchronous writes (thread-safe but blocking)
    )

    logger.info(f"Loguru initialized: {log_file} (level={level})")


def log(message: str, level: str = "info") -> None:
    """
    Write a user-facing message to the log file and to stdout.

    Only meant for output outside a playback session; during a session the
    control handler owns the terminal.

    Args:
        message: User-facing message
        level: Log level (debug, info, warning, error)
    """
    log_func = getattr(logger, level)
    log_func(message)
    safe_print(message, style=_LEVEL_STYLES.get(level))
