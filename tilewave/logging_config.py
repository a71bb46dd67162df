"""
Logging for tilewave.

Everything under the "tilewave" logger goes to <data>/debug.log (rotated)
and, above a quieter threshold, to stderr. Solver and storage modules log
through the helpers below so each line starts with a greppable tag
(ITER 00042 | ..., STORAGE | ...).
"""

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path

LOG_FILE_NAME = "debug.log"
MAX_LOG_BYTES = 5 * 1024 * 1024
LOG_BACKUPS = 3

FILE_FORMAT = "%(asctime)s | %(levelname)-7s | %(name)s | %(message)s"
CONSOLE_FORMAT = "%(levelname)s %(name)s: %(message)s"


def setup_logging(
    data_root: Path | str,
    log_level: int = logging.DEBUG,
    console_level: int = logging.WARNING,
) -> Path:
    """
    Attach file and console handlers to the tilewave logger.

    Safe to call again: previous handlers are closed and replaced, so a
    new data directory takes over the log file.

    Returns:
        Path to the log file
    """
    data_path = Path(data_root)
    data_path.mkdir(parents=True, exist_ok=True)
    log_path = data_path / LOG_FILE_NAME

    package_logger = logging.getLogger("tilewave")
    package_logger.setLevel(logging.DEBUG)
    for handler in package_logger.handlers:
        handler.close()
    package_logger.handlers.clear()

    file_handler = RotatingFileHandler(
        log_path, maxBytes=MAX_LOG_BYTES, backupCount=LOG_BACKUPS, encoding="utf-8"
    )
    file_handler.setLevel(log_level)
    file_handler.setFormatter(logging.Formatter(FILE_FORMAT))
    package_logger.addHandler(file_handler)

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(console_level)
    console_handler.setFormatter(logging.Formatter(CONSOLE_FORMAT))
    package_logger.addHandler(console_handler)

    package_logger.debug(f"Logging to {log_path.absolute()}")
    return log_path


def log_solve(
    logger: logging.Logger,
    iteration: int,
    event: str,
    details: str | None = None,
) -> None:
    """Debug line for one solve-loop event, tagged with the iteration."""
    suffix = f" | {details}" if details else ""
    logger.debug(f"ITER {iteration:05d} | {event}{suffix}")


def log_storage(
    logger: logging.Logger,
    operation: str,
    path: Path | str | None = None,
    success: bool = True,
    details: str | None = None,
) -> None:
    """Debug line for a tile library read or write."""
    parts = ["STORAGE", operation]
    if path:
        parts.append(str(path))
    parts.append("OK" if success else "FAILED")
    if details:
        parts.append(details)
    logger.debug(" | ".join(parts))
