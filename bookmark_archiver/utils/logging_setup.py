"""
Logging configuration for the bookmark archiver.

Console output goes to stderr with the program name as prefix, so that
stdout stays reserved for listed bookmarks.
"""

import logging
import sys
from pathlib import Path
from typing import Optional, Union

CONSOLE_FORMAT = "bookmark: %(message)s"
FILE_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def resolve_log_level(level: str, verbosity: int = 0) -> int:
    """
    Combine the configured level with the number of -v flags.

    Each -v lowers the threshold one step (WARNING -> INFO -> DEBUG); the
    configured level wins when it is already more verbose.
    """
    configured = getattr(logging, level.upper(), logging.WARNING)
    if verbosity >= 2:
        return min(configured, logging.DEBUG)
    if verbosity == 1:
        return min(configured, logging.INFO)
    return configured


def setup_logging(
    level: Union[int, str] = logging.WARNING,
    log_file: Optional[Union[str, Path]] = None,
) -> None:
    """
    Set up logging configuration.

    Args:
        level: Logging level name or number for the console handler
        log_file: Optional path of a log file that receives everything
            at DEBUG and above
    """
    if isinstance(level, str):
        level = getattr(logging, level.upper(), logging.WARNING)

    handlers = []

    # Console handler
    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(logging.Formatter(CONSOLE_FORMAT))
    console_handler.setLevel(level)
    handlers.append(console_handler)

    # File handler
    root_level = level
    if log_file is not None:
        log_path = Path(log_file).expanduser()
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_path, encoding="utf-8")
        file_handler.setFormatter(logging.Formatter(FILE_FORMAT, DATE_FORMAT))
        file_handler.setLevel(logging.DEBUG)
        handlers.append(file_handler)
        root_level = logging.DEBUG

    logging.basicConfig(level=root_level, handlers=handlers, force=True)

    # Reduce noise from some libraries
    logging.getLogger("urllib3").setLevel(logging.WARNING)
    logging.getLogger("requests").setLevel(logging.WARNING)

    logging.getLogger(__name__).debug(
        f"Logging configured (level={logging.getLevelName(level)}, "
        f"log_file={log_file})"
    )
