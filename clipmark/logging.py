"""Centralized logging configuration for clipmark"""

import logging
from pathlib import Path
from typing import Optional

from rich.logging import RichHandler

from .paths import ensure_directory
from .utils import get_timestamp


def configure_logging(
    log_level: str = "INFO",
    log_dir: Optional[Path] = None,
    file_logging: bool = True,
) -> Optional[Path]:
    """
    Central logging configuration for all modules.

    Returns:
        The log file path, or None when file logging is off or the
        log directory is unusable
    """
    logger = logging.getLogger("clipmark")
    logger.setLevel(log_level)

    # Remove existing handlers
    for handler in logger.handlers[:]:
        logger.removeHandler(handler)

    console_handler = RichHandler(show_path=False, rich_tracebacks=True)
    console_handler.setFormatter(logging.Formatter("%(message)s"))
    logger.addHandler(console_handler)

    log_file = None
    if file_logging and log_dir is not None:
        try:
            ensure_directory(log_dir)
        except ValueError as e:
            logger.warning("File logging disabled: %s", e)
        else:
            log_file = log_dir / f"clipmark_{get_timestamp()}.log"
            file_handler = logging.FileHandler(log_file)
            file_handler.setFormatter(logging.Formatter(
                "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
            ))
            logger.addHandler(file_handler)

    logging.captureWarnings(True)
    return log_file
