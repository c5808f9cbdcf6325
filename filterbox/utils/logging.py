"""Logging setup for the picker."""

import logging
from pathlib import Path


def setup_logger(log_path: Path, level: int = logging.INFO) -> logging.Logger:
    """Set up file-only logging for the ``filterbox`` package.

    The terminal belongs to the TUI while it runs, so nothing is written
    to the console.
    """
    log_path = Path(log_path)
    log_path.parent.mkdir(parents=True, exist_ok=True)

    logger = logging.getLogger("filterbox")
    logger.setLevel(level)
    logger.handlers.clear()

    file_handler = logging.FileHandler(log_path, mode="a")
    file_handler.setFormatter(
        logging.Formatter("%(asctime)s | %(name)s | %(message)s", datefmt="%Y-%m-%d %H:%M:%S")
    )
    logger.addHandler(file_handler)

    return logger
