"""Logging setup for the game.

Console output goes through Rich; an optional log file gets plain text.
"""

from __future__ import annotations

import logging
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler

NAMESPACES = ("backend", "frontend")


def setup_logging(level: int = logging.WARNING, log_file: Path | None = None) -> None:
    """Configure the ``backend`` and ``frontend`` loggers.

    Args:
        level: Logging level (e.g. logging.DEBUG, logging.INFO).
        log_file: Optional path to also write logs to.
    """
    handlers: list[logging.Handler] = [
        RichHandler(
            console=Console(stderr=True),
            show_path=False,
            rich_tracebacks=True,
        )
    ]
    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, mode="a", encoding="utf-8")
        file_handler.setFormatter(
            logging.Formatter(
                "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S",
            )
        )
        handlers.append(file_handler)

    for name in NAMESPACES:
        logger = logging.getLogger(name)
        logger.setLevel(level)
        # Avoid duplicate output when called more than once.
        if logger.hasHandlers():
            logger.handlers.clear()
        for handler in handlers:
            handler.setLevel(level)
            logger.addHandler(handler)
        logger.propagate = False

    logging.getLogger("backend").debug("Logging initialised.")
