"""
Logging setup for the application.

``setup_logging`` attaches a console handler (and optionally a file
handler) to the root logger exactly once; modules log through
``logging.getLogger(__name__)``.
"""

import logging
from pathlib import Path
from typing import Optional

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def setup_logging(level: str = "INFO", logfile: Optional[str] = None) -> None:
    """Configure the root logger if nothing else configured it first.

    ``level`` is a logging level name (case insensitive); unknown names fall
    back to INFO. ``logfile`` adds a UTF-8 file handler next to the console.
    """
    logger = logging.getLogger()
    if logger.handlers:
        # uvicorn, pytest or a previous create_app() call already did this
        return

    logger.setLevel(getattr(logging, level.upper(), logging.INFO))
    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if logfile:
        file_handler = logging.FileHandler(Path(logfile).resolve(), encoding="utf-8")
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)
