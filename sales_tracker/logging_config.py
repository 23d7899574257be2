"""
Logging for the sales dashboard.

Handlers are attached to the ``sales_tracker`` package logger rather than the
root logger, so uvicorn keeps its own access and error output and the seeder
and query modules log through ``logging.getLogger(__name__)`` underneath it.
Each handler is tagged with a name; calling ``setup_logging`` again only
updates the level and adds a file handler that is not yet attached.
"""

import logging
from pathlib import Path
from typing import Optional

PACKAGE_LOGGER = "sales_tracker"
CONSOLE_HANDLER = "sales_tracker.console"
FILE_HANDLER = "sales_tracker.file"

_formatter = logging.Formatter(
    fmt="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)


def _attached(logger: logging.Logger, name: str) -> bool:
    return any(handler.get_name() == name for handler in logger.handlers)


def _attach(logger: logging.Logger, handler: logging.Handler, name: str) -> None:
    handler.set_name(name)
    handler.setFormatter(_formatter)
    logger.addHandler(handler)


def setup_logging(level: str = "INFO", logfile: Optional[str] = None) -> logging.Logger:
    """Configure and return the ``sales_tracker`` logger.

    An unknown *level* name falls back to ``INFO``. When *logfile* is given,
    records are also appended to that file.
    """
    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(getattr(logging, str(level).upper(), logging.INFO))

    if not _attached(logger, CONSOLE_HANDLER):
        _attach(logger, logging.StreamHandler(), CONSOLE_HANDLER)
    if logfile and not _attached(logger, FILE_HANDLER):
        _attach(logger, logging.FileHandler(Path(logfile).resolve(), encoding="utf-8"), FILE_HANDLER)
    return logger
