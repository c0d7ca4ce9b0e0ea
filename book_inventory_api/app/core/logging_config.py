"""
Logging configuration for the Book Inventory API.

``setup_logging`` attaches the service's console (and optional file)
handler to the root logger and sets the level of the
``book_inventory_api`` loggers.  Uvicorn's per-request access log is
lowered to warnings unless debugging, since the book service already
logs every create, update and delete.

Handlers added here carry a fixed name, so calling ``setup_logging``
again (one call per ``create_app``) replaces nothing and adds nothing.
"""

import logging
from pathlib import Path
from typing import Optional

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

CONSOLE_HANDLER_NAME = "book_inventory.console"
FILE_HANDLER_NAME = "book_inventory.file"

PACKAGE_LOGGER = "book_inventory_api"
ACCESS_LOGGER = "uvicorn.access"


def _has_handler(logger: logging.Logger, name: str) -> bool:
    return any(handler.get_name() == name for handler in logger.handlers)


def _named_handler(handler: logging.Handler, name: str) -> logging.Handler:
    handler.set_name(name)
    handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT))
    return handler


def setup_logging(level: str = "INFO", logfile: Optional[str] = None, debug: bool = False) -> None:
    """Configure logging for the service.

    Parameters
    ----------
    level : str
        Level name for the root and ``book_inventory_api`` loggers.  Case
        insensitive; unknown names fall back to ``INFO``.
    logfile : Optional[str]
        Path of a file to also write log records to.
    debug : bool
        Keep uvicorn's access log at ``level`` instead of ``WARNING``.
    """
    numeric_level = getattr(logging, level.upper(), logging.INFO)
    root = logging.getLogger()
    root.setLevel(numeric_level)
    logging.getLogger(PACKAGE_LOGGER).setLevel(numeric_level)
    logging.getLogger(ACCESS_LOGGER).setLevel(numeric_level if debug else max(numeric_level, logging.WARNING))

    if not _has_handler(root, CONSOLE_HANDLER_NAME):
        root.addHandler(_named_handler(logging.StreamHandler(), CONSOLE_HANDLER_NAME))

    if logfile and not _has_handler(root, FILE_HANDLER_NAME):
        log_path = Path(logfile).resolve()
        root.addHandler(_named_handler(logging.FileHandler(log_path, encoding="utf-8"), FILE_HANDLER_NAME))
