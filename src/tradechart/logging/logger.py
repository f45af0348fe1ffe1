"""Logging setup shared by the CLI and the web server."""

from __future__ import annotations

import logging

LOGGER_NAME = "tradechart"
LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Chatty while downloading prices or parsing uploads.
LIBRARY_LOGGERS = ("yfinance", "peewee", "urllib3", "multipart")


def _build_handlers(log_file: str | None) -> list[logging.Handler]:
    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=LOG_DATE_FORMAT)
    handlers: list[logging.Handler] = [logging.StreamHandler()]
    if log_file:
        handlers.append(logging.FileHandler(log_file, encoding="utf-8"))
    for handler in handlers:
        handler.setFormatter(formatter)
    return handlers


def setup_logger(log_level: str = "INFO", log_file: str | None = None) -> logging.Logger:
    """Configure the ``tradechart`` logger tree and quiet third-party loggers.

    Modules log through ``tradechart.<area>`` children, which inherit the level
    and handlers set here. Handlers are attached once; later calls only adjust
    levels. Library loggers stay at WARNING unless DEBUG is requested.
    """
    level = logging.getLevelName(log_level.upper())
    if not isinstance(level, int):
        level = logging.INFO

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)
    logger.propagate = False
    if not logger.handlers:
        for handler in _build_handlers(log_file):
            logger.addHandler(handler)

    library_level = logging.DEBUG if level <= logging.DEBUG else logging.WARNING
    for name in LIBRARY_LOGGERS:
        logging.getLogger(name).setLevel(library_level)
    return logger
