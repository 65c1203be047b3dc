"""Logging setup shared by the library and the CLI.

Library modules only call ``get_logger(__name__)``; handlers are installed
once by ``configure_logging`` from the command line entry point.
"""

import logging

from rich.logging import RichHandler

LOGGER_NAME = "typebridge"

_configured = False


def get_logger(name: str) -> logging.Logger:
    """Return a logger namespaced under the package logger."""
    if name == LOGGER_NAME or name.startswith(f"{LOGGER_NAME}."):
        return logging.getLogger(name)
    return logging.getLogger(f"{LOGGER_NAME}.{name}")


def configure_logging(level: str | int = "WARNING") -> logging.Logger:
    """Attach a rich handler to the package logger.

    Args:
        level: Level name or number for the package logger.

    Returns:
        The configured package logger.
    """
    global _configured

    logger = logging.getLogger(LOGGER_NAME)
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.WARNING
    logger.setLevel(level)

    if not _configured:
        handler = RichHandler(show_path=False, markup=False, rich_tracebacks=True)
        handler.setFormatter(logging.Formatter("%(message)s", datefmt="[%X]"))
        logger.addHandler(handler)
        _configured = True

    return logger
