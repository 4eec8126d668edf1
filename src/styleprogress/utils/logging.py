"""Logging setup routed through rich."""

import logging

from rich.console import Console
from rich.logging import RichHandler


LOGGER_NAME = "styleprogress"


def setup_logging(level: int | str = logging.WARNING, console: Console | None = None) -> logging.Logger:
    """Attach a RichHandler to the package logger, replacing earlier handlers."""
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)
    logger.handlers.clear()

    handler = RichHandler(console=console, show_path=False, rich_tracebacks=True)
    handler.setFormatter(logging.Formatter("%(message)s", datefmt="[%X]"))
    logger.addHandler(handler)
    logger.propagate = False

    return logger
