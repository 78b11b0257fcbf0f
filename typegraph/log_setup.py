"""Logging setup for the command line interface."""

import logging
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

PACKAGE_LOGGER = "typegraph"


def setup_logging(verbose: bool = False, console: Optional[Console] = None) -> None:
    """Send typegraph log records to stderr through Rich.

    Args:
        verbose: Log everything down to DEBUG instead of INFO.
        console: Console to log to (default: a new stderr console).
    """
    level = logging.DEBUG if verbose else logging.INFO

    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(level)

    # Avoid duplicate records when called more than once
    for handler in logger.handlers[:]:
        if isinstance(handler, RichHandler):
            logger.removeHandler(handler)

    handler = RichHandler(
        console=console or Console(stderr=True),
        level=level,
        show_time=False,
        show_path=verbose,
        markup=False,
        rich_tracebacks=True,
    )
    handler.setFormatter(logging.Formatter("%(message)s"))
    logger.addHandler(handler)
