"""
Logging configuration for design-diff.

Console logs go through rich on stderr so they never mix with a report
printed to stdout; an optional plain-text file handler is added for CI runs.
"""

import logging
from typing import List, Optional

from rich.console import Console
from rich.logging import RichHandler

ROOT_LOGGER = "design_diff"

FILE_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"


def _level(verbose: bool, quiet: bool) -> int:
    # quiet wins so CI jobs can silence a verbose config
    if quiet:
        return logging.ERROR
    return logging.DEBUG if verbose else logging.WARNING


def setup_logging(
    verbose: bool = False, quiet: bool = False, log_file: Optional[str] = None
) -> logging.Logger:
    """
    Route design-diff logs to a rich stderr handler.

    Args:
        verbose: Log per-entry decisions at DEBUG level
        quiet: Only log errors
        log_file: Also append plain-text records to this file

    Returns:
        The ``design_diff`` package logger
    """
    level = _level(verbose, quiet)

    # Entry names can contain brackets, so rich markup stays off
    handlers: List[logging.Handler] = [
        RichHandler(
            console=Console(stderr=True),
            markup=False,
            rich_tracebacks=True,
            show_time=verbose,
            show_path=verbose,
        )
    ]
    if log_file:
        to_file = logging.FileHandler(log_file, mode="a", encoding="utf-8")
        to_file.setFormatter(logging.Formatter(FILE_FORMAT))
        handlers.append(to_file)

    logging.basicConfig(level=level, format="%(message)s", handlers=handlers, force=True)

    logger = logging.getLogger(ROOT_LOGGER)
    logger.setLevel(level)
    return logger


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Logger for a design-diff module, namespaced under ``design_diff``."""
    if not name:
        return logging.getLogger(ROOT_LOGGER)
    if name != ROOT_LOGGER and not name.startswith(ROOT_LOGGER + "."):
        name = f"{ROOT_LOGGER}.{name}"
    return logging.getLogger(name)
