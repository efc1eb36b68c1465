"""
Logging configuration for CXX Insight.

Log records go through a rich handler on stderr so they never mix with
JSON written to stdout. Markup is off: messages quote C++ names such as
``operator[]`` verbatim.
"""

import logging
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

ROOT_LOGGER = "cxx_insight"

_LEVELS = {
    "quiet": logging.ERROR,
    "normal": logging.WARNING,
    "verbose": logging.DEBUG,
}


def setup_logging(
    verbose: bool = False, quiet: bool = False, log_file: Optional[str] = None
) -> logging.Logger:
    """
    Configure the cxx_insight logger hierarchy.

    Args:
        verbose: Enable DEBUG level logging (per-function scores, file
            enter/finish)
        quiet: Suppress all but ERROR level logging
        log_file: Optional file path to append plain-text logs to

    Returns:
        The root cxx_insight logger
    """
    level = level_for("quiet" if quiet else "verbose" if verbose else "normal")

    handlers: list[logging.Handler] = [
        RichHandler(
            console=Console(stderr=True),
            rich_tracebacks=True,
            tracebacks_show_locals=verbose,
            markup=False,
            show_time=verbose,
            show_path=verbose,
        )
    ]

    if log_file:
        file_handler = logging.FileHandler(log_file, mode="a")
        file_handler.setFormatter(
            logging.Formatter(
                "%(asctime)s - %(name)s - %(levelname)s - %(message)s", datefmt="%Y-%m-%d %H:%M:%S"
            )
        )
        handlers.append(file_handler)

    logger = logging.getLogger(ROOT_LOGGER)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    for handler in handlers:
        handler.setFormatter(handler.formatter or logging.Formatter("%(message)s"))
        logger.addHandler(handler)
    logger.setLevel(level)

    return logger


def level_for(verbosity: str) -> int:
    """Logging level of a configured verbosity (quiet/normal/verbose)."""
    return _LEVELS.get(verbosity, logging.WARNING)


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """
    Get a logger under the cxx_insight namespace.

    Args:
        name: Module name (e.g., 'cxx_insight.engine')
              If None, returns the root cxx_insight logger
    """
    if name is None:
        return logging.getLogger(ROOT_LOGGER)

    if not name.startswith(ROOT_LOGGER):
        name = f"{ROOT_LOGGER}.{name}"

    return logging.getLogger(name)
