"""
Logging configuration for CNA Quality.

Provides structured logging with rich formatting for terminal output. The
level follows the ``verbosity`` setting of ``EvaluationConfig``, so a
config file or CNA_QUALITY_VERBOSITY controls logging as well as the
command line flags.
"""

import logging
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

ROOT_LOGGER_NAME = "cna_quality"

LEVELS_BY_VERBOSITY: dict[str, int] = {
    "quiet": logging.ERROR,
    "normal": logging.WARNING,
    "verbose": logging.DEBUG,
}


def setup_logging(verbosity: str = "normal", log_file: Optional[str] = None) -> logging.Logger:
    """
    Configure logging with rich handler for colored output.

    Args:
        verbosity: quiet (ERROR), normal (WARNING) or verbose (DEBUG, with
            source paths and locals in tracebacks)
        log_file: Optional file path to write logs to

    Returns:
        Configured logger instance for cna_quality

    Raises:
        ValueError: If verbosity is not one of the known levels
    """
    try:
        level = LEVELS_BY_VERBOSITY[verbosity]
    except KeyError:
        raise ValueError(f"Unknown verbosity {verbosity!r}") from None
    verbose = verbosity == "verbose"

    console = Console(stderr=True)

    handlers: list[logging.Handler] = [
        RichHandler(
            console=console,
            rich_tracebacks=True,
            tracebacks_show_locals=verbose,
            markup=True,
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

    logging.basicConfig(level=level, format="%(message)s", datefmt="[%X]", handlers=handlers)

    logger = logging.getLogger(ROOT_LOGGER_NAME)
    logger.setLevel(level)

    return logger


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Logger under the cna_quality namespace; module names are prefixed if needed."""
    if name is None:
        return logging.getLogger(ROOT_LOGGER_NAME)

    if not name.startswith(ROOT_LOGGER_NAME):
        name = f"{ROOT_LOGGER_NAME}.{name}"

    return logging.getLogger(name)
