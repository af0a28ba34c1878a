"""Logging setup for the command-line front end."""
import logging
import sys
from typing import Optional

LOGGER_NAME = "reassembly_shapes"


def setup_logging(verbose: bool = False, log_file: Optional[str] = None) -> logging.Logger:
    """
    Route the package's log records to stderr and, optionally, a file.

    The console only shows errors unless ``verbose`` is set, since the CLI
    already prints builder warnings itself. A log file always receives the
    full debug trace.

    Args:
        verbose: Show debug records on the console
        log_file: Optional path of a log file (overwritten)

    Returns:
        The configured package logger
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(logging.DEBUG)

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(logging.DEBUG if verbose else logging.ERROR)
    console.setFormatter(logging.Formatter("%(levelname)s: %(message)s"))
    logger.addHandler(console)

    if log_file:
        file_handler = logging.FileHandler(log_file, mode="w", encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            datefmt="%H:%M:%S",
        ))
        logger.addHandler(file_handler)

    return logger
