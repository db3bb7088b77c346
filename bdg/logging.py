"""Logging setup shared by the bdg CLI and service."""

from __future__ import annotations

import logging
from pathlib import Path

_LOGGER_NAME = "bdg"
_CONSOLE_FORMAT = "[bdg] %(levelname)s %(message)s"
_FILE_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def get_logger(name: str | None = None) -> logging.Logger:
    """Return ``bdg`` or ``bdg.<name>``."""
    return logging.getLogger(f"{_LOGGER_NAME}.{name}" if name else _LOGGER_NAME)


def _console_level(verbose: bool, quiet: bool) -> int:
    if verbose:
        return logging.DEBUG
    if quiet:
        return logging.WARNING
    return logging.INFO


def configure_logging(
    *, verbose: bool = False, quiet: bool = False, log_file: Path | None = None
) -> logging.Logger:
    """Route bdg records to stderr and, when ``log_file`` is given, to a debug log.

    ``quiet`` keeps stderr to warnings and errors so JSON or ``-q`` output stays
    clean; ``verbose`` wins when both are set. The file sink always records at
    DEBUG regardless of the console level.
    """
    console_level = _console_level(verbose, quiet)
    logger = logging.getLogger(_LOGGER_NAME)
    logger.propagate = False

    # Each CLI invocation starts from a clean handler list.
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    console = logging.StreamHandler()
    console.setLevel(console_level)
    console.setFormatter(logging.Formatter(_CONSOLE_FORMAT))
    logger.addHandler(console)

    if log_file is None:
        logger.setLevel(console_level)
        return logger

    log_file.parent.mkdir(parents=True, exist_ok=True)
    sink = logging.FileHandler(log_file, encoding="utf-8")
    sink.setLevel(logging.DEBUG)
    sink.setFormatter(logging.Formatter(_FILE_FORMAT))
    logger.addHandler(sink)
    logger.setLevel(logging.DEBUG)
    return logger


__all__ = ["configure_logging", "get_logger"]
