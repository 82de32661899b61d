"""Verbose logging configuration for debug output."""

from __future__ import annotations

import logging
import sys
from pathlib import Path


def setup_logger(
    debug_file: Path, verbose: bool = False, logger_name: str = "budgetcheck"
) -> logging.Logger:
    """
    Configure and return a logger for debug output.

    Always writes to debug_file. Optionally also writes to stderr if verbose=True.

    Args:
        debug_file: Path to debug log file (always created)
        verbose: If True, also log to stderr. If False, only log to file.
        logger_name: Name of the logger instance. Must not already be configured.

    Returns:
        Configured logger instance.

    Raises:
        RuntimeError: if a logger with this name already has handlers.
    """
    logger = logging.getLogger(logger_name)
    if logger.handlers:
        raise RuntimeError(
            f"Logger '{logger_name}' already exists with handlers; use a unique name per run"
        )

    logger.disabled = False
    logger.propagate = False
    logger.setLevel(logging.DEBUG)

    formatter = logging.Formatter(
        fmt="[%(asctime)s] %(levelname)s %(message)s", datefmt="%Y-%m-%dT%H:%M:%S"
    )

    # Always add file handler
    debug_file.parent.mkdir(parents=True, exist_ok=True)
    file_handler = logging.FileHandler(debug_file, mode="a", encoding="utf-8")
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(formatter)
    logger.addHandler(file_handler)

    if verbose:
        stderr_handler = logging.StreamHandler(sys.stderr)
        stderr_handler.setLevel(logging.DEBUG)
        stderr_handler.setFormatter(formatter)
        logger.addHandler(stderr_handler)

    return logger


def close_logger(logger: logging.Logger) -> None:
    """Flush and detach all handlers so the debug file is released."""
    for handler in list(logger.handlers):
        handler.close()
        logger.removeHandler(handler)
