"""Logging configuration for the Birkin price index.

Library modules log through ``logging.getLogger(__name__)`` (or a named
logger from ``setup_logging``); only the CLI entry points configure the
root logger. All output goes to stderr: stdout carries CLI JSON.
"""

from __future__ import annotations

import logging
import os
import sys

CLI_FORMAT = "%(asctime)s [%(name)s] %(levelname)s: %(message)s"
LIBRARY_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def _resolve_level(level: int | str | None) -> int:
    """Level from the argument, else LOG_LEVEL from the environment, else INFO."""
    if level is None:
        level = os.getenv("LOG_LEVEL", "INFO")
    if isinstance(level, str):
        resolved = logging.getLevelName(level.upper())
        if not isinstance(resolved, int):
            raise ValueError(f"Unknown log level {level!r}")
        return resolved
    return level


def setup_logging(
    level: int | str | None = None,
    module_name: str = "birkin_index",
) -> logging.Logger:
    """Configure and return a named logger with its own stderr handler.

    Idempotent: a logger that already has handlers is returned unchanged.

    Args:
        level: Logging level or level name; defaults to LOG_LEVEL / INFO.
        module_name: Name for the logger instance.

    Returns:
        Configured logger.
    """
    logger = logging.getLogger(module_name)

    if logger.handlers:
        return logger

    resolved = _resolve_level(level)
    logger.setLevel(resolved)

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(resolved)
    handler.setFormatter(logging.Formatter(fmt=LIBRARY_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
    logger.addHandler(handler)
    # Own handler; don't repeat every record through the root logger
    logger.propagate = False

    return logger


def configure_cli_logging(verbose: bool = False) -> None:
    """Root logging for CLI entry points: INFO, or DEBUG with ``--verbose``."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else _resolve_level(None),
        format=CLI_FORMAT,
        stream=sys.stderr,
    )
