"""Logging configuration for the command grammar and its console."""

from __future__ import annotations

import logging
import logging.handlers
import sys
from pathlib import Path
from typing import Optional, Sequence

PACKAGE_LOGGER = "cli_grammar"

CONSOLE_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
FILE_FORMAT = (
    "%(asctime)s - %(name)s - %(levelname)s - %(funcName)s:%(lineno)d - %(message)s"
)


def setup_logging(
    level: str | int = "INFO",
    log_file: Optional[str | Path] = None,
    console_output: bool = True,
) -> logging.Logger:
    """Set up the `cli_grammar` logger.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Path to log file. If None, no file logging.
        console_output: Whether to log to stderr. The console only shows
            warnings and above unless the level is DEBUG.

    Returns:
        The package logger
    """
    logger = logging.getLogger(PACKAGE_LOGGER)

    # Calling this twice must not duplicate output
    for handler in logger.handlers[:]:
        logger.removeHandler(handler)
        handler.close()

    if isinstance(level, str):
        numeric_level = getattr(logging, level.upper(), logging.INFO)
    else:
        numeric_level = level
    logger.setLevel(numeric_level)

    if console_output:
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setFormatter(logging.Formatter(CONSOLE_FORMAT))
        if numeric_level <= logging.DEBUG:
            console_handler.setLevel(logging.DEBUG)
        else:
            console_handler.setLevel(logging.WARNING)
        logger.addHandler(console_handler)

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.handlers.RotatingFileHandler(
            log_path,
            maxBytes=10 * 1024 * 1024,  # 10 MB
            backupCount=5,
            encoding="utf-8",
        )
        file_handler.setFormatter(logging.Formatter(FILE_FORMAT))
        file_handler.setLevel(numeric_level)
        logger.addHandler(file_handler)

    return logger


def get_logger(name: str = "") -> logging.Logger:
    """Get a logger below the package logger, e.g. "cli_grammar.frontier"."""
    if name:
        return logging.getLogger(f"{PACKAGE_LOGGER}.{name}")
    return logging.getLogger(PACKAGE_LOGGER)


def log_command_execution(tokens: Sequence[str], mode: str, success: bool) -> None:
    """Log the outcome of dispatching an accepted line."""
    logger = get_logger("commands")
    line = " ".join(tokens)

    if success:
        logger.info(f"Command executed successfully: '{line}' in {mode} mode")
    else:
        logger.warning(f"Command failed: '{line}' in {mode} mode")


def log_rejected_line(tokens: Sequence[str], mode: str, error: Exception) -> None:
    """Log a line that could not be parsed or accepted."""
    logger = get_logger("commands")
    logger.info(f"Rejected '{' '.join(tokens)}' in {mode} mode: {error}")


def log_mode_change(old_mode: str, new_mode: str) -> None:
    logger = get_logger("shell")
    logger.info(f"Mode changed: {old_mode} -> {new_mode}")


def log_startup() -> None:
    get_logger("main").info("Command console starting up")


def log_shutdown() -> None:
    get_logger("main").info("Command console shutting down")
