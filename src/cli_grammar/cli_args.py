"""Command line argument parsing for the command console."""

from __future__ import annotations

import argparse
from logging import getLevelName
from typing import Optional

from .custom_types import MatchPolicy
from .program_constants import DEFAULT_LOG_FILE, DEFAULT_LOG_LEVEL, PROGRAM_CONSTANTS


def parse_args(args: Optional[list[str]] = None) -> argparse.Namespace:
    """Parse command line arguments for the console.

    Args:
        args: List of arguments to parse. If None, uses sys.argv.

    Returns:
        Parsed arguments namespace
    """
    parser = argparse.ArgumentParser(
        prog=PROGRAM_CONSTANTS.NAME,
        description="An interactive, Cisco-like command console",
        epilog="Environment variables: None.",
    )

    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        default=getLevelName(DEFAULT_LOG_LEVEL),
        help=f"Set the logging level (default: {getLevelName(DEFAULT_LOG_LEVEL)})",
    )

    parser.add_argument(
        "--log-file",
        type=str,
        default=str(DEFAULT_LOG_FILE),
        help=f"Path to log file (default: {DEFAULT_LOG_FILE})",
    )

    parser.add_argument(
        "--no-console-log",
        action="store_true",
        help="Disable console logging (only log to file)",
    )

    parser.add_argument(
        "--ignore-case",
        action="store_true",
        help="Match command and parameter names regardless of case",
    )

    parser.add_argument(
        "--abbreviations",
        action="store_true",
        help='Accept unique prefixes of names, e.g. "sho ver" for "show version"',
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {PROGRAM_CONSTANTS.VERSION}",
    )

    return parser.parse_args(args)


def policy_from_args(args: argparse.Namespace) -> MatchPolicy:
    """Build the token matching policy selected on the command line."""
    return MatchPolicy(
        case_sensitive=not args.ignore_case,
        abbreviations=args.abbreviations,
    )


def setup_logging_from_args(args: argparse.Namespace) -> None:
    """Set up logging based on parsed command line arguments."""
    from .program_logging import setup_logging

    setup_logging(
        level=args.log_level,
        log_file=args.log_file,
        console_output=not args.no_console_log,
    )
