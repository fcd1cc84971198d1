"""cli-grammar - the command grammar behind an interactive network console.

Build a `Grammar` of commands and parameters, then parse each input line
with a fresh `ParseFrontier`: `advance` per word, `complete` for the word
under the cursor and `accept` at the end of the line.
"""

from __future__ import annotations

from . import handlers  # noqa: F401
from .cli_args import parse_args, policy_from_args, setup_logging_from_args
from .custom_types import Accepted, Advanced, Completion, MatchPolicy, Mode
from .frontier import ParseFrontier
from .grammar import CommandRegistry, Grammar, _registry, command, wrapper
from .handlers import (
    h_configure,
    h_exit,
    h_help,
    h_hostname,
    h_interface,
    h_ping,
    h_show_running_config,
    h_show_version,
)
from .help_format import format_commands, format_completions, parameter_symbol, usage
from .nodes import (
    PRIORITY_DEFAULT,
    PRIORITY_MINIMUM,
    PRIORITY_PARAMETER,
    CommandNode,
    FlagParameterNode,
    NamedParameterNode,
    Node,
    ParameterNameNode,
    ParameterNode,
    RootNode,
    SimpleParameterNode,
    WrapperNode,
)
from .program_constants import PROGRAM_CONSTANTS
from .program_exceptions import (
    AcceptError,
    AmbiguousMatchError,
    BaseCommandError,
    DuplicateNodeError,
    FrontierClosedError,
    GrammarError,
    GrammarFrozenError,
    IncompleteCommandError,
    MissingRequiredParameterError,
    MissingValueError,
    NoMatchError,
    ParseError,
)
from .program_logging import get_logger, log_shutdown, log_startup
from .shell import Shell

__version__ = PROGRAM_CONSTANTS.VERSION
__all__ = [
    "Accepted",
    "Advanced",
    "Completion",
    "MatchPolicy",
    "Mode",
    "ParseFrontier",
    "CommandRegistry",
    "Grammar",
    "_registry",
    "command",
    "wrapper",
    "format_commands",
    "format_completions",
    "parameter_symbol",
    "usage",
    "PRIORITY_DEFAULT",
    "PRIORITY_MINIMUM",
    "PRIORITY_PARAMETER",
    "CommandNode",
    "FlagParameterNode",
    "NamedParameterNode",
    "Node",
    "ParameterNameNode",
    "ParameterNode",
    "RootNode",
    "SimpleParameterNode",
    "WrapperNode",
    "AcceptError",
    "AmbiguousMatchError",
    "BaseCommandError",
    "DuplicateNodeError",
    "FrontierClosedError",
    "GrammarError",
    "GrammarFrozenError",
    "IncompleteCommandError",
    "MissingRequiredParameterError",
    "MissingValueError",
    "NoMatchError",
    "ParseError",
    "Shell",
    "h_configure",
    "h_exit",
    "h_help",
    "h_hostname",
    "h_interface",
    "h_ping",
    "h_show_running_config",
    "h_show_version",
    "main",
]


def main() -> None:
    """Main entry point for the console application."""
    args = parse_args()
    setup_logging_from_args(args)

    log_startup()
    try:
        Shell(policy=policy_from_args(args)).run()
    except Exception as e:
        logger = get_logger("main")
        logger.error(f"Unexpected error: {e}", exc_info=True)
        raise
    finally:
        log_shutdown()


if __name__ == "__main__":
    main()
