"""Help text rendering for the command grammar."""

from __future__ import annotations

from typing import Iterable, List, Optional, Sequence, Tuple

from .custom_types import Completion
from .nodes import NamedParameterNode, Node, ParameterNode, walk_commands

NO_HELP = "(no help given)"
COLUMN_WIDTH = 30


def parameter_symbol(parameter: ParameterNode) -> str:
    """The symbol of a parameter as it is typed on a command line.

    A named parameter shows its name followed by its value, e.g. "mtu <mtu>".
    """
    if isinstance(parameter, NamedParameterNode):
        return f"{parameter.name} {parameter.help_symbol}"
    return parameter.help_symbol


def usage(command: Node, words: Sequence[str] = ()) -> str:
    """A one-line usage string for `command`.

    Required parameters are shown bare and optional ones in brackets:

        interface <name> [mtu <mtu>] [shutdown]
    """
    parts: List[str] = list(words) if words else [command.name]
    for parameter in getattr(command, "parameters", ()):
        symbol = parameter_symbol(parameter)
        parts.append(symbol if parameter.required else f"[{symbol}]")
    return " ".join(parts)


def command_path(root: Node, command: Node) -> Optional[Tuple[str, ...]]:
    """The words leading from `root` to `command`, or None if unreachable."""
    for words, node in walk_commands(root, include_hidden=True):
        if node is command:
            return words
    return None


def _two_columns(rows: Iterable[Tuple[str, Optional[str]]]) -> str:
    lines = []
    for first, second in rows:
        first_column = f"  {first}"
        lines.append(f"{first_column:<{COLUMN_WIDTH}} {second or NO_HELP}")
    return "\n".join(lines)


def format_completions(completions: Iterable[Completion]) -> str:
    """Render completions as an aligned symbol/help listing."""
    return _two_columns((c.symbol, c.help) for c in completions)


def format_commands(root: Node) -> str:
    """Render the visible runnable commands below `root`, sorted by path."""
    rows = sorted(walk_commands(root), key=lambda item: item[0])
    return _two_columns((" ".join(words), node.help_text) for words, node in rows)
