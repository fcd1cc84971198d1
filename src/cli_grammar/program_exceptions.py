"""Core exceptions for the command grammar."""

from __future__ import annotations

from typing import Sequence


class BaseCommandError(Exception):
    """Base class for errors encountered by the command-line interface.

    Some examples of these errors are:
    - `NoMatchError`
    - `AmbiguousMatchError`
    - `MissingRequiredParameterError`
    """


class GrammarError(BaseCommandError, ValueError):
    """Raised while building a grammar that could never parse correctly."""


class DuplicateNodeError(GrammarError):
    """Raised when two siblings share a name and a priority.

    Such siblings would always tie when matching, so the grammar is
    rejected before any line is parsed.
    """

    def __init__(self, parent: str, name: str, priority: int) -> None:
        self.parent = parent
        self.name = name
        self.priority = priority
        super().__init__(
            f'duplicate node "{name}" with priority {priority} under "{parent}"'
        )


class GrammarFrozenError(GrammarError):
    """Raised when a frozen grammar is modified."""


class ParseError(BaseCommandError):
    """Base class for errors raised while consuming tokens."""


class NoMatchError(ParseError):
    """Raised when a token matches nothing reachable."""

    def __init__(self, token: str) -> None:
        self.token = token
        super().__init__(f'unknown command or parameter: "{token}"')


class AmbiguousMatchError(ParseError):
    """Raised when a token matches several nodes of the same priority."""

    def __init__(self, token: str, candidates: Sequence[str]) -> None:
        self.token = token
        self.candidates = tuple(candidates)
        super().__init__(
            f'ambiguous command: "{token}" could be {", ".join(self.candidates)}'
        )


class AcceptError(BaseCommandError):
    """Base class for errors raised when a line is finished."""


class IncompleteCommandError(AcceptError):
    """Raised when a line ends before any command was matched."""

    def __init__(self, message: str = "incomplete command") -> None:
        super().__init__(message)


class MissingValueError(AcceptError):
    """Raised when a line ends after a parameter name but before its value."""

    def __init__(self, symbol: str) -> None:
        self.symbol = symbol
        super().__init__(f"missing value: {symbol}")


class MissingRequiredParameterError(AcceptError):
    """Raised when required parameters of the command were not given."""

    def __init__(self, symbols: Sequence[str]) -> None:
        self.symbols = tuple(symbols)
        super().__init__(f"missing required parameters: {' '.join(self.symbols)}")


class FrontierClosedError(BaseCommandError):
    """Raised when a frontier is used after its line was accepted."""
