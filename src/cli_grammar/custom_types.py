"""Core enums and types for the command grammar."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any, Callable, Dict, NamedTuple, Optional, Tuple

if TYPE_CHECKING:
    from .nodes import Node


class Mode(Enum):
    """The shell modes: user mode and admin (privileged) mode.

    Each mode has its own grammar, so the shell uses this to decide which
    commands can be matched and completed.
    """

    USER = "user"
    ADMIN = "admin"


@dataclass(frozen=True, slots=True)
class MatchPolicy:
    """How tokens are compared against node names."""

    case_sensitive: bool = True
    """Compare names exactly. When false, names and tokens are casefolded."""

    abbreviations: bool = False
    """Let a unique prefix stand for a full name ("sho ver" for
    "show version"). An exact match always beats a prefix match."""

    def normalize(self, text: str) -> str:
        return text if self.case_sensitive else text.casefold()

    def equals(self, name: str, token: str) -> bool:
        return self.normalize(name) == self.normalize(token)

    def startswith(self, name: str, prefix: str) -> bool:
        return self.normalize(name).startswith(self.normalize(prefix))


class Advanced(NamedTuple):
    """A token was consumed by `ParseFrontier.advance`."""

    node: Node
    token: str


class Completion(NamedTuple):
    """One candidate continuation offered by `ParseFrontier.complete`."""

    symbol: str  # what to display, e.g. "show" or "<value>"
    help: Optional[str]
    text: Optional[str] = None  # the word to insert; None for value positions


@dataclass(frozen=True)
class Accepted:
    """A finished line that may be dispatched.

    The handler is never called by the parser itself; that is the job of
    whoever drives the frontier (see `Shell.handle_line`).
    """

    command: Node
    handler: Optional[Callable[..., Any]]
    values: Dict[str, Any] = field(default_factory=dict)
    path: Tuple[Node, ...] = ()
    """Every node matched on the line, in input order."""
