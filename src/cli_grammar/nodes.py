"""Grammar nodes.

The grammar of a shell is a tree of nodes: a `RootNode` whose successors
are the top-level commands, `CommandNode`s whose successors are their
sub-commands and parameters, and parameter nodes whose successors are the
parameters that may follow them. A `WrapperNode` borrows the successors of
another node, so one command (typically "help") can match and complete over
a whole grammar without copying it.

Nodes are built once, frozen, and then shared read-only between sessions.
Two nodes are equal only if they are the same node: each one gets a
`node_id` from a process-wide counter when it is created.
"""

from __future__ import annotations

import itertools
from dataclasses import dataclass, field
from typing import (
    TYPE_CHECKING,
    AbstractSet,
    Any,
    Callable,
    Iterator,
    List,
    Optional,
    Tuple,
)

from .program_exceptions import DuplicateNodeError, GrammarError, GrammarFrozenError

if TYPE_CHECKING:
    from .custom_types import MatchPolicy

PRIORITY_MINIMUM = -10000
"""Nodes at this priority never win a tie."""

PRIORITY_PARAMETER = -10
"""The default priority of a parameter."""

PRIORITY_DEFAULT = 0
"""The default priority of commands and everything else."""

ROOT_NAME = "__root__"

_node_ids = itertools.count(1)


def _non_empty(token: str) -> bool:
    return token != ""


@dataclass(eq=False)
class Node:
    """A node in the tree of commands and their parameters."""

    name: str
    priority: int = PRIORITY_DEFAULT
    hidden: bool = False
    """Hidden nodes can still be matched but are never offered as completions."""

    help: Optional[str] = None
    node_id: int = field(init=False, default_factory=lambda: next(_node_ids))
    _successors: List[Node] = field(init=False, default_factory=list, repr=False)
    _frozen: bool = field(init=False, default=False, repr=False)

    matches_by_name = True
    """False for nodes that match a value rather than their own name."""

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Node):
            return NotImplemented
        return self.node_id == other.node_id

    def __hash__(self) -> int:
        return hash(self.node_id)

    @property
    def successors(self) -> Tuple[Node, ...]:
        """Nodes that may follow this one."""
        return tuple(self._successors)

    @property
    def help_symbol(self) -> str:
        """The text identifying this node in help and completions."""
        return self.name

    @property
    def help_text(self) -> Optional[str]:
        return self.help

    @property
    def frozen(self) -> bool:
        return self._frozen

    def freeze(self) -> None:
        self._frozen = True

    def check_mutable(self) -> None:
        if self._frozen:
            raise GrammarFrozenError(f'node "{self.name}" is frozen')

    def add_successor(self, node: Node) -> None:
        """Append `node` to the successors of this node.

        Siblings with the same name and priority would always tie when
        matching, so they are refused here. Names are compared casefolded,
        so the grammar stays unambiguous under every `MatchPolicy`.
        """
        self.check_mutable()
        for existing in self._successors:
            if existing is node:
                return
            if (
                existing.name.casefold() == node.name.casefold()
                and existing.priority == node.priority
            ):
                raise DuplicateNodeError(self.name, node.name, node.priority)
        self._successors.append(node)

    def matches(self, token: str, policy: MatchPolicy) -> bool:
        return policy.equals(self.name, token)

    def completes(self, partial: str, policy: MatchPolicy) -> bool:
        return policy.startswith(self.name, partial)

    def exhausted(self, visited: AbstractSet[int]) -> bool:
        """Whether this node can no longer be matched on the current line."""
        return False


@dataclass(eq=False)
class RootNode(Node):
    """The root of a command tree. Its successors are the top-level commands."""

    name: str = ROOT_NAME


@dataclass(eq=False)
class CommandNode(Node):
    """A command, optionally with a handler and declared parameters.

    `parameters` lists the parameter nodes that bind values for this
    command, in declaration order. It is used when checking required
    parameters and when rendering usage.
    """

    handler: Optional[Callable[..., Any]] = None
    parameters: List[ParameterNode] = field(default_factory=list)

    def add_parameter(self, parameter: ParameterNode) -> None:
        self.check_mutable()
        self.parameters.append(parameter)


@dataclass(eq=False)
class WrapperNode(Node):
    """A command whose successors are those of another node.

    The successors are looked up on every access, so a wrapper never holds
    a stale view of its delegate.
    """

    delegate: Optional[Node] = None
    handler: Optional[Callable[..., Any]] = None

    def __post_init__(self) -> None:
        if self.delegate is None:
            raise GrammarError(f'wrapper "{self.name}" needs a delegate node')

    @property
    def successors(self) -> Tuple[Node, ...]:
        return self.delegate.successors

    @property
    def parameters(self) -> List[ParameterNode]:
        return []

    def add_successor(self, node: Node) -> None:
        raise GrammarError(
            f'wrapper "{self.name}" takes its successors from "{self.delegate.name}"'
        )


@dataclass(eq=False)
class RepeatableNode(Node):
    """A node that may or may not be matched more than once on a line."""

    repeatable: bool = False
    repeat_marker: Optional[Node] = None
    """If set, this node is exhausted once the marker has been matched,
    rather than once this node itself has been matched."""

    def exhausted(self, visited: AbstractSet[int]) -> bool:
        if self.repeatable:
            return False
        marker = self if self.repeat_marker is None else self.repeat_marker
        return marker.node_id in visited


@dataclass(eq=False)
class ParameterNode(RepeatableNode):
    """Base for the three kinds of parameter.

    `accepts` decides whether a token is a valid value and `convert` turns
    it into the value that gets bound. A token that `convert` rejects with
    `ValueError` or `TypeError` does not match. Flags ignore both.
    """

    priority: int = PRIORITY_PARAMETER
    required: bool = False
    accepts: Callable[[str], bool] = _non_empty
    convert: Callable[[str], Any] = str

    @property
    def help_symbol(self) -> str:
        return f"<{self.name}>" + ("..." if self.repeatable else "")

    def value_for(self, token: str) -> Any:
        return self.convert(token)

    def accepts_value(self, token: str) -> bool:
        """Whether `token` passes `accepts` and can be converted."""
        if not self.accepts(token):
            return False
        try:
            self.convert(token)
        except (ValueError, TypeError):
            return False
        return True


@dataclass(eq=False)
class FlagParameterNode(ParameterNode):
    """A parameter matched by its name. Its presence alone is its value."""

    def value_for(self, token: str) -> Any:
        return True


@dataclass(eq=False)
class NamedParameterNode(ParameterNode):
    """The value half of a "name value" parameter.

    The name half is a `ParameterNameNode` whose only successor is this node.
    """

    matches_by_name = False

    def matches(self, token: str, policy: MatchPolicy) -> bool:
        return self.accepts_value(token)

    def completes(self, partial: str, policy: MatchPolicy) -> bool:
        return policy.startswith(self.help_symbol, partial)


@dataclass(eq=False)
class SimpleParameterNode(ParameterNode):
    """A positional parameter, present on a command line only as a value."""

    matches_by_name = False

    def matches(self, token: str, policy: MatchPolicy) -> bool:
        return self.accepts_value(token)

    def completes(self, partial: str, policy: MatchPolicy) -> bool:
        return policy.startswith(self.help_symbol, partial)


@dataclass(eq=False)
class ParameterNameNode(RepeatableNode):
    """The name half of a named parameter."""

    parameter: Optional[NamedParameterNode] = None

    def __post_init__(self) -> None:
        if self.parameter is None:
            raise GrammarError(f'parameter name "{self.name}" needs a parameter')
        self._successors.append(self.parameter)

    @classmethod
    def for_parameter(cls, parameter: NamedParameterNode) -> ParameterNameNode:
        """Build the name half of `parameter`, sharing its attributes."""
        return cls(
            name=parameter.name,
            priority=parameter.priority,
            hidden=parameter.hidden,
            help=parameter.help,
            repeatable=parameter.repeatable,
            repeat_marker=parameter,
            parameter=parameter,
        )

    @property
    def help_symbol(self) -> str:
        return f"{self.name} {self.parameter.help_symbol}"


def walk_commands(
    node: Node, include_hidden: bool = False, _words: Tuple[str, ...] = ()
) -> Iterator[Tuple[Tuple[str, ...], Node]]:
    """Yield `(words, node)` for every runnable command below `node`.

    Commands without a handler are walked through but not yielded. Wrappers
    are yielded but not walked into, since their successors belong to
    another node.
    """
    for successor in node.successors:
        if not isinstance(successor, (CommandNode, WrapperNode)):
            continue
        if successor.hidden and not include_hidden:
            continue
        words = _words + (successor.name,)
        if successor.handler is not None:
            yield words, successor
        if isinstance(successor, CommandNode):
            yield from walk_commands(successor, include_hidden, words)
