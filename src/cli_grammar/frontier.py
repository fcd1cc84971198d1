"""Parse state for a single input line.

A `ParseFrontier` starts at the root of a frozen grammar. The input loop
calls `advance` for every completed word, `complete` for the word under the
cursor, and `accept` once the line is finished. The frontier never touches
the grammar; everything it learns about the line is kept on the frontier,
so one grammar can serve any number of sessions at once.
"""

from __future__ import annotations

from typing import Any, Dict, FrozenSet, List, Optional, Set

from .custom_types import Accepted, Advanced, Completion, MatchPolicy
from .help_format import parameter_symbol
from .nodes import (
    CommandNode,
    FlagParameterNode,
    Node,
    ParameterNameNode,
    ParameterNode,
    RepeatableNode,
    SimpleParameterNode,
    WrapperNode,
)
from .program_exceptions import (
    AmbiguousMatchError,
    FrontierClosedError,
    IncompleteCommandError,
    MissingRequiredParameterError,
    MissingValueError,
    NoMatchError,
)
from .program_logging import get_logger

logger = get_logger("frontier")


class ParseFrontier:
    """Tracks where one line of input has got to in the grammar."""

    def __init__(self, root: Node, policy: Optional[MatchPolicy] = None) -> None:
        self.root = root
        self.policy = policy if policy is not None else MatchPolicy()
        self.current: Node = root
        self.command: Optional[Node] = None
        """The command that will be accepted: the last command matched, or
        the wrapper if the line started with one."""

        self.wrapped = False
        self.path: List[Node] = []
        self.values: Dict[str, Any] = {}
        self._context: Optional[Node] = None  # command whose parameters are in play
        self._visited: Set[int] = set()
        self._satisfied: Set[int] = set()
        self._closed = False

    @property
    def visited(self) -> FrozenSet[int]:
        """Ids of the non-repeatable nodes matched in the current command."""
        return frozenset(self._visited)

    @property
    def satisfied(self) -> FrozenSet[int]:
        """Ids of the current command's declared parameters matched so far."""
        return frozenset(self._satisfied)

    @property
    def closed(self) -> bool:
        return self._closed

    def candidates(self) -> List[Node]:
        """Successors of the current node that may still be matched."""
        return [
            node
            for node in self.current.successors
            if not node.exhausted(self._visited) and self._in_position(node)
        ]

    def advance(self, token: str) -> Advanced:
        """Consume one complete token.

        Raises `NoMatchError` if nothing reachable matches and
        `AmbiguousMatchError` if the best matches share a priority. The
        frontier is left unchanged when either is raised.
        """
        self._check_open()
        candidates = self.candidates()
        matched = [node for node in candidates if node.matches(token, self.policy)]
        if token and self.policy.abbreviations and not any(
            node.matches_by_name for node in matched
        ):
            matched.extend(
                node
                for node in candidates
                if node.matches_by_name and node.completes(token, self.policy)
            )

        if not matched:
            logger.debug(f"No match for '{token}' after '{self.current.name}'")
            raise NoMatchError(token)

        top = max(node.priority for node in matched)
        winners = [node for node in matched if node.priority == top]
        if len(winners) > 1:
            names = sorted(node.help_symbol for node in winners)
            logger.debug(f"'{token}' is ambiguous between {names}")
            raise AmbiguousMatchError(token, names)

        winner = winners[0]
        self._take(winner, token)
        logger.debug(f"Matched '{token}' to {type(winner).__name__} '{winner.name}'")
        return Advanced(winner, token)

    def complete(self, partial: str = "") -> List[Completion]:
        """List the visible continuations starting with `partial`.

        Sorted by descending priority, then by name. An empty list means
        nothing can follow; it is not an error.
        """
        self._check_open()
        seen = set()
        found = []
        for node in self.candidates():
            if node.hidden or node.node_id in seen:
                continue
            if node.completes(partial, self.policy):
                seen.add(node.node_id)
                found.append(node)
        found.sort(key=lambda node: (-node.priority, node.name))
        return [
            Completion(
                node.help_symbol,
                node.help_text,
                node.name if node.matches_by_name else None,
            )
            for node in found
        ]

    def accept(self) -> Accepted:
        """Finish the line.

        Returns the command to dispatch together with the values bound along
        the way. The handler is not called here. After a successful accept
        the frontier is closed.
        """
        self._check_open()
        if self.command is None:
            raise IncompleteCommandError()
        if isinstance(self.current, ParameterNameNode):
            raise MissingValueError(self.current.help_symbol)

        missing = [
            parameter_symbol(parameter)
            for parameter in self.command.parameters
            if parameter.required and parameter.node_id not in self._satisfied
        ]
        if missing:
            raise MissingRequiredParameterError(missing)

        self._closed = True
        logger.debug(f"Accepted '{self.command.name}' with {self.values}")
        return Accepted(
            command=self.command,
            handler=self.command.handler,
            values=dict(self.values),
            path=tuple(self.path),
        )

    def _take(self, winner: Node, token: str) -> None:
        if isinstance(winner, ParameterNode):
            value = winner.value_for(token)

        self.current = winner
        self.path.append(winner)

        if isinstance(winner, (CommandNode, WrapperNode)):
            if not self.wrapped:
                self.command = winner
            self.wrapped = self.wrapped or isinstance(winner, WrapperNode)
            self._context = winner
            self._visited.clear()
            self._satisfied.clear()

        if isinstance(winner, RepeatableNode) and not winner.repeatable:
            self._visited.add(winner.node_id)

        if isinstance(winner, ParameterNode):
            if self._context is not None and winner in self._context.parameters:
                self._satisfied.add(winner.node_id)
            self._bind(winner, value)

    def _bind(self, parameter: ParameterNode, value: Any) -> None:
        if parameter.repeatable and not isinstance(parameter, FlagParameterNode):
            self.values.setdefault(parameter.name, []).append(value)
        else:
            self.values[parameter.name] = value

    def _in_position(self, node: Node) -> bool:
        """Positional parameters are only matched in declaration order."""
        if not isinstance(node, SimpleParameterNode) or self._context is None:
            return True
        for declared in self._context.parameters:
            if declared is node:
                return True
            if (
                isinstance(declared, SimpleParameterNode)
                and declared.node_id not in self._satisfied
            ):
                return False
        return True

    def _check_open(self) -> None:
        if self._closed:
            raise FrontierClosedError("this line has already been accepted")
