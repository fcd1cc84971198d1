"""Grammar construction and registry for the command grammar."""

from __future__ import annotations

from typing import Callable, Dict, Iterable, List, Optional, Tuple

from .custom_types import MatchPolicy, Mode
from .frontier import ParseFrontier
from .nodes import (
    PRIORITY_DEFAULT,
    CommandNode,
    NamedParameterNode,
    Node,
    ParameterNameNode,
    ParameterNode,
    RootNode,
    SimpleParameterNode,
    WrapperNode,
    walk_commands,
)
from .program_exceptions import GrammarError
from .program_logging import get_logger

logger = get_logger("grammar")

Handler = Callable[..., object]


def split_tokens(tokens: Tuple[str, ...] | str) -> Tuple[str, ...]:
    """Make sure tokens is a non-empty tuple of strings."""
    match tokens:
        case () | "":
            raise GrammarError("a command must have at least one token")
        case str():
            return tuple(tokens.split())
        case _:
            return tuple(tokens)


class Grammar:
    """A tree of commands rooted at a `RootNode`.

    Build it with `add_command`, `add_wrapper` or the `command` decorator,
    then call `frontier()` once per input line. The first call to
    `frontier()` freezes the grammar.
    """

    def __init__(self, name: str = "", policy: Optional[MatchPolicy] = None) -> None:
        self.name = name
        self.policy = policy if policy is not None else MatchPolicy()
        self.root = RootNode()

    def __repr__(self) -> str:
        return f"Grammar({self.name!r}, frozen={self.frozen})"

    @property
    def frozen(self) -> bool:
        return self.root.frozen

    def add_command(
        self,
        tokens: Tuple[str, ...] | str,
        handler: Optional[Handler] = None,
        help: Optional[str] = None,
        priority: int = PRIORITY_DEFAULT,
        hidden: bool = False,
        parameters: Iterable[ParameterNode] = (),
    ) -> CommandNode:
        """Add a command, creating any missing leading words as commands.

        "show version" adds a "version" command below "show", and adds "show"
        itself (without a handler) if it does not exist yet. A leading word
        reuses the highest-priority command of that name. A command that
        was created that way can later be registered with a handler of its own.
        """
        self.root.check_mutable()
        words = split_tokens(tokens)

        parent: Node = self.root
        for word in words[:-1]:
            found = self._find_command(parent, word)
            if found is None:
                found = CommandNode(word)
                parent.add_successor(found)
            parent = found

        node = self._find_command(parent, words[-1], priority)
        if node is not None and node.handler is None and not node.parameters:
            node.handler = handler
            node.help = help
            node.hidden = hidden
        else:
            node = CommandNode(
                words[-1], priority=priority, hidden=hidden, help=help, handler=handler
            )
            parent.add_successor(node)

        for parameter in parameters:
            self.add_parameter(node, parameter)

        logger.debug(f"Added command '{' '.join(words)}' to grammar {self.name!r}")
        return node

    def add_parameter(self, command: CommandNode, parameter: ParameterNode) -> None:
        """Declare `parameter` on `command` and wire it into the tree.

        Every parameter of a command may follow the command itself and may
        follow every other parameter of that command, so each new parameter
        is linked from the command and from all the existing ones.
        """
        command.check_mutable()
        if parameter.successors or parameter in command.parameters:
            raise GrammarError(
                f'parameter "{parameter.name}" already belongs to a command'
            )
        if isinstance(parameter, SimpleParameterNode):
            for earlier in command.parameters:
                if isinstance(earlier, SimpleParameterNode) and earlier.repeatable:
                    raise GrammarError(
                        f'positional parameter "{parameter.name}" cannot follow '
                        f'repeatable "{earlier.name}"'
                    )

        if isinstance(parameter, NamedParameterNode):
            command.add_successor(ParameterNameNode.for_parameter(parameter))
        else:
            command.add_successor(parameter)
        command.add_parameter(parameter)
        entries = [_entry_of(command, declared) for declared in command.parameters]
        for declared in command.parameters:
            for follower in entries:
                declared.add_successor(follower)

    def add_wrapper(
        self,
        name: str,
        delegate: Optional[Node] = None,
        help: Optional[str] = None,
        handler: Optional[Handler] = None,
        priority: int = PRIORITY_DEFAULT,
        hidden: bool = False,
    ) -> WrapperNode:
        """Add a top-level command that matches over `delegate`'s successors.

        With no delegate the wrapper spans this whole grammar, which is what
        a "help" command needs.
        """
        node = WrapperNode(
            name,
            priority=priority,
            hidden=hidden,
            help=help,
            delegate=delegate if delegate is not None else self.root,
            handler=handler,
        )
        self.root.add_successor(node)
        logger.debug(f"Added wrapper '{name}' to grammar {self.name!r}")
        return node

    def command(
        self,
        tokens: Tuple[str, ...] | str,
        help: Optional[str] = None,
        **kwargs,
    ) -> Callable[[Handler], Handler]:
        """Decorator registering the decorated function as a command handler."""

        def decorator(func: Handler) -> Handler:
            self.add_command(tokens, handler=func, help=help, **kwargs)
            return func

        return decorator

    def freeze(self) -> None:
        """Make every node reachable from the root read-only."""
        if self.frozen:
            return
        seen = set()
        pending: List[Node] = [self.root]
        while pending:
            node = pending.pop()
            if node.node_id in seen:
                continue
            seen.add(node.node_id)
            if isinstance(node, WrapperNode):
                pending.append(node.delegate)
            else:
                pending.extend(node.successors)
            if node is not self.root:
                node.freeze()
        self.root.freeze()
        logger.debug(f"Froze grammar {self.name!r} with {len(seen)} nodes")

    def frontier(self, policy: Optional[MatchPolicy] = None) -> ParseFrontier:
        """Start parsing a new line against this grammar."""
        self.freeze()
        return ParseFrontier(self.root, policy if policy is not None else self.policy)

    def commands(self, include_hidden: bool = False) -> List[Node]:
        """Commands and wrappers that have a handler, in declaration order."""
        return [node for _, node in walk_commands(self.root, include_hidden)]

    @staticmethod
    def _find_command(
        parent: Node, name: str, priority: Optional[int] = None
    ) -> Optional[CommandNode]:
        """The command `name` below `parent`.

        With no priority, the highest-priority command of that name, which
        is the one input would reach.
        """
        found = [
            node
            for node in parent.successors
            if isinstance(node, CommandNode)
            and node.name == name
            and (priority is None or node.priority == priority)
        ]
        return max(found, key=lambda node: node.priority, default=None)


def _entry_of(command: CommandNode, parameter: ParameterNode) -> Node:
    if isinstance(parameter, NamedParameterNode):
        for node in command.successors:
            if isinstance(node, ParameterNameNode) and node.parameter is parameter:
                return node
    return parameter


class CommandRegistry:
    """Registry holding one grammar per shell mode."""

    def __init__(self, policy: Optional[MatchPolicy] = None) -> None:
        self._by_mode: Dict[Mode, Grammar] = {
            mode: Grammar(mode.value, policy) for mode in Mode
        }

    def grammar(self, mode: Mode) -> Grammar:
        return self._by_mode[mode]

    def register(
        self,
        tokens: Tuple[str, ...] | str,
        mode: Mode,
        handler: Handler,
        help: Optional[str] = None,
        **kwargs,
    ) -> CommandNode:
        """Registers a command handler in the grammar for `mode`."""
        return self._by_mode[mode].add_command(
            tokens, handler=handler, help=help, **kwargs
        )

    def register_wrapper(
        self, name: str, mode: Mode, handler: Handler, help: Optional[str] = None
    ) -> WrapperNode:
        """Registers a wrapper spanning the whole grammar for `mode`."""
        return self._by_mode[mode].add_wrapper(name, help=help, handler=handler)


# Global registry instance for auto-registration
_registry = CommandRegistry()


def command(
    tokens: Tuple[str, ...] | str,
    mode: Mode,
    help: Optional[str] = None,
    **kwargs,
) -> Callable[[Handler], Handler]:
    """Decorator to auto-register command handlers."""

    def decorator(func: Handler) -> Handler:
        _registry.register(tokens, mode, func, help=help, **kwargs)
        return func

    return decorator


def wrapper(
    name: str, mode: Mode, help: Optional[str] = None
) -> Callable[[Handler], Handler]:
    """Decorator to auto-register a handler for a command spanning a mode's grammar."""

    def decorator(func: Handler) -> Handler:
        _registry.register_wrapper(name, mode, func, help=help)
        return func

    return decorator
