"""An interactive console that drives the command grammar."""

from __future__ import annotations

import shlex
from typing import Any, Dict, List, Optional, Sequence

from .custom_types import Accepted, Completion, MatchPolicy, Mode
from .grammar import CommandRegistry, Grammar, _registry
from .help_format import format_completions
from .program_constants import PROGRAM_CONSTANTS
from .program_exceptions import AcceptError, ParseError
from .program_logging import (
    get_logger,
    log_command_execution,
    log_mode_change,
    log_rejected_line,
)

logger = get_logger("shell")


class Shell:
    """A Cisco-like console with a user mode and an admin mode.

    Each line is split with `shlex`, matched against the grammar of the
    current mode and, once accepted, handed to the command's handler as
    `handler(shell, accepted)`. A handler returns 0 on success, a positive
    number on failure, and a negative number to end the session.

    A line ending in "?" is not run; the continuations of everything before
    the "?" are listed instead.
    """

    def __init__(
        self,
        registry: Optional[CommandRegistry] = None,
        policy: Optional[MatchPolicy] = None,
    ) -> None:
        self.registry = registry if registry is not None else _registry
        self.policy = policy
        self.mode = Mode.USER
        self.running_config: Dict[str, Any] = {"hostname": "Router", "interfaces": {}}

    @property
    def grammar(self) -> Grammar:
        return self.registry.grammar(self.mode)

    def prompt(self) -> str:
        match self.mode:
            case Mode.ADMIN:
                return PROGRAM_CONSTANTS.ADMIN_PROMPT
            case _:
                return PROGRAM_CONSTANTS.USER_PROMPT

    def set_mode(self, mode: Mode) -> None:
        log_mode_change(self.mode.value, mode.value)
        self.mode = mode

    def completions(self, tokens: Sequence[str], partial: str = "") -> List[Completion]:
        """Continuations of `tokens` that start with `partial`."""
        frontier = self.grammar.frontier(self.policy)
        for token in tokens:
            frontier.advance(token)
        return frontier.complete(partial)

    def parse(self, tokens: Sequence[str]) -> Accepted:
        """Match a whole line and accept it, without running it."""
        frontier = self.grammar.frontier(self.policy)
        for token in tokens:
            frontier.advance(token)
        return frontier.accept()

    def handle_line(self, line: str) -> int:
        try:
            tokens = shlex.split(line)
        except ValueError as e:
            print(f"% {e}")
            return 1
        if not tokens:
            return 0

        if tokens[-1].endswith("?"):
            return self._show_completions(tokens[:-1], tokens[-1][:-1])

        try:
            accepted = self.parse(tokens)
        except (ParseError, AcceptError) as e:
            log_rejected_line(tokens, self.mode.value, e)
            print(f"% {e}")
            return 1

        if accepted.handler is None:
            # e.g. "show" on its own when only "show version" runs anything
            print(f'% incomplete command: "{" ".join(tokens)}"')
            self._show_completions(tokens, "")
            return 1

        mode = self.mode.value
        result = accepted.handler(self, accepted)
        log_command_execution(tokens, mode, result <= 0)
        return result

    def run(self) -> None:
        """Read and handle lines until a command ends the session."""
        while True:
            try:
                line = input(self.prompt())
            except (EOFError, KeyboardInterrupt):
                print()
                return
            if self.handle_line(line) < 0:
                return

    def _show_completions(self, tokens: Sequence[str], partial: str) -> int:
        try:
            completions = self.completions(tokens, partial)
        except ParseError as e:
            print(f"% {e}")
            return 1
        if not completions:
            print("% no completions")
        else:
            print(format_completions(completions))
        return 0
