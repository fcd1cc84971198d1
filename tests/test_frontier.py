"""
Test suite for matching tokens with a ParseFrontier.

This test suite covers:
- Exact-name and value matching
- Priority-based disambiguation and ambiguity errors
- Match-once behaviour of non-repeatable parameters
- Positional parameters, named parameters and bound values
- Wrapper commands
- Match policies (case and abbreviations)
"""

import unittest
from unittest.mock import Mock

from cli_grammar import (
    Advanced,
    AmbiguousMatchError,
    CommandNode,
    FlagParameterNode,
    Grammar,
    MatchPolicy,
    NamedParameterNode,
    NoMatchError,
    ParameterNameNode,
    SimpleParameterNode,
    WrapperNode,
)


def advance_all(frontier, tokens):
    for token in tokens:
        frontier.advance(token)
    return frontier


class TestAdvanceCommands(unittest.TestCase):
    """Test matching command words."""

    def setUp(self):
        """Set up a grammar with a few commands."""
        self.grammar = Grammar("test")
        self.show = self.grammar.add_command("show", handler=Mock())
        self.version = self.grammar.add_command("show version", handler=Mock())
        self.debug = self.grammar.add_command("debug", handler=Mock(), hidden=True)

    def test_advance_returns_matched_node(self):
        """Test that advance reports the node that consumed the token."""
        frontier = self.grammar.frontier()
        result = frontier.advance("show")
        self.assertIsInstance(result, Advanced)
        self.assertIs(result.node, self.show)
        self.assertEqual(result.token, "show")
        self.assertIs(frontier.current, self.show)
        self.assertIs(frontier.command, self.show)

    def test_active_command_follows_subcommands(self):
        """Test that the most recent command becomes the active one."""
        frontier = advance_all(self.grammar.frontier(), ["show", "version"])
        self.assertIs(frontier.command, self.version)
        self.assertEqual(frontier.path, [self.show, self.version])

    def test_unknown_token_raises_no_match(self):
        """Test that a token matching nothing is rejected."""
        frontier = self.grammar.frontier()
        with self.assertRaises(NoMatchError) as cm:
            frontier.advance("reload")
        self.assertEqual(cm.exception.token, "reload")

    def test_failed_advance_leaves_frontier_unchanged(self):
        """Test that a rejected token does not move the frontier."""
        frontier = self.grammar.frontier()
        frontier.advance("show")
        with self.assertRaises(NoMatchError):
            frontier.advance("clock")
        self.assertIs(frontier.current, self.show)
        self.assertEqual(frontier.path, [self.show])
        frontier.advance("version")
        self.assertIs(frontier.command, self.version)

    def test_hidden_command_is_matchable(self):
        """Test that hidden commands match by their exact name."""
        frontier = self.grammar.frontier()
        self.assertIs(frontier.advance("debug").node, self.debug)

    def test_matching_is_case_sensitive_by_default(self):
        """Test that names are compared exactly."""
        with self.assertRaises(NoMatchError):
            self.grammar.frontier().advance("SHOW")

    def test_prefixes_do_not_match_by_default(self):
        """Test that abbreviations are off unless enabled."""
        with self.assertRaises(NoMatchError):
            self.grammar.frontier().advance("sho")


class TestPriority(unittest.TestCase):
    """Test disambiguation by priority."""

    def test_higher_priority_wins(self):
        """Test that the highest-priority match is taken."""
        grammar = Grammar("test")
        grammar.add_command("go", handler=Mock())
        preferred = grammar.add_command("go", handler=Mock(), priority=5)
        self.assertIs(grammar.frontier().advance("go").node, preferred)

    def test_command_beats_parameter_value(self):
        """Test that a sub-command wins over a value at default priorities."""
        grammar = Grammar("test")
        show = grammar.add_command(
            "show", parameters=[SimpleParameterNode("what")], handler=Mock()
        )
        version = grammar.add_command("show version", handler=Mock())
        frontier = grammar.frontier()
        frontier.advance("show")
        self.assertIs(frontier.advance("version").node, version)

        frontier = grammar.frontier()
        frontier.advance("show")
        self.assertIs(frontier.advance("clock").node, show.parameters[0])

    def test_tie_raises_ambiguous(self):
        """Test that equal-priority matches are reported, not guessed."""
        grammar = Grammar("test")
        grammar.add_command(
            "set",
            parameters=[SimpleParameterNode("value"), FlagParameterNode("default")],
        )
        frontier = grammar.frontier()
        frontier.advance("set")
        with self.assertRaises(AmbiguousMatchError) as cm:
            frontier.advance("default")
        self.assertEqual(cm.exception.token, "default")
        self.assertEqual(cm.exception.candidates, ("<default>", "<value>"))

    def test_lower_priority_value_yields_to_keyword(self):
        """Test that lowering a value's priority resolves the tie."""
        grammar = Grammar("test")
        grammar.add_command(
            "set",
            parameters=[
                SimpleParameterNode("value", priority=-20),
                FlagParameterNode("default"),
            ],
        )
        frontier = advance_all(grammar.frontier(), ["set", "default"])
        self.assertEqual(frontier.values, {"default": True})


class TestRepeatability(unittest.TestCase):
    """Test match-once behaviour of parameters."""

    def test_show_all(self):
        """Test that a flag binds True and cannot be given twice."""
        grammar = Grammar("test")
        grammar.add_command(
            "show", handler=Mock(), parameters=[FlagParameterNode("all")]
        )
        frontier = advance_all(grammar.frontier(), ["show", "all"])
        self.assertEqual(frontier.values, {"all": True})

        with self.assertRaises(NoMatchError) as cm:
            frontier.advance("all")
        self.assertEqual(cm.exception.token, "all")

    def test_repeatable_flag_matches_every_time(self):
        """Test that a repeatable parameter is never exhausted."""
        grammar = Grammar("test")
        grammar.add_command(
            "debug", parameters=[FlagParameterNode("verbose", repeatable=True)]
        )
        frontier = advance_all(
            grammar.frontier(), ["debug", "verbose", "verbose", "verbose"]
        )
        self.assertEqual(frontier.values, {"verbose": True})

    def test_repeatable_values_are_collected(self):
        """Test that repeated values are bound as a list in input order."""
        grammar = Grammar("test")
        grammar.add_command(
            "ping", parameters=[SimpleParameterNode("host", repeatable=True)]
        )
        frontier = advance_all(grammar.frontier(), ["ping", "a", "b", "c"])
        self.assertEqual(frontier.values, {"host": ["a", "b", "c"]})

    def test_matched_flag_is_visited(self):
        """Test that a matched flag is recorded on the frontier, not the node."""
        grammar = Grammar("test")
        flag = FlagParameterNode("all")
        grammar.add_command("show", parameters=[flag])
        frontier = advance_all(grammar.frontier(), ["show", "all"])
        self.assertIn(flag.node_id, frontier.visited)

    def test_grammar_is_not_modified_by_parsing(self):
        """Test that two frontiers on one grammar do not see each other."""
        grammar = Grammar("test")
        grammar.add_command("show", parameters=[FlagParameterNode("all")])
        first = advance_all(grammar.frontier(), ["show", "all"])
        second = advance_all(grammar.frontier(), ["show", "all"])
        self.assertEqual(first.values, second.values)


class TestNamedParameters(unittest.TestCase):
    """Test "name value" parameters."""

    def setUp(self):
        """Set up an interface command."""
        self.grammar = Grammar("test")
        self.mtu = NamedParameterNode("mtu", accepts=str.isdigit, convert=int)
        self.interface = self.grammar.add_command(
            "interface",
            handler=Mock(),
            parameters=[
                SimpleParameterNode("name", required=True),
                self.mtu,
                FlagParameterNode("shutdown"),
            ],
        )

    def test_name_then_value(self):
        """Test that the value after the name is converted and bound."""
        frontier = advance_all(
            self.grammar.frontier(), ["interface", "eth0", "mtu", "1500", "shutdown"]
        )
        self.assertEqual(
            frontier.values, {"name": "eth0", "mtu": 1500, "shutdown": True}
        )

    def test_name_node_is_current_until_value(self):
        """Test that only the value can follow the name."""
        frontier = advance_all(self.grammar.frontier(), ["interface", "eth0", "mtu"])
        self.assertIsInstance(frontier.current, ParameterNameNode)
        self.assertEqual(frontier.candidates(), [self.mtu])
        with self.assertRaises(NoMatchError):
            frontier.advance("big")

    def test_unconvertible_value_leaves_frontier_unchanged(self):
        """Test that a value the conversion rejects is a plain no-match."""
        grammar = Grammar("test")
        mtu = NamedParameterNode("mtu", convert=int)
        grammar.add_command("set", parameters=[mtu])
        frontier = advance_all(grammar.frontier(), ["set", "mtu"])
        name = frontier.current

        with self.assertRaises(NoMatchError) as cm:
            frontier.advance("abc")
        self.assertEqual(cm.exception.token, "abc")
        self.assertIs(frontier.current, name)
        self.assertEqual(len(frontier.path), 2)
        self.assertEqual(frontier.values, {})
        self.assertNotIn(mtu.node_id, frontier.visited)

        frontier.advance("1500")
        self.assertEqual(frontier.values, {"mtu": 1500})

    def test_named_parameter_once(self):
        """Test that a named parameter cannot be given twice."""
        frontier = advance_all(
            self.grammar.frontier(), ["interface", "eth0", "mtu", "1500"]
        )
        with self.assertRaises(NoMatchError):
            frontier.advance("mtu")

    def test_repeatable_named_parameter(self):
        """Test that a repeatable named parameter collects its values."""
        grammar = Grammar("test")
        grammar.add_command(
            "tag", parameters=[NamedParameterNode("label", repeatable=True)]
        )
        frontier = advance_all(
            grammar.frontier(), ["tag", "label", "a", "label", "b"]
        )
        self.assertEqual(frontier.values, {"label": ["a", "b"]})


class TestPositionalParameters(unittest.TestCase):
    """Test positional parameters."""

    def setUp(self):
        """Set up a copy command with two positional parameters."""
        self.grammar = Grammar("test")
        # below the flag, so "force" is never taken as a file name
        self.source = SimpleParameterNode("source", priority=-20, required=True)
        self.destination = SimpleParameterNode(
            "destination", priority=-20, required=True
        )
        self.grammar.add_command(
            "copy",
            handler=Mock(),
            parameters=[self.source, self.destination, FlagParameterNode("force")],
        )

    def test_positionals_bind_in_order(self):
        """Test that positional values fill parameters in declared order."""
        frontier = advance_all(self.grammar.frontier(), ["copy", "a", "b"])
        self.assertEqual(frontier.values, {"source": "a", "destination": "b"})

    def test_only_next_positional_is_a_candidate(self):
        """Test that later positionals wait for earlier ones."""
        frontier = advance_all(self.grammar.frontier(), ["copy"])
        self.assertIn(self.source, frontier.candidates())
        self.assertNotIn(self.destination, frontier.candidates())

    def test_flags_between_positionals(self):
        """Test that other parameters may appear between positionals."""
        frontier = advance_all(self.grammar.frontier(), ["copy", "a", "force", "b"])
        self.assertEqual(
            frontier.values, {"source": "a", "force": True, "destination": "b"}
        )

    def test_extra_positional_raises(self):
        """Test that a third value has nowhere to go."""
        frontier = advance_all(self.grammar.frontier(), ["copy", "a", "b"])
        with self.assertRaises(NoMatchError):
            frontier.advance("c")


class TestWrapper(unittest.TestCase):
    """Test matching through a wrapper command."""

    def setUp(self):
        """Set up a grammar with a help wrapper."""
        self.grammar = Grammar("test")
        self.set = self.grammar.add_command(
            "set",
            handler=Mock(),
            parameters=[SimpleParameterNode("value", required=True)],
        )
        self.version = self.grammar.add_command("show version", handler=Mock())
        self.help = self.grammar.add_wrapper("help", handler=Mock())

    def test_wrapper_is_the_active_command(self):
        """Test that commands after a wrapper do not replace it."""
        frontier = advance_all(self.grammar.frontier(), ["help", "show", "version"])
        self.assertIs(frontier.command, self.help)
        self.assertTrue(frontier.wrapped)
        self.assertIs(frontier.current, self.version)

    def test_wrapper_matches_over_delegate(self):
        """Test that the delegate's successors follow the wrapper."""
        frontier = advance_all(self.grammar.frontier(), ["help"])
        self.assertIsInstance(frontier.current, WrapperNode)
        self.assertIsInstance(frontier.advance("set").node, CommandNode)


class TestMatchPolicy(unittest.TestCase):
    """Test case-insensitive and abbreviated matching."""

    def setUp(self):
        """Set up a grammar with commands sharing prefixes."""
        self.grammar = Grammar("test")
        self.show = self.grammar.add_command("show", handler=Mock())
        self.shutdown = self.grammar.add_command("shutdown", handler=Mock())
        self.set = self.grammar.add_command("set", handler=Mock())
        self.settings = self.grammar.add_command("settings", handler=Mock())

    def test_ignore_case(self):
        """Test that names match regardless of case when configured."""
        frontier = self.grammar.frontier(MatchPolicy(case_sensitive=False))
        self.assertIs(frontier.advance("SHOW").node, self.show)

    def test_unique_prefix(self):
        """Test that a unique prefix matches when abbreviations are on."""
        frontier = self.grammar.frontier(MatchPolicy(abbreviations=True))
        self.assertIs(frontier.advance("sho").node, self.show)

    def test_ambiguous_prefix(self):
        """Test that a prefix of two commands is ambiguous."""
        frontier = self.grammar.frontier(MatchPolicy(abbreviations=True))
        with self.assertRaises(AmbiguousMatchError) as cm:
            frontier.advance("sh")
        self.assertEqual(cm.exception.candidates, ("show", "shutdown"))

    def test_exact_match_beats_prefix(self):
        """Test that an exact name wins over longer names it prefixes."""
        frontier = self.grammar.frontier(MatchPolicy(abbreviations=True))
        self.assertIs(frontier.advance("set").node, self.set)


if __name__ == "__main__":
    unittest.main()
