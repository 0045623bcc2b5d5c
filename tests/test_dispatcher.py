"""
Tests for the reference dispatcher's matching and error reporting.
"""

import pytest

from cmdtree import ChainResult, SimpleSender, SimpleSource
from cmdtree.core.tree_node import LiteralCommandNode
from cmdtree.dispatcher import CommandDispatcher
from cmdtree.exceptions import CommandSyntaxError, ErrorLevel
from cmdtree.structure import literal


@pytest.fixture
def source():
    return SimpleSource(SimpleSender("tester"))


class TestMatching:
    """Test how input lines are matched against the tree."""

    def test_unknown_command(self, dispatcher, source):
        with pytest.raises(CommandSyntaxError) as exc_info:
            dispatcher.execute("nothing", source)

        assert exc_info.value.message == "Unknown command"
        assert exc_info.value.cursor == 0

    def test_incomplete_command(self, dispatcher, source):
        """A node without handlers of its own cannot be executed."""
        with dispatcher.command("example") as example:
            with example.literal("sub") as sub:
                sub.executes(lambda ctx: True)

        with pytest.raises(CommandSyntaxError) as exc_info:
            dispatcher.execute("example", source)

        assert exc_info.value.message == "Unknown or incomplete command"

    def test_argument_out_of_bounds(self, dispatcher, source):
        with dispatcher.command("give") as give:
            with give.int_argument("amount", 1, 64) as amount:
                amount.executes(lambda ctx: True)

        with pytest.raises(CommandSyntaxError) as exc_info:
            dispatcher.execute("give 100", source)

        assert "must be between 1 and 64" in exc_info.value.message
        assert exc_info.value.cursor == 5

    def test_trailing_data(self, dispatcher, source):
        with dispatcher.command("heal") as heal:
            heal.executes(lambda ctx: True)

        with pytest.raises(CommandSyntaxError) as exc_info:
            dispatcher.execute("heal now", source)

        assert exc_info.value.message == "Incorrect argument for command"
        assert exc_info.value.cursor == 5

    def test_literal_must_be_whole_word(self, dispatcher, source):
        with dispatcher.command("heal") as heal:
            heal.executes(lambda ctx: True)

        with pytest.raises(CommandSyntaxError):
            dispatcher.execute("healer", source)

    def test_duplicate_siblings_are_both_reachable(self, dispatcher, source):
        """Same-named siblings stay separate; matching backtracks into the second."""
        captured = []

        with dispatcher.command("dup") as first:
            with first.literal("a") as a:
                a.executes(lambda ctx: captured.append("a") or True)
        with dispatcher.command("dup") as second:
            with second.literal("b") as b:
                b.executes(lambda ctx: captured.append("b") or True)

        dispatcher.execute("dup a", source)
        dispatcher.execute("dup b", source)

        assert captured == ["a", "b"]
        assert len(dispatcher.root.children) == 2

    def test_executable_duplicate_sibling_wins(self, dispatcher, source):
        """Test that a sibling without handlers does not shadow a later one with handlers."""
        captured = []

        with dispatcher.command("cmd") as cmd:
            with cmd.literal("foo") as first:
                with first.literal("a") as a:
                    a.executes(lambda ctx: captured.append("first a") or True)
            with cmd.literal("foo") as second:
                second.executes(lambda ctx: captured.append("second") or True)

        assert dispatcher.execute("cmd foo", source) is ChainResult.HANDLED
        dispatcher.execute("cmd foo a", source)

        assert captured == ["second", "first a"]

    def test_backtracks_from_argument_to_later_sibling(self, dispatcher, source):
        """A branch that cannot finish the line gives way to a later sibling."""
        captured = []

        with dispatcher.command("set") as cmd:
            with cmd.string_argument("key") as key:
                with key.literal("on") as on:
                    on.executes(lambda ctx: captured.append(("on", ctx.get("key"))) or True)
            with cmd.literal("mode") as mode:
                with mode.int_argument("level") as level:
                    level.executes(lambda ctx: captured.append(("mode", ctx.integer("level"))) or True)

        dispatcher.execute("set mode 3", source)
        dispatcher.execute("set light on", source)

        assert captured == [("mode", 3), ("on", "light")]

    def test_greedy_argument_takes_rest(self, dispatcher, source):
        captured = []

        with dispatcher.command("say") as say:
            with say.greedy_string_argument("message") as message:
                message.executes(lambda ctx: captured.append(ctx.string("message")) or True)

        dispatcher.execute("say hello there  world", source)
        assert captured == ["hello there  world"]

    def test_typed_getters(self, dispatcher, source):
        captured = []

        with dispatcher.command("tune") as tune:
            with tune.float_argument("pitch", 0.0, 2.0) as pitch:
                with pitch.bool_argument("loop") as loop:

                    @loop.executes
                    def run(ctx):
                        captured.append((ctx.floating("pitch"), ctx.boolean("loop")))
                        return True

        dispatcher.execute("tune 1.5 true", source)
        assert captured == [(1.5, True)]

    def test_parse_then_execute(self, dispatcher, source):
        with dispatcher.command("ping") as ping:
            ping.executes(lambda ctx: True)

        results = dispatcher.parse("ping", source)

        assert results.complete
        assert results.context.node_path == ("ping",)
        assert dispatcher.execute(results) is ChainResult.HANDLED


class TestRegistration:
    """Test registering trees built outside the dispatcher."""

    def test_register_detached_literal(self, dispatcher, source):
        captured = []
        builder = literal("status", lambda b: b.executes(lambda ctx: captured.append(1) or True))

        dispatcher.register(builder)
        dispatcher.execute("status", source)

        assert captured == [1]

    def test_register_all(self, dispatcher):
        nodes = dispatcher.register_all([literal("a"), LiteralCommandNode("b")])

        assert [node.name for node in nodes] == ["a", "b"]
        assert dispatcher.find_node(["b"]) is nodes[1]

    def test_register_rejects_non_literal(self, dispatcher):
        with pytest.raises(TypeError):
            dispatcher.register(dispatcher.root)

    def test_find_node(self, dispatcher):
        with dispatcher.command("outer") as outer:
            outer.literal("inner")

        assert dispatcher.find_node(["outer", "inner"]).name == "inner"
        assert dispatcher.find_node(["outer", "missing"]) is None

    def test_alias_registered_on_close(self):
        dispatcher = CommandDispatcher(scope=object())
        builder = dispatcher.command("teleport", "tp")

        assert dispatcher.find_node(["tp"]) is None
        builder.close()
        assert dispatcher.find_node(["tp"]) is not None


class TestUsage:
    """Test listing of executable paths."""

    def test_all_usage(self, dispatcher, source):
        with dispatcher.command("give") as give:
            give.executes(lambda ctx: True)
            with give.int_argument("amount") as amount:
                amount.executes(lambda ctx: True)
            give.literal("help")
        with dispatcher.command("stop") as stop:
            stop.has_permission("server.stop")
            stop.executes(lambda ctx: True)

        assert dispatcher.get_all_usage(dispatcher.root, source) == ["give", "give <amount>"]
        assert dispatcher.get_all_usage(dispatcher.root, source, restricted=False) == [
            "give",
            "give <amount>",
            "stop",
        ]

    def test_usage_below_node(self, dispatcher, source):
        with dispatcher.command("give") as give:
            with give.int_argument("amount") as amount:
                amount.executes(lambda ctx: True)

        assert dispatcher.get_all_usage(dispatcher.find_node(["give"]), source) == ["<amount>"]


class TestErrorFormatting:
    """Test the location information in syntax errors."""

    def test_user_level_shows_snippet(self, dispatcher, source):
        with dispatcher.command("give") as give:
            with give.int_argument("amount", 1, 64) as amount:
                amount.executes(lambda ctx: True)

        with pytest.raises(CommandSyntaxError) as exc_info:
            dispatcher.execute("give 100", source)

        assert "at position 5: give <--[HERE]" in str(exc_info.value)
        assert "after nodes" not in str(exc_info.value)

    def test_developer_level_shows_nodes(self, dispatcher, source):
        with dispatcher.command("give") as give:
            give.int_argument("amount")

        with pytest.raises(CommandSyntaxError) as exc_info:
            dispatcher.execute("give x", source)

        error = CommandSyntaxError(exc_info.value.message, exc_info.value.context, ErrorLevel.DEVELOPER)
        assert "after nodes: give" in str(error)
