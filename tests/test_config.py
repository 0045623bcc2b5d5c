"""
Tests for the process-wide defaults and the module-level command helper.
"""

import cmdtree
from cmdtree import config
from cmdtree.dispatcher import CommandDispatcher
from cmdtree.execution import CommandScope


class TestDefaults:
    """Test lazily created process-wide instances."""

    def test_default_scope_is_singleton(self, reset_defaults):
        scope = config.get_default_scope()

        assert isinstance(scope, CommandScope)
        assert config.get_default_scope() is scope

    def test_set_default_scope(self, reset_defaults, inline_scope):
        config.set_default_scope(inline_scope)

        assert CommandDispatcher().scope is inline_scope

    def test_explicit_scope_wins(self, reset_defaults, inline_scope):
        dispatcher = CommandDispatcher(scope=inline_scope)

        assert dispatcher.scope is inline_scope

    def test_default_dispatcher(self, reset_defaults):
        dispatcher = config.get_default_dispatcher()

        assert config.get_default_dispatcher() is dispatcher

    def test_module_level_command(self, reset_defaults, inline_scope):
        config.set_default_scope(inline_scope)
        captured = []

        with cmdtree.command("hello") as hello:
            hello.executes(lambda ctx: captured.append(ctx.sender.name) or True)

        result = config.get_default_dispatcher().execute(
            "hello", cmdtree.SimpleSource(cmdtree.SimpleSender("world"))
        )

        assert result is cmdtree.ChainResult.HANDLED
        assert captured == ["world"]

    def test_replaced_defaults_do_not_leak(self, reset_defaults):
        """Test that the inline scope installed by the previous test was reset."""
        assert config._default_scope is None
        assert config._default_dispatcher is None

    def test_version(self):
        assert isinstance(cmdtree.__version__, str)
