"""
Tests for exception types and error formatting.
"""

from cmdtree.exceptions import (
    ArgumentParseError,
    CmdTreeError,
    CommandBuildError,
    CommandSyntaxError,
    ErrorContext,
    ErrorLevel,
    MissingArgumentError,
)


class TestErrorContext:
    """Test location formatting."""

    def test_short_input(self):
        context = ErrorContext("give 100", 5)

        assert context.format_location(ErrorLevel.USER) == "  at position 5: give <--[HERE]"

    def test_long_input_is_truncated(self):
        context = ErrorContext("teleport everyone now", 18)

        assert context.format_location(ErrorLevel.USER) == "  at position 18: ... everyone <--[HERE]"

    def test_cursor_beyond_input_is_clamped(self):
        context = ErrorContext("abc", 10)

        assert "at position 3" in context.format_location(ErrorLevel.USER)

    def test_developer_level_adds_node_path(self):
        context = ErrorContext("give x", 5, ("give", "<amount>"))

        location = context.format_location(ErrorLevel.DEVELOPER)
        assert location.endswith("  after nodes: give <amount>")

    def test_empty_context(self):
        assert ErrorContext().format_location(ErrorLevel.DEVELOPER) == ""


class TestExceptions:
    """Test messages and attributes of each exception."""

    def test_hierarchy(self):
        for error in (
            CommandBuildError("x", "r"),
            ArgumentParseError("integer", "x", "r"),
            MissingArgumentError("x"),
            CommandSyntaxError("m"),
        ):
            assert isinstance(error, CmdTreeError)

    def test_build_error(self):
        error = CommandBuildError("bad name", "name must not contain whitespace")

        assert str(error) == "Cannot declare node 'bad name': name must not contain whitespace"

    def test_parse_error(self):
        error = ArgumentParseError("integer", "abc", "expected integer", 4)

        assert str(error) == "Invalid integer 'abc': expected integer"
        assert error.cursor == 4

    def test_missing_argument(self):
        error = MissingArgumentError("type")

        assert error.argument_id == "type"
        assert "'type'" in str(error)

    def test_syntax_error_without_context(self):
        error = CommandSyntaxError("Unknown command")

        assert str(error) == "Unknown command"
        assert error.cursor is None

    def test_syntax_error_with_context(self):
        error = CommandSyntaxError("Unknown command", ErrorContext("nope", 0))

        assert str(error) == "Unknown command\n  at position 0: <--[HERE]"
        assert error.cursor == 0
