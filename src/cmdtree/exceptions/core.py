"""
Exception classes for cmdtree command trees.

This module defines specific exception types for the error conditions that
can occur while declaring a command tree, parsing argument values and
running handler chains.
"""

from dataclasses import dataclass
from enum import Enum

# Number of input characters shown before the cursor in syntax errors
CONTEXT_AMOUNT = 10


class ErrorLevel(Enum):
    """Error message detail level for end users vs developers."""

    USER = "user"  # Input snippet with cursor marker only
    DEVELOPER = "developer"  # Also shows the matched node path


@dataclass
class ErrorContext:
    """
    Context information for error messages.

    Captures where matching stopped in the raw input line and which nodes
    had been matched up to that point.

    Params:
        input: The full input line being parsed
        cursor: Offset into `input` where the failure was detected
        node_path: Names of the nodes matched before the failure
    """

    input: str | None = None
    cursor: int | None = None
    node_path: tuple[str, ...] = ()

    def format_location(self, error_level: ErrorLevel) -> str:
        """
        Format location information based on error level.

        Params:
            error_level: Whether to show USER or DEVELOPER level details

        Returns:
            Formatted location string with appropriate detail level
        """
        lines = []

        if self.input is not None and self.cursor is not None:
            cursor = min(self.cursor, len(self.input))
            snippet = self.input[max(0, cursor - CONTEXT_AMOUNT) : cursor]
            prefix = "..." if cursor > CONTEXT_AMOUNT else ""
            lines.append(f"  at position {cursor}: {prefix}{snippet}<--[HERE]")

        if error_level == ErrorLevel.DEVELOPER and self.node_path:
            lines.append(f"  after nodes: {' '.join(self.node_path)}")

        return "\n".join(lines)


class CmdTreeError(Exception):
    """Base exception for all cmdtree errors."""

    pass


class CommandBuildError(CmdTreeError):
    """Raised when a command tree declaration is invalid."""

    def __init__(self, name: str, reason: str):
        """
        Initialize the exception.

        Params:
            name: Name of the node being declared
            reason: Why the declaration was rejected
        """
        self.name = name
        self.reason = reason
        super().__init__(f"Cannot declare node '{name}': {reason}")


class ArgumentParseError(CmdTreeError):
    """Raised when a value parser cannot convert a token."""

    def __init__(self, type_name: str, token: str, reason: str, cursor: int | None = None):
        """
        Initialize the exception.

        Params:
            type_name: Name of the argument type that failed
            token: The text that could not be parsed
            reason: Why parsing failed
            cursor: Reader offset where parsing stopped, if known
        """
        self.type_name = type_name
        self.token = token
        self.reason = reason
        self.cursor = cursor
        super().__init__(f"Invalid {type_name} '{token}': {reason}")


class MissingArgumentError(CmdTreeError):
    """Raised when a required argument produced no value."""

    def __init__(self, argument_id: str):
        """
        Initialize the exception.

        Params:
            argument_id: Identifier of the argument that was requested
        """
        self.argument_id = argument_id
        super().__init__(
            f"Required command argument '{argument_id}' is missing or failed to map."
        )


class CommandSyntaxError(CmdTreeError):
    """Raised when the dispatcher cannot match an input line to the tree."""

    def __init__(
        self,
        message: str,
        context: ErrorContext | None = None,
        error_level: ErrorLevel = ErrorLevel.USER,
    ):
        """
        Initialize the exception.

        Params:
            message: Short description of the failure
            context: ErrorContext with input and cursor information
            error_level: Level of detail to show in error message
        """
        self.message = message
        self.context = context
        self.error_level = error_level

        if context:
            location_info = context.format_location(error_level)
            full_message = f"{message}\n{location_info}" if location_info else message
        else:
            full_message = message

        super().__init__(full_message)

    @property
    def cursor(self) -> int | None:
        return self.context.cursor if self.context else None
