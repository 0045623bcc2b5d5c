"""
Value parsers for argument nodes.

Each argument type consumes its token from a `StringReader` and returns a
typed value or raises `ArgumentParseError`. Bounds are validated with
pydantic when the type is declared, so a bad declaration fails at build time
rather than on first use.
"""

import sys
from abc import ABC, abstractmethod
from concurrent.futures import Future
from typing import TYPE_CHECKING, Any

from pydantic import model_validator
from pydantic.dataclasses import dataclass

from cmdtree.exceptions import ArgumentParseError
from cmdtree.parsing.reader import StringReader
from cmdtree.suggestions import Suggestions, SuggestionsBuilder

if TYPE_CHECKING:
    from cmdtree.dispatcher import CommandContext

INT_MIN = -(2**31)
INT_MAX = 2**31 - 1


class ArgumentType(ABC):
    """Base class for value parsers, and the extension point for custom ones."""

    #: Consumes the rest of the line instead of a single word.
    greedy = False

    @abstractmethod
    def parse(self, reader: StringReader) -> Any:
        """
        Consume one value from the reader.

        Params:
            reader: Reader positioned at the first character of the token

        Returns:
            The parsed value

        Raises:
            ArgumentParseError: If the token is not a valid value of this type
        """

    def list_suggestions(
        self, context: "CommandContext", builder: SuggestionsBuilder
    ) -> "Future[Suggestions]":
        """Suggestions offered when the node has no provider of its own."""
        return Suggestions.completed(Suggestions.empty())

    @property
    def type_name(self) -> str:
        return type(self).__name__.removesuffix("Argument").lower()


class WordArgument(ArgumentType):
    def parse(self, reader: StringReader) -> str:
        start = reader.cursor
        word = reader.read_unquoted_string()
        if not word:
            raise ArgumentParseError("word", reader.remaining, "expected a word", start)
        return word


class GreedyStringArgument(ArgumentType):
    greedy = True

    def parse(self, reader: StringReader) -> str:
        return reader.read_remaining()

    @property
    def type_name(self) -> str:
        return "string"


@dataclass(frozen=True)
class IntegerArgument(ArgumentType):
    min_value: int = INT_MIN
    max_value: int = INT_MAX

    @model_validator(mode="after")
    def _check_bounds(self):
        if self.min_value > self.max_value:
            raise ValueError(
                f"min_value {self.min_value} is greater than max_value {self.max_value}"
            )
        return self

    def parse(self, reader: StringReader) -> int:
        start = reader.cursor
        value = reader.read_int()
        if not self.min_value <= value <= self.max_value:
            reader.cursor = start
            raise ArgumentParseError(
                "integer",
                str(value),
                f"must be between {self.min_value} and {self.max_value}",
                start,
            )
        return value


@dataclass(frozen=True)
class FloatArgument(ArgumentType):
    min_value: float = -sys.float_info.max
    max_value: float = sys.float_info.max

    @model_validator(mode="after")
    def _check_bounds(self):
        if self.min_value > self.max_value:
            raise ValueError(
                f"min_value {self.min_value} is greater than max_value {self.max_value}"
            )
        return self

    def parse(self, reader: StringReader) -> float:
        start = reader.cursor
        value = reader.read_float()
        if not self.min_value <= value <= self.max_value:
            reader.cursor = start
            raise ArgumentParseError(
                "float",
                str(value),
                f"must be between {self.min_value} and {self.max_value}",
                start,
            )
        return value


class BooleanArgument(ArgumentType):
    def parse(self, reader: StringReader) -> bool:
        return reader.read_boolean()

    def list_suggestions(self, context, builder):
        for candidate in ("true", "false"):
            if candidate.startswith(builder.remaining_lower):
                builder.suggest(candidate)
        return builder.build_future()


def word() -> WordArgument:
    return WordArgument()


def greedy_string() -> GreedyStringArgument:
    return GreedyStringArgument()


def integer(min_value: int = INT_MIN, max_value: int = INT_MAX) -> IntegerArgument:
    return IntegerArgument(min_value=min_value, max_value=max_value)


def floating(
    min_value: float = -sys.float_info.max, max_value: float = sys.float_info.max
) -> FloatArgument:
    return FloatArgument(min_value=min_value, max_value=max_value)


def boolean() -> BooleanArgument:
    return BooleanArgument()


def parse_value(argument_type: ArgumentType, text: str) -> Any:
    """
    Parse a standalone token with an argument type.

    Used for sub-values of composite arguments, where the token boundaries are
    already known. Trailing characters the type did not consume are an error.

    Params:
        argument_type: Value parser to apply
        text: The complete token

    Returns:
        The parsed value

    Raises:
        ArgumentParseError: If the type rejects the token or leaves characters unread
    """
    reader = StringReader(text)
    value = argument_type.parse(reader)
    if reader.can_read():
        raise ArgumentParseError(
            argument_type.type_name,
            text,
            f"unexpected trailing characters '{reader.remaining}'",
            reader.cursor,
        )
    return value
