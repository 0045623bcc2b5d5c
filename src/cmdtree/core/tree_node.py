"""
Grammar nodes of a command tree.

A node is either a fixed literal keyword or a named, typed argument. Children
are kept in declaration order, which is also the order in which the
dispatcher tries them. Nodes are filled in by `CommandBuilder` and are not
modified once the tree is registered.
"""

from concurrent.futures import Future
from typing import TYPE_CHECKING, Any, Optional

from cmdtree.core.types import Requirement, SuggestionProvider, always
from cmdtree.exceptions import ArgumentParseError
from cmdtree.parsing.arguments import ArgumentType
from cmdtree.parsing.reader import ARGUMENT_SEPARATOR, StringReader
from cmdtree.suggestions import Suggestions, SuggestionsBuilder

if TYPE_CHECKING:
    from cmdtree.dispatcher import CommandContext
    from cmdtree.execution.chain import HandlerChain


class CommandNode:
    """Base class for all grammar nodes."""

    def __init__(self, requirement: Requirement = always):
        self.requirement = requirement
        self.chain: Optional["HandlerChain"] = None
        self.children: list["CommandNode"] = []

    @property
    def name(self) -> str:
        raise NotImplementedError

    @property
    def usage_text(self) -> str:
        return self.name

    def add_child(self, node: "CommandNode") -> None:
        # Same-named siblings are kept; the dispatcher tries them in order.
        self.children.append(node)

    def can_use(self, source: Any) -> bool:
        return self.requirement(source)

    def usable_children(self, source: Any) -> list["CommandNode"]:
        return [child for child in self.children if child.can_use(source)]

    def parse(self, reader: StringReader) -> Any:
        """Consume this node's token, returning the parsed value.

        Raises:
            ArgumentParseError: If the token does not match this node
        """
        raise NotImplementedError

    def list_suggestions(
        self, context: "CommandContext", builder: SuggestionsBuilder
    ) -> "Future[Suggestions]":
        return Suggestions.completed(Suggestions.empty())

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.name!r}>"


class RootCommandNode(CommandNode):
    @property
    def name(self) -> str:
        return ""

    def parse(self, reader: StringReader) -> None:
        return None


class LiteralCommandNode(CommandNode):
    def __init__(self, literal: str, requirement: Requirement = always):
        super().__init__(requirement)
        self.literal = literal

    @property
    def name(self) -> str:
        return self.literal

    def parse(self, reader: StringReader) -> str:
        start = reader.cursor
        end = start + len(self.literal)
        if reader.string[start:end] == self.literal and (
            end == len(reader.string) or reader.string[end] == ARGUMENT_SEPARATOR
        ):
            reader.cursor = end
            return self.literal
        raise ArgumentParseError("literal", reader.remaining, f"expected '{self.literal}'", start)

    def list_suggestions(self, context, builder):
        if self.literal.lower().startswith(builder.remaining_lower):
            builder.suggest(self.literal)
        return builder.build_future()


class ArgumentCommandNode(CommandNode):
    def __init__(
        self,
        name: str,
        argument_type: ArgumentType,
        requirement: Requirement = always,
        suggestion_provider: SuggestionProvider | None = None,
    ):
        super().__init__(requirement)
        self._name = name
        self.type = argument_type
        self.suggestion_provider = suggestion_provider

    @property
    def name(self) -> str:
        return self._name

    @property
    def usage_text(self) -> str:
        return f"<{self._name}>"

    def parse(self, reader: StringReader) -> Any:
        return self.type.parse(reader)

    def list_suggestions(self, context, builder):
        if self.suggestion_provider is None:
            return self.type.list_suggestions(context, builder)
        return self.suggestion_provider(context, builder)
