"""
Entity selector arguments.

The selector itself only records what the user typed; turning it into live
entities is the job of an application-supplied `EntityResolver`, which is
asked at mapping time so the result reflects the state when the command runs.
"""

from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any, Protocol, runtime_checkable

from cmdtree.exceptions import ArgumentParseError
from cmdtree.parsing.arguments import ArgumentType
from cmdtree.parsing.reader import StringReader


@runtime_checkable
class EntityResolver(Protocol):
    """Application hook that knows which entities exist."""

    def resolve(self, selector: str, source: Any) -> Iterable[Any]:
        """Entities matched by the selector text, best match first."""
        ...

    def candidates(self, source: Any) -> Iterable[Any]:
        """Entities offered as completions."""
        ...

    def name_of(self, entity: Any) -> str: ...


@dataclass(frozen=True)
class EntitySelector:
    text: str
    resolver: EntityResolver

    def resolve_first(self, source: Any) -> Any | None:
        for entity in self.resolver.resolve(self.text, source):
            return entity
        return None


class EntitySelectorArgument(ArgumentType):
    """Parses one word into an unresolved `EntitySelector`."""

    def __init__(self, resolver: EntityResolver):
        self.resolver = resolver

    def parse(self, reader: StringReader) -> EntitySelector:
        start = reader.cursor
        while reader.can_read() and not reader.peek().isspace():
            reader.skip()
        text = reader.string[start : reader.cursor]
        if not text:
            raise ArgumentParseError("entity", "", "expected an entity selector", start)
        return EntitySelector(text, self.resolver)

    @property
    def type_name(self) -> str:
        return "entity"
