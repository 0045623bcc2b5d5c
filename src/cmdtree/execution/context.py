"""
Per-invocation facade handed to handler bodies.

An `ExecutionContext` is created by a handler chain right before it runs and
dropped right after. Argument lookups go through the mapper snapshot of the
matched node first and fall back to the raw values parsed by the dispatcher.
"""

import logging
from collections.abc import Mapping
from enum import Enum
from typing import TYPE_CHECKING, Any, TypeVar

from cmdtree.core.types import ArgumentMapper
from cmdtree.exceptions import MissingArgumentError
from cmdtree.parsing.entities import EntitySelector

if TYPE_CHECKING:
    from cmdtree.dispatcher import CommandContext

logger = logging.getLogger(__name__)

V = TypeVar("V")


class InvocationState(Enum):
    PENDING = "pending"
    RUNNING = "running"
    HANDLED = "handled"
    EXHAUSTED = "exhausted"


class ExecutionContext:
    """Typed, mapper-aware access to the arguments of one command run."""

    def __init__(
        self,
        sender: Any,
        context: "CommandContext",
        mappers: Mapping[str, ArgumentMapper] | None = None,
    ):
        self.sender = sender
        self.context = context
        self.state = InvocationState.PENDING
        self._mappers = mappers or {}

    @property
    def source(self) -> Any:
        return self.context.source

    def get(self, argument_id: str, expected_type: type[V] | None = None) -> V:
        """
        Retrieve an argument that the grammar guarantees is present.

        Params:
            argument_id: Identifier of the argument node
            expected_type: If given, a value of any other type counts as missing

        Returns:
            The mapped value, or the raw parsed value when no mapper exists

        Raises:
            MissingArgumentError: If no value was produced
        """
        value = self.get_or_null(argument_id, expected_type)
        if value is None:
            raise MissingArgumentError(argument_id)
        return value

    def get_or_null(self, argument_id: str, expected_type: type[V] | None = None) -> V | None:
        """
        Retrieve an argument, or None if it is absent or failed to map.

        Params:
            argument_id: Identifier of the argument node
            expected_type: If given, a value of any other type counts as missing

        Returns:
            The mapped or raw value, or None
        """
        mapper = self._mappers.get(argument_id)
        if mapper is not None:
            value = mapper(self.context)
        else:
            value = self.context.get_raw(argument_id)

        if expected_type is not None and not isinstance(value, expected_type):
            return None
        return value

    def named(self, argument_id: str, key: str, default: Any = None) -> Any:
        """Retrieve one value of a named-arguments argument (e.g. `-amount:5`)."""
        values = self.get_or_null(argument_id, Mapping)
        if values is None:
            return default
        value = values.get(key)
        return default if value is None else value

    def flags(self, argument_id: str) -> frozenset[str]:
        """Retrieve the set of flags found in a flags argument."""
        return self.get_or_null(argument_id, frozenset) or frozenset()

    def has_flag(self, argument_id: str, flag: str) -> bool:
        return flag in self.flags(argument_id)

    def entity(self, argument_id: str) -> Any | None:
        """Resolve an entity selector argument to its first entity, unfiltered."""
        selector = self.context.get_raw(argument_id)
        if not isinstance(selector, EntitySelector):
            return None
        try:
            return selector.resolve_first(self.source)
        except (LookupError, ValueError):
            logger.debug("Selector %r for '%s' matched nothing", selector.text, argument_id)
            return None

    def integer(self, argument_id: str) -> int:
        return self._raw(argument_id, int)

    def floating(self, argument_id: str) -> float:
        return self._raw(argument_id, float)

    def boolean(self, argument_id: str) -> bool:
        return self._raw(argument_id, bool)

    def string(self, argument_id: str) -> str:
        return self._raw(argument_id, str)

    def _raw(self, argument_id: str, expected_type: type[V]) -> V:
        try:
            return self.context.get_argument(argument_id, expected_type)
        except (KeyError, TypeError):
            raise MissingArgumentError(argument_id) from None
