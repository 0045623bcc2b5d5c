"""
Registry of argument mappers visible to a builder scope.

Each builder owns one registry. Child scopes receive a copy taken when they
are declared, and handler chains receive a read-only snapshot taken when they
are finalized, so registering a mapper later never changes what an already
declared scope or finalized chain sees.
"""

from collections.abc import Mapping
from types import MappingProxyType

from cmdtree.core.types import ArgumentMapper


class ArgumentMapperRegistry:
    """Mapping of argument id -> mapper with value-copy semantics."""

    def __init__(self, mappers: Mapping[str, ArgumentMapper] | None = None):
        self._mappers: dict[str, ArgumentMapper] = dict(mappers or {})

    def register(self, argument_id: str, mapper: ArgumentMapper) -> None:
        """
        Register or replace the mapper for an argument id.

        Params:
            argument_id: Identifier of the argument node the mapper serves
            mapper: Function from the raw command context to the semantic value
        """
        self._mappers[argument_id] = mapper

    def get(self, argument_id: str) -> ArgumentMapper | None:
        return self._mappers.get(argument_id)

    def copy(self) -> "ArgumentMapperRegistry":
        return ArgumentMapperRegistry(self._mappers)

    def snapshot(self) -> Mapping[str, ArgumentMapper]:
        """Return an immutable view of the current mappers."""
        return MappingProxyType(dict(self._mappers))

    def __contains__(self, argument_id: object) -> bool:
        return argument_id in self._mappers

    def __len__(self) -> int:
        return len(self._mappers)
