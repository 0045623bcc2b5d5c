"""
Handler chains: the inherited, short-circuiting execution resolver.

A node's chain is the list of handlers inherited from its ancestors when the
node was declared, followed by the handlers declared on the node itself. When
the dispatcher matches the node, the chain runs the handlers in order until
one reports that it handled the invocation.
"""

import logging
from collections.abc import Mapping
from enum import Enum
from types import MappingProxyType
from typing import TYPE_CHECKING, Any

from attrs import field, frozen

from cmdtree.core.types import ArgumentMapper, HandlerBody, SenderCheck, default_sender_check
from cmdtree.execution.context import ExecutionContext, InvocationState

if TYPE_CHECKING:
    from cmdtree.dispatcher import CommandContext

logger = logging.getLogger(__name__)


class ChainResult(Enum):
    """Outcome reported back to the dispatcher."""

    HANDLED = "handled"
    EXHAUSTED = "exhausted"  # no handler applied; not an error


@frozen
class ExecutionHandler:
    """A handler body tagged with the kind of sender it accepts."""

    body: HandlerBody
    sender_type: type = object

    def accepts(self, sender: Any, sender_check: SenderCheck = default_sender_check) -> bool:
        return sender_check(sender, self.sender_type)

    def __call__(self, context: ExecutionContext, sender_check: SenderCheck = default_sender_check) -> bool:
        if not self.accepts(context.sender, sender_check):
            return False
        return bool(self.body(context))


def _freeze_mappers(mappers: Mapping[str, ArgumentMapper]) -> Mapping[str, ArgumentMapper]:
    return MappingProxyType(dict(mappers))


@frozen
class HandlerChain:
    """Immutable snapshot of the handlers and mappers visible at a node."""

    handlers: tuple[ExecutionHandler, ...] = field(converter=tuple, default=())
    mappers: Mapping[str, ArgumentMapper] = field(
        converter=_freeze_mappers, factory=dict, eq=False
    )
    sender_check: SenderCheck = field(default=default_sender_check, eq=False)

    def run(self, command_context: "CommandContext") -> ChainResult:
        """
        Run the handlers against the sender of a matched command.

        Params:
            command_context: Raw parse result for the matched node

        Returns:
            HANDLED if some handler returned True, EXHAUSTED otherwise
        """
        context = ExecutionContext(
            sender=command_context.source.sender,
            context=command_context,
            mappers=self.mappers,
        )
        context.state = InvocationState.RUNNING
        for handler in self.handlers:
            if handler(context, self.sender_check):
                context.state = InvocationState.HANDLED
                return ChainResult.HANDLED

        context.state = InvocationState.EXHAUSTED
        logger.debug(
            "No handler applied for %r (%d handlers)",
            command_context.input,
            len(self.handlers),
        )
        return ChainResult.EXHAUSTED

    def __call__(self, command_context: "CommandContext") -> ChainResult:
        return self.run(command_context)

    def __len__(self) -> int:
        return len(self.handlers)
