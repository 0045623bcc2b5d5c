"""
Core type definitions for cmdtree.

This module contains the type aliases and protocols shared by the builder,
the execution chain and the dispatcher.
"""

from collections.abc import Awaitable, Callable, Iterable
from concurrent.futures import Future
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from cmdtree.dispatcher import CommandContext
    from cmdtree.execution.context import ExecutionContext
    from cmdtree.suggestions import Suggestions, SuggestionsBuilder


@runtime_checkable
class Sender(Protocol):
    """A principal that can run commands."""

    def has_permission(self, permission: str) -> bool: ...


@runtime_checkable
class CommandSource(Protocol):
    """What the dispatcher receives for each input line."""

    sender: Any


@runtime_checkable
class Scheduler(Protocol):
    """Accepts a zero-argument unit of work and schedules it."""

    def launch(self, work: Callable[[], Any]) -> Any: ...


# source -> may this node be used
Requirement = Callable[[Any], bool]

# raw parse -> semantic value (None means absent)
ArgumentMapper = Callable[["CommandContext"], Any]

# sender, type -> is the sender of that kind
SenderCheck = Callable[[Any, type], bool]

HandlerBody = Callable[["ExecutionContext"], bool]
AsyncHandlerBody = Callable[["ExecutionContext"], Awaitable[Any]]

# ctx, remaining input -> candidate completions
CompletionProvider = Callable[["CommandContext", str], Iterable[str]]
AsyncCompletionProvider = Callable[["CommandContext", str], Awaitable[Iterable[str]]]

# What nodes store: ctx, builder -> future suggestions
SuggestionProvider = Callable[
    ["CommandContext", "SuggestionsBuilder"], "Future[Suggestions]"
]


def always(_source: Any) -> bool:
    """Default node requirement."""
    return True


def default_sender_check(sender: Any, sender_type: type) -> bool:
    return isinstance(sender, sender_type)
