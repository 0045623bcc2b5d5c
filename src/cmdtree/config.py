"""Process-wide defaults, used only at the composition root.

Builders and dispatchers receive their scheduler explicitly. The instances
here back the module-level `cmdtree.command` helper and any dispatcher
created without a scope.
"""

from typing import TYPE_CHECKING

from pydantic import BaseModel, Field

if TYPE_CHECKING:
    from cmdtree.dispatcher import CommandDispatcher
    from cmdtree.execution.scope import CommandScope


class ScopeSettings(BaseModel):
    """Settings for a `CommandScope`."""

    thread_name: str = "cmdtree-scope"
    close_timeout: float = Field(default=5.0, gt=0)


_default_scope: "CommandScope | None" = None
_default_dispatcher: "CommandDispatcher | None" = None


def get_default_scope() -> "CommandScope":
    """Return the process-wide scope, creating it on first use."""
    global _default_scope
    if _default_scope is None:
        from cmdtree.execution.scope import CommandScope

        _default_scope = CommandScope(ScopeSettings())
    return _default_scope


def set_default_scope(scope: "CommandScope | None") -> None:
    """Replace the process-wide scope; None resets it to be created lazily."""
    global _default_scope
    _default_scope = scope


def get_default_dispatcher() -> "CommandDispatcher":
    """Return the process-wide dispatcher, creating it on first use."""
    global _default_dispatcher
    if _default_dispatcher is None:
        from cmdtree.dispatcher import CommandDispatcher

        _default_dispatcher = CommandDispatcher()
    return _default_dispatcher


def set_default_dispatcher(dispatcher: "CommandDispatcher | None") -> None:
    global _default_dispatcher
    _default_dispatcher = dispatcher
