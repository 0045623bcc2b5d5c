"""
cmdtree execution components.

This package contains the handler chain resolver, the per-invocation
execution context and the background scheduler for asynchronous work.
"""

from cmdtree.execution.chain import ChainResult, ExecutionHandler, HandlerChain
from cmdtree.execution.context import ExecutionContext, InvocationState
from cmdtree.execution.scope import CommandScope

__all__ = [
    "ChainResult",
    "CommandScope",
    "ExecutionContext",
    "ExecutionHandler",
    "HandlerChain",
    "InvocationState",
]
