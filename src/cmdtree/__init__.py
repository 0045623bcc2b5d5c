"""
cmdtree - declarative builder for hierarchical command grammars

cmdtree builds trees of literal and typed-argument nodes with access
predicates, tab completion and inherited, short-circuiting execution handlers.
"""

from importlib.metadata import version

from cmdtree.core.senders import SimpleSender, SimpleSource
from cmdtree.dispatcher import CommandContext, CommandDispatcher, command
from cmdtree.execution import ChainResult, CommandScope, ExecutionContext
from cmdtree.structure import CommandBuilder, literal

__version__ = version("cmdtree")

__all__ = [
    "__version__",
    "ChainResult",
    "CommandBuilder",
    "CommandContext",
    "CommandDispatcher",
    "CommandScope",
    "ExecutionContext",
    "SimpleSender",
    "SimpleSource",
    "command",
    "literal",
]
