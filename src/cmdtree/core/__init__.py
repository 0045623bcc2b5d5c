"""
Core cmdtree components.

This package provides the grammar node classes, the sender model and the
type definitions shared across the framework.
"""

from cmdtree.core.senders import SimpleSender, SimpleSource
from cmdtree.core.tree_node import (
    ArgumentCommandNode,
    CommandNode,
    LiteralCommandNode,
    RootCommandNode,
)
from cmdtree.core.types import (
    ArgumentMapper,
    CommandSource,
    Requirement,
    Scheduler,
    Sender,
    SenderCheck,
    always,
    default_sender_check,
)

__all__ = [
    "CommandNode",
    "RootCommandNode",
    "LiteralCommandNode",
    "ArgumentCommandNode",
    "SimpleSender",
    "SimpleSource",
    "ArgumentMapper",
    "CommandSource",
    "Requirement",
    "Scheduler",
    "Sender",
    "SenderCheck",
    "always",
    "default_sender_check",
]
