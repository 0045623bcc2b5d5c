"""
cmdtree structure components.

This package provides the tree builder and the argument mapper registry.
"""

from cmdtree.structure.builder import CommandBuilder, literal
from cmdtree.structure.registry import ArgumentMapperRegistry

__all__ = [
    "ArgumentMapperRegistry",
    "CommandBuilder",
    "literal",
]
