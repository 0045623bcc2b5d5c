"""
cmdtree value parsing.

This package contains the input reader, the primitive value parsers, the
entity selector extension and the tokenizers for composite arguments.
"""

from cmdtree.parsing.arguments import (
    ArgumentType,
    BooleanArgument,
    FloatArgument,
    GreedyStringArgument,
    IntegerArgument,
    WordArgument,
    boolean,
    floating,
    greedy_string,
    integer,
    parse_value,
    word,
)
from cmdtree.parsing.entities import EntityResolver, EntitySelector, EntitySelectorArgument
from cmdtree.parsing.reader import StringReader

__all__ = [
    "ArgumentType",
    "BooleanArgument",
    "FloatArgument",
    "GreedyStringArgument",
    "IntegerArgument",
    "WordArgument",
    "EntityResolver",
    "EntitySelector",
    "EntitySelectorArgument",
    "StringReader",
    "boolean",
    "floating",
    "greedy_string",
    "integer",
    "parse_value",
    "word",
]
