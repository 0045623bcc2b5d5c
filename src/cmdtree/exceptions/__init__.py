"""
cmdtree exception classes.

This package provides all exception types used throughout cmdtree for
consistent error handling and reporting.
"""

from cmdtree.exceptions.core import (
    ArgumentParseError,
    CmdTreeError,
    CommandBuildError,
    CommandSyntaxError,
    ErrorContext,
    ErrorLevel,
    MissingArgumentError,
)

__all__ = [
    "CmdTreeError",
    "ArgumentParseError",
    "CommandBuildError",
    "CommandSyntaxError",
    "ErrorContext",
    "ErrorLevel",
    "MissingArgumentError",
]
