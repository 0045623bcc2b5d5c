"""Reference dispatcher: registration, matching, execution and completion.

The dispatcher owns the root of a command tree. It splits input on single
spaces, tries the children of each node in declaration order, backtracks
when a branch fails and takes the first branch that consumes the whole
line at a node with handlers. It then runs the handler chain of the last
matched node.
"""

import logging
from collections.abc import Iterable
from concurrent.futures import Future
from dataclasses import dataclass, field
from typing import Any, Optional, TypeVar

from cmdtree.config import get_default_dispatcher, get_default_scope
from cmdtree.core.tree_node import (
    ArgumentCommandNode,
    CommandNode,
    LiteralCommandNode,
    RootCommandNode,
)
from cmdtree.core.types import Scheduler, SenderCheck, default_sender_check
from cmdtree.exceptions import ArgumentParseError, CommandSyntaxError, ErrorContext
from cmdtree.execution.chain import ChainResult, HandlerChain
from cmdtree.parsing.reader import ARGUMENT_SEPARATOR, StringReader
from cmdtree.structure.builder import Block, CommandBuilder
from cmdtree.suggestions import StringRange, Suggestions, SuggestionsBuilder, gather

logger = logging.getLogger(__name__)

V = TypeVar("V")


@dataclass(frozen=True)
class ParsedArgument:
    range: StringRange
    result: Any


@dataclass(frozen=True)
class ParsedCommandNode:
    node: CommandNode
    range: StringRange


@dataclass
class CommandContext:
    """Raw parse result of one input line against the tree."""

    source: Any
    input: str
    root: CommandNode
    arguments: dict[str, ParsedArgument] = field(default_factory=dict)
    nodes: list[ParsedCommandNode] = field(default_factory=list)
    range: StringRange = field(default_factory=lambda: StringRange.at(0))

    @property
    def last_node(self) -> CommandNode:
        return self.nodes[-1].node if self.nodes else self.root

    @property
    def chain(self) -> Optional[HandlerChain]:
        return self.last_node.chain if self.nodes else None

    def get_raw(self, name: str) -> Any:
        """Raw parsed value of an argument, or None if it was not matched."""
        argument = self.arguments.get(name)
        return argument.result if argument is not None else None

    def get_argument(self, name: str, expected_type: type[V]) -> V:
        """
        Raw parsed value of an argument that must be present.

        Raises:
            KeyError: If no argument with this name was matched
            TypeError: If the value is not of the expected type
        """
        if name not in self.arguments:
            raise KeyError(f"No such argument '{name}' exists on this command")
        result = self.arguments[name].result
        if not isinstance(result, expected_type):
            raise TypeError(
                f"Argument '{name}' is defined as {type(result).__name__}, "
                f"not {expected_type.__name__}"
            )
        return result

    def with_node(self, node: CommandNode, node_range: StringRange, value: Any) -> "CommandContext":
        arguments = dict(self.arguments)
        if isinstance(node, ArgumentCommandNode):
            arguments[node.name] = ParsedArgument(node_range, value)
        return CommandContext(
            source=self.source,
            input=self.input,
            root=self.root,
            arguments=arguments,
            nodes=[*self.nodes, ParsedCommandNode(node, node_range)],
            range=StringRange.encompassing(self.range, node_range),
        )

    @property
    def node_path(self) -> tuple[str, ...]:
        return tuple(parsed.node.usage_text for parsed in self.nodes)


@dataclass
class ParseResults:
    context: CommandContext
    reader: StringReader
    errors: dict[CommandNode, ArgumentParseError] = field(default_factory=dict)

    @property
    def complete(self) -> bool:
        return not self.reader.can_read()


class CommandDispatcher:
    """Holds a command tree and matches input lines against it."""

    def __init__(
        self,
        root: RootCommandNode | None = None,
        *,
        scope: Scheduler | None = None,
        sender_check: SenderCheck = default_sender_check,
    ):
        self.root = root if root is not None else RootCommandNode()
        self._scope = scope
        self.sender_check = sender_check

    @property
    def scope(self) -> Scheduler:
        return self._scope if self._scope is not None else get_default_scope()

    # -- registration -----------------------------------------------------------

    def command(self, name: str, *aliases: str, block: Block | None = None) -> CommandBuilder:
        """
        Declare a root command, optionally with aliases.

        Each alias becomes its own root literal mirroring the primary node
        once the primary's scope closes.

        Params:
            name: Primary command keyword
            aliases: Alternative keywords
            block: Optional callable applied to the builder, which is closed afterwards

        Returns:
            The builder for the primary command
        """

        def register_aliases(builder: CommandBuilder) -> None:
            for alias in aliases:
                self.register(_mirror(builder.node, alias))

        builder = CommandBuilder(
            LiteralCommandNode(name),
            scope=self.scope,
            sender_check=self.sender_check,
            on_close=register_aliases if aliases else None,
        )
        self.register(builder)
        if block is not None:
            with builder:
                block(builder)
        return builder

    def register(self, command: CommandBuilder | LiteralCommandNode) -> LiteralCommandNode:
        node = command.node if isinstance(command, CommandBuilder) else command
        if not isinstance(node, LiteralCommandNode):
            raise TypeError(f"Only literal nodes can be registered at the root, got {node!r}")
        self.root.add_child(node)
        logger.debug("Registered root command %r", node.literal)
        return node

    def register_all(
        self, commands: Iterable[CommandBuilder | LiteralCommandNode]
    ) -> list[LiteralCommandNode]:
        return [self.register(command) for command in commands]

    # -- matching -----------------------------------------------------------------

    def parse(self, command: str, source: Any) -> ParseResults:
        context = CommandContext(source=source, input=command, root=self.root)
        return self._parse_nodes(self.root, StringReader(command), context)

    def _parse_nodes(
        self, node: CommandNode, original_reader: StringReader, context: CommandContext
    ) -> ParseResults:
        errors: dict[CommandNode, ArgumentParseError] = {}
        best: ParseResults | None = None
        unbound: ParseResults | None = None
        start = original_reader.cursor

        for child in node.usable_children(context.source):
            reader = original_reader.copy()
            try:
                value = child.parse(reader)
                if reader.can_read() and reader.peek() != ARGUMENT_SEPARATOR:
                    raise ArgumentParseError(
                        child.usage_text,
                        reader.remaining,
                        "expected whitespace to end one argument",
                        reader.cursor,
                    )
            except ArgumentParseError as e:
                errors[child] = e
                continue

            child_context = context.with_node(child, StringRange(start, reader.cursor), value)
            if reader.can_read(2):
                reader.skip()
                results = self._parse_nodes(child, reader, child_context)
            else:
                results = ParseResults(child_context, reader)

            if results.complete:
                if results.context.chain is not None:
                    return results
                # Complete but not executable; a later sibling may still bind.
                if unbound is None:
                    unbound = results
                continue
            if best is None or results.reader.cursor > best.reader.cursor:
                best = results

        if unbound is not None:
            return unbound
        if best is not None:
            return best
        return ParseResults(context, original_reader, errors)

    def execute(self, command: str | ParseResults, source: Any = None) -> ChainResult:
        """
        Match an input line and run the handler chain of the matched node.

        Params:
            command: Input line, or the results of an earlier `parse`
            source: Command source; required when `command` is a string

        Returns:
            HANDLED or EXHAUSTED, as reported by the node's chain

        Raises:
            CommandSyntaxError: If the line does not match an executable node
        """
        results = self.parse(command, source) if isinstance(command, str) else command
        context = results.context
        location = ErrorContext(context.input, results.reader.cursor, context.node_path)

        if not results.complete:
            if not context.nodes:
                raise CommandSyntaxError("Unknown command", location)
            if results.errors:
                reason = next(iter(results.errors.values())).reason
                raise CommandSyntaxError(f"Incorrect argument for command: {reason}", location)
            raise CommandSyntaxError("Incorrect argument for command", location)

        chain = context.chain
        if chain is None:
            raise CommandSyntaxError("Unknown or incomplete command", location)
        return chain.run(context)

    # -- completion ------------------------------------------------------------

    def get_completion_suggestions(
        self, command: str, source: Any, cursor: int | None = None
    ) -> "Future[Suggestions]":
        """
        Collect completions for the input up to `cursor`.

        Params:
            command: Input line
            source: Command source; nodes it cannot use are not offered
            cursor: Position to complete at, defaults to the end of the line

        Returns:
            Future resolving to the merged suggestions of all candidate nodes
        """
        truncated = command if cursor is None else command[:cursor]
        context = CommandContext(source=source, input=truncated, root=self.root)
        parent, start, context = self._find_completion_point(
            self.root, StringReader(truncated), context
        )
        futures = [
            child.list_suggestions(context, SuggestionsBuilder(truncated, start))
            for child in parent.usable_children(source)
        ]
        return gather(truncated, futures)

    def _find_completion_point(
        self, node: CommandNode, reader: StringReader, context: CommandContext
    ) -> tuple[CommandNode, int, CommandContext]:
        start = reader.cursor
        for child in node.usable_children(context.source):
            probe = reader.copy()
            try:
                value = child.parse(probe)
            except ArgumentParseError:
                continue
            if probe.can_read() and probe.peek() == ARGUMENT_SEPARATOR:
                child_context = context.with_node(child, StringRange(start, probe.cursor), value)
                probe.skip()
                return self._find_completion_point(child, probe, child_context)
        return node, start, context

    # -- usage -------------------------------------------------------------------

    def get_all_usage(
        self, node: CommandNode, source: Any, restricted: bool = True
    ) -> list[str]:
        """
        List every executable path below a node, e.g. `give <amount>`.

        Params:
            node: Node to start from; its own name is not included
            source: Command source used to evaluate requirements
            restricted: If True, skip nodes the source cannot use

        Returns:
            Usage strings in declaration order
        """
        usage: list[str] = []
        for child in node.children:
            self._collect_usage(child, source, child.usage_text, restricted, usage)
        return usage

    def _collect_usage(
        self, node: CommandNode, source: Any, prefix: str, restricted: bool, usage: list[str]
    ) -> None:
        if restricted and not node.can_use(source):
            return
        if node.chain is not None:
            usage.append(prefix)
        for child in node.children:
            self._collect_usage(child, source, f"{prefix} {child.usage_text}", restricted, usage)

    def find_node(self, path: Iterable[str]) -> CommandNode | None:
        """Follow child names from the root; the first match wins at each level."""
        node: CommandNode = self.root
        for name in path:
            node = next((child for child in node.children if child.name == name), None)
            if node is None:
                return None
        return node


def _mirror(node: LiteralCommandNode, alias: str) -> LiteralCommandNode:
    mirror = LiteralCommandNode(alias, node.requirement)
    mirror.chain = node.chain
    mirror.children = list(node.children)
    return mirror


def command(name: str, *aliases: str, block: Block | None = None) -> CommandBuilder:
    """Declare a root command on the process-wide dispatcher."""
    return get_default_dispatcher().command(name, *aliases, block=block)
