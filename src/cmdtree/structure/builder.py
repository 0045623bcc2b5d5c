"""
Declarative construction of command trees.

`CommandBuilder` wraps one grammar node while it is being declared. Declaring
a child creates a new builder that inherits, by copy, the parent's current
handler list and argument mappers, so anything the parent adds afterwards is
invisible to that child. Scopes are closed by leaving a `with` block or by
returning from a `block` callable:

    with dispatcher.command("crate") as crate:
        crate.has_permission("crates.use")
        with crate.list_argument("type", lambda ctx: crates, lambda c: c.id) as kind:
            kind.executes(open_crate, sender=Player)
"""

import logging
from collections.abc import Callable, Iterable, Mapping, Sequence
from typing import Any

from cmdtree.core.tree_node import ArgumentCommandNode, CommandNode, LiteralCommandNode
from cmdtree.core.types import (
    AsyncCompletionProvider,
    AsyncHandlerBody,
    CompletionProvider,
    HandlerBody,
    Requirement,
    Scheduler,
    SenderCheck,
    always,
    default_sender_check,
)
from cmdtree.exceptions import ArgumentParseError, CommandBuildError
from cmdtree.execution.chain import ExecutionHandler, HandlerChain
from cmdtree.parsing import arguments
from cmdtree.parsing.arguments import ArgumentType
from cmdtree.parsing.composite import iter_flags, iter_named_tokens, iter_words, split_last_word
from cmdtree.parsing.entities import EntityResolver, EntitySelector, EntitySelectorArgument
from cmdtree.structure.registry import ArgumentMapperRegistry
from cmdtree.suggestions import filter_prefix, from_async_provider, from_iterable_provider

logger = logging.getLogger(__name__)

Block = Callable[["CommandBuilder"], Any]
EntityFilter = Callable[[Any, Any], bool]


def _validate_name(name: str) -> None:
    if not name:
        raise CommandBuildError(name, "name must not be empty")
    if any(c.isspace() for c in name):
        raise CommandBuildError(name, "name must not contain whitespace")


class CommandBuilder:
    """Builder for one node of a command tree and the scope below it."""

    def __init__(
        self,
        node: CommandNode,
        inherited_handlers: Iterable[ExecutionHandler] = (),
        argument_mappers: ArgumentMapperRegistry | None = None,
        *,
        scope: Scheduler | None = None,
        sender_check: SenderCheck = default_sender_check,
        on_close: Callable[["CommandBuilder"], None] | None = None,
    ):
        self.node = node
        self.inherited_handlers: list[ExecutionHandler] = list(inherited_handlers)
        self.argument_mappers = (
            argument_mappers.copy() if argument_mappers is not None else ArgumentMapperRegistry()
        )
        self.scope = scope
        self.sender_check = sender_check
        self._on_close = on_close
        self._closed = False

    # -- scope handling -------------------------------------------------

    @property
    def closed(self) -> bool:
        return self._closed

    def close(self) -> None:
        """Close this scope; further declarations on it are rejected."""
        if self._closed:
            return
        self._closed = True
        if self._on_close is not None:
            self._on_close(self)

    def __enter__(self) -> "CommandBuilder":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def _check_open(self, what: str) -> None:
        if self._closed:
            raise CommandBuildError(what, f"scope of '{self.node.name}' is already closed")

    def _require_scope(self) -> Scheduler:
        if self.scope is None:
            raise CommandBuildError(
                self.node.name, "asynchronous declarations need a scheduler scope"
            )
        return self.scope

    def _then(self, node: CommandNode, block: Block | None) -> "CommandBuilder":
        self._check_open(node.name)
        sub_builder = CommandBuilder(
            node,
            self.inherited_handlers,
            self.argument_mappers,
            scope=self.scope,
            sender_check=self.sender_check,
        )
        self.node.add_child(node)
        logger.debug("Declared %r under %r", node, self.node)
        if block is not None:
            with sub_builder:
                block(sub_builder)
        return sub_builder

    # -- children ---------------------------------------------------------

    def literal(self, name: str, block: Block | None = None) -> "CommandBuilder":
        """
        Declare a literal keyword child.

        Params:
            name: The keyword, without whitespace
            block: Optional callable applied to the child builder, which is
                closed afterwards

        Returns:
            The child builder
        """
        _validate_name(name)
        return self._then(LiteralCommandNode(name), block)

    def argument(
        self, name: str, argument_type: ArgumentType, block: Block | None = None
    ) -> "CommandBuilder":
        """
        Declare a typed argument child.

        Params:
            name: Argument identifier used for lookups in handlers
            argument_type: Value parser for the argument's token
            block: Optional callable applied to the child builder

        Returns:
            The child builder
        """
        _validate_name(name)
        return self._then(ArgumentCommandNode(name, argument_type), block)

    def string_argument(self, argument_id: str, block: Block | None = None) -> "CommandBuilder":
        return self.argument(argument_id, arguments.word(), block)

    def greedy_string_argument(
        self, argument_id: str, block: Block | None = None
    ) -> "CommandBuilder":
        return self.argument(argument_id, arguments.greedy_string(), block)

    def int_argument(
        self,
        argument_id: str,
        min_value: int = arguments.INT_MIN,
        max_value: int = arguments.INT_MAX,
        block: Block | None = None,
    ) -> "CommandBuilder":
        return self.argument(argument_id, arguments.integer(min_value, max_value), block)

    def float_argument(
        self,
        argument_id: str,
        min_value: float | None = None,
        max_value: float | None = None,
        block: Block | None = None,
    ) -> "CommandBuilder":
        bounds = {}
        if min_value is not None:
            bounds["min_value"] = min_value
        if max_value is not None:
            bounds["max_value"] = max_value
        return self.argument(argument_id, arguments.floating(**bounds), block)

    def bool_argument(self, argument_id: str, block: Block | None = None) -> "CommandBuilder":
        return self.argument(argument_id, arguments.boolean(), block)

    # -- composite arguments -------------------------------------------------

    def named_arguments(
        self,
        argument_id: str,
        options: Mapping[str, ArgumentType],
        block: Block | None = None,
    ) -> "CommandBuilder":
        """
        Declare a greedy argument holding `-key:value` pairs.

        The mapped value is a dict from key to the value parsed with that
        key's type. Unknown keys and values that fail to parse are dropped.

        Params:
            argument_id: Argument identifier
            options: Accepted keys and the type of each key's value
            block: Optional callable applied to the child builder

        Returns:
            The child builder
        """
        options = dict(options)

        def map_named(context) -> dict[str, Any]:
            text = context.get_raw(argument_id)
            found: dict[str, Any] = {}
            if not isinstance(text, str):
                return found
            for token in iter_named_tokens(text):
                value_type = options.get(token.key)
                if value_type is None:
                    logger.debug("Dropped unknown named argument -%s", token.key)
                    continue
                try:
                    found[token.key] = arguments.parse_value(value_type, token.value)
                except ArgumentParseError as e:
                    logger.debug("Dropped named argument -%s: %s", token.key, e)
            return found

        def suggest_named(context, remaining: str) -> Iterable[str]:
            head, last = split_last_word(remaining)
            present = {token.key for token in iter_named_tokens(head)}
            for key in options:
                prefix = f"-{key}:"
                if key not in present and prefix.lower().startswith(last.lower()):
                    yield head + prefix

        self._check_open(argument_id)
        self.argument_mappers.register(argument_id, map_named)
        sub_builder = self.greedy_string_argument(argument_id)
        sub_builder.suggests(suggest_named)
        return self._apply(sub_builder, block)

    def flags_argument(
        self,
        argument_id: str,
        allowed_flags: Sequence[str],
        block: Block | None = None,
    ) -> "CommandBuilder":
        """
        Declare a greedy argument holding `-x` / `--word` flags.

        The mapped value is a frozenset of the allowed flags that were typed.

        Params:
            argument_id: Argument identifier
            allowed_flags: Flags to keep, including their dashes
            block: Optional callable applied to the child builder

        Returns:
            The child builder
        """
        allowed = tuple(allowed_flags)

        def map_flags(context) -> frozenset[str]:
            text = context.get_raw(argument_id)
            if not isinstance(text, str):
                return frozenset()
            return frozenset(flag for flag in iter_flags(text) if flag in allowed)

        def suggest_flags(context, remaining: str) -> Iterable[str]:
            head, last = split_last_word(remaining)
            typed = {word.lower() for _, word in iter_words(head)}
            for flag in allowed:
                if flag.lower() not in typed and flag.lower().startswith(last.lower()):
                    yield head + flag

        self._check_open(argument_id)
        self.argument_mappers.register(argument_id, map_flags)
        sub_builder = self.greedy_string_argument(argument_id)
        sub_builder.suggests(suggest_flags)
        return self._apply(sub_builder, block)

    def list_argument(
        self,
        argument_id: str,
        values: Iterable[Any] | Callable[[Any], Iterable[Any]],
        mapper: Callable[[Any], str] = str,
        block: Block | None = None,
    ) -> "CommandBuilder":
        """
        Declare a word argument looked up among candidate values.

        Params:
            argument_id: Argument identifier
            values: Candidates, or a callable taking the command context and
                returning them; called on every lookup
            mapper: Renders a candidate as the word the user types
            block: Optional callable applied to the child builder

        Returns:
            The child builder
        """
        if callable(values):
            candidates = values
        else:
            fixed = tuple(values)

            def candidates(context):
                return fixed

        def map_listed(context) -> Any:
            raw = context.get_raw(argument_id)
            if raw is None:
                return None
            for item in candidates(context):
                if mapper(item) == raw:
                    return item
            return None

        def suggest_listed(context, remaining: str) -> Iterable[str]:
            return filter_prefix((mapper(item) for item in candidates(context)), remaining)

        self._check_open(argument_id)
        self.argument_mappers.register(argument_id, map_listed)
        sub_builder = self.string_argument(argument_id)
        sub_builder.suggests(suggest_listed)
        return self._apply(sub_builder, block)

    def entity_argument(
        self,
        argument_id: str,
        resolver: EntityResolver,
        block: Block | None = None,
        *,
        include_self: bool = True,
        filter: EntityFilter | None = None,
    ) -> "CommandBuilder":
        """
        Declare an entity selector that resolves to at most one entity.

        The mapped value is the first resolved entity if it passes the
        filter, None otherwise or if resolution fails.

        Params:
            argument_id: Argument identifier
            resolver: Application hook that resolves selectors and lists candidates
            block: Optional callable applied to the child builder
            include_self: If False, the sender itself is rejected
            filter: Optional `(context, entity) -> bool` predicate

        Returns:
            The child builder
        """

        def accepts(context, entity) -> bool:
            if not include_self and entity == context.source.sender:
                return False
            return filter is None or filter(context, entity)

        def map_entity(context) -> Any:
            selector = context.get_raw(argument_id)
            if not isinstance(selector, EntitySelector):
                return None
            try:
                entity = selector.resolve_first(context.source)
            except Exception:
                logger.debug("Could not resolve selector %r", selector.text, exc_info=True)
                return None
            if entity is None or not accepts(context, entity):
                return None
            return entity

        def suggest_entities(context, remaining: str) -> Iterable[str]:
            prefix = remaining.lower()
            for entity in resolver.candidates(context.source):
                name = resolver.name_of(entity)
                if name.lower().startswith(prefix) and accepts(context, entity):
                    yield name

        self._check_open(argument_id)
        self.argument_mappers.register(argument_id, map_entity)
        sub_builder = self.argument(argument_id, EntitySelectorArgument(resolver))
        sub_builder.suggests(suggest_entities)
        return self._apply(sub_builder, block)

    def _apply(self, sub_builder: "CommandBuilder", block: Block | None) -> "CommandBuilder":
        if block is not None:
            with sub_builder:
                block(sub_builder)
        return sub_builder

    # -- node properties ------------------------------------------------------

    def requires(self, predicate: Requirement) -> "CommandBuilder":
        """Narrow the node's access predicate; all predicates must pass."""
        self._check_open("requires")
        previous = self.node.requirement
        if previous is always:
            self.node.requirement = predicate
        else:
            self.node.requirement = lambda source: previous(source) and predicate(source)
        return self

    def has_permission(self, permission: str) -> "CommandBuilder":
        return self.requires(lambda source: source.sender.has_permission(permission))

    def suggests(self, provider: CompletionProvider) -> "CommandBuilder":
        """
        Replace the node's completion provider.

        Params:
            provider: `(context, remaining) -> iterable of str`; each string
                replaces the whole remaining text of this argument
        """
        self._check_open("suggests")
        if not isinstance(self.node, ArgumentCommandNode):
            logger.warning("Ignoring suggestion provider on literal node %r", self.node)
            return self
        self.node.suggestion_provider = from_iterable_provider(provider)
        return self

    def suggests_async(
        self, provider: AsyncCompletionProvider, scope: Scheduler | None = None
    ) -> "CommandBuilder":
        """Replace the node's completion provider with one run on a scheduler scope."""
        self._check_open("suggests_async")
        if not isinstance(self.node, ArgumentCommandNode):
            logger.warning("Ignoring suggestion provider on literal node %r", self.node)
            return self
        scope = scope if scope is not None else self._require_scope()
        self.node.suggestion_provider = from_async_provider(provider, scope)
        return self

    # -- execution ------------------------------------------------------------

    def executes(self, handler: HandlerBody | None = None, *, sender: type = object):
        """
        Append a handler to this node's chain.

        The handler runs only for senders of type `sender`; for any other
        sender it counts as not handled. Returning True stops the chain.
        Can be used as a decorator.

        Params:
            handler: `(ExecutionContext) -> bool`
            sender: Sender type the handler accepts

        Returns:
            The handler, unchanged
        """
        if handler is None:
            return lambda fn: self.executes(fn, sender=sender)

        self._check_open("executes")
        self.inherited_handlers.append(ExecutionHandler(handler, sender))
        self.rebind_execution()
        return handler

    def executes_async(self, handler: AsyncHandlerBody | None = None, *, sender: type = object):
        """
        Append a handler whose async body is launched on the builder's scope.

        The synchronous part always reports the invocation as handled; the
        outcome of the async body is not reported back. Can be used as a
        decorator.

        Params:
            handler: `async (ExecutionContext) -> Any`
            sender: Sender type the handler accepts

        Returns:
            The handler, unchanged
        """
        if handler is None:
            return lambda fn: self.executes_async(fn, sender=sender)

        self._check_open("executes_async")
        scope = self._require_scope()

        def launch(context) -> bool:
            async def run():
                return await handler(context)

            scope.launch(run)
            return True

        self.executes(launch, sender=sender)
        return handler

    def rebind_execution(self) -> HandlerChain:
        """Finalize this node's chain from the current handlers and mappers."""
        chain = HandlerChain(
            self.inherited_handlers,
            self.argument_mappers.snapshot(),
            self.sender_check,
        )
        self.node.chain = chain
        logger.debug("Bound %d handlers to %r", len(chain), self.node)
        return chain

    def __repr__(self) -> str:
        state = "closed" if self._closed else "open"
        return f"CommandBuilder({self.node!r}, {state})"


def literal(
    name: str,
    block: Block | None = None,
    *,
    scope: Scheduler | None = None,
    sender_check: SenderCheck = default_sender_check,
) -> CommandBuilder:
    """Create a builder for a detached root literal, for later registration."""
    _validate_name(name)
    builder = CommandBuilder(LiteralCommandNode(name), scope=scope, sender_check=sender_check)
    if block is not None:
        with builder:
            block(builder)
    return builder
