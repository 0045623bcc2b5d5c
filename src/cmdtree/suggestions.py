"""Completion suggestions and the provider wrappers used by nodes.

Nodes store providers of the form `(ctx, builder) -> Future[Suggestions]`.
Callers write simpler providers that take the typed remainder and return
an iterable of strings; `from_iterable_provider` and `from_async_provider`
adapt them. Every provider result is delivered as a
`concurrent.futures.Future` so synchronous and asynchronous providers look
the same to the dispatcher.
"""

import threading
from collections.abc import Iterable, Iterator
from concurrent.futures import Future
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from cmdtree.core.types import (
        AsyncCompletionProvider,
        CompletionProvider,
        Scheduler,
        SuggestionProvider,
    )


@dataclass(frozen=True)
class StringRange:
    start: int
    end: int

    @classmethod
    def at(cls, pos: int) -> "StringRange":
        return cls(pos, pos)

    @classmethod
    def encompassing(cls, a: "StringRange", b: "StringRange") -> "StringRange":
        return cls(min(a.start, b.start), max(a.end, b.end))

    def get(self, text: str) -> str:
        return text[self.start : self.end]

    @property
    def is_empty(self) -> bool:
        return self.start == self.end


@dataclass(frozen=True)
class Suggestion:
    range: StringRange
    text: str

    def apply(self, text: str) -> str:
        """Return `text` with this suggestion's range replaced."""
        return text[: self.range.start] + self.text + text[self.range.end :]


@dataclass(frozen=True)
class Suggestions:
    range: StringRange
    suggestions: tuple[Suggestion, ...] = field(default_factory=tuple)

    @property
    def is_empty(self) -> bool:
        return not self.suggestions

    @property
    def texts(self) -> list[str]:
        return [s.text for s in self.suggestions]

    @classmethod
    def empty(cls) -> "Suggestions":
        return cls(StringRange.at(0))

    @classmethod
    def completed(cls, suggestions: "Suggestions") -> "Future[Suggestions]":
        future: Future[Suggestions] = Future()
        future.set_result(suggestions)
        return future

    @classmethod
    def create(cls, command: str, suggestions: Iterable[Suggestion]) -> "Suggestions":
        """Build one result from suggestions that may cover different ranges.

        All suggestions are widened to the common range so the caller can
        apply any of them the same way. Duplicates are dropped and the result
        is sorted case-insensitively.
        """
        suggestions = list(suggestions)
        if not suggestions:
            return cls.empty()
        start = min(s.range.start for s in suggestions)
        end = max(s.range.end for s in suggestions)
        common = StringRange(start, end)
        expanded = {}
        for s in suggestions:
            text = (
                command[start : s.range.start] + s.text + command[s.range.end : end]
            )
            expanded.setdefault(text, Suggestion(common, text))
        ordered = sorted(expanded.values(), key=lambda s: (s.text.lower(), s.text))
        return cls(common, tuple(ordered))

    @classmethod
    def merge(cls, command: str, results: Iterable["Suggestions"]) -> "Suggestions":
        results = [r for r in results if not r.is_empty]
        if not results:
            return cls.empty()
        if len(results) == 1:
            return results[0]
        return cls.create(command, (s for r in results for s in r.suggestions))


class SuggestionsBuilder:
    """Collects suggestions for the text between `start` and the end of input."""

    def __init__(self, input: str, start: int):
        self.input = input
        self.start = start
        self.remaining = input[start:]
        self.remaining_lower = self.remaining.lower()
        self._result: list[Suggestion] = []

    def suggest(self, text: str) -> "SuggestionsBuilder":
        if text == self.remaining:
            return self
        self._result.append(Suggestion(StringRange(self.start, len(self.input)), text))
        return self

    def suggest_all(self, texts: Iterable[str]) -> "SuggestionsBuilder":
        for text in texts:
            self.suggest(text)
        return self

    def build(self) -> Suggestions:
        return Suggestions.create(self.input, self._result)

    def build_future(self) -> "Future[Suggestions]":
        return Suggestions.completed(self.build())

    def restart(self) -> "SuggestionsBuilder":
        return SuggestionsBuilder(self.input, self.start)


def filter_prefix(candidates: Iterable[str], remaining: str) -> Iterator[str]:
    """Yield the candidates that start with `remaining`, ignoring case."""
    prefix = remaining.lower()
    for candidate in candidates:
        if candidate.lower().startswith(prefix):
            yield candidate


def from_iterable_provider(provider: "CompletionProvider") -> "SuggestionProvider":
    def suggestions(context, builder: SuggestionsBuilder) -> "Future[Suggestions]":
        builder.suggest_all(provider(context, builder.remaining))
        return builder.build_future()

    return suggestions


def from_async_provider(
    provider: "AsyncCompletionProvider", scope: "Scheduler"
) -> "SuggestionProvider":
    """Adapt an async provider; its result arrives through a future owned here.

    Whatever `scope.launch` returns is ignored, so any scheduler that merely
    runs the work will do. A provider failure completes the future
    exceptionally and is re-raised for the scheduler to report.
    """

    def suggestions(context, builder: SuggestionsBuilder) -> "Future[Suggestions]":
        future: Future[Suggestions] = Future()

        async def produce() -> None:
            try:
                builder.suggest_all(await provider(context, builder.remaining))
                future.set_result(builder.build())
            except Exception as e:
                future.set_exception(e)
                raise

        scope.launch(produce)
        return future

    return suggestions


def gather(command: str, futures: list["Future[Suggestions]"]) -> "Future[Suggestions]":
    """Merge provider futures into one future, without blocking.

    A provider that failed contributes nothing; the failure has already been
    reported by whichever scheduler ran it.
    """
    merged: Future[Suggestions] = Future()
    if not futures:
        merged.set_result(Suggestions.empty())
        return merged

    pending = len(futures)
    lock = threading.Lock()

    def on_done(_future: Future) -> None:
        nonlocal pending
        with lock:
            pending -= 1
            if pending:
                return
        results = [
            f.result() for f in futures if not f.cancelled() and f.exception() is None
        ]
        merged.set_result(Suggestions.merge(command, results))

    for future in futures:
        future.add_done_callback(on_done)
    return merged
