"""
Tokenizers for the composite argument micro-grammars.

Two syntaxes are recognised inside a greedy argument, both as
whitespace-separated tokens in any order:

    -identifier:value     named pair, identifier chars [A-Za-z0-9_]
    -x  --word            flag

Anything else in the text is ignored, so unrelated words may be interleaved.
"""

from collections.abc import Iterator
from dataclasses import dataclass


def is_identifier_char(c: str) -> bool:
    return c.isascii() and (c.isalnum() or c == "_")


@dataclass(frozen=True)
class NamedToken:
    """One `-key:value` pair and the offset of its leading dash."""

    key: str
    value: str
    start: int


def iter_words(text: str) -> Iterator[tuple[int, str]]:
    """Yield `(offset, word)` for each whitespace-separated word."""
    i, length = 0, len(text)
    while i < length:
        while i < length and text[i].isspace():
            i += 1
        start = i
        while i < length and not text[i].isspace():
            i += 1
        if start < i:
            yield start, text[start:i]


def scan_named(word: str) -> tuple[str, str] | None:
    """Split a `-key:value` word, or return None if it is not one."""
    if len(word) < 4 or word[0] != "-":
        return None
    i = 1
    while i < len(word) and is_identifier_char(word[i]):
        i += 1
    if i == 1 or i >= len(word) - 1 or word[i] != ":":
        return None
    return word[1:i], word[i + 1 :]


def is_flag(word: str) -> bool:
    """Check if a word is a `-x` or `--word` flag."""
    body = word[2:] if word.startswith("--") else word[1:] if word.startswith("-") else ""
    return bool(body) and all(is_identifier_char(c) for c in body)


def iter_named_tokens(text: str) -> Iterator[NamedToken]:
    for start, word in iter_words(text):
        pair = scan_named(word)
        if pair is not None:
            yield NamedToken(key=pair[0], value=pair[1], start=start)


def iter_flags(text: str) -> Iterator[str]:
    for _, word in iter_words(text):
        if is_flag(word):
            yield word


def split_last_word(text: str) -> tuple[str, str]:
    """Split text into everything before the last word and the last word.

    A trailing space means the user started a new, empty word.
    """
    cut = max(text.rfind(" "), text.rfind("\t")) + 1
    return text[:cut], text[cut:]
