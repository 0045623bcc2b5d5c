"""
Cursor-based reader over a single input line.

Value parsers consume from a `StringReader` so the dispatcher knows exactly
how much of the line each argument used.
"""

from cmdtree.exceptions import ArgumentParseError

ARGUMENT_SEPARATOR = " "

_WORD_EXTRA_CHARS = frozenset("_-.+")
_NUMBER_CHARS = frozenset("0123456789.-")


def is_allowed_in_word(c: str) -> bool:
    """Check if a character may appear in an unquoted word."""
    return c.isascii() and (c.isalnum() or c in _WORD_EXTRA_CHARS)


class StringReader:
    """Reads an input string from a movable cursor."""

    def __init__(self, text: str, cursor: int = 0):
        self.string = text
        self.cursor = cursor

    def copy(self) -> "StringReader":
        return StringReader(self.string, self.cursor)

    @property
    def remaining(self) -> str:
        return self.string[self.cursor :]

    @property
    def read(self) -> str:
        """Text already consumed."""
        return self.string[: self.cursor]

    def can_read(self, length: int = 1) -> bool:
        return self.cursor + length <= len(self.string)

    def peek(self, offset: int = 0) -> str:
        return self.string[self.cursor + offset]

    def next(self) -> str:
        c = self.string[self.cursor]
        self.cursor += 1
        return c

    def skip(self) -> None:
        self.cursor += 1

    def skip_whitespace(self) -> None:
        while self.can_read() and self.peek().isspace():
            self.skip()

    def read_unquoted_string(self) -> str:
        start = self.cursor
        while self.can_read() and is_allowed_in_word(self.peek()):
            self.skip()
        return self.string[start : self.cursor]

    def read_remaining(self) -> str:
        text = self.remaining
        self.cursor = len(self.string)
        return text

    def read_int(self) -> int:
        start = self.cursor
        token = self._read_number_token()
        if not token:
            raise ArgumentParseError("integer", token, "expected integer", start)
        try:
            return int(token)
        except ValueError:
            self.cursor = start
            raise ArgumentParseError("integer", token, "not a whole number", start) from None

    def read_float(self) -> float:
        start = self.cursor
        token = self._read_number_token()
        if not token:
            raise ArgumentParseError("float", token, "expected float", start)
        try:
            return float(token)
        except ValueError:
            self.cursor = start
            raise ArgumentParseError("float", token, "not a number", start) from None

    def read_boolean(self) -> bool:
        start = self.cursor
        token = self.read_unquoted_string()
        if token == "true":
            return True
        if token == "false":
            return False
        self.cursor = start
        raise ArgumentParseError("boolean", token, "expected 'true' or 'false'", start)

    def _read_number_token(self) -> str:
        start = self.cursor
        while self.can_read() and self.peek() in _NUMBER_CHARS:
            self.skip()
        return self.string[start : self.cursor]

    def __repr__(self) -> str:
        return f"StringReader({self.string!r}, cursor={self.cursor})"
