from __future__ import annotations

from collections.abc import Iterator

from lifeformats.core.errors import InvalidEncoding, ParseError
from lifeformats.io.source import Source, iter_lines


class Cursor:
    """Forward-only reader over the lines of a pattern source.

    ``row`` is the 1-based number of the current line.  ``column`` is the
    index of the next unread character, which is also the 1-based column of
    the character returned by the last ``next_char`` call.

    A single line can be pushed back so header readers can stop at the first
    body line without consuming it.  ``latched_error`` is set once by
    ``fail`` and never cleared.
    """

    def __init__(self, source: Source) -> None:
        self._lines = iter_lines(source)
        self._pushed: list[tuple[int, str]] = []
        self._read = 0
        self.line: str | None = None
        self.row = 0
        self.column = 0
        self.exhausted = False
        self.latched_error: ParseError | None = None

    def next_line(self) -> str | None:
        if self._pushed:
            self.row, self.line = self._pushed.pop()
        else:
            try:
                text = next(self._lines)
            except StopIteration:
                self.line = None
                self.exhausted = True
                return None
            except UnicodeDecodeError as e:
                raise InvalidEncoding(self._read + 1, e.reason) from e
            self._read += 1
            self.row = self._read
            self.line = text
        self.column = 0
        return self.line

    def push_back(self) -> None:
        if self.line is None:
            return
        self._pushed.append((self.row, self.line))
        self.line = None
        self.column = 0

    def next_char(self) -> str | None:
        if self.line is None or self.column >= len(self.line):
            return None
        c = self.line[self.column]
        self.column += 1
        return c

    def rest(self) -> str:
        if self.line is None:
            return ""
        text = self.line[self.column :]
        self.column = len(self.line)
        return text

    def fail(self, err: ParseError) -> ParseError:
        if self.latched_error is None:
            self.latched_error = err
        return self.latched_error

    def remaining(self) -> Iterator[str]:
        while self._pushed:
            yield self._pushed.pop()[1]
        yield from self._lines
