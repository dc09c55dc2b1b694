"""Decoder for Golly's extended RLE format.

The body is a stream of ``<count><symbol>`` tokens.  ``b``/``.`` are dead
cells, ``o`` and ``A``..``X`` (optionally prefixed by ``p``..``y``) are live
cells of state 1..255, ``$`` ends a row and ``!`` ends the pattern.  With
``unknown_cells`` the ``?`` symbol marks cells of unknown state; in that
variant every row must be written out to the declared width.
"""

from __future__ import annotations

from lifeformats.core.cursor import Cursor
from lifeformats.core.errors import (
    AnomalousTrailingInput,
    IncompleteRow,
    InvalidToken,
    OutOfBoundsCell,
    UnterminatedPattern,
)
from lifeformats.core.header import is_header_line, read_rle_header
from lifeformats.core.iterator import PatternIterator
from lifeformats.core.types import (
    ALIVE_STATE,
    MAX_STATE,
    UNKNOWN_STATE,
    Cell,
    CxrleData,
    DecoderState,
    HeaderData,
    Symbol,
    Token,
)
from lifeformats.io.source import Source
from lifeformats.utils.logger import Logger

_DIGITS = "0123456789"
_SIMPLE = {
    "b": Symbol.DEAD,
    ".": Symbol.DEAD,
    "o": Symbol.ALIVE,
    "$": Symbol.END_OF_LINE,
    "!": Symbol.END_OF_PATTERN,
}


def _state_of(prefix: str | None, letter: str) -> int:
    base = 0 if prefix is None else 24 * (ord(prefix) - ord("o"))
    return base + ord(letter) - ord("A") + 1


class RunLengthTokenizer:
    def __init__(self, cursor: Cursor, unknown_cells: bool = False) -> None:
        self._cursor = cursor
        self._unknown = unknown_cells

    def __iter__(self):
        return self

    def __next__(self) -> Token:
        tok = self.next_token()
        if tok is None:
            raise StopIteration
        return tok

    def next_token(self) -> Token | None:
        cur = self._cursor
        count: int | None = None
        prefix: str | None = None
        while True:
            c = cur.next_char()
            if c is None:
                if self._next_body_line():
                    continue
                if count is not None or prefix is not None:
                    raise InvalidToken(cur.row, cur.column + 1)
                return None
            if c.isspace():
                continue
            if c in _DIGITS:
                if prefix is not None:
                    raise InvalidToken(cur.row, cur.column, c)
                count = (count or 0) * 10 + int(c)
                continue
            if count == 0:
                raise InvalidToken(cur.row, cur.column, c)
            n = 1 if count is None else count

            if prefix is not None or "A" <= c <= "X":
                if not "A" <= c <= "X":
                    raise InvalidToken(cur.row, cur.column, c)
                state = _state_of(prefix, c)
                if state > MAX_STATE:
                    raise InvalidToken(cur.row, cur.column, c)
                return Token(n, Symbol.ALIVE, state)
            if "p" <= c <= "y":
                prefix = c
                continue
            sym = _SIMPLE.get(c)
            if sym is None and c == "?" and self._unknown:
                sym = Symbol.UNKNOWN
            if sym is None:
                raise InvalidToken(cur.row, cur.column, c)
            return Token(n, sym, UNKNOWN_STATE if sym is Symbol.UNKNOWN else ALIVE_STATE)

    def finish(self) -> None:
        """Check what follows ``!``.

        The rest of the line must be blank, and so must every following
        line up to the end of input or the next header line (``x = ...`` or
        ``#CXRLE``), comments aside.  That header line starts another pattern
        and is left unread for ``Rle.remains``.
        """
        cur = self._cursor
        rest = cur.rest().strip()
        if rest:
            raise AnomalousTrailingInput(cur.row, rest)
        while True:
            line = cur.next_line()
            if line is None:
                return
            if line.startswith("#CXRLE") or is_header_line(line):
                cur.push_back()
                return
            if line.strip() == "" or line.startswith("#"):
                continue
            raise AnomalousTrailingInput(cur.row, line)

    def _next_body_line(self) -> bool:
        while True:
            line = self._cursor.next_line()
            if line is None:
                return False
            if line.startswith("#") or is_header_line(line):
                continue
            return True


class CellStream:
    """Turns run-length tokens into cells, tracking the row/column cursor."""

    def __init__(
        self,
        tokens: RunLengthTokenizer,
        cursor: Cursor,
        header: HeaderData | None = None,
        origin: tuple[int, int] = (0, 0),
        unknown_cells: bool = False,
    ) -> None:
        self._tokens = tokens
        self._cursor = cursor
        self._header = header
        self._x0, self._y0 = origin
        self._unknown = unknown_cells
        self.x, self.y = origin
        self._run = 0
        self._state = ALIVE_STATE

    def next_cell(self) -> Cell | None:
        if self._run > 0:
            return self._emit()
        while True:
            tok = self._tokens.next_token()
            if tok is None:
                raise UnterminatedPattern(self._cursor.row)
            if tok.symbol is Symbol.DEAD:
                self.x += tok.count
            elif tok.symbol is Symbol.ALIVE or tok.symbol is Symbol.UNKNOWN:
                self._run = tok.count
                self._state = tok.state
                return self._emit()
            elif tok.symbol is Symbol.END_OF_LINE:
                self._end_row(tok.count)
                self.x = self._x0
                self.y += tok.count
            else:
                self._end_row(None)
                self._tokens.finish()
                return None

    def _emit(self) -> Cell:
        cell = Cell(self.x, self.y, self._state)
        self.x += 1
        self._run -= 1
        return cell

    def _end_row(self, count: int | None) -> None:
        if not self._unknown or self._header is None:
            return
        width = self._header.width
        row = self.y - self._y0
        column = self.x - self._x0
        if count is None:
            # a trailing empty row before '!' is not a row
            if 0 < column < width:
                raise IncompleteRow(row, column, width)
            return
        if column < width:
            raise IncompleteRow(row, column, width)
        if count > 1 and width > 0:
            raise IncompleteRow(row + 1, 0, width)


class Rle(PatternIterator):
    """Lazy iterator over the live cells of an RLE pattern.

    >>> glider = Rle("x = 3, y = 3, rule = B3/S23\\nbob$2bo$3o!")
    >>> [c.position for c in glider]
    [(1, 0), (2, 1), (0, 2), (1, 2), (2, 2)]

    ``strict`` makes the ``x = ..., y = ...`` line mandatory; the
    unknown-cell variant always requires it.  Cells outside the declared
    box are still yielded, and the next pull reports ``OutOfBoundsCell``.
    """

    def __init__(
        self,
        source: Source,
        *,
        unknown_cells: bool = False,
        strict: bool = False,
        log: Logger | None = None,
    ) -> None:
        cursor = Cursor(source)
        super().__init__(cursor, log)
        self.unknown_cells = bool(unknown_cells)
        self.strict = bool(strict)
        self._header, self._cxrle = read_rle_header(
            cursor, require_dimensions=self.strict or self.unknown_cells
        )
        origin = (0, 0)
        if self._cxrle is not None and self._cxrle.pos is not None:
            origin = self._cxrle.pos
        self.origin = origin
        self._has_body = not cursor.exhausted
        self._tokens = RunLengthTokenizer(cursor, self.unknown_cells)
        self._cells = CellStream(
            self._tokens, cursor, self._header, origin, self.unknown_cells
        )

    def header_data(self) -> HeaderData | None:
        return self._header

    def cxrle_data(self) -> CxrleData | None:
        return self._cxrle

    def remains(self) -> Rle:
        """Parse the unread lines as the next RLE pattern in the same input.

        Only valid once this pattern has been read to its clean end.
        """
        if self.state is not DecoderState.EXHAUSTED:
            raise ValueError("current pattern is not fully decoded")
        return Rle(
            self._cursor.remaining(),
            unknown_cells=self.unknown_cells,
            strict=self.strict,
            log=self._log,
        )

    def try_remains(self) -> Rle | None:
        rle = self.remains()
        return rle if rle._has_body else None

    def _advance(self) -> Cell | None:
        cell = self._cells.next_cell()
        if cell is not None and self._header is not None:
            w = self._header.width
            h = self._header.height
            rx = cell.x - self.origin[0]
            ry = cell.y - self.origin[1]
            if not (0 <= rx < w and 0 <= ry < h):
                self._defer(OutOfBoundsCell(cell, w, h))
        return cell
