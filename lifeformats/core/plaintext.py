from __future__ import annotations

from lifeformats.core.cursor import Cursor
from lifeformats.core.errors import InvalidToken
from lifeformats.core.iterator import PatternIterator
from lifeformats.core.types import Cell
from lifeformats.io.source import Source
from lifeformats.utils.logger import Logger


class Plaintext(PatternIterator):
    """Cells of a ``.cells`` file: ``!`` comments, ``O``/``*`` live, ``.`` dead."""

    def __init__(self, source: Source, log: Logger | None = None) -> None:
        super().__init__(Cursor(source), log)
        self._x = 0
        self._y = -1

    def _advance(self) -> Cell | None:
        cur = self._cursor
        while True:
            c = cur.next_char()
            if c is None:
                line = cur.next_line()
                if line is None:
                    return None
                if line.startswith("!"):
                    cur.rest()
                else:
                    self._x = 0
                    self._y += 1
                continue
            if c == "O" or c == "*":
                cell = Cell(self._x, self._y)
                self._x += 1
                return cell
            if c == ".":
                self._x += 1
            elif not c.isspace():
                raise InvalidToken(cur.row, cur.column, c)
