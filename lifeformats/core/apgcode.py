"""Decoders for apgcodes and the Extended Wechsler format they embed.

Each character of an Extended Wechsler string is a vertical strip of 5
cells: ``0``..``9`` and ``a``..``v`` give the strip's bits (bit ``i`` is row
``i``), ``w`` and ``x`` skip 2 and 3 empty strips, ``y<c>`` skips ``4 + c``
strips and ``z`` starts the next band of 5 rows.
"""

from __future__ import annotations

import enum

from lifeformats.core.bits import STRIP_HEIGHT, strip_offsets
from lifeformats.core.cursor import Cursor
from lifeformats.core.errors import InvalidToken, UnencodablePattern
from lifeformats.core.iterator import PatternIterator
from lifeformats.core.types import Cell
from lifeformats.utils.logger import Logger

_STRIPS = "0123456789abcdefghijklmnopqrstuv"
_SKIPS = "0123456789abcdefghijklmnopqrstuvwxyz"


class PatternType(enum.Enum):
    STILL_LIFE = "xs"
    OSCILLATOR = "xp"
    SPACESHIP = "xq"


class Wechsler(PatternIterator):
    def __init__(self, text: str, log: Logger | None = None) -> None:
        cursor = Cursor([text.strip()])
        super().__init__(cursor, log)
        cursor.next_line()
        self._x = 0
        self._y = 0
        self._strip_x = 0
        self._strip: tuple[int, ...] = ()
        self._i = 0

    def _advance(self) -> Cell | None:
        cur = self._cursor
        while self._i >= len(self._strip):
            c = cur.next_char()
            if c is None:
                return None
            idx = _STRIPS.find(c)
            if idx >= 0:
                self._strip = strip_offsets(idx)
                self._i = 0
                self._strip_x = self._x
                self._x += 1
            elif c == "w":
                self._x += 2
            elif c == "x":
                self._x += 3
            elif c == "y":
                n = cur.next_char()
                if n is None:
                    raise InvalidToken(cur.row, cur.column + 1)
                k = _SKIPS.find(n)
                if k < 0:
                    raise InvalidToken(cur.row, cur.column, n)
                self._x += 4 + k
            elif c == "z":
                self._x = 0
                self._y += STRIP_HEIGHT
            else:
                raise InvalidToken(cur.row, cur.column, c)
        dy = self._strip[self._i]
        self._i += 1
        return Cell(self._strip_x, self._y + dy)


class ApgCode(Wechsler):
    """Cells of an apgcode such as ``xq4_153``.

    Only still lifes (``xs``), oscillators (``xp``) and spaceships (``xq``)
    are encoded in Extended Wechsler format; other codes are rejected with
    ``UnencodablePattern``.
    """

    def __init__(self, code: str, log: Logger | None = None) -> None:
        prefix, sep, rest = code.strip().partition("_")
        digits = prefix[2:]
        if not sep or not (digits.isascii() and digits.isdigit()):
            raise UnencodablePattern(code)
        try:
            kind = PatternType(prefix[:2])
        except ValueError:
            raise UnencodablePattern(code) from None
        self.code = code
        self.pattern_type = kind
        self.period = 1 if kind is PatternType.STILL_LIFE else int(digits)
        super().__init__(rest.split("_", 1)[0], log)
