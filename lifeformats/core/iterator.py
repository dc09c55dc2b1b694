"""The iteration contract shared by every format decoder.

Decoders are lazy: nothing past the header is read until a cell is pulled,
and a caller may stop pulling at any time without the rest of the input
being read or validated.

Errors are sticky.  The first fault found in the body moves the decoder to
``DecoderState.FAILED``; from then on every pull returns (or raises) that
same error and no further input is consumed.  A clean end is reported as
``None`` / ``StopIteration``, so "finished" and "stopped on an error" are
always distinguishable.
"""

from __future__ import annotations

from collections.abc import Iterator
from typing import Any

from lifeformats.core.cursor import Cursor
from lifeformats.core.errors import ParseError
from lifeformats.core.types import Cell, DecoderState
from lifeformats.utils.logger import Logger


class PatternIterator:
    def __init__(self, cursor: Cursor, log: Logger | None = None) -> None:
        self._cursor = cursor
        self._log = log
        self._pending: ParseError | None = None
        self.state = DecoderState.DECODING

    def header_data(self) -> Any:
        return None

    def __iter__(self) -> Iterator[Cell]:
        return self

    def __next__(self) -> Cell:
        r = self.next_result()
        if r is None:
            raise StopIteration
        if isinstance(r, ParseError):
            raise r
        return r

    def next_result(self) -> Cell | ParseError | None:
        if self._cursor.latched_error is not None:
            return self._cursor.latched_error
        if self.state is DecoderState.EXHAUSTED:
            return None
        if self._pending is not None:
            return self._fail(self._pending)
        try:
            cell = self._advance()
        except ParseError as e:
            return self._fail(e)
        if cell is None:
            self.state = DecoderState.EXHAUSTED
        return cell

    def results(self) -> Iterator[Cell | ParseError]:
        while True:
            r = self.next_result()
            if r is None:
                return
            yield r
            if isinstance(r, ParseError):
                return

    def _defer(self, err: ParseError) -> None:
        # reported on the next pull, after the cell being returned now
        if self._pending is None:
            self._pending = err

    def _fail(self, err: ParseError) -> ParseError:
        self.state = DecoderState.FAILED
        latched = self._cursor.fail(err)
        if self._log is not None:
            self._log.warning(f"{type(self).__name__}: {latched}")
        return latched

    def _advance(self) -> Cell | None:
        raise NotImplementedError
