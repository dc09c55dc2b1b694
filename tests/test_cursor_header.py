from __future__ import annotations

import io

import pytest

from lifeformats.core.cursor import Cursor
from lifeformats.core.errors import InvalidHeader, InvalidToken, MissingDimensions
from lifeformats.core.header import (
    is_header_line,
    parse_cxrle,
    parse_header_line,
    read_macrocell_header,
    read_rle_header,
)
from lifeformats.core.types import CxrleData, HeaderData, MacrocellHeader


@pytest.mark.parametrize(
    "source",
    [
        "ab\r\ncd\n",
        b"ab\ncd",
        io.StringIO("ab\ncd\n"),
        io.BytesIO(b"ab\r\ncd"),
        ["ab\n", "cd"],
    ],
    ids=["str", "bytes", "text-file", "binary-file", "lines"],
)
def test_cursor_accepts_sources(source) -> None:
    cur = Cursor(source)
    assert cur.next_line() == "ab"
    assert cur.row == 1
    assert cur.next_line() == "cd"
    assert cur.row == 2
    assert cur.next_line() is None
    assert cur.exhausted


def test_cursor_rejects_unknown_source() -> None:
    with pytest.raises(TypeError):
        Cursor(42).next_line()


def test_cursor_chars_and_columns() -> None:
    cur = Cursor("xy")
    cur.next_line()
    assert cur.next_char() == "x"
    assert cur.column == 1
    assert cur.next_char() == "y"
    assert cur.column == 2
    assert cur.next_char() is None
    assert cur.rest() == ""


def test_cursor_push_back_restores_row() -> None:
    cur = Cursor("one\ntwo\nthree")
    cur.next_line()
    cur.next_line()
    cur.push_back()
    assert cur.next_line() == "two"
    assert cur.row == 2
    cur.push_back()
    assert list(cur.remaining()) == ["two", "three"]


def test_cursor_latches_first_error() -> None:
    cur = Cursor("")
    first = InvalidToken(1, 1, "a")
    assert cur.fail(first) is first
    assert cur.fail(InvalidToken(2, 2, "b")) is first
    assert cur.latched_error is first


def test_header_line_parsing() -> None:
    assert is_header_line("x = 1, y = 2")
    assert is_header_line("x=1,y=2")
    assert not is_header_line("xq4_153")
    assert parse_header_line("x=1,y=2") == HeaderData(1, 2)
    assert parse_header_line("x = 3, y = 4, rule = B36/S23 ") == HeaderData(3, 4, "B36/S23")
    assert parse_header_line("x = 3, y = four") is None


def test_cxrle_parsing() -> None:
    assert parse_cxrle("#CXRLE Pos=-3,7 Gen=12") == CxrleData((-3, 7), 12)
    assert parse_cxrle("#CXRLE Gen=5") == CxrleData(None, 5)
    assert parse_cxrle("#C not cxrle") is None


def test_read_rle_header_stops_at_body() -> None:
    cur = Cursor("#N name\n\n#CXRLE Pos=1,2\nx = 3, y = 3\nbo$2bo$3o!")
    header, cxrle = read_rle_header(cur)
    assert header == HeaderData(3, 3)
    assert cxrle == CxrleData((1, 2), None)
    assert cur.next_line() == "bo$2bo$3o!"
    assert cur.row == 5


def test_read_rle_header_optional_unless_required() -> None:
    assert read_rle_header(Cursor("o!")) == (None, None)
    with pytest.raises(MissingDimensions):
        read_rle_header(Cursor("o!"), require_dimensions=True)
    with pytest.raises(InvalidHeader):
        read_rle_header(Cursor("x = 1, z = 2\no!"))


def test_read_macrocell_header() -> None:
    cur = Cursor("[M2] (golly 4.2)\n#R B3/S23\n#G 77\n#C comment\n*$")
    assert read_macrocell_header(cur) == MacrocellHeader("B3/S23", 77)
    assert cur.next_line() == "*$"
    assert read_macrocell_header(Cursor("")) == MacrocellHeader()
