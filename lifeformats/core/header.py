from __future__ import annotations

import re

from lifeformats.core.cursor import Cursor
from lifeformats.core.errors import InvalidHeader, MissingDimensions
from lifeformats.core.types import CxrleData, HeaderData, MacrocellHeader

_HEADER_RE = re.compile(
    r"^x\s*=\s*(?P<x>\d+)\s*,\s*y\s*=\s*(?P<y>\d+)(?:\s*,\s*rule\s*=\s*(?P<rule>.*\S))?\s*$"
)
_CXRLE_RE = re.compile(
    r"(?:Pos\s*=\s*(?P<x>-?\d+)\s*,\s*(?P<y>-?\d+))|(?:Gen\s*=\s*(?P<gen>\d+))"
)
_RULE_RE = re.compile(r"^#R\s*(?P<rule>.*\S)\s*$")
_GEN_RE = re.compile(r"^#G\s*(?P<gen>\d+)\s*$")


def is_header_line(line: str) -> bool:
    return line.startswith("x ") or line.startswith("x=")


def parse_header_line(line: str) -> HeaderData | None:
    m = _HEADER_RE.match(line.strip())
    if m is None:
        return None
    return HeaderData(width=int(m["x"]), height=int(m["y"]), rule=m["rule"])


def parse_cxrle(line: str) -> CxrleData | None:
    if not line.startswith("#CXRLE"):
        return None
    pos: tuple[int, int] | None = None
    gen: int | None = None
    for m in _CXRLE_RE.finditer(line):
        if m["gen"] is not None:
            gen = int(m["gen"])
        else:
            pos = (int(m["x"]), int(m["y"]))
    return CxrleData(pos=pos, generation=gen)


def read_rle_header(
    cursor: Cursor, require_dimensions: bool = False
) -> tuple[HeaderData | None, CxrleData | None]:
    """Consume the leading comment, ``#CXRLE`` and ``x = ...`` lines.

    When a line appears more than once the last one wins.  Stops at the
    first body line, which is pushed back for the tokenizer.
    """
    header: HeaderData | None = None
    cxrle: CxrleData | None = None
    while True:
        line = cursor.next_line()
        if line is None:
            break
        if line.startswith("#CXRLE"):
            cxrle = parse_cxrle(line)
        elif is_header_line(line):
            header = parse_header_line(line)
            if header is None:
                raise InvalidHeader(line)
        elif line.startswith("#") or line.strip() == "":
            continue
        else:
            cursor.push_back()
            break
    if header is None and require_dimensions:
        raise MissingDimensions()
    return header, cxrle


def read_macrocell_header(cursor: Cursor) -> MacrocellHeader:
    rule: str | None = None
    gen: int | None = None
    first = True
    while True:
        line = cursor.next_line()
        if line is None:
            break
        if first and line.startswith("[M") and not line.startswith("[M2]"):
            raise InvalidHeader(line, "unsupported macrocell version")
        first = False
        if line.startswith("[M2]") or line.strip() == "":
            continue
        if line.startswith("#R"):
            m = _RULE_RE.match(line)
            if m is None:
                raise InvalidHeader(line)
            rule = m["rule"]
        elif line.startswith("#G"):
            m = _GEN_RE.match(line)
            if m is None:
                raise InvalidHeader(line)
            gen = int(m["gen"])
        elif line.startswith("#"):
            continue
        else:
            cursor.push_back()
            break
    return MacrocellHeader(rule=rule, generation=gen)
