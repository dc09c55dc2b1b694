"""Errors raised or yielded while decoding pattern files.

Every error is a ``ParseError``.  Header problems are raised from a decoder's
constructor; problems in the pattern body are latched by the decoder and
returned on every later pull.
"""

from __future__ import annotations

from typing import Any


class ParseError(ValueError):
    pass


class InvalidHeader(ParseError):
    def __init__(self, line: str, reason: str = "invalid header line") -> None:
        super().__init__(f"{reason}: {line!r}")
        self.line = line


class UnencodablePattern(InvalidHeader):
    def __init__(self, code: str) -> None:
        super().__init__(code, "not encoded in extended wechsler format")


class MissingDimensions(ParseError):
    def __init__(self) -> None:
        super().__init__("missing 'x = ..., y = ...' header line")


class InvalidToken(ParseError):
    def __init__(self, row: int, column: int, char: str | None = None) -> None:
        what = "end of input" if char is None else repr(char)
        super().__init__(f"unexpected {what} at line {row}, column {column}")
        self.row = row
        self.column = column
        self.char = char


class InvalidNodeDefinition(ParseError):
    def __init__(self, row: int, line: str, reason: str = "invalid node line") -> None:
        super().__init__(f"{reason} at line {row}: {line!r}")
        self.row = row
        self.line = line


class InvalidNodeReference(ParseError):
    def __init__(self, node_id: int, ref: int) -> None:
        super().__init__(f"node {node_id} references undefined node {ref}")
        self.node_id = node_id
        self.ref = ref


class InvalidEncoding(ParseError):
    def __init__(self, row: int, reason: str) -> None:
        super().__init__(f"cannot decode line {row}: {reason}")
        self.row = row
        self.reason = reason


class UnterminatedPattern(ParseError):
    def __init__(self, row: int) -> None:
        super().__init__(f"input ended at line {row} before '!'")
        self.row = row


class OutOfBoundsCell(ParseError):
    def __init__(self, cell: Any, width: int, height: int) -> None:
        super().__init__(
            f"cell ({cell.x}, {cell.y}) lies outside the declared {width}x{height} box"
        )
        self.cell = cell
        self.width = width
        self.height = height


class AnomalousTrailingInput(ParseError):
    def __init__(self, row: int, text: str) -> None:
        super().__init__(f"unexpected input after '!' at line {row}: {text!r}")
        self.row = row
        self.text = text


class IncompleteRow(ParseError):
    def __init__(self, row: int, column: int, width: int) -> None:
        super().__init__(
            f"row {row} ends at column {column}, dead cells up to width {width} omitted"
        )
        self.row = row
        self.column = column
        self.width = width
