from __future__ import annotations

import io
from collections.abc import Iterable, Iterator
from typing import IO, Union

Source = Union[str, bytes, bytearray, IO[str], IO[bytes], Iterable[str]]


def _decode(line: str | bytes, encoding: str) -> str:
    if isinstance(line, (bytes, bytearray)):
        return bytes(line).decode(encoding)
    return line


def iter_lines(source: Source, encoding: str = "utf-8") -> Iterator[str]:
    if isinstance(source, str):
        lines: Iterable[str | bytes] = io.StringIO(source)
    elif isinstance(source, (bytes, bytearray)):
        lines = io.BytesIO(bytes(source))
    elif isinstance(source, Iterable):
        lines = source
    else:
        raise TypeError(f"unsupported pattern source: {type(source).__name__}")
    for raw in lines:
        yield _decode(raw, encoding).rstrip("\r\n")
