from __future__ import annotations

from pathlib import Path

from lifeformats.core.apgcode import ApgCode
from lifeformats.core.iterator import PatternIterator
from lifeformats.core.macrocell import DEFAULT_MAX_CACHED_CELLS, Macrocell
from lifeformats.core.plaintext import Plaintext
from lifeformats.core.rle import Rle
from lifeformats.io.source import Source
from lifeformats.utils.logger import Logger

FORMATS = ("rle", "mc", "cells", "apg")

_SUFFIXES = {
    ".rle": "rle",
    ".mc": "mc",
    ".cells": "cells",
}


def detect_format(path: Path) -> str:
    fmt = _SUFFIXES.get(path.suffix.lower())
    if fmt is None:
        raise ValueError(f"cannot tell pattern format from {path.name!r}")
    return fmt


def looks_like_apgcode(text: str) -> bool:
    return text[:2] in ("xs", "xp", "xq") and "_" in text and "\n" not in text


def decoder_for(
    source: Source,
    fmt: str,
    *,
    unknown_cells: bool = False,
    strict: bool = False,
    max_cached_cells: int = DEFAULT_MAX_CACHED_CELLS,
    log: Logger | None = None,
) -> PatternIterator:
    if fmt == "rle":
        return Rle(source, unknown_cells=unknown_cells, strict=strict, log=log)
    if fmt == "mc":
        return Macrocell(source, max_cached_cells=max_cached_cells, log=log)
    if fmt == "cells":
        return Plaintext(source, log=log)
    if fmt == "apg":
        if not isinstance(source, str):
            raise TypeError("apgcodes must be given as a string")
        return ApgCode(source, log=log)
    raise ValueError(f"unknown pattern format {fmt!r}")


def open_pattern(
    target: str | Path, fmt: str | None = None, **options: object
) -> PatternIterator:
    """Decoder for a pattern file, or for an apgcode given in place of a path.

    The file's full text is read up front; decoding stays lazy.
    """
    if isinstance(target, str) and (
        fmt == "apg"
        or (fmt is None and looks_like_apgcode(target) and not Path(target).exists())
    ):
        return decoder_for(target, "apg", **options)  # type: ignore[arg-type]
    path = Path(target)
    if fmt is None:
        fmt = detect_format(path)
    text = path.read_text(encoding="utf-8")
    return decoder_for(text, fmt, **options)  # type: ignore[arg-type]
