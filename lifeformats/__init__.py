from __future__ import annotations

from lifeformats.core.apgcode import ApgCode, PatternType, Wechsler
from lifeformats.core.errors import (
    AnomalousTrailingInput,
    IncompleteRow,
    InvalidEncoding,
    InvalidHeader,
    InvalidNodeDefinition,
    InvalidNodeReference,
    InvalidToken,
    MissingDimensions,
    OutOfBoundsCell,
    ParseError,
    UnencodablePattern,
    UnterminatedPattern,
)
from lifeformats.core.iterator import PatternIterator
from lifeformats.core.macrocell import Macrocell, QuadNodeTable
from lifeformats.core.plaintext import Plaintext
from lifeformats.core.rle import Rle
from lifeformats.core.types import Cell, CxrleData, HeaderData, MacrocellHeader
from lifeformats.io.patterns import open_pattern

__all__ = [
    "AnomalousTrailingInput",
    "ApgCode",
    "Cell",
    "CxrleData",
    "HeaderData",
    "IncompleteRow",
    "InvalidEncoding",
    "InvalidHeader",
    "InvalidNodeDefinition",
    "InvalidNodeReference",
    "InvalidToken",
    "Macrocell",
    "MacrocellHeader",
    "MissingDimensions",
    "OutOfBoundsCell",
    "ParseError",
    "PatternIterator",
    "PatternType",
    "Plaintext",
    "QuadNodeTable",
    "Rle",
    "UnencodablePattern",
    "UnterminatedPattern",
    "Wechsler",
    "open_pattern",
]
