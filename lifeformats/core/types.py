from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Final

Coordinates = tuple[int, int]

ALIVE_STATE: Final[int] = 1
UNKNOWN_STATE: Final[int] = -1
MAX_STATE: Final[int] = 255


@dataclass(frozen=True, slots=True)
class Cell:
    x: int
    y: int
    state: int = ALIVE_STATE

    @property
    def position(self) -> Coordinates:
        return (self.x, self.y)

    @property
    def unknown(self) -> bool:
        return self.state == UNKNOWN_STATE


@dataclass(frozen=True, slots=True)
class HeaderData:
    width: int
    height: int
    rule: str | None = None


@dataclass(frozen=True, slots=True)
class CxrleData:
    pos: Coordinates | None = None
    generation: int | None = None


@dataclass(frozen=True, slots=True)
class MacrocellHeader:
    rule: str | None = None
    generation: int | None = None


class Symbol(enum.Enum):
    DEAD = "dead"
    ALIVE = "alive"
    UNKNOWN = "unknown"
    END_OF_LINE = "end_of_line"
    END_OF_PATTERN = "end_of_pattern"


@dataclass(frozen=True, slots=True)
class Token:
    count: int
    symbol: Symbol
    state: int = ALIVE_STATE


class DecoderState(enum.Enum):
    HEADER = "header"
    BUILDING = "building"
    DECODING = "decoding"
    EXPANDING = "expanding"
    EXHAUSTED = "exhausted"
    FAILED = "failed"
