"""Decoder for Golly's Macrocell (``[M2]``) format.

A Macrocell file is a table of quadtree nodes, one per line, numbered from 1
in file order; id 0 is the empty node of any level.  A node is either an 8x8
leaf written as ``.``/``*``/``$`` text, a 2x2 multi-state leaf ``1 nw ne sw
se``, or an interior node ``level nw ne sw se`` whose children are earlier
ids.  The last node is the root.

Nodes are shared: a tiled pattern reuses the same child id from many
parents, so expanding the tree naively costs time exponential in its depth.
Each node is therefore expanded once into a tuple of cells relative to its
own top-left corner, cached by id, and translated whenever it is reused.
Nodes holding more than ``max_cached_cells`` cells are walked lazily
instead, so a huge root is never materialised.
"""

from __future__ import annotations

from collections import Counter
from collections.abc import Iterator
from dataclasses import dataclass
from typing import Union

from lifeformats.core.bits import LEAF_SIDE, leaf_bit, leaf_offsets
from lifeformats.core.cursor import Cursor
from lifeformats.core.errors import InvalidNodeDefinition, InvalidNodeReference
from lifeformats.core.header import read_macrocell_header
from lifeformats.core.iterator import PatternIterator
from lifeformats.core.types import (
    ALIVE_STATE,
    MAX_STATE,
    Cell,
    DecoderState,
    MacrocellHeader,
)
from lifeformats.io.source import Source
from lifeformats.utils.logger import Logger

EMPTY_ID = 0
LEAF_LEVEL = 3
DEFAULT_MAX_CACHED_CELLS = 1 << 16

# NW, NE, SW, SE in units of the child extent
QUADRANTS: tuple[tuple[int, int], ...] = ((0, 0), (1, 0), (0, 1), (1, 1))

LocalCells = tuple[tuple[int, int, int], ...]


@dataclass(frozen=True, slots=True)
class LeafNode:
    id: int
    bits: int
    level: int = LEAF_LEVEL


@dataclass(frozen=True, slots=True)
class StateLeaf:
    id: int
    states: tuple[int, int, int, int]
    level: int = 1


@dataclass(frozen=True, slots=True)
class InteriorNode:
    id: int
    level: int
    children: tuple[int, int, int, int]


QuadNode = Union[LeafNode, StateLeaf, InteriorNode]


def parse_leaf_bits(line: str) -> int | None:
    bits = 0
    x = 0
    y = 0
    for c in line:
        if c == ".":
            x += 1
        elif c == "*":
            if x >= LEAF_SIDE or y >= LEAF_SIDE:
                return None
            bits |= leaf_bit(x, y)
            x += 1
        elif c == "$":
            x = 0
            y += 1
        elif not c.isspace():
            return None
    return bits


def parse_node_line(line: str, node_id: int, row: int) -> QuadNode:
    text = line.strip()
    if text[:1] in (".", "*", "$"):
        bits = parse_leaf_bits(text)
        if bits is None:
            raise InvalidNodeDefinition(row, line)
        return LeafNode(node_id, bits)

    fields = text.split()
    if len(fields) != 5 or not all(f.isascii() and f.isdigit() for f in fields):
        raise InvalidNodeDefinition(row, line)
    level, a, b, c, d = (int(f) for f in fields)
    if level == 1:
        if max(a, b, c, d) > MAX_STATE:
            raise InvalidNodeDefinition(row, line, "state out of range")
        return StateLeaf(node_id, (a, b, c, d))
    if level < 2:
        raise InvalidNodeDefinition(row, line, "invalid node level")
    return InteriorNode(node_id, level, (a, b, c, d))


class QuadNodeTable:
    """Append-only arena of quadtree nodes indexed by id."""

    def __init__(self) -> None:
        self._nodes: list[QuadNode | None] = [None]

    def __len__(self) -> int:
        return len(self._nodes)

    def __getitem__(self, node_id: int) -> QuadNode | None:
        return self._nodes[node_id]

    def __contains__(self, node_id: object) -> bool:
        return isinstance(node_id, int) and 0 <= node_id < len(self._nodes)

    @property
    def next_id(self) -> int:
        return len(self._nodes)

    @property
    def root(self) -> int:
        return len(self._nodes) - 1

    def append(self, node: QuadNode, row: int = 0, line: str = "") -> int:
        if node.id != self.next_id:
            raise InvalidNodeDefinition(row, line, f"expected node id {self.next_id}")
        if isinstance(node, InteriorNode):
            for ref in node.children:
                if ref < 0 or ref >= node.id:
                    raise InvalidNodeReference(node.id, ref)
                child = self._nodes[ref]
                if child is not None and child.level != node.level - 1:
                    raise InvalidNodeDefinition(
                        row, line, f"child {ref} has level {child.level}"
                    )
        self._nodes.append(node)
        return node.id


class Macrocell(PatternIterator):
    def __init__(
        self,
        source: Source,
        *,
        max_cached_cells: int = DEFAULT_MAX_CACHED_CELLS,
        log: Logger | None = None,
    ) -> None:
        cursor = Cursor(source)
        super().__init__(cursor, log)
        self.state = DecoderState.HEADER
        self._header = read_macrocell_header(cursor)
        self.state = DecoderState.BUILDING
        self.max_cached_cells = int(max_cached_cells)
        self.table = QuadNodeTable()
        self.expansions: Counter[int] = Counter()
        self._cache: dict[int, LocalCells] = {EMPTY_ID: ()}
        self._population: dict[int, int] = {EMPTY_ID: 0}
        self._walk: Iterator[Cell] | None = None

    def header_data(self) -> MacrocellHeader:
        return self._header

    @property
    def rule(self) -> str | None:
        return self._header.rule

    @property
    def generation(self) -> int | None:
        return self._header.generation

    def build(self) -> QuadNodeTable:
        """Read every remaining node line into the table."""
        cur = self._cursor
        while True:
            line = cur.next_line()
            if line is None:
                break
            if line.strip() == "" or line.startswith("#"):
                continue
            node = parse_node_line(line, self.table.next_id, cur.row)
            self.table.append(node, cur.row, line)
        return self.table

    def population(self, node_id: int) -> int:
        n = self._population.get(node_id)
        if n is not None:
            return n
        node = self.table[node_id]
        if isinstance(node, LeafNode):
            n = bin(node.bits).count("1")
        elif isinstance(node, StateLeaf):
            n = sum(1 for s in node.states if s)
        else:
            n = sum(self.population(c) for c in node.children)
        self._population[node_id] = n
        return n

    def expand(self, node_id: int) -> LocalCells:
        """Cells of a node relative to its own top-left corner, cached by id."""
        cached = self._cache.get(node_id)
        if cached is not None:
            return cached
        self.expansions[node_id] += 1
        node = self.table[node_id]
        if isinstance(node, LeafNode):
            out = tuple((x, y, ALIVE_STATE) for x, y in leaf_offsets(node.bits))
        elif isinstance(node, StateLeaf):
            out = tuple(
                (qx, qy, s) for (qx, qy), s in zip(QUADRANTS, node.states) if s
            )
        else:
            half = 1 << (node.level - 1)
            parts: list[tuple[int, int, int]] = []
            for child, (qx, qy) in zip(node.children, QUADRANTS):
                if child == EMPTY_ID:
                    continue
                dx = qx * half
                dy = qy * half
                parts.extend((x + dx, y + dy, s) for x, y, s in self.expand(child))
            out = tuple(parts)
        self._cache[node_id] = out
        return out

    def cells_of(self, node_id: int, origin: tuple[int, int] = (0, 0)) -> Iterator[Cell]:
        """Pre-order (NW, NE, SW, SE) cells of a node placed at ``origin``."""
        if node_id == EMPTY_ID:
            return
        ox, oy = origin
        node = self.table[node_id]
        if (
            not isinstance(node, InteriorNode)
            or self.population(node_id) <= self.max_cached_cells
        ):
            for x, y, s in self.expand(node_id):
                yield Cell(ox + x, oy + y, s)
            return
        half = 1 << (node.level - 1)
        for child, (qx, qy) in zip(node.children, QUADRANTS):
            yield from self.cells_of(child, (ox + qx * half, oy + qy * half))

    def _advance(self) -> Cell | None:
        if self.state is DecoderState.BUILDING:
            self.build()
            self.state = DecoderState.EXPANDING
            self._walk = self.cells_of(self.table.root)
        return next(self._walk, None)
