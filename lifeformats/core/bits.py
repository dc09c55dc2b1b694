from __future__ import annotations

from functools import lru_cache

import numpy as np

LEAF_SIDE = 8
STRIP_HEIGHT = 5


@lru_cache(maxsize=4096)
def leaf_offsets(bits: int) -> tuple[tuple[int, int], ...]:
    """Live cells of an 8x8 leaf, row-major.

    Bit ``(7 - y) * 8 + (7 - x)`` of ``bits`` is the cell at ``(x, y)``, so
    the most significant byte is the top row.
    """
    if bits == 0:
        return ()
    raw = np.array([bits], dtype=">u8").view(np.uint8)
    grid = np.unpackbits(raw).reshape(LEAF_SIDE, LEAF_SIDE)
    ys, xs = np.nonzero(grid)
    return tuple(zip(xs.tolist(), ys.tolist()))


def leaf_bit(x: int, y: int) -> int:
    return 1 << ((LEAF_SIDE - 1 - y) * LEAF_SIDE + (LEAF_SIDE - 1 - x))


def strip_offsets(strip: int) -> tuple[int, ...]:
    """Rows set in a 5-cell vertical strip; bit ``i`` is row ``i``."""
    return tuple(i for i in range(STRIP_HEIGHT) if (strip >> i) & 1)
