from __future__ import annotations

from collections.abc import Iterable
from itertools import islice

import numpy as np
from numpy.typing import NDArray

from lifeformats.core.types import Cell


def to_array(cells: Iterable[Cell], limit: int | None = None) -> NDArray[np.int64]:
    """Stack cells into an ``(n, 3)`` array of ``x, y, state`` rows.

    With ``limit`` only the first cells are pulled, so the rest of the input
    is never read.
    """
    it = cells if limit is None else islice(cells, int(limit))
    rows = [(c.x, c.y, c.state) for c in it]
    if not rows:
        return np.zeros((0, 3), dtype=np.int64)
    return np.asarray(rows, dtype=np.int64)


def bounding_box(arr: NDArray[np.int64]) -> tuple[int, int, int, int] | None:
    if arr.shape[0] == 0:
        return None
    x0 = int(arr[:, 0].min())
    y0 = int(arr[:, 1].min())
    x1 = int(arr[:, 0].max())
    y1 = int(arr[:, 1].max())
    return x0, y0, x1 - x0 + 1, y1 - y0 + 1


def to_grid(arr: NDArray[np.int64]) -> tuple[NDArray[np.int16], tuple[int, int]]:
    """Dense ``grid[y, x] = state`` array and the coordinates of its corner."""
    box = bounding_box(arr)
    if box is None:
        return np.zeros((0, 0), dtype=np.int16), (0, 0)
    x0, y0, w, h = box
    grid = np.zeros((h, w), dtype=np.int16)
    grid[arr[:, 1] - y0, arr[:, 0] - x0] = arr[:, 2]
    return grid, (x0, y0)
