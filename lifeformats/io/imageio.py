from __future__ import annotations

from pathlib import Path

import numpy as np
from numpy.typing import NDArray
from PIL import Image

UNKNOWN_SHADE = 128


def grid_to_u8(grid: NDArray[np.int16]) -> NDArray[np.uint8]:
    g = grid.astype(np.int32, copy=False)
    shade = np.clip(255 - 8 * (g - 1), 64, 255)
    out = np.where(g > 0, shade, 0)
    out = np.where(g < 0, UNKNOWN_SHADE, out)
    return out.astype(np.uint8)


def save_grid(path: Path, grid: NDArray[np.int16], scale: int = 1) -> None:
    if grid.ndim != 2:
        raise ValueError("unsupported grid shape")
    if scale < 1:
        raise ValueError("scale must be >= 1")
    x = grid_to_u8(grid)
    if x.size == 0:
        x = np.zeros((1, 1), dtype=np.uint8)
    if scale > 1:
        x = np.repeat(np.repeat(x, scale, axis=0), scale, axis=1)
    Image.fromarray(x).save(path)
