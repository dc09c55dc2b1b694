from __future__ import annotations

from typing import Any

import numpy as np
import pytest
from conftest import BenchItem
from numpy.typing import NDArray

from lifeformats.core.iterator import PatternIterator
from lifeformats.io.patterns import decoder_for
from lifeformats.utils.grid import to_array

_WECHSLER = "0123456789abcdefghijklmnopqrstuv"


def _soup(size: int, seed: int, density: float = 0.35) -> NDArray[np.bool_]:
    rng = np.random.default_rng(seed)
    return rng.random((size, size)) < density


def _rle_row(row: NDArray[np.bool_]) -> str:
    parts: list[str] = []
    i = 0
    n = row.shape[0]
    while i < n:
        j = i
        while j < n and row[j] == row[i]:
            j += 1
        run = j - i
        tag = "o" if row[i] else "b"
        parts.append(f"{run}{tag}" if run > 1 else tag)
        i = j
    return "".join(parts)


def _make_rle(size: int, seed: int, pattern: str) -> str:
    grid = _soup(size, seed, 0.35 if pattern == "soup" else 0.9)
    lines = [f"x = {size}, y = {size}, rule = B3/S23"]
    lines.append("$".join(_rle_row(r) for r in grid) + "!")
    return "\n".join(lines)


def _make_plaintext(size: int, seed: int) -> str:
    grid = _soup(size, seed)
    return "\n".join("".join("O" if v else "." for v in r) for r in grid)


def _make_wechsler(size: int, seed: int) -> str:
    grid = _soup(size - size % 5, seed)
    bands: list[str] = []
    for y in range(0, grid.shape[0], 5):
        band = grid[y : y + 5]
        weights = (band * (1 << np.arange(5))[:, None]).sum(axis=0)
        bands.append("".join(_WECHSLER[int(w)] for w in weights))
    return "xs0_" + "z".join(bands)


def _make_tiled_macrocell(size: int) -> str:
    lines = ["[M2]", "#R B3/S23", ".*$..*$***$"]
    level = 4
    while (1 << level) <= size:
        child = level - 3
        lines.append(f"{level} {child} {child} {child} {child}")
        level += 1
    return "\n".join(lines)


def _source(item: BenchItem) -> str:
    if item.fmt == "rle":
        return _make_rle(item.size, item.seed, item.pattern)
    if item.fmt == "cells":
        return _make_plaintext(item.size, item.seed)
    if item.fmt == "apg":
        return _make_wechsler(item.size, item.seed)
    if item.fmt == "mc":
        return _make_tiled_macrocell(item.size)
    raise ValueError("bad format")


def _decoder(item: BenchItem, text: str) -> PatternIterator:
    kw = dict(item.decode_kwargs)
    if item.fmt != "rle":
        kw.pop("unknown_cells", None)
        kw.pop("strict", None)
    if item.fmt != "mc":
        kw.pop("max_cached_cells", None)
    return decoder_for(text, item.fmt, **kw)


@pytest.fixture(scope="session")
def bench_rounds(pytestconfig: pytest.Config) -> int:
    return int(pytestconfig.getoption("--bench-rounds"))


@pytest.fixture(scope="session")
def bench_warmup_rounds(pytestconfig: pytest.Config) -> int:
    return int(pytestconfig.getoption("--bench-warmup-rounds"))


def test_bench_decode_speed(
    benchmark: Any,
    bench_item: BenchItem,
    bench_rounds: int,
    bench_warmup_rounds: int,
) -> None:
    text = _source(bench_item)
    population = sum(1 for _ in _decoder(bench_item, text))

    benchmark.extra_info["source_bytes"] = len(text.encode("utf-8"))
    benchmark.extra_info["population"] = int(population)

    def run() -> int:
        return sum(1 for _ in _decoder(bench_item, text))

    n = benchmark.pedantic(
        run, rounds=bench_rounds, warmup_rounds=bench_warmup_rounds, iterations=1
    )
    assert n == population


def test_bench_decode_to_array_speed(
    benchmark: Any,
    bench_item: BenchItem,
    bench_rounds: int,
    bench_warmup_rounds: int,
) -> None:
    text = _source(bench_item)

    def run() -> object:
        return to_array(_decoder(bench_item, text))

    arr = benchmark.pedantic(
        run, rounds=bench_rounds, warmup_rounds=bench_warmup_rounds, iterations=1
    )
    benchmark.extra_info["population"] = int(arr.shape[0])


def test_bench_first_cell_latency(
    benchmark: Any,
    bench_item: BenchItem,
    bench_rounds: int,
    bench_warmup_rounds: int,
) -> None:
    text = _source(bench_item)

    def run() -> object:
        return next(iter(_decoder(bench_item, text)), None)

    benchmark.pedantic(
        run, rounds=bench_rounds, warmup_rounds=bench_warmup_rounds, iterations=1
    )
