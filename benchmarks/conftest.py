from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Any

import pytest

from lifeformats.core.macrocell import DEFAULT_MAX_CACHED_CELLS
from lifeformats.io.config import get_section, load_yaml, pick_bool, pick_int


@dataclass(frozen=True, slots=True)
class BenchItem:
    name: str
    fmt: str
    pattern: str
    size: int
    seed: int
    decode_kwargs: dict[str, Any]


def pytest_addoption(parser: pytest.Parser) -> None:
    g = parser.getgroup("bench")
    g.addoption(
        "--bench-config",
        action="append",
        default=[],
        help="Decoder YAML config file(s). Can be repeated.",
    )
    g.addoption(
        "--bench-size",
        action="store",
        type=int,
        default=256,
        help="Side length of generated soups; tiling depth is derived from it.",
    )
    g.addoption("--bench-rounds", action="store", type=int, default=10)
    g.addoption("--bench-warmup-rounds", action="store", type=int, default=2)
    g.addoption(
        "--bench-case",
        action="append",
        default=[],
        help="Run only selected benchmark case name(s). Can be repeated.",
    )
    g.addoption("--bench-out", action="store", type=str, default="benchmarks/out")
    g.addoption("--bench-no-save", action="store_true", default=False)


def pytest_configure(config: pytest.Config) -> None:
    if bool(getattr(config.option, "bench_no_save", False)):
        return

    if hasattr(config.option, "benchmark_autosave"):
        config.option.benchmark_autosave = True

    out_dir = Path(str(getattr(config.option, "bench_out", "benchmarks/out"))).resolve()
    out_dir.mkdir(parents=True, exist_ok=True)

    if hasattr(config.option, "benchmark_json"):
        cur = getattr(config.option, "benchmark_json", None)
        if cur is not None:
            return
        ts = datetime.now().strftime("%Y%m%d_%H%M%S")
        config.option.benchmark_json = (out_dir / f"bench_{ts}.json").open("wb")


def _default_decode_kwargs() -> dict[str, Any]:
    return {
        "unknown_cells": False,
        "strict": False,
        "max_cached_cells": DEFAULT_MAX_CACHED_CELLS,
    }


def _resolve_decode_from_cfg(path: Path) -> dict[str, Any]:
    dec = get_section(load_yaml(path), "decode")
    out = _default_decode_kwargs()
    out.update(
        {
            "unknown_cells": pick_bool(dec, "unknown_cells", None, False),
            "strict": pick_bool(dec, "strict", None, False),
            "max_cached_cells": pick_int(
                dec, "max_cached_cells", None, DEFAULT_MAX_CACHED_CELLS
            ),
        }
    )
    return out


def _builtin_items(size: int, tag: str, decode_kwargs: dict[str, Any]) -> list[BenchItem]:
    out: list[BenchItem] = []
    for fmt, pattern in (
        ("rle", "soup"),
        ("rle", "runs"),
        ("mc", "tiled"),
        ("cells", "soup"),
        ("apg", "soup"),
    ):
        out.append(
            BenchItem(
                name=f"{tag}__{fmt}_{pattern}_{size}",
                fmt=fmt,
                pattern=pattern,
                size=size,
                seed=123,
                decode_kwargs=dict(decode_kwargs),
            )
        )
    return out


def pytest_generate_tests(metafunc: pytest.Metafunc) -> None:
    if "bench_item" not in metafunc.fixturenames:
        return

    size = int(metafunc.config.getoption("--bench-size"))
    cfg_paths = list(metafunc.config.getoption("--bench-config"))

    items: list[BenchItem] = []
    for p in cfg_paths:
        items.extend(_builtin_items(size, Path(p).stem, _resolve_decode_from_cfg(Path(p))))
    if len(items) == 0:
        items = _builtin_items(size, "baseline", _default_decode_kwargs())

    only_names = list(metafunc.config.getoption("--bench-case"))
    if len(only_names) > 0:
        s = set(only_names)
        items = [x for x in items if x.name in s]

    metafunc.parametrize("bench_item", items, ids=[x.name for x in items])
