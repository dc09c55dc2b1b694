from __future__ import annotations

import argparse
import sys
from dataclasses import asdict
from pathlib import Path

from lifeformats.core.errors import ParseError
from lifeformats.core.iterator import PatternIterator
from lifeformats.core.macrocell import DEFAULT_MAX_CACHED_CELLS
from lifeformats.io.config import (
    get_section,
    load_yaml,
    pick_bool,
    pick_int,
    pick_opt_int,
)
from lifeformats.io.imageio import save_grid
from lifeformats.io.patterns import FORMATS, open_pattern
from lifeformats.utils.grid import bounding_box, to_array, to_grid
from lifeformats.utils.logger import Logger


def _add_common(sp: argparse.ArgumentParser) -> None:
    sp.add_argument("input", type=str, help="pattern file, or an apgcode")
    sp.add_argument("--format", dest="fmt", choices=FORMATS, default=None)
    sp.add_argument("--config", type=Path, default=None)
    sp.add_argument("--limit", type=int, default=None)

    gu = sp.add_mutually_exclusive_group()
    gu.add_argument(
        "--unknown-cells",
        dest="unknown_cells",
        action="store_const",
        const=True,
        default=None,
    )
    gu.add_argument(
        "--no-unknown-cells", dest="unknown_cells", action="store_const", const=False
    )

    gs = sp.add_mutually_exclusive_group()
    gs.add_argument(
        "--strict", dest="strict", action="store_const", const=True, default=None
    )
    gs.add_argument("--no-strict", dest="strict", action="store_const", const=False)

    sp.add_argument("--max-cached-cells", type=int, default=None)


def _print_cells(dec: PatternIterator, limit: int | None) -> int:
    n = 0
    for r in dec.results():
        if isinstance(r, ParseError):
            return 1
        if r.state == 1:
            print(f"{r.x} {r.y}")
        else:
            print(f"{r.x} {r.y} {r.state}")
        n += 1
        if limit is not None and n >= limit:
            break
    return 0


def main(argv: list[str] | None = None) -> int:
    p = argparse.ArgumentParser(prog="lifeformats")
    sp = p.add_subparsers(dest="cmd", required=True)

    pc = sp.add_parser("cells", help="print live cells as 'x y [state]'")
    _add_common(pc)

    pi = sp.add_parser("info", help="print header data, population and bounds")
    _add_common(pi)

    pr = sp.add_parser("render", help="render the pattern to an image")
    _add_common(pr)
    pr.add_argument("output", type=Path)
    pr.add_argument("--scale", type=int, default=None)

    a = p.parse_args(argv)
    log = Logger(lambda m: print(m, file=sys.stderr), prefix="lifeformats: ")

    cfg_all: dict[str, object] = {}
    if a.config is not None:
        cfg_all = load_yaml(a.config)
    cfg = get_section(cfg_all, "decode")

    limit = pick_opt_int(cfg, "limit", a.limit, None)
    try:
        dec = open_pattern(
            a.input,
            a.fmt,
            unknown_cells=pick_bool(cfg, "unknown_cells", a.unknown_cells, False),
            strict=pick_bool(cfg, "strict", a.strict, False),
            max_cached_cells=pick_int(
                cfg, "max_cached_cells", a.max_cached_cells, DEFAULT_MAX_CACHED_CELLS
            ),
            log=log,
        )
    except (ValueError, OSError) as e:
        log.info(f"error: {e}")
        return 2

    if a.cmd == "cells":
        return _print_cells(dec, limit)

    try:
        arr = to_array(dec, limit=limit)
    except ParseError:
        return 1

    if a.cmd == "info":
        header = dec.header_data()
        if header is not None:
            for k, v in asdict(header).items():
                print(f"{k}: {v}")
        print(f"population: {arr.shape[0]}")
        box = bounding_box(arr)
        if box is not None:
            print("bounds: x={} y={} width={} height={}".format(*box))
        return 0

    cfg_r = get_section(cfg_all, "render")
    scale = pick_int(cfg_r, "scale", a.scale, 4)
    grid, _ = to_grid(arr)
    save_grid(a.output, grid, scale=scale)
    log.info(f"wrote {arr.shape[0]} cells to {a.output}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
