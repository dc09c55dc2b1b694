from __future__ import annotations

from pathlib import Path

import yaml


def load_yaml(path: Path) -> dict[str, object]:
    with path.open("r", encoding="utf-8") as f:
        data = yaml.safe_load(f)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError("config root must be a mapping")
    return data


def get_section(cfg: dict[str, object], name: str) -> dict[str, object]:
    v = cfg.get(name)
    if v is None:
        return {}
    if not isinstance(v, dict):
        raise ValueError("config section must be a mapping")
    return v


def pick_bool(cfg: dict[str, object], key: str, cli: bool | None, default: bool) -> bool:
    if cli is not None:
        return bool(cli)
    v = cfg.get(key)
    if v is None:
        return default
    if isinstance(v, bool):
        return v
    if isinstance(v, int) and v in (0, 1):
        return bool(v)
    raise ValueError(f"invalid bool for {key!r} in config")


def pick_int(cfg: dict[str, object], key: str, cli: int | None, default: int) -> int:
    if cli is not None:
        return int(cli)
    v = cfg.get(key)
    if v is None:
        return default
    if isinstance(v, bool):
        raise ValueError(f"invalid int for {key!r} in config")
    if isinstance(v, int):
        return v
    if isinstance(v, float) and v.is_integer():
        return int(v)
    raise ValueError(f"invalid int for {key!r} in config")


def pick_opt_int(
    cfg: dict[str, object], key: str, cli: int | None, default: int | None
) -> int | None:
    if cli is not None:
        return None if int(cli) <= 0 else int(cli)
    if cfg.get(key) is None:
        return default
    v = pick_int(cfg, key, None, 0)
    return None if v <= 0 else v
