"""itrend.utils.io

Minimal, deterministic IO helpers used across scripts and modules.

- YAML for configs and config snapshots
- JSON for event logs (write-only)
- CSV for bar tables and per-bar outputs

All paths are treated as local filesystem paths. Functions accept either str
or pathlib.Path and create parent directories when writing.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, Union

import pandas as pd
import yaml

PathLike = Union[str, Path]


def ensure_dir(path: PathLike) -> Path:
    """Ensure a directory exists and return it as a Path.

    If ``path`` points to a file (has a suffix), its parent directory is
    created.
    """

    p = Path(path)
    dir_path = p if p.suffix == "" else p.parent
    dir_path.mkdir(parents=True, exist_ok=True)
    return dir_path


def load_yaml(path: PathLike) -> Dict[str, Any]:
    p = Path(path)
    with p.open("r", encoding="utf-8") as f:
        obj = yaml.safe_load(f)
    return {} if obj is None else obj


def save_yaml(obj: Any, path: PathLike) -> None:
    p = Path(path)
    ensure_dir(p)
    with p.open("w", encoding="utf-8") as f:
        yaml.safe_dump(obj, f, sort_keys=False)


def save_json(obj: Any, path: PathLike, *, indent: int = 2) -> None:
    p = Path(path)
    ensure_dir(p)
    with p.open("w", encoding="utf-8") as f:
        json.dump(obj, f, indent=indent, sort_keys=False, default=str)


def save_csv(df: pd.DataFrame, path: PathLike, *, index: bool = True) -> None:
    p = Path(path)
    ensure_dir(p)
    df.to_csv(p, index=index)


__all__ = [
    "PathLike",
    "ensure_dir",
    "load_yaml",
    "save_yaml",
    "save_json",
    "save_csv",
]
