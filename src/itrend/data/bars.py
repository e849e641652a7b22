"""itrend.data.bars

Bar observations and bar-table helpers.

A bar table is a pandas DataFrame indexed by a unique, increasing
DatetimeIndex of bar *close* timestamps, with open/high/low/close columns
(names from :class:`~itrend.utils.config.DataConfig`). Replay tables also
carry precomputed trend/trigger columns; this package never computes them.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Iterator, Optional

import numpy as np
import pandas as pd

from itrend.utils.config import DataConfig


@dataclass(frozen=True)
class Bar:
    """OHLC(V) bar for one symbol at one step."""

    timestamp: pd.Timestamp
    open: float
    high: float
    low: float
    close: float
    volume: float = float("nan")


def _require_cols(df: pd.DataFrame, cols: Iterable[str]) -> None:
    missing = [c for c in cols if c not in df.columns]
    if missing:
        raise ValueError(f"Missing required columns: {missing}")


def validate_bar_frame(df: pd.DataFrame, *, cfg: Optional[DataConfig] = None, name: str = "bars") -> None:
    """Validate bar-table invariants.

    Requirements:
      - DatetimeIndex, monotonic increasing, no duplicates
      - open/high/low/close columns present
      - low <= high wherever both are finite

    Raises:
        ValueError on violation.
    """

    cfg = cfg or DataConfig()

    if not isinstance(df.index, pd.DatetimeIndex):
        raise ValueError(f"{name}: expected DatetimeIndex, got {type(df.index)}")
    if df.index.has_duplicates:
        dups = df.index[df.index.duplicated()].unique()
        raise ValueError(f"{name}: duplicate timestamps found (e.g. {dups[:5].tolist()})")
    if not df.index.is_monotonic_increasing:
        raise ValueError(f"{name}: index not monotonic increasing")

    _require_cols(df, [cfg.open_col, cfg.high_col, cfg.low_col, cfg.close_col])

    high = df[cfg.high_col].astype(float)
    low = df[cfg.low_col].astype(float)
    bad = np.isfinite(high) & np.isfinite(low) & (low > high)
    if bad.any():
        first = df.index[bad.to_numpy()][0]
        raise ValueError(f"{name}: low > high at {first}")


def read_bar_csv(path: str | Path, *, cfg: Optional[DataConfig] = None) -> pd.DataFrame:
    """Read a bar CSV and index it by the timestamp column."""

    cfg = cfg or DataConfig()
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(path)

    df = pd.read_csv(path)
    if cfg.timestamp_col not in df.columns:
        raise ValueError(f"{path.name}: missing timestamp column '{cfg.timestamp_col}'")
    df.index = pd.DatetimeIndex(pd.to_datetime(df.pop(cfg.timestamp_col)), name=cfg.timestamp_col)
    df = df.sort_index()
    validate_bar_frame(df, cfg=cfg, name=path.name)
    return df


def bar_from_row(ts: pd.Timestamp, row: pd.Series, *, cfg: Optional[DataConfig] = None) -> Bar:
    cfg = cfg or DataConfig()
    volume = float("nan")
    if cfg.volume_col is not None and cfg.volume_col in row.index:
        volume = float(row[cfg.volume_col])
    return Bar(
        timestamp=pd.Timestamp(ts),
        open=float(row[cfg.open_col]),
        high=float(row[cfg.high_col]),
        low=float(row[cfg.low_col]),
        close=float(row[cfg.close_col]),
        volume=volume,
    )


def bars_from_frame(df: pd.DataFrame, *, cfg: Optional[DataConfig] = None) -> Iterator[Bar]:
    """Yield :class:`Bar` objects in index order."""

    cfg = cfg or DataConfig()
    validate_bar_frame(df, cfg=cfg)
    for ts, row in df.iterrows():
        yield bar_from_row(ts, row, cfg=cfg)


__all__ = [
    "Bar",
    "validate_bar_frame",
    "read_bar_csv",
    "bar_from_row",
    "bars_from_frame",
]
