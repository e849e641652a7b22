"""Configuration utilities.

Strict, explicit configuration dataclasses for the instant-trend crossover
engine and the Momersion indicator.

Key conventions:
- Bars are processed strictly in timestamp order, one engine instance per
  symbol.
- The end-of-day liquidation window is expressed in exchange-local wall-clock
  time (``HH:MM``), inclusive on both ends, using bar *close* timestamps.
- Derived prices and indicator outputs are rounded half-to-even at
  ``price_decimals`` places.

Configs are frozen so they can be snapshotted to YAML next to replay outputs.
"""

from __future__ import annotations

from dataclasses import dataclass, asdict, field
from datetime import time
from pathlib import Path
from typing import Any, Dict, Optional, Union

from itrend.utils.io import load_yaml


@dataclass(frozen=True)
class EngineConfig:
    """Crossover execution engine parameters."""

    # Trend history capacity; the projection needs three points
    period: int = 5

    # Reversal threshold: long reverses below entry / factor, short above entry * factor
    reversal_factor: float = 1.0015

    # Fraction of the bar range used to offset limit prices from the close
    range_fraction: float = 0.35

    # Go flat inside the end-of-day window
    sell_out_at_eod: bool = True
    eod_start: str = "15:55"
    eod_end: str = "16:00"

    # None => bar timestamps are already exchange-local
    exchange_tz: Optional[str] = "America/New_York"

    price_decimals: int = 2


@dataclass(frozen=True)
class MomersionConfig:
    """Momersion window configuration.

    ``min_period=None`` is single-threshold mode: the indicator reports only
    once the full window has rolled, i.e. after ``full_period + 1``
    change-pair samples. With an explicit ``min_period`` it reports on a
    growing window from ``min_period`` samples.
    """

    full_period: int = 20
    min_period: Optional[int] = None

    @property
    def required_samples(self) -> int:
        if self.min_period is None:
            return int(self.full_period) + 1
        return int(self.min_period)


@dataclass(frozen=True)
class DataConfig:
    """Column conventions for bar tables."""

    timestamp_col: str = "timestamp"
    open_col: str = "open"
    high_col: str = "high"
    low_col: str = "low"
    close_col: str = "close"
    volume_col: Optional[str] = "volume"

    trend_col: str = "trend"
    trigger_col: str = "trigger"


@dataclass(frozen=True)
class ITrendConfig:
    """Top-level configuration container."""

    symbol: str = "SPY"
    trade_size: int = 100

    engine: EngineConfig = field(default_factory=EngineConfig)
    momersion: MomersionConfig = field(default_factory=MomersionConfig)
    data: DataConfig = field(default_factory=DataConfig)

    run_name: str = "base"

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def parse_hhmm(value: str) -> time:
    """Parse a ``HH:MM`` wall-clock string."""

    try:
        hh, mm = str(value).strip().split(":")
        return time(int(hh), int(mm))
    except (TypeError, ValueError) as exc:
        raise ValueError(f"expected HH:MM time, got {value!r}") from exc


def validate_engine_config(cfg: EngineConfig) -> None:
    if int(cfg.period) < 3:
        raise ValueError("period must be >= 3 (projection uses the third-newest trend value)")
    if not float(cfg.reversal_factor) > 1.0:
        raise ValueError("reversal_factor must be > 1")
    if not (0.0 <= float(cfg.range_fraction) <= 1.0):
        raise ValueError("range_fraction must be in [0,1]")
    if int(cfg.price_decimals) < 0:
        raise ValueError("price_decimals must be non-negative")
    start = parse_hhmm(cfg.eod_start)
    end = parse_hhmm(cfg.eod_end)
    if end < start:
        raise ValueError("eod_end must not be earlier than eod_start")


def validate_momersion_config(cfg: MomersionConfig) -> None:
    if int(cfg.full_period) < 1:
        raise ValueError("full_period must be >= 1")
    if cfg.min_period is not None:
        if int(cfg.min_period) < 1:
            raise ValueError("min_period must be >= 1")
        if int(cfg.min_period) > int(cfg.full_period):
            raise ValueError("min_period must be <= full_period")


def validate_config(cfg: ITrendConfig) -> None:
    """Sanity checks for the full configuration tree."""

    if not cfg.symbol:
        raise ValueError("symbol must be non-empty")
    if int(cfg.trade_size) <= 0:
        raise ValueError("trade_size must be positive")
    validate_engine_config(cfg.engine)
    validate_momersion_config(cfg.momersion)


def deep_update(base: Dict[str, Any], updates: Dict[str, Any]) -> Dict[str, Any]:
    """Recursively update nested dictionaries."""

    out = dict(base)
    for k, v in updates.items():
        if isinstance(v, dict) and isinstance(out.get(k), dict):
            out[k] = deep_update(out[k], v)
        else:
            out[k] = v
    return out


def config_from_dict(d: Dict[str, Any]) -> ITrendConfig:
    """Build and validate an :class:`ITrendConfig` from a nested dict."""

    d = d or {}
    cfg = ITrendConfig(
        symbol=str(d.get("symbol", "SPY")),
        trade_size=int(d.get("trade_size", 100)),
        engine=EngineConfig(**d.get("engine", {})),
        momersion=MomersionConfig(**d.get("momersion", {})),
        data=DataConfig(**d.get("data", {})),
        run_name=str(d.get("run_name", "base")),
    )
    validate_config(cfg)
    return cfg


def load_config(path: Union[str, Path], overrides: Optional[Dict[str, Any]] = None) -> ITrendConfig:
    """Load a YAML config, apply nested ``overrides`` and validate."""

    raw = load_yaml(path)
    if overrides:
        raw = deep_update(raw, overrides)
    return config_from_dict(raw)


__all__ = [
    "ITrendConfig",
    "EngineConfig",
    "MomersionConfig",
    "DataConfig",
    "parse_hhmm",
    "validate_engine_config",
    "validate_momersion_config",
    "validate_config",
    "deep_update",
    "config_from_dict",
    "load_config",
]
