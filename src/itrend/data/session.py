"""Exchange session helpers.

Bar timestamps are bar *close* times. The end-of-day liquidation window is a
wall-clock interval in the exchange's local time zone, inclusive on both
ends (default 15:55 through 16:00 for US equities).

Timezone handling:
- tz-aware timestamps are converted to the exchange zone;
- naive timestamps are taken to already be exchange-local.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import time
from typing import Optional

import pandas as pd

from itrend.utils.config import EngineConfig, parse_hhmm


def to_exchange_time(ts: pd.Timestamp, tz: Optional[str] = None) -> pd.Timestamp:
    """Return ``ts`` expressed in exchange-local time."""

    ts = pd.Timestamp(ts)
    if tz is None or ts.tz is None:
        return ts
    return ts.tz_convert(tz)


@dataclass(frozen=True)
class SessionWindow:
    """An inclusive intraday wall-clock window."""

    start: time
    end: time
    tz: Optional[str] = None

    def __post_init__(self) -> None:
        if self.end < self.start:
            raise ValueError("window end must not be earlier than start")

    def contains(self, ts: pd.Timestamp) -> bool:
        local = to_exchange_time(ts, self.tz)
        t = local.time()
        return self.start <= t <= self.end


def eod_window(cfg: Optional[EngineConfig] = None) -> SessionWindow:
    cfg = cfg or EngineConfig()
    return SessionWindow(start=parse_hhmm(cfg.eod_start), end=parse_hhmm(cfg.eod_end), tz=cfg.exchange_tz)


def in_eod_window(ts: pd.Timestamp, *, cfg: Optional[EngineConfig] = None) -> bool:
    return eod_window(cfg).contains(ts)


__all__ = ["SessionWindow", "to_exchange_time", "eod_window", "in_eod_window"]
