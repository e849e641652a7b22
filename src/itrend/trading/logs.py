"""itrend.trading.logs

Structured decision/event logging.

Every non-trivial engine step (orders, reversals, EOD liquidations, faults)
appends one :class:`TradeEvent`. The log is append-only, serialises to JSON
through :meth:`TradingLog.to_dict` and to a DataFrame through
:meth:`TradingLog.to_frame`.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, Dict, Iterable, List, Literal, Optional

import pandas as pd


EventType = Literal[
    "ENTER_LONG",
    "ENTER_SHORT",
    "REVERSE_TO_LONG",
    "REVERSE_TO_SHORT",
    "EOD_LIQUIDATE",
    "FAULT",
]


@dataclass
class TradeEvent:
    """A single discrete engine event."""

    timestamp: str
    event: EventType
    symbol: str = ""
    price: Optional[float] = None
    info: Dict[str, Any] = field(default_factory=dict)


@dataclass
class TradingLog:
    """Append-only structured event log.

    Attributes
    ----------
    header:
        Metadata about the run (symbol, engine parameters).
    events:
        List of TradeEvent records.
    """

    header: Dict[str, Any] = field(default_factory=dict)
    events: List[TradeEvent] = field(default_factory=list)

    def add(
        self,
        timestamp: pd.Timestamp,
        event: EventType,
        *,
        symbol: str = "",
        price: Optional[float] = None,
        **info: Any,
    ) -> None:
        ts = pd.Timestamp(timestamp)
        # single offset keeps to_frame parsing unambiguous across DST changes
        if ts.tz is not None:
            ts = ts.tz_convert("UTC")
        self.events.append(
            TradeEvent(timestamp=ts.isoformat(), event=event, symbol=symbol, price=price, info=dict(info))
        )

    def extend(self, events: Iterable[TradeEvent]) -> None:
        for e in events:
            if not isinstance(e, TradeEvent):
                raise TypeError("extend expects an iterable of TradeEvent")
            self.events.append(e)

    def __len__(self) -> int:
        return len(self.events)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "header": dict(self.header),
            "events": [asdict(e) for e in self.events],
        }

    def to_frame(self) -> pd.DataFrame:
        """Convert event log to a DataFrame for analysis/reporting."""

        if not self.events:
            return pd.DataFrame(columns=["timestamp", "event", "symbol", "price"])  # empty
        rows: List[Dict[str, Any]] = []
        for e in self.events:
            row = {"timestamp": e.timestamp, "event": e.event, "symbol": e.symbol, "price": e.price}
            row.update(e.info or {})
            rows.append(row)
        df = pd.DataFrame(rows)
        df["timestamp"] = pd.to_datetime(df["timestamp"])
        df = df.sort_values("timestamp", kind="stable").reset_index(drop=True)
        return df


__all__ = ["EventType", "TradeEvent", "TradingLog"]
