"""itrend.trading.replay

Drive an :class:`InstantTrendEngine` over a bar table.

The table carries OHLC columns plus the upstream ``trend``/``trigger``
columns. For each bar, in index order:

1. resting limit orders on the paper broker are checked against the bar's
   high/low and confirmed back into the engine when touched;
2. the broker is marked at the bar close (market orders fill there);
3. the engine steps;
4. any order the engine sent cancels older resting limit orders; market
   fills are confirmed into the engine, a new resting limit order marks the
   engine's last order as unfilled.

The output is one row per bar describing the decision. Returns, costs and
equity are deliberately absent.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

import pandas as pd

from itrend.data.bars import bar_from_row, validate_bar_frame
from itrend.execution.broker import PaperBroker
from itrend.execution.orders import OrderType
from itrend.trading.engine import InstantTrendEngine, StepAction
from itrend.utils.config import DataConfig

logger = logging.getLogger(__name__)


def replay_decisions(
    frame: pd.DataFrame,
    engine: InstantTrendEngine,
    broker: PaperBroker,
    *,
    trade_size: float,
    cfg: Optional[DataConfig] = None,
) -> pd.DataFrame:
    """Replay a bar table through the engine.

    Parameters
    ----------
    frame:
        Bar table with OHLC and trend/trigger columns.
    engine:
        Engine bound to ``broker``.
    broker:
        Paper broker used as portfolio/order collaborator.
    trade_size:
        Entry quantity passed to every step.
    cfg:
        Column conventions.

    Returns
    -------
    pd.DataFrame
        Indexed like ``frame`` with columns action, rationale, side, quantity,
        order_type, limit_price, order_id, projection, position, error.
    """

    cfg = cfg or DataConfig()
    validate_bar_frame(frame, cfg=cfg)
    for c in (cfg.trend_col, cfg.trigger_col):
        if c not in frame.columns:
            raise ValueError(f"frame missing required column: {c}")
    if not float(trade_size) > 0:
        raise ValueError("trade_size must be positive")

    symbol = engine.symbol
    rows: List[Dict[str, Any]] = []

    for ts, row in frame.iterrows():
        bar = bar_from_row(ts, row, cfg=cfg)

        for rec in broker.fill_pending(symbol, high=bar.high, low=bar.low):
            engine.confirm_fill(float(rec.fill_price))

        broker.mark(symbol, bar.close)
        res = engine.step(bar, trade_size, float(row[cfg.trend_col]), float(row[cfg.trigger_col]))

        order = res.order
        if order is not None:
            # a new decision supersedes any limit order still resting from earlier bars
            broker.cancel_all(symbol, keep=res.order_id)
        if order is not None and res.order_id > 0:
            rec = broker.get_order(res.order_id)
            if rec is not None and rec.filled and rec.fill_price is not None:
                engine.confirm_fill(rec.fill_price)
            elif order.order_type is OrderType.LIMIT:
                engine.mark_unfilled()

        rows.append(
            {
                "action": res.action.value,
                "rationale": res.rationale,
                "side": None if order is None else order.side.value,
                "quantity": None if order is None else order.quantity,
                "order_type": None if order is None else order.order_type.value,
                "limit_price": None if order is None else order.limit_price,
                "order_id": res.order_id,
                "projection": res.projection,
                "position": broker.position_of(symbol),
                "error": res.error,
            }
        )

    out = pd.DataFrame(rows, index=frame.index)
    n_orders = int(out["order_type"].notna().sum()) if len(out) else 0
    n_faults = int((out["action"] == StepAction.FAULT.value).sum()) if len(out) else 0
    logger.info("%s: replayed %d bars, %d orders, %d faults", symbol, len(out), n_orders, n_faults)
    return out


__all__ = ["replay_decisions"]
