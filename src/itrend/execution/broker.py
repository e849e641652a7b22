"""itrend.execution.broker

Broker/portfolio collaborator interfaces and an in-memory paper broker.

The engine only depends on two capabilities:

- ``position_of(symbol)``: signed holding (positive long, negative short)
- ``submit(intent)``: hand an :class:`OrderIntent` over and get an order id;
  ids > 0 mean the order was accepted

:class:`PaperBroker` implements both with immediate market fills at the last
marked price. Limit orders rest until :meth:`PaperBroker.fill_pending` or
:meth:`PaperBroker.cancel_all`. It is a replay/test collaborator, not a fill
simulator: there is no slippage, no partial fill and no cash accounting.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Protocol, runtime_checkable

from itrend.execution.orders import OrderIntent, OrderType

logger = logging.getLogger(__name__)


@runtime_checkable
class Portfolio(Protocol):
    def position_of(self, symbol: str) -> float: ...


@runtime_checkable
class OrderRouter(Protocol):
    def submit(self, intent: OrderIntent) -> int: ...


@runtime_checkable
class Broker(Portfolio, OrderRouter, Protocol):
    """Portfolio and order routing in one collaborator."""


@dataclass
class OrderRecord:
    """Broker-side bookkeeping for a submitted intent."""

    order_id: int
    intent: OrderIntent
    filled: bool = False
    fill_price: Optional[float] = None


@dataclass
class PaperBroker:
    """Immediate-fill in-memory broker."""

    positions: Dict[str, float] = field(default_factory=dict)
    orders: List[OrderRecord] = field(default_factory=list)
    last_price: Dict[str, float] = field(default_factory=dict)
    reject_all: bool = False

    _next_id: int = field(default=1, init=False, repr=False)

    def position_of(self, symbol: str) -> float:
        return float(self.positions.get(symbol, 0.0))

    def mark(self, symbol: str, price: float) -> None:
        """Record the latest tradable price for market fills."""

        self.last_price[symbol] = float(price)

    def submit(self, intent: OrderIntent) -> int:
        if self.reject_all:
            logger.warning("Rejected %s", intent)
            return 0

        rec = OrderRecord(order_id=self._next_id, intent=intent)
        self._next_id += 1
        self.orders.append(rec)

        if intent.order_type is OrderType.MARKET:
            self._fill(rec, self.last_price.get(intent.symbol))
        logger.debug("Accepted order %d: %s", rec.order_id, intent)
        return rec.order_id

    def _fill(self, rec: OrderRecord, price: Optional[float]) -> None:
        sym = rec.intent.symbol
        self.positions[sym] = self.position_of(sym) + rec.intent.signed_quantity
        rec.filled = True
        rec.fill_price = price

    def pending(self, symbol: Optional[str] = None) -> List[OrderRecord]:
        return [
            r
            for r in self.orders
            if not r.filled and (symbol is None or r.intent.symbol == symbol)
        ]

    def fill_pending(self, symbol: str, *, high: float, low: float) -> List[OrderRecord]:
        """Fill resting limit orders whose price was touched by [low, high]."""

        filled: List[OrderRecord] = []
        for rec in self.pending(symbol):
            px = float(rec.intent.limit_price)
            if rec.intent.side.sign > 0 and low <= px:
                self._fill(rec, px)
                filled.append(rec)
            elif rec.intent.side.sign < 0 and high >= px:
                self._fill(rec, px)
                filled.append(rec)
        return filled

    def cancel_all(self, symbol: Optional[str] = None, *, keep: int = 0) -> int:
        """Drop resting orders (optionally for one symbol), sparing order id ``keep``."""

        before = len(self.orders)
        self.orders = [
            r
            for r in self.orders
            if r.filled or r.order_id == keep or (symbol is not None and r.intent.symbol != symbol)
        ]
        cancelled = before - len(self.orders)
        if cancelled:
            logger.debug("Cancelled %d resting order(s) for %s", cancelled, symbol or "all symbols")
        return cancelled

    def get_order(self, order_id: int) -> Optional[OrderRecord]:
        for rec in self.orders:
            if rec.order_id == order_id:
                return rec
        return None


__all__ = ["Portfolio", "OrderRouter", "Broker", "OrderRecord", "PaperBroker"]
