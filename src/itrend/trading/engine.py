"""itrend.trading.engine

Per-symbol instant-trend crossover execution engine.

Each call to :meth:`InstantTrendEngine.step` consumes one bar plus the
upstream trend/trigger pair and emits at most one :class:`OrderIntent`.
Decision order within a step:

1. append the trend value to the bounded trend history and read the current
   position from the portfolio collaborator;
2. until the history is full, report "not ready";
3. end-of-day override: inside the liquidation window flatten any open
   position at market and skip everything else for this bar;
4. reversal: with ``proj = 2 * trend[t] - trend[t-2]``, a long whose
   projection falls below ``entry / reversal_factor`` (or a short whose
   projection rises above ``entry * reversal_factor``) is flipped with a
   single market order of twice the held quantity;
5. crossover entry: when the projection crosses above (below) the latest
   trend value after a down (up) crossover, enter long (short). The order is
   a market order if the previous order has not been confirmed filled, else a
   limit order offset from the close by a fraction of the bar range.

Crossover state is committed on every step where the projection is strictly
above or below the trend, whether or not an order fires.

Any exception raised by the collaborator or the decision logic is caught at
the step boundary, logged, and returned as a ``FAULT`` result. A fault never
turns into an order. Event-log write failures are logged and dropped.
"""

from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass
from enum import Enum
from typing import Deque, Optional, Tuple

from itrend.data.bars import Bar
from itrend.data.session import eod_window
from itrend.execution.broker import Broker
from itrend.execution.orders import OrderIntent, OrderSide, PositionStatus
from itrend.trading.logs import TradingLog
from itrend.utils.config import EngineConfig, validate_engine_config
from itrend.utils.rounding import round_half_even_decimal, to_decimal

logger = logging.getLogger(__name__)

NOT_READY_RATIONALE = "Trend Not Ready"


class CrossoverState(Enum):
    DOWN = -1
    NONE = 0
    UP = 1


class StepAction(str, Enum):
    NOT_READY = "NOT_READY"
    HOLD = "HOLD"
    EOD_LIQUIDATE = "EOD_LIQUIDATE"
    EOD_FLAT = "EOD_FLAT"
    REVERSE_TO_LONG = "REVERSE_TO_LONG"
    REVERSE_TO_SHORT = "REVERSE_TO_SHORT"
    ENTER_LONG = "ENTER_LONG"
    ENTER_SHORT = "ENTER_SHORT"
    FAULT = "FAULT"


@dataclass(frozen=True)
class StepResult:
    """Outcome of one engine step.

    A ``FAULT`` result carries no order and an empty rationale; callers treat
    it exactly like "no action taken".
    """

    action: StepAction
    rationale: str = ""
    order: Optional[OrderIntent] = None
    order_id: int = 0
    projection: Optional[float] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.action is not StepAction.FAULT

    @classmethod
    def fault(cls, exc: BaseException) -> "StepResult":
        return cls(action=StepAction.FAULT, error=f"{type(exc).__name__}: {exc}")


class InstantTrendEngine:
    """Crossover execution engine for one symbol.

    Parameters
    ----------
    symbol:
        Traded symbol; passed to every collaborator call.
    broker:
        Portfolio + order routing collaborator.
    cfg:
        Engine parameters (history period, reversal factor, range fraction,
        end-of-day policy).
    log:
        Optional event log receiving one record per order or fault.
    """

    def __init__(
        self,
        symbol: str,
        broker: Broker,
        cfg: Optional[EngineConfig] = None,
        *,
        log: Optional[TradingLog] = None,
    ):
        if not symbol:
            raise ValueError("symbol must be non-empty")
        cfg = cfg or EngineConfig()
        validate_engine_config(cfg)

        self.symbol = symbol
        self.broker = broker
        self.cfg = cfg
        self.log = log

        self._eod = eod_window(cfg)
        self._reversal_factor = float(cfg.reversal_factor)
        self._range_fraction = to_decimal(cfg.range_fraction)

        # newest first: _history[0] is the latest trend value
        self._history: Deque[float] = deque(maxlen=int(cfg.period))
        self._crossover = CrossoverState.NONE
        self._position = PositionStatus.FLAT

        self.entry_price: float = 0.0
        self.limit_price: float = 0.0
        self.order_filled: bool = True

    # ---------- state ----------

    @property
    def is_ready(self) -> bool:
        return len(self._history) == self._history.maxlen

    @property
    def crossover(self) -> CrossoverState:
        return self._crossover

    @property
    def position(self) -> PositionStatus:
        return self._position

    @property
    def trend_history(self) -> Tuple[float, ...]:
        return tuple(self._history)

    @property
    def projection(self) -> Optional[float]:
        if len(self._history) < 3:
            return None
        return 2.0 * self._history[0] - self._history[2]

    def confirm_fill(self, price: float) -> None:
        """Record a confirmed fill reported by the order collaborator."""

        self.entry_price = float(price)
        self.order_filled = True

    def mark_unfilled(self) -> None:
        self.order_filled = False

    def reset(self) -> None:
        self._history.clear()
        self._crossover = CrossoverState.NONE
        self._position = PositionStatus.FLAT
        self.entry_price = 0.0
        self.limit_price = 0.0
        self.order_filled = True

    # ---------- public API ----------

    def step(
        self,
        bar: Bar,
        trade_size: float,
        trend_value: float,
        trigger_value: Optional[float] = None,
    ) -> StepResult:
        """Process one bar. Never raises for collaborator or decision faults.

        Raises:
            ValueError if ``trade_size`` is not positive; state is left untouched.
        """

        if not float(trade_size) > 0:
            raise ValueError(f"trade_size must be positive, got {trade_size!r}")

        try:
            self._history.appendleft(float(trend_value))
            qty = float(self.broker.position_of(self.symbol))
            self._position = PositionStatus.from_quantity(qty)
            if not self.is_ready:
                return StepResult(action=StepAction.NOT_READY, rationale=NOT_READY_RATIONALE)
            result = self._decide(bar, trade_size, qty)
        except Exception as exc:
            logger.exception("%s: step failed at %s", self.symbol, getattr(bar, "timestamp", None))
            result = StepResult.fault(exc)

        try:
            self._record(bar, result, trend_value, trigger_value)
        except Exception:
            logger.exception("%s: could not record %s event", self.symbol, result.action.value)
        return result

    # ---------- decision logic ----------

    def _decide(self, bar: Bar, trade_size: float, qty: float) -> StepResult:
        if self.cfg.sell_out_at_eod and self._eod.contains(bar.timestamp):
            return self._sell_out_end_of_day(qty)

        proj = self.projection
        newest = self._history[0]

        if self._position is PositionStatus.LONG and proj < self.entry_price / self._reversal_factor:
            rationale = f"Long Reverse to short. Close < {self.entry_price} / {self._reversal_factor}"
            return self._reverse(OrderSide.SELL, qty, proj, rationale)
        if self._position is PositionStatus.SHORT and proj > self.entry_price * self._reversal_factor:
            rationale = f"Short Reverse to Long. Close > {self.entry_price} * {self._reversal_factor}"
            return self._reverse(OrderSide.BUY, qty, proj, rationale)

        if proj > newest:
            result = StepResult(action=StepAction.HOLD, rationale="Trigger over Trend", projection=proj)
            if self._crossover is CrossoverState.DOWN and self._position is not PositionStatus.LONG:
                result = self._enter(OrderSide.BUY, bar, trade_size, proj)
            self._crossover = CrossoverState.UP
            return result

        if proj < newest:
            result = StepResult(action=StepAction.HOLD, rationale="Trigger under trend", projection=proj)
            if self._crossover is CrossoverState.UP and self._position is not PositionStatus.SHORT:
                result = self._enter(OrderSide.SELL, bar, trade_size, proj)
            self._crossover = CrossoverState.DOWN
            return result

        return StepResult(action=StepAction.HOLD, projection=proj)

    def _sell_out_end_of_day(self, qty: float) -> StepResult:
        if qty == 0:
            return StepResult(action=StepAction.EOD_FLAT, rationale="End of day, flat")
        side = OrderSide.SELL if qty > 0 else OrderSide.BUY
        intent = OrderIntent.market(self.symbol, side, abs(qty), tag="EOD")
        order_id = self._submit(intent)
        return StepResult(
            action=StepAction.EOD_LIQUIDATE,
            rationale=f"End of day liquidation of {abs(qty):g}",
            order=intent,
            order_id=order_id,
        )

    def _reverse(self, side: OrderSide, qty: float, proj: float, rationale: str) -> StepResult:
        intent = OrderIntent.market(self.symbol, side, 2.0 * abs(qty), tag="Reverse")
        self.limit_price = 0.0
        if side is OrderSide.BUY:
            self._position = PositionStatus.LONG
            action = StepAction.REVERSE_TO_LONG
        else:
            self._position = PositionStatus.SHORT
            action = StepAction.REVERSE_TO_SHORT
        order_id = self._submit(intent)
        self.order_filled = order_id > 0
        return StepResult(action=action, rationale=rationale, order=intent, order_id=order_id, projection=proj)

    def _enter(self, side: OrderSide, bar: Bar, trade_size: float, proj: float) -> StepResult:
        is_long = side is OrderSide.BUY
        action = StepAction.ENTER_LONG if is_long else StepAction.ENTER_SHORT

        if not self.order_filled:
            intent = OrderIntent.market(self.symbol, side, trade_size, tag="Long" if is_long else "Short")
            if is_long:
                rationale = "Enter Long after cancel trig xover price up"
            else:
                rationale = "Enter Short after cancel trig xunder price down"
        else:
            self.limit_price = self.limit_price_for(side, bar)
            tag = "Long Limit" if is_long else "Short Limit"
            intent = OrderIntent.limit(self.symbol, side, trade_size, self.limit_price, tag=tag)
            if is_long:
                rationale = f"Enter Long Limit trig xover price up @ {self.limit_price:.2f}"
            else:
                rationale = f"Enter Short Limit trig xunder price down @ {self.limit_price:.2f}"

        order_id = self._submit(intent)
        return StepResult(action=action, rationale=rationale, order=intent, order_id=order_id, projection=proj)

    def limit_price_for(self, side: OrderSide, bar: Bar) -> float:
        """Entry limit price offset from the close by a fraction of the bar range.

        Long: ``max(low, close - range * f)``; short: ``min(high, close + range * f)``.
        Computed in decimal arithmetic and rounded half-to-even.
        """

        high = to_decimal(bar.high)
        low = to_decimal(bar.low)
        close = to_decimal(bar.close)
        offset = (high - low) * self._range_fraction
        if side is OrderSide.BUY:
            raw = max(low, close - offset)
        else:
            raw = min(high, close + offset)
        return float(round_half_even_decimal(raw, int(self.cfg.price_decimals)))

    # ---------- collaborators ----------

    def _submit(self, intent: OrderIntent) -> int:
        order_id = int(self.broker.submit(intent))
        logger.info("%s: submitted %s (order_id=%d)", self.symbol, intent, order_id)
        return order_id

    def _record(
        self,
        bar: Bar,
        result: StepResult,
        trend_value: float,
        trigger_value: Optional[float],
    ) -> None:
        if self.log is None:
            return
        if result.order is None and result.action is not StepAction.FAULT:
            return
        info = {
            "rationale": result.rationale,
            "trend": trend_value,
            "trigger": trigger_value,
            "projection": result.projection,
        }
        if result.order is not None:
            info.update(
                side=result.order.side.value,
                quantity=result.order.quantity,
                order_type=result.order.order_type.value,
                limit_price=result.order.limit_price,
                order_id=result.order_id,
            )
        if result.error is not None:
            info["error"] = result.error
        close = getattr(bar, "close", None)
        self.log.add(
            getattr(bar, "timestamp", None),
            result.action.value,
            symbol=self.symbol,
            price=None if close is None else float(close),
            **info,
        )


__all__ = [
    "NOT_READY_RATIONALE",
    "CrossoverState",
    "StepAction",
    "StepResult",
    "InstantTrendEngine",
]
