"""itrend.execution.orders

Order-intent value types exchanged between the engine and the broker
collaborator.

Quantities are always positive; direction is carried by :class:`OrderSide`.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from enum import Enum
from typing import Any, Dict, Optional


class OrderSide(str, Enum):
    BUY = "BUY"
    SELL = "SELL"

    @property
    def sign(self) -> int:
        return 1 if self is OrderSide.BUY else -1


class OrderType(str, Enum):
    MARKET = "MARKET"
    LIMIT = "LIMIT"


class PositionStatus(Enum):
    """Sign of the current holding."""

    SHORT = -1
    FLAT = 0
    LONG = 1

    @classmethod
    def from_quantity(cls, qty: float) -> "PositionStatus":
        if qty > 0:
            return cls.LONG
        if qty < 0:
            return cls.SHORT
        return cls.FLAT


@dataclass(frozen=True)
class OrderIntent:
    """An immutable order request."""

    symbol: str
    side: OrderSide
    quantity: float
    order_type: OrderType = OrderType.MARKET
    limit_price: Optional[float] = None
    tag: str = ""

    def __post_init__(self) -> None:
        if not self.quantity > 0:
            raise ValueError("quantity must be positive")
        if self.order_type is OrderType.LIMIT:
            if self.limit_price is None or not self.limit_price > 0:
                raise ValueError("limit orders require a positive limit_price")
        elif self.limit_price is not None:
            raise ValueError("market orders must not carry a limit_price")

    @property
    def signed_quantity(self) -> float:
        return self.side.sign * self.quantity

    @classmethod
    def market(cls, symbol: str, side: OrderSide, quantity: float, *, tag: str = "") -> "OrderIntent":
        return cls(symbol=symbol, side=side, quantity=quantity, tag=tag)

    @classmethod
    def limit(cls, symbol: str, side: OrderSide, quantity: float, price: float, *, tag: str = "") -> "OrderIntent":
        return cls(
            symbol=symbol,
            side=side,
            quantity=quantity,
            order_type=OrderType.LIMIT,
            limit_price=price,
            tag=tag,
        )

    def to_dict(self) -> Dict[str, Any]:
        d = asdict(self)
        d["side"] = self.side.value
        d["order_type"] = self.order_type.value
        return d

    def __str__(self) -> str:
        if self.order_type is OrderType.LIMIT:
            return f"{self.side.value} {self.quantity:g} {self.symbol} limit @ {self.limit_price:.2f}"
        return f"{self.side.value} {self.quantity:g} {self.symbol} market"


__all__ = ["OrderSide", "OrderType", "PositionStatus", "OrderIntent"]
