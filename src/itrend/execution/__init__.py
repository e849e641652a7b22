"""Execution subpackage.

- :mod:`itrend.execution.orders`: order intents, sides, types, position status
- :mod:`itrend.execution.broker`: collaborator protocols and the paper broker
"""

from .broker import Broker, OrderRecord, OrderRouter, PaperBroker, Portfolio
from .orders import OrderIntent, OrderSide, OrderType, PositionStatus

__all__ = [
    "OrderIntent",
    "OrderSide",
    "OrderType",
    "PositionStatus",
    "Portfolio",
    "OrderRouter",
    "Broker",
    "OrderRecord",
    "PaperBroker",
]
