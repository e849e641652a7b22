"""Trading subpackage.

- :mod:`itrend.trading.engine` implements the per-symbol crossover state machine.
- :mod:`itrend.trading.logs` defines structured decision event logging.
- :mod:`itrend.trading.replay` drives an engine over a bar table.
"""

from .engine import CrossoverState, InstantTrendEngine, StepAction, StepResult
from .logs import EventType, TradeEvent, TradingLog
from .replay import replay_decisions

__all__ = [
    "CrossoverState",
    "InstantTrendEngine",
    "StepAction",
    "StepResult",
    "EventType",
    "TradeEvent",
    "TradingLog",
    "replay_decisions",
]
