"""Instant-trend (itrend) decision package.

Streaming, per-symbol decision logic driven by an externally computed
trend/trigger pair, plus the Momersion momentum/mean-reversion ratio.

The package is organized into submodules:
- itrend.data: bar type, bar-table validation, exchange session window
- itrend.signals: Momersion indicator
- itrend.execution: order intents, broker protocols, paper broker
- itrend.trading: crossover execution engine, decision log, replay driver
- itrend.utils: configuration, IO, rounding

Command-line drivers live in scripts/.
"""

from .signals.momersion import MomersionIndicator
from .trading.engine import InstantTrendEngine
from .utils.config import ITrendConfig

__all__ = ["ITrendConfig", "InstantTrendEngine", "MomersionIndicator"]
