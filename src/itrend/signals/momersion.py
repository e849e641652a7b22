"""itrend.signals.momersion

Momersion: share of momentum vs. mean-reversion moves in a rolling window.

Definition
----------
For consecutive changes ``d_t = x_t - x_{t-1}`` the product
``p_t = d_t * d_{t-1}`` is

- positive when the move continued (momentum),
- negative when it reversed (mean reversion),
- zero when either change was flat (neutral).

Over the last ``full_period`` products::

    momersion = 100 * Mc / (Mc + MRc)

with Mc/MRc the counts of positive/negative products.

Warm-up
-------
The first product exists at the third observation. With an explicit
``min_period`` the indicator is ready once ``min_period`` products have been
seen (observation index ``min_period + 1``). Without one, it waits until the
full window has rolled once: ``full_period + 1`` products (observation index
``full_period + 2``). Before that, and whenever at least half of the held
products are neutral (forward-filled data), the value is the neutral 50.
``is_ready`` tells a pinned 50 apart from a computed one.

Values are rounded half-to-even at 2 decimals.
"""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass
from typing import Deque, Optional

import numpy as np
import pandas as pd

from itrend.utils.config import MomersionConfig, validate_momersion_config
from itrend.utils.rounding import round_half_even

NEUTRAL_VALUE = 50.0


@dataclass(frozen=True)
class MomersionReading:
    """Indicator output after one update."""

    value: float
    is_ready: bool
    momentum_count: int = 0
    reversion_count: int = 0
    samples: int = 0


class MomersionIndicator:
    """Streaming Momersion indicator.

    Parameters
    ----------
    cfg:
        Window configuration. ``MomersionConfig(full_period=10)`` reports once
        eleven products have been seen; ``MomersionConfig(full_period=20,
        min_period=7)`` starts reporting on a growing window at seven.
    decimals:
        Rounding precision of reported values.
    """

    def __init__(self, cfg: Optional[MomersionConfig] = None, *, decimals: int = 2):
        cfg = cfg or MomersionConfig()
        validate_momersion_config(cfg)
        self.cfg = cfg
        self.full_period = int(cfg.full_period)
        self.min_period = cfg.min_period
        self.required_samples = cfg.required_samples
        self.decimals = int(decimals)

        self._prices: Deque[float] = deque(maxlen=3)
        self._products: Deque[float] = deque(maxlen=self.full_period)
        self._seen = 0
        self._current = MomersionReading(value=NEUTRAL_VALUE, is_ready=False)

    @classmethod
    def from_periods(cls, full_period: int, min_period: Optional[int] = None) -> "MomersionIndicator":
        return cls(MomersionConfig(full_period=full_period, min_period=min_period))

    @property
    def samples(self) -> int:
        """Number of change-pair products currently held."""
        return len(self._products)

    @property
    def samples_seen(self) -> int:
        """Total products observed since construction or reset."""
        return self._seen

    @property
    def is_ready(self) -> bool:
        return self._seen >= self.required_samples

    @property
    def warm_up_period(self) -> int:
        """Observations needed before the first ready value."""
        return self.required_samples + 2

    @property
    def current(self) -> MomersionReading:
        return self._current

    def reset(self) -> None:
        self._prices.clear()
        self._products.clear()
        self._seen = 0
        self._current = MomersionReading(value=NEUTRAL_VALUE, is_ready=False)

    def update(self, value: float) -> MomersionReading:
        x = float(value)
        if not np.isfinite(x):
            raise ValueError("momersion input must be finite")

        self._prices.append(x)
        if len(self._prices) == 3:
            p2, p1, p0 = self._prices
            self._products.append((p0 - p1) * (p1 - p2))
            self._seen += 1

        mc = sum(1 for p in self._products if p > 0)
        mrc = sum(1 for p in self._products if p < 0)
        n_zero = self.samples - mc - mrc

        out = NEUTRAL_VALUE
        ready = self.is_ready
        if ready and n_zero < 0.5 * self.samples:
            out = round_half_even(100.0 * mc / (mc + mrc), self.decimals)

        self._current = MomersionReading(
            value=out,
            is_ready=ready,
            momentum_count=mc,
            reversion_count=mrc,
            samples=self.samples,
        )
        return self._current

    def __repr__(self) -> str:
        return (
            f"MomersionIndicator(required_samples={self.required_samples}, full_period={self.full_period}, "
            f"value={self._current.value}, ready={self._current.is_ready})"
        )


def compute_momersion(series: pd.Series, *, cfg: Optional[MomersionConfig] = None) -> pd.DataFrame:
    """Run the streaming indicator over a price series.

    Returns
    -------
    pd.DataFrame
        Same index as ``series``; columns ``momersion`` and ``is_ready``.
    """

    if not isinstance(series, pd.Series):
        raise TypeError("series must be a pandas Series")
    if series.isna().any():
        raise ValueError("series contains NaN; fill or drop before computing momersion")

    ind = MomersionIndicator(cfg)
    values = np.empty(len(series), dtype=float)
    ready = np.zeros(len(series), dtype=bool)
    for i, x in enumerate(series.astype(float).to_numpy()):
        r = ind.update(x)
        values[i] = r.value
        ready[i] = r.is_ready

    return pd.DataFrame({"momersion": values, "is_ready": ready}, index=series.index)


__all__ = ["NEUTRAL_VALUE", "MomersionReading", "MomersionIndicator", "compute_momersion"]
