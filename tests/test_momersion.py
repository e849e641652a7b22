"""Tests for the Momersion indicator.

Covers the two pinned conformance vectors (single-threshold and min/full
period modes), warm-up behavior, ratio bounds and the neutral-sample rule.

Prices are real minute closes rounded to 2 decimals.
"""

from __future__ import annotations

import numpy as np
import pandas as pd
import pytest

from itrend.signals.momersion import NEUTRAL_VALUE, MomersionIndicator, compute_momersion
from itrend.utils.config import MomersionConfig

PRICES = [
    125.99, 125.91, 125.75, 125.62, 125.54, 125.45, 125.47,
    125.40, 125.43, 125.45, 125.42, 125.36, 125.23, 125.32,
    125.26, 125.31, 125.41, 125.50, 125.51, 125.41, 125.54,
    125.51, 125.61, 125.43, 125.42, 125.42, 125.46, 125.43,
    125.40, 125.35,
]

EXPECTED_FULL_10 = [50.0] * 12 + [
    60.00, 50.00, 40.00, 30.00, 40.00, 50.00, 60.00, 50.00, 50.00, 40.00,
    30.00, 30.00, 40.00, 44.44, 37.50, 25.00, 25.00, 37.50,
]

EXPECTED_MIN_7_FULL_20 = [50.0] * 8 + [
    57.14, 62.50, 55.56, 60.00, 63.64, 58.33, 53.85, 50.00, 53.33, 56.25,
    58.82, 55.56, 52.63, 50.00, 45.00, 40.00, 40.00, 36.84, 38.89, 38.89,
    44.44, 44.44,
]


def _run(ind: MomersionIndicator, prices) -> list:
    return [ind.update(p) for p in prices]


def test_only_full_period_matches_reference_vector() -> None:
    ind = MomersionIndicator(MomersionConfig(full_period=10))
    readings = _run(ind, PRICES)

    assert len(EXPECTED_FULL_10) == len(PRICES)
    assert [r.value for r in readings] == EXPECTED_FULL_10


def test_min_period_matches_reference_vector() -> None:
    ind = MomersionIndicator.from_periods(20, min_period=7)
    readings = _run(ind, PRICES)

    assert len(EXPECTED_MIN_7_FULL_20) == len(PRICES)
    assert [r.value for r in readings] == EXPECTED_MIN_7_FULL_20


@pytest.mark.parametrize(
    "cfg, first_ready",
    [
        (MomersionConfig(full_period=10), 12),
        (MomersionConfig(full_period=20, min_period=7), 8),
        (MomersionConfig(full_period=10, min_period=10), 11),
    ],
)
def test_warmup_reports_pinned_neutral_until_ready(cfg: MomersionConfig, first_ready: int) -> None:
    ind = MomersionIndicator(cfg)
    readings = _run(ind, PRICES)

    for i, r in enumerate(readings[:first_ready]):
        assert r.value == NEUTRAL_VALUE, i
        assert not r.is_ready, i
    assert all(r.is_ready for r in readings[first_ready:])
    assert ind.warm_up_period == first_ready + 1


def test_computed_fifty_is_flagged_ready() -> None:
    # index 13 of the full=10 vector is a computed 50 (5 momentum / 5 reversion)
    ind = MomersionIndicator(MomersionConfig(full_period=10))
    readings = _run(ind, PRICES)

    r = readings[13]
    assert r.value == 50.0
    assert r.is_ready
    assert r.momentum_count == 5
    assert r.reversion_count == 5


def test_ratio_bounds_on_random_walk() -> None:
    rng = np.random.default_rng(7)
    prices = 100.0 + np.cumsum(np.round(rng.normal(0.0, 0.05, size=500), 2))

    ind = MomersionIndicator(MomersionConfig(full_period=15, min_period=5))
    for p in prices:
        r = ind.update(p)
        if r.is_ready:
            assert 0.0 <= r.value <= 100.0
        else:
            assert r.value == NEUTRAL_VALUE
        assert r.samples <= 15


def test_mostly_flat_window_reports_neutral_while_ready() -> None:
    ind = MomersionIndicator(MomersionConfig(full_period=4, min_period=4))
    readings = _run(ind, [1.0, 2.0, 3.0, 4.0, 5.0, 6.0, 6.0, 6.0])

    assert readings[5].is_ready and readings[5].value == 100.0
    # one flat product out of four: still computed
    assert readings[6].value == 100.0
    # two flat products out of four: pinned neutral, but ready
    assert readings[7].value == NEUTRAL_VALUE
    assert readings[7].is_ready


def test_reset_restarts_warmup() -> None:
    ind = MomersionIndicator(MomersionConfig(full_period=10, min_period=3))
    _run(ind, PRICES[:10])
    assert ind.is_ready

    ind.reset()
    assert not ind.is_ready
    assert ind.samples == 0
    assert ind.samples_seen == 0
    assert ind.current.value == NEUTRAL_VALUE

    readings = _run(ind, PRICES)
    ref = _run(MomersionIndicator(MomersionConfig(full_period=10, min_period=3)), PRICES)
    assert readings == ref


@pytest.mark.parametrize(
    "kwargs",
    [
        dict(full_period=0),
        dict(full_period=10, min_period=0),
        dict(full_period=10, min_period=11),
    ],
)
def test_invalid_configuration_rejected(kwargs) -> None:
    with pytest.raises(ValueError):
        MomersionIndicator(MomersionConfig(**kwargs))


def test_non_finite_input_rejected() -> None:
    ind = MomersionIndicator(MomersionConfig(full_period=5))
    with pytest.raises(ValueError):
        ind.update(float("nan"))


def test_compute_momersion_series_wrapper() -> None:
    idx = pd.date_range("2015-06-01 09:31", periods=len(PRICES), freq="min")
    close = pd.Series(PRICES, index=idx, name="close")

    out = compute_momersion(close, cfg=MomersionConfig(full_period=20, min_period=7))

    assert list(out.columns) == ["momersion", "is_ready"]
    assert out.index.equals(idx)
    assert out["momersion"].tolist() == EXPECTED_MIN_7_FULL_20
    assert out["is_ready"].sum() == len(PRICES) - 8


def test_compute_momersion_rejects_nan() -> None:
    close = pd.Series([1.0, np.nan, 2.0])
    with pytest.raises(ValueError):
        compute_momersion(close)
