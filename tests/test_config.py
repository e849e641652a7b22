from __future__ import annotations

from datetime import time

import pytest
import yaml

from itrend.utils.config import (
    EngineConfig,
    ITrendConfig,
    MomersionConfig,
    config_from_dict,
    deep_update,
    load_config,
    parse_hhmm,
    validate_config,
)


def test_defaults_validate() -> None:
    cfg = ITrendConfig()
    validate_config(cfg)

    assert cfg.engine.reversal_factor == pytest.approx(1.0015)
    assert cfg.engine.range_fraction == pytest.approx(0.35)
    assert cfg.engine.eod_start == "15:55"
    assert cfg.engine.eod_end == "16:00"


def test_momersion_required_samples() -> None:
    assert MomersionConfig(full_period=10).required_samples == 11
    assert MomersionConfig(full_period=20, min_period=7).required_samples == 7


def test_deep_update_merges_nested() -> None:
    base = {"engine": {"period": 5, "range_fraction": 0.35}, "symbol": "SPY"}
    out = deep_update(base, {"engine": {"period": 7}})

    assert out == {"engine": {"period": 7, "range_fraction": 0.35}, "symbol": "SPY"}
    assert base["engine"]["period"] == 5


def test_load_config_with_overrides(tmp_path) -> None:
    path = tmp_path / "cfg.yaml"
    path.write_text(
        yaml.safe_dump(
            {
                "symbol": "AAPL",
                "trade_size": 50,
                "engine": {"period": 4, "sell_out_at_eod": False},
                "momersion": {"full_period": 10},
            }
        ),
        encoding="utf-8",
    )

    cfg = load_config(path, overrides={"momersion": {"min_period": 5}})

    assert cfg.symbol == "AAPL"
    assert cfg.trade_size == 50
    assert cfg.engine == EngineConfig(period=4, sell_out_at_eod=False)
    assert cfg.momersion == MomersionConfig(full_period=10, min_period=5)
    assert cfg.to_dict()["engine"]["period"] == 4


@pytest.mark.parametrize(
    "d",
    [
        {"trade_size": 0},
        {"symbol": ""},
        {"engine": {"period": 2}},
        {"momersion": {"full_period": 5, "min_period": 6}},
    ],
)
def test_config_from_dict_rejects_invalid(d) -> None:
    with pytest.raises(ValueError):
        config_from_dict(d)


def test_unknown_keys_fail_loudly() -> None:
    with pytest.raises(TypeError):
        config_from_dict({"engine": {"periode": 5}})


def test_parse_hhmm() -> None:
    assert parse_hhmm("15:55") == time(15, 55)
    with pytest.raises(ValueError):
        parse_hhmm("25:00")


def test_load_config_empty_file_gives_defaults(tmp_path) -> None:
    path = tmp_path / "empty.yaml"
    path.write_text("", encoding="utf-8")

    assert load_config(path) == ITrendConfig()
