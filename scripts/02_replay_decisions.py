"""Replay a bar table with precomputed trend/trigger columns through the engine.

- Loads configuration YAML (configs/base.yaml)
- Reads the bar CSV (timestamp, OHLC, trend, trigger)
- Runs the crossover engine against the in-memory paper broker
- Writes decisions.csv, the structured event log and a config snapshot

Example
-------
python scripts/02_replay_decisions.py \
  --bars data/spy_1min_with_trend.csv \
  --symbol SPY \
  --out reports/replay
"""

from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import Any, Dict

from itrend.data.bars import read_bar_csv
from itrend.execution.broker import PaperBroker
from itrend.trading.engine import InstantTrendEngine
from itrend.trading.logs import TradingLog
from itrend.trading.replay import replay_decisions
from itrend.utils import ensure_dir, load_config, save_csv, save_json, save_yaml

logger = logging.getLogger(__name__)


def _parse_args() -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Replay instant-trend decisions over a bar CSV")

    p.add_argument(
        "--config",
        type=str,
        default=str(Path(__file__).resolve().parents[1] / "configs" / "base.yaml"),
        help="Path to base configuration YAML",
    )
    p.add_argument("--bars", type=str, required=True, help="Bar CSV with trend/trigger columns")
    p.add_argument(
        "--out",
        type=str,
        default=str(Path(__file__).resolve().parents[1] / "reports" / "replay"),
        help="Output directory",
    )
    p.add_argument("--symbol", type=str, default=None, help="Override symbol")
    p.add_argument("--trade-size", type=int, default=None, help="Override trade_size")
    p.add_argument("--no-eod", action="store_true", help="Disable end-of-day liquidation")
    p.add_argument("--log-level", type=str, default="INFO")
    return p.parse_args()


def main() -> None:
    args = _parse_args()
    logging.basicConfig(level=args.log_level.upper(), format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    overrides: Dict[str, Any] = {}
    if args.symbol is not None:
        overrides["symbol"] = args.symbol
    if args.trade_size is not None:
        overrides["trade_size"] = int(args.trade_size)
    if args.no_eod:
        overrides.setdefault("engine", {})["sell_out_at_eod"] = False

    cfg = load_config(args.config, overrides=overrides)
    out_dir = ensure_dir(args.out)

    bars = read_bar_csv(args.bars, cfg=cfg.data)

    broker = PaperBroker()
    log = TradingLog(header={"run_name": cfg.run_name, "symbol": cfg.symbol, "engine": cfg.to_dict()["engine"]})
    engine = InstantTrendEngine(cfg.symbol, broker, cfg.engine, log=log)

    decisions = replay_decisions(bars, engine, broker, trade_size=cfg.trade_size, cfg=cfg.data)

    save_csv(decisions, out_dir / "decisions.csv")
    save_json(log.to_dict(), out_dir / "events.json")
    save_yaml(cfg.to_dict(), out_dir / "config_snapshot.yaml")

    logger.info("Wrote %s (%d bars, %d events)", out_dir, len(decisions), len(log))


if __name__ == "__main__":
    main()
