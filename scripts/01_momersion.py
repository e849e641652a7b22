"""Compute Momersion over the close column of a bar CSV.

- Loads configuration YAML (configs/base.yaml)
- Reads the bar CSV (timestamp + OHLC columns)
- Writes momersion.csv (momersion, is_ready) and a config snapshot

Example
-------
python scripts/01_momersion.py \
  --bars data/spy_1min.csv \
  --full-period 10 \
  --out reports/momersion
"""

from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import Any, Dict

from itrend.data.bars import read_bar_csv
from itrend.signals.momersion import compute_momersion
from itrend.utils import ensure_dir, load_config, save_csv, save_yaml

logger = logging.getLogger(__name__)


def _parse_args() -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Compute Momersion from a bar CSV")

    p.add_argument(
        "--config",
        type=str,
        default=str(Path(__file__).resolve().parents[1] / "configs" / "base.yaml"),
        help="Path to base configuration YAML",
    )
    p.add_argument("--bars", type=str, required=True, help="Bar CSV with a timestamp column")
    p.add_argument(
        "--out",
        type=str,
        default=str(Path(__file__).resolve().parents[1] / "reports" / "momersion"),
        help="Output directory",
    )
    p.add_argument("--full-period", type=int, default=None, help="Override momersion.full_period")
    p.add_argument(
        "--min-period",
        type=int,
        default=None,
        help="Override momersion.min_period (omit for single-threshold mode)",
    )
    p.add_argument("--log-level", type=str, default="INFO")
    return p.parse_args()


def main() -> None:
    args = _parse_args()
    logging.basicConfig(level=args.log_level.upper(), format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    overrides: Dict[str, Any] = {}
    if args.full_period is not None:
        overrides.setdefault("momersion", {})["full_period"] = int(args.full_period)
        # a new full period without an explicit min period means single-threshold mode
        overrides["momersion"].setdefault("min_period", None)
    if args.min_period is not None:
        overrides.setdefault("momersion", {})["min_period"] = int(args.min_period)

    cfg = load_config(args.config, overrides=overrides)
    out_dir = ensure_dir(args.out)

    bars = read_bar_csv(args.bars, cfg=cfg.data)
    res = compute_momersion(bars[cfg.data.close_col], cfg=cfg.momersion)

    save_csv(res, out_dir / "momersion.csv")
    save_yaml(cfg.to_dict(), out_dir / "config_snapshot.yaml")

    n_ready = int(res["is_ready"].sum())
    logger.info("Wrote %s (%d rows, %d ready)", out_dir, len(res), n_ready)


if __name__ == "__main__":
    main()
