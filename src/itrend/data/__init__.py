"""Data subpackage.

- :mod:`itrend.data.bars`: Bar type, bar-table validation, CSV loading
- :mod:`itrend.data.session`: exchange-local time and the end-of-day window
"""

from .bars import Bar, bar_from_row, bars_from_frame, read_bar_csv, validate_bar_frame
from .session import SessionWindow, eod_window, in_eod_window, to_exchange_time

__all__ = [
    "Bar",
    "bar_from_row",
    "bars_from_frame",
    "read_bar_csv",
    "validate_bar_frame",
    "SessionWindow",
    "eod_window",
    "in_eod_window",
    "to_exchange_time",
]
