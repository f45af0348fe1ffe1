"""Price source contract."""

from __future__ import annotations

from datetime import date
from typing import Protocol

import pandas as pd


class PriceSource(Protocol):
    """Interface for daily bar retrieval."""

    def get_daily_bars(self, symbol: str, start: date, end: date) -> pd.DataFrame:
        """Return daily OHLCV bars between start and end (inclusive) with datetime index."""
