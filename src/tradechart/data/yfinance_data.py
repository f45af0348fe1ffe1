"""Yahoo Finance price source via yfinance."""

from __future__ import annotations

import logging
from datetime import date, timedelta

import pandas as pd

from tradechart.data.normalize import clip_to_range, normalize_ohlcv_frame
from tradechart.errors import DataProviderError


class YFinanceDataProvider:
    """Fetch daily OHLCV bars from Yahoo Finance via yfinance."""

    interval = "1d"

    def __init__(self) -> None:
        self.logger = logging.getLogger("tradechart.data.yfinance")

    def get_daily_bars(self, symbol: str, start: date, end: date) -> pd.DataFrame:
        try:
            import yfinance as yf
        except ImportError as exc:
            raise DataProviderError(
                "yfinance is required for DATA_SOURCE=yfinance. Install it with `pip install yfinance`."
            ) from exc

        ticker = self._resolve_symbol(symbol)
        self.logger.info("fetching %s daily bars %s..%s", ticker, start, end)
        try:
            history = yf.Ticker(ticker).history(
                start=start.isoformat(),
                # yfinance treats end as exclusive
                end=(end + timedelta(days=1)).isoformat(),
                interval=self.interval,
                auto_adjust=False,
                actions=False,
            )
        except Exception as exc:
            raise DataProviderError(f"yfinance request failed for {symbol} ({ticker}): {exc}") from exc

        frame = normalize_ohlcv_frame(pd.DataFrame(history), f"yfinance {symbol} ({ticker})")
        frame = clip_to_range(frame, start, end)
        if frame.empty:
            self.logger.warning(
                "yfinance returned no rows for %s (%s) %s..%s", symbol, ticker, start, end
            )
        return frame

    @staticmethod
    def _resolve_symbol(symbol: str) -> str:
        value = symbol.strip()
        if ":" in value:
            market, bare_symbol = value.split(":", 1)
            if market.strip() and bare_symbol.strip():
                value = bare_symbol
        return value.strip().upper()
