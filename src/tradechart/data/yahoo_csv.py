"""Yahoo Finance CSV download price source."""

from __future__ import annotations

import io
import logging
from datetime import UTC, date, datetime, time, timedelta
from time import sleep
from urllib.parse import quote

import pandas as pd
import requests

from tradechart.data.normalize import clip_to_range, normalize_ohlcv_frame, pick_date_column
from tradechart.errors import DataProviderError


class YahooCsvDataProvider:
    """Download daily history as CSV from Yahoo's download endpoint."""

    BASE_URL = "https://query1.finance.yahoo.com/v7/finance/download"

    def __init__(
        self,
        timeout: int = 20,
        max_retries: int = 3,
        base_url: str | None = None,
        session: requests.Session | None = None,
    ) -> None:
        self.base_url = (base_url or self.BASE_URL).rstrip("/")
        self.timeout = timeout
        self.max_retries = max_retries
        self.session = session or requests.Session()
        self.session.headers.setdefault("User-Agent", "Mozilla/5.0 (tradechart)")
        self.logger = logging.getLogger("tradechart.data.yahoo_csv")

    def build_url(self, symbol: str) -> str:
        return f"{self.base_url}/{quote(symbol.strip(), safe='')}"

    @staticmethod
    def build_params(start: date, end: date) -> dict[str, str]:
        """Query parameters covering [start, end] as unix timestamps."""
        period1 = datetime.combine(start, time.min, tzinfo=UTC)
        period2 = datetime.combine(end + timedelta(days=1), time.min, tzinfo=UTC)
        return {
            "period1": str(int(period1.timestamp())),
            "period2": str(int(period2.timestamp())),
            "interval": "1d",
            "events": "history",
        }

    def get_daily_bars(self, symbol: str, start: date, end: date) -> pd.DataFrame:
        url = self.build_url(symbol)
        self.logger.info("downloading %s daily csv %s..%s", symbol, start, end)
        text = self._request_with_retry(url, self.build_params(start, end))
        try:
            raw = pd.read_csv(io.StringIO(text), dtype=str, keep_default_na=False)
        except (pd.errors.ParserError, pd.errors.EmptyDataError) as exc:
            raise DataProviderError(f"Yahoo CSV for {symbol} could not be parsed: {exc}") from exc
        label = f"yahoo csv {symbol}"
        frame = normalize_ohlcv_frame(raw, label, date_column=pick_date_column(raw))
        frame = clip_to_range(frame, start, end)
        if frame.empty:
            self.logger.warning("%s: no rows between %s and %s", label, start, end)
        return frame

    def _request_with_retry(self, url: str, params: dict[str, str]) -> str:
        for attempt in range(1, self.max_retries + 1):
            try:
                response = self.session.get(url, params=params, timeout=self.timeout)
            except requests.RequestException as exc:
                if attempt == self.max_retries:
                    raise DataProviderError(f"Yahoo CSV request failed: {exc}") from exc
                sleep(float(attempt))
                continue
            if response.status_code == 429:
                if attempt == self.max_retries:
                    raise DataProviderError("Yahoo CSV rate limit exceeded")
                sleep(float(attempt))
                continue
            if response.status_code >= 500:
                if attempt == self.max_retries:
                    raise DataProviderError(f"Yahoo CSV server error: {response.status_code}")
                sleep(float(attempt))
                continue
            if response.status_code >= 400:
                detail = response.text.strip() or "No response body"
                raise DataProviderError(f"Yahoo CSV error {response.status_code}: {detail}")
            return response.text
        raise DataProviderError("Yahoo CSV request exhausted retries")
