"""CSV-backed price source."""

from __future__ import annotations

import logging
from datetime import date
from pathlib import Path

import pandas as pd

from tradechart.data.normalize import clip_to_range, normalize_ohlcv_frame, pick_date_column
from tradechart.errors import DataProviderError


class CsvDataProvider:
    """Load daily OHLCV bars from local CSV files.

    Expected file patterns:
    - {SYMBOL}.csv
    - {symbol}.csv
    - {MARKET}/{SYMBOL}.csv for ``MARKET:SYMBOL`` symbols

    Date column can be one of: date, datetime, timestamp.
    """

    def __init__(self, data_dir: str = "historical_data") -> None:
        self.data_dir = Path(data_dir)
        self._frames: dict[Path, pd.DataFrame] = {}
        self.logger = logging.getLogger("tradechart.data.csv")

    def get_daily_bars(self, symbol: str, start: date, end: date) -> pd.DataFrame:
        path = self._resolve_path(symbol)
        if path is None:
            expected_paths = ", ".join(self._expected_csv_hints(symbol))
            raise DataProviderError(
                f"No CSV found for {symbol} in {self.data_dir}. "
                f"Expected one of: {expected_paths}"
            )
        frame = clip_to_range(self._load(path, symbol), start, end)
        if frame.empty:
            self.logger.warning("%s: CSV has no rows between %s and %s", symbol, start, end)
        return frame.copy()

    def _load(self, path: Path, symbol: str) -> pd.DataFrame:
        cached = self._frames.get(path)
        if cached is not None:
            return cached
        try:
            raw = pd.read_csv(path, dtype=str, keep_default_na=False)
        except (OSError, pd.errors.ParserError, pd.errors.EmptyDataError) as exc:
            raise DataProviderError(f"Failed to read CSV for {symbol}: {exc}") from exc
        normalized = normalize_ohlcv_frame(raw, symbol, date_column=pick_date_column(raw))
        self._frames[path] = normalized
        return normalized

    def _resolve_path(self, symbol: str) -> Path | None:
        market, bare_symbol = self._split_market_symbol(symbol)
        symbol_upper = bare_symbol.upper()
        symbol_lower = bare_symbol.lower()
        candidates: list[Path] = []
        if market is not None:
            market_upper = market.upper()
            market_lower = market.lower()
            candidates.extend(
                [
                    self.data_dir / market_upper / f"{symbol_upper}.csv",
                    self.data_dir / market_upper / f"{symbol_lower}.csv",
                    self.data_dir / market_lower / f"{symbol_upper}.csv",
                    self.data_dir / market_lower / f"{symbol_lower}.csv",
                ]
            )
        candidates.extend(
            [
                self.data_dir / f"{symbol_upper}.csv",
                self.data_dir / f"{symbol_lower}.csv",
            ]
        )
        seen: set[Path] = set()
        for candidate in candidates:
            if candidate in seen:
                continue
            seen.add(candidate)
            if candidate.exists():
                return candidate
        return None

    @staticmethod
    def _split_market_symbol(symbol: str) -> tuple[str | None, str]:
        value = symbol.strip()
        if ":" not in value:
            return None, value
        market, bare_symbol = value.split(":", 1)
        market = market.strip()
        bare_symbol = bare_symbol.strip()
        if not market or not bare_symbol:
            return None, value
        return market, bare_symbol

    def _expected_csv_hints(self, symbol: str) -> list[str]:
        market, bare_symbol = self._split_market_symbol(symbol)
        hints = [f"{bare_symbol.upper()}.csv"]
        if market is not None:
            hints.insert(0, f"{market.upper()}/{bare_symbol.upper()}.csv")
        return hints
