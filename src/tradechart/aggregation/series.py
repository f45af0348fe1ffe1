"""Daily series decoding, validation and price truncation."""

from __future__ import annotations

import logging
import math
from collections.abc import Iterable, Mapping
from datetime import date, datetime
from typing import Any

import pandas as pd

from tradechart.domain.models import Bar, BarSeries, RowError
from tradechart.errors import MalformedInputError

DATE_FORMAT = "%Y-%m-%d"
PRICE_FIELDS = ("open", "high", "low", "close")
OHLCV_COLUMNS = ("open", "high", "low", "close", "volume")

logger = logging.getLogger("tradechart.aggregation.series")


def truncate_price(value: float) -> float:
    """Round a price down to two decimals.

    Prices are truncated with ``floor(value * 100) / 100`` rather than rounded
    to nearest, so ``10.129`` becomes ``10.12`` and ``-1.001`` becomes ``-1.01``.
    """
    return math.floor(value * 100) / 100


def parse_bar_date(value: Any) -> date:
    """Coerce a row date into a calendar date."""
    if isinstance(value, datetime):
        if pd.isna(value):
            raise MalformedInputError("missing date")
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        text = value.strip()
        if not text:
            raise MalformedInputError("missing date")
        try:
            return datetime.strptime(text, DATE_FORMAT).date()
        except ValueError:
            raise MalformedInputError(f"invalid date {value!r}") from None
    if value is None:
        raise MalformedInputError("missing date")
    raise MalformedInputError(f"invalid date {value!r}")


def decode_row(row: Mapping[str, Any]) -> Bar:
    """Decode one raw OHLCV row into a daily bar with truncated prices."""
    fields = {str(key).strip().lower(): value for key, value in row.items()}
    bar_date = parse_bar_date(fields.get("date"))
    prices = {name: truncate_price(_parse_price(fields.get(name), name)) for name in PRICE_FIELDS}
    return Bar(date=bar_date, volume=_parse_volume(fields.get("volume")), **prices)


def build_series(rows: Iterable[Mapping[str, Any]], symbol: str = "") -> BarSeries:
    """Build a series from raw rows, failing on the first undecodable row."""
    bars: list[Bar] = []
    for index, row in enumerate(rows):
        try:
            bars.append(decode_row(row))
        except MalformedInputError as exc:
            raise MalformedInputError(f"{symbol or 'series'} row {index}: {exc}") from exc
    series = BarSeries(symbol=symbol, bars=tuple(bars))
    _warn_on_suspicious_bars(series)
    return series


def decode_rows(
    rows: Iterable[Mapping[str, Any]],
    symbol: str = "",
) -> tuple[BarSeries, tuple[RowError, ...]]:
    """Decode rows leniently, skipping bad rows and describing each one."""
    bars: list[Bar] = []
    errors: list[RowError] = []
    for index, row in enumerate(rows):
        try:
            bars.append(decode_row(row))
        except MalformedInputError as exc:
            logger.warning("skipping row %d of %s: %s", index, symbol or "series", exc)
            errors.append(RowError(index=index, reason=str(exc)))
    series = BarSeries(symbol=symbol, bars=tuple(bars))
    _warn_on_suspicious_bars(series)
    return series, tuple(errors)


def rows_from_frame(frame: pd.DataFrame) -> list[dict[str, Any]]:
    """Turn a normalized OHLCV frame with a datetime index into raw rows."""
    missing = [column for column in OHLCV_COLUMNS if column not in frame.columns]
    if missing:
        raise MalformedInputError(f"frame missing columns: {', '.join(missing)}")
    rows: list[dict[str, Any]] = []
    for index, open_, high, low, close, volume in frame[list(OHLCV_COLUMNS)].itertuples(
        name=None
    ):
        rows.append(
            {
                "date": index,
                "open": open_,
                "high": high,
                "low": low,
                "close": close,
                "volume": volume,
            }
        )
    return rows


def series_from_frame(frame: pd.DataFrame, symbol: str = "") -> BarSeries:
    """Strictly convert a normalized OHLCV frame into a series."""
    return build_series(rows_from_frame(frame), symbol=symbol)


def _parse_price(value: Any, name: str) -> float:
    if value is None or (isinstance(value, str) and not value.strip()):
        raise MalformedInputError(f"missing {name}")
    try:
        price = float(value)
    except (TypeError, ValueError):
        raise MalformedInputError(f"invalid {name} {value!r}") from None
    if not math.isfinite(price):
        raise MalformedInputError(f"invalid {name} {value!r}")
    return price


def _parse_volume(value: Any) -> int:
    if value is None or (isinstance(value, str) and not value.strip()):
        return 0
    if isinstance(value, bool):
        raise MalformedInputError(f"invalid volume {value!r}")
    if isinstance(value, int):
        volume = value
    else:
        try:
            number = float(value)
        except (TypeError, ValueError):
            raise MalformedInputError(f"invalid volume {value!r}") from None
        if math.isnan(number):
            return 0
        if not math.isfinite(number) or not number.is_integer():
            raise MalformedInputError(f"invalid volume {value!r}")
        volume = int(number)
    if volume < 0:
        raise MalformedInputError(f"negative volume {volume}")
    return volume


def _warn_on_suspicious_bars(series: BarSeries) -> None:
    if not series.is_chronological():
        logger.warning("%s: dates are not in chronological order", series.symbol or "series")
    for bar in series:
        if not bar.is_consistent():
            logger.warning(
                "%s: inconsistent bar on %s (open %s high %s low %s close %s)",
                series.symbol or "series",
                bar.date.isoformat(),
                bar.open,
                bar.high,
                bar.low,
                bar.close,
            )
