"""Column normalization shared by the price sources."""

from __future__ import annotations

import re
from datetime import date
from typing import Any

import pandas as pd

from tradechart.errors import DataProviderError

DATE_COLUMN_CANDIDATES = ("date", "datetime", "timestamp")
OHLCV_COLUMNS = ("open", "high", "low", "close", "volume")


def column_key(value: Any) -> str:
    """Reduce a column label to a lower-case snake key."""
    if isinstance(value, tuple):
        text = "_".join(str(part) for part in value if part is not None)
    else:
        text = str(value)
    return re.sub(r"[^a-zA-Z0-9]+", "_", text).strip("_").lower()


def pick_column(frame: pd.DataFrame, field: str) -> Any | None:
    """Find the column matching ``field``, including multi-index ``field_<ticker>`` labels."""
    for column in frame.columns:
        key = column_key(column)
        if key == field or key.startswith(f"{field}_"):
            return column
    return None


def normalize_ohlcv_frame(
    frame: pd.DataFrame,
    label: str,
    date_column: Any | None = None,
) -> pd.DataFrame:
    """Return a frame indexed by date with open/high/low/close/volume columns.

    An input without rows yields an empty frame with the same columns.
    Unparsable dates become NaT and unparsable prices NaN. Rows are kept so the
    series decoder can report them.
    """
    if frame.empty:
        return empty_ohlcv_frame()

    open_column = pick_column(frame, "open")
    high_column = pick_column(frame, "high")
    low_column = pick_column(frame, "low")
    close_column = pick_column(frame, "close")
    if close_column is None:
        close_column = pick_column(frame, "adj_close")
    volume_column = pick_column(frame, "volume")
    if open_column is None or high_column is None or low_column is None or close_column is None:
        raise DataProviderError(f"{label}: payload missing OHLC columns")

    if date_column is None:
        raw_dates = frame.index
    else:
        raw_dates = frame[date_column]
    index = _to_datetime_index(raw_dates)

    normalized = pd.DataFrame(index=index)
    normalized["open"] = pd.to_numeric(frame[open_column], errors="coerce").to_numpy()
    normalized["high"] = pd.to_numeric(frame[high_column], errors="coerce").to_numpy()
    normalized["low"] = pd.to_numeric(frame[low_column], errors="coerce").to_numpy()
    normalized["close"] = pd.to_numeric(frame[close_column], errors="coerce").to_numpy()
    if volume_column is None:
        normalized["volume"] = 0
    else:
        normalized["volume"] = (
            pd.to_numeric(frame[volume_column], errors="coerce").fillna(0).to_numpy()
        )
    return normalized.sort_index(kind="stable", na_position="last")


def empty_ohlcv_frame() -> pd.DataFrame:
    """Zero-row OHLCV frame with an empty DatetimeIndex."""
    return pd.DataFrame(columns=list(OHLCV_COLUMNS), index=pd.DatetimeIndex([]), dtype="float64")


def pick_date_column(frame: pd.DataFrame) -> Any:
    """Return the first date-like column, or fail naming the accepted ones."""
    lower_to_original = {str(column).strip().lower(): column for column in frame.columns}
    for candidate in DATE_COLUMN_CANDIDATES:
        if candidate in lower_to_original:
            return lower_to_original[candidate]
    candidates = ", ".join(DATE_COLUMN_CANDIDATES)
    raise DataProviderError(f"CSV missing date column. Expected one of: {candidates}")


def clip_to_range(frame: pd.DataFrame, start: date, end: date) -> pd.DataFrame:
    """Keep rows dated within [start, end]; rows without a date are kept."""
    mask = [pd.isna(stamp) or start <= stamp.date() <= end for stamp in frame.index]
    return frame.loc[mask]


def _to_datetime_index(values: Any) -> pd.DatetimeIndex:
    try:
        parsed = pd.to_datetime(values, errors="coerce")
    except (TypeError, ValueError):
        parsed = None
    if parsed is None or not pd.api.types.is_datetime64_any_dtype(parsed):
        # Mixed UTC offsets only parse with an explicit utc conversion.
        parsed = pd.to_datetime(values, errors="coerce", utc=True)
    return pd.DatetimeIndex(parsed)
