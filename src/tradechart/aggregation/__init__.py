"""Daily series validation and period aggregation."""

from .dispatch import aggregate, aggregate_rows
from .periods import aggregate_monthly, aggregate_weekly
from .series import (
    build_series,
    decode_row,
    decode_rows,
    parse_bar_date,
    rows_from_frame,
    series_from_frame,
    truncate_price,
)

__all__ = [
    "aggregate",
    "aggregate_monthly",
    "aggregate_rows",
    "aggregate_weekly",
    "build_series",
    "decode_row",
    "decode_rows",
    "parse_bar_date",
    "rows_from_frame",
    "series_from_frame",
    "truncate_price",
]
