"""Granularity dispatch for bar aggregation."""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from typing import Any

from tradechart.aggregation.periods import aggregate_monthly, aggregate_weekly
from tradechart.aggregation.series import decode_rows
from tradechart.domain.models import AggregationResult, Bar, Granularity, Weekday


def aggregate(
    series: Sequence[Bar] | Iterable[Bar],
    granularity: Granularity,
    week_end_day: Weekday = Weekday.FRIDAY,
) -> tuple[Bar, ...]:
    """Re-sample daily bars into the requested granularity."""
    bars = tuple(series)
    if granularity == Granularity.WEEKLY:
        return aggregate_weekly(bars, week_end_day)
    if granularity == Granularity.MONTHLY:
        return aggregate_monthly(bars)
    return bars


def aggregate_rows(
    rows: Iterable[Mapping[str, Any]],
    granularity: Granularity,
    week_end_day: Weekday = Weekday.FRIDAY,
    symbol: str = "",
) -> AggregationResult:
    """Decode raw rows leniently and aggregate what could be decoded."""
    series, errors = decode_rows(rows, symbol=symbol)
    return AggregationResult(
        bars=aggregate(series, granularity, week_end_day),
        errors=errors,
    )
