"""Domain models."""

from .models import (
    AggregatedBar,
    AggregationResult,
    Bar,
    BarSeries,
    DailyBar,
    Granularity,
    RowError,
    Trade,
    TradeExit,
    TradeOrder,
    Weekday,
)

__all__ = [
    "AggregatedBar",
    "AggregationResult",
    "Bar",
    "BarSeries",
    "DailyBar",
    "Granularity",
    "RowError",
    "Trade",
    "TradeExit",
    "TradeOrder",
    "Weekday",
]
