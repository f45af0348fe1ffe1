"""Weekly and monthly bar aggregation."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from datetime import date

from tradechart.domain.models import Bar, Weekday


@dataclass
class _PeriodAccumulator:
    """Running OHLCV state for the period currently being folded."""

    open: float
    high: float
    low: float
    close: float
    volume: int

    @classmethod
    def seed(cls, bar: Bar) -> _PeriodAccumulator:
        return cls(
            open=bar.open,
            high=bar.high,
            low=bar.low,
            close=bar.close,
            volume=bar.volume,
        )

    def fold(self, bar: Bar) -> None:
        self.high = max(self.high, bar.high)
        self.low = min(self.low, bar.low)
        self.close = bar.close
        self.volume += bar.volume

    def emit(self, bar_date: date) -> Bar:
        return Bar(
            date=bar_date,
            open=self.open,
            high=self.high,
            low=self.low,
            close=self.close,
            volume=self.volume,
        )


def aggregate_weekly(
    bars: Sequence[Bar],
    week_end_day: Weekday = Weekday.FRIDAY,
) -> tuple[Bar, ...]:
    """Fold daily bars into weeks closing on ``week_end_day``.

    A week is emitted on the closing weekday, dated with that day. A trailing
    partial week is flushed on the last bar and dated with it.
    """
    weekly: list[Bar] = []
    period: _PeriodAccumulator | None = None
    last_index = len(bars) - 1
    for index, bar in enumerate(bars):
        if period is None:
            period = _PeriodAccumulator.seed(bar)
        else:
            period.fold(bar)
        if bar.date.weekday() == week_end_day or index == last_index:
            weekly.append(period.emit(bar.date))
            period = None
    return tuple(weekly)


def aggregate_monthly(bars: Sequence[Bar]) -> tuple[Bar, ...]:
    """Fold daily bars into calendar months.

    Months are keyed by (year, month). Each bar is dated with the last day of
    that month present in the input.
    """
    monthly: list[Bar] = []
    period: _PeriodAccumulator | None = None
    current_month: tuple[int, int] | None = None
    previous: Bar | None = None
    for bar in bars:
        month = (bar.date.year, bar.date.month)
        if period is None or month != current_month:
            if period is not None and previous is not None:
                monthly.append(period.emit(previous.date))
            period = _PeriodAccumulator.seed(bar)
            current_month = month
        else:
            period.fold(bar)
        previous = bar
    if period is not None and previous is not None:
        monthly.append(period.emit(previous.date))
    return tuple(monthly)
