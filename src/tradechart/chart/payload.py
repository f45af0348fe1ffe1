"""Chart payload shaping for the candlestick front end."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from tradechart.chart.annotations import build_annotations
from tradechart.domain.models import Bar, RowError, Trade

ChartPayload = dict[str, Any]


def candle_points(bars: Sequence[Bar]) -> list[dict[str, Any]]:
    return [
        {"x": bar.date.isoformat(), "y": [bar.open, bar.high, bar.low, bar.close]}
        for bar in bars
    ]


def volume_points(bars: Sequence[Bar]) -> list[dict[str, Any]]:
    return [{"x": bar.date.isoformat(), "y": bar.volume} for bar in bars]


def build_chart_payload(
    symbol: str,
    bars: Sequence[Bar],
    trade: Trade,
    errors: Sequence[RowError] = (),
) -> ChartPayload:
    """Build the series/annotations document consumed by chart.js."""
    return {
        "series": [
            {"name": symbol, "data": candle_points(bars)},
            {"name": "Volume", "data": volume_points(bars), "type": "bar"},
        ],
        "annotations": build_annotations(trade),
        "diagnostics": [error.to_record() for error in errors],
    }
