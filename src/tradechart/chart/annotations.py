"""Trade entry/exit chart annotations."""

from __future__ import annotations

from typing import Any

from tradechart.domain.models import Trade

RANGE_COLORS = ("#00ff00", "#ff0000")
MARKER_SIZE = 5
LABEL_BACKGROUND = "#fff"


def point_annotations(trade: Trade) -> list[dict[str, Any]]:
    """Markers for the entry and each exit."""
    if not trade.show_trades:
        return []
    points = [
        {
            "x": trade.enter_date.isoformat(),
            "y": trade.enter_price,
            "marker": {"size": MARKER_SIZE},
            "label": {"style": {"background": LABEL_BACKGROUND}},
        }
    ]
    for exit_ in trade.exits:
        points.append(
            {
                "x": exit_.exit_date.isoformat(),
                "y": exit_.exit_price,
                "marker": {"size": MARKER_SIZE},
                "label": {"text": "Exit", "style": {"background": LABEL_BACKGROUND}},
            }
        )
    return points


def range_annotations(trade: Trade) -> list[dict[str, Any]]:
    """Shaded x-axis ranges, one per exit, alternating colors."""
    if not trade.show_trades:
        return []
    ranges: list[dict[str, Any]] = []
    range_start = trade.enter_date
    for index, exit_ in enumerate(trade.exits):
        ranges.append(
            {
                "x": range_start.isoformat(),
                "x2": exit_.exit_date.isoformat(),
                "fillColor": RANGE_COLORS[index % len(RANGE_COLORS)],
                "label": {"text": f"Buy {trade.enter_price:.2f}"},
            }
        )
        range_start = exit_.exit_date
    return ranges


def build_annotations(trade: Trade) -> dict[str, list[dict[str, Any]]]:
    return {"points": point_annotations(trade), "xaxis": range_annotations(trade)}
