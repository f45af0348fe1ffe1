"""Offline Plotly HTML chart renderer."""

from __future__ import annotations

from collections.abc import Sequence
from html import escape
from pathlib import Path

import plotly.graph_objects as go
from plotly.subplots import make_subplots

from tradechart.chart.annotations import point_annotations, range_annotations
from tradechart.domain.models import Bar, Trade


def build_figure(title: str, bars: Sequence[Bar], trade: Trade) -> go.Figure:
    """Candlesticks over a volume panel, with trade ranges and markers."""
    dates = [bar.date.isoformat() for bar in bars]
    figure = make_subplots(
        rows=2,
        cols=1,
        shared_xaxes=True,
        vertical_spacing=0.03,
        row_heights=[0.75, 0.25],
    )
    figure.add_trace(
        go.Candlestick(
            x=dates,
            open=[bar.open for bar in bars],
            high=[bar.high for bar in bars],
            low=[bar.low for bar in bars],
            close=[bar.close for bar in bars],
            name=trade.symbol,
        ),
        row=1,
        col=1,
    )
    figure.add_trace(
        go.Bar(x=dates, y=[bar.volume for bar in bars], name="Volume"),
        row=2,
        col=1,
    )
    for span in range_annotations(trade):
        figure.add_vrect(
            x0=span["x"],
            x1=span["x2"],
            fillcolor=span["fillColor"],
            opacity=0.15,
            line_width=0,
            annotation_text=span["label"]["text"],
            annotation_position="top left",
            row=1,
            col=1,
        )
    points = point_annotations(trade)
    if points:
        figure.add_trace(
            go.Scatter(
                x=[point["x"] for point in points],
                y=[point["y"] for point in points],
                mode="markers+text",
                text=[point["label"].get("text", "Enter") for point in points],
                textposition="top center",
                marker={"size": 10, "color": "#1f2937"},
                name="Trades",
            ),
            row=1,
            col=1,
        )
    figure.update_layout(
        title=title,
        xaxis_rangeslider_visible=False,
        showlegend=False,
        height=600,
    )
    return figure


def write_chart_report(
    sections: Sequence[tuple[str, Sequence[Bar]]],
    trade: Trade,
    output_html_path: str,
) -> Path:
    """Render one figure per (title, bars) section into a single HTML file."""
    output = Path(output_html_path)
    output.parent.mkdir(parents=True, exist_ok=True)
    html_parts = [
        "<html><head><meta charset='utf-8'>",
        f"<title>{escape(trade.symbol)} trade chart</title></head><body>",
    ]
    for position, (title, bars) in enumerate(sections):
        figure = build_figure(title, bars, trade)
        html_parts.append(
            figure.to_html(full_html=False, include_plotlyjs="cdn" if position == 0 else False)
        )
    html_parts.append("</body></html>")
    output.write_text("".join(html_parts), encoding="utf-8")
    return output
