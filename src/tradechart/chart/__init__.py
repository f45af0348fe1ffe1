"""Chart payloads, trade annotations and HTML reports."""

from .annotations import build_annotations, point_annotations, range_annotations
from .payload import ChartPayload, build_chart_payload
from .plotly_report import build_figure, write_chart_report

__all__ = [
    "ChartPayload",
    "build_annotations",
    "build_chart_payload",
    "build_figure",
    "point_annotations",
    "range_annotations",
    "write_chart_report",
]
