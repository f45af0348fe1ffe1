"""Web front end."""

from .app import create_app
from .params import ChartRequest, parse_chart_request

__all__ = ["ChartRequest", "create_app", "parse_chart_request"]
