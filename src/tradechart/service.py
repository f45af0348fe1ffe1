"""Service facade: fetch daily bars, aggregate, shape for charts."""

from __future__ import annotations

import logging
from datetime import date, timedelta

from tradechart.aggregation.dispatch import aggregate_rows
from tradechart.aggregation.series import rows_from_frame
from tradechart.chart.payload import ChartPayload, build_chart_payload
from tradechart.config import Settings
from tradechart.data.base import PriceSource
from tradechart.data.csv_data import CsvDataProvider
from tradechart.data.yahoo_csv import YahooCsvDataProvider
from tradechart.data.yfinance_data import YFinanceDataProvider
from tradechart.domain.models import AggregationResult, Granularity, Trade, Weekday
from tradechart.errors import ConfigError


def build_price_source(settings: Settings) -> PriceSource:
    """Create the price source selected by ``settings.data_source``."""
    if settings.data_source == "yfinance":
        return YFinanceDataProvider()
    if settings.data_source == "yahoo_csv":
        return YahooCsvDataProvider(
            timeout=settings.request_timeout_seconds,
            max_retries=settings.max_retries,
        )
    if settings.data_source == "csv":
        return CsvDataProvider(data_dir=settings.historical_data_dir)
    raise ConfigError(f"Unsupported data source '{settings.data_source}'")


def fetch_window(trade: Trade, padding_days: int) -> tuple[date, date]:
    """Date range around a trade: entry minus padding to last exit plus padding."""
    padding = timedelta(days=padding_days)
    return trade.enter_date - padding, trade.last_exit_date + padding


class ChartService:
    """Orchestrates price retrieval, aggregation and payload shaping."""

    def __init__(self, price_source: PriceSource, settings: Settings | None = None) -> None:
        self.price_source = price_source
        self.settings = settings or Settings()
        self.logger = logging.getLogger("tradechart.service")

    def series(
        self,
        trade: Trade,
        granularity: Granularity,
        week_end_day: Weekday | None = None,
    ) -> AggregationResult:
        """Fetch the padded daily window for a trade and aggregate it."""
        start, end = fetch_window(trade, self.settings.fetch_padding_days)
        frame = self.price_source.get_daily_bars(trade.symbol, start, end)
        cutoff = self.settings.week_end_day if week_end_day is None else week_end_day
        result = aggregate_rows(
            rows_from_frame(frame),
            granularity,
            cutoff,
            symbol=trade.symbol,
        )
        if result.errors:
            self.logger.warning(
                "%s: skipped %d undecodable rows", trade.symbol, len(result.errors)
            )
        self.logger.info(
            "%s %s: %d daily rows -> %d bars",
            trade.symbol,
            granularity.value,
            len(frame),
            len(result.bars),
        )
        return result

    def chart(
        self,
        trade: Trade,
        granularity: Granularity,
        week_end_day: Weekday | None = None,
    ) -> ChartPayload:
        """Return the chart document for a trade at the given granularity."""
        result = self.series(trade, granularity, week_end_day)
        return build_chart_payload(trade.symbol, result.bars, trade, result.errors)
