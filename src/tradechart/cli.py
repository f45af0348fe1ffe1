"""Command-line interface for tradechart."""

from __future__ import annotations

import argparse
import json
import sys
from collections.abc import Sequence
from datetime import date, datetime

from tradechart.chart.payload import build_chart_payload
from tradechart.chart.plotly_report import write_chart_report
from tradechart.config import DATA_SOURCES, Settings
from tradechart.domain.models import Granularity, Trade, TradeExit
from tradechart.errors import DataProviderError
from tradechart.logging.logger import setup_logger
from tradechart.service import ChartService, build_price_source


def _date_arg(value: str) -> date:
    try:
        return datetime.strptime(value, "%Y-%m-%d").date()
    except ValueError:
        raise argparse.ArgumentTypeError(f"expected YYYY-MM-DD, got {value!r}") from None


def build_parser() -> argparse.ArgumentParser:
    """Build CLI parser."""
    parser = argparse.ArgumentParser(description="Daily/weekly/monthly trade charts")
    parser.add_argument("--data-source", choices=list(DATA_SOURCES), help="Price source")
    parser.add_argument("--historical-dir", type=str, help="CSV historical data directory")
    parser.add_argument("--week-end-day", type=str, help="Weekday closing weekly bars")
    parser.add_argument("--padding-days", type=int, help="Days fetched around the trade")
    parser.add_argument("--log-level", type=str, help="Logging level")
    commands = parser.add_subparsers(dest="command", required=True)

    serve = commands.add_parser("serve", help="Run the chart web server")
    serve.add_argument("--host", type=str, help="Bind address")
    serve.add_argument("--port", type=int, help="Bind port")

    chart = commands.add_parser("chart", help="Render a trade chart offline")
    chart.add_argument("--symbol", required=True, help="Ticker symbol")
    chart.add_argument("--enter-date", type=_date_arg, required=True, help="Entry date")
    chart.add_argument("--enter-price", type=float, required=True, help="Entry price")
    chart.add_argument("--exit-date", type=_date_arg, required=True, help="Exit date")
    chart.add_argument("--exit-price", type=float, required=True, help="Exit price")
    chart.add_argument("--exit-date2", type=_date_arg, help="Second exit date")
    chart.add_argument("--exit-price2", type=float, help="Second exit price")
    chart.add_argument(
        "--timeframe",
        choices=[*(item.value for item in Granularity), "all"],
        default="all",
        help="Bar granularity to render",
    )
    output = chart.add_mutually_exclusive_group()
    output.add_argument("--output", type=str, default="chart.html", help="HTML output path")
    output.add_argument("--json", action="store_true", help="Print the JSON payload instead")
    return parser


def apply_cli_overrides(settings: Settings, args: argparse.Namespace) -> Settings:
    """Apply CLI values onto environment-derived settings."""
    overrides: dict[str, object] = {}
    if args.data_source:
        overrides["data_source"] = args.data_source
    if args.historical_dir:
        overrides["historical_data_dir"] = args.historical_dir
    if args.week_end_day:
        overrides["week_end_day"] = args.week_end_day
    if args.padding_days is not None:
        overrides["fetch_padding_days"] = args.padding_days
    if args.log_level:
        overrides["log_level"] = args.log_level.strip().upper()
    if getattr(args, "host", None):
        overrides["host"] = args.host
    if getattr(args, "port", None) is not None:
        overrides["port"] = args.port
    return settings.with_overrides(**overrides)


def trade_from_args(args: argparse.Namespace) -> Trade:
    """Build the charted trade from ``chart`` arguments."""
    if (args.exit_date2 is None) != (args.exit_price2 is None):
        raise ValueError("--exit-date2 and --exit-price2 must be given together")
    exits = [TradeExit(exit_date=args.exit_date, exit_price=args.exit_price)]
    if args.exit_date2 is not None:
        exits.append(TradeExit(exit_date=args.exit_date2, exit_price=args.exit_price2))
    return Trade(
        symbol=args.symbol.strip().upper(),
        enter_date=args.enter_date,
        enter_price=args.enter_price,
        exits=tuple(exits),
        show_trades=True,
    )


def selected_granularities(value: str) -> list[Granularity]:
    if value == "all":
        return list(Granularity)
    return [Granularity(value)]


def run_chart(settings: Settings, args: argparse.Namespace) -> int:
    trade = trade_from_args(args)
    service = ChartService(build_price_source(settings), settings)
    results = [
        (granularity, service.series(trade, granularity))
        for granularity in selected_granularities(args.timeframe)
    ]
    if args.json:
        document = {
            granularity.value: build_chart_payload(trade.symbol, result.bars, trade, result.errors)
            for granularity, result in results
        }
        print(json.dumps(document, indent=2))
        return 0
    sections = [
        (f"{trade.symbol} {granularity.value}", result.bars) for granularity, result in results
    ]
    path = write_chart_report(sections, trade, args.output)
    print(f"Chart written to {path}")
    return 0


def run_server(settings: Settings) -> int:
    import uvicorn

    from tradechart.web.app import create_app

    uvicorn.run(
        create_app(settings),
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    """CLI entrypoint."""
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        settings = apply_cli_overrides(Settings.from_env(), args)
    except ValueError as exc:
        print(f"Configuration error: {exc}")
        return 2
    setup_logger(settings.log_level, settings.log_file)
    if args.command == "serve":
        return run_server(settings)
    try:
        return run_chart(settings, args)
    except ValueError as exc:
        print(f"Configuration error: {exc}")
        return 2
    except DataProviderError as exc:
        print(f"Data error: {exc}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
