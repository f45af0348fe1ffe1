"""Query parameter parsing for chart requests."""

from __future__ import annotations

import math
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import date, datetime

from tradechart.domain.models import Granularity, Trade, TradeExit, Weekday
from tradechart.errors import InvalidRequestError

DATE_FORMAT = "%Y-%m-%d"


@dataclass(frozen=True)
class ChartRequest:
    """Validated chart request."""

    trade: Trade
    granularity: Granularity
    week_end_day: Weekday | None = None


def parse_query_bool(value: str | None) -> bool:
    """Parse 1/t/true and 0/f/false; anything else is false."""
    if value is None:
        return False
    return value.strip().lower() in {"1", "t", "true"}


def _required(params: Mapping[str, str], key: str, label: str | None = None) -> str:
    value = (params.get(key) or "").strip()
    if not value:
        raise InvalidRequestError(f"empty {label or key}")
    return value


def _parse_date(value: str, label: str) -> date:
    try:
        return datetime.strptime(value.strip(), DATE_FORMAT).date()
    except ValueError:
        raise InvalidRequestError(f"invalid {label}") from None


def _parse_price(value: str, label: str) -> float:
    try:
        price = float(value)
    except ValueError:
        raise InvalidRequestError(f"invalid {label}") from None
    if not math.isfinite(price):
        raise InvalidRequestError(f"invalid {label}")
    return price


def parse_chart_request(params: Mapping[str, str]) -> ChartRequest:
    """Validate the query string of a chart data request."""
    symbol = _required(params, "symbol")
    show_trades = parse_query_bool(params.get("showTrades"))
    enter_date = _parse_date(_required(params, "tradeEnterDate"), "tradeEnterDate")
    exit_date = _parse_date(_required(params, "tradeExitDate"), "tradeExitDate")
    enter_price = _parse_price(_required(params, "buyPrice", "tradeEnterPrice"), "tradeEnterPrice")
    exit_price = _parse_price(_required(params, "exitPrice", "tradeExitPrice"), "tradeExitPrice")

    exits = [TradeExit(exit_date=exit_date, exit_price=exit_price)]
    second_date_text = (params.get("tradeExitDate2") or "").strip()
    if second_date_text:
        second_date = _parse_date(second_date_text, "tradeExitDate2")
        second_price_text = (params.get("exitPrice2") or "").strip()
        if second_price_text:
            exits.append(
                TradeExit(
                    exit_date=second_date,
                    exit_price=_parse_price(second_price_text, "exitPrice2"),
                )
            )

    try:
        granularity = Granularity.parse(params.get("timeFrame"))
    except ValueError as exc:
        raise InvalidRequestError(f"invalid timeFrame: {exc}") from exc

    week_end_day: Weekday | None = None
    week_end_text = (params.get("weekEndDay") or "").strip()
    if week_end_text:
        try:
            week_end_day = Weekday.parse(week_end_text)
        except ValueError as exc:
            raise InvalidRequestError(f"invalid weekEndDay: {exc}") from exc

    trade = Trade(
        symbol=symbol,
        enter_date=enter_date,
        enter_price=enter_price,
        exits=tuple(exits),
        show_trades=show_trades,
    )
    return ChartRequest(trade=trade, granularity=granularity, week_end_day=week_end_day)
