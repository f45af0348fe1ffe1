"""Trade journal CSV parsing."""

from __future__ import annotations

import csv
import io
import logging
from collections.abc import Sequence
from urllib.parse import urlencode

from tradechart.domain.models import TradeOrder
from tradechart.errors import MalformedInputError

TRADE_ORDER_FIELDS = 16
HEADER_MARKERS = {"tradeid", "trade_id", "trade id"}

logger = logging.getLogger("tradechart.orders")


def _to_int(value: str) -> int:
    try:
        return int(value.strip())
    except ValueError:
        return 0


def _to_float(value: str) -> float:
    try:
        return float(value.strip())
    except ValueError:
        return 0.0


def trade_details_link(
    base_url: str,
    symbol: str,
    enter_date: str,
    enter_price: float,
    exit_date: str,
    exit_price: float,
) -> str:
    """Link to the single-trade chart page, with an empty second exit."""
    query = urlencode(
        {
            "symbol": symbol,
            "tradeEnterDate": enter_date,
            "buyPrice": f"{enter_price:f}",
            "tradeExitDate": exit_date,
            "exitPrice": f"{exit_price:f}",
            "tradeExitDate2": "",
            "exitPrice2": f"{0.0:f}",
        }
    )
    return f"{base_url.rstrip('/')}/trade?{query}"


def parse_trade_order_record(record: Sequence[str], base_url: str) -> TradeOrder:
    """Parse one positional trade journal record.

    Numeric fields that do not parse become zero.
    """
    if len(record) < TRADE_ORDER_FIELDS:
        raise MalformedInputError(
            f"expected {TRADE_ORDER_FIELDS} fields, got {len(record)}"
        )
    fields = [str(value).strip() for value in record]
    entry_price = _to_float(fields[9])
    exit_price = _to_float(fields[10])
    return TradeOrder(
        trade_id=fields[0],
        exit_id=fields[1],
        entry_datetime=fields[2],
        exit_datetime=fields[3],
        symbol=fields[4],
        entry_type=fields[5],
        exit_type=fields[6],
        entry_quantity=_to_int(fields[7]),
        exit_quantity=_to_int(fields[8]),
        entry_price=entry_price,
        exit_price=exit_price,
        commission=_to_float(fields[11]),
        total_cost_for_exit=_to_float(fields[12]),
        trader_id=fields[13],
        market=fields[14],
        order_status=fields[15],
        trade_details_link=trade_details_link(
            base_url,
            symbol=fields[4],
            enter_date=fields[2],
            enter_price=entry_price,
            exit_date=fields[3],
            exit_price=exit_price,
        ),
    )


def read_trade_orders(content: bytes, base_url: str) -> list[TradeOrder]:
    """Parse an uploaded trade journal CSV, skipping records that cannot be parsed."""
    try:
        text = content.decode("utf-8-sig")
    except UnicodeDecodeError as exc:
        raise MalformedInputError(f"CSV is not valid UTF-8: {exc}") from exc
    try:
        records = [record for record in csv.reader(io.StringIO(text)) if record]
    except csv.Error as exc:
        raise MalformedInputError(f"CSV could not be parsed: {exc}") from exc

    orders: list[TradeOrder] = []
    for position, record in enumerate(records):
        if position == 0 and record[0].strip().lower() in HEADER_MARKERS:
            continue
        try:
            orders.append(parse_trade_order_record(record, base_url))
        except MalformedInputError as exc:
            logger.warning("skipping trade record %d: %s", position, exc)
    return orders
