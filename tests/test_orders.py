from __future__ import annotations

import pytest

from tradechart.errors import MalformedInputError
from tradechart.orders import parse_trade_order_record, read_trade_orders, trade_details_link

BASE_URL = "http://localhost:8080"

RECORD = [
    "T1",
    "E1",
    "2025-01-02",
    "2025-02-03",
    "AAPL",
    "BUY",
    "SELL",
    "100",
    "100",
    "100.5",
    "120",
    "1.25",
    "12001.25",
    "trader-7",
    "NASDAQ",
    "FILLED",
]


def test_trade_details_link_points_at_trade_page() -> None:
    link = trade_details_link(
        BASE_URL + "/",
        symbol="AAPL",
        enter_date="2025-01-02",
        enter_price=100.5,
        exit_date="2025-02-03",
        exit_price=120.0,
    )

    assert link == (
        "http://localhost:8080/trade?symbol=AAPL&tradeEnterDate=2025-01-02"
        "&buyPrice=100.500000&tradeExitDate=2025-02-03&exitPrice=120.000000"
        "&tradeExitDate2=&exitPrice2=0.000000"
    )


def test_parse_trade_order_record() -> None:
    order = parse_trade_order_record(RECORD, BASE_URL)

    assert order.trade_id == "T1"
    assert order.symbol == "AAPL"
    assert order.entry_quantity == 100
    assert order.entry_price == 100.5
    assert order.commission == 1.25
    assert order.order_status == "FILLED"
    assert order.trade_details_link.startswith("http://localhost:8080/trade?symbol=AAPL&")
    assert order.to_record()["trade_details_link"] == order.trade_details_link


def test_unparsable_numbers_become_zero() -> None:
    record = list(RECORD)
    record[7] = "n/a"
    record[11] = ""

    order = parse_trade_order_record(record, BASE_URL)

    assert order.entry_quantity == 0
    assert order.commission == 0.0


def test_short_record_is_rejected() -> None:
    with pytest.raises(MalformedInputError, match="expected 16 fields"):
        parse_trade_order_record(RECORD[:10], BASE_URL)


def test_read_trade_orders_skips_header_and_short_records() -> None:
    header = "TradeId,ExitId,Entry,Exit,Symbol,EntryType,ExitType,EQ,XQ,EP,XP,Comm,Cost,Trader,Market,Status"
    content = "\n".join(
        [
            header,
            ",".join(RECORD),
            "T2,E2,broken",
            "",
            ",".join(["T3", *RECORD[1:]]),
        ]
    ).encode("utf-8")

    orders = read_trade_orders(content, BASE_URL)

    assert [order.trade_id for order in orders] == ["T1", "T3"]


def test_read_trade_orders_accepts_byte_order_mark() -> None:
    content = ("\ufeff" + ",".join(RECORD) + "\r\n").encode("utf-8")

    orders = read_trade_orders(content, BASE_URL)

    assert len(orders) == 1
    assert orders[0].trade_id == "T1"


def test_read_trade_orders_rejects_non_utf8() -> None:
    with pytest.raises(MalformedInputError):
        read_trade_orders(b"\xff\xfe\x00bad", BASE_URL)
