from __future__ import annotations

from datetime import date
from pathlib import Path

import pandas as pd
import pytest
from fastapi.testclient import TestClient

from tradechart.config import Settings
from tradechart.errors import DataProviderError
from tradechart.web.app import create_app


class FakePriceSource:
    def __init__(self, fail: bool = False) -> None:
        self.fail = fail

    def get_daily_bars(self, symbol: str, start: date, end: date) -> pd.DataFrame:
        if self.fail:
            raise DataProviderError(f"{symbol}: upstream unavailable")
        return pd.DataFrame(
            {
                "open": [10.0, 11.0],
                "high": [12.0, 13.0],
                "low": [9.0, 10.0],
                "close": [11.0, 12.0],
                "volume": [100, 200],
            },
            index=pd.to_datetime(["2025-01-02", "2025-01-03"]),
        )


QUERY = {
    "symbol": "AAPL",
    "showTrades": "true",
    "tradeEnterDate": "2025-01-02",
    "tradeExitDate": "2025-01-03",
    "buyPrice": "10.5",
    "exitPrice": "12",
}

RECORD = "T1,E1,2025-01-02,2025-01-03,AAPL,BUY,SELL,10,10,10.5,12,1,121,trader,NASDAQ,FILLED"


@pytest.fixture
def client() -> TestClient:
    return TestClient(create_app(Settings(upload_max_bytes=1024), FakePriceSource()))


@pytest.mark.parametrize("path", ["/data", "/visualiseTrader"])
def test_chart_data_routes(client: TestClient, path: str) -> None:
    response = client.get(path, params={**QUERY, "timeFrame": "weekly"})

    assert response.status_code == 200
    payload = response.json()
    assert payload["series"][0]["data"] == [{"x": "2025-01-03", "y": [10.0, 13.0, 9.0, 12.0]}]
    assert payload["series"][1] == {
        "name": "Volume",
        "data": [{"x": "2025-01-03", "y": 300}],
        "type": "bar",
    }
    assert payload["annotations"]["xaxis"][0]["label"]["text"] == "Buy 10.50"


def test_chart_data_hides_annotations(client: TestClient) -> None:
    response = client.get("/data", params={**QUERY, "showTrades": "false"})

    assert response.status_code == 200
    assert response.json()["annotations"] == {"points": [], "xaxis": []}
    assert len(response.json()["series"][0]["data"]) == 2


@pytest.mark.parametrize(
    ("overrides", "message"),
    [
        ({"symbol": ""}, "empty symbol"),
        ({"buyPrice": "abc"}, "invalid tradeEnterPrice"),
        ({"timeFrame": "hourly"}, "invalid timeFrame"),
    ],
)
def test_chart_data_rejects_bad_queries(
    client: TestClient, overrides: dict[str, str], message: str
) -> None:
    response = client.get("/data", params={**QUERY, **overrides})

    assert response.status_code == 400
    assert message in response.text


def test_chart_data_without_rows_in_window_is_empty(tmp_path: Path) -> None:
    (tmp_path / "SPY.csv").write_text(
        "date,open,high,low,close,volume\n2010-01-04,10,12,9,11,100\n", encoding="utf-8"
    )
    settings = Settings(data_source="csv", historical_data_dir=str(tmp_path))
    client = TestClient(create_app(settings))

    response = client.get("/data", params={**QUERY, "symbol": "SPY", "timeFrame": "weekly"})

    assert response.status_code == 200
    payload = response.json()
    assert payload["series"][0]["data"] == []
    assert payload["series"][1]["data"] == []
    assert payload["diagnostics"] == []
    assert len(payload["annotations"]["xaxis"]) == 1


def test_chart_data_reports_fetch_failure() -> None:
    client = TestClient(create_app(Settings(), FakePriceSource(fail=True)))

    response = client.get("/data", params=QUERY)

    assert response.status_code == 500
    assert response.text == "can't fetch data"


def test_upload_returns_parsed_orders(client: TestClient) -> None:
    response = client.post(
        "/upload",
        files={"file": ("trades.csv", RECORD.encode("utf-8"), "text/csv")},
    )

    assert response.status_code == 200
    orders = response.json()
    assert len(orders) == 1
    assert orders[0]["trade_id"] == "T1"
    assert orders[0]["trade_details_link"].startswith("http://localhost:8080/trade?symbol=AAPL")


def test_upload_without_file_is_rejected(client: TestClient) -> None:
    response = client.post("/upload")

    assert response.status_code == 400
    assert response.text == "Error retrieving the file"


def test_upload_rejects_oversized_file(client: TestClient) -> None:
    content = ("\n".join([RECORD] * 20)).encode("utf-8")

    response = client.post("/upload", files={"file": ("trades.csv", content, "text/csv")})

    assert response.status_code == 413


def test_upload_rejects_unreadable_csv(client: TestClient) -> None:
    response = client.post(
        "/upload", files={"file": ("trades.csv", b"\xff\xfe\x00", "text/csv")}
    )

    assert response.status_code == 400
    assert response.text == "Error reading the CSV file"


@pytest.mark.parametrize("path", ["/", "/trades", "/trade", "/static/chart.js"])
def test_static_pages_are_served(client: TestClient, path: str) -> None:
    response = client.get(path)

    assert response.status_code == 200


def test_upload_only_accepts_post(client: TestClient) -> None:
    assert client.get("/upload").status_code == 405
