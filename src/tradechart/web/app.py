"""HTTP front end: chart data, trade journal upload and static pages."""

from __future__ import annotations

import logging
from pathlib import Path

from fastapi import FastAPI, File, Request, UploadFile
from fastapi.responses import FileResponse, JSONResponse, PlainTextResponse, Response
from fastapi.staticfiles import StaticFiles

from tradechart.config import Settings
from tradechart.data.base import PriceSource
from tradechart.errors import DataProviderError, InvalidRequestError, MalformedInputError
from tradechart.orders import read_trade_orders
from tradechart.service import ChartService, build_price_source
from tradechart.web.params import parse_chart_request

STATIC_DIR = Path(__file__).resolve().parent / "static"

logger = logging.getLogger("tradechart.web")


def create_app(
    settings: Settings | None = None,
    price_source: PriceSource | None = None,
) -> FastAPI:
    """Build the FastAPI application around a chart service."""
    app_settings = settings or Settings.from_env()
    service = ChartService(
        price_source=price_source or build_price_source(app_settings),
        settings=app_settings,
    )
    app = FastAPI(title="Trade Chart")

    @app.exception_handler(InvalidRequestError)
    async def _bad_request(_request: Request, exc: InvalidRequestError) -> PlainTextResponse:
        logger.info("rejected request: %s", exc)
        return PlainTextResponse(str(exc), status_code=400)

    @app.exception_handler(DataProviderError)
    async def _fetch_failed(_request: Request, exc: DataProviderError) -> PlainTextResponse:
        logger.error("fetch failed: %s", exc)
        return PlainTextResponse("can't fetch data", status_code=500)

    def chart_data(request: Request) -> JSONResponse:
        chart_request = parse_chart_request(request.query_params)
        trade = chart_request.trade
        logger.info(
            "data: %s enter %s @ %.2f, %d exit(s), %s",
            trade.symbol,
            trade.enter_date.isoformat(),
            trade.enter_price,
            len(trade.exits),
            chart_request.granularity.value,
        )
        payload = service.chart(trade, chart_request.granularity, chart_request.week_end_day)
        return JSONResponse(payload)

    app.add_api_route("/data", chart_data, methods=["GET"])
    app.add_api_route("/visualiseTrader", chart_data, methods=["GET"])

    @app.post("/upload")
    async def upload_trades(file: UploadFile | None = File(None)) -> Response:
        if file is None:
            return PlainTextResponse("Error retrieving the file", status_code=400)
        try:
            content = await file.read(app_settings.upload_max_bytes + 1)
        finally:
            await file.close()
        if len(content) > app_settings.upload_max_bytes:
            return PlainTextResponse("File too large", status_code=413)
        try:
            orders = read_trade_orders(content, app_settings.public_base_url)
        except MalformedInputError as exc:
            logger.warning("upload rejected: %s", exc)
            return PlainTextResponse("Error reading the CSV file", status_code=400)
        logger.info("upload: parsed %d trade orders", len(orders))
        return JSONResponse([order.to_record() for order in orders])

    @app.get("/")
    def index_page() -> FileResponse:
        return FileResponse(STATIC_DIR / "index.html")

    @app.get("/trades")
    def trades_page() -> FileResponse:
        return FileResponse(STATIC_DIR / "trades.html")

    @app.get("/trade")
    def trade_page() -> FileResponse:
        return FileResponse(STATIC_DIR / "trade.html")

    app.mount("/static", StaticFiles(directory=str(STATIC_DIR)), name="static")
    return app
