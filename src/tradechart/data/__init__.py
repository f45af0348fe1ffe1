"""Price source implementations."""

from .base import PriceSource
from .csv_data import CsvDataProvider
from .yahoo_csv import YahooCsvDataProvider
from .yfinance_data import YFinanceDataProvider

__all__ = [
    "PriceSource",
    "CsvDataProvider",
    "YahooCsvDataProvider",
    "YFinanceDataProvider",
]
