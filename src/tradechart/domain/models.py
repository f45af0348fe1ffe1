"""Core price and trade domain models."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
from datetime import date
from enum import IntEnum, StrEnum
from typing import Any


class Granularity(StrEnum):
    """Time unit represented by one bar."""

    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"

    @classmethod
    def parse(cls, value: str | None) -> Granularity:
        """Parse a granularity name; empty values mean daily."""
        candidate = (value or "").strip().lower()
        if not candidate:
            return cls.DAILY
        try:
            return cls(candidate)
        except ValueError:
            supported = ", ".join(item.value for item in cls)
            raise ValueError(f"unknown time frame '{value}'. Supported: {supported}") from None


class Weekday(IntEnum):
    """Weekday numbers matching ``datetime.date.weekday()``."""

    MONDAY = 0
    TUESDAY = 1
    WEDNESDAY = 2
    THURSDAY = 3
    FRIDAY = 4
    SATURDAY = 5
    SUNDAY = 6

    @classmethod
    def parse(cls, value: str | int | None, default: Weekday | None = None) -> Weekday:
        """Parse weekday names, three-letter abbreviations or 0-6 digits."""
        fallback = cls.FRIDAY if default is None else default
        if value is None:
            return fallback
        if isinstance(value, int):
            return cls(value)
        text = value.strip().lower()
        if not text:
            return fallback
        if text.isdigit():
            number = int(text)
            if 0 <= number <= 6:
                return cls(number)
            raise ValueError(f"weekday number must be between 0 and 6, got {number}")
        for member in cls:
            name = member.name.lower()
            if text == name or text == name[:3]:
                return member
        raise ValueError(f"unknown weekday '{value}'")


@dataclass(frozen=True)
class Bar:
    """One OHLCV record for a day, week or month."""

    date: date
    open: float
    high: float
    low: float
    close: float
    volume: int

    def is_consistent(self) -> bool:
        """Return true when low <= open, close <= high."""
        return (
            self.low <= self.open <= self.high
            and self.low <= self.close <= self.high
        )


DailyBar = Bar
AggregatedBar = Bar


@dataclass(frozen=True)
class BarSeries:
    """Ordered daily bars for one symbol."""

    symbol: str
    bars: tuple[Bar, ...] = ()

    def __len__(self) -> int:
        return len(self.bars)

    def __iter__(self) -> Iterator[Bar]:
        return iter(self.bars)

    def is_chronological(self) -> bool:
        """Return true when dates never go backwards."""
        return all(prev.date <= cur.date for prev, cur in zip(self.bars, self.bars[1:]))


@dataclass(frozen=True)
class RowError:
    """Diagnostic for one input row that could not be decoded."""

    index: int
    reason: str

    def to_record(self) -> dict[str, Any]:
        return {"row": self.index, "reason": self.reason}


@dataclass(frozen=True)
class AggregationResult:
    """Aggregated bars plus the rows skipped while decoding."""

    bars: tuple[Bar, ...]
    errors: tuple[RowError, ...] = ()


@dataclass(frozen=True)
class TradeExit:
    """One (partial) exit of a trade."""

    exit_date: date
    exit_price: float


@dataclass(frozen=True)
class Trade:
    """Trade entry and its ordered exits."""

    symbol: str
    enter_date: date
    enter_price: float
    exits: tuple[TradeExit, ...]
    show_trades: bool = False

    def __post_init__(self) -> None:
        if not self.exits:
            raise ValueError("trade needs at least one exit")

    @property
    def last_exit_date(self) -> date:
        return max(item.exit_date for item in self.exits)


@dataclass(frozen=True)
class TradeOrder:
    """One record of an uploaded trade journal."""

    trade_id: str
    exit_id: str
    entry_datetime: str
    exit_datetime: str
    symbol: str
    entry_type: str
    exit_type: str
    entry_quantity: int
    exit_quantity: int
    entry_price: float
    exit_price: float
    commission: float
    total_cost_for_exit: float
    trader_id: str
    market: str
    order_status: str
    trade_details_link: str

    def to_record(self) -> dict[str, Any]:
        """Convert the order to a JSON-serializable dict."""
        return {
            "trade_id": self.trade_id,
            "exit_id": self.exit_id,
            "entry_datetime": self.entry_datetime,
            "exit_datetime": self.exit_datetime,
            "symbol": self.symbol,
            "entry_type": self.entry_type,
            "exit_type": self.exit_type,
            "entry_quantity": self.entry_quantity,
            "exit_quantity": self.exit_quantity,
            "entry_price": self.entry_price,
            "exit_price": self.exit_price,
            "commission": self.commission,
            "total_cost_for_exit": self.total_cost_for_exit,
            "trader_id": self.trader_id,
            "market": self.market,
            "order_status": self.order_status,
            "trade_details_link": self.trade_details_link,
        }
