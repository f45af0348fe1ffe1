"""Environment and CLI runtime configuration."""

from __future__ import annotations

import os
from dataclasses import dataclass, replace
from typing import Self

from dotenv import load_dotenv

from tradechart.domain.models import Weekday
from tradechart.errors import ConfigError

DATA_SOURCES = ("yfinance", "yahoo_csv", "csv")
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def parse_bool(value: str | None, default: bool) -> bool:
    """Parse truthy environment strings."""
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "y", "on"}


def parse_positive_int(value: str | None, default: int, *, field_name: str) -> int:
    """Parse a positive integer from an env string, falling back to ``default``."""
    if value is None or not value.strip():
        return default
    try:
        parsed = int(value.strip())
    except ValueError:
        raise ConfigError(f"{field_name} must be an integer, got {value!r}") from None
    if parsed <= 0:
        raise ConfigError(f"{field_name} must be positive")
    return parsed


def normalize_data_source(value: str | None, default: str = "yfinance") -> str:
    """Normalize data source selector values."""
    mapping = {
        "yfinance": "yfinance",
        "yahoo": "yfinance",
        "yahoo_csv": "yahoo_csv",
        "yahoo-csv": "yahoo_csv",
        "csv": "csv",
        "local": "csv",
    }
    if value is None or not value.strip():
        return default
    candidate = value.strip().lower()
    return mapping.get(candidate, candidate)


@dataclass(frozen=True)
class Settings:
    """Immutable runtime settings."""

    data_source: str = "yfinance"
    historical_data_dir: str = "historical_data"
    week_end_day: Weekday = Weekday.FRIDAY
    fetch_padding_days: int = 120
    request_timeout_seconds: int = 20
    max_retries: int = 3
    host: str = "127.0.0.1"
    port: int = 8080
    public_base_url: str = "http://localhost:8080"
    upload_max_bytes: int = 10 << 20
    log_level: str = "INFO"
    log_file: str | None = None

    @classmethod
    def from_env(cls) -> Self:
        """Create settings from environment variables."""
        load_dotenv()
        try:
            week_end_day = Weekday.parse(os.getenv("WEEK_END_DAY"))
        except ValueError as exc:
            raise ConfigError(f"WEEK_END_DAY: {exc}") from exc
        log_file = str(os.getenv("LOG_FILE", "")).strip() or None
        raw = cls(
            data_source=normalize_data_source(os.getenv("DATA_SOURCE")),
            historical_data_dir=str(os.getenv("HISTORICAL_DATA_DIR", "historical_data")).strip(),
            week_end_day=week_end_day,
            fetch_padding_days=parse_positive_int(
                os.getenv("FETCH_PADDING_DAYS"), 120, field_name="fetch_padding_days"
            ),
            request_timeout_seconds=parse_positive_int(
                os.getenv("REQUEST_TIMEOUT_SECONDS"), 20, field_name="request_timeout_seconds"
            ),
            max_retries=parse_positive_int(os.getenv("MAX_RETRIES"), 3, field_name="max_retries"),
            host=str(os.getenv("HOST", "127.0.0.1")).strip(),
            port=parse_positive_int(os.getenv("PORT"), 8080, field_name="port"),
            public_base_url=str(os.getenv("PUBLIC_BASE_URL", "http://localhost:8080")).strip(),
            upload_max_bytes=parse_positive_int(
                os.getenv("UPLOAD_MAX_BYTES"), 10 << 20, field_name="upload_max_bytes"
            ),
            log_level=str(os.getenv("LOG_LEVEL", "INFO")).strip().upper(),
            log_file=log_file,
        )
        return raw.validate()

    def with_overrides(self, **kwargs: object) -> Self:
        """Return a new settings object with updated values."""
        overrides = dict(kwargs)
        week_end_day = overrides.get("week_end_day")
        if isinstance(week_end_day, str):
            try:
                overrides["week_end_day"] = Weekday.parse(week_end_day)
            except ValueError as exc:
                raise ConfigError(f"week_end_day: {exc}") from exc
        data_source = overrides.get("data_source")
        if isinstance(data_source, str):
            overrides["data_source"] = normalize_data_source(data_source, default=self.data_source)
        updated = replace(self, **overrides)
        return updated.validate()

    def validate(self) -> Self:
        """Validate settings fields."""
        if self.data_source not in DATA_SOURCES:
            raise ConfigError(f"data_source must be one of {', '.join(DATA_SOURCES)}")
        if self.fetch_padding_days <= 0:
            raise ConfigError("fetch_padding_days must be positive")
        if self.request_timeout_seconds <= 0:
            raise ConfigError("request_timeout_seconds must be positive")
        if self.max_retries <= 0:
            raise ConfigError("max_retries must be positive")
        if not 0 < self.port < 65536:
            raise ConfigError("port must be between 1 and 65535")
        if self.upload_max_bytes <= 0:
            raise ConfigError("upload_max_bytes must be positive")
        if not self.public_base_url:
            raise ConfigError("public_base_url must not be empty")
        if self.log_level.upper() not in LOG_LEVELS:
            raise ConfigError(f"log_level must be one of {', '.join(LOG_LEVELS)}")
        return self
