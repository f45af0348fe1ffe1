from __future__ import annotations

import pytest

from tradechart.cli import apply_cli_overrides, build_parser
from tradechart.config import Settings, normalize_data_source, parse_positive_int
from tradechart.domain.models import Weekday
from tradechart.errors import ConfigError

ENV_KEYS = [
    "DATA_SOURCE",
    "HISTORICAL_DATA_DIR",
    "WEEK_END_DAY",
    "FETCH_PADDING_DAYS",
    "REQUEST_TIMEOUT_SECONDS",
    "MAX_RETRIES",
    "HOST",
    "PORT",
    "PUBLIC_BASE_URL",
    "UPLOAD_MAX_BYTES",
    "LOG_LEVEL",
    "LOG_FILE",
]


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr("tradechart.config.load_dotenv", lambda *args, **kwargs: None)
    for key in ENV_KEYS:
        monkeypatch.delenv(key, raising=False)


def test_defaults_without_environment() -> None:
    settings = Settings.from_env()

    assert settings == Settings()
    assert settings.week_end_day == Weekday.FRIDAY
    assert settings.fetch_padding_days == 120
    assert settings.log_file is None


def test_environment_values_are_parsed(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("DATA_SOURCE", "local")
    monkeypatch.setenv("HISTORICAL_DATA_DIR", "prices")
    monkeypatch.setenv("WEEK_END_DAY", "thu")
    monkeypatch.setenv("FETCH_PADDING_DAYS", "30")
    monkeypatch.setenv("PORT", "9000")
    monkeypatch.setenv("LOG_LEVEL", "debug")
    monkeypatch.setenv("LOG_FILE", "logs/chart.log")

    settings = Settings.from_env()

    assert settings.data_source == "csv"
    assert settings.historical_data_dir == "prices"
    assert settings.week_end_day == Weekday.THURSDAY
    assert settings.fetch_padding_days == 30
    assert settings.port == 9000
    assert settings.log_level == "DEBUG"
    assert settings.log_file == "logs/chart.log"


@pytest.mark.parametrize(
    ("key", "value"),
    [
        ("FETCH_PADDING_DAYS", "zero"),
        ("FETCH_PADDING_DAYS", "-1"),
        ("WEEK_END_DAY", "someday"),
        ("DATA_SOURCE", "bloomberg"),
        ("PORT", "70000"),
        ("LOG_LEVEL", "verbose"),
    ],
)
def test_invalid_environment_values_raise(
    monkeypatch: pytest.MonkeyPatch, key: str, value: str
) -> None:
    monkeypatch.setenv(key, value)

    with pytest.raises(ConfigError):
        Settings.from_env()


def test_cli_overrides_take_precedence_over_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("DATA_SOURCE", "yfinance")
    monkeypatch.setenv("WEEK_END_DAY", "friday")
    monkeypatch.setenv("PORT", "9000")
    args = build_parser().parse_args(
        [
            "--data-source",
            "csv",
            "--historical-dir",
            "fixtures",
            "--week-end-day",
            "2",
            "--padding-days",
            "10",
            "serve",
            "--port",
            "9100",
        ]
    )

    settings = apply_cli_overrides(Settings.from_env(), args)

    assert settings.data_source == "csv"
    assert settings.historical_data_dir == "fixtures"
    assert settings.week_end_day == Weekday.WEDNESDAY
    assert settings.fetch_padding_days == 10
    assert settings.port == 9100


def test_cli_rejects_non_positive_padding() -> None:
    args = build_parser().parse_args(["--padding-days", "0", "serve"])

    with pytest.raises(ValueError):
        apply_cli_overrides(Settings(), args)


def test_cli_rejects_unknown_log_level() -> None:
    args = build_parser().parse_args(["--log-level", "verbose", "serve"])

    with pytest.raises(ConfigError, match="log_level must be one of"):
        apply_cli_overrides(Settings(), args)


def test_log_level_is_case_insensitive(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("LOG_LEVEL", "warning")

    assert Settings.from_env().log_level == "WARNING"


def test_helpers() -> None:
    assert normalize_data_source(None) == "yfinance"
    assert normalize_data_source("Yahoo-CSV") == "yahoo_csv"
    assert parse_positive_int("", 5, field_name="x") == 5
    assert parse_positive_int(" 7 ", 5, field_name="x") == 7
    with pytest.raises(ConfigError, match="x must be positive"):
        parse_positive_int("0", 5, field_name="x")


def test_weekday_parse_accepts_names_and_numbers() -> None:
    assert Weekday.parse("Monday") == Weekday.MONDAY
    assert Weekday.parse("sat") == Weekday.SATURDAY
    assert Weekday.parse("6") == Weekday.SUNDAY
    assert Weekday.parse(None) == Weekday.FRIDAY
    with pytest.raises(ValueError):
        Weekday.parse("7")
