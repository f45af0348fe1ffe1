"""Custom exceptions for clearer error handling across the app."""


class TradeChartError(Exception):
    """Base exception for all app-specific errors."""


class ConfigError(TradeChartError, ValueError):
    """Raised when environment or CLI configuration is invalid."""


class MalformedInputError(TradeChartError, ValueError):
    """Raised when a price row cannot be decoded."""


class InvalidRequestError(TradeChartError, ValueError):
    """Raised when an HTTP request carries invalid parameters."""


class DataProviderError(TradeChartError):
    """Raised when market data retrieval fails."""
