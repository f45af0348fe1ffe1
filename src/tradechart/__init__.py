"""Daily price series re-sampling and trade charting."""

__version__ = "0.1.0"
