"""COVID-19 trend analysis and forecasting."""

__version__ = "0.1.0"
