"""Aggregation and forecasting."""

from covid_trends.analysis.aggregator import aggregate, top_n, ranking
from covid_trends.analysis.forecast import CaseForecaster, ForecastConfig

__all__ = ["aggregate", "top_n", "ranking", "CaseForecaster", "ForecastConfig"]
