"""Data models."""

from covid_trends.models.observation import Observation, ForecastPoint

__all__ = ["Observation", "ForecastPoint"]
