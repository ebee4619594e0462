"""
Additive-model forecasts of cumulative case counts.

Wraps Prophet: the observed (ds, y) series is fitted once per metric and
predicted over the history plus a fixed horizon of daily steps, giving a
point estimate and an uncertainty interval for every day.
"""

import logging
from dataclasses import dataclass
from typing import Optional

import pandas as pd
from prophet import Prophet

from covid_trends.analysis.aggregator import region_series
from covid_trends.config import Settings
from covid_trends.models import ForecastPoint


logger = logging.getLogger(__name__)

# Stan backend logs every optimizer run at INFO
logging.getLogger("cmdstanpy").setLevel(logging.WARNING)

FORECAST_COLUMNS = ["date", "yhat", "yhat_lower", "yhat_upper"]


@dataclass
class ForecastConfig:
    """Model options for a forecast run."""

    horizon_days: int = 365
    yearly_seasonality: bool = True
    weekly_seasonality: bool = True
    daily_seasonality: bool = False

    @classmethod
    def from_settings(cls, settings: Settings) -> "ForecastConfig":
        return cls(
            horizon_days=settings.horizon_days,
            yearly_seasonality=settings.yearly_seasonality,
            weekly_seasonality=settings.weekly_seasonality,
            daily_seasonality=settings.daily_seasonality,
        )


class CaseForecaster:
    """
    Prophet model for a single region/metric series.

    Input frames carry a ds column (dates, strictly increasing) and a y
    column (counts). Output frames carry date, yhat, yhat_lower and
    yhat_upper, one row per observed day plus horizon_days future days.
    """

    def __init__(self, config: ForecastConfig | None = None) -> None:
        self.config = config or ForecastConfig()
        self.model: Optional[Prophet] = None
        self.history: Optional[pd.DataFrame] = None
        self.is_trained = False

    def _validate(self, series: pd.DataFrame) -> pd.DataFrame:
        history = series[["ds", "y"]].dropna().reset_index(drop=True)
        history["ds"] = pd.to_datetime(history["ds"])

        if history["ds"].nunique() < 2:
            raise ValueError(
                f"Need at least 2 distinct observation dates to fit, got {history['ds'].nunique()}"
            )
        if not history["ds"].is_monotonic_increasing or history["ds"].duplicated().any():
            raise ValueError("Observation dates must be strictly increasing")

        return history

    def fit(self, series: pd.DataFrame) -> "CaseForecaster":
        """Fit a fresh model to the series."""
        history = self._validate(series)

        logger.info(
            f"Fitting on {len(history)} days "
            f"({history['ds'].iloc[0]:%Y-%m-%d} to {history['ds'].iloc[-1]:%Y-%m-%d})"
        )
        self.model = Prophet(
            yearly_seasonality=self.config.yearly_seasonality,
            weekly_seasonality=self.config.weekly_seasonality,
            daily_seasonality=self.config.daily_seasonality,
        )
        self.model.fit(history)
        self.history = history
        self.is_trained = True
        return self

    def predict(self) -> pd.DataFrame:
        """Predict over the fitted history plus the configured horizon."""
        if not self.is_trained or self.model is None:
            raise RuntimeError("Model not trained. Call fit() first.")

        future = self.model.make_future_dataframe(
            periods=self.config.horizon_days, freq="D", include_history=True
        )
        prediction = self.model.predict(future)

        result = prediction[["ds", "yhat", "yhat_lower", "yhat_upper"]].rename(
            columns={"ds": "date"}
        )
        logger.info(f"  Predicted {len(result)} rows ({self.config.horizon_days} ahead)")
        return result.reset_index(drop=True)

    def forecast(self, series: pd.DataFrame) -> pd.DataFrame:
        """Fit then predict."""
        return self.fit(series).predict()


def to_forecast_points(forecast: pd.DataFrame) -> tuple[ForecastPoint, ...]:
    """Convert a forecast frame into immutable records."""
    return tuple(
        ForecastPoint(
            date=pd.Timestamp(row.date).date(),
            yhat=float(row.yhat),
            yhat_lower=float(row.yhat_lower),
            yhat_upper=float(row.yhat_upper),
        )
        for row in forecast[FORECAST_COLUMNS].itertuples(index=False)
    )


def forecast_region(
    table: pd.DataFrame,
    region: str,
    metric: str,
    config: ForecastConfig | None = None,
) -> pd.DataFrame:
    """Forecast one region's summed metric from the unified table."""
    logger.info(f"Forecasting {metric} for {region}")
    return CaseForecaster(config).forecast(region_series(table, region, metric))
