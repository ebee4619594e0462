from __future__ import annotations

import numpy as np
import pandas as pd
import pytest

from covid_trends.analysis.forecast import (
    CaseForecaster,
    ForecastConfig,
    forecast_region,
    to_forecast_points,
)
from covid_trends.config import Settings


def _cumulative_series(days: int = 120, seed: int = 7) -> pd.DataFrame:
    """Cumulative counts whose daily growth rate changes twice."""
    rng = np.random.default_rng(seed)
    rates = np.concatenate([
        np.full(days // 3, 10.0),
        np.full(days // 3, 60.0),
        np.full(days - 2 * (days // 3), 25.0),
    ])
    daily = rng.poisson(rates)
    return pd.DataFrame({
        "ds": pd.date_range("2020-03-01", periods=days, freq="D"),
        "y": np.cumsum(daily).astype(float),
    })


@pytest.fixture(scope="module")
def fitted_forecast() -> tuple[pd.DataFrame, pd.DataFrame]:
    series = _cumulative_series()
    np.random.seed(0)
    forecast = CaseForecaster(ForecastConfig(horizon_days=365)).forecast(series)
    return series, forecast


def test_forecast_covers_history_plus_horizon(fitted_forecast):
    series, forecast = fitted_forecast

    assert list(forecast.columns) == ["date", "yhat", "yhat_lower", "yhat_upper"]
    assert len(forecast) == len(series) + 365

    future = forecast["date"].iloc[-365:]
    expected = pd.date_range(series["ds"].iloc[-1] + pd.Timedelta(days=1), periods=365, freq="D")
    assert list(future) == list(expected)


def test_interval_brackets_prediction(fitted_forecast):
    _, forecast = fitted_forecast

    assert (forecast["yhat_lower"] <= forecast["yhat"]).all()
    assert (forecast["yhat"] <= forecast["yhat_upper"]).all()


def test_interval_widens_into_the_future(fitted_forecast):
    _, forecast = fitted_forecast

    width = (forecast["yhat_upper"] - forecast["yhat_lower"]).iloc[-365:].to_numpy()
    non_decreasing = np.diff(width) >= 0

    assert non_decreasing.mean() >= 0.9
    assert width[-1] > width[0]


def test_forecast_points(fitted_forecast):
    _, forecast = fitted_forecast

    points = to_forecast_points(forecast)

    assert len(points) == len(forecast)
    assert points[0].date == forecast["date"].iloc[0].date()
    assert points[-1].yhat == pytest.approx(forecast["yhat"].iloc[-1])
    assert points[-1].interval_width == pytest.approx(
        forecast["yhat_upper"].iloc[-1] - forecast["yhat_lower"].iloc[-1]
    )


def test_model_options_are_passed_through():
    series = _cumulative_series(days=30)
    forecaster = CaseForecaster(ForecastConfig(horizon_days=3))

    forecaster.fit(series)

    assert forecaster.model.weekly_seasonality is True
    assert forecaster.model.yearly_seasonality is True
    assert forecaster.model.daily_seasonality is False
    assert len(forecaster.predict()) == 33


def test_config_from_settings():
    config = ForecastConfig.from_settings(Settings(horizon_days=30))

    assert config.horizon_days == 30
    assert (config.yearly_seasonality, config.weekly_seasonality, config.daily_seasonality) == (True, True, False)


@pytest.mark.parametrize("days", [0, 1])
def test_too_few_observations(days):
    series = pd.DataFrame({
        "ds": pd.date_range("2020-03-01", periods=days, freq="D"),
        "y": np.arange(days, dtype=float),
    })

    with pytest.raises(ValueError, match="at least 2"):
        CaseForecaster().fit(series)


def test_repeated_single_date_is_insufficient():
    series = pd.DataFrame({"ds": pd.to_datetime(["2020-03-01"] * 3), "y": [1.0, 2.0, 3.0]})

    with pytest.raises(ValueError, match="at least 2"):
        CaseForecaster().fit(series)


def test_unordered_dates_rejected():
    series = pd.DataFrame({
        "ds": pd.to_datetime(["2020-03-02", "2020-03-01", "2020-03-03"]),
        "y": [1.0, 2.0, 3.0],
    })

    with pytest.raises(ValueError, match="strictly increasing"):
        CaseForecaster().fit(series)


def test_predict_before_fit():
    with pytest.raises(RuntimeError):
        CaseForecaster().predict()


def test_forecast_region_unknown_region_fails(confirmed_wide, deaths_wide):
    from covid_trends.data.reshape import build_observations

    table = build_observations(confirmed_wide, deaths_wide)

    with pytest.raises(ValueError):
        forecast_region(table, "Atlantis", "confirmed", ForecastConfig(horizon_days=3))
