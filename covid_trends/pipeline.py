"""End-to-end analysis run: fetch, reshape, summarise, forecast, render."""

import logging
from dataclasses import dataclass, field
from pathlib import Path

import httpx
import pandas as pd
import plotly.graph_objects as go

from covid_trends.analysis.aggregator import (
    aggregate,
    daily_increase,
    latest_snapshot,
    ranking,
    region_equals,
    region_not_equals,
    region_series,
)
from covid_trends.analysis.forecast import CaseForecaster, ForecastConfig
from covid_trends.config import Settings
from covid_trends.data.fetcher import CsseFetcher
from covid_trends.data.reshape import build_observations
from covid_trends.ui.charts import bar_chart, forecast_chart, line_chart, scatter_chart
from covid_trends.ui.report import export_report


logger = logging.getLogger(__name__)

FORECAST_METRICS = ("confirmed", "deaths")


@dataclass
class RunResult:
    """Everything one run produces."""

    observations: pd.DataFrame
    summaries: dict[str, pd.DataFrame] = field(default_factory=dict)
    forecasts: dict[str, pd.DataFrame] = field(default_factory=dict)
    figures: dict[str, go.Figure] = field(default_factory=dict)


def summarise(observations: pd.DataFrame, settings: Settings) -> dict[str, pd.DataFrame]:
    """Summary tables consumed by the charts."""
    excluded = settings.excluded_region
    region = settings.forecast_region

    inside = aggregate(observations, "date", where=region_equals(excluded))
    outside = aggregate(observations, "date", where=region_not_equals(excluded))
    comparison = (
        inside[["date", "confirmed"]].rename(columns={"confirmed": excluded})
        .merge(
            outside[["date", "confirmed"]].rename(columns={"confirmed": "Rest of world"}),
            on="date",
            how="outer",
        )
        .sort_values("date", ignore_index=True)
    )

    return {
        "global": aggregate(observations, "date"),
        "comparison": comparison,
        # regions without any deaths data stay <NA> so the scatter skips them
        "latest_by_region": aggregate(latest_snapshot(observations), "region", min_count=1),
        "top_confirmed": ranking(observations, "confirmed", settings.top_n),
        "top_deaths": ranking(observations, "deaths", settings.top_n),
        "region": daily_increase(
            aggregate(observations, "date", where=region_equals(region)), "confirmed"
        ),
    }


def build_figures(
    summaries: dict[str, pd.DataFrame],
    forecasts: dict[str, pd.DataFrame],
    history: dict[str, pd.DataFrame],
    settings: Settings,
) -> dict[str, go.Figure]:
    """Charts for the report, in reading order."""
    region = settings.forecast_region
    n = settings.top_n
    figures = {
        "Worldwide cumulative totals": line_chart(
            summaries["global"], ["confirmed", "deaths"], "Worldwide confirmed cases and deaths"
        ),
        f"{settings.excluded_region} vs rest of world": line_chart(
            summaries["comparison"],
            [settings.excluded_region, "Rest of world"],
            "Confirmed cases",
        ),
        "Confirmed vs deaths by country": scatter_chart(
            summaries["latest_by_region"], "confirmed", "deaths",
            "Latest cumulative confirmed cases vs deaths", label="region",
        ),
        f"Top {n} countries by confirmed cases": bar_chart(
            summaries["top_confirmed"], "region", "confirmed", f"Top {n} countries, confirmed cases"
        ),
        f"Top {n} countries by deaths": bar_chart(
            summaries["top_deaths"], "region", "deaths", f"Top {n} countries, deaths"
        ),
        f"{region} daily new cases": line_chart(
            summaries["region"], ["new_confirmed"], f"{region}: new confirmed cases per day",
            y_title="New cases",
        ),
    }
    for metric, forecast in forecasts.items():
        figures[f"{region} {metric} forecast"] = forecast_chart(
            history[metric], forecast,
            f"{region}: {metric}, {settings.horizon_days}-day forecast",
        )
    return figures


def run(
    settings: Settings | None = None,
    fetcher: CsseFetcher | None = None,
    forecaster_cls: type[CaseForecaster] = CaseForecaster,
) -> RunResult:
    """
    Execute one analysis run.

    Any fetch, parse or fitting failure propagates and ends the run.
    """
    settings = settings or Settings()
    settings.validate()

    own_fetcher = fetcher is None
    fetcher = fetcher or CsseFetcher(settings)
    try:
        tables = fetcher.fetch_all()
    finally:
        if own_fetcher:
            fetcher.close()

    observations = build_observations(tables["confirmed"], tables["deaths"])
    logger.info(
        f"Built {len(observations)} observations for "
        f"{observations['region'].nunique()} regions"
    )

    summaries = summarise(observations, settings)

    config = ForecastConfig.from_settings(settings)
    history = {}
    forecasts = {}
    for metric in FORECAST_METRICS:
        history[metric] = region_series(observations, settings.forecast_region, metric)
        forecasts[metric] = forecaster_cls(config).forecast(history[metric])

    return RunResult(
        observations=observations,
        summaries=summaries,
        forecasts=forecasts,
        figures=build_figures(summaries, forecasts, history, settings),
    )


def main() -> None:
    """CLI entry point for a full analysis run."""
    import argparse
    import sys

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(levelname)s - %(message)s",
    )

    parser = argparse.ArgumentParser(description="COVID-19 trend analysis and forecast")
    parser.add_argument("--region", type=str, help="Country to forecast (default: US)")
    parser.add_argument("--horizon", type=int, help="Forecast horizon in days (default: 365)")
    parser.add_argument("--top", type=int, help="Number of countries in rankings (default: 10)")
    parser.add_argument("-o", "--output", type=str, default=None, help="Report path")
    parser.add_argument(
        "--no-report",
        action="store_true",
        help="Print summaries only, skip the HTML report",
    )
    args = parser.parse_args()

    settings = Settings()
    if args.region:
        settings.forecast_region = args.region
    if args.horizon is not None:
        settings.horizon_days = args.horizon
    if args.top is not None:
        settings.top_n = args.top

    try:
        result = run(settings)
    except ValueError as e:
        print(f"Error: {e}")
        sys.exit(1)
    except httpx.HTTPError as e:
        print(f"Fetch failed: {e}")
        sys.exit(1)

    latest = result.summaries["global"].iloc[-1]
    print(f"\nWorldwide as of {latest['date']:%Y-%m-%d}")
    print("-" * 50)
    print(f"  Confirmed: {int(latest['confirmed']):>15,}")
    print(f"  Deaths:    {int(latest['deaths']):>15,}")
    print(f"\nTop {settings.top_n} by confirmed cases:")
    for row in result.summaries["top_confirmed"].itertuples(index=False):
        print(f"  {row.region:30} {int(row.confirmed):>15,}")

    for metric, forecast in result.forecasts.items():
        last = forecast.iloc[-1]
        print(
            f"\n{settings.forecast_region} {metric} on {last['date']:%Y-%m-%d}: "
            f"{last['yhat']:,.0f} ({last['yhat_lower']:,.0f} - {last['yhat_upper']:,.0f})"
        )

    if not args.no_report:
        output = Path(args.output) if args.output else settings.output_dir / "report.html"
        path = export_report(result.figures, output)
        print(f"\nReport exported to: {path}")


if __name__ == "__main__":
    main()
