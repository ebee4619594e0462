"""Configuration settings for the analysis run."""

from dataclasses import dataclass, field
from pathlib import Path
import os

from dotenv import load_dotenv


load_dotenv()


DEFAULT_BASE_URL = (
    "https://raw.githubusercontent.com/CSSEGISandData/COVID-19/master/"
    "csse_covid_19_data/csse_covid_19_time_series"
)

# Metric name -> CSV resource under the base URL
RESOURCES: dict[str, str] = {
    "confirmed": "time_series_covid19_confirmed_global.csv",
    "deaths": "time_series_covid19_deaths_global.csv",
}


@dataclass
class Settings:
    """Application settings."""

    base_url: str = field(
        default_factory=lambda: os.getenv("COVID_DATA_BASE_URL", DEFAULT_BASE_URL)
    )
    horizon_days: int = field(
        default_factory=lambda: int(os.getenv("COVID_FORECAST_HORIZON", "365"))
    )
    top_n: int = field(default_factory=lambda: int(os.getenv("COVID_TOP_N", "10")))
    forecast_region: str = field(
        default_factory=lambda: os.getenv("COVID_FORECAST_REGION", "US")
    )
    excluded_region: str = field(
        default_factory=lambda: os.getenv("COVID_EXCLUDED_REGION", "China")
    )
    yearly_seasonality: bool = True
    weekly_seasonality: bool = True
    daily_seasonality: bool = False
    request_timeout: float = field(
        default_factory=lambda: float(os.getenv("COVID_REQUEST_TIMEOUT", "30"))
    )
    output_dir: Path = field(
        default_factory=lambda: Path(
            os.getenv("COVID_OUTPUT_DIR", Path(__file__).parent.parent.parent / "output")
        )
    )

    def validate(self) -> None:
        """Validate required settings."""
        if not self.base_url:
            raise ValueError("COVID_DATA_BASE_URL must not be empty")
        if self.horizon_days <= 0:
            raise ValueError(f"Forecast horizon must be positive, got {self.horizon_days}")
        if self.top_n <= 0:
            raise ValueError(f"Top-N cutoff must be positive, got {self.top_n}")

    def resource_url(self, metric: str) -> str:
        """Full URL of the CSV resource for a metric."""
        return f"{self.base_url.rstrip('/')}/{RESOURCES[metric]}"
