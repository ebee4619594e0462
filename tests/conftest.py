from __future__ import annotations

import httpx
import numpy as np
import pandas as pd
import pytest

from covid_trends.config import Settings, RESOURCES


DATES = ["1/22/20", "1/23/20", "1/24/20"]


@pytest.fixture
def confirmed_wide() -> pd.DataFrame:
    return pd.DataFrame(
        {
            "Province/State": [np.nan, "Hubei", "Beijing", np.nan],
            "Country/Region": ["Afghanistan", "China", "China", "US"],
            "Lat": [33.93, 30.97, 40.18, 40.0],
            "Long": [67.71, 112.27, 116.41, -100.0],
            "1/22/20": [0, 444, 14, 1],
            "1/23/20": [1, 549, 22, 1],
            "1/24/20": [2, 761, 36, 2],
        }
    )


@pytest.fixture
def deaths_wide() -> pd.DataFrame:
    # US deliberately absent: its deaths must come out as <NA>
    return pd.DataFrame(
        {
            "Province/State": [np.nan, "Hubei", "Beijing"],
            "Country/Region": ["Afghanistan", "China", "China"],
            "Lat": [33.93, 30.97, 40.18],
            "Long": [67.71, 112.27, 116.41],
            "1/22/20": [0, 17, 0],
            "1/23/20": [0, 17, 0],
            "1/24/20": [0, 24, 1],
        }
    )


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        base_url="https://example.test/series",
        horizon_days=5,
        top_n=2,
        forecast_region="China",
        excluded_region="China",
        output_dir=tmp_path / "output",
    )


@pytest.fixture
def requested_urls() -> list[str]:
    return []


@pytest.fixture
def csv_client(confirmed_wide, deaths_wide, requested_urls):
    """httpx client serving the two fixture tables as CSV."""
    bodies = {
        RESOURCES["confirmed"]: confirmed_wide.to_csv(index=False),
        RESOURCES["deaths"]: deaths_wide.to_csv(index=False),
    }

    def handler(request: httpx.Request) -> httpx.Response:
        requested_urls.append(str(request.url))
        name = request.url.path.rsplit("/", 1)[-1]
        if name not in bodies:
            return httpx.Response(404, text="Not Found")
        return httpx.Response(200, text=bodies[name])

    client = httpx.Client(transport=httpx.MockTransport(handler))
    yield client
    client.close()
