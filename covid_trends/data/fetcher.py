"""JHU CSSE time-series fetcher."""

import io
import logging

import httpx
import pandas as pd

from covid_trends.config import Settings, RESOURCES


logger = logging.getLogger(__name__)

ID_COLUMNS = ["Province/State", "Country/Region", "Lat", "Long"]


class CsseFetcher:
    """Downloads the global confirmed/deaths tables, one row per region."""

    def __init__(
        self, settings: Settings | None = None, client: httpx.Client | None = None
    ) -> None:
        self.settings = settings or Settings()
        self.settings.validate()
        self._client = client

    @property
    def client(self) -> httpx.Client:
        """Lazy-initialize HTTP client."""
        if self._client is None:
            self._client = httpx.Client(
                timeout=self.settings.request_timeout, follow_redirects=True
            )
        return self._client

    def close(self) -> None:
        """Close HTTP client."""
        if self._client is not None:
            self._client.close()
            self._client = None

    def __enter__(self) -> "CsseFetcher":
        return self

    def __exit__(self, *args) -> None:
        self.close()

    def fetch_table(self, metric: str) -> pd.DataFrame:
        """
        Fetch one wide table.

        Args:
            metric: Key of RESOURCES ("confirmed" or "deaths")

        Returns:
            DataFrame with Province/State, Country/Region, Lat, Long and
            one column per reported date
        """
        if metric not in RESOURCES:
            raise KeyError(f"Unknown metric {metric!r}, expected one of {list(RESOURCES)}")

        url = self.settings.resource_url(metric)
        logger.info(f"Fetching {metric} from {url}")

        response = self.client.get(url)
        response.raise_for_status()

        table = pd.read_csv(io.StringIO(response.text))
        _check_schema(table, metric)

        logger.info(f"  {len(table)} regions x {len(table.columns) - len(ID_COLUMNS)} dates")
        return table

    def fetch_all(self) -> dict[str, pd.DataFrame]:
        """Fetch every configured table. Any failure aborts the whole fetch."""
        return {metric: self.fetch_table(metric) for metric in RESOURCES}


def _check_schema(table: pd.DataFrame, metric: str) -> None:
    missing = [col for col in ID_COLUMNS if col not in table.columns]
    if missing:
        raise ValueError(f"{metric} table is missing columns: {missing}")
    if len(table.columns) == len(ID_COLUMNS):
        raise ValueError(f"{metric} table has no date columns")


def main() -> None:
    """CLI entry point for fetching data."""
    import argparse
    import sys

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(levelname)s - %(message)s",
    )

    parser = argparse.ArgumentParser(description="Fetch JHU CSSE COVID-19 time series")
    parser.add_argument(
        "--metric",
        type=str,
        help="Fetch one metric only",
    )
    args = parser.parse_args()

    try:
        with CsseFetcher() as fetcher:
            if args.metric:
                if args.metric not in RESOURCES:
                    print(f"Unknown metric: {args.metric}")
                    print(f"Available: {', '.join(RESOURCES)}")
                    sys.exit(1)
                tables = {args.metric: fetcher.fetch_table(args.metric)}
            else:
                tables = fetcher.fetch_all()

        print("\nDone.")
        for metric, table in tables.items():
            print(f"  {metric}: {table.shape[0]} rows, {table.shape[1]} columns")

    except ValueError as e:
        print(f"Data error: {e}")
        sys.exit(1)
    except httpx.HTTPStatusError as e:
        print(f"HTTP error: {e.response.status_code} - {e.request.url}")
        sys.exit(1)
    except httpx.RequestError as e:
        print(f"Request failed: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
