"""Wide-to-long reshaping of the CSSE tables."""

from typing import Iterable

import numpy as np
import pandas as pd

from covid_trends.models import Observation


DATE_FORMAT = "%m/%d/%y"  # headers look like 1/22/20

KEY_COLUMNS = ["sub_region", "region", "date"]
COLUMNS = KEY_COLUMNS + ["confirmed", "deaths"]

_SOURCE_NAMES = {"Province/State": "sub_region", "Country/Region": "region"}
_COORDINATES = ["Lat", "Long"]


def melt_wide(wide: pd.DataFrame, value_name: str) -> pd.DataFrame:
    """
    Convert a wide table (one column per date) into a long table.

    Args:
        wide: Table as fetched, with Province/State, Country/Region, Lat, Long
              and one M/D/YY column per date
        value_name: Name for the value column (e.g. "confirmed")

    Returns:
        DataFrame with sub_region, region, date and an Int64 value column,
        len(wide) * number_of_dates rows
    """
    table = wide.drop(columns=_COORDINATES, errors="ignore").rename(columns=_SOURCE_NAMES)
    table["sub_region"] = table["sub_region"].fillna("")

    headers = [col for col in table.columns if col not in ("sub_region", "region")]
    # An unparseable header raises here and aborts the run
    parsed = pd.to_datetime(pd.Index(headers).astype(str), format=DATE_FORMAT)

    long = table.melt(
        id_vars=["sub_region", "region"],
        value_vars=headers,
        var_name="date",
        value_name=value_name,
    )
    long["date"] = long["date"].map(dict(zip(headers, parsed)))
    long[value_name] = pd.to_numeric(long[value_name]).astype("Int64")
    return long[KEY_COLUMNS + [value_name]].reset_index(drop=True)


def join_metrics(confirmed: pd.DataFrame, deaths: pd.DataFrame) -> pd.DataFrame:
    """
    Left-join the long deaths table onto the long confirmed table.

    Keys only present on the confirmed side get <NA> deaths, not 0.
    Duplicate keys are not collapsed.
    """
    joined = confirmed.merge(
        deaths[KEY_COLUMNS + ["deaths"]],
        on=KEY_COLUMNS,
        how="left",
    )
    joined["deaths"] = joined["deaths"].astype("Int64")
    return joined[COLUMNS]


def build_observations(confirmed_wide: pd.DataFrame, deaths_wide: pd.DataFrame) -> pd.DataFrame:
    """Unified observation table from the two fetched wide tables."""
    return join_metrics(
        melt_wide(confirmed_wide, "confirmed"),
        melt_wide(deaths_wide, "deaths"),
    )


def widen(long: pd.DataFrame, value_name: str) -> pd.DataFrame:
    """
    Pivot a long table back into the source layout.

    Rows keep the order in which (sub_region, region) pairs first appear,
    date columns are chronological and labelled M/D/YY.
    """
    keys = long[["sub_region", "region"]].drop_duplicates()
    wide = long.pivot(index=["sub_region", "region"], columns="date", values=value_name)
    wide = wide.reindex(pd.MultiIndex.from_frame(keys))
    wide = wide.sort_index(axis=1)
    wide.columns = [_format_header(ts) for ts in wide.columns]
    if not wide.isna().any().any():
        # source tables hold plain integers
        wide = wide.astype("int64")

    wide = wide.reset_index().rename(columns={v: k for k, v in _SOURCE_NAMES.items()})
    wide["Province/State"] = wide["Province/State"].replace("", np.nan)
    return wide


def _format_header(ts: pd.Timestamp) -> str:
    return f"{ts.month}/{ts.day}/{ts:%y}"


def to_observations(table: pd.DataFrame) -> tuple[Observation, ...]:
    """Flatten a long table into immutable records, in row order."""
    return tuple(
        Observation(
            sub_region=row.sub_region,
            region=row.region,
            date=pd.Timestamp(row.date).date(),
            confirmed=int(row.confirmed),
            deaths=None if pd.isna(row.deaths) else int(row.deaths),
        )
        for row in table[COLUMNS].itertuples(index=False)
    )


def from_observations(records: Iterable[Observation]) -> pd.DataFrame:
    """Inverse of to_observations."""
    records = list(records)
    return pd.DataFrame(
        {
            "sub_region": [r.sub_region for r in records],
            "region": [r.region for r in records],
            "date": pd.to_datetime([r.date for r in records]),
            "confirmed": pd.array([r.confirmed for r in records], dtype="Int64"),
            "deaths": pd.array([r.deaths for r in records], dtype="Int64"),
        },
        columns=COLUMNS,
    )
