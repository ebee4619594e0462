"""Group, filter and rank the unified observation table."""

from typing import Callable, Sequence

import pandas as pd


Predicate = Callable[[pd.DataFrame], pd.Series]

GROUP_KEYS = ("date", "region", "sub_region")
METRICS = ["confirmed", "deaths"]


def region_equals(name: str) -> Predicate:
    """Row filter keeping one region."""
    return lambda table: table["region"] == name


def region_not_equals(name: str) -> Predicate:
    """Row filter dropping one region."""
    return lambda table: table["region"] != name


def aggregate(
    table: pd.DataFrame,
    by: str | Sequence[str],
    where: Predicate | None = None,
    min_count: int = 0,
) -> pd.DataFrame:
    """
    Sum confirmed and deaths per group.

    Args:
        table: Unified observation table (or an earlier summary of it)
        by: "date", "region", or a sequence such as ("date", "region")
        where: Optional row predicate applied before grouping
        min_count: Non-missing values a group needs for a sum; below it
                   the sum is <NA>. With the default 0 an all-missing
                   group sums to 0.

    Returns:
        One row per group, sorted by the group keys. Missing deaths are
        skipped by the sum rather than counted as zero.
    """
    keys = [by] if isinstance(by, str) else list(by)
    unknown = [key for key in keys if key not in GROUP_KEYS]
    if not keys or unknown:
        raise ValueError(f"Cannot group by {keys}, expected keys from {GROUP_KEYS}")

    rows = table if where is None else table[where(table)]
    return rows.groupby(keys, as_index=False, sort=True)[METRICS].sum(min_count=min_count)


def top_n(table: pd.DataFrame, column: str, n: int) -> pd.DataFrame:
    """First n rows by descending column; ties keep their input order."""
    ranked = table.sort_values(column, ascending=False, kind="stable")
    return ranked.head(n).reset_index(drop=True)


def latest_snapshot(table: pd.DataFrame) -> pd.DataFrame:
    """Rows for the most recent reported date."""
    return table[table["date"] == table["date"].max()].reset_index(drop=True)


def ranking(table: pd.DataFrame, column: str = "confirmed", n: int = 10) -> pd.DataFrame:
    """Regions ranked by their latest cumulative count."""
    return top_n(aggregate(latest_snapshot(table), "region"), column, n)


def region_series(table: pd.DataFrame, region: str, column: str) -> pd.DataFrame:
    """
    Date-ordered series of one region's summed metric.

    Sub-regions (provinces, overseas territories) are summed into the
    country. Columns are named ds/y, the layout Prophet expects.
    """
    summary = aggregate(table, "date", where=region_equals(region))
    return pd.DataFrame(
        {
            "ds": summary["date"],
            "y": summary[column].astype("float64"),
        }
    )


def daily_increase(frame: pd.DataFrame, column: str) -> pd.DataFrame:
    """
    Add new_<column>: day-over-day change of a cumulative column.

    The first row keeps its cumulative value. Negative values (source
    corrections) are left as reported.
    """
    out = frame.copy()
    out[f"new_{column}"] = frame[column].diff().fillna(frame[column])
    return out
