"""Data fetching and reshaping."""

from .fetcher import CsseFetcher
from .reshape import build_observations, melt_wide, join_metrics, widen

__all__ = ["CsseFetcher", "build_observations", "melt_wide", "join_metrics", "widen"]
