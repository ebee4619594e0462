"""Record types for case observations and forecasts."""

from dataclasses import dataclass
from datetime import date
from typing import Optional


@dataclass(frozen=True)
class Observation:
    """Cumulative counts for one region on one day."""

    sub_region: str
    region: str
    date: date
    confirmed: int
    deaths: Optional[int] = None  # None = not reported, distinct from 0


@dataclass(frozen=True)
class ForecastPoint:
    """Single row of a forecast."""

    date: date
    yhat: float
    yhat_lower: float
    yhat_upper: float

    @property
    def interval_width(self) -> float:
        return self.yhat_upper - self.yhat_lower
