"""Domain models shared across services."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional, Tuple


@dataclass(frozen=True, slots=True)
class Measurement:
    """A single environmental measurement supplied by a record store."""

    timestamp: date
    quality_index: float
    particulate_level: float


@dataclass(frozen=True, slots=True)
class MeasurementSummary:
    """Scalar statistics over a whole measurement sequence."""

    record_count: int = 0
    average_index: float = 0.0
    max_secondary: float = 0.0


@dataclass(frozen=True, slots=True)
class YearlyAggregate:
    year: int
    average: float
    count: int


@dataclass(frozen=True, slots=True)
class YearlySeries:
    """Yearly averages in ascending calendar order, one point per year with data.

    Years without records are omitted, so a point's position is an index over
    "years with data" rather than over calendar years. ``gap_years`` lists the
    calendar years that were skipped between the first and last observation.
    """

    points: Tuple[YearlyAggregate, ...] = ()

    def __len__(self) -> int:
        return len(self.points)

    @property
    def years(self) -> Tuple[int, ...]:
        return tuple(point.year for point in self.points)

    @property
    def averages(self) -> Tuple[float, ...]:
        return tuple(point.average for point in self.points)

    @property
    def labels(self) -> Tuple[str, ...]:
        return tuple(str(point.year) for point in self.points)

    @property
    def gap_years(self) -> Tuple[int, ...]:
        years = self.years
        if len(years) < 2:
            return ()
        present = set(years)
        return tuple(year for year in range(years[0], years[-1] + 1) if year not in present)


@dataclass(frozen=True, slots=True)
class TrendModel:
    """Linear model ``value ≈ slope * index + intercept`` over series positions."""

    slope: float = 0.0
    intercept: float = 0.0

    @classmethod
    def zero(cls) -> "TrendModel":
        return cls(slope=0.0, intercept=0.0)

    def value_at(self, index: int) -> float:
        return self.slope * index + self.intercept


@dataclass(frozen=True, slots=True)
class ForecastPoint:
    """Projected value ``offset`` periods after the last observed period."""

    offset: int
    value: float

    @property
    def label(self) -> str:
        return f"+{self.offset}"


@dataclass(frozen=True, slots=True)
class ForecastSeries:
    points: Tuple[ForecastPoint, ...] = ()

    def __len__(self) -> int:
        return len(self.points)

    @property
    def labels(self) -> Tuple[str, ...]:
        return tuple(point.label for point in self.points)

    @property
    def values(self) -> Tuple[float, ...]:
        return tuple(point.value for point in self.points)


@dataclass(frozen=True, slots=True)
class ComposedSeries:
    """Observed and forecast tracks aligned on a shared label axis.

    ``None`` marks positions where a track has no value.
    """

    labels: Tuple[str, ...] = ()
    observed_track: Tuple[Optional[float], ...] = ()
    forecast_track: Tuple[Optional[float], ...] = ()


@dataclass(frozen=True)
class TrendReport:
    """Everything produced by one run of the analytics pipeline."""

    summary: MeasurementSummary
    yearly: YearlySeries
    model: TrendModel
    forecast: ForecastSeries
    composed: ComposedSeries

    @property
    def trend_slope(self) -> float:
        return self.model.slope
