"""Forward extrapolation of a fitted trend."""

from __future__ import annotations

from models.records import ForecastPoint, ForecastSeries, TrendModel
from settings import DEFAULT_FORECAST_HORIZON


class Forecaster:
    """Evaluates a trend model for a fixed number of periods past the data.

    Offsets count periods with data, so ``+1`` is only the next calendar year
    when the observed series has no gap years.
    """

    def __init__(self, horizon: int = DEFAULT_FORECAST_HORIZON) -> None:
        if isinstance(horizon, bool) or not isinstance(horizon, int) or horizon < 1:
            raise ValueError(f"Forecast horizon must be a positive integer, got {horizon!r}.")
        self.horizon = horizon

    def forecast(self, model: TrendModel, observed_count: int) -> ForecastSeries:
        if observed_count < 0:
            raise ValueError("Observed count cannot be negative.")
        points = tuple(
            ForecastPoint(offset=step + 1, value=model.value_at(observed_count + step))
            for step in range(self.horizon)
        )
        return ForecastSeries(points=points)
