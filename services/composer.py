"""Alignment of observed and forecast values on a shared axis."""

from __future__ import annotations

from models.records import ComposedSeries, ForecastSeries, YearlySeries


class SeriesComposer:
    def compose(self, yearly: YearlySeries, forecast: ForecastSeries) -> ComposedSeries:
        observed_count = len(yearly)
        horizon = len(forecast)
        return ComposedSeries(
            labels=yearly.labels + forecast.labels,
            observed_track=yearly.averages + (None,) * horizon,
            forecast_track=(None,) * observed_count + forecast.values,
        )
