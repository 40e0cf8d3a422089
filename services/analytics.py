"""Orchestration of the trend analytics pipeline."""

from __future__ import annotations

import logging
from functools import lru_cache
from typing import Iterable, Optional

from models.records import Measurement, MeasurementSummary, TrendReport
from services.aggregator import Aggregator
from services.composer import SeriesComposer
from services.forecaster import Forecaster
from services.trend import TrendFitter
from settings import get_settings

logger = logging.getLogger(__name__)


class AnalyticsEngine:
    """Runs aggregation, trend fitting, forecasting and composition in order.

    Every call recomputes from the measurements it is given and keeps no
    state, so one engine can be shared between concurrent requests.
    """

    def __init__(
        self,
        aggregator: Aggregator,
        fitter: TrendFitter,
        forecaster: Forecaster,
        composer: SeriesComposer,
    ) -> None:
        self.aggregator = aggregator
        self.fitter = fitter
        self.forecaster = forecaster
        self.composer = composer

    @property
    def horizon(self) -> int:
        return self.forecaster.horizon

    def summarize(self, measurements: Iterable[Measurement]) -> MeasurementSummary:
        return self.aggregator.summarize(measurements)

    def analyze(self, measurements: Iterable[Measurement]) -> TrendReport:
        records = tuple(measurements)

        yearly = self.aggregator.yearly_series(records)
        summary = self.aggregator.summarize(records)
        model = self.fitter.fit(yearly.averages)
        forecast = self.forecaster.forecast(model, observed_count=len(yearly))
        composed = self.composer.compose(yearly, forecast)

        gap_years = yearly.gap_years
        if gap_years:
            logger.warning(
                "Yearly series has gaps; trend positions count years with data only",
                extra={"gap_years": gap_years, "year_count": len(yearly)},
            )

        logger.info(
            "Computed trend report",
            extra={
                "record_count": summary.record_count,
                "year_count": len(yearly),
                "slope": model.slope,
                "horizon": len(forecast),
            },
        )
        return TrendReport(
            summary=summary,
            yearly=yearly,
            model=model,
            forecast=forecast,
            composed=composed,
        )


def build_engine(horizon: Optional[int] = None) -> AnalyticsEngine:
    """Wire an engine with the default components."""
    forecast_horizon = horizon if horizon is not None else get_settings().forecast_horizon
    return AnalyticsEngine(
        aggregator=Aggregator(),
        fitter=TrendFitter(),
        forecaster=Forecaster(horizon=forecast_horizon),
        composer=SeriesComposer(),
    )


@lru_cache
def build_default_engine(horizon: Optional[int] = None) -> AnalyticsEngine:
    return build_engine(horizon)
