"""Pydantic schemas for the HTTP API layer."""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from models.records import MeasurementSummary, TrendReport


class _CamelModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class SummaryResponse(_CamelModel):
    """Scalar statistics over the submitted measurements."""

    record_count: int = Field(..., ge=0, alias="recordCount")
    average_index: float = Field(..., alias="averageIndex")
    max_secondary: float = Field(..., alias="maxSecondary")

    @classmethod
    def from_summary(cls, summary: MeasurementSummary) -> "SummaryResponse":
        return cls(
            record_count=summary.record_count,
            average_index=summary.average_index,
            max_secondary=summary.max_secondary,
        )


class TrendReportResponse(_CamelModel):
    """Summary scalars plus the observed and forecast tracks for charting."""

    average_index: float = Field(..., alias="averageIndex")
    max_secondary: float = Field(..., alias="maxSecondary")
    trend_slope: float = Field(..., alias="trendSlope")
    trend_intercept: float = Field(..., alias="trendIntercept")
    labels: List[str] = Field(default_factory=list)
    observed_track: List[Optional[float]] = Field(default_factory=list, alias="observedTrack")
    forecast_track: List[Optional[float]] = Field(default_factory=list, alias="forecastTrack")
    gap_years: List[int] = Field(
        default_factory=list,
        alias="gapYears",
        description="Calendar years without data; trend positions skip them.",
    )

    @classmethod
    def from_report(cls, report: TrendReport) -> "TrendReportResponse":
        composed = report.composed
        return cls(
            average_index=report.summary.average_index,
            max_secondary=report.summary.max_secondary,
            trend_slope=report.model.slope,
            trend_intercept=report.model.intercept,
            labels=list(composed.labels),
            observed_track=list(composed.observed_track),
            forecast_track=list(composed.forecast_track),
            gap_years=list(report.yearly.gap_years),
        )


class IngestResponse(BaseModel):
    """Acknowledgement returned after measurements are stored."""

    accepted: int = Field(..., ge=0)
    total: int = Field(..., ge=0)
