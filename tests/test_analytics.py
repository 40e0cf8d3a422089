from __future__ import annotations

import logging
from datetime import date

import pytest

from models.errors import MalformedInput
from models.records import Measurement
from services.analytics import AnalyticsEngine, build_default_engine, build_engine


def _measurement(year: int, aqi: float, pm25: float = 20.0, month: int = 1) -> Measurement:
    return Measurement(timestamp=date(year, month, 1), quality_index=aqi, particulate_level=pm25)


@pytest.fixture()
def engine() -> AnalyticsEngine:
    return build_engine(horizon=3)


def test_reference_three_year_example(engine: AnalyticsEngine) -> None:
    measurements = [
        _measurement(2019, 70.0, month=2),
        _measurement(2019, 90.0, month=8),
        _measurement(2020, 90.0, pm25=55.5),
        _measurement(2021, 100.0),
    ]

    report = engine.analyze(measurements)

    assert report.trend_slope == pytest.approx(10.0)
    assert report.model.intercept == pytest.approx(80.0)
    assert report.forecast.labels == ("+1", "+2", "+3")
    assert report.forecast.values == pytest.approx((110.0, 120.0, 130.0))
    assert report.summary.average_index == pytest.approx(87.5)
    assert report.summary.max_secondary == 55.5
    assert report.composed.labels == ("2019", "2020", "2021", "+1", "+2", "+3")
    assert report.composed.observed_track[:3] == pytest.approx((80.0, 90.0, 100.0))
    assert report.composed.observed_track[3:] == (None, None, None)
    assert report.composed.forecast_track[:3] == (None, None, None)


def test_empty_input_yields_zero_report(engine: AnalyticsEngine) -> None:
    report = engine.analyze([])

    assert report.summary.average_index == 0.0
    assert report.trend_slope == 0.0
    assert report.forecast.values == (0.0, 0.0, 0.0)
    assert report.composed.labels == ("+1", "+2", "+3")


def test_single_year_uses_zero_model(engine: AnalyticsEngine) -> None:
    report = engine.analyze([_measurement(2022, 60.0), _measurement(2022, 80.0, month=5)])

    assert report.yearly.averages == (70.0,)
    assert report.trend_slope == 0.0
    assert report.forecast.values == (0.0, 0.0, 0.0)


def test_analysis_is_idempotent(engine: AnalyticsEngine) -> None:
    measurements = [_measurement(2010 + i % 5, float(i * 3 % 11), pm25=float(i)) for i in range(25)]

    assert engine.analyze(measurements) == engine.analyze(measurements)


def test_analyze_accepts_generators(engine: AnalyticsEngine) -> None:
    report = engine.analyze(_measurement(2000 + i, float(i)) for i in range(4))

    assert report.summary.record_count == 4
    assert len(report.yearly) == 4


def test_summary_does_not_need_pipeline(engine: AnalyticsEngine) -> None:
    summary = engine.summarize([_measurement(2020, 10.0, pm25=3.0), _measurement(2020, 30.0, pm25=9.0)])

    assert summary.average_index == 20.0
    assert summary.max_secondary == 9.0


def test_malformed_measurement_fails_whole_analysis(engine: AnalyticsEngine) -> None:
    measurements = [
        _measurement(2020, 10.0),
        Measurement(timestamp=None, quality_index=1.0, particulate_level=1.0),  # type: ignore[arg-type]
    ]

    with pytest.raises(MalformedInput):
        engine.analyze(measurements)


def test_gap_years_are_logged(engine: AnalyticsEngine, caplog) -> None:
    measurements = [_measurement(2015, 10.0), _measurement(2018, 40.0)]

    with caplog.at_level(logging.WARNING, logger="services.analytics"):
        report = engine.analyze(measurements)

    assert report.yearly.gap_years == (2016, 2017)
    records = [record for record in caplog.records if record.name == "services.analytics"]
    assert records, "Expected a gap warning to be logged."
    assert getattr(records[0], "gap_years") == (2016, 2017)


def test_report_is_logged_with_context(engine: AnalyticsEngine, caplog) -> None:
    with caplog.at_level(logging.INFO, logger="services.analytics"):
        engine.analyze([_measurement(2019, 80.0), _measurement(2020, 90.0)])

    record = next(r for r in caplog.records if r.getMessage() == "Computed trend report")
    assert record.record_count == 2
    assert record.year_count == 2
    assert record.slope == pytest.approx(10.0)
    assert record.horizon == 3


def test_build_default_engine_is_cached() -> None:
    build_default_engine.cache_clear()
    try:
        assert build_default_engine() is build_default_engine()
        assert build_default_engine(horizon=5).horizon == 5
    finally:
        build_default_engine.cache_clear()


def test_non_numeric_quality_index_raises_malformed_input(engine: AnalyticsEngine) -> None:
    measurements = [Measurement(timestamp=date(2020, 1, 1), quality_index="abc", particulate_level=1.0)]  # type: ignore[arg-type]

    with pytest.raises(MalformedInput) as excinfo:
        engine.analyze(measurements)

    assert excinfo.value.field == "quality_index"
