"""Aggregation logic for environmental measurements."""

from __future__ import annotations

from datetime import date
from typing import Dict, Iterable, List

from models.errors import MalformedInput
from models.records import Measurement, MeasurementSummary, YearlyAggregate, YearlySeries
from services.parser import parse_number


class Aggregator:
    """Pure aggregation component that can be unit tested in isolation.

    Measurements may come from any record store, so numeric fields are
    checked here with the same finite-number rule the parser applies.
    """

    def summarize(self, measurements: Iterable[Measurement]) -> MeasurementSummary:
        """Mean quality index and peak particulate level over all records.

        Empty input yields zero for both scalars.
        """
        count = 0
        total = 0.0
        peak: float | None = None

        for position, measurement in enumerate(measurements, start=1):
            count += 1
            total += parse_number(
                measurement.quality_index, row_number=position, field="quality_index"
            )
            level = parse_number(
                measurement.particulate_level, row_number=position, field="particulate_level"
            )
            if peak is None or level > peak:
                peak = level

        if not count:
            return MeasurementSummary()

        return MeasurementSummary(
            record_count=count,
            average_index=total / count,
            max_secondary=peak if peak is not None else 0.0,
        )

    def yearly_series(self, measurements: Iterable[Measurement]) -> YearlySeries:
        """Bucket measurements by calendar year and average the quality index.

        Years are emitted in ascending order regardless of input order.
        """
        buckets: Dict[int, List[float]] = {}

        for position, measurement in enumerate(measurements, start=1):
            timestamp = measurement.timestamp
            if not isinstance(timestamp, date):
                raise MalformedInput(
                    f"expected a date, got {type(timestamp).__name__}",
                    row_number=position,
                    field="timestamp",
                )
            value = parse_number(
                measurement.quality_index, row_number=position, field="quality_index"
            )
            buckets.setdefault(timestamp.year, []).append(value)

        points = tuple(
            YearlyAggregate(year=year, average=sum(values) / len(values), count=len(values))
            for year, values in sorted(buckets.items())
        )
        return YearlySeries(points=points)
