"""Conversion of raw records (JSON objects, CSV rows) into measurements."""

from __future__ import annotations

import csv
import io
import logging
import math
from datetime import date, datetime
from typing import Any, Iterable, List, Mapping, Optional, Sequence

from models.errors import MalformedInput
from models.records import Measurement

logger = logging.getLogger(__name__)

TIMESTAMP_FIELDS = ("date", "timestamp")
QUALITY_INDEX_FIELDS = ("aqi", "quality_index")
PARTICULATE_FIELDS = ("pm25", "pm2_5", "particulate_level")


class MeasurementParser:
    """Strict parser: the first bad record aborts the whole batch.

    Field names are matched case-insensitively against a list of aliases so
    that both the upstream ``date/aqi/pm25`` payloads and descriptive column
    names are accepted.
    """

    def __init__(
        self,
        timestamp_fields: Sequence[str] = TIMESTAMP_FIELDS,
        quality_index_fields: Sequence[str] = QUALITY_INDEX_FIELDS,
        particulate_fields: Sequence[str] = PARTICULATE_FIELDS,
    ) -> None:
        self.timestamp_fields = tuple(name.lower() for name in timestamp_fields)
        self.quality_index_fields = tuple(name.lower() for name in quality_index_fields)
        self.particulate_fields = tuple(name.lower() for name in particulate_fields)

    def parse_records(
        self, records: Iterable[Mapping[str, Any]], first_row: int = 1
    ) -> List[Measurement]:
        measurements: List[Measurement] = []
        for row_number, record in enumerate(records, start=first_row):
            try:
                measurements.append(self.parse_record(record, row_number=row_number))
            except MalformedInput as exc:
                logger.warning(
                    "Rejecting measurement batch",
                    extra={
                        "row_number": exc.row_number,
                        "field": exc.field,
                        "reason": exc.reason,
                    },
                )
                raise
        return measurements

    def parse_csv(self, text: str) -> List[Measurement]:
        reader = csv.DictReader(io.StringIO(text))
        if not reader.fieldnames:
            raise MalformedInput("CSV file is missing a header row.", row_number=1)

        columns = {name.lower().strip() for name in reader.fieldnames if name}
        missing = [
            aliases[0]
            for aliases in (
                self.timestamp_fields,
                self.quality_index_fields,
                self.particulate_fields,
            )
            if not columns.intersection(aliases)
        ]
        if missing:
            raise MalformedInput(
                f"CSV missing required columns: {', '.join(missing)}", row_number=1
            )

        return self.parse_records(reader, first_row=2)

    def parse_record(
        self, record: Mapping[str, Any], row_number: Optional[int] = None
    ) -> Measurement:
        if not isinstance(record, Mapping):
            raise MalformedInput(
                f"expected an object, got {type(record).__name__}", row_number=row_number
            )
        normalized = {
            str(key).lower().strip(): value for key, value in record.items() if key is not None
        }

        timestamp_name, timestamp_raw = self._lookup(
            normalized, self.timestamp_fields, row_number
        )
        quality_name, quality_raw = self._lookup(
            normalized, self.quality_index_fields, row_number
        )
        particulate_name, particulate_raw = self._lookup(
            normalized, self.particulate_fields, row_number
        )

        return Measurement(
            timestamp=parse_timestamp(timestamp_raw, row_number=row_number, field=timestamp_name),
            quality_index=parse_number(quality_raw, row_number=row_number, field=quality_name),
            particulate_level=parse_number(
                particulate_raw, row_number=row_number, field=particulate_name
            ),
        )

    @staticmethod
    def _lookup(
        record: Mapping[str, Any], aliases: Sequence[str], row_number: Optional[int]
    ) -> tuple[str, Any]:
        for name in aliases:
            if name in record:
                return name, record[name]
        raise MalformedInput("missing value", row_number=row_number, field=aliases[0])


def parse_timestamp(
    value: Any, row_number: Optional[int] = None, field: str = "timestamp"
) -> date:
    """Parse an ISO-8601 date or datetime, keeping the calendar year as written."""
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        raise MalformedInput(
            f"invalid timestamp type {type(value).__name__}", row_number=row_number, field=field
        )

    candidate = value.strip()
    if not candidate:
        raise MalformedInput("missing timestamp", row_number=row_number, field=field)

    if candidate.endswith("Z"):
        candidate = candidate[:-1] + "+00:00"

    try:
        return datetime.fromisoformat(candidate)
    except ValueError as exc:
        raise MalformedInput("invalid timestamp", row_number=row_number, field=field) from exc


def parse_number(value: Any, row_number: Optional[int] = None, field: str = "value") -> float:
    if isinstance(value, bool):
        raise MalformedInput("invalid numeric value", row_number=row_number, field=field)

    if isinstance(value, (int, float)):
        parsed = float(value)
    elif isinstance(value, str):
        candidate = value.strip()
        if not candidate:
            raise MalformedInput("missing value", row_number=row_number, field=field)
        try:
            parsed = float(candidate)
        except ValueError as exc:
            raise MalformedInput(
                "invalid numeric value", row_number=row_number, field=field
            ) from exc
    else:
        raise MalformedInput("invalid numeric value", row_number=row_number, field=field)

    if not math.isfinite(parsed):
        raise MalformedInput("non-finite numeric value", row_number=row_number, field=field)
    return parsed


def to_record(measurement: Measurement) -> dict[str, Any]:
    """Render a measurement in the upstream ``date/aqi/pm25`` shape."""
    return {
        "date": measurement.timestamp.isoformat(),
        "aqi": measurement.quality_index,
        "pm25": measurement.particulate_level,
    }
