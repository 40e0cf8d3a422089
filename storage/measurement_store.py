from __future__ import annotations

import json
import logging
from functools import lru_cache
from pathlib import Path
from threading import Lock
from typing import Iterable, List, Optional, Tuple

from models.records import Measurement
from services.parser import MeasurementParser, to_record
from settings import get_settings

logger = logging.getLogger(__name__)


class MeasurementStore:
    """In-memory measurement store with optional JSON mirroring on disk.

    Holds input measurements only; analytics are recomputed on every read.
    """

    def __init__(self, name: str, persistence_path: Optional[Path] = None) -> None:
        self.name = name
        self.persistence_path = persistence_path
        self._measurements: List[Measurement] = []
        self._lock = Lock()
        if persistence_path:
            persistence_path.parent.mkdir(parents=True, exist_ok=True)
            self._load_from_disk()

    def __len__(self) -> int:
        with self._lock:
            return len(self._measurements)

    def add_many(self, measurements: Iterable[Measurement]) -> int:
        """Append measurements and return the new total."""
        batch = list(measurements)
        with self._lock:
            self._measurements.extend(batch)
            self._persist()
            total = len(self._measurements)
        logger.info(
            "Stored measurements",
            extra={"store": self.name, "record_count": len(batch)},
        )
        return total

    def list_measurements(self) -> Tuple[Measurement, ...]:
        with self._lock:
            return tuple(self._measurements)

    def clear(self) -> None:
        with self._lock:
            self._measurements.clear()
            self._persist()

    def _persist(self) -> None:
        if not self.persistence_path:
            return
        payload = [to_record(measurement) for measurement in self._measurements]
        self.persistence_path.write_text(json.dumps(payload, indent=2))

    def _load_from_disk(self) -> None:
        if not self.persistence_path or not self.persistence_path.exists():
            return

        try:
            raw = self.persistence_path.read_text() or "[]"
            data = json.loads(raw)
        except (OSError, json.JSONDecodeError):
            logger.warning(
                "Ignoring unreadable measurement file",
                extra={"store": self.name, "reason": str(self.persistence_path)},
            )
            data = []

        # A bad record fails the whole load and leaves the file untouched.
        self._measurements = MeasurementParser().parse_records(data)


@lru_cache
def build_default_store(
    name: Optional[str] = None,
    path: Optional[str] = None,
) -> MeasurementStore:
    settings = get_settings()
    store_name = settings.store_name if name is None else name
    store_path = settings.store_persistence_path if path is None else path
    persistence = Path(store_path) if store_path else None
    return MeasurementStore(name=store_name, persistence_path=persistence)
