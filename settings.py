from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Optional


_FORECAST_HORIZON_ENV = "ANALYTICS_FORECAST_HORIZON"
_STORE_NAME_ENV = "MEASUREMENT_STORE_NAME"
_STORE_PATH_ENV = "MEASUREMENT_STORE_PATH"
_LOG_LEVEL_ENV = "LOG_LEVEL"

DEFAULT_FORECAST_HORIZON = 3


@dataclass(frozen=True)
class Settings:
    forecast_horizon: int
    store_name: str
    store_persistence_path: Optional[str]
    log_level: str


def _read_env(name: str) -> Optional[str]:
    """Stripped value of ``name``; unset and blank both read as ``None``."""
    value = os.getenv(name)
    if value is None:
        return None
    return value.strip() or None


def _read_positive_int(name: str, default: int) -> int:
    candidate = _read_env(name)
    if candidate is None:
        return default
    try:
        parsed = int(candidate)
    except ValueError:
        return default
    return parsed if parsed > 0 else default


@lru_cache
def get_settings() -> Settings:
    return Settings(
        forecast_horizon=_read_positive_int(_FORECAST_HORIZON_ENV, DEFAULT_FORECAST_HORIZON),
        store_name=_read_env(_STORE_NAME_ENV) or "measurements",
        store_persistence_path=_read_env(_STORE_PATH_ENV),
        log_level=(_read_env(_LOG_LEVEL_ENV) or "INFO").upper(),
    )
