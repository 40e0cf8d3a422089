"""HTTP route definitions for the service."""

from __future__ import annotations

from typing import Any, Dict, List

from fastapi import APIRouter, Body, Depends, HTTPException, Response, status

from app.schemas import IngestResponse, SummaryResponse, TrendReportResponse
from models.errors import MalformedInput
from models.records import Measurement
from services.analytics import AnalyticsEngine, build_default_engine
from services.parser import MeasurementParser
from storage.measurement_store import MeasurementStore, build_default_store

# Store-backed handlers are sync; FastAPI runs them in its threadpool.
router = APIRouter()

_parser = MeasurementParser()


def get_engine() -> AnalyticsEngine:
    return build_default_engine()


def get_store() -> MeasurementStore:
    return build_default_store()


def _parse_or_400(records: List[Dict[str, Any]]) -> List[Measurement]:
    try:
        return _parser.parse_records(records)
    except MalformedInput as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(exc),
        ) from exc


@router.post(
    "/analytics",
    response_model=TrendReportResponse,
    summary="Compute summary, yearly trend and forecast for the submitted records.",
)
async def analyze_records(
    records: List[Dict[str, Any]] = Body(..., description="Raw measurement records."),
    engine: AnalyticsEngine = Depends(get_engine),
) -> TrendReportResponse:
    measurements = _parse_or_400(records)
    return TrendReportResponse.from_report(engine.analyze(measurements))


@router.post(
    "/measurements",
    status_code=status.HTTP_201_CREATED,
    response_model=IngestResponse,
    summary="Store measurement records for later analysis.",
)
def ingest_measurements(
    records: List[Dict[str, Any]] = Body(..., description="Raw measurement records."),
    store: MeasurementStore = Depends(get_store),
) -> IngestResponse:
    measurements = _parse_or_400(records)
    total = store.add_many(measurements)
    return IngestResponse(accepted=len(measurements), total=total)


@router.delete(
    "/measurements",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Remove all stored measurements.",
)
def clear_measurements(store: MeasurementStore = Depends(get_store)) -> Response:
    store.clear()
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get(
    "/measurements/summary",
    response_model=SummaryResponse,
    summary="Summary statistics over stored measurements.",
)
def get_summary(
    store: MeasurementStore = Depends(get_store),
    engine: AnalyticsEngine = Depends(get_engine),
) -> SummaryResponse:
    return SummaryResponse.from_summary(engine.summarize(store.list_measurements()))


@router.get(
    "/measurements/analytics",
    response_model=TrendReportResponse,
    summary="Trend report over stored measurements.",
)
def get_stored_analytics(
    store: MeasurementStore = Depends(get_store),
    engine: AnalyticsEngine = Depends(get_engine),
) -> TrendReportResponse:
    return TrendReportResponse.from_report(engine.analyze(store.list_measurements()))


@router.get(
    "/health",
    summary="Health check endpoint.",
    status_code=status.HTTP_200_OK,
)
async def healthcheck() -> dict[str, str]:
    return {"status": "ok"}


@router.get(
    "/",
    summary="Root endpoint mirrors health information.",
    status_code=status.HTTP_200_OK,
)
async def root() -> dict[str, str]:
    return {"status": "ok", "detail": "See /health for service status."}
