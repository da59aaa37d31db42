"""Collection forecast endpoints: compute, save, accuracy and history"""

import time
import logging
from dataclasses import asdict
from datetime import date
from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, Query, Request
from sqlalchemy.orm import Session

from collection_forecast.api.v1.schemas import (
    ForecastSchema,
    ForecastSummaryResponse,
    SaveForecastResponse,
    AccuracyItem,
    AccuracyResponse,
    HistoryPoint,
    HorizonHistorySchema,
    WeekOverWeekSchema,
    HistoryResponse,
)
from collection_forecast.api.dependencies import get_forecast_service, get_request_id
from collection_forecast.domain.models import ForecastSummary
from collection_forecast.infrastructure.database.session import get_db
from collection_forecast.infrastructure.database.repositories import ForecastRepository
from collection_forecast.infrastructure.observability.logging import log_forecast
from collection_forecast.infrastructure.observability.metrics import (
    record_forecast,
    record_accuracy,
    forecast_saved_counter,
)
from collection_forecast.services.forecasting import ForecastService

router = APIRouter()


def _summary_response(summary: ForecastSummary) -> ForecastSummaryResponse:
    return ForecastSummaryResponse(
        forecast_date=summary.forecast_date,
        avg_collection_rate=summary.avg_collection_rate,
        trend_slope=summary.trend_slope,
        trend_direction=summary.trend_direction,
        horizons=[ForecastSchema(**asdict(f)) for f in summary.horizons],
        daily=[ForecastSchema(**asdict(f)) for f in summary.daily],
    )


@router.get("/forecast", response_model=ForecastSummaryResponse)
def get_forecast(
    request: Request,
    as_of: Optional[date] = Query(None, description="Forecast date (default: today)"),
    service: ForecastService = Depends(get_forecast_service),
):
    """
    Compute a fresh forecast from the trailing history window.

    Nothing is persisted; use POST /v1/forecast/save to keep a forecast for
    accuracy tracking.
    """
    start_time = time.time()
    summary = service.refresh(as_of)

    record_forecast(service.horizons, summary.avg_collection_rate)
    log_forecast(
        get_request_id(request),
        summary.forecast_date.isoformat(),
        summary.avg_collection_rate,
        summary.trend_slope,
        service.history_window_days,
        saved=False,
        duration_ms=(time.time() - start_time) * 1000,
    )
    return _summary_response(summary)


@router.post("/forecast/save", response_model=SaveForecastResponse)
def save_forecast(
    request: Request,
    as_of: Optional[date] = Query(None, description="Forecast date (default: today)"),
    db: Session = Depends(get_db),
    service: ForecastService = Depends(get_forecast_service),
):
    """
    Compute the horizon forecasts and store them for later accuracy tracking.

    Flow:
    1. Refresh forecast from the payment history
    2. Insert one row per horizon
    3. Commit
    """
    start_time = time.time()
    request_id = get_request_id(request)

    try:
        summary = service.refresh(as_of)
        saved = service.save_forecast(summary, ForecastRepository(db))
        db.commit()
    except Exception as e:
        db.rollback()
        logging.error(f"Failed to save forecast: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail="Failed to save forecast")

    forecast_saved_counter.inc(saved)
    record_forecast(service.horizons, summary.avg_collection_rate)
    log_forecast(
        request_id,
        summary.forecast_date.isoformat(),
        summary.avg_collection_rate,
        summary.trend_slope,
        service.history_window_days,
        saved=True,
        duration_ms=(time.time() - start_time) * 1000,
    )

    return SaveForecastResponse(
        forecast_date=summary.forecast_date,
        saved=saved,
        forecasts=[ForecastSchema(**asdict(f)) for f in summary.horizons],
    )


@router.get("/forecast/accuracy", response_model=AccuracyResponse)
def get_forecast_accuracy(
    as_of: Optional[date] = Query(None, description="End of the scoring window (default: today)"),
    window_days: Optional[int] = Query(None, ge=1, le=365, description="Trailing window (default: settings)"),
    db: Session = Depends(get_db),
    service: ForecastService = Depends(get_forecast_service),
):
    """Compare saved forecasts that have come due with realized collections"""
    summary = service.accuracy(ForecastRepository(db), as_of, window_days)
    record_accuracy(c.accuracy for c in summary.comparisons)

    return AccuracyResponse(
        has_data=summary.total_forecasts > 0,
        total_forecasts=summary.total_forecasts,
        overall_accuracy=summary.overall_accuracy,
        mean_absolute_error=summary.mean_absolute_error,
        mean_percent_error=summary.mean_percent_error,
        within_5_percent=summary.within_5,
        within_10_percent=summary.within_10,
        within_20_percent=summary.within_20,
        comparisons=[AccuracyItem(**asdict(c)) for c in summary.comparisons],
    )


@router.get("/forecast/history", response_model=HistoryResponse)
def get_forecast_history(
    db: Session = Depends(get_db),
    service: ForecastService = Depends(get_forecast_service),
):
    """Saved forecasts per horizon with week-over-week changes"""
    history = service.history(ForecastRepository(db))
    total = sum(len(h.points) for h in history)

    return HistoryResponse(
        has_data=total > 0,
        total_forecasts=total,
        horizons=[
            HorizonHistorySchema(
                days_ahead=h.days_ahead,
                points=[HistoryPoint(**asdict(p)) for p in h.points],
                week_over_week=WeekOverWeekSchema(**asdict(h.week_over_week)) if h.week_over_week else None,
            )
            for h in history
        ],
    )
