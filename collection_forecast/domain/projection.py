"""Trend-adjusted collection forecasts - core projection logic"""

from datetime import date, timedelta
from typing import List, Sequence
from collection_forecast.domain.models import PaymentRecord, Forecast, ForecastSummary
from collection_forecast.domain.aggregation import (
    to_amount,
    aggregate_daily,
    collection_rate_series,
    average_rate,
    expected_by_date,
    expected_total_between,
)
from collection_forecast.domain.trend import calculate_trend, trend_direction
from collection_forecast.utils.date_utils import generate_date_range

DEFAULT_HORIZONS = (7, 14, 30)
DEFAULT_BAND = 0.15


def adjusted_rate(avg_rate: float, slope: float, days_ahead: int) -> float:
    """Average rate extrapolated along the trend line"""
    return avg_rate + slope * days_ahead


def clamp_rate(rate: float) -> float:
    """Keep a collection rate within 0-100%"""
    return max(0.0, min(100.0, rate))


def project_forecast(
    avg_rate: float,
    slope: float,
    days_ahead: int,
    expected_amount: float,
    target_date: date,
    band: float = DEFAULT_BAND,
) -> Forecast:
    """
    Project collections for one target.

    Steps:
    1. adjusted = avg_rate + slope * days_ahead
    2. clamped to [0, 100]
    3. forecast = expected * clamped / 100
    4. bounds = forecast * (1 - band), forecast * (1 + band)

    The band is a fixed-width heuristic (±15% by default), not a
    regression prediction interval.
    """
    expected = to_amount(expected_amount)
    rate = clamp_rate(adjusted_rate(avg_rate, slope, days_ahead))
    forecast_amount = expected * rate / 100

    return Forecast(
        target_date=target_date,
        days_ahead=days_ahead,
        expected_amount=expected,
        forecast_amount=forecast_amount,
        lower_bound=forecast_amount * (1 - band),
        upper_bound=forecast_amount * (1 + band),
        collection_rate_used=rate,
    )


def build_forecast_summary(
    history: Sequence[PaymentRecord],
    upcoming: Sequence[PaymentRecord],
    as_of: date,
    horizons: Sequence[int] = DEFAULT_HORIZONS,
    daily_days: int = 30,
    band: float = DEFAULT_BAND,
) -> ForecastSummary:
    """
    Main entry point: historical window + upcoming schedule -> forecasts.

    Horizon forecasts cover upcoming payments dated as_of..as_of+horizon
    (inclusive) projected at days_ahead=horizon. The daily series projects
    each single day 0..daily_days at its own offset.
    """
    rates = collection_rate_series(aggregate_daily(history))
    avg = average_rate(rates)
    slope = calculate_trend(rates)

    horizon_forecasts: List[Forecast] = []
    for days_ahead in horizons:
        target = as_of + timedelta(days=days_ahead)
        expected = expected_total_between(upcoming, as_of, target)
        horizon_forecasts.append(project_forecast(avg, slope, days_ahead, expected, target, band))

    expected_daily = expected_by_date(upcoming)
    daily_forecasts = [
        project_forecast(avg, slope, i, expected_daily.get(day, 0.0), day, band)
        for i, day in enumerate(generate_date_range(as_of, as_of + timedelta(days=daily_days)))
    ]

    return ForecastSummary(
        forecast_date=as_of,
        avg_collection_rate=avg,
        trend_slope=slope,
        trend_direction=trend_direction(slope),
        horizons=horizon_forecasts,
        daily=daily_forecasts,
    )
