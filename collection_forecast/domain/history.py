"""Forecast history grouped by horizon, with week-over-week comparison"""

from typing import List, Optional, Sequence
from collection_forecast.domain.models import SavedForecast, HorizonHistory, WeekOverWeek


def week_over_week(points: List[SavedForecast]) -> Optional[WeekOverWeek]:
    """
    Compare the latest forecast with one made roughly a week earlier.

    The earlier point is the first (oldest) one whose forecast date is 6-8
    days before the latest. Returns None when no such point exists.
    """
    if len(points) < 2:
        return None

    latest = points[-1]
    previous = next(
        (p for p in points if 6 <= (latest.forecast_date - p.forecast_date).days <= 8),
        None,
    )
    if previous is None:
        return None

    forecast_change = latest.forecast_amount - previous.forecast_amount
    forecast_change_percent = (
        forecast_change / previous.forecast_amount * 100 if previous.forecast_amount > 0 else 0.0
    )

    return WeekOverWeek(
        days_ahead=latest.days_ahead,
        latest=latest,
        one_week_ago=previous,
        forecast_change=forecast_change,
        forecast_change_percent=forecast_change_percent,
        rate_change=latest.collection_rate - previous.collection_rate,
    )


def group_by_horizon(
    forecasts: Sequence[SavedForecast],
    horizons: Sequence[int] = (7, 14, 30),
) -> List[HorizonHistory]:
    """Split saved forecasts per horizon; other horizons are ignored"""
    ordered = sorted(forecasts, key=lambda f: f.forecast_date)
    history = []
    for days_ahead in horizons:
        points = [f for f in ordered if f.days_ahead == days_ahead]
        history.append(
            HorizonHistory(
                days_ahead=days_ahead,
                points=points,
                week_over_week=week_over_week(points),
            )
        )
    return history
