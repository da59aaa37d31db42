"""Retrospective accuracy scoring of saved forecasts against realized collections"""

from datetime import date
from typing import Dict, List, Sequence
from collection_forecast.domain.models import SavedForecast, AccuracyScore, AccuracySummary
from collection_forecast.domain.aggregation import to_amount


def score_forecast(forecast_amount: float, actual: float) -> Dict[str, float]:
    """
    Compare one forecast with the realized total.

    error = |actual - forecast|
    percent_error = error / forecast * 100 (0 when forecast is 0)
    accuracy = max(0, 100 - percent_error)
    """
    predicted = to_amount(forecast_amount)
    realized = to_amount(actual)
    error = abs(realized - predicted)
    percent_error = error / predicted * 100 if predicted > 0 else 0.0
    return {
        "error": error,
        "percent_error": percent_error,
        "accuracy": max(0.0, 100.0 - percent_error),
    }


def _share_within(scores: List[AccuracyScore], threshold: float) -> float:
    hits = sum(1 for s in scores if s.percent_error <= threshold)
    return hits / len(scores) * 100


def summarize_accuracy(
    forecasts: Sequence[SavedForecast],
    actual_by_date: Dict[date, float],
) -> AccuracySummary:
    """
    Score every saved forecast and aggregate the results.

    Reporting only: nothing here feeds back into future forecasts.
    """
    comparisons = []
    for f in forecasts:
        actual = actual_by_date.get(f.target_date, 0.0)
        score = score_forecast(f.forecast_amount, actual)
        comparisons.append(
            AccuracyScore(
                target_date=f.target_date,
                days_ahead=f.days_ahead,
                predicted=to_amount(f.forecast_amount),
                actual=to_amount(actual),
                **score,
            )
        )

    if not comparisons:
        return AccuracySummary(
            total_forecasts=0,
            overall_accuracy=0.0,
            mean_absolute_error=0.0,
            mean_percent_error=0.0,
            within_5=0.0,
            within_10=0.0,
            within_20=0.0,
        )

    count = len(comparisons)
    mean_percent_error = sum(c.percent_error for c in comparisons) / count

    return AccuracySummary(
        total_forecasts=count,
        overall_accuracy=max(0.0, 100.0 - mean_percent_error),
        mean_absolute_error=sum(c.error for c in comparisons) / count,
        mean_percent_error=mean_percent_error,
        within_5=_share_within(comparisons, 5),
        within_10=_share_within(comparisons, 10),
        within_20=_share_within(comparisons, 20),
        comparisons=comparisons,
    )
