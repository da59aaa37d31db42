"""Least-squares trend estimation over daily collection rates"""

from typing import Sequence


def calculate_trend(rates: Sequence[float]) -> float:
    """
    Ordinary least-squares slope of rates against their index.

    x = 0..n-1, y = rate:
        slope = (n·Σxy − Σx·Σy) / (n·Σx² − (Σx)²)

    Returns percentage points per day. Fewer than two points means no trend
    can be determined and yields 0.
    """
    n = len(rates)
    if n < 2:
        return 0.0

    sum_x = sum(range(n))
    sum_y = sum(rates)
    sum_xy = sum(i * y for i, y in enumerate(rates))
    sum_x2 = sum(i * i for i in range(n))

    denominator = n * sum_x2 - sum_x * sum_x
    if denominator == 0:
        return 0.0

    return (n * sum_xy - sum_x * sum_y) / denominator


def trend_direction(slope: float) -> str:
    """Label used by the dashboard badge"""
    return "improving" if slope >= 0 else "declining"
