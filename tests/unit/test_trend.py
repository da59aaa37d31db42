"""Unit tests for least-squares trend estimation"""

import pytest
from collection_forecast.domain.trend import calculate_trend, trend_direction


def test_constant_series_has_no_trend():
    assert calculate_trend([75.0, 75.0, 75.0, 75.0, 75.0]) == 0


def test_arithmetic_series_slope():
    """Rates rising 10 points per day give slope 10"""
    assert calculate_trend([10, 20, 30, 40]) == pytest.approx(10)


def test_declining_series_slope():
    assert calculate_trend([90, 80, 70]) == pytest.approx(-10)


@pytest.mark.parametrize("rates", [[], [55.0]])
def test_fewer_than_two_points_returns_zero(rates):
    assert calculate_trend(rates) == 0


def test_noisy_series_matches_ols():
    """[80, 82, 85, 86, 90]: Σx=10, Σy=423, Σxy=870, Σx²=30 -> 120/50"""
    assert calculate_trend([80, 82, 85, 86, 90]) == pytest.approx(2.4)


def test_trend_direction_labels():
    assert trend_direction(0.0) == "improving"
    assert trend_direction(1.5) == "improving"
    assert trend_direction(-0.1) == "declining"
