"""Daily aggregation of payment records into collection-rate inputs"""

import math
from datetime import date
from typing import Any, Dict, Iterable, List
from collection_forecast.domain.models import PaymentRecord, DailyAggregate


def to_amount(value: Any) -> float:
    """
    Coerce a stored amount to float.

    Missing, non-numeric, NaN and infinite values count as 0 so a bad row
    never poisons a whole day's totals.
    """
    if value is None or isinstance(value, bool):
        return 0.0
    try:
        amount = float(value)
    except (TypeError, ValueError):
        return 0.0
    return amount if math.isfinite(amount) else 0.0


def paid_contribution(record: PaymentRecord) -> float:
    """Amount a record contributes to paid totals (0 unless paid)"""
    if not record.was_paid:
        return 0.0
    # A paid installment without a recorded paid amount was paid in full
    if record.paid_amount is None:
        return to_amount(record.expected_amount)
    return to_amount(record.paid_amount)


def aggregate_daily(records: Iterable[PaymentRecord]) -> Dict[date, DailyAggregate]:
    """
    Group payment records by date into expected/paid totals.

    Every record adds to expected_total; only records with was_paid set add
    to paid_total. Empty input yields an empty mapping.
    """
    aggregates: Dict[date, DailyAggregate] = {}
    for record in records:
        day = aggregates.get(record.date)
        if day is None:
            day = aggregates[record.date] = DailyAggregate(date=record.date)
        day.expected_total += to_amount(record.expected_amount)
        day.paid_total += paid_contribution(record)
        day.record_count += 1
    return aggregates


def collection_rate(aggregate: DailyAggregate) -> float:
    """Paid share of expected for one day, as a percentage (0 if nothing expected)"""
    if aggregate.expected_total <= 0:
        return 0.0
    return aggregate.paid_total / aggregate.expected_total * 100


def collection_rate_series(aggregates: Dict[date, DailyAggregate]) -> List[float]:
    """Chronological daily collection rates"""
    return [collection_rate(aggregates[day]) for day in sorted(aggregates)]


def average_rate(rates: List[float]) -> float:
    """Mean of a rate series (0 when empty)"""
    return sum(rates) / len(rates) if rates else 0.0


def expected_by_date(records: Iterable[PaymentRecord]) -> Dict[date, float]:
    """Sum expected amounts per date"""
    totals: Dict[date, float] = {}
    for record in records:
        totals[record.date] = totals.get(record.date, 0.0) + to_amount(record.expected_amount)
    return totals


def expected_total_between(records: Iterable[PaymentRecord], start: date, end: date) -> float:
    """Sum expected amounts for records dated start..end inclusive"""
    return sum(
        to_amount(r.expected_amount) for r in records if start <= r.date <= end
    )


def paid_total_by_date(records: Iterable[PaymentRecord]) -> Dict[date, float]:
    """Realized collections per date"""
    totals: Dict[date, float] = {}
    for record in records:
        totals[record.date] = totals.get(record.date, 0.0) + paid_contribution(record)
    return totals
