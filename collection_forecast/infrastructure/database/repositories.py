"""Data access layer for payments, saved forecasts and pipeline tenants"""

from datetime import date, datetime
from typing import Iterable, List, Optional
from sqlalchemy.orm import Session
from collection_forecast.infrastructure.database.models import (
    DailyPayment,
    PaymentForecast,
    Tenant,
    AgentEarning,
)
from collection_forecast.domain.models import (
    PaymentRecord,
    Forecast,
    SavedForecast,
    TenantRecord,
    EarningRecord,
)

PIPELINE_STATUS = "pipeline"
ACTIVE_STATUS = "active"
PIPELINE_BONUS = "pipeline_bonus"


def _to_payment_record(row: DailyPayment) -> PaymentRecord:
    return PaymentRecord(
        date=row.date,
        expected_amount=row.amount,
        paid_amount=row.paid_amount,
        was_paid=bool(row.paid),
    )


def _to_saved_forecast(row: PaymentForecast) -> SavedForecast:
    return SavedForecast(
        forecast_date=row.forecast_date,
        target_date=row.target_date,
        days_ahead=row.days_ahead,
        expected_amount=row.expected_amount,
        forecast_amount=row.forecast_amount,
        collection_rate=row.avg_collection_rate,
    )


class PaymentRepository:
    """Read access to scheduled installments"""

    def __init__(self, db: Session):
        self.db = db

    def get_payments_between(self, start: date, end: date) -> List[PaymentRecord]:
        """Payments dated start..end inclusive, oldest first"""
        rows = (
            self.db.query(DailyPayment)
            .filter(DailyPayment.date >= start, DailyPayment.date <= end)
            .order_by(DailyPayment.date)
            .all()
        )
        return [_to_payment_record(row) for row in rows]

    def get_payments_on(self, dates: Iterable[date]) -> List[PaymentRecord]:
        """Payments falling on any of the given dates"""
        dates = list(set(dates))
        if not dates:
            return []
        rows = self.db.query(DailyPayment).filter(DailyPayment.date.in_(dates)).all()
        return [_to_payment_record(row) for row in rows]


class ForecastRepository:
    """Insert-once, read-many storage for horizon forecasts"""

    def __init__(self, db: Session):
        self.db = db

    def save_forecasts(
        self,
        forecast_date: date,
        forecasts: List[Forecast],
        avg_collection_rate: float,
        trend_slope: float,
    ) -> List[PaymentForecast]:
        """Persist forecasts (flushed, caller commits)"""
        rows = [
            PaymentForecast(
                forecast_date=forecast_date,
                target_date=f.target_date,
                days_ahead=f.days_ahead,
                expected_amount=f.expected_amount,
                forecast_amount=f.forecast_amount,
                lower_bound=f.lower_bound,
                upper_bound=f.upper_bound,
                collection_rate=f.collection_rate_used,
                avg_collection_rate=avg_collection_rate,
                trend_slope=trend_slope,
            )
            for f in forecasts
        ]
        self.db.add_all(rows)
        self.db.flush()  # Get IDs without committing
        return rows

    def get_forecasts_targeting(self, start: date, end: date) -> List[SavedForecast]:
        """Forecasts whose target date lies in start..end, by target date"""
        rows = (
            self.db.query(PaymentForecast)
            .filter(PaymentForecast.target_date >= start, PaymentForecast.target_date <= end)
            .order_by(PaymentForecast.target_date)
            .all()
        )
        return [_to_saved_forecast(row) for row in rows]

    def get_all_forecasts(self) -> List[SavedForecast]:
        """Every saved forecast, oldest forecast date first"""
        rows = (
            self.db.query(PaymentForecast)
            .order_by(PaymentForecast.forecast_date.asc(), PaymentForecast.created_at.asc())
            .all()
        )
        return [_to_saved_forecast(row) for row in rows]


class TenantRepository:
    """Pipeline and converted tenant lookups with dashboard filters"""

    def __init__(self, db: Session):
        self.db = db

    def _filtered(
        self,
        status: str,
        date_from: Optional[datetime],
        date_to: Optional[datetime],
        service_center: Optional[str],
        agent_name: Optional[str],
    ):
        query = self.db.query(Tenant).filter(Tenant.status == status)
        if date_from:
            query = query.filter(Tenant.created_at >= date_from)
        if date_to:
            query = query.filter(Tenant.created_at <= date_to)
        if service_center and service_center != "all":
            query = query.filter(Tenant.service_center == service_center)
        if agent_name and agent_name != "all":
            query = query.filter(Tenant.agent_name == agent_name)
        return query

    def get_pipeline_tenants(
        self,
        date_from: Optional[datetime] = None,
        date_to: Optional[datetime] = None,
        service_center: Optional[str] = None,
        agent_name: Optional[str] = None,
    ) -> List[TenantRecord]:
        rows = (
            self._filtered(PIPELINE_STATUS, date_from, date_to, service_center, agent_name)
            .order_by(Tenant.created_at.desc())
            .all()
        )
        return [TenantRecord(r.agent_name, r.service_center, r.status) for r in rows]

    def get_converted_tenants(
        self,
        date_from: Optional[datetime] = None,
        date_to: Optional[datetime] = None,
        service_center: Optional[str] = None,
        agent_name: Optional[str] = None,
        limit: int = 200,
    ) -> List[TenantRecord]:
        """Most recently updated active tenants"""
        rows = (
            self._filtered(ACTIVE_STATUS, date_from, date_to, service_center, agent_name)
            .order_by(Tenant.updated_at.desc())
            .limit(limit)
            .all()
        )
        return [TenantRecord(r.agent_name, r.service_center, r.status) for r in rows]


class EarningsRepository:
    """Agent pipeline bonus lookups"""

    def __init__(self, db: Session):
        self.db = db

    def get_pipeline_bonuses(
        self,
        date_from: Optional[datetime] = None,
        date_to: Optional[datetime] = None,
        agent_name: Optional[str] = None,
        limit: int = 500,
    ) -> List[EarningRecord]:
        query = self.db.query(AgentEarning).filter(AgentEarning.earning_type == PIPELINE_BONUS)
        if date_from:
            query = query.filter(AgentEarning.created_at >= date_from)
        if date_to:
            query = query.filter(AgentEarning.created_at <= date_to)
        if agent_name and agent_name != "all":
            query = query.filter(AgentEarning.agent_name == agent_name)
        rows = query.order_by(AgentEarning.created_at.desc()).limit(limit).all()
        return [EarningRecord(agent_name=r.agent_name, amount=float(r.amount)) for r in rows]
