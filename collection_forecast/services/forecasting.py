"""Forecast orchestration: fetch on demand, compute, and persist only when asked"""

import logging
from dataclasses import dataclass
from datetime import date, datetime, timedelta, timezone
from typing import Any, Dict, List, Optional, Protocol, Sequence
from collection_forecast.config import settings
from collection_forecast.domain.models import (
    PaymentRecord,
    ForecastSummary,
    AccuracySummary,
    HorizonHistory,
    PipelineSnapshot,
    PipelineForecast,
)
from collection_forecast.domain.projection import build_forecast_summary
from collection_forecast.domain.accuracy import summarize_accuracy
from collection_forecast.domain.aggregation import paid_total_by_date
from collection_forecast.domain.history import group_by_horizon
from collection_forecast.domain.pipeline import build_pipeline_snapshot, build_prompts, parse_pipeline_forecast
from collection_forecast.infrastructure.database.repositories import (
    ForecastRepository,
    TenantRepository,
    EarningsRepository,
)
from collection_forecast.infrastructure.clients.llm import LLMClient
from collection_forecast.utils.date_utils import trailing_window

logger = logging.getLogger(__name__)


class PaymentSource(Protocol):
    """Anything that can hand over payment rows for a date range"""

    def get_payments_between(self, start: date, end: date) -> List[PaymentRecord]:
        ...

    def get_payments_on(self, dates: Sequence[date]) -> List[PaymentRecord]:
        ...


class ForecastService:
    """
    Collection forecasting over a payment source.

    Every call re-reads the source and recomputes from scratch; nothing is
    cached between calls.
    """

    def __init__(
        self,
        payments: PaymentSource,
        history_window_days: int | None = None,
        horizons: Sequence[int] | None = None,
        daily_days: int | None = None,
        band: float | None = None,
    ):
        self.payments = payments
        self.history_window_days = settings.history_window_days if history_window_days is None else history_window_days
        self.horizons = tuple(settings.forecast_horizons if horizons is None else horizons)
        self.daily_days = settings.daily_forecast_days if daily_days is None else daily_days
        self.band = settings.confidence_band if band is None else band

    def refresh(self, as_of: Optional[date] = None) -> ForecastSummary:
        """Fetch the history window and upcoming schedule, then forecast"""
        as_of = as_of or date.today()
        start, end = trailing_window(as_of, self.history_window_days)
        history = self.payments.get_payments_between(start, end)

        longest = max(max(self.horizons, default=0), self.daily_days)
        upcoming = self.payments.get_payments_between(as_of, as_of + timedelta(days=longest))

        logger.debug(
            "Forecast inputs loaded",
            extra={"history_records": len(history), "upcoming_records": len(upcoming)},
        )

        return build_forecast_summary(
            history,
            upcoming,
            as_of,
            horizons=self.horizons,
            daily_days=self.daily_days,
            band=self.band,
        )

    def save_forecast(self, summary: ForecastSummary, repository: ForecastRepository) -> int:
        """Persist the horizon forecasts of a summary; returns rows written"""
        rows = repository.save_forecasts(
            forecast_date=summary.forecast_date,
            forecasts=summary.horizons,
            avg_collection_rate=summary.avg_collection_rate,
            trend_slope=summary.trend_slope,
        )
        return len(rows)

    def accuracy(
        self,
        repository: ForecastRepository,
        as_of: Optional[date] = None,
        window_days: int | None = None,
    ) -> AccuracySummary:
        """Score saved forecasts whose target date has passed within the window"""
        as_of = as_of or date.today()
        window_days = settings.accuracy_window_days if window_days is None else window_days
        start, end = trailing_window(as_of, window_days)
        forecasts = repository.get_forecasts_targeting(start, end)
        actuals = paid_total_by_date(self.payments.get_payments_on([f.target_date for f in forecasts]))
        return summarize_accuracy(forecasts, actuals)

    def history(self, repository: ForecastRepository) -> List[HorizonHistory]:
        """Saved forecasts grouped per horizon with week-over-week deltas"""
        return group_by_horizon(repository.get_all_forecasts(), self.horizons)


@dataclass
class PipelineForecastResult:
    forecast: PipelineForecast
    snapshot: PipelineSnapshot
    generated_at: datetime


class PipelineForecastService:
    """LLM-backed 30-day pipeline conversion forecast"""

    def __init__(
        self,
        tenants: TenantRepository,
        earnings: EarningsRepository,
        llm_client: LLMClient,
    ):
        self.tenants = tenants
        self.earnings = earnings
        self.llm_client = llm_client

    async def generate(self, filters: Dict[str, Any]) -> PipelineForecastResult:
        pipeline = self.tenants.get_pipeline_tenants(**filters)
        converted = self.tenants.get_converted_tenants(**filters)
        bonuses = self.earnings.get_pipeline_bonuses(
            date_from=filters.get("date_from"),
            date_to=filters.get("date_to"),
            agent_name=filters.get("agent_name"),
        )

        snapshot = build_pipeline_snapshot(pipeline, converted, bonuses)
        system_prompt, user_prompt = build_prompts(snapshot)

        logger.info(
            "Requesting pipeline forecast",
            extra={"total_pipeline": snapshot.total_pipeline, "total_converted": snapshot.total_converted},
        )
        arguments = await self.llm_client.generate_pipeline_forecast(system_prompt, user_prompt)

        return PipelineForecastResult(
            forecast=parse_pipeline_forecast(arguments),
            snapshot=snapshot,
            generated_at=datetime.now(timezone.utc),
        )
