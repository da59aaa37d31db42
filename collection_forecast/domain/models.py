"""Domain models - pure Python dataclasses representing business entities"""

from dataclasses import dataclass, field
from datetime import date
from typing import List, Optional


@dataclass(frozen=True)
class PaymentRecord:
    """Scheduled rent installment, paid or still pending"""

    date: date
    expected_amount: float
    paid_amount: Optional[float]
    was_paid: bool


@dataclass
class DailyAggregate:
    """Expected vs paid totals for one calendar day"""

    date: date
    expected_total: float = 0.0
    paid_total: float = 0.0
    record_count: int = 0


@dataclass
class Forecast:
    """Projected collections for a target date"""

    target_date: date
    days_ahead: int
    expected_amount: float
    forecast_amount: float
    lower_bound: float
    upper_bound: float
    collection_rate_used: float


@dataclass
class ForecastSummary:
    """Output of one forecast refresh"""

    forecast_date: date
    avg_collection_rate: float
    trend_slope: float
    trend_direction: str  # "improving" or "declining"
    horizons: List[Forecast]
    daily: List[Forecast]


@dataclass
class SavedForecast:
    """
    Persisted horizon forecast as read back for reporting.

    collection_rate is the average daily rate of the history window the
    forecast was built from, so it is comparable across horizons and dates.
    """

    forecast_date: date
    target_date: date
    days_ahead: int
    expected_amount: float
    forecast_amount: float
    collection_rate: float


@dataclass
class AccuracyScore:
    """Actual-vs-forecast comparison for one saved forecast"""

    target_date: date
    days_ahead: int
    predicted: float
    actual: float
    error: float
    percent_error: float
    accuracy: float


@dataclass
class AccuracySummary:
    """Aggregate accuracy over a set of saved forecasts"""

    total_forecasts: int
    overall_accuracy: float
    mean_absolute_error: float
    mean_percent_error: float
    within_5: float
    within_10: float
    within_20: float
    comparisons: List[AccuracyScore] = field(default_factory=list)


@dataclass
class WeekOverWeek:
    """Latest horizon forecast compared with the one made a week earlier"""

    days_ahead: int
    latest: SavedForecast
    one_week_ago: SavedForecast
    forecast_change: float
    forecast_change_percent: float
    rate_change: float


@dataclass
class HorizonHistory:
    """All saved forecasts for one horizon, oldest first"""

    days_ahead: int
    points: List[SavedForecast]
    week_over_week: Optional[WeekOverWeek]


@dataclass(frozen=True)
class TenantRecord:
    """Tenant row as needed for pipeline statistics"""

    agent_name: str
    service_center: Optional[str]
    status: str


@dataclass(frozen=True)
class EarningRecord:
    """Agent earning row (pipeline bonuses)"""

    agent_name: str
    amount: float


@dataclass
class AgentStats:
    """Pipeline activity for one agent"""

    name: str
    pipeline: int = 0
    converted: int = 0
    earnings: float = 0.0

    @property
    def conversion_rate(self) -> float:
        return self.converted / self.pipeline * 100 if self.pipeline > 0 else 0.0


@dataclass
class CenterStats:
    """Pipeline activity for one service center"""

    name: str
    pipeline: int = 0
    converted: int = 0

    @property
    def conversion_rate(self) -> float:
        return self.converted / self.pipeline * 100 if self.pipeline > 0 else 0.0


@dataclass
class PipelineSnapshot:
    """Summary of pipeline data sent to the LLM"""

    total_pipeline: int
    total_converted: int
    conversion_rate: float
    agent_count: int
    service_center_count: int
    top_agents: List[AgentStats]
    top_centers: List[CenterStats]


@dataclass
class OverallPipelineForecast:
    expected_conversion_rate: float
    projected_conversions: float
    confidence: str
    reasoning: str


@dataclass
class AgentPipelineForecast:
    agent_name: str
    expected_conversions: float
    confidence: str
    reasoning: str


@dataclass
class CenterPipelineForecast:
    center_name: str
    trend: str  # improving | stable | declining
    confidence: str
    reasoning: str


@dataclass
class PipelineInsight:
    title: str
    description: str
    priority: str
    actionable: bool


@dataclass
class PipelineForecast:
    """Structured LLM forecast for the next 30 days of pipeline conversions"""

    overall: OverallPipelineForecast
    agents: List[AgentPipelineForecast]
    service_centers: List[CenterPipelineForecast]
    insights: List[PipelineInsight]
