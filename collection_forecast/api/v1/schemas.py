"""Pydantic schemas for API request/response validation"""

from pydantic import BaseModel, Field
from datetime import date, datetime
from typing import List, Optional


class ForecastSchema(BaseModel):
    """Projected collections for one target date"""

    target_date: date
    days_ahead: int
    expected_amount: float
    forecast_amount: float
    lower_bound: float
    upper_bound: float
    collection_rate_used: float


class ForecastSummaryResponse(BaseModel):
    """Response for GET /v1/forecast"""

    forecast_date: date
    avg_collection_rate: float
    trend_slope: float
    trend_direction: str
    horizons: List[ForecastSchema]
    daily: List[ForecastSchema]


class SaveForecastResponse(BaseModel):
    """Response for POST /v1/forecast/save"""

    forecast_date: date
    saved: int
    forecasts: List[ForecastSchema]


class AccuracyItem(BaseModel):
    target_date: date
    days_ahead: int
    predicted: float
    actual: float
    error: float
    percent_error: float
    accuracy: float


class AccuracyResponse(BaseModel):
    """Response for GET /v1/forecast/accuracy"""

    has_data: bool
    total_forecasts: int
    overall_accuracy: float
    mean_absolute_error: float
    mean_percent_error: float
    within_5_percent: float
    within_10_percent: float
    within_20_percent: float
    comparisons: List[AccuracyItem]


class HistoryPoint(BaseModel):
    forecast_date: date
    target_date: date
    days_ahead: int
    expected_amount: float
    forecast_amount: float
    collection_rate: float


class WeekOverWeekSchema(BaseModel):
    days_ahead: int
    latest: HistoryPoint
    one_week_ago: HistoryPoint
    forecast_change: float
    forecast_change_percent: float
    rate_change: float


class HorizonHistorySchema(BaseModel):
    days_ahead: int
    points: List[HistoryPoint]
    week_over_week: Optional[WeekOverWeekSchema] = None


class HistoryResponse(BaseModel):
    """Response for GET /v1/forecast/history"""

    has_data: bool
    total_forecasts: int
    horizons: List[HorizonHistorySchema]


class PipelineForecastRequest(BaseModel):
    """Request body for POST /v1/pipeline/forecast ("all" disables a filter)"""

    date_from: Optional[datetime] = None
    date_to: Optional[datetime] = None
    service_center: Optional[str] = Field(None, description="Service center name or 'all'")
    agent_name: Optional[str] = Field(None, description="Agent name or 'all'")


class OverallForecastSchema(BaseModel):
    expected_conversion_rate: float
    projected_conversions: float
    confidence: str
    reasoning: str


class AgentForecastSchema(BaseModel):
    agent_name: str
    expected_conversions: float
    confidence: str
    reasoning: str


class CenterForecastSchema(BaseModel):
    center_name: str
    trend: str
    confidence: str
    reasoning: str


class InsightSchema(BaseModel):
    title: str
    description: str
    priority: str
    actionable: bool


class PipelineForecastSchema(BaseModel):
    overall: OverallForecastSchema
    agents: List[AgentForecastSchema]
    service_centers: List[CenterForecastSchema]
    insights: List[InsightSchema]


class AgentSnapshot(BaseModel):
    name: str
    pipeline: int
    converted: int
    conversion_rate: float
    earnings: float


class CenterSnapshot(BaseModel):
    name: str
    pipeline: int
    converted: int
    conversion_rate: float


class PipelineSnapshotSchema(BaseModel):
    total_pipeline: int
    total_converted: int
    conversion_rate: float
    agent_count: int
    service_center_count: int
    top_agents: List[AgentSnapshot]
    top_centers: List[CenterSnapshot]


class PipelineForecastResponse(BaseModel):
    """Response for POST /v1/pipeline/forecast"""

    forecast: PipelineForecastSchema
    generated_at: datetime
    data_snapshot: PipelineSnapshotSchema
