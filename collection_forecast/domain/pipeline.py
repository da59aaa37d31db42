"""Pipeline conversion statistics, LLM prompts and response parsing"""

import json
from typing import Any, Dict, Iterable, List, Tuple
from collection_forecast.domain.models import (
    TenantRecord,
    EarningRecord,
    AgentStats,
    CenterStats,
    PipelineSnapshot,
    PipelineForecast,
    OverallPipelineForecast,
    AgentPipelineForecast,
    CenterPipelineForecast,
    PipelineInsight,
)
from collection_forecast.domain.exceptions import InvalidForecastResponseError

UNASSIGNED_CENTER = "Unassigned"
TOP_N = 5

CONFIDENCE_LEVELS = ["high", "medium", "low"]
CENTER_TRENDS = ["improving", "stable", "declining"]

SYSTEM_PROMPT = """You are an AI data analyst specializing in sales pipeline forecasting. Based on historical pipeline conversion data, you provide accurate predictions and actionable insights for business performance.

Analyze the provided data and generate forecasts using the extract_forecast tool with the following structure:

1. Overall Predictions:
   - Expected conversion rate for next 30 days (percentage)
   - Projected number of conversions
   - Confidence level (high/medium/low)

2. Agent Performance Forecasts:
   - For each top agent, predict their performance in next 30 days
   - Include expected conversions and confidence level

3. Service Center Forecasts:
   - For each service center, predict conversion trends
   - Identify which centers will perform best

4. Key Insights:
   - 3-5 actionable insights based on the data
   - Recommendations for improving conversion rates
   - Warning signs or areas of concern

Base your analysis on conversion rates, trends, and agent/center performance patterns."""


def build_pipeline_snapshot(
    pipeline: Iterable[TenantRecord],
    converted: Iterable[TenantRecord],
    earnings: Iterable[EarningRecord],
) -> PipelineSnapshot:
    """
    Summarize pipeline vs converted tenants per agent and service center.

    Converted tenants and earnings only count toward agents/centers that
    already have pipeline tenants.
    """
    pipeline = list(pipeline)
    converted = list(converted)

    agents: Dict[str, AgentStats] = {}
    centers: Dict[str, CenterStats] = {}

    for tenant in pipeline:
        agents.setdefault(tenant.agent_name, AgentStats(name=tenant.agent_name)).pipeline += 1
        center = tenant.service_center or UNASSIGNED_CENTER
        centers.setdefault(center, CenterStats(name=center)).pipeline += 1

    for tenant in converted:
        if tenant.agent_name in agents:
            agents[tenant.agent_name].converted += 1
        center = tenant.service_center or UNASSIGNED_CENTER
        if center in centers:
            centers[center].converted += 1

    for earning in earnings:
        if earning.agent_name in agents:
            agents[earning.agent_name].earnings += earning.amount

    total_pipeline = len(pipeline)
    total_converted = len(converted)

    return PipelineSnapshot(
        total_pipeline=total_pipeline,
        total_converted=total_converted,
        conversion_rate=total_converted / total_pipeline * 100 if total_pipeline > 0 else 0.0,
        agent_count=len(agents),
        service_center_count=len(centers),
        top_agents=sorted(agents.values(), key=lambda a: a.pipeline, reverse=True)[:TOP_N],
        top_centers=sorted(centers.values(), key=lambda c: c.pipeline, reverse=True)[:TOP_N],
    )


def build_prompts(snapshot: PipelineSnapshot) -> Tuple[str, str]:
    """Render (system_prompt, user_prompt) for the forecast request"""
    agent_lines = "\n".join(
        f"- {a.name}: {a.pipeline} pipeline, {a.converted} converted "
        f"({a.conversion_rate:.1f}%), UGX {a.earnings:g} earned"
        for a in snapshot.top_agents
    )
    center_lines = "\n".join(
        f"- {c.name}: {c.pipeline} pipeline, {c.converted} converted ({c.conversion_rate:.1f}%)"
        for c in snapshot.top_centers
    )

    user_prompt = f"""Analyze this pipeline data and generate forecasts:

**Overall Statistics:**
- Current Pipeline: {snapshot.total_pipeline} tenants
- Recently Converted: {snapshot.total_converted} tenants
- Historical Conversion Rate: {snapshot.conversion_rate:.2f}%
- Active Agents: {snapshot.agent_count}
- Service Centers: {snapshot.service_center_count}

**Top Performing Agents:**
{agent_lines}

**Top Service Centers:**
{center_lines}

Generate comprehensive forecasts for the next 30 days with actionable insights."""

    return SYSTEM_PROMPT, user_prompt


def forecast_tool_schema() -> Dict[str, Any]:
    """JSON schema of the extract_forecast tool the LLM is forced to call"""
    reasoned = {
        "confidence": {"type": "string", "enum": CONFIDENCE_LEVELS},
        "reasoning": {"type": "string"},
    }
    return {
        "type": "function",
        "function": {
            "name": "extract_forecast",
            "description": "Extract structured pipeline forecast data",
            "parameters": {
                "type": "object",
                "properties": {
                    "overallForecast": {
                        "type": "object",
                        "properties": {
                            "expectedConversionRate": {"type": "number", "description": "Predicted conversion rate percentage"},
                            "projectedConversions": {"type": "number", "description": "Expected number of conversions"},
                            **reasoned,
                        },
                        "required": ["expectedConversionRate", "projectedConversions", "confidence", "reasoning"],
                    },
                    "agentForecasts": {
                        "type": "array",
                        "items": {
                            "type": "object",
                            "properties": {
                                "agentName": {"type": "string"},
                                "expectedConversions": {"type": "number"},
                                **reasoned,
                            },
                            "required": ["agentName", "expectedConversions", "confidence", "reasoning"],
                        },
                    },
                    "serviceCenterForecasts": {
                        "type": "array",
                        "items": {
                            "type": "object",
                            "properties": {
                                "centerName": {"type": "string"},
                                "trend": {"type": "string", "enum": CENTER_TRENDS},
                                **reasoned,
                            },
                            "required": ["centerName", "trend", "confidence", "reasoning"],
                        },
                    },
                    "insights": {
                        "type": "array",
                        "items": {
                            "type": "object",
                            "properties": {
                                "title": {"type": "string"},
                                "description": {"type": "string"},
                                "priority": {"type": "string", "enum": CONFIDENCE_LEVELS},
                                "actionable": {"type": "boolean"},
                            },
                            "required": ["title", "description", "priority", "actionable"],
                        },
                    },
                },
                "required": ["overallForecast", "agentForecasts", "serviceCenterForecasts", "insights"],
                "additionalProperties": False,
            },
        },
    }


def _level(value: Any, allowed: List[str], field: str) -> str:
    if value not in allowed:
        raise InvalidForecastResponseError(f"Unexpected {field}: {value!r}")
    return value


def parse_pipeline_forecast(arguments: Any) -> PipelineForecast:
    """
    Validate tool-call arguments (JSON string or dict) into a PipelineForecast.

    Raises:
        InvalidForecastResponseError: On malformed JSON, missing keys or
            out-of-range enum values
    """
    try:
        payload = json.loads(arguments) if isinstance(arguments, str) else arguments
        overall = payload["overallForecast"]

        return PipelineForecast(
            overall=OverallPipelineForecast(
                expected_conversion_rate=float(overall["expectedConversionRate"]),
                projected_conversions=float(overall["projectedConversions"]),
                confidence=_level(overall["confidence"], CONFIDENCE_LEVELS, "confidence"),
                reasoning=str(overall["reasoning"]),
            ),
            agents=[
                AgentPipelineForecast(
                    agent_name=str(a["agentName"]),
                    expected_conversions=float(a["expectedConversions"]),
                    confidence=_level(a["confidence"], CONFIDENCE_LEVELS, "confidence"),
                    reasoning=str(a["reasoning"]),
                )
                for a in payload["agentForecasts"]
            ],
            service_centers=[
                CenterPipelineForecast(
                    center_name=str(c["centerName"]),
                    trend=_level(c["trend"], CENTER_TRENDS, "trend"),
                    confidence=_level(c["confidence"], CONFIDENCE_LEVELS, "confidence"),
                    reasoning=str(c["reasoning"]),
                )
                for c in payload["serviceCenterForecasts"]
            ],
            insights=[
                PipelineInsight(
                    title=str(i["title"]),
                    description=str(i["description"]),
                    priority=_level(i["priority"], CONFIDENCE_LEVELS, "priority"),
                    actionable=bool(i["actionable"]),
                )
                for i in payload["insights"]
            ],
        )
    except InvalidForecastResponseError:
        raise
    except (KeyError, ValueError, TypeError) as e:
        raise InvalidForecastResponseError(f"Invalid pipeline forecast payload: {e}") from e
