"""Unit tests for pipeline statistics, prompts and LLM response parsing"""

import json
import pytest
from collection_forecast.domain.models import TenantRecord, EarningRecord
from collection_forecast.domain.pipeline import (
    build_pipeline_snapshot,
    build_prompts,
    parse_pipeline_forecast,
    forecast_tool_schema,
)
from collection_forecast.domain.exceptions import InvalidForecastResponseError


def _valid_payload() -> dict:
    return {
        "overallForecast": {
            "expectedConversionRate": 42.5,
            "projectedConversions": 17,
            "confidence": "medium",
            "reasoning": "Steady conversions in Kampala",
        },
        "agentForecasts": [
            {"agentName": "Sarah", "expectedConversions": 6, "confidence": "high", "reasoning": "Top converter"}
        ],
        "serviceCenterForecasts": [
            {"centerName": "Kampala", "trend": "improving", "confidence": "high", "reasoning": "Growing"}
        ],
        "insights": [
            {"title": "Follow up", "description": "Call stale leads", "priority": "high", "actionable": True}
        ],
    }


def test_snapshot_counts_and_rates():
    pipeline = [
        TenantRecord("Sarah", "Kampala", "pipeline"),
        TenantRecord("Sarah", "Kampala", "pipeline"),
        TenantRecord("John", None, "pipeline"),
        TenantRecord("Sarah", "Entebbe", "pipeline"),
    ]
    converted = [
        TenantRecord("Sarah", "Kampala", "active"),
        TenantRecord("Ghost", "Jinja", "active"),  # no pipeline: ignored per agent/center
    ]
    earnings = [EarningRecord("Sarah", 5000), EarningRecord("Ghost", 1000)]

    snapshot = build_pipeline_snapshot(pipeline, converted, earnings)

    assert snapshot.total_pipeline == 4
    assert snapshot.total_converted == 2
    assert snapshot.conversion_rate == pytest.approx(50)
    assert snapshot.agent_count == 2
    assert snapshot.service_center_count == 3

    sarah = snapshot.top_agents[0]
    assert sarah.name == "Sarah"
    assert sarah.pipeline == 3
    assert sarah.converted == 1
    assert sarah.earnings == 5000
    assert sarah.conversion_rate == pytest.approx(100 / 3)

    centers = {c.name: c for c in snapshot.top_centers}
    assert centers["Unassigned"].pipeline == 1
    assert centers["Kampala"].converted == 1
    assert "Jinja" not in centers


def test_snapshot_empty_pipeline():
    snapshot = build_pipeline_snapshot([], [TenantRecord("A", None, "active")], [])

    assert snapshot.conversion_rate == 0
    assert snapshot.top_agents == []


def test_snapshot_keeps_top_five():
    pipeline = [
        TenantRecord(f"agent-{i}", "Kampala", "pipeline")
        for i in range(7)
        for _ in range(i + 1)
    ]

    snapshot = build_pipeline_snapshot(pipeline, [], [])

    assert [a.name for a in snapshot.top_agents] == ["agent-6", "agent-5", "agent-4", "agent-3", "agent-2"]


def test_prompts_include_statistics():
    snapshot = build_pipeline_snapshot(
        [TenantRecord("Sarah", "Kampala", "pipeline"), TenantRecord("Sarah", "Kampala", "pipeline")],
        [TenantRecord("Sarah", "Kampala", "active")],
        [EarningRecord("Sarah", 1500)],
    )

    system_prompt, user_prompt = build_prompts(snapshot)

    assert "extract_forecast" in system_prompt
    assert "Current Pipeline: 2 tenants" in user_prompt
    assert "Historical Conversion Rate: 50.00%" in user_prompt
    assert "- Sarah: 2 pipeline, 1 converted (50.0%), UGX 1500 earned" in user_prompt
    assert "- Kampala: 2 pipeline, 1 converted (50.0%)" in user_prompt


def test_tool_schema_requires_all_sections():
    params = forecast_tool_schema()["function"]["parameters"]
    assert set(params["required"]) == {"overallForecast", "agentForecasts", "serviceCenterForecasts", "insights"}


def test_parse_valid_payload_from_json_string():
    forecast = parse_pipeline_forecast(json.dumps(_valid_payload()))

    assert forecast.overall.expected_conversion_rate == 42.5
    assert forecast.overall.confidence == "medium"
    assert forecast.agents[0].agent_name == "Sarah"
    assert forecast.service_centers[0].trend == "improving"
    assert forecast.insights[0].actionable is True


def test_parse_rejects_missing_section():
    payload = _valid_payload()
    del payload["insights"]

    with pytest.raises(InvalidForecastResponseError):
        parse_pipeline_forecast(payload)


def test_parse_rejects_unknown_confidence():
    payload = _valid_payload()
    payload["overallForecast"]["confidence"] = "certain"

    with pytest.raises(InvalidForecastResponseError):
        parse_pipeline_forecast(payload)


def test_parse_rejects_malformed_json():
    with pytest.raises(InvalidForecastResponseError):
        parse_pipeline_forecast("{not json")
