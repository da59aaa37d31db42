"""Unit tests for the LLM gateway client"""

import asyncio
import json
import httpx
import pytest
from collection_forecast.infrastructure.clients.llm import LLMClient
from collection_forecast.domain.exceptions import (
    LLMGatewayError,
    RateLimitError,
    PaymentRequiredError,
    InvalidForecastResponseError,
)

TOOL_ARGS = json.dumps({"overallForecast": {}, "agentForecasts": [], "serviceCenterForecasts": [], "insights": []})


def _tool_response() -> dict:
    return {
        "choices": [
            {"message": {"tool_calls": [{"function": {"name": "extract_forecast", "arguments": TOOL_ARGS}}]}}
        ]
    }


def _client(handler) -> LLMClient:
    client = LLMClient(
        gateway_url="http://llm.test/v1/chat/completions",
        api_key="test-key",
        model="test-model",
        transport=httpx.MockTransport(handler),
    )
    client.backoff_base = 0
    return client


def _run(client: LLMClient) -> str:
    return asyncio.run(client.generate_pipeline_forecast("system", "user"))


def test_returns_tool_call_arguments():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["auth"] = request.headers["Authorization"]
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json=_tool_response())

    assert _run(_client(handler)) == TOOL_ARGS
    assert seen["auth"] == "Bearer test-key"
    assert seen["body"]["model"] == "test-model"
    assert seen["body"]["tool_choice"]["function"]["name"] == "extract_forecast"
    assert [m["role"] for m in seen["body"]["messages"]] == ["system", "user"]


def test_missing_api_key():
    client = LLMClient(api_key="", transport=httpx.MockTransport(lambda r: httpx.Response(200)))

    with pytest.raises(LLMGatewayError, match="not configured"):
        _run(client)


def test_rate_limit_is_not_retried():
    calls = []

    def handler(request):
        calls.append(request)
        return httpx.Response(429)

    with pytest.raises(RateLimitError):
        _run(_client(handler))
    assert len(calls) == 1


def test_payment_required():
    with pytest.raises(PaymentRequiredError):
        _run(_client(lambda r: httpx.Response(402)))


def test_server_errors_retried_then_succeed():
    responses = [httpx.Response(503), httpx.Response(502), httpx.Response(200, json=_tool_response())]

    assert _run(_client(lambda r: responses.pop(0))) == TOOL_ARGS
    assert responses == []


def test_server_errors_exhaust_retries():
    calls = []

    def handler(request):
        calls.append(request)
        return httpx.Response(500)

    client = _client(handler)
    with pytest.raises(LLMGatewayError):
        _run(client)
    assert len(calls) == client.max_retries


def test_client_error_fails_fast():
    with pytest.raises(LLMGatewayError, match="400"):
        _run(_client(lambda r: httpx.Response(400)))


def test_network_error_wrapped():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(LLMGatewayError, match="unreachable"):
        _run(_client(handler))


def test_response_without_tool_call():
    response = {"choices": [{"message": {"content": "no tools today"}}]}

    with pytest.raises(InvalidForecastResponseError):
        _run(_client(lambda r: httpx.Response(200, json=response)))
