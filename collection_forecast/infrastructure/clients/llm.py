"""LLM gateway client for structured pipeline forecasts, with retry on transient failures"""

import asyncio
import httpx
from typing import Any, Dict, Optional
from collection_forecast.config import settings
from collection_forecast.domain.exceptions import (
    LLMGatewayError,
    RateLimitError,
    PaymentRequiredError,
    InvalidForecastResponseError,
)
from collection_forecast.domain.pipeline import forecast_tool_schema
from collection_forecast.infrastructure.observability.metrics import llm_latency_histogram, llm_failure_counter


class LLMClient:
    """Client for an OpenAI-compatible chat completions gateway"""

    def __init__(
        self,
        gateway_url: str | None = None,
        api_key: str | None = None,
        model: str | None = None,
        timeout: float | None = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.gateway_url = gateway_url or settings.llm_gateway_url
        self.api_key = api_key if api_key is not None else settings.llm_api_key
        self.model = model or settings.llm_model
        self.timeout = timeout or settings.http_timeout_seconds
        self.max_retries = settings.llm_max_retries
        self.backoff_base = settings.llm_backoff_base
        self.transport = transport

    def _request_body(self, system_prompt: str, user_prompt: str) -> Dict[str, Any]:
        return {
            "model": self.model,
            "messages": [
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_prompt},
            ],
            "tools": [forecast_tool_schema()],
            "tool_choice": {"type": "function", "function": {"name": "extract_forecast"}},
        }

    async def generate_pipeline_forecast(self, system_prompt: str, user_prompt: str) -> str:
        """
        Ask the model for an extract_forecast tool call and return its arguments.

        Retry strategy:
        - Exponential backoff (base * 2^attempt) on 5xx and network failures
        - 429 and 402 are not retried

        Raises:
            LLMGatewayError: Missing API key, or gateway still failing after retries
            RateLimitError: Gateway returned 429
            PaymentRequiredError: Gateway returned 402
            InvalidForecastResponseError: Response has no tool call
        """
        if not self.api_key:
            raise LLMGatewayError("LLM API key is not configured")

        headers = {"Authorization": f"Bearer {self.api_key}"}
        body = self._request_body(system_prompt, user_prompt)

        attempt = 0
        async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
            while True:
                try:
                    with llm_latency_histogram.time():
                        response = await client.post(self.gateway_url, json=body, headers=headers)

                    if response.status_code == 429:
                        llm_failure_counter.labels(reason="rate_limited").inc()
                        raise RateLimitError("Rate limit exceeded. Please try again later.")
                    if response.status_code == 402:
                        llm_failure_counter.labels(reason="payment_required").inc()
                        raise PaymentRequiredError("Payment required. Please add credits to the LLM workspace.")

                    response.raise_for_status()
                    break

                except httpx.HTTPStatusError as e:
                    llm_failure_counter.labels(reason="http_error").inc()
                    if e.response.status_code < 500:
                        raise LLMGatewayError(f"LLM gateway error: {e.response.status_code}") from e
                    attempt += 1
                    if attempt >= self.max_retries:
                        raise LLMGatewayError(f"LLM gateway error: {e.response.status_code}") from e

                except httpx.RequestError as e:
                    llm_failure_counter.labels(reason="network").inc()
                    attempt += 1
                    if attempt >= self.max_retries:
                        raise LLMGatewayError(f"LLM gateway unreachable: {e}") from e

                # Exponential backoff: 1s, 2s, 4s, ...
                await asyncio.sleep(self.backoff_base * (2 ** (attempt - 1)))

        try:
            data = response.json()
            tool_call = data["choices"][0]["message"]["tool_calls"][0]
            return tool_call["function"]["arguments"]
        except (KeyError, IndexError, TypeError, ValueError) as e:
            raise InvalidForecastResponseError("No tool call in LLM response") from e
