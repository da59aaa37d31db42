"""POST /v1/pipeline/forecast - LLM-backed pipeline conversion forecast"""

import logging
from dataclasses import asdict
from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.orm import Session

from collection_forecast.api.v1.schemas import (
    PipelineForecastRequest,
    PipelineForecastResponse,
    PipelineForecastSchema,
    PipelineSnapshotSchema,
    AgentSnapshot,
    CenterSnapshot,
)
from collection_forecast.api.dependencies import get_llm_client, get_request_id
from collection_forecast.domain.exceptions import (
    LLMGatewayError,
    RateLimitError,
    PaymentRequiredError,
    InvalidForecastResponseError,
)
from collection_forecast.domain.models import PipelineSnapshot
from collection_forecast.infrastructure.clients.llm import LLMClient
from collection_forecast.infrastructure.database.session import get_db
from collection_forecast.infrastructure.database.repositories import TenantRepository, EarningsRepository
from collection_forecast.services.forecasting import PipelineForecastService

router = APIRouter()


def _snapshot_schema(snapshot: PipelineSnapshot) -> PipelineSnapshotSchema:
    return PipelineSnapshotSchema(
        total_pipeline=snapshot.total_pipeline,
        total_converted=snapshot.total_converted,
        conversion_rate=round(snapshot.conversion_rate, 2),
        agent_count=snapshot.agent_count,
        service_center_count=snapshot.service_center_count,
        top_agents=[
            AgentSnapshot(
                name=a.name,
                pipeline=a.pipeline,
                converted=a.converted,
                conversion_rate=round(a.conversion_rate, 1),
                earnings=a.earnings,
            )
            for a in snapshot.top_agents
        ],
        top_centers=[
            CenterSnapshot(
                name=c.name,
                pipeline=c.pipeline,
                converted=c.converted,
                conversion_rate=round(c.conversion_rate, 1),
            )
            for c in snapshot.top_centers
        ],
    )


@router.post("/pipeline/forecast", response_model=PipelineForecastResponse)
async def create_pipeline_forecast(
    request_body: PipelineForecastRequest,
    request: Request,
    db: Session = Depends(get_db),
    llm_client: LLMClient = Depends(get_llm_client),
):
    """
    Forecast pipeline conversions for the next 30 days.

    Flow:
    1. Load pipeline tenants, converted tenants and pipeline bonuses
    2. Summarize per agent and service center
    3. Ask the LLM for a structured forecast via a forced tool call
    4. Return forecast plus the data snapshot it was based on
    """
    request_id = get_request_id(request)
    service = PipelineForecastService(TenantRepository(db), EarningsRepository(db), llm_client)

    try:
        result = await service.generate(request_body.model_dump())

    except RateLimitError as e:
        logging.warning(f"LLM rate limited: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=429, detail=str(e))

    except PaymentRequiredError as e:
        logging.warning(f"LLM payment required: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=402, detail=str(e))

    except LLMGatewayError as e:
        logging.error(f"LLM gateway error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=503, detail="Forecast service unavailable")

    except InvalidForecastResponseError as e:
        logging.error(f"Invalid LLM forecast: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=502, detail="Invalid forecast returned by model")

    except Exception as e:
        db.rollback()
        logging.error(f"Unexpected error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail="Failed to generate forecast")

    return PipelineForecastResponse(
        forecast=PipelineForecastSchema(**asdict(result.forecast)),
        generated_at=result.generated_at,
        data_snapshot=_snapshot_schema(result.snapshot),
    )
