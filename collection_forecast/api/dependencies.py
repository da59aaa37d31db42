"""Dependency injection for FastAPI endpoints"""

from fastapi import Depends, Request
from sqlalchemy.orm import Session
from collection_forecast.infrastructure.clients.llm import LLMClient
from collection_forecast.infrastructure.database.session import get_db
from collection_forecast.infrastructure.database.repositories import PaymentRepository
from collection_forecast.services.forecasting import ForecastService


def get_request_id(request: Request) -> str:
    """Extract request ID from request state"""
    return getattr(request.state, "request_id", "unknown")


def get_llm_client() -> LLMClient:
    """Provide LLM gateway client instance"""
    return LLMClient()


def get_forecast_service(db: Session = Depends(get_db)) -> ForecastService:
    """Forecast service reading payments from the request's session"""
    return ForecastService(PaymentRepository(db))
