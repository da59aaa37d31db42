"""FastAPI application factory"""

from fastapi import FastAPI
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
from starlette.responses import Response

from collection_forecast.api.middleware import RequestIDMiddleware, MetricsMiddleware
from collection_forecast.api.v1 import forecast, pipeline
from collection_forecast.infrastructure.observability.logging import setup_logging
from collection_forecast.config import settings

# Setup structured logging
setup_logging(settings.log_level)


def create_app() -> FastAPI:
    """Create and configure FastAPI application"""
    app = FastAPI(
        title="Collection Forecast Service",
        description="Rent collection forecasting, accuracy tracking and pipeline insights",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
    )

    # Add middleware (order matters: last added = first executed)
    app.add_middleware(MetricsMiddleware)
    app.add_middleware(RequestIDMiddleware)

    @app.get("/health")
    def health_check():
        return {"status": "ok", "service": settings.service_name}

    @app.get("/metrics")
    def metrics():
        return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

    app.include_router(forecast.router, prefix="/v1", tags=["forecasts"])
    app.include_router(pipeline.router, prefix="/v1", tags=["pipeline"])

    return app


app = create_app()
