"""Structured JSON logging for production observability"""

import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict
from pythonjsonlogger import jsonlogger
from collection_forecast.config import settings


class CustomJsonFormatter(jsonlogger.JsonFormatter):
    """Custom JSON formatter with timestamp and service metadata"""

    def add_fields(self, log_record: Dict[str, Any], record: logging.LogRecord, message_dict: Dict[str, Any]) -> None:
        super().add_fields(log_record, record, message_dict)
        log_record["timestamp"] = datetime.now(timezone.utc).isoformat()
        log_record["level"] = record.levelname
        log_record["service"] = settings.service_name


def setup_logging(level: str = "INFO") -> None:
    """Configure structured JSON logging"""
    logger = logging.getLogger()
    logger.setLevel(level)

    # Remove existing handlers
    logger.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)
    formatter = CustomJsonFormatter(
        "%(timestamp)s %(level)s %(name)s %(message)s"
    )
    handler.setFormatter(formatter)
    logger.addHandler(handler)


def log_forecast(
    request_id: str,
    forecast_date: str,
    avg_collection_rate: float,
    trend_slope: float,
    history_days: int,
    saved: bool,
    duration_ms: float,
) -> None:
    """Log structured forecast outcome for analysis"""
    logging.info(
        "Forecast computed",
        extra={
            "request_id": request_id,
            "step": "forecast_complete",
            "forecast_date": forecast_date,
            "avg_collection_rate": round(avg_collection_rate, 2),
            "trend_slope": round(trend_slope, 4),
            "history_days": history_days,
            "saved": saved,
            "duration_ms": duration_ms,
        },
    )
