"""Prometheus metrics for forecast generation, accuracy and LLM gateway calls"""

from prometheus_client import Counter, Histogram, Gauge

# Forecast metrics
forecast_counter = Counter(
    "collection_forecasts_total",
    "Horizon forecasts computed",
    ["horizon"],  # days ahead: 7 | 14 | 30
)

forecast_saved_counter = Counter(
    "collection_forecasts_saved_total",
    "Horizon forecasts persisted for accuracy tracking",
)

collection_rate_gauge = Gauge(
    "collection_rate_average_percent",
    "Average daily collection rate over the latest history window",
)

forecast_accuracy_histogram = Histogram(
    "collection_forecast_accuracy_percent",
    "Accuracy of scored forecasts against realized collections",
    buckets=[50, 60, 70, 80, 90, 95, 100],
)

# LLM gateway metrics
llm_latency_histogram = Histogram(
    "llm_gateway_latency_seconds",
    "LLM gateway response time",
    buckets=[0.5, 1.0, 2.5, 5.0, 10.0, 20.0, 30.0],
)

llm_failure_counter = Counter(
    "llm_gateway_failures_total",
    "Failed LLM gateway calls",
    ["reason"],  # rate_limited | payment_required | http_error | network
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_forecast(horizons, avg_collection_rate: float) -> None:
    """Record one refresh: per-horizon counts and the current average rate"""
    for days_ahead in horizons:
        forecast_counter.labels(horizon=str(days_ahead)).inc()
    collection_rate_gauge.set(avg_collection_rate)


def record_accuracy(accuracies) -> None:
    """Observe accuracy of each scored forecast"""
    for accuracy in accuracies:
        forecast_accuracy_histogram.observe(accuracy)
